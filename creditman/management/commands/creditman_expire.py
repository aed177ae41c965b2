"""Management command to expire stale credit points."""

from django.core.management.base import BaseCommand, CommandError

from creditman.exceptions import CreditmanError
from creditman.models import CreditPointsAccount, CreditPointsTransaction
from creditman.service import LedgerService


class Command(BaseCommand):
    help = "Expire credit points older than the restaurant points lifetime"

    def add_arguments(self, parser):
        parser.add_argument(
            "--restaurant",
            type=int,
            required=True,
            help="Restaurant id",
        )
        parser.add_argument(
            "--customer",
            type=int,
            default=None,
            help="Only this customer (default: every customer with ledger activity)",
        )

    def handle(self, *args, **options):
        restaurant_id = options["restaurant"]

        if options["customer"] is not None:
            customer_ids = [options["customer"]]
        else:
            customer_ids = sorted(
                set(
                    CreditPointsAccount.objects.filter(restaurant_id=restaurant_id)
                    .values_list("customer_id", flat=True)
                )
                | set(
                    CreditPointsTransaction.objects.filter(restaurant_id=restaurant_id)
                    .values_list("customer_id", flat=True)
                    .distinct()
                )
            )

        total = 0
        failures = 0
        for customer_id in customer_ids:
            try:
                total += LedgerService.expire_points(restaurant_id, customer_id)
            except CreditmanError as e:
                if e.code == "RESTAURANT_NOT_FOUND":
                    raise CommandError(e.message) from e
                failures += 1
                self.stderr.write(f"Customer {customer_id}: {e}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Created {total} expire transactions for {len(customer_ids)} customers."
            )
        )
        if failures:
            raise CommandError(f"{failures} customers failed to expire.")
