"""Tests for purchase ingestion."""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import IntegrityError
from django.utils import timezone

from creditman.exceptions import CreditmanError
from creditman.models import CreditPointsTransaction, TransactionKind
from creditman.service import LedgerService
from creditman.signals import points_earned


pytestmark = pytest.mark.django_db


class TestRecordEarn:
    def test_points_floor_of_amount_times_rate(self, customer, restaurant):
        tx = LedgerService.record_earn(customer.pk, restaurant.pk, "R-1", Decimal("25.99"))

        assert tx.kind == TransactionKind.EARN
        assert tx.points == 25
        assert tx.monetary_value == Decimal("25.99")
        assert tx.receipt_id == "R-1"
        assert tx.is_expired is False
        assert LedgerService.get_balance(customer.pk, restaurant.pk) == 25

    def test_float_amount_converted_through_str(self, customer, restaurant):
        tx = LedgerService.record_earn(customer.pk, restaurant.pk, "R-2", 10.1)
        assert tx.monetary_value == Decimal("10.10")

    def test_amount_below_one_point(self, customer, restaurant):
        with pytest.raises(CreditmanError) as exc_info:
            LedgerService.record_earn(customer.pk, restaurant.pk, "R-3", Decimal("0.99"))

        assert exc_info.value.code == "MINIMUM_AMOUNT_NOT_REACHED"
        assert exc_info.value.http_status == 422
        assert not CreditPointsTransaction.objects.exists()

    def test_duplicate_receipt(self, customer, restaurant):
        first = LedgerService.record_earn(customer.pk, restaurant.pk, "R-DUP", Decimal("10"))

        with pytest.raises(CreditmanError) as exc_info:
            LedgerService.record_earn(customer.pk, restaurant.pk, "R-DUP", Decimal("50"))

        assert exc_info.value.code == "DUPLICATE_RECEIPT"
        assert exc_info.value.data["transaction_id"] == first.pk
        assert CreditPointsTransaction.objects.filter(kind=TransactionKind.EARN).count() == 1

    def test_duplicate_receipt_lost_race(self, customer, restaurant):
        existing = LedgerService.record_earn(customer.pk, restaurant.pk, "R-RACE", Decimal("10"))

        # The pre-check misses the row, the unique constraint catches it
        with patch(
            "creditman.services.ledger.find_by_receipt_id",
            side_effect=[None, existing],
        ):
            with pytest.raises(CreditmanError, match="DUPLICATE_RECEIPT"):
                LedgerService.record_earn(customer.pk, restaurant.pk, "R-RACE", Decimal("10"))

    def test_unrelated_integrity_error_propagates(self, customer, restaurant):
        with patch(
            "creditman.services.ledger.append",
            side_effect=IntegrityError("CHECK constraint failed"),
        ):
            with pytest.raises(IntegrityError):
                LedgerService.record_earn(customer.pk, restaurant.pk, "R-X", Decimal("10"))

    def test_backdated_purchase(self, customer, restaurant):
        when = timezone.now() - timedelta(days=3)
        tx = LedgerService.record_earn(
            customer.pk, restaurant.pk, "R-OLD", Decimal("10"), occurred_at=when
        )
        assert tx.occurred_at == when

    def test_future_purchase_rejected(self, customer, restaurant):
        with pytest.raises(CreditmanError, match="INVALID_ARGUMENT"):
            LedgerService.record_earn(
                customer.pk,
                restaurant.pk,
                "R-FUT",
                Decimal("10"),
                occurred_at=timezone.now() + timedelta(hours=1),
            )

    @pytest.mark.parametrize("amount", [0, -1, "abc", "NaN", "Infinity", None])
    def test_invalid_amount(self, customer, restaurant, amount):
        with pytest.raises(CreditmanError, match="INVALID_ARGUMENT"):
            LedgerService.record_earn(customer.pk, restaurant.pk, "R-BAD", amount)

    @pytest.mark.parametrize("receipt", ["", "   ", None, "x" * 65])
    def test_invalid_receipt(self, customer, restaurant, receipt):
        with pytest.raises(CreditmanError, match="INVALID_ARGUMENT"):
            LedgerService.record_earn(customer.pk, restaurant.pk, receipt, Decimal("10"))

    def test_unknown_customer(self, restaurant):
        with pytest.raises(CreditmanError, match="CUSTOMER_NOT_FOUND"):
            LedgerService.record_earn(4242, restaurant.pk, "R-5", Decimal("10"))

    def test_customer_of_other_restaurant(self, customer, other_restaurant):
        with pytest.raises(CreditmanError, match="CUSTOMER_NOT_FOUND"):
            LedgerService.record_earn(customer.pk, other_restaurant.pk, "R-6", Decimal("10"))

    def test_signal(self, customer, restaurant):
        received = []

        def handler(sender, transaction, **kwargs):
            received.append(transaction.receipt_id)

        points_earned.connect(handler)
        try:
            LedgerService.record_earn(customer.pk, restaurant.pk, "R-SIG", Decimal("10"))
        finally:
            points_earned.disconnect(handler)

        assert received == ["R-SIG"]


class TestLookups:
    def test_get_transaction_by_receipt(self, customer, restaurant):
        tx = LedgerService.record_earn(customer.pk, restaurant.pk, "R-LOOK", Decimal("10"))

        assert LedgerService.get_transaction(tx.pk) == tx
        assert LedgerService.get_transaction_by_receipt("R-LOOK") == tx
        assert LedgerService.get_transaction_by_receipt("R-NONE") is None

    def test_transactions_paged(self, customer, restaurant):
        for n in range(3):
            LedgerService.record_earn(customer.pk, restaurant.pk, f"R-P{n}", Decimal("10"))
        LedgerService.spend(customer.pk, restaurant.pk, 5)

        page = LedgerService.transactions(customer.pk, restaurant.pk, page=1, page_size=2)
        assert page.total_count == 4
        assert page.total_pages == 2
        assert page.transactions[0].kind == TransactionKind.SPEND

        earns = LedgerService.transactions(customer.pk, restaurant.pk, kind="earn")
        assert earns.total_count == 3
        assert earns.page_size == 10

    def test_transactions_rejects_bad_paging(self, customer, restaurant):
        with pytest.raises(CreditmanError, match="INVALID_ARGUMENT"):
            LedgerService.transactions(customer.pk, restaurant.pk, page=0)
        with pytest.raises(CreditmanError, match="INVALID_ARGUMENT"):
            LedgerService.transactions(customer.pk, restaurant.pk, page_size=51)
        with pytest.raises(CreditmanError, match="INVALID_ARGUMENT"):
            LedgerService.transactions(customer.pk, restaurant.pk, kind="refund")

    def test_viable_transactions(self, customer, restaurant, make_earn):
        make_earn(customer, restaurant, 10, days_ago=40)
        fresh = make_earn(customer, restaurant, 4)
        LedgerService.expire_points(restaurant.pk, customer.pk)

        page = LedgerService.viable_transactions(customer.pk, restaurant.pk)
        assert page.transactions == [fresh]
