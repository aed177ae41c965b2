"""Credit points ledger models.

Data architecture:
    CreditPointsTransaction
        Append-only ledger entry. Earn entries credit points; spend and
        expire entries debit them and point back at the earn they draw down
        through source_earn. The outstanding balance of an earn is its points
        minus the magnitudes of its linked debits, always computed, never
        stored.

    CreditPointsAccount
        One row per (customer, restaurant) partition. Carries no balance:
        it exists so mutations of a partition can lock a single row with
        select_for_update().
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _


class TransactionKind(models.TextChoices):
    """Ledger entry kinds."""

    EARN = "earn", _("Earn")
    SPEND = "spend", _("Spend")
    EXPIRE = "expire", _("Expire")


class CreditPointsAccount(models.Model):
    """Lock anchor for a (customer, restaurant) partition."""

    customer_id = models.PositiveBigIntegerField(_("customer"))
    restaurant_id = models.PositiveBigIntegerField(_("restaurant"))
    opened_at = models.DateTimeField(_("opened at"), auto_now_add=True)

    class Meta:
        verbose_name = _("credit points account")
        verbose_name_plural = _("credit points accounts")
        constraints = [
            models.UniqueConstraint(
                fields=["customer_id", "restaurant_id"],
                name="creditman_account_partition_unique",
            ),
        ]

    def __str__(self):
        return f"customer {self.customer_id} @ restaurant {self.restaurant_id}"


class CreditPointsTransaction(models.Model):
    """
    Immutable ledger entry.

    Never updated except for the is_expired flag on earn entries, which only
    goes from False to True. Never deleted.
    """

    customer_id = models.PositiveBigIntegerField(_("customer"))
    restaurant_id = models.PositiveBigIntegerField(_("restaurant"))

    kind = models.CharField(
        _("kind"),
        max_length=10,
        choices=TransactionKind.choices,
    )
    points = models.IntegerField(
        _("points"),
        help_text=_("Positive for earn, negative for spend/expire"),
    )
    monetary_value = models.DecimalField(
        _("monetary value"),
        max_digits=14,
        decimal_places=2,
        help_text=_("Value at the restaurant rate in force when recorded"),
    )
    occurred_at = models.DateTimeField(_("occurred at"))
    is_expired = models.BooleanField(_("expired"), default=False)

    source_earn = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="drawdowns",
        verbose_name=_("source earn transaction"),
    )
    receipt_id = models.CharField(
        _("receipt"),
        max_length=64,
        null=True,
        blank=True,
        help_text=_("Purchase receipt reference (earn only)"),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        verbose_name = _("credit points transaction")
        verbose_name_plural = _("credit points transactions")
        ordering = ["-id"]
        indexes = [
            models.Index(
                fields=["customer_id", "restaurant_id", "kind", "occurred_at"],
                name="creditman_tx_partition_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["receipt_id"],
                condition=Q(kind="earn"),
                name="creditman_tx_earn_receipt_unique",
            ),
            models.CheckConstraint(
                condition=(
                    Q(kind="earn", points__gt=0, source_earn__isnull=True)
                    | Q(kind__in=["spend", "expire"], points__lt=0, source_earn__isnull=False)
                ),
                name="creditman_tx_kind_shape",
            ),
            models.CheckConstraint(
                condition=Q(is_expired=False) | Q(kind="earn"),
                name="creditman_tx_only_earn_expires",
            ),
        ]

    def __str__(self):
        sign = "+" if self.points > 0 else ""
        return f"#{self.pk} {self.kind} {sign}{self.points}pts"

    @property
    def is_earn(self) -> bool:
        return self.kind == TransactionKind.EARN
