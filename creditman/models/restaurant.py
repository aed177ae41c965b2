"""Restaurant model (credit points configuration)."""

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Restaurant(models.Model):
    """
    Per-restaurant credit points configuration.

    Backs DatabaseRestaurantDirectory. The ledger never reads this model
    directly: it works on a RestaurantConfig snapshot taken once per call.
    """

    name = models.CharField(_("name"), max_length=200)

    # Rates
    credit_points_buying_rate = models.DecimalField(
        _("buying rate"),
        max_digits=10,
        decimal_places=4,
        validators=[MinValueValidator(0)],
        help_text=_("Points earned per unit of money spent"),
    )
    credit_points_selling_rate = models.DecimalField(
        _("selling rate"),
        max_digits=10,
        decimal_places=4,
        validators=[MinValueValidator(0)],
        help_text=_("Money value of one point (vouchers and expiry)"),
    )

    # Lifetimes
    credit_points_lifetime = models.PositiveIntegerField(
        _("points lifetime"),
        default=365,
        help_text=_("Days before unspent points expire"),
    )
    voucher_lifetime = models.PositiveIntegerField(
        _("voucher lifetime"),
        default=60,
        help_text=_("Minutes before an unused voucher expires"),
    )
    voucher_min_value = models.DecimalField(
        _("voucher minimum value"),
        max_digits=12,
        decimal_places=2,
        default=0,
    )

    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("restaurant")
        verbose_name_plural = _("restaurants")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} (#{self.pk})"
