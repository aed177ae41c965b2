"""Voucher model."""

from datetime import datetime, timedelta

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Voucher(models.Model):
    """
    Single-use voucher bought with credit points.

    The value is fixed at creation from the restaurant selling rate. A voucher
    can be redeemed once, within the restaurant's voucher lifetime.
    """

    customer_id = models.PositiveBigIntegerField(_("customer"))
    restaurant_id = models.PositiveBigIntegerField(_("restaurant"))

    short_code = models.CharField(_("short code"), max_length=16, unique=True)
    points = models.PositiveIntegerField(_("points"))
    value = models.DecimalField(_("value"), max_digits=12, decimal_places=2)

    created_at = models.DateTimeField(_("created at"), default=timezone.now)
    is_used = models.BooleanField(_("used"), default=False)
    used_at = models.DateTimeField(_("used at"), null=True, blank=True)

    class Meta:
        verbose_name = _("voucher")
        verbose_name_plural = _("vouchers")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["customer_id", "restaurant_id"],
                name="creditman_voucher_owner_idx",
            ),
        ]

    def __str__(self):
        return f"{self.short_code} ({self.value})"

    def expires_at(self, lifetime_minutes: int) -> datetime:
        return self.created_at + timedelta(minutes=lifetime_minutes)
