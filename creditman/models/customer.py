"""Customer model (local customer directory)."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Customer(models.Model):
    """
    Restaurant customer kept in the local database.

    Only used by DatabaseCustomerDirectory. Deployments that keep customers
    in the remote CRM never write to this table.
    """

    restaurant_id = models.PositiveBigIntegerField(_("restaurant"), db_index=True)

    first_name = models.CharField(_("first name"), max_length=100)
    last_name = models.CharField(_("last name"), max_length=100, blank=True)
    email = models.EmailField(_("email"), blank=True, db_index=True)
    phone = models.CharField(_("phone"), max_length=20, blank=True)

    is_active = models.BooleanField(_("active"), default=True, db_index=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("customer")
        verbose_name_plural = _("customers")
        ordering = ["first_name", "last_name"]
        indexes = [
            models.Index(
                fields=["restaurant_id", "email"],
                name="creditman_customer_email_idx",
            ),
        ]

    def __str__(self):
        return f"{self.name} (#{self.pk})"

    @property
    def name(self) -> str:
        """Full name (first + last)."""
        return f"{self.first_name} {self.last_name}".strip()

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.lower().strip()
        super().save(*args, **kwargs)
