"""Vouchers app config."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class VouchersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "creditman.contrib.vouchers"
    label = "creditman_vouchers"
    verbose_name = _("Vouchers")
