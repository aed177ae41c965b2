from django.apps import AppConfig


class CreditmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "creditman"
    verbose_name = "Creditman - Credit Points Ledger"
