"""
Creditman configuration.

Usage in settings.py:
    CREDITMAN = {
        "CUSTOMER_DIRECTORY_BACKEND": "creditman.adapters.crm_customers.CrmCustomerDirectory",
        "CRM_BASE_URL": "https://crm.example.com/api",
        "CRM_API_KEY": "...",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class CreditmanSettings:
    """Creditman configuration settings."""

    # Collaborator backends (dotted paths)
    RESTAURANT_DIRECTORY_BACKEND: str = (
        "creditman.adapters.restaurants.DatabaseRestaurantDirectory"
    )
    CUSTOMER_DIRECTORY_BACKEND: str = (
        "creditman.adapters.local_customers.DatabaseCustomerDirectory"
    )

    # Remote CRM (used by CrmCustomerDirectory)
    CRM_BASE_URL: str = ""
    CRM_API_KEY: str = ""
    CRM_TIMEOUT: int = 10

    # Transaction history paging
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100


def get_creditman_settings() -> CreditmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "CREDITMAN", {})
    return CreditmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_creditman_settings(), name)


creditman_settings = _LazySettings()
