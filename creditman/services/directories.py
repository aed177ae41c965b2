"""Collaborator resolution: restaurant config and customer identity.

Both lookups run before any ledger transaction opens, so a slow CRM never
holds a partition lock.
"""

import logging

from django.utils.module_loading import import_string

from creditman.conf import creditman_settings
from creditman.exceptions import CreditmanError
from creditman.protocols.customer import CustomerDirectory, CustomerInfo
from creditman.protocols.restaurant import RestaurantConfig, RestaurantDirectory

logger = logging.getLogger(__name__)


def get_restaurant_directory() -> RestaurantDirectory:
    """Instantiate the configured RestaurantDirectory."""
    backend_class = import_string(creditman_settings.RESTAURANT_DIRECTORY_BACKEND)
    return backend_class()


def get_customer_directory() -> CustomerDirectory:
    """Instantiate the configured CustomerDirectory."""
    backend_class = import_string(creditman_settings.CUSTOMER_DIRECTORY_BACKEND)
    return backend_class()


def resolve_restaurant(restaurant_id: int) -> RestaurantConfig:
    """
    Get restaurant snapshot or raise.

    Raises:
        CreditmanError: RESTAURANT_NOT_FOUND
    """
    config = get_restaurant_directory().get_restaurant(restaurant_id)
    if config is None:
        logger.warning("Restaurant %s not found", restaurant_id)
        raise CreditmanError("RESTAURANT_NOT_FOUND", restaurant_id=restaurant_id)
    return config


def resolve_customer(customer_id: int, restaurant_id: int) -> CustomerInfo:
    """
    Get customer record or raise.

    Raises:
        CreditmanError: CUSTOMER_NOT_FOUND, CUSTOMER_DIRECTORY_UNAVAILABLE
    """
    info = get_customer_directory().get_customer(customer_id, restaurant_id)
    if info is None:
        logger.warning(
            "Customer %s not found for restaurant %s", customer_id, restaurant_id
        )
        raise CreditmanError(
            "CUSTOMER_NOT_FOUND",
            customer_id=customer_id,
            restaurant_id=restaurant_id,
        )
    return info
