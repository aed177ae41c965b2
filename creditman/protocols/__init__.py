"""Creditman protocols."""

from creditman.protocols.customer import (
    CustomerDirectory,
    CustomerInfo,
)
from creditman.protocols.restaurant import (
    RestaurantConfig,
    RestaurantDirectory,
)

__all__ = [
    # Customer
    "CustomerDirectory",
    "CustomerInfo",
    # Restaurant
    "RestaurantConfig",
    "RestaurantDirectory",
]
