"""Restaurant configuration protocol."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class RestaurantConfig:
    """Immutable snapshot of a restaurant's credit points configuration."""

    restaurant_id: int
    buying_rate: Decimal  # money -> points
    selling_rate: Decimal  # points -> money
    lifetime_days: int
    voucher_lifetime_minutes: int = 0
    voucher_min_value: Decimal = Decimal("0")

    def expiry_cutoff(self, now: datetime) -> datetime:
        """
        Earn transactions that occurred before this instant are stale.

        Lifetimes reaching past datetime.min clamp to it: nothing expires.
        """
        try:
            return now - timedelta(days=self.lifetime_days)
        except OverflowError:
            return datetime.min.replace(tzinfo=now.tzinfo)

    def points_expire_at(self, occurred_at: datetime) -> datetime:
        """When points earned at occurred_at expire (clamped to datetime.max)."""
        try:
            return occurred_at + timedelta(days=self.lifetime_days)
        except OverflowError:
            return datetime.max.replace(tzinfo=occurred_at.tzinfo)


@runtime_checkable
class RestaurantDirectory(Protocol):
    """
    Protocol for resolving restaurant configuration.

    Configuration in settings.py:
        CREDITMAN = {
            "RESTAURANT_DIRECTORY_BACKEND": "creditman.adapters.restaurants.DatabaseRestaurantDirectory",
        }
    """

    def get_restaurant(self, restaurant_id: int) -> RestaurantConfig | None:
        """Return the restaurant snapshot, or None if unknown."""
        ...
