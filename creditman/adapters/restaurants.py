"""Database-backed RestaurantDirectory adapter."""

from creditman.models import Restaurant
from creditman.protocols.restaurant import RestaurantConfig


class DatabaseRestaurantDirectory:
    """
    Adapter that implements RestaurantDirectory from the Restaurant table.

    Configuration in settings.py:
        CREDITMAN = {
            "RESTAURANT_DIRECTORY_BACKEND": "creditman.adapters.restaurants.DatabaseRestaurantDirectory",
        }
    """

    def get_restaurant(self, restaurant_id: int) -> RestaurantConfig | None:
        try:
            restaurant = Restaurant.objects.get(pk=restaurant_id, is_active=True)
        except Restaurant.DoesNotExist:
            return None
        return self._to_config(restaurant)

    @staticmethod
    def _to_config(r: Restaurant) -> RestaurantConfig:
        return RestaurantConfig(
            restaurant_id=r.pk,
            buying_rate=r.credit_points_buying_rate,
            selling_rate=r.credit_points_selling_rate,
            lifetime_days=r.credit_points_lifetime,
            voucher_lifetime_minutes=r.voucher_lifetime,
            voucher_min_value=r.voucher_min_value,
        )
