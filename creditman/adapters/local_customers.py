"""Local database CustomerDirectory adapter."""

from __future__ import annotations

from creditman.models import Customer
from creditman.protocols.customer import CustomerInfo

_UPDATABLE_FIELDS = {"first_name", "last_name", "email", "phone", "is_active"}


class DatabaseCustomerDirectory:
    """Adapter: customers live in the local Customer table."""

    def get_customer(self, customer_id: int, restaurant_id: int) -> CustomerInfo | None:
        c = self._fetch(customer_id, restaurant_id)
        return self._to_info(c) if c else None

    def create_customer(
        self,
        restaurant_id: int,
        first_name: str,
        last_name: str = "",
        email: str = "",
        phone: str = "",
    ) -> CustomerInfo:
        c = Customer.objects.create(
            restaurant_id=restaurant_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
        )
        return self._to_info(c)

    def update_customer(self, customer_id: int, restaurant_id: int, **fields) -> CustomerInfo | None:
        c = self._fetch(customer_id, restaurant_id)
        if not c:
            return None

        changed = []
        for key, value in fields.items():
            if key in _UPDATABLE_FIELDS:
                setattr(c, key, value)
                changed.append(key)

        if changed:
            c.save(update_fields=[*changed, "updated_at"])
        return self._to_info(c)

    @staticmethod
    def _fetch(customer_id: int, restaurant_id: int) -> Customer | None:
        try:
            return Customer.objects.get(
                pk=customer_id,
                restaurant_id=restaurant_id,
                is_active=True,
            )
        except Customer.DoesNotExist:
            return None

    @staticmethod
    def _to_info(c: Customer) -> CustomerInfo:
        return CustomerInfo(
            customer_id=c.pk,
            restaurant_id=c.restaurant_id,
            first_name=c.first_name,
            last_name=c.last_name,
            email=c.email or None,
            phone=c.phone or None,
            is_active=c.is_active,
        )
