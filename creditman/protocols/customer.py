"""Customer directory protocol."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class CustomerInfo:
    """Customer record as seen by the ledger."""

    customer_id: int
    restaurant_id: int
    first_name: str
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    is_active: bool = True

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@runtime_checkable
class CustomerDirectory(Protocol):
    """
    Protocol for the customer identity system.

    Implemented by:
    - adapters/local_customers.py (local database)
    - adapters/crm_customers.py (remote CRM over HTTP)

    The ledger only calls get_customer(), to validate existence before
    expiry and spend. create/update serve registration flows.
    """

    def get_customer(self, customer_id: int, restaurant_id: int) -> CustomerInfo | None:
        """Get customer by id within a restaurant. None if not found."""
        ...

    def create_customer(
        self,
        restaurant_id: int,
        first_name: str,
        last_name: str = "",
        email: str = "",
        phone: str = "",
    ) -> CustomerInfo:
        """Create a customer record."""
        ...

    def update_customer(
        self,
        customer_id: int,
        restaurant_id: int,
        **fields,
    ) -> CustomerInfo | None:
        """Update customer fields. None if not found."""
        ...
