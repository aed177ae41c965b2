"""
Creditman public API.

CORE (essential):
    LedgerService.record_earn(...)   - Credit points for a purchase
    LedgerService.get_balance(c, r)  - Current balance (expires first)
    LedgerService.spend(c, r, pts)   - FIFO spend
    LedgerService.expire_points(r, c) - Expire stale points

CONVENIENCE (helpers):
    LedgerService.transactions(...)  - Paged history
    LedgerService.viable_transactions(...) - Earns with points left
    LedgerService.points_expiration_date(id) - When an earn expires
"""

from datetime import datetime
from decimal import Decimal

from creditman.conf import creditman_settings
from creditman.exceptions import CreditmanError
from creditman.gates import Gates
from creditman.models import CreditPointsTransaction, TransactionKind
from creditman.services import allocation, balance, earning, expiry, ledger
from creditman.services.directories import resolve_restaurant
from creditman.services.ledger import TransactionFilter, TransactionPage


class LedgerService:
    """
    Creditman public API.

    Uses @classmethod for extensibility: subclass and override to add
    caching or side effects without touching the core services.
    """

    # ======================================================================
    # CORE API
    # ======================================================================

    @classmethod
    def record_earn(
        cls,
        customer_id: int,
        restaurant_id: int,
        receipt_id: str,
        purchase_amount: Decimal,
        occurred_at: datetime | None = None,
    ) -> CreditPointsTransaction:
        """
        Credit points for a paid receipt.

        Returns:
            The created earn transaction
        """
        return earning.record_earn(
            customer_id,
            restaurant_id,
            receipt_id,
            purchase_amount,
            occurred_at=occurred_at,
        )

    @classmethod
    def get_balance(cls, customer_id: int, restaurant_id: int) -> int:
        """Current point balance. Expired points are retired first."""
        return balance.get_balance(customer_id, restaurant_id)

    @classmethod
    def spend(
        cls,
        customer_id: int,
        restaurant_id: int,
        points: int,
    ) -> list[CreditPointsTransaction]:
        """
        Spend points, oldest earn first.

        Returns:
            One spend transaction per earn transaction drawn from
        """
        return allocation.spend(customer_id, restaurant_id, points)

    @classmethod
    def expire_points(cls, restaurant_id: int, customer_id: int) -> int:
        """Expire stale points. Returns the number of expire transactions."""
        return expiry.expire_points(restaurant_id, customer_id)

    # ======================================================================
    # CONVENIENCE API
    # ======================================================================

    @classmethod
    def get_transaction(cls, transaction_id: int) -> CreditPointsTransaction | None:
        """Get transaction by id."""
        return ledger.find_by_id(transaction_id)

    @classmethod
    def get_transaction_by_receipt(cls, receipt_id: str) -> CreditPointsTransaction | None:
        """Get the earn transaction recorded for a receipt."""
        return ledger.find_by_receipt_id(receipt_id)

    @classmethod
    def transactions(
        cls,
        customer_id: int,
        restaurant_id: int,
        page: int = 1,
        page_size: int | None = None,
        kind: str | None = None,
    ) -> TransactionPage:
        """
        Paged ledger history, newest first.

        Args:
            customer_id: Customer id
            restaurant_id: Restaurant id
            page: 1-based page number
            page_size: Defaults to CREDITMAN["DEFAULT_PAGE_SIZE"]
            kind: Optional "earn", "spend" or "expire"

        Returns:
            TransactionPage
        """
        if kind is not None and kind not in TransactionKind.values:
            raise CreditmanError(
                "INVALID_ARGUMENT",
                message=f"Unknown transaction kind '{kind}'.",
                kind=kind,
            )
        return cls._list(
            customer_id,
            restaurant_id,
            TransactionFilter(kind=kind),
            page,
            page_size,
        )

    @classmethod
    def viable_transactions(
        cls,
        customer_id: int,
        restaurant_id: int,
        page: int = 1,
        page_size: int | None = None,
    ) -> TransactionPage:
        """Earn transactions that are not expired, newest first."""
        return cls._list(
            customer_id,
            restaurant_id,
            TransactionFilter(viable_only=True),
            page,
            page_size,
        )

    @classmethod
    def points_expiration_date(cls, transaction_id: int) -> datetime | None:
        """
        When the points of an earn transaction expire.

        Returns:
            Expiry datetime, or None for spend/expire transactions

        Raises:
            CreditmanError: TRANSACTION_NOT_FOUND, RESTAURANT_NOT_FOUND
        """
        Gates.identifier("transaction_id", transaction_id)
        tx = ledger.find_by_id(transaction_id)
        if tx is None:
            raise CreditmanError("TRANSACTION_NOT_FOUND", transaction_id=transaction_id)
        if not tx.is_earn:
            return None
        return expiry.expires_at(tx, resolve_restaurant(tx.restaurant_id))

    @classmethod
    def _list(
        cls,
        customer_id: int,
        restaurant_id: int,
        tx_filter: TransactionFilter,
        page: int,
        page_size: int | None,
    ) -> TransactionPage:
        """Internal: validate paging and query the store."""
        Gates.identifier("customer_id", customer_id)
        Gates.identifier("restaurant_id", restaurant_id)
        if page_size is None:
            page_size = creditman_settings.DEFAULT_PAGE_SIZE
        page, page_size = Gates.page(page, page_size, creditman_settings.MAX_PAGE_SIZE)
        return ledger.list_by_customer_restaurant(
            customer_id,
            restaurant_id,
            tx_filter=tx_filter,
            page=page,
            page_size=page_size,
        )
