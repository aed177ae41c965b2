"""
Creditman Gates - Argument validation.

Every gate runs before any ledger mutation and raises
CreditmanError("INVALID_ARGUMENT") on failure. The check_* variants return
a bool instead of raising.

G1: Identifier - customer/restaurant ids are positive integers
G2: PositivePoints - spend amounts are positive integers
G3: PurchaseAmount - purchase amounts are positive decimals
G4: Receipt - earn receipts are non-empty strings
G5: OccurredAt - caller-supplied purchase times are not in the future
G6: Page - history paging stays within bounds
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.utils import timezone

from creditman.exceptions import CreditmanError


def _invalid(gate_name: str, message: str, **data) -> CreditmanError:
    return CreditmanError("INVALID_ARGUMENT", message=message, gate=gate_name, **data)


class Gates:
    """Creditman validation gates."""

    # =========================================================================
    # G1: Identifier
    # =========================================================================

    @classmethod
    def identifier(cls, name: str, value) -> int:
        """
        G1: Identifiers are positive integers (bool rejected).

        Returns:
            The identifier as int
        """
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise _invalid("G1_Identifier", f"{name} must be a positive integer.", field=name)
        return value

    @classmethod
    def check_identifier(cls, name: str, value) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.identifier(name, value)
            return True
        except CreditmanError:
            return False

    # =========================================================================
    # G2: Positive Points
    # =========================================================================

    @classmethod
    def positive_points(cls, points) -> int:
        """G2: Point amounts are positive integers."""
        if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
            raise _invalid("G2_PositivePoints", "Points must be a positive integer.", points=points)
        return points

    @classmethod
    def check_positive_points(cls, points) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.positive_points(points)
            return True
        except CreditmanError:
            return False

    # =========================================================================
    # G3: Purchase Amount
    # =========================================================================

    @classmethod
    def purchase_amount(cls, amount) -> Decimal:
        """
        G3: Purchase amount is a positive, finite decimal.

        Converts through str() first to avoid float precision artifacts.
        """
        if isinstance(amount, bool):
            raise _invalid("G3_PurchaseAmount", "Amount must be a number.")
        try:
            value = Decimal(str(amount))
        except (ValueError, InvalidOperation):
            raise _invalid("G3_PurchaseAmount", "Amount must be a number.") from None

        if not value.is_finite() or value <= 0:
            raise _invalid("G3_PurchaseAmount", "Amount must be positive.", amount=str(amount))
        return value

    # =========================================================================
    # G4: Receipt
    # =========================================================================

    @classmethod
    def receipt(cls, receipt_id) -> str:
        """G4: Receipt reference is a non-empty string of at most 64 chars."""
        if receipt_id is None or isinstance(receipt_id, bool):
            raise _invalid("G4_Receipt", "Receipt id is required.")
        value = str(receipt_id).strip()
        if not value:
            raise _invalid("G4_Receipt", "Receipt id is required.")
        if len(value) > 64:
            raise _invalid("G4_Receipt", "Receipt id is too long (max 64).")
        return value

    # =========================================================================
    # G5: Occurred At
    # =========================================================================

    @classmethod
    def occurred_at(cls, occurred_at: datetime | None, now: datetime) -> datetime:
        """
        G5: Purchase time defaults to now and cannot be in the future.

        Naive datetimes are interpreted in the current time zone.
        """
        if occurred_at is None:
            return now
        if not isinstance(occurred_at, datetime):
            raise _invalid("G5_OccurredAt", "occurred_at must be a datetime.")
        if timezone.is_naive(occurred_at):
            occurred_at = timezone.make_aware(occurred_at)
        if occurred_at > now:
            raise _invalid(
                "G5_OccurredAt",
                "occurred_at cannot be in the future.",
                occurred_at=occurred_at.isoformat(),
            )
        return occurred_at

    # =========================================================================
    # G6: Page
    # =========================================================================

    @classmethod
    def page(cls, page, page_size, max_page_size: int) -> tuple[int, int]:
        """G6: page >= 1 and 1 <= page_size <= max_page_size."""
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise _invalid("G6_Page", "page must be >= 1.", page=page)
        if (
            isinstance(page_size, bool)
            or not isinstance(page_size, int)
            or not 1 <= page_size <= max_page_size
        ):
            raise _invalid(
                "G6_Page",
                f"page_size must be between 1 and {max_page_size}.",
                page_size=page_size,
            )
        return page, page_size
