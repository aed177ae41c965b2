"""
Django Creditman - Restaurant credit points ledger.

Usage:
    from creditman import LedgerService, CreditmanError

    tx = LedgerService.record_earn(42, 7, "R-1001", Decimal("25.00"))
    balance = LedgerService.get_balance(42, 7)
    spends = LedgerService.spend(42, 7, 10)

    # Gates validation
    Gates.check_positive_points(10)
"""


def __getattr__(name):
    if name == "LedgerService":
        from creditman.service import LedgerService

        return LedgerService
    if name == "Gates":
        from creditman.gates import Gates

        return Gates
    if name == "CreditmanError":
        from creditman.exceptions import CreditmanError

        return CreditmanError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["LedgerService", "Gates", "CreditmanError"]
__version__ = "0.1.0"
