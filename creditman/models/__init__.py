"""Creditman models (CORE only).

Contrib models are in their respective modules:
- creditman.contrib.vouchers: Voucher
"""

from creditman.models.restaurant import Restaurant
from creditman.models.customer import Customer
from creditman.models.transaction import (
    CreditPointsAccount,
    CreditPointsTransaction,
    TransactionKind,
)

__all__ = [
    # Collaborator backing tables
    "Restaurant",
    "Customer",
    # Ledger
    "CreditPointsAccount",
    "CreditPointsTransaction",
    "TransactionKind",
]
