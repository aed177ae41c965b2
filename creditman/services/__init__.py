"""Creditman services.

Core ledger operations live in their own modules; LedgerService
(creditman.service) is the public facade over them. Contrib services are in
their respective modules:
- creditman.contrib.vouchers: VoucherService
"""

from creditman.services import ledger
from creditman.services import directories
from creditman.services import expiry
from creditman.services import balance
from creditman.services import allocation
from creditman.services import earning

__all__ = ["ledger", "directories", "expiry", "balance", "allocation", "earning"]
