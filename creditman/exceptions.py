"""Creditman exceptions."""


class CreditmanError(Exception):
    """
    Structured exception for ledger operations.

    Every failure the ledger reports carries a stable ``code``. Callers (the
    HTTP layer) map codes to status codes through ``http_status``.

    Usage:
        try:
            LedgerService.spend(42, 7, 100)
        except CreditmanError as e:
            if e.code == "POINTS_NOT_ENOUGH":
                handle_insufficient_balance(e.data["available"])
    """

    _default_messages = {
        "RESTAURANT_NOT_FOUND": "Restaurant not found",
        "CUSTOMER_NOT_FOUND": "Customer not found",
        "TRANSACTION_NOT_FOUND": "Transaction not found",
        "VOUCHER_NOT_FOUND": "Voucher not found",
        "INVALID_ARGUMENT": "Invalid argument",
        "POINTS_NOT_ENOUGH": "Not enough points",
        "DUPLICATE_RECEIPT": "Receipt already recorded",
        "MINIMUM_AMOUNT_NOT_REACHED": "Purchase amount too low to earn points",
        "MINIMUM_POINTS_NOT_REACHED": "Points too low for a voucher",
        "VOUCHER_EXPIRED": "Voucher has expired",
        "VOUCHER_ALREADY_USED": "Voucher already used",
        "EXPIRY_FAILED": "Failed to expire points",
        "CONSISTENCY_ERROR": "Ledger consistency violation",
        "LEDGER_UNAVAILABLE": "Ledger store unavailable",
        "CUSTOMER_DIRECTORY_UNAVAILABLE": "Customer directory unavailable",
    }

    _http_statuses = {
        "RESTAURANT_NOT_FOUND": 404,
        "CUSTOMER_NOT_FOUND": 404,
        "TRANSACTION_NOT_FOUND": 404,
        "VOUCHER_NOT_FOUND": 404,
        "INVALID_ARGUMENT": 400,
        "POINTS_NOT_ENOUGH": 409,
        "DUPLICATE_RECEIPT": 409,
        "VOUCHER_ALREADY_USED": 409,
        "MINIMUM_AMOUNT_NOT_REACHED": 422,
        "MINIMUM_POINTS_NOT_REACHED": 422,
        "VOUCHER_EXPIRED": 422,
        "EXPIRY_FAILED": 500,
        "CONSISTENCY_ERROR": 500,
        "LEDGER_UNAVAILABLE": 503,
        "CUSTOMER_DIRECTORY_UNAVAILABLE": 503,
    }

    # Safe to retry: expiry is idempotent, infra errors leave no partial state.
    _transient_codes = {
        "EXPIRY_FAILED",
        "LEDGER_UNAVAILABLE",
        "CUSTOMER_DIRECTORY_UNAVAILABLE",
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    @property
    def http_status(self) -> int:
        return self._http_statuses.get(self.code, 500)

    @property
    def transient(self) -> bool:
        return self.code in self._transient_codes

    @property
    def is_not_found(self) -> bool:
        return self.code.endswith("_NOT_FOUND")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}
