"""
Creditman Vouchers - turn credit points into single-use vouchers.

The points are spent through the core FIFO allocator in the same atomic
block that stores the voucher, so a voucher never exists without its spend
transactions.

Usage:
    INSTALLED_APPS = [
        ...
        "creditman",
        "creditman.contrib.vouchers",
    ]

    from creditman.contrib.vouchers import VoucherService

    voucher = VoucherService.create_voucher(42, 7, 200)
    VoucherService.redeem_voucher(voucher.short_code)
"""


def __getattr__(name):
    if name == "VoucherService":
        from creditman.contrib.vouchers.service import VoucherService

        return VoucherService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["VoucherService"]
