"""Creditman utilities - point and money conversions."""

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

MONEY_QUANTUM = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round a monetary amount to cents (half up)."""
    return Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def points_for_amount(amount: Decimal, buying_rate: Decimal) -> int:
    """Points earned for a purchase: floor(amount * buying_rate)."""
    return int((amount * buying_rate).to_integral_value(rounding=ROUND_FLOOR))


def spend_value(points: int, buying_rate: Decimal) -> Decimal:
    """Money equivalent of spent points at the buying rate."""
    if buying_rate <= 0:
        return quantize_money(Decimal("0"))
    return quantize_money(Decimal(points) / buying_rate)


def points_value(points: int, selling_rate: Decimal) -> Decimal:
    """Money value of points at the selling rate (expiry, vouchers)."""
    return quantize_money(Decimal(points) * selling_rate)
