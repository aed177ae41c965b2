"""Earning - turns a paid receipt into an earn transaction."""

import logging
from datetime import datetime
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone

from creditman.exceptions import CreditmanError
from creditman.gates import Gates
from creditman.models import CreditPointsTransaction, TransactionKind
from creditman.services import ledger
from creditman.services.directories import resolve_customer, resolve_restaurant
from creditman.signals import points_earned
from creditman.utils import points_for_amount, quantize_money

logger = logging.getLogger(__name__)


def _duplicate(receipt_id: str, existing: CreditPointsTransaction) -> CreditmanError:
    logger.warning(
        "Receipt %s already credited by transaction #%s", receipt_id, existing.pk
    )
    return CreditmanError(
        "DUPLICATE_RECEIPT",
        receipt_id=receipt_id,
        transaction_id=existing.pk,
    )


def record_earn(
    customer_id: int,
    restaurant_id: int,
    receipt_id: str,
    purchase_amount: Decimal,
    occurred_at: datetime | None = None,
) -> CreditPointsTransaction:
    """
    Credit points for a purchase.

    Args:
        customer_id: Customer id
        restaurant_id: Restaurant id
        receipt_id: Receipt reference, unique across earn transactions
        purchase_amount: Amount paid
        occurred_at: Purchase time (defaults to now, never in the future)

    Returns:
        The created earn transaction

    Raises:
        CreditmanError: INVALID_ARGUMENT, RESTAURANT_NOT_FOUND,
            CUSTOMER_NOT_FOUND, MINIMUM_AMOUNT_NOT_REACHED, DUPLICATE_RECEIPT
    """
    Gates.identifier("customer_id", customer_id)
    Gates.identifier("restaurant_id", restaurant_id)
    receipt_id = Gates.receipt(receipt_id)
    amount = Gates.purchase_amount(purchase_amount)
    occurred_at = Gates.occurred_at(occurred_at, timezone.now())

    restaurant = resolve_restaurant(restaurant_id)
    resolve_customer(customer_id, restaurant_id)

    points = points_for_amount(amount, restaurant.buying_rate)
    if points <= 0:
        raise CreditmanError(
            "MINIMUM_AMOUNT_NOT_REACHED",
            purchase_amount=str(amount),
            buying_rate=str(restaurant.buying_rate),
        )

    earn = CreditPointsTransaction(
        customer_id=customer_id,
        restaurant_id=restaurant_id,
        kind=TransactionKind.EARN,
        points=points,
        monetary_value=quantize_money(amount),
        occurred_at=occurred_at,
        receipt_id=receipt_id,
    )

    try:
        with transaction.atomic():
            ledger.lock_partition(customer_id, restaurant_id)
            existing = ledger.find_by_receipt_id(receipt_id)
            if existing is not None:
                raise _duplicate(receipt_id, existing)
            ledger.append(earn)
    except IntegrityError:
        # Same receipt committed concurrently under another partition lock
        existing = ledger.find_by_receipt_id(receipt_id)
        if existing is not None:
            raise _duplicate(receipt_id, existing) from None
        raise

    logger.info(
        "Customer %s earned %s points at restaurant %s (receipt %s)",
        customer_id,
        points,
        restaurant_id,
        receipt_id,
    )
    points_earned.send(
        sender=CreditPointsTransaction,
        transaction=earn,
        customer_id=customer_id,
        restaurant_id=restaurant_id,
    )
    return earn
