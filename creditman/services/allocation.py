"""
Spend allocator - FIFO drawdown of earned points.

Each spend is split across the oldest unexpired earn transactions: one spend
entry per earn drawn from, linked through source_earn. The expiry pass, the
availability check and the spend batch share one locked atomic block, so a
failure anywhere leaves the ledger untouched.
"""

import logging

from django.db import transaction
from django.utils import timezone

from creditman.exceptions import CreditmanError
from creditman.gates import Gates
from creditman.models import CreditPointsTransaction, TransactionKind
from creditman.protocols.restaurant import RestaurantConfig
from creditman.services import ledger
from creditman.services.directories import resolve_customer, resolve_restaurant
from creditman.services.expiry import expire_locked, notify_expired
from creditman.signals import points_spent
from creditman.utils import spend_value

logger = logging.getLogger(__name__)


def spend(customer_id: int, restaurant_id: int, points: int) -> list[CreditPointsTransaction]:
    """
    Spend points, oldest earn first.

    Args:
        customer_id: Customer id
        restaurant_id: Restaurant id
        points: Points to spend (> 0)

    Returns:
        Created spend transactions, in allocation order

    Raises:
        CreditmanError: INVALID_ARGUMENT, RESTAURANT_NOT_FOUND,
            CUSTOMER_NOT_FOUND, POINTS_NOT_ENOUGH, EXPIRY_FAILED
    """
    Gates.identifier("customer_id", customer_id)
    Gates.identifier("restaurant_id", restaurant_id)
    Gates.positive_points(points)

    restaurant = resolve_restaurant(restaurant_id)
    resolve_customer(customer_id, restaurant_id)

    with transaction.atomic():
        expired, created = spend_locked(restaurant, customer_id, points)

    notify_expired(expired, customer_id, restaurant_id)
    notify_spent(created, customer_id, restaurant_id)
    return created


def notify_spent(
    created: list[CreditPointsTransaction],
    customer_id: int,
    restaurant_id: int,
) -> None:
    """Emit points_spent once the spend has been committed."""
    points_spent.send(
        sender=CreditPointsTransaction,
        transactions=created,
        customer_id=customer_id,
        restaurant_id=restaurant_id,
        points=-sum(tx.points for tx in created),
    )


def spend_locked(restaurant: RestaurantConfig, customer_id: int, points: int):
    """
    Lock the partition, expire, then allocate.

    MUST be called inside transaction.atomic(). Signals are left to the
    caller, to be sent once the outer block has committed.

    Returns:
        (expire transactions, spend transactions)
    """
    restaurant_id = restaurant.restaurant_id
    now = timezone.now()

    ledger.lock_partition(customer_id, restaurant_id)
    expired = expire_locked(restaurant, customer_id, now)

    earns = ledger.eligible_earns(customer_id, restaurant_id, restaurant.expiry_cutoff(now))
    consumed = ledger.sum_consumed_for_earns(earn.pk for earn in earns)
    remaining = {
        earn.pk: ledger.outstanding_balance(earn, consumed[earn.pk]) for earn in earns
    }

    available = sum(remaining.values())
    if available < points:
        logger.warning(
            "Customer %s at restaurant %s tried to spend %s points with %s available",
            customer_id,
            restaurant_id,
            points,
            available,
        )
        raise CreditmanError(
            "POINTS_NOT_ENOUGH",
            available=available,
            requested=points,
        )

    spends = []
    still_needed = points
    for earn in earns:
        if still_needed == 0:
            break
        if remaining[earn.pk] <= 0:
            continue

        use = min(remaining[earn.pk], still_needed)
        spends.append(
            CreditPointsTransaction(
                customer_id=customer_id,
                restaurant_id=restaurant_id,
                kind=TransactionKind.SPEND,
                points=-use,
                monetary_value=spend_value(use, restaurant.buying_rate),
                occurred_at=now,
                source_earn=earn,
            )
        )
        still_needed -= use

    created = ledger.append_batch(spends)
    logger.info(
        "Spent %s points across %s earn transactions for customer %s at restaurant %s",
        points,
        len(created),
        customer_id,
        restaurant_id,
    )
    return expired, created
