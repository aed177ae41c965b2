"""Expiry engine - retires points unused past the restaurant lifetime.

There is no scheduler: get_balance() and spend() run the engine first, inside
their own locked transaction, so stale points are never visible as
spendable. expire_points() triggers it on demand.

Idempotent: expired earn transactions are flagged in the same atomic block
that writes their expire entries, so an immediate re-run finds nothing.
"""

import logging
from datetime import datetime

from django.db import DatabaseError, transaction
from django.utils import timezone

from creditman.exceptions import CreditmanError
from creditman.gates import Gates
from creditman.models import CreditPointsTransaction, TransactionKind
from creditman.protocols.restaurant import RestaurantConfig
from creditman.services import ledger
from creditman.services.directories import resolve_customer, resolve_restaurant
from creditman.signals import points_expired
from creditman.utils import points_value

logger = logging.getLogger(__name__)


def expire_points(restaurant_id: int, customer_id: int) -> int:
    """
    Expire stale points for one customer at one restaurant.

    Args:
        restaurant_id: Restaurant id
        customer_id: Customer id

    Returns:
        Number of expire transactions created (0 when nothing is stale)

    Raises:
        CreditmanError: INVALID_ARGUMENT, RESTAURANT_NOT_FOUND,
            CUSTOMER_NOT_FOUND, EXPIRY_FAILED
    """
    Gates.identifier("restaurant_id", restaurant_id)
    Gates.identifier("customer_id", customer_id)

    restaurant = resolve_restaurant(restaurant_id)
    resolve_customer(customer_id, restaurant_id)

    try:
        with transaction.atomic():
            ledger.lock_partition(customer_id, restaurant_id)
            created = expire_locked(restaurant, customer_id, timezone.now())
    except DatabaseError as exc:
        # Raised on exit: the commit itself failed and was rolled back
        logger.exception(
            "Expiry commit failed for customer %s at restaurant %s",
            customer_id,
            restaurant_id,
        )
        raise CreditmanError(
            "EXPIRY_FAILED",
            customer_id=customer_id,
            restaurant_id=restaurant_id,
        ) from exc

    notify_expired(created, customer_id, restaurant_id)
    return len(created)


def expire_locked(
    restaurant: RestaurantConfig,
    customer_id: int,
    now: datetime,
) -> list[CreditPointsTransaction]:
    """
    Core expiry pass for a partition that is already locked.

    MUST be called inside transaction.atomic() after ledger.lock_partition().
    Runs in a savepoint: on any database failure every proposed expire entry
    and flag flip is discarded and EXPIRY_FAILED is raised.
    """
    restaurant_id = restaurant.restaurant_id
    cutoff = restaurant.expiry_cutoff(now)

    try:
        with transaction.atomic():
            candidates = ledger.expirable_earns(customer_id, restaurant_id, cutoff)
            if not candidates:
                logger.debug(
                    "No expired transactions for customer %s at restaurant %s",
                    customer_id,
                    restaurant_id,
                )
                return []

            consumed = ledger.sum_consumed_for_earns(earn.pk for earn in candidates)

            expiring = []
            for earn in candidates:
                remaining = ledger.outstanding_balance(earn, consumed[earn.pk])
                if remaining == 0:
                    continue

                expiring.append(
                    CreditPointsTransaction(
                        customer_id=customer_id,
                        restaurant_id=restaurant_id,
                        kind=TransactionKind.EXPIRE,
                        points=-remaining,
                        monetary_value=points_value(remaining, restaurant.selling_rate),
                        occurred_at=now,
                        source_earn=earn,
                    )
                )
                if not ledger.mark_expired(earn.pk):
                    raise CreditmanError(
                        "CONSISTENCY_ERROR",
                        message="Earn transaction already flagged as expired",
                        transaction_id=earn.pk,
                    )
                earn.is_expired = True

            created = ledger.append_batch(expiring)
    except (DatabaseError, CreditmanError) as exc:
        if isinstance(exc, CreditmanError) and not exc.transient:
            raise
        logger.exception(
            "Expiry rolled back for customer %s at restaurant %s",
            customer_id,
            restaurant_id,
        )
        raise CreditmanError(
            "EXPIRY_FAILED",
            customer_id=customer_id,
            restaurant_id=restaurant_id,
        ) from exc

    if created:
        logger.info(
            "Expired %s points in %s transactions for customer %s at restaurant %s",
            -sum(tx.points for tx in created),
            len(created),
            customer_id,
            restaurant_id,
        )
    return created


def notify_expired(
    created: list[CreditPointsTransaction],
    customer_id: int,
    restaurant_id: int,
) -> None:
    """Emit points_expired once the expiry has been committed."""
    if created:
        points_expired.send(
            sender=CreditPointsTransaction,
            transactions=created,
            customer_id=customer_id,
            restaurant_id=restaurant_id,
        )


def expires_at(earn: CreditPointsTransaction, restaurant: RestaurantConfig) -> datetime:
    """When the points of an earn transaction expire."""
    return restaurant.points_expire_at(earn.occurred_at)
