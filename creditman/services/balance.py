"""Balance calculator."""

import logging

from django.db import transaction
from django.utils import timezone

from creditman.exceptions import CreditmanError
from creditman.gates import Gates
from creditman.services import ledger
from creditman.services.directories import resolve_customer, resolve_restaurant
from creditman.services.expiry import expire_locked, notify_expired

logger = logging.getLogger(__name__)


def get_balance(customer_id: int, restaurant_id: int) -> int:
    """
    Current point balance of a customer at a restaurant.

    Expiry runs first in the same locked block, so the result never
    includes points past their lifetime.

    Raises:
        CreditmanError: INVALID_ARGUMENT, RESTAURANT_NOT_FOUND,
            CUSTOMER_NOT_FOUND, EXPIRY_FAILED, CONSISTENCY_ERROR
    """
    Gates.identifier("customer_id", customer_id)
    Gates.identifier("restaurant_id", restaurant_id)

    restaurant = resolve_restaurant(restaurant_id)
    resolve_customer(customer_id, restaurant_id)

    with transaction.atomic():
        ledger.lock_partition(customer_id, restaurant_id)
        expired = expire_locked(restaurant, customer_id, timezone.now())
        balance = ledger.sum_points(customer_id, restaurant_id)

    notify_expired(expired, customer_id, restaurant_id)

    if balance < 0:
        logger.critical(
            "Negative balance %s for customer %s at restaurant %s",
            balance,
            customer_id,
            restaurant_id,
        )
        raise CreditmanError(
            "CONSISTENCY_ERROR",
            message="Negative point balance",
            customer_id=customer_id,
            restaurant_id=restaurant_id,
            balance=balance,
        )
    return balance
