"""Ledger store - durable, indexed collection of point transactions.

Append-only: the only mutation after insert is the is_expired flip on earn
transactions. All writes run inside the caller's transaction.atomic() block;
lock_partition() MUST be the first call in that block for any read-modify-write
sequence on a (customer, restaurant) pair.

Not-found lookups return None or empty results. An unreachable store raises
CreditmanError("LEDGER_UNAVAILABLE").
"""

import functools
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from django.db import InterfaceError, OperationalError
from django.db.models import QuerySet, Sum
from django.db.models.functions import Coalesce

from creditman.exceptions import CreditmanError
from creditman.models import (
    CreditPointsAccount,
    CreditPointsTransaction,
    TransactionKind,
)

logger = logging.getLogger(__name__)

_DEBIT_KINDS = (TransactionKind.SPEND, TransactionKind.EXPIRE)


@dataclass(frozen=True)
class TransactionFilter:
    """Optional narrowing for list_by_customer_restaurant()."""

    kind: str | None = None
    viable_only: bool = False  # unexpired earn entries with points left to draw
    is_expired: bool | None = None
    occurred_after: datetime | None = None
    occurred_before: datetime | None = None

    def apply(self, qs: QuerySet) -> QuerySet:
        if self.kind:
            qs = qs.filter(kind=self.kind)
        if self.viable_only:
            qs = qs.filter(kind=TransactionKind.EARN, is_expired=False, points__gt=0)
        if self.is_expired is not None:
            qs = qs.filter(is_expired=self.is_expired)
        if self.occurred_after:
            qs = qs.filter(occurred_at__gte=self.occurred_after)
        if self.occurred_before:
            qs = qs.filter(occurred_at__lt=self.occurred_before)
        return qs


@dataclass(frozen=True)
class TransactionPage:
    """One page of ledger history plus pagination metadata."""

    transactions: list[CreditPointsTransaction]
    total_count: int
    total_pages: int
    page: int
    page_size: int


def _store_errors(func):
    """Surface connectivity failures as a transient ledger error."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            logger.error("Ledger store unavailable during %s: %s", func.__name__, exc)
            raise CreditmanError("LEDGER_UNAVAILABLE", operation=func.__name__) from exc

    return wrapper


def _partition(customer_id: int, restaurant_id: int) -> QuerySet:
    return CreditPointsTransaction.objects.filter(
        customer_id=customer_id,
        restaurant_id=restaurant_id,
    )


def outstanding_balance(earn: CreditPointsTransaction, consumed: int) -> int:
    """
    Points still drawable from an earn transaction.

    Raises:
        CreditmanError: CONSISTENCY_ERROR if more was drawn than earned
    """
    remaining = earn.points - consumed
    if remaining < 0:
        logger.critical(
            "Earn transaction #%s overdrawn: points=%s consumed=%s",
            earn.pk,
            earn.points,
            consumed,
        )
        raise CreditmanError(
            "CONSISTENCY_ERROR",
            message="Earn transaction overdrawn",
            transaction_id=earn.pk,
            points=earn.points,
            consumed=consumed,
        )
    return remaining


def _verify_link(tx: CreditPointsTransaction) -> None:
    """Debits must draw down an earn of their own partition."""
    if tx.source_earn_id is None:
        return
    earn = tx.source_earn
    if (
        earn.kind != TransactionKind.EARN
        or earn.customer_id != tx.customer_id
        or earn.restaurant_id != tx.restaurant_id
    ):
        logger.critical(
            "Refusing %s transaction linked to foreign or non-earn #%s",
            tx.kind,
            earn.pk,
        )
        raise CreditmanError(
            "CONSISTENCY_ERROR",
            message="Debit must reference an earn transaction of the same partition",
            source_earn_id=earn.pk,
        )


# ======================================================================
# Writes
# ======================================================================


@_store_errors
def lock_partition(customer_id: int, restaurant_id: int) -> CreditPointsAccount:
    """
    Lock the (customer, restaurant) partition for the current transaction.

    MUST be called inside transaction.atomic(). Concurrent spend/expire calls
    for the same pair block here until the holder commits or rolls back.
    """
    account, created = CreditPointsAccount.objects.get_or_create(
        customer_id=customer_id,
        restaurant_id=restaurant_id,
    )
    if created:
        logger.info(
            "Opened credit points account for customer %s at restaurant %s",
            customer_id,
            restaurant_id,
        )
    return CreditPointsAccount.objects.select_for_update().get(pk=account.pk)


@_store_errors
def append(transaction: CreditPointsTransaction) -> int:
    """Insert one transaction. Returns its id."""
    _verify_link(transaction)
    transaction.save(force_insert=True)
    return transaction.pk


@_store_errors
def append_batch(
    transactions: list[CreditPointsTransaction],
) -> list[CreditPointsTransaction]:
    """Insert transactions in one statement. Returns them with ids set."""
    if not transactions:
        return []
    for tx in transactions:
        _verify_link(tx)
    return CreditPointsTransaction.objects.bulk_create(transactions)


@_store_errors
def mark_expired(earn_transaction_id: int) -> bool:
    """
    Flag an earn transaction as expired.

    Only flips False -> True. Returns False when the transaction is not an
    earn entry or was already flagged.
    """
    updated = CreditPointsTransaction.objects.filter(
        pk=earn_transaction_id,
        kind=TransactionKind.EARN,
        is_expired=False,
    ).update(is_expired=True)
    return updated == 1


# ======================================================================
# Reads
# ======================================================================


@_store_errors
def find_by_id(transaction_id: int) -> CreditPointsTransaction | None:
    try:
        return CreditPointsTransaction.objects.get(pk=transaction_id)
    except CreditPointsTransaction.DoesNotExist:
        return None


@_store_errors
def find_by_receipt_id(receipt_id: str) -> CreditPointsTransaction | None:
    return CreditPointsTransaction.objects.filter(
        kind=TransactionKind.EARN,
        receipt_id=receipt_id,
    ).first()


@_store_errors
def list_by_customer_restaurant(
    customer_id: int,
    restaurant_id: int,
    tx_filter: TransactionFilter | None = None,
    page: int = 1,
    page_size: int = 10,
) -> TransactionPage:
    """List partition history, newest first. Out-of-range pages are empty."""
    qs = _partition(customer_id, restaurant_id).order_by("-id")
    if tx_filter is not None:
        qs = tx_filter.apply(qs)

    total_count = qs.count()
    offset = (page - 1) * page_size
    return TransactionPage(
        transactions=list(qs[offset:offset + page_size]),
        total_count=total_count,
        total_pages=math.ceil(total_count / page_size),
        page=page,
        page_size=page_size,
    )


@_store_errors
def sum_points(customer_id: int, restaurant_id: int) -> int:
    """Signed sum of points over every transaction of the partition."""
    return _partition(customer_id, restaurant_id).aggregate(
        total=Coalesce(Sum("points"), 0)
    )["total"]


@_store_errors
def sum_consumed_for_earn(earn_transaction_id: int) -> int:
    """Points drawn from one earn transaction by spend and expire entries."""
    debited = CreditPointsTransaction.objects.filter(
        source_earn_id=earn_transaction_id,
        kind__in=_DEBIT_KINDS,
    ).aggregate(total=Coalesce(Sum("points"), 0))["total"]
    return -debited


@_store_errors
def sum_consumed_for_earns(earn_transaction_ids: Iterable[int]) -> dict[int, int]:
    """Batched sum_consumed_for_earn(). Every requested id is in the result."""
    ids = list(earn_transaction_ids)
    consumed = {earn_id: 0 for earn_id in ids}
    if not ids:
        return consumed

    rows = (
        CreditPointsTransaction.objects.filter(
            source_earn_id__in=ids,
            kind__in=_DEBIT_KINDS,
        )
        .order_by()
        .values("source_earn_id")
        .annotate(total=Sum("points"))
    )
    for row in rows:
        consumed[row["source_earn_id"]] = -row["total"]
    return consumed


@_store_errors
def expirable_earns(
    customer_id: int,
    restaurant_id: int,
    cutoff: datetime,
) -> list[CreditPointsTransaction]:
    """Unflagged earn transactions that occurred before the cutoff."""
    return list(
        _partition(customer_id, restaurant_id)
        .filter(
            kind=TransactionKind.EARN,
            occurred_at__lt=cutoff,
            is_expired=False,
            points__gt=0,
        )
        .order_by("occurred_at", "id")
    )


@_store_errors
def eligible_earns(
    customer_id: int,
    restaurant_id: int,
    cutoff: datetime,
) -> list[CreditPointsTransaction]:
    """Spendable earn transactions, oldest first (ties broken by id)."""
    return list(
        _partition(customer_id, restaurant_id)
        .filter(
            kind=TransactionKind.EARN,
            occurred_at__gte=cutoff,
            is_expired=False,
        )
        .order_by("occurred_at", "id")
    )
