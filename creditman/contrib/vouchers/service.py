"""Voucher service - create, look up and redeem vouchers."""

import logging
import math
import uuid
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from creditman.conf import creditman_settings
from creditman.contrib.vouchers.models import Voucher
from creditman.exceptions import CreditmanError
from creditman.gates import Gates
from creditman.services.allocation import notify_spent, spend_locked
from creditman.services.directories import resolve_customer, resolve_restaurant
from creditman.services.expiry import notify_expired
from creditman.utils import points_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoucherPage:
    """One page of a customer's vouchers plus pagination metadata."""

    vouchers: list[Voucher]
    total_count: int
    total_pages: int
    page: int
    page_size: int


def _new_short_code() -> str:
    while True:
        code = uuid.uuid4().hex[:8].upper()
        if not Voucher.objects.filter(short_code=code).exists():
            return code


class VoucherService:
    """
    Service for voucher operations.

    Uses @classmethod for extensibility (consistent with LedgerService).
    """

    @classmethod
    def create_voucher(cls, customer_id: int, restaurant_id: int, points: int) -> Voucher:
        """
        Exchange points for a voucher.

        Args:
            customer_id: Customer id
            restaurant_id: Restaurant id
            points: Points to convert

        Returns:
            Created Voucher

        Raises:
            CreditmanError: INVALID_ARGUMENT, RESTAURANT_NOT_FOUND,
                CUSTOMER_NOT_FOUND, MINIMUM_POINTS_NOT_REACHED,
                POINTS_NOT_ENOUGH, EXPIRY_FAILED
        """
        Gates.identifier("customer_id", customer_id)
        Gates.identifier("restaurant_id", restaurant_id)
        Gates.positive_points(points)

        restaurant = resolve_restaurant(restaurant_id)
        resolve_customer(customer_id, restaurant_id)

        value = points_value(points, restaurant.selling_rate)
        if value < restaurant.voucher_min_value:
            raise CreditmanError(
                "MINIMUM_POINTS_NOT_REACHED",
                value=str(value),
                minimum=str(restaurant.voucher_min_value),
            )

        with transaction.atomic():
            expired, spends = spend_locked(restaurant, customer_id, points)
            voucher = Voucher.objects.create(
                customer_id=customer_id,
                restaurant_id=restaurant_id,
                short_code=_new_short_code(),
                points=points,
                value=value,
            )

        logger.info(
            "Voucher %s worth %s created for customer %s at restaurant %s",
            voucher.short_code,
            value,
            customer_id,
            restaurant_id,
        )
        notify_expired(expired, customer_id, restaurant_id)
        notify_spent(spends, customer_id, restaurant_id)
        return voucher

    @classmethod
    def get_voucher(cls, short_code: str) -> Voucher | None:
        """Get voucher by short code."""
        try:
            return Voucher.objects.get(short_code=short_code)
        except Voucher.DoesNotExist:
            return None

    @classmethod
    def redeem_voucher(cls, short_code: str) -> Voucher:
        """
        Mark a voucher as used.

        Raises:
            CreditmanError: VOUCHER_NOT_FOUND, VOUCHER_ALREADY_USED,
                VOUCHER_EXPIRED, RESTAURANT_NOT_FOUND
        """
        restaurant_id = (
            Voucher.objects.filter(short_code=short_code)
            .values_list("restaurant_id", flat=True)
            .first()
        )
        if restaurant_id is None:
            raise CreditmanError("VOUCHER_NOT_FOUND", short_code=short_code)
        # The directory may be remote: resolve before the row lock is taken
        restaurant = resolve_restaurant(restaurant_id)

        with transaction.atomic():
            voucher = Voucher.objects.select_for_update().get(short_code=short_code)

            if voucher.is_used:
                raise CreditmanError(
                    "VOUCHER_ALREADY_USED",
                    short_code=short_code,
                    used_at=voucher.used_at.isoformat() if voucher.used_at else None,
                )

            now = timezone.now()
            if voucher.expires_at(restaurant.voucher_lifetime_minutes) < now:
                logger.warning("Voucher %s redeemed after expiry", short_code)
                raise CreditmanError("VOUCHER_EXPIRED", short_code=short_code)

            voucher.is_used = True
            voucher.used_at = now
            voucher.save(update_fields=["is_used", "used_at"])

        logger.info("Voucher %s redeemed", short_code)
        return voucher

    @classmethod
    def customer_vouchers(
        cls,
        customer_id: int,
        restaurant_id: int,
        page: int = 1,
        page_size: int | None = None,
    ) -> VoucherPage:
        """Customer vouchers at a restaurant, newest first."""
        Gates.identifier("customer_id", customer_id)
        Gates.identifier("restaurant_id", restaurant_id)
        if page_size is None:
            page_size = creditman_settings.DEFAULT_PAGE_SIZE
        page, page_size = Gates.page(page, page_size, creditman_settings.MAX_PAGE_SIZE)

        qs = Voucher.objects.filter(customer_id=customer_id, restaurant_id=restaurant_id)
        total_count = qs.count()
        offset = (page - 1) * page_size
        return VoucherPage(
            vouchers=list(qs[offset:offset + page_size]),
            total_count=total_count,
            total_pages=math.ceil(total_count / page_size),
            page=page,
            page_size=page_size,
        )
