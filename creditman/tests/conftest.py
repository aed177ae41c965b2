"""Pytest fixtures for Creditman tests."""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from creditman.models import (
    CreditPointsTransaction,
    Customer,
    Restaurant,
    TransactionKind,
)


@pytest.fixture
def restaurant(db):
    """Restaurant: 1 point per unit spent, 0.5 per point back, 30-day lifetime."""
    return Restaurant.objects.create(
        name="Cantina",
        credit_points_buying_rate=Decimal("1"),
        credit_points_selling_rate=Decimal("0.5"),
        credit_points_lifetime=30,
        voucher_lifetime=60,
        voucher_min_value=Decimal("5.00"),
    )


@pytest.fixture
def other_restaurant(db):
    return Restaurant.objects.create(
        name="Bistro",
        credit_points_buying_rate=Decimal("2"),
        credit_points_selling_rate=Decimal("0.25"),
        credit_points_lifetime=90,
    )


@pytest.fixture
def customer(db, restaurant):
    """Create a test customer."""
    return Customer.objects.create(
        restaurant_id=restaurant.pk,
        first_name="John",
        last_name="Doe",
        email="John@Example.com",
        phone="11999999999",
    )


@pytest.fixture
def make_earn(db):
    """
    Insert an earn transaction directly, backdated by ``days_ago``.

    Bypasses LedgerService so tests can build ledgers older than the
    restaurant lifetime.
    """
    counter = {"n": 0}

    def _make(customer, restaurant, points, days_ago=0, receipt_id=None):
        counter["n"] += 1
        return CreditPointsTransaction.objects.create(
            customer_id=customer.pk,
            restaurant_id=restaurant.pk,
            kind=TransactionKind.EARN,
            points=points,
            monetary_value=Decimal(points),
            occurred_at=timezone.now() - timedelta(days=days_ago),
            receipt_id=receipt_id or f"FIX-{counter['n']}",
        )

    return _make


@pytest.fixture
def make_spend(db):
    """Insert a spend transaction drawing down one earn."""

    def _make(earn, points):
        return CreditPointsTransaction.objects.create(
            customer_id=earn.customer_id,
            restaurant_id=earn.restaurant_id,
            kind=TransactionKind.SPEND,
            points=-points,
            monetary_value=Decimal(points),
            occurred_at=timezone.now(),
            source_earn=earn,
        )

    return _make
