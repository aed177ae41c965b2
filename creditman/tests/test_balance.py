"""Tests for the balance calculator."""

import pytest

from creditman.exceptions import CreditmanError
from creditman.models import CreditPointsTransaction, TransactionKind
from creditman.service import LedgerService


pytestmark = pytest.mark.django_db


class TestGetBalance:
    def test_empty_partition(self, customer, restaurant):
        assert LedgerService.get_balance(customer.pk, restaurant.pk) == 0

    def test_earn_minus_spend(self, customer, restaurant, make_earn, make_spend):
        earn = make_earn(customer, restaurant, 10)
        make_earn(customer, restaurant, 5)
        make_spend(earn, 4)

        assert LedgerService.get_balance(customer.pk, restaurant.pk) == 11

    def test_expires_before_summing(self, customer, restaurant, make_earn):
        make_earn(customer, restaurant, 10, days_ago=31)
        make_earn(customer, restaurant, 3, days_ago=2)

        assert LedgerService.get_balance(customer.pk, restaurant.pk) == 3
        assert CreditPointsTransaction.objects.filter(kind=TransactionKind.EXPIRE).count() == 1

    def test_scoped_to_restaurant(self, customer, restaurant, other_restaurant, make_earn):
        make_earn(customer, restaurant, 10)
        make_earn(customer, other_restaurant, 99)

        assert LedgerService.get_balance(customer.pk, restaurant.pk) == 10

    def test_negative_sum_raises_consistency_error(
        self, customer, restaurant, make_earn, make_spend, caplog
    ):
        earn = make_earn(customer, restaurant, 5)
        make_spend(earn, 8)

        with pytest.raises(CreditmanError) as exc_info:
            LedgerService.get_balance(customer.pk, restaurant.pk)

        assert exc_info.value.code == "CONSISTENCY_ERROR"
        assert exc_info.value.data["balance"] == -3
        assert any(r.levelname == "CRITICAL" for r in caplog.records)

    def test_inactive_customer_not_found(self, customer, restaurant):
        customer.is_active = False
        customer.save()

        with pytest.raises(CreditmanError, match="CUSTOMER_NOT_FOUND"):
            LedgerService.get_balance(customer.pk, restaurant.pk)

    def test_inactive_restaurant_not_found(self, customer, restaurant):
        restaurant.is_active = False
        restaurant.save()

        with pytest.raises(CreditmanError, match="RESTAURANT_NOT_FOUND"):
            LedgerService.get_balance(customer.pk, restaurant.pk)

    def test_bool_id_rejected(self, customer):
        with pytest.raises(CreditmanError, match="INVALID_ARGUMENT"):
            LedgerService.get_balance(customer.pk, True)
