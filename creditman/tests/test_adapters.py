"""Tests for collaborator adapters and backend selection."""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests

from creditman.adapters.crm_customers import CrmCustomerDirectory
from creditman.adapters.local_customers import DatabaseCustomerDirectory
from creditman.adapters.restaurants import DatabaseRestaurantDirectory
from creditman.exceptions import CreditmanError
from creditman.protocols import CustomerDirectory, RestaurantDirectory
from creditman.services.directories import get_customer_directory, get_restaurant_directory


def _response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if isinstance(json_data, Exception):
        response.json.side_effect = json_data
    else:
        response.json.return_value = json_data
    return response


class TestDatabaseRestaurantDirectory:
    def test_snapshot(self, restaurant):
        config = DatabaseRestaurantDirectory().get_restaurant(restaurant.pk)

        assert config.restaurant_id == restaurant.pk
        assert config.buying_rate == Decimal("1")
        assert config.selling_rate == Decimal("0.5")
        assert config.lifetime_days == 30
        assert config.voucher_lifetime_minutes == 60
        assert config.voucher_min_value == Decimal("5.00")

    def test_missing(self, db):
        assert DatabaseRestaurantDirectory().get_restaurant(404) is None

    def test_satisfies_protocol(self):
        assert isinstance(DatabaseRestaurantDirectory(), RestaurantDirectory)


class TestDatabaseCustomerDirectory:
    def test_get(self, customer, restaurant):
        info = DatabaseCustomerDirectory().get_customer(customer.pk, restaurant.pk)

        assert info.name == "John Doe"
        assert info.email == "john@example.com"

    def test_create_and_update(self, restaurant):
        directory = DatabaseCustomerDirectory()
        info = directory.create_customer(restaurant.pk, "Ana", email="ANA@x.com")

        updated = directory.update_customer(info.customer_id, restaurant.pk, last_name="Lima", code="ignored")

        assert updated.name == "Ana Lima"
        assert updated.email == "ana@x.com"

    def test_update_missing(self, restaurant):
        assert DatabaseCustomerDirectory().update_customer(999, restaurant.pk, first_name="X") is None

    def test_satisfies_protocol(self):
        assert isinstance(DatabaseCustomerDirectory(), CustomerDirectory)


class TestCrmCustomerDirectory:
    @pytest.fixture
    def directory(self):
        return CrmCustomerDirectory(base_url="https://crm.test/api/", api_key="secret", timeout=3)

    @patch("creditman.adapters.crm_customers.requests.request")
    def test_get_customer(self, mock_request, directory):
        mock_request.return_value = _response(
            json_data={"id": 42, "restaurantId": 7, "firstName": "Maria", "lastName": "Silva", "isActive": True}
        )

        info = directory.get_customer(42, 7)

        assert info.customer_id == 42
        assert info.name == "Maria Silva"
        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://crm.test/api/customers/42")
        assert kwargs["params"] == {"restaurantId": 7}
        assert kwargs["headers"]["XApiKey"] == "secret"
        assert kwargs["timeout"] == 3

    @patch("creditman.adapters.crm_customers.requests.request")
    def test_not_found(self, mock_request, directory):
        mock_request.return_value = _response(status_code=404)
        assert directory.get_customer(42, 7) is None

    @patch("creditman.adapters.crm_customers.requests.request")
    def test_inactive_is_not_found(self, mock_request, directory):
        mock_request.return_value = _response(json_data={"id": 42, "firstName": "M", "isActive": False})
        assert directory.get_customer(42, 7) is None

    @patch("creditman.adapters.crm_customers.requests.request")
    def test_server_error_unavailable(self, mock_request, directory):
        mock_request.return_value = _response(status_code=502, text="bad gateway")

        with pytest.raises(CreditmanError) as exc_info:
            directory.get_customer(42, 7)
        assert exc_info.value.code == "CUSTOMER_DIRECTORY_UNAVAILABLE"
        assert exc_info.value.data["status_code"] == 502

    @patch("creditman.adapters.crm_customers.requests.request")
    def test_network_error_unavailable(self, mock_request, directory):
        mock_request.side_effect = requests.exceptions.ConnectTimeout("timed out")

        with pytest.raises(CreditmanError, match="CUSTOMER_DIRECTORY_UNAVAILABLE"):
            directory.get_customer(42, 7)

    @patch("creditman.adapters.crm_customers.requests.request")
    def test_invalid_json_unavailable(self, mock_request, directory):
        mock_request.return_value = _response(json_data=ValueError("no json"))

        with pytest.raises(CreditmanError, match="CUSTOMER_DIRECTORY_UNAVAILABLE"):
            directory.get_customer(42, 7)

    @patch("creditman.adapters.crm_customers.requests.request")
    def test_bad_request_invalid_argument(self, mock_request, directory):
        mock_request.return_value = _response(status_code=400, text="email invalid")

        with pytest.raises(CreditmanError, match="INVALID_ARGUMENT"):
            directory.create_customer(7, "Maria", email="nope")

    @patch("creditman.adapters.crm_customers.requests.request")
    def test_update_maps_field_names(self, mock_request, directory):
        mock_request.return_value = _response(json_data={"id": 42, "firstName": "Maria", "phone": "123"})

        info = directory.update_customer(42, 7, phone="123", unknown="x")

        assert info.phone == "123"
        assert mock_request.call_args.kwargs["json"] == {"phone": "123"}

    def test_missing_base_url(self, settings):
        settings.CREDITMAN = {"CRM_BASE_URL": ""}
        with pytest.raises(CreditmanError, match="CUSTOMER_DIRECTORY_UNAVAILABLE"):
            CrmCustomerDirectory().get_customer(1, 1)


class TestBackendSelection:
    def test_defaults(self):
        assert isinstance(get_restaurant_directory(), DatabaseRestaurantDirectory)
        assert isinstance(get_customer_directory(), DatabaseCustomerDirectory)

    def test_crm_backend_from_settings(self, settings):
        settings.CREDITMAN = {
            "CUSTOMER_DIRECTORY_BACKEND": "creditman.adapters.crm_customers.CrmCustomerDirectory",
            "CRM_BASE_URL": "https://crm.test",
            "CRM_API_KEY": "k",
        }
        directory = get_customer_directory()

        assert isinstance(directory, CrmCustomerDirectory)
        assert directory.base_url == "https://crm.test"

    @patch("creditman.adapters.crm_customers.requests.request")
    def test_crm_outage_surfaces_through_ledger(self, mock_request, settings, restaurant):
        settings.CREDITMAN = {
            "CUSTOMER_DIRECTORY_BACKEND": "creditman.adapters.crm_customers.CrmCustomerDirectory",
            "CRM_BASE_URL": "https://crm.test",
        }
        mock_request.side_effect = requests.exceptions.ConnectionError("down")

        from creditman.service import LedgerService

        with pytest.raises(CreditmanError) as exc_info:
            LedgerService.get_balance(1, restaurant.pk)
        assert exc_info.value.transient is True
