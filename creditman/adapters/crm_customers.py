"""
Remote CRM CustomerDirectory adapter.

Talks JSON over HTTP to the restaurant CRM. Every call carries the API key
in the ``XApiKey`` header.

Configuration in settings.py:
    CREDITMAN = {
        "CUSTOMER_DIRECTORY_BACKEND": "creditman.adapters.crm_customers.CrmCustomerDirectory",
        "CRM_BASE_URL": "https://crm.example.com/api",
        "CRM_API_KEY": "...",
        "CRM_TIMEOUT": 10,
    }
"""

import logging
from typing import Any

import requests

from creditman.conf import creditman_settings
from creditman.exceptions import CreditmanError
from creditman.protocols.customer import CustomerInfo

logger = logging.getLogger(__name__)

# CRM field name -> CustomerInfo field name
_FIELD_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "isActive": "is_active",
}


class CrmCustomerDirectory:
    """
    Adapter that implements CustomerDirectory against the remote CRM.

    Usage:
        directory = CrmCustomerDirectory()
        info = directory.get_customer(42, restaurant_id=7)
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: int | None = None,
    ):
        self.base_url = (base_url or creditman_settings.CRM_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else creditman_settings.CRM_API_KEY
        self.timeout = timeout or creditman_settings.CRM_TIMEOUT

    def _get_headers(self) -> dict[str, str]:
        return {
            "XApiKey": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Perform a CRM call. Returns None on 404."""
        if not self.base_url:
            raise CreditmanError(
                "CUSTOMER_DIRECTORY_UNAVAILABLE",
                message="CRM_BASE_URL is not configured",
            )

        url = f"{self.base_url}{path}"
        try:
            response = requests.request(
                method,
                url,
                params=params,
                json=payload,
                headers=self._get_headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("CRM %s %s failed: %s", method, path, e)
            raise CreditmanError("CUSTOMER_DIRECTORY_UNAVAILABLE", path=path) from e

        if response.status_code == 404:
            return None
        if response.status_code == 400:
            raise CreditmanError(
                "INVALID_ARGUMENT",
                message=f"CRM rejected request: {response.text[:200]}",
                path=path,
            )
        if response.status_code >= 400:
            logger.error(
                "CRM %s %s returned %s: %s",
                method,
                path,
                response.status_code,
                response.text[:200],
            )
            raise CreditmanError(
                "CUSTOMER_DIRECTORY_UNAVAILABLE",
                path=path,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error("CRM %s %s returned invalid JSON", method, path)
            raise CreditmanError("CUSTOMER_DIRECTORY_UNAVAILABLE", path=path) from e

    def get_customer(self, customer_id: int, restaurant_id: int) -> CustomerInfo | None:
        data = self._request(
            "GET",
            f"/customers/{customer_id}",
            params={"restaurantId": restaurant_id},
        )
        if data is None:
            return None

        info = self._to_info(data, restaurant_id)
        return info if info.is_active else None

    def create_customer(
        self,
        restaurant_id: int,
        first_name: str,
        last_name: str = "",
        email: str = "",
        phone: str = "",
    ) -> CustomerInfo:
        data = self._request(
            "POST",
            "/customers",
            payload={
                "restaurantId": restaurant_id,
                "firstName": first_name,
                "lastName": last_name,
                "email": email,
                "phone": phone,
            },
        )
        if data is None:
            raise CreditmanError("RESTAURANT_NOT_FOUND", restaurant_id=restaurant_id)
        return self._to_info(data, restaurant_id)

    def update_customer(self, customer_id: int, restaurant_id: int, **fields) -> CustomerInfo | None:
        reverse_map = {v: k for k, v in _FIELD_MAP.items()}
        payload = {
            reverse_map[key]: value
            for key, value in fields.items()
            if key in reverse_map
        }
        data = self._request(
            "PUT",
            f"/customers/{customer_id}",
            params={"restaurantId": restaurant_id},
            payload=payload,
        )
        if data is None:
            return None
        return self._to_info(data, restaurant_id)

    @staticmethod
    def _to_info(data: dict[str, Any], restaurant_id: int) -> CustomerInfo:
        values = {
            target: data[source]
            for source, target in _FIELD_MAP.items()
            if data.get(source) is not None
        }
        return CustomerInfo(
            customer_id=int(data["id"]),
            restaurant_id=int(data.get("restaurantId", restaurant_id)),
            first_name=values.pop("first_name", ""),
            **values,
        )
