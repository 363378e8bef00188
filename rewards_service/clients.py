"""
This module provides the communication client the HR portal uses to talk to
the rewards orders API (REST). The client encapsulates the HTTP protocol,
error mapping and connection management.
"""


import httpx

from . import config
from .errors import NotFoundError, UnexpectedError, ValidationError
from .models import Catalog, Order, OrderSubmission
from .logging_config import get_logger

log = get_logger(__name__)


def _error_message(response):
    try:
        return response.json().get("error") or response.text
    except (ValueError, AttributeError):
        return response.text


# --- Rewards Orders Client (REST) ---
class RewardsOrderClient:
    """
    Client for the rewards orders API (REST).
    Handles catalog retrieval, order submission and order lookups.
    """
    def __init__(self, base_url=None, auth_token=None, timeout=None, transport=None):
        """
        Initializes the HTTP client with proper timeout configuration.

        Args:
            base_url (str, optional): API root, `REWARDS_API_BASE_URL` by default.
            auth_token (str, optional): Bearer token, `REWARDS_API_AUTH_TOKEN` by default.
            timeout (httpx.Timeout, optional): Request timeouts.
            transport (httpx.BaseTransport, optional): Custom transport, e.g. for tests.
        """
        base_url = (base_url or config.REWARDS_API_BASE_URL).rstrip("/") + "/"
        timeout_config = timeout or httpx.Timeout(5.0, read=8.0)
        headers = {"Authorization": f"Bearer {auth_token or config.REWARDS_API_AUTH_TOKEN}"}
        self.client = httpx.Client(base_url=base_url, timeout=timeout_config, headers=headers, transport=transport)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        """Closes the HTTP client session."""
        self.client.close()

    def _request(self, method, path, context, **kwargs):
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.error(f"{context} Rewards API not reachable: {e}")
            raise UnexpectedError(f"Rewards API not reachable: {e}") from e

        if response.status_code == 400:
            message = _error_message(response)
            log.warning(f"{context} Rejected by rewards API: {message}")
            raise ValidationError(message)
        if response.status_code == 404:
            raise NotFoundError(_error_message(response))
        if response.is_error:
            message = _error_message(response)
            log.error(f"{context} HTTP {response.status_code} from rewards API: {message}")
            raise UnexpectedError(message)
        return response.json()

    def get_catalog(self):
        """
        Fetches the gift card catalog.

        Returns:
            Catalog: The parsed catalog.

        Raises:
            UnexpectedError: If the API cannot load the catalog or is unreachable.
        """
        return Catalog.model_validate(self._request("GET", "catalog", "[Catalog]"))

    def submit_order(self, submission: OrderSubmission) -> Order:
        """
        Submits one gift card order.

        Args:
            submission (OrderSubmission): The order payload.

        Returns:
            Order: The order as recorded by the API.

        Raises:
            ValidationError: If the API rejects the submission (HTTP 400).
            UnexpectedError: On HTTP 5xx responses or connection failures.
        """
        ref = submission.order_info.externalRefID if submission.order_info else None
        context = f"[Order: {ref or 'new'}]"
        payload = submission.model_dump(mode="json", exclude_none=True)
        order = Order.model_validate(self._request("POST", "orders", context, json=payload))
        log.info(f"{context} Recorded as {order.referenceOrderID} ({order.status.value}).")
        return order

    def get_order(self, reference):
        """
        Checks the status of a recorded order.

        Raises:
            NotFoundError: If the API does not know the reference (HTTP 404).
        """
        return Order.model_validate(self._request("GET", f"orders/{reference}", f"[Order: {reference}]"))

    def list_orders(self):
        data = self._request("GET", "orders", "[Orders]")
        return [Order.model_validate(order) for order in data["orders"]]
