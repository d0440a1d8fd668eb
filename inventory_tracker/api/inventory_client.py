"""HTTP client for the inventory REST API."""

from typing import List, Dict, Any, Optional
import httpx

from .base_client import BaseClient
from ..utils.config import get_config
from ..utils.exceptions import InventoryAPIError, InventoryValidationError, ItemNotFoundError
from ..models.item import InventoryItem


class InventoryClient(BaseClient):
    """
    Client for a running inventory API.

    Exposes the same operations as ``InventoryStore`` so callers can work
    against either one.
    """

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize inventory client.

        Args:
            base_url: API root such as ``http://localhost:3000/api``
                (defaults to the configured ``api_url``)
            transport: Optional httpx transport (used by tests)
        """
        config = get_config()
        super().__init__(base_url=base_url or config.env.api_url, transport=transport)

    # ------------------------------------------------------------------
    # Response handling
    # ------------------------------------------------------------------

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"HTTP {response.status_code}"

    def _send(self, method: str, endpoint: str, expected: int, **kwargs) -> httpx.Response:
        """
        Send a request and map error responses to application exceptions.

        Raises:
            ItemNotFoundError: On 404
            InventoryValidationError: On 400
            InventoryAPIError: On any other unexpected status or transport error
        """
        try:
            response = self._make_request_with_retry(method, endpoint, **kwargs)
        except httpx.HTTPError as e:
            raise InventoryAPIError(f"HTTP error: {str(e)}", details={"error": str(e)})

        if response.status_code == expected:
            return response

        message = self._error_message(response)
        details = {"status_code": response.status_code, "endpoint": endpoint}

        if response.status_code == 404:
            raise ItemNotFoundError(message, details=details)
        if response.status_code == 400:
            raise InventoryValidationError(message, details=details)

        self.logger.error(f"{method} {endpoint} failed: HTTP {response.status_code} {message}")
        raise InventoryAPIError(message, details=details)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def health(self) -> Dict[str, Any]:
        """Query the service health endpoint (served outside ``/api``)."""
        root = self.base_url[:-len("/api")] if self.base_url.endswith("/api") else self.base_url
        return self._send("GET", f"{root}/health", 200).json()

    def list_items(self, search: Optional[str] = None, category: Optional[str] = None) -> List[InventoryItem]:
        """List items, optionally filtered by search term and category."""
        params = {}
        if search:
            params["search"] = search
        if category:
            params["category"] = category

        response = self._send("GET", "/items", 200, params=params)
        return [InventoryItem.from_dict(record) for record in response.json()]

    def get_item(self, item_id: int) -> InventoryItem:
        """Fetch one item."""
        response = self._send("GET", f"/items/{item_id}", 200)
        return InventoryItem.from_dict(response.json())

    def create_item(self, fields: Dict[str, Any]) -> InventoryItem:
        """Create an item from camelCase fields."""
        response = self._send("POST", "/items", 201, json=fields)
        item = InventoryItem.from_dict(response.json())
        self.logger.info(f"Created remote item {item.id} ({item.sku})")
        return item

    def update_item(self, item_id: int, fields: Dict[str, Any]) -> InventoryItem:
        """Overwrite the supplied fields of an item."""
        response = self._send("PUT", f"/items/{item_id}", 200, json=fields)
        return InventoryItem.from_dict(response.json())

    def delete_item(self, item_id: int) -> None:
        """Delete an item."""
        self._send("DELETE", f"/items/{item_id}", 204)
