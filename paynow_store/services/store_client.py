"""
Storefront API Client

Async HTTP client used by the checkout to reach the storefront API.
"""

import logging
from typing import Any, Optional, Sequence

import httpx

from ..models.cart import CartItem
from ..models.payment import (
    PaymentInitiationResult,
    PaymentMethod,
    PaymentRequest,
    StatusUpdateRequest,
    StatusUpdateResponse,
    TestScenario,
)

logger = logging.getLogger(__name__)


class StoreClientError(Exception):
    """Storefront API answered with an error status"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class StoreClient:
    """Client for the storefront cart, catalogue and payment APIs"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize storefront client.

        Args:
            base_url: Base URL of the storefront
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (e.g. ASGITransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def __aenter__(self) -> "StoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
    ) -> Any:
        """Make an HTTP request and decode the JSON answer"""
        response = await self._http_client.request(method, path, json=body)

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            try:
                data = response.json()
            except ValueError:
                data = {}
            message = data.get("message") if isinstance(data, dict) else None
            if not message and isinstance(data, dict):
                message = data.get("detail")
            raise StoreClientError(
                str(message or f"Request failed with status {response.status_code}"),
                status_code=response.status_code,
            )

        return response.json()

    # ==================== Product APIs ====================

    async def list_products(self) -> dict:
        """List catalogue products"""
        return await self._request("GET", "/api/products")

    async def get_product(self, product_id: str) -> dict:
        """Get product details"""
        return await self._request("GET", f"/api/products/{product_id}")

    # ==================== Cart APIs ====================

    async def create_cart(self) -> dict:
        """Create a new shopping cart"""
        return await self._request("POST", "/api/cart")

    async def get_cart(self, cart_id: str) -> dict:
        """Get cart by ID"""
        return await self._request("GET", f"/api/cart/{cart_id}")

    async def add_to_cart(self, cart_id: str, product_id: str, quantity: int = 1) -> dict:
        """Add item to cart"""
        return await self._request(
            "POST",
            f"/api/cart/{cart_id}/items",
            body={"product_id": product_id, "quantity": quantity},
        )

    async def update_cart_item(self, cart_id: str, product_id: str, quantity: int) -> dict:
        """Update item quantity in cart"""
        return await self._request(
            "PUT",
            f"/api/cart/{cart_id}/items/{product_id}",
            body={"quantity": quantity},
        )

    async def remove_from_cart(self, cart_id: str, product_id: str) -> dict:
        """Remove item from cart"""
        return await self._request("DELETE", f"/api/cart/{cart_id}/items/{product_id}")

    # ==================== Payment APIs ====================

    async def initiate_payment(
        self,
        items: Sequence[CartItem],
        email: str,
        payment_method: PaymentMethod,
        phone: Optional[str] = None,
        scenario: Optional[TestScenario] = None,
    ) -> PaymentInitiationResult:
        """Start a payment for the given cart items"""
        request = PaymentRequest(
            items=list(items),
            email=email,
            payment_method=payment_method,
            phone=phone or None,
            scenario=scenario,
        )
        data = await self._request(
            "POST",
            "/api/payment/initiate",
            body=request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return PaymentInitiationResult.model_validate(data)

    async def check_payment_status(
        self,
        poll_url: str,
        phone: Optional[str] = None,
        start_time: Optional[int] = None,
        scenario: Optional[TestScenario] = None,
    ) -> StatusUpdateResponse:
        """Ask the storefront for the current status of a payment"""
        request = StatusUpdateRequest(
            poll_url=poll_url,
            phone=phone or None,
            start_time=start_time,
            scenario=scenario,
        )
        data = await self._request(
            "POST",
            "/api/payment/update",
            body=request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return StatusUpdateResponse.model_validate(data)
