"""Pytest fixtures for the storefront tests."""

from typing import Optional, Sequence

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from paynow_store.main import app
from paynow_store.models.cart import CartItem
from paynow_store.models.payment import GatewayPollResult, PaymentInitiationResult, PaymentStatus
from paynow_store.routes.payment import get_payment_service
from paynow_store.services.gateway import PaymentGateway
from paynow_store.services.payments import PaymentService
from paynow_store.services.store_client import StoreClient


class RecordingStoreClient(StoreClient):
    """StoreClient remembering every status the storefront reported"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.statuses: list[str] = []

    async def check_payment_status(self, *args, **kwargs):
        response = await super().check_payment_status(*args, **kwargs)
        self.statuses.append(response.status)
        return response


class FakeClock:
    """Millisecond clock that only moves when told to"""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.ms = start_ms

    def now_ms(self) -> int:
        return self.ms

    def advance(self, seconds: float) -> None:
        self.ms += int(seconds * 1000)

    async def sleep(self, seconds: float) -> None:
        self.advance(seconds)


class FakeGateway(PaymentGateway):
    """In-memory gateway recording every call"""

    def __init__(self, raw_status: Optional[str] = "sent"):
        self.raw_status = raw_status
        self.poll_error: Optional[str] = None
        self.fail_with: Optional[str] = None
        self.web_calls: list[tuple] = []
        self.mobile_calls: list[tuple] = []
        self.poll_calls: list[str] = []

    async def create_web_payment(self, items: Sequence[CartItem], email: str) -> PaymentInitiationResult:
        self.web_calls.append((list(items), email))
        if self.fail_with:
            return PaymentInitiationResult(success=False, error=self.fail_with)
        return PaymentInitiationResult(
            success=True,
            redirect_url="https://www.paynow.co.zw/payment/confirm/abc",
            poll_url="https://www.paynow.co.zw/interface/checkpayment/?guid=abc",
            reference="INV-web000001",
        )

    async def create_mobile_payment(
        self,
        items: Sequence[CartItem],
        email: str,
        phone: str,
        method: str,
    ) -> PaymentInitiationResult:
        self.mobile_calls.append((list(items), email, phone, method))
        if self.fail_with:
            return PaymentInitiationResult(success=False, error=self.fail_with, status=PaymentStatus.FAILED)
        return PaymentInitiationResult(
            success=True,
            instructions="Dial *151*2*4# and enter your EcoCash PIN",
            poll_url="https://www.paynow.co.zw/interface/checkpayment/?guid=mob",
            status=PaymentStatus.PENDING,
            reference="INV-mob000001",
        )

    async def poll_status(self, poll_url: str) -> GatewayPollResult:
        self.poll_calls.append(poll_url)
        if self.poll_error:
            return GatewayPollResult(success=False, error=self.poll_error)
        return GatewayPollResult(raw_status=self.raw_status)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def payment_service(fake_gateway, clock):
    return PaymentService(fake_gateway, simulate_scenarios=True, clock=clock.now_ms)


@pytest.fixture
def api(payment_service):
    """TestClient with the payment service wired to the fake gateway"""
    app.dependency_overrides[get_payment_service] = lambda: payment_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def store_client(payment_service):
    """StoreClient talking to the app in-process"""
    app.dependency_overrides[get_payment_service] = lambda: payment_service
    client = RecordingStoreClient("http://testserver", transport=httpx.ASGITransport(app=app))
    try:
        yield client
    finally:
        await client.close()
        app.dependency_overrides.clear()


@pytest.fixture
def items():
    return [
        CartItem(id="prod-001", name="Wireless Headphones", price=89.99, quantity=1),
        CartItem(id="prod-004", name="Phone Charger", price=19.995, quantity=2),
    ]
