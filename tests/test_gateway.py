import re
from types import SimpleNamespace

import pytest

from paynow_store.models.cart import CartItem
from paynow_store.services import gateway as gateway_mod
from paynow_store.services.gateway import (
    GatewayConfigurationError,
    PaynowGateway,
    generate_reference,
    is_paid,
    line_amount,
    to_minor_units,
)


class DummyPayment:
    def __init__(self, reference, auth_email):
        self.reference = reference
        self.auth_email = auth_email
        self.lines = []

    def add(self, title, amount):
        self.lines.append((title, amount))


class DummyPaynow:
    instances = []

    def __init__(self, integration_id, integration_key, return_url, result_url):
        self.args = (integration_id, integration_key, return_url, result_url)
        self.payments = []
        self.send_response = SimpleNamespace(
            success=True,
            redirect_url="https://paynow.test/redirect",
            poll_url="https://paynow.test/poll",
        )
        self.mobile_response = SimpleNamespace(
            success=True,
            instructions="Approve on your phone",
            poll_url="https://paynow.test/poll-mobile",
        )
        self.status_response = SimpleNamespace(status="Paid")
        DummyPaynow.instances.append(self)

    def create_payment(self, reference, auth_email):
        payment = DummyPayment(reference, auth_email)
        self.payments.append(payment)
        return payment

    def send(self, payment):
        return self.send_response

    def send_mobile(self, payment, phone, method):
        self.mobile_args = (phone, method)
        return self.mobile_response

    def check_transaction_status(self, poll_url):
        if isinstance(self.status_response, Exception):
            raise self.status_response
        return self.status_response


@pytest.fixture
def sdk(monkeypatch):
    DummyPaynow.instances = []
    monkeypatch.setattr(gateway_mod, "Paynow", DummyPaynow)
    return DummyPaynow


@pytest.fixture
def gateway(sdk):
    return PaynowGateway("1234", "secret", merchant_email="merchant@example.com")


def test_minor_units_round_before_quantity():
    assert to_minor_units(19.995, 2) == 4000
    assert to_minor_units(10.0, 3) == 3000
    assert to_minor_units(0.005, 1) == 1
    assert to_minor_units(5.994, 0) == 0


def test_line_amount_in_currency_units():
    assert line_amount(19.995, 2) == 39.99
    assert line_amount(12.49, 3) == 37.47


def test_paid_statuses_are_case_insensitive():
    assert is_paid("Paid")
    assert is_paid("COMPLETE")
    assert is_paid(" confirmed ")
    assert not is_paid("Awaiting Delivery")
    assert not is_paid(None)


def test_reference_format():
    assert re.fullmatch(r"INV-[a-z0-9]{9}", generate_reference())


@pytest.mark.parametrize("integration_id, integration_key", [(None, "key"), ("id", None), ("", "")])
def test_missing_credentials_fail_construction(sdk, integration_id, integration_key):
    with pytest.raises(GatewayConfigurationError):
        PaynowGateway(integration_id, integration_key)
    assert sdk.instances == []


def test_gateway_passes_urls_to_sdk(gateway, sdk):
    assert sdk.instances[0].args == ("1234", "secret", "/payment/success", "/api/payment/update")


@pytest.mark.asyncio
async def test_web_payment_uses_merchant_email_and_cents(gateway, sdk):
    items = [
        CartItem(id="a", name="Charger", price=19.995, quantity=2),
        CartItem(id="b", name="Mug", price=12.49, quantity=1),
    ]

    result = await gateway.create_web_payment(items, "shopper@example.com")

    assert result.success
    assert result.redirect_url == "https://paynow.test/redirect"
    assert result.poll_url == "https://paynow.test/poll"
    assert result.reference.startswith("INV-")
    payment = sdk.instances[0].payments[0]
    assert payment.auth_email == "merchant@example.com"
    assert payment.lines == [("Charger", 4000), ("Mug", 1249)]


@pytest.mark.asyncio
async def test_web_payment_failure_is_returned_not_raised(gateway, sdk):
    sdk.instances[0].send_response = SimpleNamespace(success=False, error="Invalid integration")

    result = await gateway.create_web_payment([CartItem(id="a", name="A", price=1, quantity=1)], "x@y.z")

    assert not result.success
    assert result.error == "Invalid integration"


@pytest.mark.asyncio
async def test_mobile_payment_sends_phone_and_method(gateway, sdk):
    items = [CartItem(id="a", name="Charger", price=19.995, quantity=2)]

    result = await gateway.create_mobile_payment(items, "shopper@example.com", "0771111111", "onemoney")

    assert result.success
    assert result.instructions == "Approve on your phone"
    assert result.poll_url == "https://paynow.test/poll-mobile"
    assert result.status.value == "pending"
    assert sdk.instances[0].mobile_args == ("0771111111", "onemoney")
    assert sdk.instances[0].payments[0].auth_email == "shopper@example.com"
    assert sdk.instances[0].payments[0].lines == [("Charger", 39.99)]


@pytest.mark.asyncio
async def test_poll_status_reports_raw_status_and_errors(gateway, sdk):
    result = await gateway.poll_status("https://paynow.test/poll")
    assert result.success
    assert result.raw_status == "Paid"

    sdk.instances[0].status_response = ConnectionError("gateway unreachable")
    result = await gateway.poll_status("https://paynow.test/poll")
    assert not result.success
    assert result.error == "gateway unreachable"
