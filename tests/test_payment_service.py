import pytest

from paynow_store.models.payment import (
    PaymentMethod,
    PaymentRequest,
    StatusUpdateRequest,
    TestScenario as Scenario,
)
from paynow_store.services.payments import PaymentService, PaymentValidationError, normalize_status
from paynow_store.services.scenarios import scenario_for_phone, simulate_status


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Paid", "paid"),
        ("COMPLETE", "paid"),
        ("Confirmed", "paid"),
        ("Cancelled", "cancelled"),
        ("Failed", "failed"),
        ("Sent", "pending"),
        (None, "pending"),
        ("Awaiting Delivery", "awaiting delivery"),
    ],
)
def test_normalize_status(raw, expected):
    assert normalize_status(raw) == expected


def test_success_scenario_pays_after_five_seconds():
    assert simulate_status(Scenario.SUCCESS, 0).status == "pending"
    assert simulate_status(Scenario.SUCCESS, 4_999).status == "pending"
    paid = simulate_status(Scenario.SUCCESS, 5_000)
    assert paid.status == "paid"
    assert paid.success


def test_insufficient_scenario_fails_immediately():
    response = simulate_status(Scenario.INSUFFICIENT, 0)
    assert response.status == "failed"
    assert not response.success
    assert "Insufficient balance" in response.message


def test_slow_scenarios_resolve_after_thirty_seconds():
    assert simulate_status(Scenario.DELAYED, 29_999).status == "pending"
    assert simulate_status(Scenario.DELAYED, 30_000).status == "paid"
    assert simulate_status(Scenario.CANCELLED, 29_999).status == "pending"
    cancelled = simulate_status(Scenario.CANCELLED, 30_000)
    assert cancelled.status == "cancelled"
    assert cancelled.message == "Payment was cancelled by the user"


def test_reserved_test_numbers():
    assert scenario_for_phone("0771111111") is Scenario.SUCCESS
    assert scenario_for_phone(" 0774444444 ") is Scenario.INSUFFICIENT
    assert scenario_for_phone("0779999999") is None
    assert scenario_for_phone(None) is None


@pytest.mark.asyncio
async def test_mobile_initiation_requires_phone(payment_service, fake_gateway, items):
    request = PaymentRequest(items=items, email="a@b.c", payment_method=PaymentMethod.ECOCASH, phone="  ")

    with pytest.raises(PaymentValidationError, match="Phone number required for mobile payments"):
        await payment_service.initiate(request)
    assert fake_gateway.mobile_calls == []


@pytest.mark.asyncio
async def test_generic_mobile_method_goes_out_as_ecocash(payment_service, fake_gateway, items):
    request = PaymentRequest(items=items, email="a@b.c", payment_method=PaymentMethod.MOBILE, phone="0771234567")

    result = await payment_service.initiate(request)

    assert result.success
    assert fake_gateway.mobile_calls[0][2:] == ("0771234567", "ecocash")


@pytest.mark.asyncio
async def test_scenario_is_simulated_from_start_time(payment_service, fake_gateway, clock):
    start = clock.now_ms()
    request = StatusUpdateRequest(poll_url="poll", start_time=start, scenario=Scenario.SUCCESS)

    assert (await payment_service.check_status(request)).status == "pending"
    clock.advance(5)
    assert (await payment_service.check_status(request)).status == "paid"
    assert fake_gateway.poll_calls == []


@pytest.mark.asyncio
async def test_scenarios_ignored_when_simulation_disabled(fake_gateway, clock):
    service = PaymentService(fake_gateway, simulate_scenarios=False, clock=clock.now_ms)
    fake_gateway.raw_status = "Paid"

    response = await service.check_status(
        StatusUpdateRequest(poll_url="poll", start_time=clock.now_ms(), scenario=Scenario.INSUFFICIENT)
    )

    assert response.status == "paid"
    assert response.success
    assert fake_gateway.poll_calls == ["poll"]


@pytest.mark.asyncio
async def test_gateway_poll_failure_becomes_failed_status(payment_service, fake_gateway):
    fake_gateway.poll_error = "timeout talking to gateway"

    response = await payment_service.check_status(StatusUpdateRequest(poll_url="poll"))

    assert response.success is False
    assert response.status == "failed"
    assert response.message == "timeout talking to gateway"


@pytest.mark.asyncio
async def test_gateway_is_built_only_when_needed(fake_gateway, clock):
    built = []

    def factory():
        built.append(True)
        return fake_gateway

    service = PaymentService(gateway_factory=factory, clock=clock.now_ms)

    await service.check_status(
        StatusUpdateRequest(poll_url="poll", start_time=clock.now_ms(), scenario=Scenario.DELAYED)
    )
    assert built == []

    await service.check_status(StatusUpdateRequest(poll_url="poll"))
    await service.check_status(StatusUpdateRequest(poll_url="poll"))
    assert built == [True]
    assert fake_gateway.poll_calls == ["poll", "poll"]
