"""
Simulated mobile money outcomes.

Outside production the status endpoint answers from these rules instead of
asking the gateway, so each checkout path can be walked through without a
real handset. The reserved PayNow test numbers map onto the same scenarios;
the checkout client uses them to pick a scenario when the shopper types one
of those numbers.
"""

from typing import Optional

from ..models.payment import PaymentStatus, StatusUpdateResponse, TestScenario

SUCCESS_DELAY_MS = 5_000
SLOW_DELAY_MS = 30_000

TEST_PHONE_NUMBERS: dict[str, TestScenario] = {
    "0771111111": TestScenario.SUCCESS,
    "0772222222": TestScenario.DELAYED,
    "0773333333": TestScenario.CANCELLED,
    "0774444444": TestScenario.INSUFFICIENT,
}


def scenario_for_phone(phone: Optional[str]) -> Optional[TestScenario]:
    """Scenario reserved for a PayNow test number, if any"""
    if not phone:
        return None
    return TEST_PHONE_NUMBERS.get(phone.strip())


def _pending(message: str) -> StatusUpdateResponse:
    return StatusUpdateResponse(success=False, status=PaymentStatus.PENDING.value, message=message)


def _paid() -> StatusUpdateResponse:
    return StatusUpdateResponse(success=True, status=PaymentStatus.PAID.value)


def simulate_status(scenario: TestScenario, elapsed_ms: int) -> StatusUpdateResponse:
    """Status a simulated payment reports ``elapsed_ms`` after it started"""
    if scenario is TestScenario.SUCCESS:
        if elapsed_ms < SUCCESS_DELAY_MS:
            return _pending("Processing payment...")
        return _paid()

    if scenario is TestScenario.INSUFFICIENT:
        return StatusUpdateResponse(
            success=False,
            status=PaymentStatus.FAILED.value,
            message="Insufficient balance in your account",
        )

    if scenario is TestScenario.DELAYED:
        if elapsed_ms < SLOW_DELAY_MS:
            return _pending("Payment processing...")
        return _paid()

    if scenario is TestScenario.CANCELLED:
        if elapsed_ms < SLOW_DELAY_MS:
            return _pending("Waiting for customer response...")
        return StatusUpdateResponse(
            success=False,
            status=PaymentStatus.CANCELLED.value,
            message="Payment was cancelled by the user",
        )

    raise ValueError(f"Unknown test scenario: {scenario}")
