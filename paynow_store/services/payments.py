"""
Payment Service

Server side of the checkout: routes an initiation to the right gateway
operation and turns gateway poll results into the status the checkout acts
on.
"""

import logging
import time
from typing import Callable, Optional

from ..models.payment import (
    PaymentInitiationResult,
    PaymentMethod,
    PaymentRequest,
    PaymentStatus,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from .gateway import GatewayConfigurationError, PaymentGateway, is_paid
from .scenarios import simulate_status

logger = logging.getLogger(__name__)

_STATUS_ALIASES: dict[str, PaymentStatus] = {
    "paid": PaymentStatus.PAID,
    "complete": PaymentStatus.PAID,
    "confirmed": PaymentStatus.PAID,
    "cancelled": PaymentStatus.CANCELLED,
    "canceled": PaymentStatus.CANCELLED,
    "failed": PaymentStatus.FAILED,
    "error": PaymentStatus.FAILED,
    "created": PaymentStatus.PENDING,
    "sent": PaymentStatus.PENDING,
    "pending": PaymentStatus.PENDING,
    "": PaymentStatus.PENDING,
}


class PaymentValidationError(ValueError):
    """Initiation request is missing a required field"""
    pass


def now_ms() -> int:
    return int(time.time() * 1000)


def normalize_status(raw_status: Optional[str]) -> str:
    """Lower-case a gateway status and fold known synonyms"""
    status = (raw_status or "").strip().lower()
    alias = _STATUS_ALIASES.get(status)
    return alias.value if alias else status


class PaymentService:
    """
    Initiates payments and reports their status.

    The gateway can be handed over ready-made or built on first use through
    ``gateway_factory``, so simulated status checks never need credentials.
    """

    def __init__(
        self,
        gateway: Optional[PaymentGateway] = None,
        simulate_scenarios: bool = True,
        clock: Callable[[], int] = now_ms,
        gateway_factory: Optional[Callable[[], PaymentGateway]] = None,
    ):
        self._gateway = gateway
        self._gateway_factory = gateway_factory
        self.simulate_scenarios = simulate_scenarios
        self._clock = clock

    @property
    def gateway(self) -> PaymentGateway:
        if self._gateway is None:
            if self._gateway_factory is None:
                raise GatewayConfigurationError("No payment gateway configured")
            self._gateway = self._gateway_factory()
        return self._gateway

    async def initiate(self, request: PaymentRequest) -> PaymentInitiationResult:
        """Create a web or mobile payment for a checkout submission"""
        logger.info(
            f"Payment initiation request: email={request.email} "
            f"method={request.payment_method.value} items={len(request.items)} "
            f"total={request.total:.2f}"
        )

        if request.payment_method is PaymentMethod.WEB:
            result = await self.gateway.create_web_payment(request.items, request.email)
        else:
            if not request.phone or not request.phone.strip():
                raise PaymentValidationError("Phone number required for mobile payments")
            result = await self.gateway.create_mobile_payment(
                request.items,
                request.email,
                request.phone.strip(),
                request.payment_method.gateway_method,
            )

        logger.info(
            f"PayNow response: success={result.success} reference={result.reference} "
            f"error={result.error}"
        )
        return result

    async def check_status(self, request: StatusUpdateRequest) -> StatusUpdateResponse:
        """Current status of a payment, simulated when a test scenario applies"""
        if self.simulate_scenarios and request.scenario is not None:
            elapsed = self._clock() - request.start_time if request.start_time else 0
            response = simulate_status(request.scenario, elapsed)
            logger.info(
                f"Simulated {request.scenario.value} payment after {elapsed}ms: {response.status}"
            )
            return response

        result = await self.gateway.poll_status(request.poll_url)
        if not result.success:
            return StatusUpdateResponse(
                success=False,
                status=PaymentStatus.FAILED.value,
                message=result.error or "Failed to check payment status",
            )

        status = normalize_status(result.raw_status)
        logger.info(f"Payment status for {request.poll_url}: {status}")
        return StatusUpdateResponse(
            success=is_paid(result.raw_status),
            status=status,
            message=result.error,
        )
