"""
PayNow Gateway Adapter

Wraps the PayNow SDK behind a small interface:
- web payments (hosted page, browser redirect)
- mobile money express checkout (EcoCash, OneMoney)
- transaction status polling

Nothing raised by the SDK crosses this boundary. Failures come back as
results with ``success=False`` and an error message.
"""

import logging
import secrets
import string
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from paynow import Paynow
from starlette.concurrency import run_in_threadpool

from ..core.config import Settings
from ..models.cart import CartItem
from ..models.payment import GatewayPollResult, PaymentInitiationResult, PaymentStatus

logger = logging.getLogger(__name__)

PAID_STATUSES = frozenset({"paid", "complete", "confirmed"})

_REFERENCE_ALPHABET = string.ascii_lowercase + string.digits


class GatewayConfigurationError(Exception):
    """Gateway credentials are missing or invalid"""
    pass


def generate_reference() -> str:
    """Transaction reference in the form INV-xxxxxxxxx"""
    suffix = "".join(secrets.choice(_REFERENCE_ALPHABET) for _ in range(9))
    return f"INV-{suffix}"


def to_minor_units(price: float, quantity: int) -> int:
    """
    Convert a line to integer cents.

    The unit price is rounded to cents first and only then multiplied by
    the quantity, so 19.995 x 2 gives 4000 and not 3999.
    """
    cents = (Decimal(str(price)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(cents) * quantity


def line_amount(price: float, quantity: int) -> float:
    """Line amount in currency units, rounded to cents"""
    amount = Decimal(str(price)) * quantity
    return float(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def is_paid(raw_status: Optional[str]) -> bool:
    return (raw_status or "").strip().lower() in PAID_STATUSES


class PaymentGateway(ABC):
    """Operations the checkout needs from a payment gateway"""

    @abstractmethod
    async def create_web_payment(
        self,
        items: Sequence[CartItem],
        email: str,
    ) -> PaymentInitiationResult:
        """Create a hosted-page payment and return its redirect URL."""

    @abstractmethod
    async def create_mobile_payment(
        self,
        items: Sequence[CartItem],
        email: str,
        phone: str,
        method: str,
    ) -> PaymentInitiationResult:
        """Push an express checkout prompt to the customer's phone."""

    @abstractmethod
    async def poll_status(self, poll_url: str) -> GatewayPollResult:
        """Fetch the current status of a payment."""


class PaynowGateway(PaymentGateway):
    """PaymentGateway backed by the PayNow SDK"""

    def __init__(
        self,
        integration_id: Optional[str],
        integration_key: Optional[str],
        merchant_email: str = "",
        result_url: str = "/api/payment/update",
        return_url: str = "/payment/success",
    ):
        if not integration_id or not integration_key:
            raise GatewayConfigurationError(
                "PayNow credentials not found in environment variables"
            )

        self.merchant_email = merchant_email
        self._paynow = Paynow(integration_id, integration_key, return_url, result_url)
        logger.info(f"PayNow gateway initialized for integration {integration_id}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "PaynowGateway":
        return cls(
            integration_id=settings.paynow_integration_id,
            integration_key=settings.paynow_integration_key,
            merchant_email=settings.paynow_merchant_email,
            result_url=settings.paynow_result_url,
            return_url=settings.paynow_return_url,
        )

    async def create_web_payment(
        self,
        items: Sequence[CartItem],
        email: str,
    ) -> PaymentInitiationResult:
        reference = generate_reference()
        try:
            # Web payments are billed to the merchant account email
            payment = self._paynow.create_payment(reference, self.merchant_email or email)
            for item in items:
                payment.add(item.name, to_minor_units(item.price, item.quantity))

            response = await run_in_threadpool(self._paynow.send, payment)
            if not getattr(response, "success", False):
                raise RuntimeError(getattr(response, "error", None) or "Payment initiation failed")

            return PaymentInitiationResult(
                success=True,
                redirect_url=getattr(response, "redirect_url", None),
                poll_url=getattr(response, "poll_url", None),
                reference=reference,
            )
        except Exception as e:
            logger.error(f"Web payment {reference} failed: {e}")
            return PaymentInitiationResult(
                success=False,
                error=str(e) or "Unknown error",
                reference=reference,
            )

    async def create_mobile_payment(
        self,
        items: Sequence[CartItem],
        email: str,
        phone: str,
        method: str,
    ) -> PaymentInitiationResult:
        reference = generate_reference()
        try:
            payment = self._paynow.create_payment(reference, email)
            for item in items:
                payment.add(item.name, line_amount(item.price, item.quantity))

            response = await run_in_threadpool(self._paynow.send_mobile, payment, phone, method)
            if not getattr(response, "success", False):
                raise RuntimeError(getattr(response, "error", None) or "Payment initiation failed")

            return PaymentInitiationResult(
                success=True,
                instructions=getattr(response, "instructions", None),
                poll_url=getattr(response, "poll_url", None),
                status=PaymentStatus.PENDING,
                reference=reference,
            )
        except Exception as e:
            logger.error(f"Mobile payment {reference} via {method} failed: {e}")
            return PaymentInitiationResult(
                success=False,
                error=str(e) or "Unknown error",
                status=PaymentStatus.FAILED,
            )

    async def poll_status(self, poll_url: str) -> GatewayPollResult:
        try:
            status = await run_in_threadpool(self._paynow.check_transaction_status, poll_url)
        except Exception as e:
            logger.error(f"Status check failed for {poll_url}: {e}")
            return GatewayPollResult(
                success=False,
                error=str(e) or "Failed to check payment status",
            )

        logger.debug(f"PayNow status response: {vars(status) if hasattr(status, '__dict__') else status}")
        return GatewayPollResult(
            raw_status=getattr(status, "status", None),
            error=getattr(status, "error", None),
        )
