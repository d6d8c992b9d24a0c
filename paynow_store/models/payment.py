"""Payment models for the storefront.

Request and response bodies of the payment API use camelCase keys on the
wire (``paymentMethod``, ``pollUrl``, ``startTime``...). Models accept either
spelling when parsing.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .cart import CartItem


class PaymentMethod(str, Enum):
    WEB = "web"
    ECOCASH = "ecocash"
    ONEMONEY = "onemoney"
    # Generic "mobile money" choice from the checkout form
    MOBILE = "mobile"

    @property
    def is_mobile(self) -> bool:
        return self is not PaymentMethod.WEB

    @property
    def gateway_method(self) -> str:
        """Method name understood by the gateway for express checkout"""
        if self is PaymentMethod.MOBILE:
            return PaymentMethod.ECOCASH.value
        return self.value


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    FAILED = "failed"


class TestScenario(str, Enum):
    """Simulated mobile money outcomes, honoured outside production"""

    SUCCESS = "success"
    INSUFFICIENT = "insufficient"
    DELAYED = "delayed"
    CANCELLED = "cancelled"


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PaymentRequest(WireModel):
    """Checkout submission sent to the initiation endpoint"""
    items: list[CartItem] = Field(min_length=1)
    email: str
    payment_method: PaymentMethod = PaymentMethod.WEB
    phone: Optional[str] = None
    scenario: Optional[TestScenario] = None

    @property
    def total(self) -> float:
        return sum(item.line_total for item in self.items)


class PaymentInitiationResult(WireModel):
    """Gateway answer to a payment creation"""
    success: bool
    redirect_url: Optional[str] = None
    poll_url: Optional[str] = None
    instructions: Optional[str] = None
    reference: Optional[str] = None
    status: Optional[PaymentStatus] = None
    error: Optional[str] = None


class GatewayPollResult(WireModel):
    """Raw status reported by the gateway for a poll URL"""
    success: bool = True
    raw_status: Optional[str] = None
    error: Optional[str] = None


class StatusUpdateRequest(WireModel):
    """Poll request sent by the checkout while a mobile payment is pending"""
    poll_url: str
    phone: Optional[str] = None
    start_time: Optional[int] = None
    scenario: Optional[TestScenario] = None


class StatusUpdateResponse(WireModel):
    """Resolved view of a payment's status"""
    success: bool
    status: str
    message: Optional[str] = None


class ErrorResponse(WireModel):
    success: bool = False
    message: str
