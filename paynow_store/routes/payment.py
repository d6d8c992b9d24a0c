"""Payment API routes for the storefront"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..models.payment import (
    ErrorResponse,
    PaymentInitiationResult,
    PaymentRequest,
    PaymentStatus,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from ..services.gateway import GatewayConfigurationError, PaymentGateway, PaynowGateway
from ..services.payments import PaymentService, PaymentValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payment", tags=["Payment"])

# Built on first use so the app can start without gateway credentials
gateway: Optional[PaymentGateway] = None


def get_gateway() -> PaymentGateway:
    """Get or create the PayNow gateway"""
    global gateway
    if gateway is None:
        gateway = PaynowGateway.from_settings(settings)
    return gateway


def get_payment_service() -> PaymentService:
    return PaymentService(
        gateway_factory=get_gateway,
        simulate_scenarios=not settings.is_production,
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


@router.post(
    "/initiate",
    response_model=PaymentInitiationResult,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def initiate_payment(
    request: PaymentRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Start a payment for the submitted cart.

    Web payments answer with the gateway's redirect URL. Mobile money
    payments answer with a poll URL and the instructions shown to the
    shopper while the prompt is on their phone.
    """
    try:
        result = await service.initiate(request)
    except PaymentValidationError as e:
        return _error(400, str(e))
    except GatewayConfigurationError:
        raise
    except Exception as e:
        logger.exception("Payment initiation error")
        return _error(500, str(e) or "Internal server error")

    if not result.success:
        return _error(400, result.error or "Payment initiation failed")

    return result


@router.post(
    "/update",
    response_model=StatusUpdateResponse,
    response_model_exclude_none=True,
)
async def update_payment_status(
    request: StatusUpdateRequest,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Report the current status of a mobile money payment.

    Always answers 200; ``success`` is true only once the payment is paid.
    """
    try:
        return await service.check_status(request)
    except GatewayConfigurationError as e:
        logger.error(f"Payment gateway unavailable: {e}")
        return StatusUpdateResponse(
            success=False,
            status=PaymentStatus.FAILED.value,
            message=str(e),
        )
    except Exception as e:
        logger.exception("Payment status error")
        return StatusUpdateResponse(
            success=False,
            status=PaymentStatus.FAILED.value,
            message=str(e) or "Failed to check payment status",
        )
