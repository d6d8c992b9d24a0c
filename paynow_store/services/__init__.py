# Services

from .gateway import PaymentGateway, PaynowGateway, GatewayConfigurationError
from .payments import PaymentService, PaymentValidationError
from .store_client import StoreClient, StoreClientError
from .checkout import CheckoutOrchestrator, CheckoutForm, CheckoutState, Navigator, PollScheduler

__all__ = [
    "PaymentGateway",
    "PaynowGateway",
    "GatewayConfigurationError",
    "PaymentService",
    "PaymentValidationError",
    "StoreClient",
    "StoreClientError",
    "CheckoutOrchestrator",
    "CheckoutForm",
    "CheckoutState",
    "Navigator",
    "PollScheduler",
]
