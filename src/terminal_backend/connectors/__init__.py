"""Payment processor connectors."""

from .base import (
    ConnectorBase,
    PaymentIntentRequest,
    ProcessorResponse,
    DEFAULT_PAYMENT_METHOD_TYPES,
    DEFAULT_DESCRIPTION,
)
from .stripe_connector import StripeConnector

__all__ = [
    "ConnectorBase",
    "PaymentIntentRequest",
    "ProcessorResponse",
    "DEFAULT_PAYMENT_METHOD_TYPES",
    "DEFAULT_DESCRIPTION",
    "StripeConnector",
]
