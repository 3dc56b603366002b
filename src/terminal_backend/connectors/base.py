from abc import ABC, abstractmethod
from typing import Optional, Any, List
from pydantic import BaseModel

DEFAULT_PAYMENT_METHOD_TYPES = ["card_present"]
DEFAULT_DESCRIPTION = "Terminal Transaction"


# Canonical models
class PaymentIntentRequest(BaseModel):
    amount: Any  # minor units, forwarded as received
    currency: str
    description: str = DEFAULT_DESCRIPTION
    receipt_email: Optional[str] = None
    payment_method_types: List[str] = DEFAULT_PAYMENT_METHOD_TYPES
    payment_method_options: Optional[Any] = None  # nested dict, forwarded as received
    capture_method: str = "automatic"


class ProcessorResponse(BaseModel):
    status: str  # succeeded|failed
    id: Optional[str] = None
    secret: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "succeeded"

    @classmethod
    def success(cls, id: Optional[str], secret: Optional[str]) -> "ProcessorResponse":
        return cls(status="succeeded", id=id, secret=secret)

    @classmethod
    def failure(cls, error: str, error_type: str) -> "ProcessorResponse":
        return cls(status="failed", error=error, error_type=error_type)


class ConnectorBase(ABC):
    """
    Terminal connector interface. Each method performs exactly one call to the
    processor and reports the outcome as a ProcessorResponse instead of raising.
    """

    @abstractmethod
    def create_connection_token(self) -> ProcessorResponse:
        """
        Issue a connection token for a card reader. `secret` holds the token.
        """
        raise NotImplementedError

    @abstractmethod
    def create_payment_intent(self, request: PaymentIntentRequest) -> ProcessorResponse:
        raise NotImplementedError

    @abstractmethod
    def capture_payment_intent(self, payment_intent_id: str, amount_to_capture: Optional[Any] = None) -> ProcessorResponse:
        """
        Capture a PaymentIntent in full, or partially when amount_to_capture is given.
        """
        raise NotImplementedError

    @abstractmethod
    def cancel_payment_intent(self, payment_intent_id: str) -> ProcessorResponse:
        raise NotImplementedError
