import logging
from typing import Any, Dict, Optional

import stripe

from .base import ConnectorBase, PaymentIntentRequest, ProcessorResponse

logger = logging.getLogger(__name__)

MISSING_ID_MESSAGE = "Missing required param: payment_intent_id."
INVALID_ID_MESSAGE = "Invalid param: payment_intent_id must be a string."

# Checked in order, so subclasses come before StripeError
ERROR_TYPES = (
    (stripe.CardError, "card_error"),
    (stripe.InvalidRequestError, "invalid_request"),
    (stripe.AuthenticationError, "authentication_error"),
    (stripe.RateLimitError, "rate_limit"),
    (stripe.APIConnectionError, "connection_error"),
    (stripe.APIError, "api_error"),
)


def classify_stripe_error(error: stripe.StripeError) -> str:
    for error_class, error_type in ERROR_TYPES:
        if isinstance(error, error_class):
            return error_type
    return "stripe_error"


def _error_message(error: stripe.StripeError) -> str:
    return error.user_message or str(error)


def _check_intent_id(payment_intent_id: Any) -> Optional[ProcessorResponse]:
    if payment_intent_id is None or payment_intent_id == "":
        return ProcessorResponse.failure(MISSING_ID_MESSAGE, "invalid_request")
    if not isinstance(payment_intent_id, str):
        return ProcessorResponse.failure(INVALID_ID_MESSAGE, "invalid_request")
    return None


class StripeConnector(ConnectorBase):
    """
    Stripe Terminal connector using stripe-python. Each connector owns a
    StripeClient with its own key, a bounded request timeout and no network
    retries; nothing is set on the stripe module. A timeout surfaces as
    APIConnectionError, which is reported as a failed response like any other
    processor error.
    """

    def __init__(self, api_key: Optional[str], timeout: float = 30.0, client: Optional[stripe.StripeClient] = None):
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> stripe.StripeClient:
        # Built on first use so an app can start without a key and report it per request
        if self._client is None:
            self._client = stripe.StripeClient(
                self._api_key,
                http_client=stripe.RequestsClient(timeout=self._timeout),
                max_network_retries=0,
            )
        return self._client

    def _failed(self, operation: str, error: stripe.StripeError) -> ProcessorResponse:
        error_type = classify_stripe_error(error)
        message = _error_message(error)
        logger.warning(f"{operation} failed ({error_type}): {message}")
        return ProcessorResponse.failure(message, error_type)

    def create_connection_token(self) -> ProcessorResponse:
        try:
            token = self.client.v1.terminal.connection_tokens.create()
            return ProcessorResponse.success(id=getattr(token, "id", None), secret=token.secret)
        except stripe.StripeError as e:
            return self._failed("ConnectionToken creation", e)

    def create_payment_intent(self, request: PaymentIntentRequest) -> ProcessorResponse:
        params: Dict[str, Any] = {
            "payment_method_types": request.payment_method_types,
            "capture_method": request.capture_method,
            "amount": request.amount,
            "currency": request.currency.lower(),
            "description": request.description,
        }
        if request.receipt_email:
            params["receipt_email"] = request.receipt_email
        if request.payment_method_options:
            params["payment_method_options"] = request.payment_method_options
        try:
            pi = self.client.v1.payment_intents.create(params=params)
            return ProcessorResponse.success(id=pi.id, secret=pi.client_secret)
        except stripe.StripeError as e:
            return self._failed("PaymentIntent creation", e)

    def capture_payment_intent(self, payment_intent_id: str, amount_to_capture: Optional[Any] = None) -> ProcessorResponse:
        rejected = _check_intent_id(payment_intent_id)
        if rejected:
            return rejected
        try:
            if amount_to_capture is None:
                pi = self.client.v1.payment_intents.capture(payment_intent_id)
            else:
                pi = self.client.v1.payment_intents.capture(
                    payment_intent_id, params={"amount_to_capture": amount_to_capture}
                )
            return ProcessorResponse.success(id=pi.id, secret=pi.client_secret)
        except stripe.StripeError as e:
            return self._failed("Capture", e)

    def cancel_payment_intent(self, payment_intent_id: str) -> ProcessorResponse:
        # Only uncaptured PaymentIntents can be canceled
        rejected = _check_intent_id(payment_intent_id)
        if rejected:
            return rejected
        try:
            pi = self.client.v1.payment_intents.cancel(payment_intent_id)
            return ProcessorResponse.success(id=pi.id, secret=pi.client_secret)
        except stripe.StripeError as e:
            return self._failed("Cancel", e)
