import os
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import FileResponse, JSONResponse, Response

from . import __version__
from .config import Settings, load_settings
from .connectors.base import ConnectorBase, PaymentIntentRequest, DEFAULT_PAYMENT_METHOD_TYPES, DEFAULT_DESCRIPTION
from .connectors.stripe_connector import StripeConnector
from .credentials import validate_secret_key
from .errors import TerminalBackendError, ConfigurationError, ProcessorError
from .params import request_params, as_list, as_amount
from .ratelimit import install_rate_limiter

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, POST, OPTIONS"
ALLOWED_HEADERS = "Authorization, Content-Type, Accept, X-User-Email, X-Auth-Token"

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_connector(request: Request) -> ConnectorBase:
    return request.app.state.connector


def require_valid_key(settings: Settings) -> None:
    """Raise ConfigurationError if the secret key cannot be used with Stripe."""
    error = validate_secret_key(settings.secret_key, test_mode=settings.is_test_mode)
    if error:
        raise ConfigurationError(error)


def _intent_body(response) -> Dict[str, Optional[str]]:
    return {"intent": response.id, "secret": response.secret}


def index(settings: Settings = Depends(get_settings)):
    if not os.path.isfile(settings.index_path):
        raise HTTPException(status_code=404, detail="index.html not found")
    return FileResponse(settings.index_path, media_type="text/html")


def health(settings: Settings = Depends(get_settings)):
    return {"status": "healthy", "stripe_env": settings.stripe_env, "version": __version__}


def preflight(path: str):
    return Response(
        status_code=200,
        headers={
            "Allow": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
        },
    )


def connection_token(
    settings: Settings = Depends(get_settings),
    connector: ConnectorBase = Depends(get_connector),
):
    """Issue a Stripe Terminal connection token for a reader."""
    logger.info(">> /connection_token requested")
    require_valid_key(settings)

    response = connector.create_connection_token()
    if not response.ok:
        raise ProcessorError(f"ConnectionToken error: {response.error}", response.error_type)

    logger.info(f"Token created: {response.id}")
    return {"secret": response.secret}


def create_payment_intent(
    params: Dict[str, Any] = Depends(request_params),
    settings: Settings = Depends(get_settings),
    connector: ConnectorBase = Depends(get_connector),
):
    """Create a card_present PaymentIntent for the reader to collect."""
    logger.info(">> /create_payment_intent called")
    logger.debug(f"Incoming params: {params}")
    require_valid_key(settings)

    request = PaymentIntentRequest(
        amount=as_amount(params.get("amount")),
        currency=str(params.get("currency") or settings.default_currency),
        description=str(params.get("description") or DEFAULT_DESCRIPTION),
        receipt_email=str(params["receipt_email"]) if params.get("receipt_email") else None,
        payment_method_types=as_list(params.get("payment_method_types")) or DEFAULT_PAYMENT_METHOD_TYPES,
        payment_method_options=params.get("payment_method_options") or None,
        capture_method=str(params.get("capture_method") or "automatic"),
    )
    response = connector.create_payment_intent(request)
    if not response.ok:
        raise ProcessorError(f"PaymentIntent creation failed: {response.error}", response.error_type)

    logger.info(f"PaymentIntent created: {response.id}")
    return _intent_body(response)


def capture_payment_intent(
    params: Dict[str, Any] = Depends(request_params),
    settings: Settings = Depends(get_settings),
    connector: ConnectorBase = Depends(get_connector),
):
    """Capture a PaymentIntent, partially when amount_to_capture is given."""
    logger.info(">> /capture_payment_intent called")
    require_valid_key(settings)

    payment_intent_id = params.get("payment_intent_id")
    amount_to_capture = params.get("amount_to_capture")
    if amount_to_capture in ("", None):
        amount_to_capture = None
    else:
        amount_to_capture = as_amount(amount_to_capture)

    response = connector.capture_payment_intent(payment_intent_id, amount_to_capture=amount_to_capture)
    if not response.ok:
        raise ProcessorError(f"Capture failed: {response.error}", response.error_type)

    logger.info(f"Captured PaymentIntent: {payment_intent_id}")
    return _intent_body(response)


def cancel_payment_intent(
    params: Dict[str, Any] = Depends(request_params),
    settings: Settings = Depends(get_settings),
    connector: ConnectorBase = Depends(get_connector),
):
    logger.info(">> /cancel_payment_intent called")
    require_valid_key(settings)

    payment_intent_id = params.get("payment_intent_id")
    response = connector.cancel_payment_intent(payment_intent_id)
    if not response.ok:
        raise ProcessorError(f"Cancel failed: {response.error}", response.error_type)

    logger.info(f"Canceled PaymentIntent: {payment_intent_id}")
    return _intent_body(response)


ROUTES = [
    ("/", index, ["GET"]),
    ("/health", health, ["GET"]),
    ("/connection_token", connection_token, ["POST"]),
    ("/create_payment_intent", create_payment_intent, ["POST"]),
    ("/capture_payment_intent", capture_payment_intent, ["POST"]),
    ("/cancel_payment_intent", cancel_payment_intent, ["POST"]),
    ("/{path:path}", preflight, ["OPTIONS"]),
]


async def handle_backend_error(request: Request, exc: TerminalBackendError) -> JSONResponse:
    error_type = getattr(exc, "error_type", "configuration")
    logger.error(f"{request.method} {request.url.path} -> {exc.status_code} ({error_type}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(settings: Optional[Settings] = None, connector: Optional[ConnectorBase] = None) -> FastAPI:
    """Build the HTTP application.

    Args:
        settings: Process configuration. Read from the environment when omitted.
        connector: Processor connector. A StripeConnector using the configured
            secret key is created when omitted.

    Returns:
        The configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()
    if connector is None:
        api_key = settings.secret_key.get_secret_value() if settings.secret_key else None
        connector = StripeConnector(api_key=api_key, timeout=settings.request_timeout)

    app = FastAPI(title="Terminal Backend", version=__version__)
    app.state.settings = settings
    app.state.connector = connector

    # Registered on the app itself so the rate limiter can resolve each endpoint
    for path, endpoint, methods in ROUTES:
        app.add_api_route(path, endpoint, methods=methods)
    app.add_exception_handler(TerminalBackendError, handle_backend_error)
    install_rate_limiter(app, settings.rate_limit)

    # Registered last so it wraps every other middleware, rate limiting included
    @app.middleware("http")
    async def allow_any_origin(request: Request, call_next):
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    return app
