"""Shared test fixtures and configuration."""

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from terminal_backend.api import create_app
from terminal_backend.config import Settings
from terminal_backend.connectors.base import ConnectorBase, ProcessorResponse


ENV_VARS = [
    "STRIPE_ENV",
    "STRIPE_SECRET_KEY",
    "STRIPE_TEST_SECRET_KEY",
    "DEFAULT_CURRENCY",
    "HOST",
    "PORT",
    "REQUEST_TIMEOUT",
    "STRIPE_TIMEOUT",
    "RATE_LIMIT",
    "LOG_LEVEL",
    "INDEX_PATH",
]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Keep the developer's Stripe environment out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings():
    """Build Settings from keyword arguments only, ignoring any .env file."""
    def _make(**overrides) -> Settings:
        values = {"rate_limit": None}
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    """Test mode settings with a usable secret key and no rate limit."""
    return make_settings(
        stripe_env="test",
        stripe_test_secret_key="sk_test_dummy_key_for_testing",
        default_currency="usd",
    )


@pytest.fixture
def mock_connector():
    """Connector double whose operations all succeed."""
    connector = MagicMock(spec=ConnectorBase)
    connector.create_connection_token.return_value = ProcessorResponse.success(
        id="pst_test_123", secret="pst_test_secret_abc"
    )
    intent = ProcessorResponse.success(id="pi_1234567890abcdefghijklmno", secret="pi_123_secret_456")
    connector.create_payment_intent.return_value = intent
    connector.capture_payment_intent.return_value = intent
    connector.cancel_payment_intent.return_value = intent
    return connector


@pytest.fixture
def client(settings, mock_connector):
    """Test client backed by the connector double."""
    return TestClient(create_app(settings, connector=mock_connector))


@pytest.fixture
def processor_failure():
    return ProcessorResponse.failure("Your card was declined.", "card_error")


@pytest.fixture
def mock_stripe_payment_intent():
    """Create a mock Stripe PaymentIntent."""
    mock_pi = MagicMock()
    mock_pi.id = "pi_1234567890abcdefghijklmno"
    mock_pi.client_secret = "pi_1234567890abcdefghijklmno_secret_xyz"
    mock_pi.status = "requires_payment_method"
    return mock_pi


@pytest.fixture
def mock_stripe_connection_token():
    """Create a mock Stripe Terminal ConnectionToken."""
    mock_token = MagicMock()
    mock_token.id = "pst_test_123"
    mock_token.secret = "pst_test_secret_abc"
    return mock_token
