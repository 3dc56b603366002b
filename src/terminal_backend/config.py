"""Process configuration, read once at startup from the environment.

Values come from environment variables and an optional `.env` file (see
`.env.example`).
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import AliasChoices, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

TEST_ENV = "test"
PRODUCTION_ENV = "production"

DEFAULT_PORT = 4567
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RATE_LIMIT = "120/minute"
DEFAULT_INDEX_PATH = str(Path(__file__).parent / "static" / "index.html")

# Currency used when the client omits one
DEFAULT_CURRENCIES = {
    TEST_ENV: "usd",
    PRODUCTION_ENV: "eur",
}


def _normalize_env(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in ("production", "prod", "live"):
        return PRODUCTION_ENV
    return TEST_ENV


def _has_value(secret: Optional[SecretStr]) -> bool:
    return secret is not None and bool(secret.get_secret_value())


class Settings(BaseSettings):
    """Immutable view of the service configuration.

    Production mode uses STRIPE_SECRET_KEY. Test mode prefers
    STRIPE_TEST_SECRET_KEY and falls back to STRIPE_SECRET_KEY.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    stripe_env: str = TEST_ENV
    stripe_secret_key: Optional[SecretStr] = None
    stripe_test_secret_key: Optional[SecretStr] = None
    default_currency: str = DEFAULT_CURRENCIES[TEST_ENV]
    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536)
    request_timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        validation_alias=AliasChoices("request_timeout", "stripe_timeout"),
    )
    rate_limit: Optional[str] = DEFAULT_RATE_LIMIT
    log_level: str = "INFO"
    index_path: str = DEFAULT_INDEX_PATH

    @model_validator(mode="before")
    @classmethod
    def _apply_env_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        stripe_env = _normalize_env(data.get("stripe_env"))
        data["stripe_env"] = stripe_env

        currency = data.get("default_currency")
        data["default_currency"] = (currency or DEFAULT_CURRENCIES[stripe_env]).lower()

        rate_limit = data.get("rate_limit")
        if isinstance(rate_limit, str) and not rate_limit.strip():
            data["rate_limit"] = None

        if isinstance(data.get("log_level"), str):
            data["log_level"] = data["log_level"].upper()
        return data

    @property
    def is_test_mode(self) -> bool:
        return self.stripe_env == TEST_ENV

    @property
    def secret_key(self) -> Optional[SecretStr]:
        """The credential used for every Stripe call."""
        if self.stripe_env == PRODUCTION_ENV:
            return self.stripe_secret_key
        if _has_value(self.stripe_test_secret_key):
            return self.stripe_test_secret_key
        return self.stripe_secret_key


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """Read settings from the process environment and an optional .env file.

    Args:
        env_file: Path of the dotenv file. None skips it.

    Returns:
        The frozen Settings instance for this process.
    """
    return Settings(_env_file=env_file)


def startup_summary(settings: Settings) -> Dict[str, str]:
    """Describe which Stripe keys are configured without revealing them."""
    return {
        "STRIPE_ENV": settings.stripe_env,
        "STRIPE_TEST_SECRET_KEY": "[loaded]" if _has_value(settings.stripe_test_secret_key) else "(empty)",
        "STRIPE_SECRET_KEY": "[loaded]" if _has_value(settings.stripe_secret_key) else "(empty)",
    }
