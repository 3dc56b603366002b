"""Secret key shape checks performed before any Stripe call."""

from typing import Optional, Union

from pydantic import SecretStr

PUBLISHABLE_KEY_PREFIX = "pk"
LIVE_SECRET_KEY_PREFIX = "sk_live"

EMPTY_KEY_MESSAGE = (
    "Error: you provided an empty secret key. Please provide your test mode secret key."
)
PUBLISHABLE_KEY_MESSAGE = (
    "Error: you used a publishable key. Use your test mode *secret* key."
)
LIVE_KEY_IN_TEST_MODE_MESSAGE = (
    "Error: you used a live mode secret key while STRIPE_ENV is test. "
    "Use your test mode secret key."
)


def validate_secret_key(key: Union[str, SecretStr, None], test_mode: bool = False) -> Optional[str]:
    """Check the configured secret key.

    Args:
        key: The secret key, plain or wrapped in SecretStr, or None when not configured.
        test_mode: Reject live mode keys as well.

    Returns:
        None if the key is acceptable, otherwise the rejection message.
    """
    if isinstance(key, SecretStr):
        key = key.get_secret_value()
    if not key:
        return EMPTY_KEY_MESSAGE
    if key.startswith(PUBLISHABLE_KEY_PREFIX):
        return PUBLISHABLE_KEY_MESSAGE
    if test_mode and key.startswith(LIVE_SECRET_KEY_PREFIX):
        return LIVE_KEY_IN_TEST_MODE_MESSAGE
    return None
