"""Error types surfaced to HTTP callers."""


class TerminalBackendError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(TerminalBackendError):
    """The configured secret key is missing or unusable. Never reaches Stripe."""

    status_code = 400


class ProcessorError(TerminalBackendError):
    """Stripe rejected or failed the operation."""

    status_code = 402

    def __init__(self, message: str, error_type: str = "stripe_error"):
        super().__init__(message)
        self.error_type = error_type
