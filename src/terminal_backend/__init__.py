# terminal_backend package
__version__ = "0.1.0"

from .config import Settings, load_settings
from .credentials import validate_secret_key
from .errors import TerminalBackendError, ConfigurationError, ProcessorError
from .api import create_app
