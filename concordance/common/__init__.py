# Common utilities
from .config_loader import load_config, load_options
from .constants import CRLF, ESCAPED_QUOTE, QUOTE, SEPARATOR
from .log_config import setup_logging
