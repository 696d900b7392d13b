"""UI configuration constants.

Centralizes magic numbers and configuration values for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Streaming configuration
STREAM_BUFFER_THRESHOLD = 50  # Characters before flushing stream buffer

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages

# Placeholders
CATALOG_PLACEHOLDER = "Select a category to view products"
SELECTION_PLACEHOLDER = "No products selected yet."
CHAT_PLACEHOLDER = "Pick some products, then press Generate Routine."

# Widget id prefixes, keyed by product id
PRODUCT_ID_PREFIX = "product-"
PILL_ID_PREFIX = "pill-"

# Theme names registered with the app
DARK_THEME_NAME = "advisor-dark"
LIGHT_THEME_NAME = "advisor-light"
