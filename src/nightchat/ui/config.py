"""UI configuration constants."""

import logging

# --log-level values accepted by the chat command, mapped to logging levels
LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def parse_log_level(name: str) -> int:
    """Map a --log-level value to a logging level. Unknown names show everything."""
    return LOG_LEVELS.get(name.lower(), logging.DEBUG)


LEVEL_COLORS = {
    logging.DEBUG: "dim white",
    logging.INFO: "cyan",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
}

# Sidebar previews
LAST_MESSAGE_PREVIEW_LENGTH = 32

# Log panel
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500

TYPING_TEXT = "typing..."
