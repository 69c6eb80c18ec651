"""Completion endpoint configuration constants."""

# Generation defaults applied when the caller omits or mangles a value
DEFAULT_MAX_TOKENS = 500
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.9

# Client-visible error payloads
INVALID_MESSAGES_ERROR = "'messages' must be an array of message objects"
GENERIC_ERROR = "There was an error processing your request"

# Content type of the streamed completion body
STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"

CHAT_ROUTE = "/api/chat"
