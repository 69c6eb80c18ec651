"""Chat session configuration constants.

Centralizes timing and demo-data sizes used by the session and simulator.
"""

# Simulated reply delay, drawn uniformly from [min, max)
REPLY_DELAY_MIN_SECONDS = 1.0
REPLY_DELAY_MAX_SECONDS = 3.0

# Demo session seeding
DEMO_CONTACT_COUNT = 8
INITIAL_HISTORY_LENGTH = 10  # Messages loaded for the first conversation at login
SELECTED_HISTORY_LENGTH = 8  # Messages loaded when switching conversations
HISTORY_SPACING_MINUTES = 10  # Gap between consecutive demo history messages

# Initial unread counts: a conversation starts unread with this probability
UNREAD_SEED_PROBABILITY = 0.3
UNREAD_SEED_MAX = 5  # Seeded counts are drawn from 1..UNREAD_SEED_MAX

# Identity record of the logged-in user
DEFAULT_SESSION_USER_ID = "1"
DEFAULT_AVATAR_URL = "/placeholder.svg?height=40&width=40"
IDENTITY_FILE_NAME = "nightchat-user.json"
