from __future__ import annotations

SERVICE_NAME = "roblox-username-bot"

GIST_API_BASE = "https://api.github.com"
GIST_USER_AGENT = "Roblox-Username-Bot"
GIST_ACCEPT = "application/vnd.github.v3+json"
GIST_TIMEOUT_SECONDS = 15.0
MAX_CONFLICT_RETRIES = 2

RECORD_MIN_LEN = 3
RECORD_MAX_LEN = 20
CLOSE_MARKER = "}"
RECORD_INDENT = "    "

# Prefix-era builds showed 10 names; slash-era builds showed 15.
LIST_DISPLAY_LIMIT = 10
SLASH_LIST_DISPLAY_LIMIT = 15

COMMAND_PREFIX = "!"
ACTIVITY_TEXT = "!help | Adding Roblox usernames"
INVITE_PERMISSIONS = 274878024704

DISCORD_MAX_MESSAGE_LEN = 1900  # keep under 2000 hard limit
HEALTH_HOST = "0.0.0.0"
