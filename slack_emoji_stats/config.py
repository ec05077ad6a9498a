"""
Default configuration for Slack Emoji Stats.

Module-level constants shared by the decoder, ingestion, storage and server
modules. Values that depend on the machine can be overridden through
environment variables or a DashboardConfig instance.
"""

import os

# API Server
API_HOST = os.environ.get("SLACK_EMOJI_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("SLACK_EMOJI_API_PORT", "8000"))

# Session storage (holds the raw curl command, keep it local)
DEFAULT_STORAGE_PATH = os.path.join(os.path.expanduser("~"), ".slack_emoji_stats.json")
STORAGE_PATH = os.environ.get("SLACK_EMOJI_STORAGE", DEFAULT_STORAGE_PATH)

# Canonical request
EMOJI_PAGE_SIZE = "20000"
DEFAULT_PAGE = "1"
DEFAULT_WORKSPACE = "workspace"
PLACEHOLDER_TOKEN = "xoxc-your-token"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

CANONICAL_URL_TEMPLATE = (
    "https://{workspace}.slack.com/api/emoji.adminList"
    "?_x_id={x_id}&slack_route={team_id}"
    "&_x_version_ts=noversion&fp=5c&_x_num_retries=0"
)

CANONICAL_HEADERS = [
    "accept: */*",
    "accept-language: en-US,en;q=0.9",
    "cache-control: no-cache",
    "origin: https://{workspace}.slack.com",
    "user-agent: Mozilla/5.0",
]

# Optional form fields carried over into the canonical command, in order
PASSTHROUGH_FORM_FIELDS = ("_x_reason", "_x_mode")

# Slack error codes whose remedy is capturing a fresh curl command
AUTH_EXPIRED_ERRORS = frozenset({
    "invalid_auth",
    "not_authed",
    "token_expired",
    "token_revoked",
})

# Persisted state keys (flat key-value layout)
STORAGE_KEYS = (
    "emojiData",
    "workspace",
    "emojiCount",
    "lastFetchTime",
    "slackCurlCommand",
)
