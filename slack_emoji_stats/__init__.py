"""
Slack Emoji Stats

Turns a curl command copied from the browser's network tab into custom emoji
statistics for a Slack workspace.

Quick start (library usage):
    from slack_emoji_stats import parse_slack_curl, normalize_emoji_payload
    from slack_emoji_stats import calculate_emoji_stats, get_user_leaderboard

    parsed = parse_slack_curl(curl_command)
    if parsed.is_valid:
        result = normalize_emoji_payload(response_json)
        result.raise_for_error()
        stats = calculate_emoji_stats(result.records, now=time.time())

Or run the API server:
    python run_server.py
"""

from .decoder import (
    CurlCommandNormalizer,
    CurlCommandParser,
    ParsedCurlRequest,
    SlackRequest,
    build_slack_request,
    normalize_slack_curl,
    parse_slack_curl,
)
from .exceptions import AuthExpiredError, SlackAPIError, SlackEmojiStatsError, StorageError
from .ingest import fetch_emoji_records
from .parsers import IngestResult, normalize_emoji_payload
from .stats import (
    EmojiStats,
    UserWithEmojiCount,
    calculate_emoji_stats,
    filter_non_alias_emojis,
    get_user_leaderboard,
)
from .store import DataSource, EmojiRecord, EmojiRecordStore, SessionStorage

__version__ = "1.0.0"
__all__ = [
    "CurlCommandNormalizer",
    "CurlCommandParser",
    "ParsedCurlRequest",
    "SlackRequest",
    "build_slack_request",
    "normalize_slack_curl",
    "parse_slack_curl",
    "AuthExpiredError",
    "SlackAPIError",
    "SlackEmojiStatsError",
    "StorageError",
    "fetch_emoji_records",
    "IngestResult",
    "normalize_emoji_payload",
    "EmojiStats",
    "UserWithEmojiCount",
    "calculate_emoji_stats",
    "filter_non_alias_emojis",
    "get_user_leaderboard",
    "DataSource",
    "EmojiRecord",
    "EmojiRecordStore",
    "SessionStorage",
    "create_app",
]


def __getattr__(name):
    """Lazy import for the API server.

    create_app pulls in FastAPI and pydantic, which library users that only
    parse commands or compute stats do not need.
    """
    if name == "create_app":
        from .server import create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
