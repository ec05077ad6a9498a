"""
Parsers module for Slack API responses.

- emoji.py: Normalize emoji endpoint payloads into EmojiRecord lists
"""

from .emoji import (
    IngestResult,
    PayloadShape,
    classify_payload,
    describe_slack_error,
    normalize_emoji_payload,
)
