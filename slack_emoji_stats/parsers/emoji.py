"""
Emoji Payload Parser

Normalizes the JSON returned by Slack's emoji endpoints into EmojiRecord
lists.

Known response shapes:
    {"emoji": [{...}, ...]}                    already shaped records
    {"emoji": {"name": "url", ...}}            emoji.list name -> url map
    {"emoji_list": [...]} / {"emoji_list": {"name": {...}}}
    {"custom_emoji_total_count": n, "custom_emoji_list": [...] or {...}}
    {"ok": false, "error": "<code>"}          error sentinel

emoji.list marks aliases with an ``alias:<target>`` url.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..config import AUTH_EXPIRED_ERRORS
from ..exceptions import AuthExpiredError, SlackAPIError
from ..store.records import EmojiRecord


NO_EMOJI_DATA = "No emoji data found in Slack response"
ALIAS_PREFIX = "alias:"


class PayloadShape(Enum):
    """Which of the known response layouts a payload uses"""
    ERROR = "error"
    EMOJI_ARRAY = "emoji_array"
    EMOJI_MAP = "emoji_map"
    EMOJI_LIST_ARRAY = "emoji_list_array"
    EMOJI_LIST_MAP = "emoji_list_map"
    CUSTOM_EMOJI_ARRAY = "custom_emoji_array"
    CUSTOM_EMOJI_MAP = "custom_emoji_map"
    UNKNOWN = "unknown"


def is_auth_expired_error(code: Optional[str]) -> bool:
    return bool(code) and code in AUTH_EXPIRED_ERRORS


def describe_slack_error(code: Optional[str]) -> str:
    """User-facing message for a Slack error code"""
    if is_auth_expired_error(code):
        return (
            "Slack authentication expired. Copy a fresh curl command for "
            "emoji.adminList from your browser and try again."
        )
    return f"Slack API error: {code or 'Unknown Slack API error'}"


@dataclass
class IngestResult:
    """Outcome of turning an API payload into records"""
    records: List[EmojiRecord] = field(default_factory=list)
    shape: PayloadShape = PayloadShape.UNKNOWN
    error: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.records)

    @property
    def is_auth_expired(self) -> bool:
        return is_auth_expired_error(self.error)

    def raise_for_error(self):
        """Raise AuthExpiredError or SlackAPIError for an error payload."""
        if self.error is None:
            return
        if self.is_auth_expired:
            raise AuthExpiredError(self.error, self.message)
        raise SlackAPIError(self.error, self.message)

    def to_dict(self) -> Dict:
        return {
            'ok': self.ok,
            'shape': self.shape.value,
            'error': self.error,
            'message': self.message,
            'count': len(self.records),
            'emoji': [r.to_dict() for r in self.records],
        }


def classify_payload(payload: Any) -> PayloadShape:
    """Detect the layout of a Slack emoji response."""
    if not isinstance(payload, dict):
        return PayloadShape.UNKNOWN

    if payload.get("ok") is False:
        return PayloadShape.ERROR

    emoji = payload.get("emoji")
    if isinstance(emoji, list):
        return PayloadShape.EMOJI_ARRAY
    if isinstance(emoji, dict):
        return PayloadShape.EMOJI_MAP

    emoji_list = payload.get("emoji_list")
    if isinstance(emoji_list, list):
        return PayloadShape.EMOJI_LIST_ARRAY
    if isinstance(emoji_list, dict):
        return PayloadShape.EMOJI_LIST_MAP

    custom = payload.get("custom_emoji_list")
    if isinstance(custom, list):
        return PayloadShape.CUSTOM_EMOJI_ARRAY
    if isinstance(custom, dict):
        return PayloadShape.CUSTOM_EMOJI_MAP

    return PayloadShape.UNKNOWN


def _records_from_array(items: List[Any], missing_created: Any) -> List[EmojiRecord]:
    return [
        EmojiRecord.from_dict(item, missing_created)
        for item in items
        if isinstance(item, dict)
    ]


def _record_from_url(name: str, url: Any, missing_created: Any) -> EmojiRecord:
    url = url if isinstance(url, str) else ""
    data = {"name": name, "url": url, "created": missing_created}
    if url.startswith(ALIAS_PREFIX):
        data["is_alias"] = 1
        data["alias_for"] = url[len(ALIAS_PREFIX):]
    return EmojiRecord.from_dict(data, missing_created)


def _records_from_map(items: Dict[str, Any], missing_created: Any) -> List[EmojiRecord]:
    records = []
    for name, value in items.items():
        if isinstance(value, dict):
            records.append(EmojiRecord.from_dict({**value, "name": name}, missing_created))
        else:
            records.append(_record_from_url(name, value, missing_created))
    return records


_SHAPE_HANDLERS: Dict[PayloadShape, Callable[[Dict[str, Any], Any], List[EmojiRecord]]] = {
    PayloadShape.EMOJI_ARRAY: lambda p, mc: _records_from_array(p["emoji"], mc),
    PayloadShape.EMOJI_MAP: lambda p, mc: _records_from_map(p["emoji"], mc),
    PayloadShape.EMOJI_LIST_ARRAY: lambda p, mc: _records_from_array(p["emoji_list"], mc),
    PayloadShape.EMOJI_LIST_MAP: lambda p, mc: _records_from_map(p["emoji_list"], mc),
    PayloadShape.CUSTOM_EMOJI_ARRAY: lambda p, mc: _records_from_array(p["custom_emoji_list"], mc),
    PayloadShape.CUSTOM_EMOJI_MAP: lambda p, mc: _records_from_map(p["custom_emoji_list"], mc),
}


def normalize_emoji_payload(payload: Any, missing_created: Any = 0) -> IngestResult:
    """
    Turn a Slack emoji response into records.

    Never raises on content: error sentinels and unknown layouts come back as
    an IngestResult with ``error``/``message`` set and no records.

    Args:
        payload: Parsed JSON response
        missing_created: Value used when a record has no ``created``

    Returns:
        IngestResult with records, detected shape and any error
    """
    shape = classify_payload(payload)

    if shape is PayloadShape.ERROR:
        code = payload.get("error") or "unknown_error"
        return IngestResult(shape=shape, error=code, message=describe_slack_error(code))

    handler = _SHAPE_HANDLERS.get(shape)
    records = handler(payload, missing_created) if handler else []

    if not records:
        return IngestResult(shape=shape, message=NO_EMOJI_DATA)
    return IngestResult(records=records, shape=shape)
