"""Tests for slack_emoji_stats.parsers.emoji module."""

from __future__ import annotations

import pytest

from slack_emoji_stats.exceptions import AuthExpiredError, SlackAPIError
from slack_emoji_stats.parsers.emoji import (
    NO_EMOJI_DATA,
    PayloadShape,
    classify_payload,
    describe_slack_error,
    normalize_emoji_payload,
)


class TestClassifyPayload:
    """Tests for classify_payload function."""

    @pytest.mark.parametrize("payload, shape", [
        ({"ok": False, "error": "invalid_auth"}, PayloadShape.ERROR),
        ({"emoji": []}, PayloadShape.EMOJI_ARRAY),
        ({"emoji": {}}, PayloadShape.EMOJI_MAP),
        ({"emoji_list": []}, PayloadShape.EMOJI_LIST_ARRAY),
        ({"emoji_list": {}}, PayloadShape.EMOJI_LIST_MAP),
        ({"custom_emoji_list": []}, PayloadShape.CUSTOM_EMOJI_ARRAY),
        ({"custom_emoji_list": {}}, PayloadShape.CUSTOM_EMOJI_MAP),
        ({"something": 1}, PayloadShape.UNKNOWN),
        (None, PayloadShape.UNKNOWN),
        ([1, 2], PayloadShape.UNKNOWN),
    ])
    def test_shapes(self, payload, shape: PayloadShape) -> None:
        """Should detect each known layout."""
        assert classify_payload(payload) is shape

    def test_error_checked_first(self) -> None:
        """Should treat ok=false as an error even with emoji data."""
        assert classify_payload({"ok": False, "error": "x", "emoji": []}) is PayloadShape.ERROR


class TestNormalizeEmojiPayload:
    """Tests for normalize_emoji_payload function."""

    def test_emoji_array(self, admin_list_payload: dict) -> None:
        """Should keep shaped records as they are."""
        result = normalize_emoji_payload(admin_list_payload)

        assert result.ok
        assert result.shape is PayloadShape.EMOJI_ARRAY
        assert [r.name for r in result.records] == [
            "party_parrot", "shipit", "lgtm", "parrot", "old_school",
        ]
        assert result.records[3].is_alias == 1
        assert result.records[3].alias_for == "party_parrot"

    def test_emoji_map_with_alias_urls(self) -> None:
        """Should turn a name -> url map into records and detect alias: urls."""
        result = normalize_emoji_payload({
            "ok": True,
            "emoji": {
                "party": "https://emoji.slack-edge.com/T1/party/1.gif",
                "yay": "alias:party",
            },
        })

        party, yay = result.records
        assert result.shape is PayloadShape.EMOJI_MAP
        assert party.name == "party"
        assert party.is_alias == 0
        assert party.user_id == ""
        assert party.created == 0
        assert yay.is_alias == 1
        assert yay.alias_for == "party"

    def test_emoji_list_map_of_objects(self) -> None:
        """Should take the name from the map key."""
        result = normalize_emoji_payload({
            "emoji_list": {"blob": {"url": "https://x/blob.png", "user_id": "U9", "created": 5}},
        })

        assert result.records[0].name == "blob"
        assert result.records[0].user_id == "U9"
        assert result.records[0].created == 5

    def test_custom_emoji_array(self) -> None:
        """Should read custom_emoji_list arrays and skip non-objects."""
        result = normalize_emoji_payload({
            "custom_emoji_total_count": 2,
            "custom_emoji_list": [{"name": "a", "image_url": "https://x/a.png"}, "junk"],
        })

        assert result.shape is PayloadShape.CUSTOM_EMOJI_ARRAY
        assert len(result.records) == 1
        assert result.records[0].url == "https://x/a.png"

    def test_missing_created_default(self) -> None:
        """Should use the given placeholder for absent created values."""
        result = normalize_emoji_payload({"emoji": {"a": "https://x/a.png"}}, missing_created=123)
        assert result.records[0].created == 123

    def test_unknown_shape(self) -> None:
        """Should report missing emoji data instead of raising."""
        result = normalize_emoji_payload({"ok": True, "channels": []})

        assert not result.ok
        assert result.error is None
        assert result.records == []
        assert result.message == NO_EMOJI_DATA

    def test_empty_list(self) -> None:
        """Should report an empty array as missing data."""
        result = normalize_emoji_payload({"emoji": []})

        assert not result.ok
        assert result.message == NO_EMOJI_DATA


class TestSlackErrors:
    """Tests for error sentinel handling."""

    def test_auth_expired(self) -> None:
        """Should flag invalid_auth as expired authentication."""
        result = normalize_emoji_payload({"ok": False, "error": "invalid_auth"})

        assert result.error == "invalid_auth"
        assert result.is_auth_expired
        assert "fresh curl command" in result.message
        with pytest.raises(AuthExpiredError):
            result.raise_for_error()

    def test_generic_error(self) -> None:
        """Should surface other codes as generic API errors."""
        result = normalize_emoji_payload({"ok": False, "error": "ratelimited"})

        assert not result.is_auth_expired
        assert result.message == "Slack API error: ratelimited"
        with pytest.raises(SlackAPIError) as exc_info:
            result.raise_for_error()
        assert not isinstance(exc_info.value, AuthExpiredError)
        assert exc_info.value.code == "ratelimited"

    def test_missing_error_code(self) -> None:
        """Should fill in a code when Slack omits it."""
        result = normalize_emoji_payload({"ok": False})
        assert result.error == "unknown_error"

    def test_describe_without_code(self) -> None:
        """Should describe a missing code."""
        assert describe_slack_error(None) == "Slack API error: Unknown Slack API error"

    def test_no_raise_on_success(self, admin_list_payload: dict) -> None:
        """Should not raise for a good payload."""
        normalize_emoji_payload(admin_list_payload).raise_for_error()

    def test_to_dict(self) -> None:
        """Should summarize the result."""
        data = normalize_emoji_payload({"ok": False, "error": "not_authed"}).to_dict()

        assert data["ok"] is False
        assert data["shape"] == "error"
        assert data["count"] == 0
