"""Tests for slack_emoji_stats.decoder.request module."""

from __future__ import annotations

import json

import pytest

from slack_emoji_stats.decoder.curl import parse_slack_curl
from slack_emoji_stats.decoder.request import (
    SlackRequest,
    build_slack_request,
    request_from_parsed,
)


def _fixed_id() -> str:
    return "gen-1.1"


class TestSlackRequest:
    """Tests for SlackRequest dataclass."""

    def test_get_drops_body(self) -> None:
        """Should strip form data and raw data from GET requests."""
        request = SlackRequest(
            url="https://x", method="get", headers={"a": "b"},
            form_data={"token": "t"}, data="token=t",
        ).for_dispatch()

        assert request.method == "GET"
        assert request.form_data is None
        assert request.data is None
        assert request.headers == {"a": "b"}

    def test_post_keeps_body(self) -> None:
        """Should keep the body and upper-case the method."""
        request = SlackRequest(url="https://x", method="post", form_data={"token": "t"}).for_dispatch()

        assert request.method == "POST"
        assert request.form_data == {"token": "t"}

    def test_to_dict_omits_absent_body(self) -> None:
        """Should only include formData/data when present."""
        assert SlackRequest(url="https://x").to_dict() == {"url": "https://x", "method": "GET", "headers": {}}

    def test_to_json(self) -> None:
        """Should serialize formData under its wire name."""
        request = SlackRequest(url="https://x", method="POST", form_data={"count": "20000"})
        assert json.loads(request.to_json())["formData"] == {"count": "20000"}


class TestBuildSlackRequest:
    """Tests for build_slack_request function."""

    def test_postman_command(self, postman_curl: str) -> None:
        """Should build a POST with headers and form data."""
        request = build_slack_request(postman_curl, _fixed_id)

        assert request.method == "POST"
        assert request.headers["Cookie"] == "d=xoxd-abc"
        assert request.headers["content-type"] == "multipart/form-data"
        assert request.form_data == {"token": "xoxc-9-8-7-ff", "count": "100"}
        assert request.url.endswith("&_x_id=gen-1.1")

    def test_chrome_command(self, chrome_curl: str) -> None:
        """Should use the -b cookie and the bare token from the body."""
        request = build_slack_request(chrome_curl, _fixed_id)

        assert request.method == "POST"
        assert request.headers["Cookie"] == "b=abc; d=xoxd-secret%2Bvalue; lc=123"
        assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
        assert request.form_data["token"] == "xoxc-1111-2222-3333-abcdef"
        assert request.form_data["count"] == "20000"
        assert "_x_id=a1b2c3-1700000000.123" in request.url
        assert request.data.startswith("------WebKitFormBoundary")

    def test_explicit_get_has_no_body(self) -> None:
        """Should never attach a body to an explicit GET."""
        request = build_slack_request(
            "curl -X GET 'https://acme.slack.com/api/emoji.list?token=xoxp-1'", _fixed_id
        )

        assert request.method == "GET"
        assert request.form_data is None
        assert request.data is None
        assert request.url == "https://acme.slack.com/api/emoji.list?token=xoxp-1&_x_id=gen-1.1"

    def test_defaults_to_get_for_other_endpoints(self) -> None:
        """Should use GET without form data or an emoji endpoint."""
        request = build_slack_request("curl 'https://acme.slack.com/api/users.list'", _fixed_id)
        assert request.method == "GET"

    def test_data_token_fallback(self) -> None:
        """Should lift the token out of a --data payload."""
        request = build_slack_request(
            "curl 'https://acme.slack.com/api/emoji.list' --data 'token=xoxb-7&x=1'", _fixed_id
        )

        assert request.method == "POST"
        assert request.form_data["token"] == "xoxb-7"
        assert request.data == "token=xoxb-7&x=1"

    def test_missing_url(self) -> None:
        """Should return an empty URL without raising."""
        assert build_slack_request("curl -H 'a: b'", _fixed_id).url == ""

    def test_rejects_non_string(self) -> None:
        """Should raise TypeError for a non-string argument."""
        with pytest.raises(TypeError):
            build_slack_request(42)


class TestRequestFromParsed:
    """Tests for request_from_parsed function."""

    def test_minimal_post(self, postman_curl: str) -> None:
        """Should build a form-encoded POST with token and count."""
        request = request_from_parsed(parse_slack_curl(postman_curl))

        assert request.method == "POST"
        assert request.headers == {
            "Content-Type": "application/x-www-form-urlencoded",
            "Cookie": "d=xoxd-abc",
        }
        assert request.form_data == {"token": "xoxc-9-8-7-ff", "count": "20000"}
        assert "_x_id=xoxd-abc" in request.url

    def test_keeps_url_x_id(self, chrome_curl: str) -> None:
        """Should leave an _x_id already on the URL alone."""
        request = request_from_parsed(parse_slack_curl(chrome_curl))
        assert "_x_id=a1b2c3-1700000000.123" in request.url
