"""Shared fixtures for slack-emoji-stats tests."""

from __future__ import annotations

import pytest

from slack_emoji_stats.stats.engine import DAY


# Copied from Chrome's "Copy as cURL (bash)": -b cookie flag and a raw
# multipart body instead of --form
CHROME_CURL = r"""curl 'https://acme.slack.com/api/emoji.adminList?_x_id=a1b2c3-1700000000.123&slack_route=T0123ABC&_x_version_ts=noversion&fp=5c&_x_num_retries=0' \
  -H 'accept: */*' \
  -H 'content-type: multipart/form-data; boundary=----WebKitFormBoundaryAbC123' \
  -b 'b=abc; d=xoxd-secret%2Bvalue; lc=123' \
  -H 'origin: https://app.slack.com' \
  --data-raw $'------WebKitFormBoundaryAbC123\r\nContent-Disposition: form-data; name="token"\r\n\r\nxoxc-1111-2222-3333-abcdef\r\n------WebKitFormBoundaryAbC123\r\nContent-Disposition: form-data; name="page"\r\n\r\n2\r\n------WebKitFormBoundaryAbC123\r\nContent-Disposition: form-data; name="count"\r\n\r\n100\r\n------WebKitFormBoundaryAbC123\r\nContent-Disposition: form-data; name="_x_reason"\r\n\r\ncustomize-emoji-new-query\r\n------WebKitFormBoundaryAbC123\r\nContent-Disposition: form-data; name="_x_mode"\r\n\r\nonline\r\n------WebKitFormBoundaryAbC123--\r\n'"""

# Postman / Insomnia export: --url, --header and --form, no _x_id
POSTMAN_CURL = r"""curl --request POST \
  --url 'https://acme.slack.com/api/emoji.adminList?slack_route=T0123ABC' \
  --header 'Cookie: d=xoxd-abc' \
  --form token=xoxc-9-8-7-ff \
  --form count=100"""


@pytest.fixture
def chrome_curl() -> str:
    """Browser-captured emoji.adminList command."""
    return CHROME_CURL


@pytest.fixture
def postman_curl() -> str:
    """API-client style emoji.adminList command."""
    return POSTMAN_CURL


@pytest.fixture
def now() -> int:
    """Fixed reference time (2023-11-14T22:13:20Z)."""
    return 1_700_000_000


@pytest.fixture
def sample_records(now: int) -> list[dict]:
    """Three creators, one alias."""
    return [
        {
            "name": "party_parrot",
            "url": "https://emoji.slack-edge.com/T0123ABC/party_parrot/1.gif",
            "is_alias": 0,
            "user_id": "U1",
            "user_display_name": "Alice",
            "created": now - 1 * DAY,
        },
        {
            "name": "shipit",
            "url": "https://emoji.slack-edge.com/T0123ABC/shipit/1.png",
            "is_alias": 0,
            "user_id": "U1",
            "user_display_name": "Alice",
            "created": now - 10 * DAY,
        },
        {
            "name": "lgtm",
            "url": "https://emoji.slack-edge.com/T0123ABC/lgtm/1.png",
            "is_alias": 0,
            "user_id": "U2",
            "user_display_name": "Bob",
            "created": now - 2 * DAY,
        },
        {
            "name": "parrot",
            "url": "alias:party_parrot",
            "is_alias": 1,
            "alias_for": "party_parrot",
            "user_id": "U2",
            "user_display_name": "Bob",
            "created": now,
        },
        {
            "name": "old_school",
            "url": "https://emoji.slack-edge.com/T0123ABC/old_school/1.png",
            "is_alias": 0,
            "user_id": "U3",
            "user_display_name": "Carol",
            "created": now - 60 * DAY,
        },
    ]


@pytest.fixture
def admin_list_payload(sample_records: list[dict]) -> dict:
    """emoji.adminList style response."""
    return {"ok": True, "emoji": sample_records, "custom_emoji_total_count": len(sample_records)}
