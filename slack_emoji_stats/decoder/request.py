"""
Slack Request Descriptor

Turns a curl command into the structured request handed to whatever performs
the HTTP call (url, method, headers, form fields, raw body).
"""

import json
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ..config import EMOJI_PAGE_SIZE, FORM_CONTENT_TYPE
from .curl import (
    DATA_PAYLOAD_PATTERN,
    ParsedCurlRequest,
    clean_command,
    extract_url,
    is_emoji_request,
    token_from_bare_xoxc,
)
from .xid import ensure_x_id, generate_x_id, x_id_from_command


HEADER_PATTERN = re.compile(r"(?<!\S)(?:--header|-H)\s+['\"]([^:'\"]+):\s*([^'\"]*)['\"]")
COOKIE_FLAG_PATTERN = re.compile(r"(?<!\S)(?:-b|--cookie)\s+['\"]([^'\"]+)['\"]")
METHOD_PATTERN = re.compile(r"(?<!\S)(?:--request|-X)\s+['\"]?([A-Za-z]+)['\"]?")
FORM_PATTERNS = (
    re.compile(r"(?<!\S)--form\s+([^\s='\"]+)=([^\s'\"]+)"),
    re.compile(r"(?<!\S)-F\s+['\"]?([^\s='\"]+)=([^\s'\"]+)['\"]?"),
    re.compile(r"(?<!\S)--form\s+['\"]([^\s='\"]+)=([^'\"]+)['\"]"),
)


@dataclass
class SlackRequest:
    """Request descriptor accepted by the dispatch layer"""
    url: str = ""
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    form_data: Optional[Dict[str, str]] = None
    data: Optional[str] = None

    def for_dispatch(self) -> "SlackRequest":
        """Return the request as it may go on the wire.

        A GET request never carries a body, so form fields and raw data are
        dropped here; every builder in this module goes through this method.
        """
        if self.method.upper() == "GET":
            return SlackRequest(url=self.url, method="GET", headers=dict(self.headers))
        return SlackRequest(
            url=self.url,
            method=self.method.upper(),
            headers=dict(self.headers),
            form_data=dict(self.form_data) if self.form_data else None,
            data=self.data,
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary, omitting an absent body"""
        result = {
            'url': self.url,
            'method': self.method,
            'headers': self.headers,
        }
        if self.form_data:
            result['formData'] = self.form_data
        if self.data is not None:
            result['data'] = self.data
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string"""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def _extract_headers(command: str) -> Dict[str, str]:
    headers = {}
    for match in HEADER_PATTERN.finditer(command):
        headers[match.group(1).strip()] = match.group(2).strip()
    return headers


def _has_header(headers: Dict[str, str], name: str) -> bool:
    return name.lower() in {k.lower() for k in headers}


def _extract_form_data(command: str) -> Dict[str, str]:
    form_data = {}
    for pattern in FORM_PATTERNS:
        for match in pattern.finditer(command):
            form_data[match.group(1).strip()] = match.group(2).strip()
    return form_data


def _extract_data(command: str) -> Optional[str]:
    match = DATA_PAYLOAD_PATTERN.search(command)
    if not match:
        return None
    return match.group(1) or match.group(2) or match.group(3)


def build_slack_request(
    curl_command: str,
    x_id_generator: Callable[[], str] = generate_x_id,
) -> SlackRequest:
    """
    Build a request descriptor straight from a curl command.

    Args:
        curl_command: Full curl command string
        x_id_generator: Factory used when the command carries no ``_x_id``

    Returns:
        SlackRequest ready for dispatch (GET requests have no body)
    """
    if not isinstance(curl_command, str):
        raise TypeError(f"curl command must be a string, not {type(curl_command).__name__}")

    command = clean_command(curl_command)
    url = extract_url(command) or ""

    method_match = METHOD_PATTERN.search(command)
    has_form_data = bool(re.search(r"(?<!\S)(?:--form|-F)\s", command))
    if method_match:
        method = method_match.group(1).upper()
    elif has_form_data or is_emoji_request(url):
        method = "POST"
    else:
        method = "GET"

    headers = _extract_headers(command)
    if not _has_header(headers, "cookie"):
        cookie_match = COOKIE_FLAG_PATTERN.search(command)
        if cookie_match:
            headers["Cookie"] = cookie_match.group(1).strip()

    if has_form_data and not _has_header(headers, "content-type"):
        headers["content-type"] = "multipart/form-data"

    form_data = _extract_form_data(command)
    data = _extract_data(command)

    if "token" not in form_data:
        url_token = re.search(r"[?&]token=([^&\s'\"]+)", url)
        data_token = re.search(r"token=([^&\s'\"]+)", data) if data else None
        if url_token:
            form_data["token"] = url_token.group(1)
        elif data_token:
            form_data["token"] = data_token.group(1)
        else:
            bare_token = token_from_bare_xoxc(command)
            if bare_token:
                form_data["token"] = bare_token

    if "emoji" in url and "count" not in form_data:
        form_data["count"] = EMOJI_PAGE_SIZE

    if url:
        url = ensure_x_id(url, x_id_from_command(url) or x_id_generator())

    request = SlackRequest(
        url=url,
        method=method,
        headers=headers,
        form_data=form_data or None,
        data=data,
    )
    return request.for_dispatch()


def request_from_parsed(parsed: ParsedCurlRequest) -> SlackRequest:
    """
    Build the minimal POST request for a parsed, valid command.

    Args:
        parsed: Parser output

    Returns:
        SlackRequest with a form-encoded token/count body
    """
    url = parsed.url or ""
    if url and parsed.x_id:
        url = ensure_x_id(url, x_id_from_command(url) or parsed.x_id)

    headers = {"Content-Type": FORM_CONTENT_TYPE}
    if parsed.cookie:
        headers["Cookie"] = parsed.cookie

    form_data = {}
    if parsed.token:
        form_data["token"] = parsed.token
    if "emoji" in url:
        form_data["count"] = EMOJI_PAGE_SIZE

    request = SlackRequest(url=url, method="POST", headers=headers, form_data=form_data or None)
    return request.for_dispatch()
