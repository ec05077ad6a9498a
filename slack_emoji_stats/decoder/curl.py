"""
Slack Curl Command Parser

Extracts the token, cookie, workspace, team id and anti-replay id from a curl
command copied out of a browser's network inspector.

Captured commands differ by browser and version (quoted or bare URL, -H or
--header, -b or Cookie headers, --form or a raw multipart --data-raw body), so
every field is read by an ordered tuple of small strategies and the first one
that matches wins. Nothing here is a shell grammar; it is a tolerant scanner.
"""

import re
from dataclasses import dataclass, asdict, replace
from typing import Callable, Dict, List, Optional, Sequence

from ..config import DEFAULT_WORKSPACE
from .xid import D_COOKIE_VALUE_PATTERN, generate_x_id, resolve_x_id


Strategy = Callable[[str], Optional[str]]

MISSING_URL = "Missing URL"
MISSING_AUTH_OR_WORKSPACE = "Missing required authentication or workspace information"


@dataclass
class ParsedCurlRequest:
    """Authentication material extracted from a curl command"""
    url: Optional[str] = None
    token: Optional[str] = None
    cookie: Optional[str] = None
    workspace: Optional[str] = None
    team_id: Optional[str] = None
    x_id: Optional[str] = None
    is_emoji_list_request: bool = False
    is_valid: bool = False
    error: Optional[str] = None

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return asdict(self)

    def masked(self) -> "ParsedCurlRequest":
        """Copy with token and cookie shortened, safe to print"""
        return replace(self, token=mask_secret(self.token), cookie=mask_secret(self.cookie))


def mask_secret(value: Optional[str], visible: int = 10) -> Optional[str]:
    """Keep the first few characters of a secret."""
    if not value:
        return value
    return value[:visible] + "..."


def clean_command(command: str) -> str:
    """Join shell line continuations so flags and URLs are contiguous"""
    return re.sub(r"\s*\\\s*\n\s*", " ", command).strip()


def first_match(strategies: Sequence[Strategy], command: str) -> Optional[str]:
    """Run strategies in order and return the first non-empty result."""
    for strategy in strategies:
        value = strategy(command)
        if value:
            return value
    return None


def _search(pattern: str, command: str, group: int = 1, flags: int = 0) -> Optional[str]:
    match = re.search(pattern, command, flags)
    return match.group(group) if match else None


# URL

def url_from_url_flag(command: str) -> Optional[str]:
    """--url '<url>'"""
    return _search(r"--url\s+['\"]([^'\"]+)['\"]", command, flags=re.I)


def url_from_quoted_curl(command: str) -> Optional[str]:
    """curl '<url>' (Chrome / Firefox style)"""
    return _search(r"curl\s+['\"]([^'\"]+)['\"]", command, flags=re.I)


def url_from_bare_curl(command: str) -> Optional[str]:
    """curl https://... without quotes"""
    return _search(r"curl\S*\s+(https://[^\s'\"]+)", command, flags=re.I)


def url_from_any_https(command: str) -> Optional[str]:
    """First https:// URL anywhere in the text"""
    return _search(r"https://[^'\"\s]+", command, group=0, flags=re.I)


URL_STRATEGIES = (
    url_from_url_flag,
    url_from_quoted_curl,
    url_from_bare_curl,
    url_from_any_https,
)


def extract_url(command: str) -> Optional[str]:
    return first_match(URL_STRATEGIES, command)


# Token

DATA_PAYLOAD_PATTERN = re.compile(
    r"(?<!\S)(?:--data(?:-raw|-binary|-urlencode|-ascii)?|-d)\s+\$?"
    r"(?:'([^']*)'|\"([^\"]*)\"|(\S+))"
)


def token_from_form_flag(command: str) -> Optional[str]:
    """--form token=<v>"""
    return _search(r"--form\s+token=([^\s'\"]+)", command)


def token_from_quoted_form_flag(command: str) -> Optional[str]:
    """--form 'token=<v>'"""
    return _search(r"--form\s+['\"]token=([^'\"]+)['\"]", command)


def token_from_short_form_flag(command: str) -> Optional[str]:
    """-F 'token=<v>' or -F token=<v>"""
    return _search(r"(?<!\S)-F\s+['\"]?token=([^\s'\"]+)['\"]?", command)


def token_from_url_query(command: str) -> Optional[str]:
    """?token= or &token= in the request URL"""
    url = extract_url(command)
    if not url:
        return None
    return _search(r"[?&]token=([^&\s'\"]+)", url)


def token_from_data_payload(command: str) -> Optional[str]:
    """token= inside a --data / --data-raw / -d payload"""
    for match in DATA_PAYLOAD_PATTERN.finditer(command):
        payload = match.group(1) or match.group(2) or match.group(3) or ""
        token = _search(r"(?:^|[&\s])token=([^&\s'\"]+)", payload)
        if token:
            return token
    return None


def token_from_bearer_header(command: str) -> Optional[str]:
    """Authorization: Bearer <v>"""
    return _search(
        r"(?<!\S)(?:-H|--header)\s+['\"]Authorization:\s*Bearer\s+([^'\"\s]+)['\"]",
        command,
        flags=re.I,
    )


def token_from_bare_xoxc(command: str) -> Optional[str]:
    """Anything shaped like a Slack client token"""
    return _search(r"xoxc-[0-9]+-[0-9]+-[0-9]+-[0-9a-f]+", command, group=0)


TOKEN_STRATEGIES = (
    token_from_form_flag,
    token_from_quoted_form_flag,
    token_from_short_form_flag,
    token_from_url_query,
    token_from_data_payload,
    token_from_bearer_header,
    token_from_bare_xoxc,
)


# Cookie

COOKIE_FLAG_PATTERN = re.compile(r"(?<!\S)(?:-b|--cookie)\s+(?:'([^']+)'|\"([^\"]+)\")")
COOKIE_HEADER_PATTERN = re.compile(r"(?<!\S)(?:-H|--header)\s+['\"]cookie:\s*([^'\"]+)['\"]", re.I)
BARE_D_COOKIE_PATTERN = re.compile(r"\bd=[a-zA-Z0-9%_\-+.]+")


def cookies_from_flags(command: str) -> List[str]:
    """Every -b / --cookie value, in order"""
    return [
        (m.group(1) or m.group(2)).strip()
        for m in COOKIE_FLAG_PATTERN.finditer(command)
    ]


def cookies_from_headers(command: str) -> List[str]:
    """Every Cookie: header value, in order"""
    return [m.group(1).strip() for m in COOKIE_HEADER_PATTERN.finditer(command)]


def cookie_from_bare_d(command: str) -> Optional[str]:
    """A lone d=<value> session cookie anywhere in the text"""
    match = BARE_D_COOKIE_PATTERN.search(command)
    return match.group(0) if match else None


def extract_cookie(command: str) -> Optional[str]:
    """
    Collect cookie fragments from every flag and header.

    The bare ``d=`` match is only a fallback: it is appended when none of the
    collected fragments already carries a ``d`` cookie.
    """
    fragments = [f for f in cookies_from_flags(command) + cookies_from_headers(command) if f]

    if not any(D_COOKIE_VALUE_PATTERN.search(f) for f in fragments):
        d_cookie = cookie_from_bare_d(command)
        if d_cookie:
            fragments.append(d_cookie)

    return "; ".join(fragments) if fragments else None


# Workspace and team

def workspace_from_subdomain(command: str) -> Optional[str]:
    """https://<workspace>.slack.com"""
    return _search(r"https://([^./\s'\"]+)\.slack\.com", command)


def workspace_from_api_path(command: str) -> Optional[str]:
    """Bare slack.com/api/... gets the generic workspace name"""
    if re.search(r"slack\.com/api/[^/\s]+", command):
        return DEFAULT_WORKSPACE
    return None


WORKSPACE_STRATEGIES = (
    workspace_from_subdomain,
    workspace_from_api_path,
)


def team_id_from_param(command: str) -> Optional[str]:
    return _search(r"team_id=([^&\s'\"]+)", command)


def team_id_from_slack_route(command: str) -> Optional[str]:
    return _search(r"slack_route=([^&\s'\"]+)", command)


TEAM_ID_STRATEGIES = (
    team_id_from_param,
    team_id_from_slack_route,
)


# Endpoint

EMOJI_ENDPOINT_MARKERS = ("emoji.list", "emoji.adminList", "/api/emoji")


def is_emoji_request(command: str) -> bool:
    """True when the text targets one of Slack's emoji endpoints"""
    if any(marker in command for marker in EMOJI_ENDPOINT_MARKERS):
        return True
    return bool(re.search(r"emoji\.[A-Za-z]+", command))


class CurlCommandParser:
    """Parser for Slack curl commands

    Args:
        x_id_generator: Factory for a fresh ``_x_id`` when the command has
                        none. Defaults to the random, clock-based generator.
    """

    def __init__(self, x_id_generator: Optional[Callable[[], str]] = None):
        self._generate_x_id = x_id_generator or generate_x_id

    def parse(self, curl_command: str) -> ParsedCurlRequest:
        """
        Parse a curl command string into its authentication components.

        Malformed content never raises; it yields ``is_valid=False`` and an
        ``error`` describing what is missing. ``x_id`` is always set, so an
        input without one gets a newly generated id on every call.

        Args:
            curl_command: The full curl command as a string

        Returns:
            ParsedCurlRequest with all extracted components
        """
        if not isinstance(curl_command, str):
            raise TypeError(f"curl command must be a string, not {type(curl_command).__name__}")

        command = clean_command(curl_command)

        url = extract_url(command)
        token = first_match(TOKEN_STRATEGIES, command)
        cookie = extract_cookie(command)
        workspace = first_match(WORKSPACE_STRATEGIES, command)
        team_id = first_match(TEAM_ID_STRATEGIES, command)
        is_emoji_list_request = is_emoji_request(command)
        x_id = resolve_x_id(command, url, cookie, self._generate_x_id)

        is_valid = bool(
            (token or cookie)
            and (workspace or team_id)
            and is_emoji_list_request
        )

        error = None
        if not is_valid:
            error = MISSING_URL if not url else MISSING_AUTH_OR_WORKSPACE

        return ParsedCurlRequest(
            url=url,
            token=token,
            cookie=cookie,
            workspace=workspace,
            team_id=team_id,
            x_id=x_id,
            is_emoji_list_request=is_emoji_list_request,
            is_valid=is_valid,
            error=error,
        )


def parse_slack_curl(curl_command: str) -> ParsedCurlRequest:
    """Convenience function to parse a Slack curl command."""
    parser = CurlCommandParser()
    return parser.parse(curl_command)
