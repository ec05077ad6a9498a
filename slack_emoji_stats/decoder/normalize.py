"""
Canonical Curl Builder

Re-renders any valid Slack emoji curl command as one fixed-shape
``emoji.adminList`` request, always asking for the largest single page.
"""

import re
from typing import Callable, Dict, Optional

from ..config import (
    CANONICAL_HEADERS,
    CANONICAL_URL_TEMPLATE,
    DEFAULT_PAGE,
    DEFAULT_WORKSPACE,
    EMOJI_PAGE_SIZE,
    PASSTHROUGH_FORM_FIELDS,
    PLACEHOLDER_TOKEN,
)
from .curl import CurlCommandParser, ParsedCurlRequest
from .xid import generate_x_id, resolve_x_id


FORM_FIELD_PATTERN = re.compile(r"(?<!\S)(?:--form|-F)\s+['\"]?([\w-]+)=([^'\"\s]+)")
DATA_RAW_ANSI_PATTERN = re.compile(r"--data-raw\s+\$'((?:\\.|[^'\\])*)'", re.S)
MULTIPART_BOUNDARY_PATTERN = re.compile(r"-{4,}[\w-]+")
MULTIPART_NAME_PATTERN = re.compile(r'name="([^"]+)"')
MULTIPART_VALUE_PATTERN = re.compile(r"\r?\n\r?\n(.*)", re.S)

LINE_BREAK = " \\\n  "


def extract_form_fields(command: str) -> Dict[str, str]:
    """Collect every --form / -F key=value pair, quoted or not."""
    return {m.group(1): m.group(2) for m in FORM_FIELD_PATTERN.finditer(command)}


def _unescape_ansi_c(body: str) -> str:
    """Undo the escapes bash applies inside $'...' strings"""
    return (
        body.replace("\\r", "\r")
        .replace("\\n", "\n")
        .replace("\\'", "'")
        .replace('\\"', '"')
        .replace("\\\\", "\\")
    )


def extract_multipart_fields(command: str) -> Dict[str, str]:
    """
    Read form fields out of a raw multipart body passed as --data-raw $'...'.

    Chrome copies multipart requests this way instead of using --form, so
    fields like ``_x_reason`` or ``page`` only exist inside the body.

    Args:
        command: Raw curl command text

    Returns:
        Dictionary of field name to value; empty when there is no such body
    """
    match = DATA_RAW_ANSI_PATTERN.search(command)
    if not match:
        return {}

    fields = {}
    body = _unescape_ansi_c(match.group(1))
    for part in MULTIPART_BOUNDARY_PATTERN.split(body):
        name_match = MULTIPART_NAME_PATTERN.search(part)
        value_match = MULTIPART_VALUE_PATTERN.search(part)
        if name_match and value_match:
            fields[name_match.group(1)] = value_match.group(1).strip()
    return fields


class CurlCommandNormalizer:
    """Builds the canonical form of a Slack emoji curl command

    Args:
        parser: Parser used to read the incoming command.
        x_id_generator: Factory for a fresh ``_x_id`` when none can be found.
    """

    def __init__(
        self,
        parser: Optional[CurlCommandParser] = None,
        x_id_generator: Optional[Callable[[], str]] = None,
    ):
        self._generate_x_id = x_id_generator or generate_x_id
        self.parser = parser or CurlCommandParser(self._generate_x_id)

    def normalize(self, curl_command: str) -> str:
        """
        Normalize a curl command to the canonical shape.

        Invalid commands are returned unchanged.

        Args:
            curl_command: The curl command copied from the browser

        Returns:
            Canonical multi-line curl command, or the input when invalid
        """
        parsed = self.parser.parse(curl_command)
        if not parsed.is_valid:
            return curl_command

        form_fields = extract_form_fields(curl_command)
        form_fields.update(extract_multipart_fields(curl_command))

        x_id = resolve_x_id(curl_command, parsed.url, parsed.cookie, self._generate_x_id)
        return self.render(parsed, form_fields, x_id=x_id)

    def render(
        self,
        parsed: ParsedCurlRequest,
        form_fields: Optional[Dict[str, str]] = None,
        x_id: Optional[str] = None,
    ) -> str:
        """
        Render the canonical command from an already parsed request.

        Args:
            parsed: Parser output
            form_fields: Extra form fields recovered from the raw command
            x_id: Anti-replay id; defaults to ``parsed.x_id``, then a new one

        Returns:
            Canonical multi-line curl command
        """
        fields = dict(form_fields or {})
        fields["count"] = EMOJI_PAGE_SIZE

        workspace = parsed.workspace or DEFAULT_WORKSPACE
        x_id = x_id or parsed.x_id or self._generate_x_id()

        url = CANONICAL_URL_TEMPLATE.format(
            workspace=workspace,
            x_id=x_id,
            team_id=parsed.team_id or "",
        )

        lines = ["curl --request POST", f"--url '{url}'"]

        if parsed.cookie:
            lines.append(f"--header 'Cookie: {parsed.cookie}'")

        for header in CANONICAL_HEADERS:
            lines.append("--header '{}'".format(header.format(workspace=workspace)))

        token = parsed.token or fields.get("token") or PLACEHOLDER_TOKEN
        lines.append(f"--form token={token}")
        lines.append(f"--form page={fields.get('page') or DEFAULT_PAGE}")
        lines.append(f"--form count={fields['count']}")

        for name in PASSTHROUGH_FORM_FIELDS:
            if fields.get(name):
                lines.append(f"--form {name}={fields[name]}")

        return LINE_BREAK.join(lines)


def normalize_slack_curl(curl_command: str) -> str:
    """Convenience function to normalize a Slack curl command."""
    normalizer = CurlCommandNormalizer()
    return normalizer.normalize(curl_command)
