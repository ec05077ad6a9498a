"""
Emoji Ingestion

Connects the decoder to the payload parser: parse the curl command, build the
request, hand it to a dispatch callable, normalize the response. The dispatch
callable owns the HTTP call; nothing in this package talks to Slack itself.
"""

from typing import Any, Callable, Dict, Optional

from .decoder import CurlCommandParser, SlackRequest, request_from_parsed
from .parsers import IngestResult, normalize_emoji_payload


Dispatch = Callable[[SlackRequest], Dict[str, Any]]


def fetch_emoji_records(
    curl_command: str,
    dispatch: Dispatch,
    parser: Optional[CurlCommandParser] = None,
    verbose: bool = False,
) -> IngestResult:
    """
    Fetch and normalize emoji records for a captured curl command.

    Args:
        curl_command: Curl command copied from the browser
        dispatch: Callable performing the request and returning parsed JSON
        parser: Parser to use (defaults to a new CurlCommandParser)
        verbose: Print progress

    Returns:
        IngestResult; an invalid command gives no records and the parser's
        error as ``message``
    """
    parser = parser or CurlCommandParser()
    parsed = parser.parse(curl_command)

    if not parsed.is_valid:
        if verbose:
            print(f"[Ingest] Invalid curl command: {parsed.error}")
        return IngestResult(message=parsed.error)

    request = request_from_parsed(parsed)
    if verbose:
        masked = parsed.masked()
        print(f"[Ingest] Workspace: {parsed.workspace or parsed.team_id}")
        print(f"[Ingest] Token: {masked.token}  Cookie: {masked.cookie}")
        print(f"[Ingest] {request.method} {request.url.split('?')[0]}")

    payload = dispatch(request)
    result = normalize_emoji_payload(payload)

    if verbose:
        if result.error:
            print(f"[Ingest] Slack error: {result.error}")
        else:
            print(f"[Ingest] {len(result.records)} emojis ({result.shape.value})")

    return result
