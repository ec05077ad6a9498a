"""
Decoder module for Slack curl commands.

- curl.py: Extracts token, cookie, workspace and ids from a curl command
- normalize.py: Re-renders a command in canonical emoji.adminList form
- request.py: Builds the request descriptor handed to the dispatch layer
- xid.py: Finds or generates the _x_id anti-replay id
"""

from .curl import CurlCommandParser, ParsedCurlRequest, parse_slack_curl
from .normalize import CurlCommandNormalizer, normalize_slack_curl
from .request import SlackRequest, build_slack_request, request_from_parsed
from .xid import XIdGenerator, generate_x_id, resolve_x_id
