"""
Anti-replay id (_x_id) handling

Slack's web client tags every API call with an ``_x_id`` query parameter of
the form ``{6 hex}-{unix seconds}.{0..999}``. A captured command usually
carries one; when it does not, a fresh id is generated in the same shape.
"""

import random
import re
import time
from typing import Callable, Optional


X_ID_PATTERN = re.compile(r"[?&]_x_id=([^&\s'\"]+)")
D_COOKIE_VALUE_PATTERN = re.compile(r"\bd=([^;\s]+)")
X_ID_SHAPE = re.compile(r"^[0-9a-f]{6}-\d+\.\d{1,3}$")


class XIdGenerator:
    """Generates ``_x_id`` values.

    The clock and random source are injectable so tests can pin the output.

    Args:
        clock: Callable returning the current Unix time in seconds.
        rng: A ``random.Random``-like object providing ``randint``.
    """

    def __init__(self, clock: Callable[[], float] = time.time, rng: Optional[random.Random] = None):
        self._clock = clock
        self._rng = rng or random.Random()

    def __call__(self) -> str:
        timestamp = int(self._clock())
        random_hex = format(self._rng.randint(0, 0xFFFFFE), "06x")
        suffix = self._rng.randint(0, 999)
        return f"{random_hex}-{timestamp}.{suffix}"


_default_generator = XIdGenerator()


def generate_x_id() -> str:
    """Generate a fresh, nondeterministic ``_x_id``."""
    return _default_generator()


def x_id_from_url(url: Optional[str]) -> Optional[str]:
    """Read ``_x_id`` from a URL query string."""
    if not url:
        return None
    match = X_ID_PATTERN.search(url)
    return match.group(1) if match else None


def x_id_from_command(command: str) -> Optional[str]:
    """Read ``_x_id`` from anywhere in the raw command text."""
    match = X_ID_PATTERN.search(command or "")
    return match.group(1) if match else None


def x_id_from_cookie(cookie: Optional[str]) -> Optional[str]:
    """Use the value of the ``d`` session cookie as the id."""
    if not cookie:
        return None
    match = D_COOKIE_VALUE_PATTERN.search(cookie)
    return match.group(1) if match else None


def resolve_x_id(
    command: str,
    url: Optional[str],
    cookie: Optional[str],
    generate: Callable[[], str] = generate_x_id,
) -> str:
    """
    Find the anti-replay id for a command, generating one as a last resort.

    Order: URL query, whole command text, ``d`` cookie, generated.

    Args:
        command: Raw curl command text
        url: URL already extracted from the command (may be None)
        cookie: Joined cookie string (may be None)
        generate: Id factory used when nothing is found

    Returns:
        A non-empty ``_x_id`` string
    """
    return (
        x_id_from_url(url)
        or x_id_from_command(command)
        or x_id_from_cookie(cookie)
        or generate()
    )


def ensure_x_id(url: str, x_id: str) -> str:
    """Put ``x_id`` on the URL, replacing an existing ``_x_id`` value."""
    if "_x_id=" in url:
        return re.sub(r"(_x_id=)[^&\s'\"]*", lambda m: m.group(1) + x_id, url, count=1)
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}_x_id={x_id}"
