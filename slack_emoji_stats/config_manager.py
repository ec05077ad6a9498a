"""
Configuration manager for library and server usage.

Resolves the storage location and server address from explicit arguments,
then environment variables, then the defaults in config.py.
"""

import os
from dataclasses import dataclass
from typing import Optional

from . import config


@dataclass
class DashboardConfig:
    """Configuration for the dashboard server and CLI.

    Args:
        storage_path: JSON file holding the persisted session. If None, falls
                      back to SLACK_EMOJI_STORAGE, then config.STORAGE_PATH.
        server_host: Interface the API server binds to.
        server_port: Port for the API server. If None, falls back to
                     SLACK_EMOJI_API_PORT, then config.API_PORT.
        verbose: Whether to print progress output.
    """

    storage_path: Optional[str] = None
    server_host: str = config.API_HOST
    server_port: Optional[int] = None
    verbose: bool = True

    def __post_init__(self):
        """Resolve unset values from env vars."""
        if self.storage_path is None:
            self.storage_path = os.environ.get("SLACK_EMOJI_STORAGE", config.STORAGE_PATH)
        self.storage_path = os.path.expanduser(self.storage_path)

        if self.server_port is None:
            port = os.environ.get("SLACK_EMOJI_API_PORT")
            self.server_port = int(port) if port else config.API_PORT

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.server_port}"
