"""
Session Storage

Flat JSON key-value file mirroring the browser storage layout:

    emojiData         JSON array of emoji records
    workspace         workspace name
    emojiCount        stringified record count
    lastFetchTime     ISO-8601 time of the last successful fetch
    slackCurlCommand  the last raw curl command (a live credential)

The file is kept owner-read/write only, including a pre-existing one.
"""

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..config import STORAGE_KEYS, STORAGE_PATH
from ..exceptions import StorageError
from .records import EmojiRecord, EmojiRecordStore, as_records


class SessionStorage:
    """Persisted dashboard state backed by one JSON file."""

    def __init__(self, path: str = STORAGE_PATH, verbose: bool = False):
        self.path = path
        self.verbose = verbose

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            if self.verbose:
                print(f"[Storage] Ignoring unreadable session file: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]):
        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                # the mode argument only applies on create; tighten existing files too
                os.chmod(self.path, 0o600)
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StorageError(f"Cannot write session file {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        """Raw stored value for a key"""
        if key not in STORAGE_KEYS:
            raise KeyError(key)
        return self._read().get(key)

    def set(self, key: str, value: str):
        if key not in STORAGE_KEYS:
            raise KeyError(key)
        data = self._read()
        data[key] = value
        self._write(data)

    @property
    def curl_command(self) -> Optional[str]:
        return self.get("slackCurlCommand")

    def save_fetch(
        self,
        records: Iterable[Any],
        workspace: str,
        curl_command: Optional[str] = None,
        fetched_at: Optional[datetime] = None,
    ):
        """
        Persist the result of a successful fetch.

        Args:
            records: Emoji records (EmojiRecord or dicts)
            workspace: Workspace name
            curl_command: The command that produced the records
            fetched_at: Fetch time, defaults to now (UTC)
        """
        records = as_records(records)
        fetched_at = fetched_at or datetime.now(timezone.utc)

        data = self._read()
        data["emojiData"] = json.dumps([r.to_dict() for r in records], ensure_ascii=False)
        data["workspace"] = workspace
        data["emojiCount"] = str(len(records))
        data["lastFetchTime"] = fetched_at.isoformat()
        if curl_command is not None:
            data["slackCurlCommand"] = curl_command
        self._write(data)

        if self.verbose:
            print(f"[Storage] Saved {len(records)} emojis for {workspace}")

    def load_records(self) -> List[EmojiRecord]:
        """Stored records, or an empty list when absent or corrupt"""
        raw = self._read().get("emojiData")
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except (TypeError, ValueError):
            return []
        if not isinstance(items, list):
            return []
        return [EmojiRecord.from_dict(item) for item in items if isinstance(item, dict)]

    def load_into(self, store: EmojiRecordStore) -> bool:
        """
        Populate a store from disk.

        Returns:
            True when real records were loaded; otherwise the store is switched
            to demo data.
        """
        records = self.load_records()
        if records:
            store.set_records(records, workspace=self.get("workspace") or "")
            if self.verbose:
                print(f"[Storage] Loaded {len(records)} emojis from {self.path}")
            return True

        store.use_demo_data(True)
        if self.verbose:
            print("[Storage] No emoji data found, using demo data")
        return False

    def clear(self):
        """Delete the session file."""
        if os.path.exists(self.path):
            os.remove(self.path)
