"""
Emoji Record Store

Holds the emoji records of the current session and which data source (real
or demo) is active. All derived views (date filtering, stats) produce new
lists; stored records are never modified.
"""

import math
from dataclasses import dataclass, asdict, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union


Timestamp = Union[datetime, int, float]


def _flag(value: Any) -> bool:
    """Interpret 0/1, booleans and "0"/"false" strings"""
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no")
    return bool(value)


@dataclass(frozen=True)
class EmojiRecord:
    """One custom emoji as returned by Slack"""
    name: str = ""
    url: str = ""
    is_alias: int = 0
    alias_for: Optional[str] = None
    team_id: str = ""
    user_id: str = ""
    user_display_name: str = ""
    created: Any = 0  # Unix seconds; may be 0 or garbage for some sources
    is_bad: bool = False
    can_delete: bool = False
    synonyms: Optional[List[str]] = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], missing_created: Any = 0) -> "EmojiRecord":
        """Build a record from a Slack emoji object, defaulting absent fields."""
        is_alias = 1 if _flag(data.get("is_alias")) else 0
        synonyms = data.get("synonyms")
        created = data.get("created")
        return cls(
            name=str(data.get("name") or ""),
            url=str(data.get("url") or data.get("image_url") or ""),
            is_alias=is_alias,
            alias_for=(data.get("alias_for") or None) if is_alias else None,
            team_id=str(data.get("team_id") or ""),
            user_id=str(data.get("user_id") or ""),
            user_display_name=str(data.get("user_display_name") or ""),
            created=missing_created if created is None else created,
            is_bad=_flag(data.get("is_bad")),
            can_delete=_flag(data.get("can_delete")),
            synonyms=list(synonyms) if isinstance(synonyms, (list, tuple)) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving out empty optional fields"""
        data = asdict(self)
        if data["alias_for"] is None:
            del data["alias_for"]
        if data["synonyms"] is None:
            del data["synonyms"]
        return data


def record_value(record: Any, key: str, default: Any = None) -> Any:
    """Read a field from an EmojiRecord or a plain dict"""
    if isinstance(record, Mapping):
        return record.get(key, default)
    return getattr(record, key, default)


def created_timestamp(record: Any) -> Optional[float]:
    """Return ``created`` when it is a usable number, else None."""
    value = record_value(record, "created")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def to_unix_seconds(value: Timestamp) -> int:
    """Convert a datetime or numeric timestamp to whole Unix seconds"""
    if isinstance(value, datetime):
        return math.floor(value.timestamp())
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"timestamp must be a datetime or a number, not {type(value).__name__}")
    return math.floor(value)


def as_records(records: Iterable[Any]) -> Tuple[EmojiRecord, ...]:
    """Convert dicts to EmojiRecord, keeping existing records as they are"""
    return tuple(
        r if isinstance(r, EmojiRecord) else EmojiRecord.from_dict(r)
        for r in records
    )


class DataSource(Enum):
    """Which record collection the store currently exposes"""
    REAL = "real"
    DEMO = "demo"


@dataclass(frozen=True)
class _Snapshot:
    source: DataSource
    real: Tuple[EmojiRecord, ...] = ()
    demo: Tuple[EmojiRecord, ...] = ()
    workspace: str = ""


class EmojiRecordStore:
    """In-memory emoji records for one dashboard session.

    Every write builds a new immutable snapshot and swaps it in with a single
    assignment, so readers always see either the old or the new state.

    Args:
        records: Initial real records (EmojiRecord or dicts).
        demo_records: Records served while demo mode is active.
        workspace: Workspace name of the real records.
    """

    def __init__(
        self,
        records: Optional[Iterable[Any]] = None,
        demo_records: Optional[Iterable[Any]] = None,
        workspace: str = "",
    ):
        real = as_records(records or ())
        demo = as_records(demo_records or ())
        source = DataSource.DEMO if demo and not real else DataSource.REAL
        self._snapshot = _Snapshot(source=source, real=real, demo=demo, workspace=workspace)

    def __len__(self):
        return len(self._current())

    def __repr__(self):
        snapshot = self._snapshot
        return (
            f"<EmojiRecordStore: {len(snapshot.real)} real, {len(snapshot.demo)} demo, "
            f"source={snapshot.source.value}>"
        )

    def _current(self) -> Tuple[EmojiRecord, ...]:
        snapshot = self._snapshot
        return snapshot.demo if snapshot.source is DataSource.DEMO else snapshot.real

    @property
    def records(self) -> List[EmojiRecord]:
        """Records of the active source"""
        return list(self._current())

    @property
    def source(self) -> DataSource:
        return self._snapshot.source

    @property
    def workspace(self) -> str:
        return self._snapshot.workspace

    @property
    def has_real_data(self) -> bool:
        return bool(self._snapshot.real)

    def set_records(self, records: Iterable[Any], workspace: Optional[str] = None):
        """Replace the real records wholesale.

        A non-empty collection also makes real data the active source.
        """
        current = self._snapshot
        real = as_records(records)
        self._snapshot = _Snapshot(
            source=DataSource.REAL if real else current.source,
            real=real,
            demo=current.demo,
            workspace=current.workspace if workspace is None else workspace,
        )

    def set_demo_records(self, records: Iterable[Any]):
        """Replace the demo records wholesale."""
        current = self._snapshot
        self._snapshot = _Snapshot(
            source=current.source,
            real=current.real,
            demo=as_records(records),
            workspace=current.workspace,
        )

    def use_demo_data(self, enabled: bool = True):
        """Switch the active source between demo and real records."""
        current = self._snapshot
        self._snapshot = _Snapshot(
            source=DataSource.DEMO if enabled else DataSource.REAL,
            real=current.real,
            demo=current.demo,
            workspace=current.workspace,
        )

    def clear(self):
        """Drop real records and workspace and fall back to demo data."""
        self._snapshot = _Snapshot(source=DataSource.DEMO, demo=self._snapshot.demo)

    def filter_by_date_range(self, start: Timestamp, end: Timestamp) -> List[EmojiRecord]:
        """
        Records of the active source created between start and end.

        Both bounds are inclusive and converted to whole Unix seconds.
        Records without a numeric ``created`` never match.

        Args:
            start: Range start (datetime or Unix seconds)
            end: Range end (datetime or Unix seconds)

        Returns:
            New list of matching records
        """
        start_ts = to_unix_seconds(start)
        end_ts = to_unix_seconds(end)
        result = []
        for record in self._current():
            created = created_timestamp(record)
            if created is not None and start_ts <= created <= end_ts:
                result.append(record)
        return result
