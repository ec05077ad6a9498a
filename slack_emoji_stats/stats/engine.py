"""
Emoji Statistics

Aggregate stats and the per-user leaderboard over a list of emoji records.

Every public function drops alias records first and then works only on the
remaining list. Functions are pure: the same records and ``now`` always give
the same result. Records with a missing or non-numeric ``created`` still
count toward totals but never fall inside a time window.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence

from ..store.records import created_timestamp, record_value


DAY = 24 * 60 * 60
WEEK = 7 * DAY
FOUR_WEEKS = 4 * WEEK


@dataclass
class EmojiStats:
    """Workspace-wide summary"""
    total_emojis: int = 0
    total_creators: int = 0
    most_recent: str = ""
    most_recent_timestamp: float = 0
    emojis_per_user: float = 0
    weekly_emojis_change: float = 0

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class UserWithEmojiCount:
    """One leaderboard row"""
    user_id: str
    user_display_name: str
    emoji_count: int
    most_recent_emoji_timestamp: float
    oldest_emoji_timestamp: float
    l4wepw: float  # last 4 weeks emojis per week
    l4wepw_change: float  # percent vs the 4 weeks before
    rank: Optional[int] = None  # set by callers, see ranking.py

    def to_dict(self) -> Dict:
        return asdict(self)


def _check_records(records: Any):
    if not isinstance(records, (list, tuple)):
        raise TypeError(f"records must be a list, not {type(records).__name__}")


def _check_now(now: Any):
    if isinstance(now, bool) or not isinstance(now, (int, float)) or math.isnan(now):
        raise TypeError(f"now must be Unix seconds, not {now!r}")


def filter_non_alias_emojis(records: Sequence[Any]) -> List[Any]:
    """Keep only original uploads; aliases never count toward statistics."""
    return [r for r in records if not record_value(r, "is_alias")]


def count_in_window(records: Sequence[Any], start: float, end: Optional[float] = None) -> int:
    """Count records with ``start <= created`` and, if given, ``created < end``."""
    count = 0
    for record in records:
        created = created_timestamp(record)
        if created is None or created < start:
            continue
        if end is not None and created >= end:
            continue
        count += 1
    return count


def weekly_change_percent(this_week: int, last_week: int) -> float:
    """Percent change week over week.

    With no emojis last week, any activity this week reads as +100%.
    """
    if last_week > 0:
        return (this_week - last_week) / last_week * 100
    if this_week > 0:
        return 100.0
    return 0.0


def l4wepw_change_percent(current_wepw: float, previous_wepw: float) -> float:
    """Percent change of emojis-per-week against the previous 4 weeks.

    Unlike weekly_change_percent, a zero previous window always reads as 0%.
    """
    if previous_wepw > 0:
        return (current_wepw - previous_wepw) / previous_wepw * 100
    return 0.0


def _stats_from_non_alias(non_alias: List[Any], now: float) -> EmojiStats:
    creators = {record_value(r, "user_id") for r in non_alias}

    dated = [r for r in non_alias if created_timestamp(r) is not None]
    # sorted() is stable: ties keep their input order, first one wins
    dated = sorted(dated, key=created_timestamp, reverse=True)
    most_recent = dated[0] if dated else None

    one_week_ago = now - WEEK
    two_weeks_ago = now - 2 * WEEK
    this_week = count_in_window(non_alias, one_week_ago)
    last_week = count_in_window(non_alias, two_weeks_ago, one_week_ago)

    return EmojiStats(
        total_emojis=len(non_alias),
        total_creators=len(creators),
        most_recent=(record_value(most_recent, "name") or "") if most_recent is not None else "",
        most_recent_timestamp=created_timestamp(most_recent) if most_recent is not None else 0,
        emojis_per_user=len(non_alias) / len(creators) if creators else 0,
        weekly_emojis_change=weekly_change_percent(this_week, last_week),
    )


def calculate_emoji_stats(records: Sequence[Any], now: float) -> EmojiStats:
    """
    Calculate workspace-wide emoji statistics.

    Args:
        records: Emoji records (EmojiRecord or dicts)
        now: Reference time in Unix seconds

    Returns:
        EmojiStats; all zero/empty for an empty list

    Raises:
        TypeError: If records is not a list/tuple or now is not a number
    """
    _check_records(records)
    _check_now(now)
    return _stats_from_non_alias(filter_non_alias_emojis(records), now)


def _leaderboard_row(user_id: str, user_records: List[Any], now: float) -> UserWithEmojiCount:
    timestamps = [t for t in (created_timestamp(r) for r in user_records) if t is not None]

    four_weeks_ago = now - FOUR_WEEKS
    eight_weeks_ago = now - 2 * FOUR_WEEKS
    l4wepw = count_in_window(user_records, four_weeks_ago) / 4
    previous_wepw = count_in_window(user_records, eight_weeks_ago, four_weeks_ago) / 4

    return UserWithEmojiCount(
        user_id=user_id,
        user_display_name=record_value(user_records[0], "user_display_name") or "",
        emoji_count=len(user_records),
        most_recent_emoji_timestamp=max(timestamps) if timestamps else 0,
        oldest_emoji_timestamp=min(timestamps) if timestamps else 0,
        l4wepw=l4wepw,
        l4wepw_change=l4wepw_change_percent(l4wepw, previous_wepw),
    )


def get_user_leaderboard(records: Sequence[Any], now: float) -> List[UserWithEmojiCount]:
    """
    Build the per-user leaderboard.

    Users appear in order of emoji count, highest first; users with equal
    counts keep the order in which they first appear in ``records``. Rank is
    not assigned here.

    Args:
        records: Emoji records (EmojiRecord or dicts)
        now: Reference time in Unix seconds

    Returns:
        List of UserWithEmojiCount, empty for an empty list

    Raises:
        TypeError: If records is not a list/tuple or now is not a number
    """
    _check_records(records)
    _check_now(now)

    by_user: Dict[str, List[Any]] = {}
    for record in filter_non_alias_emojis(records):
        by_user.setdefault(record_value(record, "user_id"), []).append(record)

    rows = [_leaderboard_row(user_id, user_records, now) for user_id, user_records in by_user.items()]
    return sorted(rows, key=lambda row: row.emoji_count, reverse=True)
