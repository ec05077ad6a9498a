"""
Leaderboard ranks

Rank is a position in whatever list a caller shows, so it is derived here and
never by the engine. Two views of the same leaderboard (all users, active
users only) can give the same user different ranks.
"""

from dataclasses import replace
from typing import Callable, List, Optional, Sequence

from .engine import DAY, UserWithEmojiCount


def find_rank(leaderboard: Sequence[UserWithEmojiCount], user_id: str) -> Optional[int]:
    """1-based position of a user, or None when absent"""
    for index, row in enumerate(leaderboard):
        if row.user_id == user_id:
            return index + 1
    return None


def rank_leaderboard(
    leaderboard: Sequence[UserWithEmojiCount],
    include: Optional[Callable[[UserWithEmojiCount], bool]] = None,
) -> List[UserWithEmojiCount]:
    """
    Assign ranks by position.

    Args:
        leaderboard: Rows from get_user_leaderboard, already sorted
        include: Optional filter; ranks are counted within the kept rows only

    Returns:
        New rows with ``rank`` set (input rows are left untouched)
    """
    rows = [row for row in leaderboard if include is None or include(row)]
    return [replace(row, rank=index + 1) for index, row in enumerate(rows)]


def is_active(now: float, days: int = 28) -> Callable[[UserWithEmojiCount], bool]:
    """Filter for users who created an emoji in the last ``days`` days"""
    cutoff = now - days * DAY

    def _active(row: UserWithEmojiCount) -> bool:
        return row.most_recent_emoji_timestamp >= cutoff

    return _active
