"""
Statistics module for emoji records.

- engine.py: Workspace stats and the per-user leaderboard
- ranking.py: Caller-side rank assignment
"""

from .engine import (
    EmojiStats,
    UserWithEmojiCount,
    calculate_emoji_stats,
    filter_non_alias_emojis,
    get_user_leaderboard,
    l4wepw_change_percent,
    weekly_change_percent,
)
from .ranking import find_rank, is_active, rank_leaderboard
