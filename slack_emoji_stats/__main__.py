"""
Package entry point.

Allows running: python -m slack_emoji_stats leaderboard --days 30
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
