"""
Store module for emoji records.

- records.py: EmojiRecord and the in-memory EmojiRecordStore
- storage.py: JSON file persistence of the session state
"""

from .records import DataSource, EmojiRecord, EmojiRecordStore
from .storage import SessionStorage
