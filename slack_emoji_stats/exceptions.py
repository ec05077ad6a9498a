"""Custom exceptions for the slack-emoji-stats library."""


class SlackEmojiStatsError(Exception):
    """Base exception for all slack-emoji-stats errors."""
    pass


class SlackAPIError(SlackEmojiStatsError):
    """Raised when Slack answered with an ``ok: false`` error sentinel."""

    def __init__(self, code: str, message: str = None):
        self.code = code
        super().__init__(message or code)


class AuthExpiredError(SlackAPIError):
    """Raised when the captured token or cookie is no longer accepted."""
    pass


class StorageError(SlackEmojiStatsError):
    """Raised when the session file cannot be written."""
    pass
