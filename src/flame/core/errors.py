"""Exception types raised by Flame."""


class FlameError(Exception):
    """Base class for every error Flame raises on purpose."""


class ItemNotFoundError(FlameError, KeyError):
    """Raised when a key has no corresponding item in the store."""

    def __init__(self, key: int):
        super().__init__(f"failed to get id: {key}")
        self.key = key

    def __str__(self) -> str:
        # KeyError quotes its message otherwise
        return str(self.args[0])


class InvalidQualityError(FlameError, ValueError):
    """Raised when a raw value is not one of the permitted quality grades."""

    def __init__(self, raw: object):
        super().__init__(f"invalid quality: {raw!r} (expected one of 0, 1, 3, 4, 5)")
        self.raw = raw


class JudgingError(FlameError):
    """Raised by a judge that could not produce a quality for an item.

    The review loop logs it and asks the judge again for the same item.
    """


class RetryLimitExceededError(FlameError):
    """Raised when a bounded review loop runs out of judging retries."""

    def __init__(self, key: int, attempts: int):
        super().__init__(f"gave up on item {key} after {attempts} failed judging attempt(s)")
        self.key = key
        self.attempts = attempts


class PersistenceError(FlameError):
    """Raised when a store file cannot be loaded or saved."""


class ContentUnavailableError(FlameError):
    """Raised when the detail content of a word cannot be read."""
