"""Core library for Flame."""

from flame.core.errors import (
    ContentUnavailableError,
    FlameError,
    InvalidQualityError,
    ItemNotFoundError,
    JudgingError,
    PersistenceError,
    RetryLimitExceededError,
)
from flame.core.models import Item, Word
from flame.core.scheduler import FlameScheduler, Quality, ReviewResult, interval_for, next_state
from flame.core.session import ReviewSession, SessionState
from flame.core.storage import ItemStorage
from flame.core.store import ItemStore

__all__ = [
    # Errors
    "ContentUnavailableError",
    "FlameError",
    "InvalidQualityError",
    "ItemNotFoundError",
    "JudgingError",
    "PersistenceError",
    "RetryLimitExceededError",
    # Models
    "Item",
    "Word",
    # Store and storage
    "ItemStore",
    "ItemStorage",
    # Scheduler
    "FlameScheduler",
    "Quality",
    "ReviewResult",
    "interval_for",
    "next_state",
    # Session
    "ReviewSession",
    "SessionState",
]
