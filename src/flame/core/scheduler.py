"""SM-2 style scheduler for Flame items."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

from loguru import logger

from flame.core.errors import InvalidQualityError, ItemNotFoundError
from flame.core.models import MIN_FACTOR, utcnow
from flame.core.store import ItemStore

# Reviews that leave the factor below this count as a lapse
LAPSE_THRESHOLD = 3.0


class Quality(IntEnum):
    """Self-assessed recall grade. There is deliberately no grade 2."""

    COMPLETE_BLACKOUT = 0
    INCORRECT = 1
    CORRECT_HARD = 3
    CORRECT = 4
    PERFECT = 5

    @classmethod
    def _missing_(cls, value: object) -> Quality:
        raise InvalidQualityError(value)


def next_factor(factor: float, quality: Quality) -> float:
    """Compute the new retention factor, floored at ``MIN_FACTOR``."""
    q = int(quality)
    ef = factor + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
    return max(ef, MIN_FACTOR)


def interval_for(repetition: int, factor: float) -> int:
    """Days until the next review after ``repetition`` successful reviews.

    0 -> 0, 1 -> 1, 2 -> 6, then each step multiplies the previous
    interval by ``factor`` and rounds up.
    """
    if repetition <= 0:
        return 0
    interval = 1
    for n in range(2, repetition + 1):
        interval = 6 if n == 2 else math.ceil(interval * factor)
    return interval


def next_state(repetition: int, factor: float, quality: Quality) -> tuple[int, float, int]:
    """Compute ``(repetition, factor, interval)`` after a review.

    A successful review bumps the repetition count twice, once for the
    attempt and once for the success. A lapse resets it to zero.
    """
    repetition += 1
    factor = next_factor(factor, quality)
    if factor < LAPSE_THRESHOLD:
        repetition = 0
    else:
        repetition += 1
    return repetition, factor, interval_for(repetition, factor)


@dataclass
class ReviewResult:
    """Result of reviewing an item."""

    key: int
    quality: Quality
    reviewed_at: datetime
    repetition: int
    factor: float
    interval: int

    @property
    def lapsed(self) -> bool:
        return self.repetition == 0


class FlameScheduler:
    """Applies reviews to the items of an ``ItemStore``."""

    def __init__(self, store: ItemStore):
        self.store = store

    def get_due_items(self, count_as_a_day: bool = False) -> list[int]:
        """Get keys of items due for review."""
        return self.store.retrieve(count_as_a_day)

    def review_item(self, key: int, quality: Quality) -> ReviewResult:
        """Review an item and update its scheduling state.

        Raises:
            ItemNotFoundError: if ``key`` is not in the store.
        """
        item = self.store.get(key)
        if item is None:
            raise ItemNotFoundError(key)

        quality = Quality(quality)
        repetition, factor, interval = next_state(item.repetition, item.factor, quality)
        item.repetition = repetition
        item.factor = factor
        item.interval = interval

        now = utcnow()
        self.store.version = now
        logger.debug(
            "Reviewed item {} with {}: repetition={} factor={:.2f} interval={}",
            key,
            quality.name,
            repetition,
            factor,
            interval,
        )
        return ReviewResult(
            key=key,
            quality=quality,
            reviewed_at=now,
            repetition=repetition,
            factor=factor,
            interval=interval,
        )
