"""Review session: judge every due item of one pass and apply the results."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

from loguru import logger

from flame.core.errors import ItemNotFoundError, JudgingError, RetryLimitExceededError
from flame.core.models import Item
from flame.core.scheduler import FlameScheduler, Quality, ReviewResult

# Returns a quality, None to abort the session, or raises JudgingError
Judge = Callable[[Item], Quality | None]


class SessionState(StrEnum):
    """Review session states."""

    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class ReviewSession:
    """Runs one retrieve -> judge -> update pass over the due items.

    The judge is called synchronously, one item at a time. A judge that
    raises ``JudgingError`` is asked again about the same item; by default
    there is no limit on how often, pass ``max_retries`` to bound it.
    Returning None from the judge aborts the session, leaving the reviews
    applied so far in place.
    """

    def __init__(
        self,
        scheduler: FlameScheduler,
        judge: Judge,
        count_as_a_day: bool = False,
        max_retries: int | None = None,
    ):
        if max_retries is not None and max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        self.scheduler = scheduler
        self.judge = judge
        self.count_as_a_day = count_as_a_day
        self.max_retries = max_retries
        self.state = SessionState.RUNNING
        self.results: list[ReviewResult] = []

    @property
    def aborted(self) -> bool:
        return self.state == SessionState.ABORTED

    def run(self) -> bool:
        """Review the current due batch.

        Each call is a fresh pass: ``state`` and ``results`` only describe
        the latest one.

        Returns:
            True if the judge aborted the session, False once every due
            item has been reviewed.
        """
        self.state = SessionState.RUNNING
        self.results = []
        keys = self.scheduler.get_due_items(self.count_as_a_day)
        logger.info("Review session started with {} due item(s)", len(keys))

        for key in keys:
            item = self.scheduler.store.get(key)
            if item is None:
                raise ItemNotFoundError(key)

            quality = self._judge(key, item)
            if quality is None:
                self.state = SessionState.ABORTED
                logger.info(
                    "Review session aborted after {} of {} item(s)", len(self.results), len(keys)
                )
                return True

            self.results.append(self.scheduler.review_item(key, quality))

        self.state = SessionState.COMPLETED
        logger.info("Review session completed: {} item(s) reviewed", len(self.results))
        return False

    def _judge(self, key: int, item: Item) -> Quality | None:
        """Ask the judge about ``item`` until it answers."""
        failures = 0
        while True:
            try:
                return self.judge(item)
            except JudgingError as e:
                failures += 1
                logger.warning("Judging item {} failed: {}", key, e)
                if self.max_retries is not None and failures > self.max_retries:
                    raise RetryLimitExceededError(key, failures) from e
