"""In-memory item store: key allocation, lookup, removal and retrieval."""

from collections.abc import Callable
from datetime import datetime

from loguru import logger
from pydantic import BaseModel, Field

from flame.core.models import Item, Word, utcnow


class ItemStore(BaseModel):
    """Owns every item, keyed by a stable integer id.

    ``next_id`` only ever grows, so keys are never reused. ``version`` is the
    time of the last scheduling mutation.
    """

    version: datetime = Field(default_factory=utcnow)
    next_id: int = Field(default=0, ge=0)
    mem: dict[int, Item] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.mem)

    def __contains__(self, key: object) -> bool:
        return key in self.mem

    def get(self, key: int) -> Item | None:
        """Get an item by key, or None if absent."""
        return self.mem.get(key)

    def introduce(self, payload: Word) -> int:
        """Add a new, immediately due item for ``payload`` and return its key."""
        key = self.next_id
        self.mem[key] = Item(payload=payload)
        self.next_id += 1
        logger.info("Introduced item {} ({})", key, payload.word)
        return key

    def remove_matching(self, predicate: Callable[[Word], bool]) -> int:
        """Delete every item whose payload satisfies ``predicate``.

        Returns the number of removed items.
        """
        doomed = [key for key, item in self.mem.items() if predicate(item.payload)]
        for key in doomed:
            del self.mem[key]
        if doomed:
            logger.info("Removed {} item(s): {}", len(doomed), doomed)
        return len(doomed)

    def retrieve(self, count_as_a_day: bool = False) -> list[int]:
        """Collect the keys of due items.

        When ``count_as_a_day`` is set, every item that is not due yet gets
        one day closer to its review. Result order is not meaningful.
        """
        due: list[int] = []
        for key, item in self.mem.items():
            if item.interval == 0:
                due.append(key)
            elif count_as_a_day:
                item.interval -= 1
        logger.debug(
            "Retrieved {} due item(s) out of {} (count_as_a_day={})",
            len(due),
            len(self.mem),
            count_as_a_day,
        )
        return due
