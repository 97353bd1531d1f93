"""Pydantic models for Flame review items."""

from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from flame.core.errors import ContentUnavailableError

INITIAL_FACTOR = 2.5
MIN_FACTOR = 1.3


def utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


class Word(BaseModel):
    """A vocabulary word and the file holding its detail content."""

    word: str
    detail: str  # Path to a markdown/text file

    def detail_path(self, base_dir: Path | None = None) -> Path:
        """Resolve the detail path, relative paths against ``base_dir``."""
        path = Path(self.detail).expanduser()
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path
        return path

    def read_detail(self, base_dir: Path | None = None) -> str:
        """Read the detail content as text."""
        path = self.detail_path(base_dir)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ContentUnavailableError(f"cannot read detail for '{self.word}': {path}") from e


class Item(BaseModel):
    """A scheduled review item.

    ``interval`` counts the days left until the item is due again;
    an item with ``interval == 0`` is due now.
    """

    repetition: int = Field(default=0, ge=0)
    factor: float = Field(default=INITIAL_FACTOR, ge=MIN_FACTOR)
    interval: int = Field(default=0, ge=0)
    payload: Word

    @property
    def is_due(self) -> bool:
        return self.interval == 0
