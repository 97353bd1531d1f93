"""Shared CLI helpers: configuration from the environment and logging setup."""

import os
import sys
from pathlib import Path

from loguru import logger
from rich import print as rprint
from rich.markup import escape

from flame.core.errors import PersistenceError
from flame.core.storage import ItemStorage
from flame.core.store import ItemStore

DEFAULT_STORE = "flame.json"


def store_path(path: str | None = None) -> Path:
    """Resolve the store file: explicit path, then $FLAME_STORE_PATH, then ./flame.json."""
    if path:
        return Path(path).expanduser()
    return Path(os.environ.get("FLAME_STORE_PATH", Path.cwd() / DEFAULT_STORE)).expanduser()


def max_retries_from_env() -> int | None:
    """Read the judging retry bound from $FLAME_MAX_RETRIES (unset means unbounded)."""
    raw = os.environ.get("FLAME_MAX_RETRIES", "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        value = -1
    if value < 0:
        rprint(f"[yellow]Ignoring invalid FLAME_MAX_RETRIES: {escape(repr(raw))}[/yellow]")
        return None
    return value


def configure_logging() -> None:
    """Send loguru output to stderr at $FLAME_LOG_LEVEL (default WARNING)."""
    level = os.environ.get("FLAME_LOG_LEVEL", "WARNING").upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>[{level}]</level> {message}")


def open_store(path: str | None = None) -> tuple[ItemStorage, ItemStore]:
    """Load the store at ``path``. Raises PersistenceError if it cannot be loaded."""
    storage = ItemStorage(store_path(path))
    if not storage.exists():
        raise PersistenceError(
            f"Store not found: {storage.path} (create one with 'flame init')"
        )
    return storage, storage.load()
