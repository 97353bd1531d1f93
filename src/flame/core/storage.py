"""JSON file persistence for item stores."""

import json
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from flame.core.errors import PersistenceError
from flame.core.store import ItemStore


class ItemStorage:
    """Loads and saves an ``ItemStore`` as a single JSON file."""

    def __init__(self, path: Path):
        self.path = path

    @property
    def base_dir(self) -> Path:
        """Directory that relative detail paths are resolved against."""
        return self.path.parent

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> ItemStore:
        """Load the store from disk."""
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise PersistenceError(f"Store not found: {self.path}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Malformed store {self.path}: {e}") from e
        except OSError as e:
            raise PersistenceError(f"Cannot read store {self.path}: {e}") from e

        try:
            store = ItemStore.model_validate(data)
        except ValidationError as e:
            raise PersistenceError(f"Malformed store {self.path}: {e}") from e

        if store.mem and store.next_id <= max(store.mem):
            raise PersistenceError(
                f"Malformed store {self.path}: next_id {store.next_id} "
                f"is not above existing id {max(store.mem)}"
            )

        logger.debug("Loaded {} item(s) from {}", len(store), self.path)
        return store

    def save(self, store: ItemStore) -> Path:
        """Write the store to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(store.model_dump(mode="json"), f, indent=2)
        except OSError as e:
            raise PersistenceError(f"Cannot write store {self.path}: {e}") from e

        logger.debug("Saved {} item(s) to {}", len(store), self.path)
        return self.path

    def init(self) -> ItemStore:
        """Create an empty store file. Refuses to overwrite an existing one."""
        if self.exists():
            raise PersistenceError(f"Store already exists: {self.path}")
        store = ItemStore()
        self.save(store)
        return store
