"""
Local key/value storage for client-side state.

Stands in for the browser profile's ``localStorage``: string keys, string
values, scoped to one profile. Two backends are provided: a JSON file for
long-lived embedding and an in-memory dict for tests and throwaway sessions.

Usage:
    storage = FileLocalStorage(settings.STORAGE_PATH)
    storage.set_item("10kb_voter_id", voter_id)
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)


@runtime_checkable
class LocalStorageProtocol(Protocol):
    """Protocol defining local storage operations."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class InMemoryLocalStorage:
    """Process-local storage; lost when the object is dropped."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileLocalStorage:
    """
    Storage persisted as a single JSON object on disk.

    The file is re-read on every access so that several clients sharing a
    profile see each other's writes. Writes go to a temporary file that is
    then renamed over the original.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            # An unreadable profile is treated like an empty one
            logger.warning("local_storage_corrupt", path=str(self.path), error=str(e))
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            # An unreadable profile is treated like an empty one
            logger.warning("local_storage_corrupt", path=str(self.path), error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.warning("local_storage_corrupt", path=str(self.path), error="not an object")
            return {}

        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        self._save(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._save(items)
