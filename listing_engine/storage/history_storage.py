# listing_engine/storage/history_storage.py

"""Durable key/value slots backing the search history."""

import logging
import os
import sqlite3
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from listing_engine.config.settings import Settings

logger = logging.getLogger("listing_engine.storage")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS slots (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


class SlotStorage(ABC):
    """A string-valued key/value store, one value per named slot."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the slot's raw content, or ``None`` if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the slot's content."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the slot; a missing slot is not an error."""

    def close(self) -> None:
        """Release any held resources; a no-op unless overridden."""


class MemoryStorage(SlotStorage):
    """Process-local storage for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._slots: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    def remove(self, key: str) -> None:
        self._slots.pop(key, None)


class JsonFileStorage(SlotStorage):
    """One ``<key>.json`` file per slot inside a data directory."""

    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir: Path = data_dir or Settings.DATA_DIR
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(
            "JsonFileStorage initialised, data_dir=%s", self.data_dir
        )

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        # Readers see the old slot or the new one, never a partial write
        fd, tmp_name = tempfile.mkstemp(
            dir=self.data_dir, prefix=f".{key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class SqliteStorage(SlotStorage):
    """SQLite-backed slots, for sharing one file across tools."""

    def __init__(self, db_path: Path | None = None) -> None:
        path = db_path or (Settings.DATA_DIR / "listing_engine.db")
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        logger.debug("SqliteStorage opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def get(self, key: str) -> str | None:
        row = self._conn.execute(
            "SELECT value FROM slots WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT INTO slots (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET "
            "value=excluded.value, updated_at=CURRENT_TIMESTAMP",
            (key, value),
        )
        self._conn.commit()

    def remove(self, key: str) -> None:
        self._conn.execute("DELETE FROM slots WHERE key = ?", (key,))
        self._conn.commit()


def build_storage(
    backend: str | None = None,
    data_dir: Path | None = None,
) -> SlotStorage:
    """Construct the storage backend named in settings (or *backend*)."""
    name = (backend or Settings.HISTORY_BACKEND).lower()
    directory = data_dir or Settings.DATA_DIR
    if name == "memory":
        return MemoryStorage()
    if name == "json":
        return JsonFileStorage(directory)
    if name == "sqlite":
        return SqliteStorage(directory / "listing_engine.db")
    msg = f"Unknown history backend: {name!r}"
    raise ValueError(msg)
