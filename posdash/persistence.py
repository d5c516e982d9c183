"""SQLite-backed key/value store for application state."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generic, Iterator, TypeVar

from posdash.config import DB_PATH

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Stable collection keys.
ORDERS_KEY = "orders-list"
CUSTOMERS_KEY = "loyalty-customers"
ACCOUNTING_KEY = "accounting-records"
STAFF_KEY = "staff-list"
SETTINGS_KEY = "app-settings"
MENU_KEY = "menu-items"
CATEGORIES_KEY = "app-categories"
ADDONS_KEY = "app-addons"
BRANCHES_KEY = "app-branches"
SESSION_KEY = "current-user"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class PersistedValue(Generic[T]):
    """A live value bound to one store key; every ``set`` is written through."""

    def __init__(self, store: PersistedStore, key: str, value: T) -> None:
        self._store = store
        self.key = key
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    def set(self, new_value: T) -> None:
        """Replace the value in memory, then persist it on a best-effort basis."""
        self._value = new_value
        self._store.write(self.key, new_value)

    def __iter__(self) -> Iterator[Any]:
        # Allows ``value, set_value = store.open(...)``.
        yield self._value
        yield self.set


class PersistedStore:
    """Durable JSON values keyed by name, one table row per key.

    Loading never fails: a missing row, an unparsable payload or an
    unreachable database all yield the caller's default. Writes that fail
    are logged and dropped so the in-memory value stays authoritative for
    the rest of the process.
    """

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = str(db_path)
        self._memory_conn: sqlite3.Connection | None = None
        if self.db_path == ":memory:":
            self._memory_conn = sqlite3.connect(":memory:")
        self.bootstrap_schema()

    def _connect(self) -> sqlite3.Connection:
        if self._memory_conn is not None:
            return self._memory_conn
        db_file = Path(self.db_path)
        db_file.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(db_file)

    def _close(self, conn: sqlite3.Connection) -> None:
        if conn is not self._memory_conn:
            conn.close()

    def bootstrap_schema(self) -> None:
        """Create the key/value table if it does not already exist."""
        try:
            conn = self._connect()
        except (OSError, sqlite3.Error) as exc:
            logger.warning("Store unavailable at %s: %s", self.db_path, exc)
            return
        try:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            logger.warning("Could not create kv_store in %s: %s", self.db_path, exc)
        finally:
            self._close(conn)

    def read(self, key: str, default: Any) -> Any:
        """Return the stored value for ``key`` or ``default`` when absent or unreadable."""
        try:
            conn = self._connect()
        except (OSError, sqlite3.Error) as exc:
            logger.warning("Store unavailable reading %r: %s", key, exc)
            return default
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            logger.warning("Failed to read %r: %s", key, exc)
            return default
        finally:
            self._close(conn)

        if row is None:
            return default
        try:
            return json.loads(row[0])
        except (TypeError, ValueError):
            logger.debug("Stored value for %r is corrupt; using default", key)
            return default

    def write(self, key: str, value: Any) -> bool:
        """Persist ``value`` under ``key``. Returns False when the write was dropped."""
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            logger.warning("Value for %r is not serializable: %s", key, exc)
            return False

        try:
            conn = self._connect()
        except (OSError, sqlite3.Error) as exc:
            logger.warning("Store unavailable writing %r: %s", key, exc)
            return False
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, payload, _utc_now_iso()),
                )
        except sqlite3.Error as exc:
            logger.warning("Failed to persist %r: %s", key, exc)
            return False
        finally:
            self._close(conn)
        return True

    def open(self, key: str, default: T) -> PersistedValue[T]:
        """Load ``key`` (falling back to ``default``) and return its live handle."""
        return PersistedValue(self, key, self.read(key, default))
