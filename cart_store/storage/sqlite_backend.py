"""
Manages the SQLite database that holds key-value slots.
"""

import logging
import sqlite3
from pathlib import Path

from cart_store.exceptions import BackendError

log = logging.getLogger(__name__)


class SqliteBackend:
    """
    A SQLite key-value table. A connection is opened for every operation.
    """

    def __init__(self, data_dir_path: Path):
        self.db_path = Path(data_dir_path) / "cart_store.sqlite"
        self._initialize_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Gets a new database connection with the PRAGMA settings applied."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=30)
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            return conn
        except sqlite3.Error as e:
            log.error(f"Failed to connect to store database: {e}")
            raise BackendError(f"Failed to connect to '{self.db_path}': {e}") from e

    def _initialize_db(self) -> None:
        """Creates the database and table if they don't exist."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._get_connection()
            try:
                with conn:
                    conn.execute(
                        """
                        CREATE TABLE IF NOT EXISTS kv_store (
                            key TEXT PRIMARY KEY NOT NULL,
                            value TEXT NOT NULL,
                            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                        );
                        """
                    )
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as e:
            log.error(f"Failed to initialize store database at '{self.db_path}': {e}")
            raise BackendError(f"Failed to initialize '{self.db_path}': {e}") from e

    def get(self, key: str) -> str | None:
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            log.error(f"Read failed for key '{key}': {e}")
            raise BackendError(f"Failed to read key '{key}': {e}") from e
        finally:
            conn.close()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._get_connection()
        try:
            with conn:
                conn.execute(
                    "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                    "updated_at = CURRENT_TIMESTAMP",
                    (key, value),
                )
        except sqlite3.Error as e:
            log.error(f"Write failed for key '{key}': {e}")
            raise BackendError(f"Failed to write key '{key}': {e}") from e
        finally:
            conn.close()
