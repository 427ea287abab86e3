"""
A simple, file-based backend storing each key's value in its own file.
"""

import hashlib
import logging
from pathlib import Path

from cart_store.exceptions import BackendError

log = logging.getLogger(__name__)


class JsonFileBackend:
    """
    Stores each slot as a file named after the hash of its key.

    The file content is the stored string, unmodified.
    """

    def __init__(self, data_dir_path: Path):
        """
        Initializes the file backend.

        Args:
            data_dir_path: The directory under which the store directory is created.
        """
        self.store_dir = Path(data_dir_path) / "store"
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackendError(
                f"Failed to create store directory '{self.store_dir}': {e}"
            ) from e

    def _get_slot_path(self, key: str) -> Path:
        """Generates a safe filename for a given key."""
        hashed_key = hashlib.md5(key.encode("utf-8")).hexdigest()  # noqa: S324
        return self.store_dir / f"{hashed_key}.json"

    def get(self, key: str) -> str | None:
        """Reads the value for a key. Returns None if no file exists for it."""
        slot_path = self._get_slot_path(key)
        if not slot_path.is_file():
            return None

        try:
            with open(slot_path, encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            log.error(f"Read failed for key '{key}': {e}")
            raise BackendError(f"Failed to read key '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        """Writes the value for a key, replacing the previous file content."""
        slot_path = self._get_slot_path(key)
        try:
            with open(slot_path, "w", encoding="utf-8") as f:
                f.write(value)
        except OSError as e:
            log.error(f"Write failed for key '{key}': {e}")
            raise BackendError(f"Failed to write key '{key}': {e}") from e
        log.debug(f"Wrote {len(value)} characters to '{slot_path.name}'.")
