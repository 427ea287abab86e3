"""
The key-value backend contract and its in-memory implementation.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from cart_store.models.config import StoreConfig

from .file_backend import JsonFileBackend
from .sqlite_backend import SqliteBackend

log = logging.getLogger(__name__)


@runtime_checkable
class KeyValueBackend(Protocol):
    """A persistent string slot store addressed by key."""

    def get(self, key: str) -> str | None:
        """Returns the stored value, or None if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Stores the value under the key, replacing any previous value."""
        ...


class MemoryBackend:
    """A dict-backed backend. Values live only as long as the instance."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"MemoryBackend(keys={sorted(self._data)})"


def create_backend(config: StoreConfig) -> KeyValueBackend:
    """Builds the backend named in the configuration."""
    data_dir = Path(config.data_dir).expanduser()
    if config.backend == "sqlite":
        backend = SqliteBackend(data_dir)
    elif config.backend == "file":
        backend = JsonFileBackend(data_dir)
    else:
        backend = MemoryBackend()
    log.debug(f"Using '{config.backend}' backend ({data_dir}).")
    return backend
