"""
Storage Layer.

This package handles all data persistence: the key-value backends that hold
the serialized cart and the configuration file.
"""

from .backends import KeyValueBackend, MemoryBackend, create_backend
from .config_manager import ConfigManager
from .file_backend import JsonFileBackend
from .sqlite_backend import SqliteBackend

__all__ = [
    "ConfigManager",
    "JsonFileBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "SqliteBackend",
    "create_backend",
]
