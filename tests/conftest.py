"""Pytest configuration and fixtures"""
import pytest

from cart_store.core.cart import CartStore
from cart_store.storage.backends import MemoryBackend


@pytest.fixture
def backend():
    """Empty in-memory backend"""
    return MemoryBackend()


@pytest.fixture
def store(backend):
    """Cart store over an empty in-memory backend"""
    return CartStore(backend)


@pytest.fixture
def config_file(tmp_path):
    """Path of a config file that does not exist yet"""
    return tmp_path / "config" / "config.ini"
