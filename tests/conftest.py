"""Shared fixtures for all tests."""

import pytest
import structlog

from settings_store.backends.json_file import JSONFileBackend
from settings_store.backends.memory import InMemoryBackend
from settings_store.store import SettingsStore


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def backend():
    return InMemoryBackend.open("user")


@pytest.fixture
def store(backend):
    return SettingsStore("user", backend=backend)


@pytest.fixture
def data_dir(tmp_path):
    directory = tmp_path / "data"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


@pytest.fixture
def file_backend(data_dir):
    return JSONFileBackend.open("user", data_dir=data_dir)


@pytest.fixture
def file_store(file_backend):
    return SettingsStore("user", backend=file_backend)


@pytest.fixture(params=["memory", "file"])
def any_store(request, data_dir):
    """A store over each shipped local backend."""
    if request.param == "memory":
        backend = InMemoryBackend.open("user")
    else:
        backend = JSONFileBackend.open("user", data_dir=data_dir)
    return SettingsStore("user", backend=backend)
