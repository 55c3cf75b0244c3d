"""Key-value backends a settings store can wrap."""

from settings_store.backends.base import Backend
from settings_store.backends.json_file import JSONFileBackend
from settings_store.backends.memory import InMemoryBackend

__all__ = ["Backend", "InMemoryBackend", "JSONFileBackend"]
