"""In-memory backend, used for tests and ephemeral stores."""

from __future__ import annotations

import copy
import threading
from typing import Any

from settings_store.backends.base import Backend
from settings_store.shared.codec import normalize_native


class InMemoryBackend(Backend):
    """Thread-safe in-memory backend implementation.

    Values are copied on the way in and out so callers never share mutable
    state with the backend.
    """

    def __init__(self, namespace: str) -> None:
        super().__init__(namespace)
        self._data: dict[str, Any] | None = None
        self._lock = threading.RLock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            if self._data is None or key not in self._data:
                return None
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            if self._data is None:
                self._data = {}
            self._data[key] = normalize_native(value)

    def remove(self, key: str) -> None:
        with self._lock:
            if self._data is not None:
                self._data.pop(key, None)

    def entries(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._data) if self._data is not None else {}

    def reset_namespace(self) -> None:
        with self._lock:
            self._data = None

    @property
    def registered(self) -> bool:
        with self._lock:
            return self._data is not None

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._data) if self._data is not None else 0
