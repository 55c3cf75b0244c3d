"""Thread-safe settings store over a namespaced key-value backend."""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, TypeVar

from settings_store.backends.base import Backend
from settings_store.backends.memory import InMemoryBackend
from settings_store.protocol import SettingsStoreProtocol
from settings_store.shared.codec import decode_object, encode_object, is_native_value, reinterpret
from settings_store.shared.exceptions import (
    NamespaceUnavailableError,
    ObjectDecodeError,
    ObjectEncodeError,
    UnsupportedValueError,
)
from settings_store.shared.logging import get_logger
from settings_store.shared.models import LoadResult
from settings_store.shared.validation import validate_key, validate_keys, validate_namespace

log = get_logger()

T = TypeVar("T")
R = TypeVar("R")


class SettingsStore(SettingsStoreProtocol):
    """Typed, thread-safe wrapper around a namespaced backend.

    Every mutation runs through :meth:`sync`, so mutations on one store are
    serialized. Reads go straight to the backend and rely on its single-key
    atomicity.

    Usage:
        store = SettingsStore("app.prefs", backend=JSONFileBackend.open("app.prefs", data_dir=path))
        store.set("theme", "dark")
        store.get("theme", str)
    """

    def __init__(self, namespace: str, backend: Backend | None = None) -> None:
        namespace = validate_namespace(namespace)
        if backend is None:
            backend = InMemoryBackend.open(namespace)
        elif backend.namespace != namespace:
            raise NamespaceUnavailableError(
                namespace, f"backend is bound to namespace {backend.namespace!r}"
            )
        self._namespace = namespace
        self._backend = backend
        self._lock = threading.RLock()
        log.debug("store_opened", namespace=namespace, backend=type(backend).__name__)

    @property
    def namespace(self) -> str:
        return self._namespace

    suite_name = namespace

    @property
    def backend(self) -> Backend:
        return self._backend

    def sync(self, action: Callable[..., R], *args: Any, **kwargs: Any) -> R:
        """Run ``action`` while holding the store lock and return its result.

        The lock is re-entrant: ``action`` may call mutators of this store.
        Exceptions raised by ``action`` propagate after the lock is released.
        """
        with self._lock:
            return action(*args, **kwargs)

    # --- Native values ---

    def set(self, key: str, value: Any) -> None:
        key = validate_key(key)
        if value is None:
            self.remove(key)
            return
        if not is_native_value(value):
            raise UnsupportedValueError(type(value))
        self.sync(self._backend.set, key, value)

    def get(self, key: str, type_: type[T] | None = None) -> T | None:
        return reinterpret(self._backend.get(validate_key(key)), type_)

    def array(self, key: str, item_type: type[T] | None = None) -> list[T]:
        value = self._backend.get(validate_key(key))
        if not isinstance(value, (list, tuple)):
            return []
        items = []
        for item in value:
            converted = reinterpret(item, item_type)
            if converted is None:
                return []
            items.append(converted)
        return items

    def remove(self, key: str) -> None:
        self.sync(self._backend.remove, validate_key(key))

    # --- Encoded objects ---

    def save_object(self, key: str, obj: Any) -> None:
        key = validate_key(key)

        def _save() -> None:
            try:
                data = encode_object(obj)
            except ObjectEncodeError as e:
                # Never leave a stale value behind a failed encode.
                log.warning("object_encode_failed", namespace=self._namespace, key=key, error=str(e))
                self._backend.remove(key)
                return
            self._backend.set(key, data)

        self.sync(_save)

    def load_object(self, key: str, type_: type[T]) -> LoadResult[T]:
        data = self._backend.get(validate_key(key))
        if data is None:
            return LoadResult.absent()
        if not isinstance(data, bytes):
            return LoadResult.decode_error(f"stored value is {type(data).__name__}, not bytes")
        try:
            return LoadResult.loaded(decode_object(data, type_))
        except ObjectDecodeError as e:
            log.debug("object_decode_failed", namespace=self._namespace, key=key, error=str(e))
            return LoadResult.decode_error(str(e))

    def get_object(self, key: str, type_: type[T]) -> T | None:
        return self.load_object(key, type_).value

    # --- Namespace management ---

    def keys(self) -> list[str]:
        return list(self._backend.entries())

    def entries(self) -> dict[str, Any]:
        """Snapshot of every key and value in the namespace."""
        return self._backend.entries()

    def reset(self) -> None:
        self.sync(self._backend.reset_namespace)
        log.info("namespace_reset", namespace=self._namespace)

    def clean(self, except_keys: Iterable[str]) -> None:
        keep = validate_keys(except_keys)

        def _clean() -> int:
            removed = 0
            for key in list(self._backend.entries()):
                if key in keep:
                    continue
                self._backend.remove(key)
                removed += 1
            return removed

        removed = self.sync(_clean)
        log.info("namespace_cleaned", namespace=self._namespace, removed=removed, kept=len(keep))

    def close(self) -> None:
        self._backend.close()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._backend.get(key) is not None

    def __len__(self) -> int:
        return len(self._backend.entries())

    def __repr__(self) -> str:
        return f"SettingsStore(namespace={self._namespace!r}, backend={type(self._backend).__name__})"
