"""JSON-file backend: one document per namespace under a data directory."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from settings_store.backends.base import Backend
from settings_store.shared.codec import normalize_native, pack_native, unpack_native
from settings_store.shared.exceptions import BackendError, NamespaceUnavailableError
from settings_store.shared.logging import get_logger

log = get_logger()


class JSONFileBackend(Backend):
    """File-backed backend storing ``<data_dir>/<namespace>.json``.

    The document is loaded once on open and kept in memory; every write
    replaces the file atomically (temp file + ``os.replace``). The file only
    exists while the namespace is registered.
    """

    def __init__(self, namespace: str, data_dir: Path | str) -> None:
        super().__init__(namespace)
        self._dir = Path(data_dir).expanduser()
        self._path = self._dir / f"{namespace}.json"
        self._lock = threading.RLock()
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log.error("backend_open_failed", namespace=namespace, path=str(self._path), error=str(e))
            raise NamespaceUnavailableError(namespace, f"cannot create {self._dir}: {e}") from e
        self._data: dict[str, Any] | None = self._load()
        log.debug("backend_opened", backend="file", namespace=namespace, path=str(self._path))

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            log.error("backend_open_failed", namespace=self._namespace, path=str(self._path), error=str(e))
            raise NamespaceUnavailableError(self._namespace, f"unreadable {self._path}: {e}") from e
        if not isinstance(payload, dict):
            raise NamespaceUnavailableError(self._namespace, f"{self._path} is not a JSON object")
        return {k: unpack_native(v) for k, v in payload.items()}

    def _flush(self, data: dict[str, Any]) -> None:
        payload = {k: pack_native(v) for k, v in data.items()}
        try:
            fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{self._namespace}.", suffix=".tmp")
        except OSError as e:
            raise BackendError(f"failed to write {self._path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, sort_keys=True)
            os.replace(tmp, self._path)
        except OSError as e:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise BackendError(f"failed to write {self._path}: {e}") from e

    def get(self, key: str) -> Any | None:
        with self._lock:
            if self._data is None or key not in self._data:
                return None
            return normalize_native(self._data[key])

    # Mutations persist the next document before swapping it into memory.

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = dict(self._data or {})
            data[key] = normalize_native(value)
            self._flush(data)
            self._data = data

    def remove(self, key: str) -> None:
        with self._lock:
            if self._data is None or key not in self._data:
                return
            data = {k: v for k, v in self._data.items() if k != key}
            self._flush(data)
            self._data = data

    def entries(self) -> dict[str, Any]:
        with self._lock:
            return normalize_native(self._data) if self._data is not None else {}

    def reset_namespace(self) -> None:
        with self._lock:
            try:
                self._path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                raise BackendError(f"failed to remove {self._path}: {e}") from e
            self._data = None

    @property
    def registered(self) -> bool:
        with self._lock:
            return self._data is not None
