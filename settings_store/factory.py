"""Build backends and stores from configuration."""

from __future__ import annotations

from settings_store.backends.base import Backend
from settings_store.backends.json_file import JSONFileBackend
from settings_store.backends.memory import InMemoryBackend
from settings_store.shared.config import StoreConfig
from settings_store.shared.logging import get_logger
from settings_store.shared.validation import validate_namespace
from settings_store.store import SettingsStore

log = get_logger()


def open_backend(namespace: str, config: StoreConfig) -> Backend:
    """Open the configured backend for ``namespace``.

    Raises NamespaceUnavailableError if the backend cannot open it.
    """
    namespace = validate_namespace(namespace)
    if config.backend == "memory":
        return InMemoryBackend.open(namespace)
    if config.backend == "postgres":
        from settings_store.backends.postgres import PostgresBackend

        log.info("persistence_postgres", namespace=namespace, dsn=(config.database_url or "").split("@")[-1])
        return PostgresBackend.open(namespace, dsn=config.database_url)
    return JSONFileBackend.open(namespace, data_dir=config.data_dir)


def create_store(namespace: str, config: StoreConfig | None = None) -> SettingsStore:
    """Open a settings store for ``namespace`` using ``config`` (or the environment)."""
    config = config or StoreConfig.from_env()
    backend = open_backend(namespace, config)
    return SettingsStore(namespace, backend=backend)
