"""Environment-driven configuration for opening settings stores."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from settings_store.shared.exceptions import ConfigurationError

BACKENDS = ("memory", "file", "postgres")

DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "settings-store"


@dataclass
class StoreConfig:
    """Static configuration for backend selection and logging."""

    backend: str = "file"
    data_dir: Path = field(default_factory=lambda: DEFAULT_DATA_DIR)
    database_url: str | None = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.backend = self.backend.strip().lower()
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"unknown backend {self.backend!r}, expected one of: {', '.join(BACKENDS)}"
            )
        self.data_dir = Path(self.data_dir).expanduser()
        if self.backend == "postgres" and not self.database_url:
            raise ConfigurationError("postgres backend requires DATABASE_URL")

    @classmethod
    def from_env(cls) -> StoreConfig:
        return cls(
            backend=os.environ.get("SETTINGS_STORE_BACKEND", "file"),
            data_dir=Path(os.environ.get("SETTINGS_STORE_DATA_DIR", str(DEFAULT_DATA_DIR))),
            database_url=os.environ.get("DATABASE_URL") or None,
            log_level=os.environ.get("SETTINGS_STORE_LOG_LEVEL", "INFO"),
        )
