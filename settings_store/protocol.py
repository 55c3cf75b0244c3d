"""Capability contract for settings stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, TypeVar

from settings_store.shared.models import LoadResult

T = TypeVar("T")


class SettingsStoreProtocol(ABC):
    """Typed accessors, object storage and cleanup over one namespace.

    Accessors never raise for missing or mistyped data: reads come back as
    None (or an empty list for arrays).
    """

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a native value under ``key``, replacing any prior value."""

    @abstractmethod
    def get(self, key: str, type_: type[T] | None = None) -> T | None:
        """Return the value for ``key`` as ``type_``, or None."""

    @abstractmethod
    def array(self, key: str, item_type: type[T] | None = None) -> list[T]:
        """Return the list stored under ``key``, or an empty list."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove the value for ``key``, if any."""

    @abstractmethod
    def save_object(self, key: str, obj: Any) -> None:
        """Store ``obj`` as JSON bytes. An unencodable object removes ``key``."""

    @abstractmethod
    def get_object(self, key: str, type_: type[T]) -> T | None:
        """Decode the object stored under ``key`` as ``type_``, or None."""

    @abstractmethod
    def load_object(self, key: str, type_: type[T]) -> LoadResult[T]:
        """Like get_object, but report why no value came back."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return every key present in the store."""

    @abstractmethod
    def reset(self) -> None:
        """Remove every stored value and the namespace itself."""

    @abstractmethod
    def clean(self, except_keys: Iterable[str]) -> None:
        """Remove every stored value whose key is not in ``except_keys``."""
