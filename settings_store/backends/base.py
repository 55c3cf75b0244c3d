"""Backend interface: the persistent key-value substrate a settings store wraps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TypeVar

B = TypeVar("B", bound="Backend")


class Backend(ABC):
    """Abstract namespaced key-value backend. Swap implementation for files, Postgres, etc.

    A backend instance is a handle on one namespace. Single-key reads and
    writes must be atomic with respect to each other; anything spanning
    several keys is serialized by the store above.

    Values are native: ``str``, ``int``, ``float``, ``bool``, ``bytes``,
    ``datetime`` and lists/dicts of those. ``None`` means "no entry".
    """

    def __init__(self, namespace: str) -> None:
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    @classmethod
    def open(cls: type[B], namespace: str, **options: Any) -> B:
        """Open a handle on ``namespace``.

        Raises NamespaceUnavailableError when the namespace cannot be opened.
        """
        return cls(namespace, **options)

    @abstractmethod
    def get(self, key: str) -> Any | None: ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...

    @abstractmethod
    def entries(self) -> dict[str, Any]: ...

    @abstractmethod
    def reset_namespace(self) -> None:
        """Delete every entry and the namespace registration itself.

        The namespace is registered again by the next write.
        """

    @property
    @abstractmethod
    def registered(self) -> bool:
        """Whether the namespace currently exists in the backend."""

    def close(self) -> None:
        """Release backend resources."""
