"""Core data models for the settings store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class LoadStatus(str, Enum):
    ABSENT = "absent"
    DECODE_ERROR = "decode_error"
    OK = "ok"


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Outcome of loading an encoded object, distinguishing why nothing came back."""

    status: LoadStatus
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.OK

    @classmethod
    def absent(cls) -> LoadResult[T]:
        return cls(LoadStatus.ABSENT)

    @classmethod
    def decode_error(cls, error: str) -> LoadResult[T]:
        return cls(LoadStatus.DECODE_ERROR, error=error)

    @classmethod
    def loaded(cls, value: T) -> LoadResult[T]:
        return cls(LoadStatus.OK, value=value)
