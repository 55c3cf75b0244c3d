"""Input validation for the settings store. Namespaces and keys pass through here."""

from __future__ import annotations

import re
from typing import Any

from settings_store.shared.exceptions import SettingsStoreError

# Namespaces double as file names for the JSON file backend.
_NAMESPACE_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9\-_.]{0,127}$")
_RESERVED_NAMESPACES = frozenset({".", ".."})


class ValidationError(SettingsStoreError):
    """Raised when input validation fails."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def validate_namespace(namespace: Any, field: str = "namespace") -> str:
    """Validate a namespace (suite) identifier."""
    if not isinstance(namespace, str):
        raise ValidationError(field, "must be a string")
    if not namespace or not namespace.strip():
        raise ValidationError(field, "cannot be empty")
    namespace = namespace.strip()
    if namespace in _RESERVED_NAMESPACES or not _NAMESPACE_PATTERN.match(namespace):
        raise ValidationError(
            field,
            "must be 1-128 chars, start with alphanumeric, contain only alphanumeric/hyphens/underscores/dots",
        )
    return namespace


def validate_key(key: Any, field: str = "key") -> str:
    """Validate a settings key. Any string is a valid key."""
    if not isinstance(key, str):
        raise ValidationError(field, f"must be a string, got {type(key).__name__}")
    return key


def validate_keys(keys: Any, field: str = "keys") -> frozenset[str]:
    """Validate a collection of keys, e.g. the keys kept by clean()."""
    if isinstance(keys, str):
        raise ValidationError(field, "must be a collection of strings, not a single string")
    return frozenset(validate_key(k, field=field) for k in keys)
