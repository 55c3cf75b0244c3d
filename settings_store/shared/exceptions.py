"""Custom exception hierarchy for the settings store.

All store-specific exceptions inherit from SettingsStoreError. Soft failures
(missing keys, wrong types, undecodable objects) never surface as exceptions
from the store's public accessors; the classes below cover configuration
errors, programmer errors and backend I/O failures.
"""

from __future__ import annotations


class SettingsStoreError(Exception):
    """Base exception for all settings store errors."""


# --- Namespace / configuration errors ---


class NamespaceUnavailableError(SettingsStoreError):
    """Backend could not open the requested namespace.

    Treated as fatal: a store cannot exist without its namespace.
    """

    def __init__(self, namespace: str, reason: str = "") -> None:
        self.namespace = namespace
        self.reason = reason
        super().__init__(
            f"namespace {namespace!r} unavailable: {reason}" if reason else f"namespace {namespace!r} unavailable"
        )


class ConfigurationError(SettingsStoreError):
    """Invalid or missing configuration."""


# --- Value errors ---


class UnsupportedValueError(SettingsStoreError, TypeError):
    """Value cannot be stored natively by a backend."""

    def __init__(self, value_type: type) -> None:
        self.value_type = value_type
        super().__init__(
            f"values of type {value_type.__name__} cannot be stored natively; use save_object()"
        )


# --- Codec errors ---


class CodecError(SettingsStoreError):
    """Base for JSON object encoding/decoding failures."""


class ObjectEncodeError(CodecError):
    """Object could not be encoded to JSON."""


class ObjectDecodeError(CodecError):
    """Stored bytes could not be decoded into the requested type."""


# --- Backend errors ---


class BackendError(SettingsStoreError):
    """Backend I/O failed after the namespace was opened."""
