"""JSON codec for the settings store.

Two concerns live here:

* Object encoding for ``save_object``/``get_object``: any JSON-encodable
  value (dataclasses, enums, datetimes, plain containers) becomes
  deterministic UTF-8 JSON bytes, and bytes decode back into a requested
  type, guided by dataclass type hints.
* Native value packing for backends whose storage is JSON (file, JSONB):
  ``bytes`` and ``datetime`` are not JSON types, so they are wrapped in
  tagged single-key objects on the way in and unwrapped on the way out.
"""

from __future__ import annotations

import base64
import dataclasses
import json
import types
import typing
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar, Union

from settings_store.shared.exceptions import ObjectDecodeError, ObjectEncodeError

T = TypeVar("T")

_BYTES_TAG = "$bytes"
_DATETIME_TAG = "$datetime"

_SCALAR_TYPES = (str, int, float, bool, bytes, datetime)


# --- Native values ---


def is_native_value(value: Any) -> bool:
    """Return whether a backend can hold ``value`` without object encoding."""
    if isinstance(value, _SCALAR_TYPES):
        return True
    if isinstance(value, (list, tuple)):
        return all(is_native_value(v) for v in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and is_native_value(v) for k, v in value.items())
    return False


def normalize_native(value: Any) -> Any:
    """Copy a native value, turning tuples into lists."""
    if isinstance(value, (list, tuple)):
        return [normalize_native(v) for v in value]
    if isinstance(value, dict):
        return {k: normalize_native(v) for k, v in value.items()}
    return value


def pack_native(value: Any) -> Any:
    """Convert a native value into plain JSON data using tagged wrappers."""
    if isinstance(value, bytes):
        return {_BYTES_TAG: base64.b64encode(value).decode("ascii")}
    if isinstance(value, datetime):
        return {_DATETIME_TAG: value.isoformat()}
    if isinstance(value, (list, tuple)):
        return [pack_native(v) for v in value]
    if isinstance(value, dict):
        return {k: pack_native(v) for k, v in value.items()}
    return value


def unpack_native(data: Any) -> Any:
    """Inverse of :func:`pack_native`."""
    if isinstance(data, list):
        return [unpack_native(v) for v in data]
    if isinstance(data, dict):
        if len(data) == 1:
            if _BYTES_TAG in data and isinstance(data[_BYTES_TAG], str):
                return base64.b64decode(data[_BYTES_TAG])
            if _DATETIME_TAG in data and isinstance(data[_DATETIME_TAG], str):
                return datetime.fromisoformat(data[_DATETIME_TAG])
        return {k: unpack_native(v) for k, v in data.items()}
    return data


# --- Reinterpretation ---


def _is_union(tp: Any) -> bool:
    origin = typing.get_origin(tp)
    return origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType)


def reinterpret(value: Any, type_: type[T] | None) -> T | None:
    """Return ``value`` viewed as ``type_``, or None when it is not one.

    ``bool`` is never accepted where ``int`` is requested, ints widen to
    float, and lists and tuples convert into each other. Unions try each
    member in order; type forms that cannot be checked yield None.
    """
    if value is None or type_ is None or type_ is Any or type_ is object:
        return value
    if _is_union(type_):
        for member in typing.get_args(type_):
            if member is type(None):
                continue
            result = reinterpret(value, member)
            if result is not None:
                return result
        return None
    # Parameterized generics (list[int]) are checked against their origin only.
    origin = typing.get_origin(type_)
    if origin in (list, tuple, dict, set, frozenset):
        type_ = origin
    if type_ is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)  # type: ignore[return-value]
    if type_ is int and isinstance(value, bool):
        return None
    if type_ is list and isinstance(value, tuple):
        return list(value)  # type: ignore[return-value]
    if type_ is tuple and isinstance(value, list):
        return tuple(value)  # type: ignore[return-value]
    try:
        matches = isinstance(value, type_)
    except TypeError:
        return None
    return value if matches else None


# --- Object encoding ---


def _to_jsonable(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return _to_jsonable(obj.value)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, bytes):
        return base64.b64encode(obj).decode("ascii")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        try:
            data = obj.to_dict()
        except Exception as e:
            raise ObjectEncodeError(f"{type(obj).__name__}.to_dict() failed: {e}") from e
        return _to_jsonable(data)
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if isinstance(k, Enum):
                k = k.value
            if not isinstance(k, (str, int, float, bool)):
                raise TypeError(f"dict key of type {type(k).__name__} is not JSON serializable")
            out[k] = _to_jsonable(v)
        return out
    if isinstance(obj, (list, tuple, set, frozenset)):
        items = [_to_jsonable(v) for v in obj]
        return sorted(items, key=repr) if isinstance(obj, (set, frozenset)) else items
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode_object(obj: Any) -> bytes:
    """Encode ``obj`` as deterministic JSON bytes.

    Keys are sorted and separators compact, so equal objects always encode
    to identical bytes. NaN and infinities are rejected.
    """
    try:
        payload = _to_jsonable(obj)
        text = json.dumps(payload, sort_keys=True, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise ObjectEncodeError(f"cannot encode {type(obj).__name__}: {e}") from e
    return text.encode("utf-8")


# --- Object decoding ---


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", repr(tp))


def _convert(data: Any, tp: Any) -> Any:
    """Build a value of type ``tp`` from decoded JSON ``data``."""
    if tp is Any or tp is object:
        return data

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if _is_union(tp):
        if data is None and type(None) in args:
            return None
        errors = []
        for arg in args:
            if arg is type(None):
                continue
            try:
                return _convert(data, arg)
            except (TypeError, ValueError, KeyError) as e:
                errors.append(str(e))
        raise TypeError(f"no member of {tp!r} matches: {'; '.join(errors)}")

    if origin in (list, set, frozenset, tuple) or tp in (list, set, frozenset, tuple):
        if not isinstance(data, list):
            raise TypeError(f"expected array for {tp!r}, got {type(data).__name__}")
        container = origin or tp
        if container is tuple and args and not (len(args) == 2 and args[1] is Ellipsis):
            if len(args) != len(data):
                raise ValueError(f"expected {len(args)} items for {tp!r}, got {len(data)}")
            return tuple(_convert(v, a) for v, a in zip(data, args))
        item_type = args[0] if args else Any
        return container(_convert(v, item_type) for v in data)

    if origin is dict or tp is dict:
        if not isinstance(data, dict):
            raise TypeError(f"expected object for {tp!r}, got {type(data).__name__}")
        key_type, value_type = args if len(args) == 2 else (Any, Any)
        return {_convert_key(k, key_type): _convert(v, value_type) for k, v in data.items()}

    if not isinstance(tp, type):
        return data

    if issubclass(tp, Enum):
        return tp(data)
    if tp is datetime:
        if not isinstance(data, str):
            raise TypeError(f"expected ISO string for datetime, got {type(data).__name__}")
        return datetime.fromisoformat(data)
    if tp is bytes:
        if not isinstance(data, str):
            raise TypeError(f"expected base64 string for bytes, got {type(data).__name__}")
        return base64.b64decode(data, validate=True)
    if tp is float:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise TypeError(f"expected number, got {type(data).__name__}")
        return float(data)
    if tp is int:
        if isinstance(data, bool) or not isinstance(data, int):
            raise TypeError(f"expected integer, got {type(data).__name__}")
        return data
    if tp in (str, bool):
        if not isinstance(data, tp):
            raise TypeError(f"expected {tp.__name__}, got {type(data).__name__}")
        return data
    if dataclasses.is_dataclass(tp):
        return _build_dataclass(data, tp)
    from_dict = getattr(tp, "from_dict", None)
    if callable(from_dict):
        return from_dict(data)
    raise TypeError(f"cannot decode into {_type_name(tp)}")


def _convert_key(key: str, tp: Any) -> Any:
    """Rebuild a dict key that JSON forced into a string."""
    if tp is Any or tp is object or tp is str:
        return key
    try:
        return _convert(json.loads(key), tp)
    except (TypeError, ValueError):
        # String-valued enums and the like were written verbatim.
        return _convert(key, tp)


def _build_dataclass(data: Any, tp: type[T]) -> T:
    if not isinstance(data, dict):
        raise TypeError(f"expected object for {tp.__name__}, got {type(data).__name__}")
    hints = typing.get_type_hints(tp)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(tp):  # type: ignore[arg-type]
        if not f.init:
            continue
        if f.name not in data:
            if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                raise KeyError(f"{tp.__name__}.{f.name} missing")
            continue
        kwargs[f.name] = _convert(data[f.name], hints.get(f.name, Any))
    return tp(**kwargs)


def decode_object(data: bytes, type_: type[T]) -> T:
    """Decode JSON bytes produced by :func:`encode_object` into ``type_``."""
    try:
        payload = json.loads(data.decode("utf-8"))
        return _convert(payload, type_)
    except (UnicodeDecodeError, json.JSONDecodeError, TypeError, ValueError, KeyError, NameError) as e:
        raise ObjectDecodeError(f"cannot decode {_type_name(type_)}: {e}") from e
