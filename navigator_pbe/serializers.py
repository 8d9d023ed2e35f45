"""
PBE Serializers — Converting structured values to and from bytes.

``encrypt_value``/``decrypt_value`` accept any object with ``dumps(value) ->
bytes`` and ``loads(data) -> value``. Two are provided:

- ``JSONSerializer`` (default): orjson; supports str, int, float, dict, list,
  bytes, bool, None. ``bytes`` are wrapped as
  ``{"__pbe_bytes_b64__": "<base64>"}`` for a safe JSON round-trip.
- ``PickleSerializer``: jsonpickle; restores arbitrary Python objects.
  Only decrypt payloads you produced yourself with it.
"""
import base64
import binascii
from typing import Any, Protocol, runtime_checkable

import orjson
import jsonpickle

from .exceptions import DecodeError, SerializationError, ConfigurationError

_BYTES_WRAPPER_KEY = "__pbe_bytes_b64__"


@runtime_checkable
class Serializer(Protocol):
    """Round-trips a structured value through an opaque byte sequence."""

    def dumps(self, value: Any) -> bytes:
        ...

    def loads(self, data: bytes) -> Any:
        ...


class JSONSerializer:
    """orjson-backed serializer."""

    name = "json"

    def dumps(self, value: Any) -> bytes:
        if isinstance(value, bytes):
            value = {_BYTES_WRAPPER_KEY: base64.b64encode(value).decode("ascii")}
        try:
            return orjson.dumps(value)
        except TypeError as err:
            raise SerializationError(f"Cannot serialize value: {err}") from err

    def loads(self, data: bytes) -> Any:
        try:
            parsed = orjson.loads(data)
        except orjson.JSONDecodeError as err:
            raise DecodeError(f"Invalid JSON payload: {err}") from err
        if (
            isinstance(parsed, dict)
            and len(parsed) == 1
            and _BYTES_WRAPPER_KEY in parsed
        ):
            try:
                return base64.b64decode(parsed[_BYTES_WRAPPER_KEY], validate=True)
            except (binascii.Error, TypeError) as err:
                raise DecodeError(f"Invalid bytes wrapper: {err}") from err
        return parsed


class PickleSerializer:
    """jsonpickle-backed serializer for arbitrary Python objects."""

    name = "pickle"

    def dumps(self, value: Any) -> bytes:
        try:
            return jsonpickle.encode(value, keys=True).encode("utf-8")
        except Exception as err:
            raise SerializationError(f"Cannot serialize value: {err}") from err

    def loads(self, data: bytes) -> Any:
        try:
            return jsonpickle.decode(bytes(data).decode("utf-8"), keys=True)
        except Exception as err:
            raise DecodeError(f"Invalid jsonpickle payload: {err}") from err


_SERIALIZERS = {
    JSONSerializer.name: JSONSerializer,
    PickleSerializer.name: PickleSerializer,
}


def get_serializer(name: str = "json") -> Serializer:
    """Return a serializer instance by name (``json`` or ``pickle``).

    Raises:
        ConfigurationError: If the name is unknown.
    """
    try:
        return _SERIALIZERS[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown serializer {name!r} (available: {sorted(_SERIALIZERS)})"
        ) from None
