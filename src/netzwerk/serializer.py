"""Serializer capability used to encode request bodies and decode responses.

The client never calls :mod:`json` on typed payloads directly; it goes
through a :class:`Serializer`, so applications can swap in their own wire
format.  :class:`JSONSerializer` is the default and is built on Pydantic's
:class:`~pydantic.TypeAdapter`, which means a response can be decoded into
anything Pydantic validates -- models, dataclasses, ``TypedDict``,
``list[Model]``, plain builtins or ``Any``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from netzwerk.exceptions import SerializationError


@runtime_checkable
class Serializer(Protocol):
    """Encode values to bytes and decode bytes into a target type."""

    def encode(self, value: Any) -> bytes:
        """Encode *value* to bytes. Raises :class:`SerializationError`."""
        ...

    def decode(self, data: bytes, target: Any) -> Any:
        """Decode *data* into an instance of *target*. Raises :class:`SerializationError`."""
        ...

    def to_mapping(self, value: Any) -> Any:
        """Return the plain (JSON-compatible) representation of *value*."""
        ...


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


_ANY: TypeAdapter[Any] = TypeAdapter(Any)


def type_name(target: Any) -> str:
    """Human-readable name of a decode target, used in parse error messages."""
    return getattr(target, "__name__", None) or repr(target)


class JSONSerializer:
    """JSON serializer backed by :class:`pydantic.TypeAdapter`.

    Example::

        serializer = JSONSerializer()
        user = serializer.decode(b'{"id": 1, "name": "Ada"}', User)
        body = serializer.encode(user)
    """

    def encode(self, value: Any) -> bytes:
        try:
            return _ANY.dump_json(value)
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot encode {type(value).__name__} as JSON: {exc}"
            ) from exc

    def decode(self, data: bytes, target: Any) -> Any:
        try:
            adapter = _adapter(target)
        except TypeError:
            # Unhashable targets bypass the cache.
            try:
                adapter = TypeAdapter(target)
            except TypeError as exc:
                raise SerializationError(f"Cannot decode into {type_name(target)}: {exc}") from exc
        try:
            return adapter.validate_json(data)
        except ValidationError as exc:
            raise SerializationError(str(exc)) from exc

    def to_mapping(self, value: Any) -> Any:
        try:
            return _ANY.dump_python(value, mode="json")
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Cannot convert {type(value).__name__} to plain data: {exc}"
            ) from exc
