"""JSON payload codec built on pydantic type adapters.

Any type pydantic can validate works as a success or error type: models,
dataclasses, TypedDicts, builtins, and generic containers.
"""

from functools import lru_cache
from typing import Any

from pydantic import PydanticUserError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from .exceptions import CallwireError


class DecodeError(CallwireError):
    """Payload could not be decoded into the requested type."""

    def __init__(self, message: str, target: Any = None):
        super().__init__(message)
        self.target = target


class EncodeError(CallwireError):
    """Value could not be serialized to JSON."""
    pass


@lru_cache(maxsize=256)
def _cached_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _adapter(target: Any) -> TypeAdapter:
    try:
        return _cached_adapter(target)
    except TypeError:
        # unhashable type expressions skip the cache
        return TypeAdapter(target)


def decode(payload: bytes, target: Any) -> Any:
    """Decode a JSON payload into ``target``.

    An empty payload is treated as JSON ``null``, so it decodes only into
    types that accept ``None``.

    Args:
        payload: Raw JSON bytes
        target: Type to validate against

    Returns:
        The validated value

    Raises:
        DecodeError: If the payload is not valid JSON for ``target``, or
            ``target`` is not a type pydantic can validate.
    """
    try:
        adapter = _adapter(target)
        if not payload:
            return adapter.validate_python(None)
        return adapter.validate_json(payload)
    except ValidationError as e:
        raise DecodeError(str(e), target) from e
    except PydanticUserError as e:
        raise DecodeError(f"Unsupported decode target {target!r}: {e}", target) from e


def encode(value: Any) -> bytes:
    """Serialize ``value`` (model, dataclass, or plain data) to JSON bytes."""
    try:
        return to_json(value)
    except PydanticSerializationError as e:
        raise EncodeError(f"Cannot encode {type(value).__name__}: {e}") from e
