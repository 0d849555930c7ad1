"""Decode JSON response bodies into caller-owned targets."""

from __future__ import annotations

import json
from typing import IO, Any, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .errors import DecodeError, InvalidTargetError

Source = Union[bytes, bytearray, str, IO[bytes], IO[str]]
Target = TypeVar("Target")


def _check_target(target: Any) -> None:
    if isinstance(target, (dict, list)):
        return
    if isinstance(target, BaseModel):
        if target.model_config.get("frozen"):
            raise InvalidTargetError(
                f"Cannot decode into frozen model {type(target).__name__}; "
                "pass a mutable instance"
            )
        return
    raise InvalidTargetError(
        f"Decode target must be a dict, list or model instance, "
        f"got {type(target).__name__}"
    )


def _read(source: Source) -> bytes | str:
    if isinstance(source, (bytes, bytearray, str)):
        return bytes(source) if isinstance(source, bytearray) else source
    return source.read()


def decode_into(source: Source, target: Target | None) -> Target | None:
    """Populate ``target`` in place from the JSON in ``source``.

    ``None`` means no output was requested: the source is left unread. Otherwise
    ``target`` must be something the caller keeps a reference to (a ``dict``, a
    ``list`` or a non-frozen pydantic model), since decoding into a copy would
    silently lose the result.
    """
    if target is None:
        return None
    _check_target(target)

    raw = _read(source)
    if isinstance(target, BaseModel):
        try:
            parsed = type(target).model_validate_json(raw)
        except ValidationError as exc:
            raise DecodeError(f"Invalid {type(target).__name__} payload") from exc
        # Copy the whole validated state so extra keys and fields_set survive.
        object.__setattr__(target, "__dict__", parsed.__dict__)
        object.__setattr__(target, "__pydantic_extra__", parsed.__pydantic_extra__)
        object.__setattr__(target, "__pydantic_fields_set__", parsed.__pydantic_fields_set__)
        return target

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise DecodeError("Response body is not valid JSON") from exc

    if isinstance(target, dict):
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")
        target.clear()
        target.update(data)
    else:
        if not isinstance(data, list):
            raise DecodeError(f"Expected a JSON array, got {type(data).__name__}")
        target[:] = data
    return target
