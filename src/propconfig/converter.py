"""Conversion of raw string values to typed values."""

from __future__ import annotations

import decimal
import inspect
import math
import re
import types
import typing
from typing import Any, Callable, Union, get_args, get_origin

import pydantic
from pydantic import BaseModel, TypeAdapter

from propconfig.errors import ConversionError

__all__ = ["convert", "KINDS", "type_name"]

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_TRUE_TOKENS = frozenset({"true", "yes", "on", "1"})
_FALSE_TOKENS = frozenset({"false", "no", "off", "0"})

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset)


def _to_string(raw: str) -> str:
    return raw


def _to_integer(raw: str) -> int:
    text = raw.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError("not a base-10 integer")
    return int(text, 10)


def _to_boolean(raw: str) -> bool:
    token = raw.strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    raise ValueError("expected one of true/false, yes/no, on/off, 1/0")


def _to_decimal(raw: str) -> decimal.Decimal:
    try:
        value = decimal.Decimal(raw.strip())
    except decimal.InvalidOperation:
        raise ValueError("not a decimal number") from None
    if not value.is_finite():
        raise ValueError("non-finite values are not allowed")
    return value


def _to_number(raw: str) -> float:
    value = float(raw.strip())
    if not math.isfinite(value):
        raise ValueError("non-finite values are not allowed")
    return value


KINDS: dict[str, type] = {
    "string": str,
    "integer": int,
    "boolean": bool,
    "decimal": decimal.Decimal,
    "number": float,
}

_CONVERTERS: dict[type, Callable[[str], Any]] = {
    str: _to_string,
    int: _to_integer,
    bool: _to_boolean,
    decimal.Decimal: _to_decimal,
    float: _to_number,
}

_adapter_cache: dict[Any, TypeAdapter] = {}


def type_name(target: Any) -> str:
    """Human-readable name of a conversion target."""
    if isinstance(target, str):
        return target
    if isinstance(target, type) and get_origin(target) is None:
        return target.__name__
    return repr(target).replace("typing.", "")


def convert(raw: str, target: Any = str, *, key: str | None = None) -> Any:
    """Convert ``raw`` to ``target``.

    ``target`` is a kind name from ``KINDS`` or a Python type. ``str``, ``int``,
    ``bool``, ``Decimal`` and ``float`` use strict, locale-independent rules;
    any other type is validated with pydantic.

    Raises:
        ConversionError: If the value does not convert or the target is unknown.
    """
    if isinstance(target, str):
        if target not in KINDS:
            raise ConversionError(key=key, value=raw, target=target, reason="unknown kind")
        target = KINDS[target]

    target = _unwrap_optional(target)

    converter = _CONVERTERS.get(target) if isinstance(target, type) else None
    if converter is not None:
        try:
            return converter(raw)
        except ValueError as e:
            raise ConversionError(key=key, value=raw, target=type_name(target), reason=str(e), cause=e) from e

    return _convert_with_pydantic(raw, target, key)


def _unwrap_optional(target: Any) -> Any:
    if get_origin(target) in (Union, types.UnionType):
        args = [a for a in get_args(target) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return target


def _convert_with_pydantic(raw: str, target: Any, key: str | None) -> Any:
    try:
        adapter = _adapter_for(target)
    except pydantic.PydanticSchemaGenerationError as e:
        raise ConversionError(key=key, value=raw, target=type_name(target), reason="unsupported type", cause=e) from e

    try:
        if _expects_json(target):
            return adapter.validate_json(raw)
        if get_origin(target) in _SEQUENCE_ORIGINS or target in _SEQUENCE_ORIGINS:
            text = raw.strip()
            if text.startswith("["):
                return adapter.validate_json(text)
            items = [item.strip() for item in text.split(",")] if text else []
            return adapter.validate_python(items)
        return adapter.validate_python(raw)
    except pydantic.ValidationError as e:
        reason = "; ".join(err["msg"] for err in e.errors())
        raise ConversionError(key=key, value=raw, target=type_name(target), reason=reason, cause=e) from e


def _expects_json(target: Any) -> bool:
    if get_origin(target) is dict or target is dict:
        return True
    if get_origin(target) is typing.Annotated:
        return _expects_json(get_args(target)[0])
    return inspect.isclass(target) and issubclass(target, BaseModel)


def _adapter_for(target: Any) -> TypeAdapter:
    try:
        return _adapter_cache[target]
    except (KeyError, TypeError):
        pass
    adapter = TypeAdapter(target)
    try:
        _adapter_cache[target] = adapter
    except TypeError:
        pass
    return adapter
