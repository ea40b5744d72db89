from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Type

from pydantic_core import PydanticCustomError


# Error types whose message is already a complete, field-prefixed sentence.
MESSAGE_ERROR_TYPES = frozenset({
    "enum_member",
    "min_value",
    "max_value",
    "allowed_values",
    "max_items",
    "min_items",
    "max_chars",
})


def _allowed(enum_cls: Type[Enum]) -> list[str]:
    return [e.value for e in enum_cls]


def ensure_member(field: str, enum_cls: Type[Enum], value: Any) -> Any:
    if isinstance(value, enum_cls):
        return value
    allowed = _allowed(enum_cls)
    if value not in allowed:
        raise PydanticCustomError(
            "enum_member",
            "{field} must be one of: {allowed}",
            {"field": field, "allowed": ", ".join(allowed)},
        )
    return value


def ensure_members(item_label: str, enum_cls: Type[Enum], values: Any) -> Any:
    # non-lists fall through to the regular list validation
    if not isinstance(values, list):
        return values
    allowed = _allowed(enum_cls)
    for v in values:
        if isinstance(v, enum_cls):
            continue
        if v not in allowed:
            raise PydanticCustomError(
                "enum_member",
                "Each {item} must be one of: {allowed}",
                {"item": item_label, "allowed": ", ".join(allowed)},
            )
    return values


def ensure_min(field: str, value: float | None, minimum: float, *, message: str | None = None) -> float | None:
    if value is not None and value < minimum:
        raise PydanticCustomError("min_value", message or "{field} must be {minimum} or greater",
                                  {"field": field, "minimum": minimum})
    return value


def ensure_max(field: str, value: float | None, maximum: float, *, message: str | None = None) -> float | None:
    if value is not None and value > maximum:
        raise PydanticCustomError("max_value", message or "{field} cannot exceed {maximum}",
                                  {"field": field, "maximum": maximum})
    return value


def ensure_in(field: str, value: float, allowed: Iterable[float]) -> float:
    allowed = list(allowed)
    if value not in allowed:
        raise PydanticCustomError(
            "allowed_values",
            "{field} must be {choices}",
            {"field": field, "choices": ", ".join(_fmt(a) for a in allowed[:-1]) + f", or {_fmt(allowed[-1])}"},
        )
    return value


def ensure_max_chars(field: str, value: str | None, limit: int) -> str | None:
    if value is not None and len(value) > limit:
        raise PydanticCustomError(
            "max_chars",
            "{field} must be shorter than or equal to {limit} characters",
            {"field": field, "limit": limit},
        )
    return value


def dedupe(values: list | None) -> list:
    # tag sets keep first-seen order
    seen: list = []
    for v in values or []:
        if v not in seen:
            seen.append(v)
    return seen


def _fmt(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)
