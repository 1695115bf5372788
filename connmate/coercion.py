"""Scalar value coercion."""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from connmate.exceptions import ScalarCoercionError

T = TypeVar("T")

_DEFAULTS: dict[Any, Any] = {
    int: 0,
    float: 0.0,
    str: "",
    bool: False,
    bytes: b"",
    Decimal: Decimal(0),
    datetime: datetime.min,
    date: date.min,
    time: time(),
    timedelta: timedelta(0),
}


def default_value(target_type: type[T] | Any) -> T | None:
    """Default ("zero") value of a type, or None for types without one."""
    return _DEFAULTS.get(target_type)


@lru_cache(maxsize=128)
def _adapter(target_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target_type)


def coerce_value(value: Any, target_type: type[T] | Any) -> T | None:
    """Convert a raw driver value to ``target_type``.

    None maps to the type's default value. ``object`` and ``Any`` return the
    value untouched; ``str`` accepts anything. Everything else follows
    pydantic lax-mode conversion, e.g. ``"2024-01-01 10:00:00"`` to
    ``datetime`` or ``"42"`` to ``int``.

    Raises:
        ScalarCoercionError: If the value cannot be converted
    """
    if value is None:
        return default_value(target_type)
    if target_type is object or target_type is Any:
        return value
    if target_type is str:
        if isinstance(value, (bytes, bytearray)):
            return value.decode("utf-8")  # type: ignore[return-value]
        return str(value)  # type: ignore[return-value]

    try:
        return _adapter(target_type).validate_python(value)
    except (ValidationError, PydanticSchemaGenerationError, TypeError) as e:
        raise ScalarCoercionError(value, target_type) from e
