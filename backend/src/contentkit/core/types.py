"""Property type registry with coercion and storage defaults."""

import ipaddress
import json
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from contentkit.core.clock import Clock, resolve_time, system_clock
from contentkit.errors import ValidationError


@dataclass(frozen=True)
class PropertyType:
    name: str
    storage_type: str
    coerce: Callable[[Any, Clock], Any]
    serialize: Callable[[Any], Any]


def _identity(value: Any) -> Any:
    return value


def normalize_ident(value: Any) -> Any:
    """Normalize an object identifier.

    Numeric strings become integers; empty values and zero become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"Identifier must be a finite number, received {value}")
        value = int(value)
    if isinstance(value, int):
        return value or None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            number = int(stripped)
        except ValueError:
            try:
                number = int(float(stripped))
            except (ValueError, OverflowError):
                return stripped
        return number or None
    raise ValidationError(
        f"Identifier must be a scalar value, received {type(value).__name__}"
    )


def _coerce_id(value: Any, clock: Clock) -> Any:
    return normalize_ident(value)


def _coerce_ref(value: Any, clock: Clock) -> Any:
    """Accept a scalar, a record holding an "id", or an object exposing .id."""
    if isinstance(value, Mapping):
        value = value.get("id")
    elif hasattr(value, "obj_type") and hasattr(value, "id"):
        value = value.id
    return normalize_ident(value)


def _serialize_id(value: Any) -> Any:
    return None if value is None else str(value)


def _coerce_string(value: Any, clock: Clock) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(
            f"Value must be a string, received {type(value).__name__}"
        )
    return value


def _coerce_boolean(value: Any, clock: Clock) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(value)


def _serialize_boolean(value: Any) -> int:
    return 1 if value else 0


def _coerce_integer(value: Any, clock: Clock) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError("Value must be an integer, received bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            try:
                return int(float(value.strip()))
            except ValueError:
                pass
    raise ValidationError(
        f"Value must be an integer, received {type(value).__name__}"
    )


def _coerce_datetime(value: Any, clock: Clock) -> datetime | None:
    if value is None or value == "":
        return None
    value = resolve_time(value, clock)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"Invalid date/time value: {exc}") from exc
    if not isinstance(value, datetime):
        raise ValidationError(
            "Value must be a date/time string or a datetime instance"
        )
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def _serialize_datetime(value: Any) -> str | None:
    return None if value is None else value.isoformat()


def _coerce_json(value: Any, clock: Clock) -> Any:
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON value: {exc}") from exc
    return value


def _serialize_json(value: Any) -> str | None:
    return None if value is None else json.dumps(value, default=str)


def _coerce_permissions(value: Any, clock: Clock) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [p.strip() for p in value.split(",") if p.strip()]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(p) for p in value]
    raise ValidationError(
        "Invalid permissions. Permissions need to be a list "
        f"({type(value).__name__} given)"
    )


def _serialize_permissions(value: Any) -> str:
    return ",".join(value or [])


def _coerce_ip(value: Any, clock: Clock) -> int | None:
    if value is None:
        return None
    if isinstance(value, str):
        try:
            return int(ipaddress.IPv4Address(value.strip()))
        except ValueError:
            return 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return int(value)
    return 0


# Built-in property types
PROPERTY_TYPES: dict[str, PropertyType] = {
    "id": PropertyType("id", "TEXT", _coerce_id, _serialize_id),
    "ref": PropertyType("ref", "TEXT", _coerce_ref, _serialize_id),
    "string": PropertyType("string", "TEXT", _coerce_string, _identity),
    "text": PropertyType("text", "TEXT", _coerce_string, _identity),
    "boolean": PropertyType("boolean", "INTEGER", _coerce_boolean, _serialize_boolean),
    "integer": PropertyType("integer", "INTEGER", _coerce_integer, _identity),
    "datetime": PropertyType("datetime", "TEXT", _coerce_datetime, _serialize_datetime),  # ISO format
    "json": PropertyType("json", "TEXT", _coerce_json, _serialize_json),
    "permissions": PropertyType(
        "permissions", "TEXT", _coerce_permissions, _serialize_permissions
    ),  # comma-joined
    "ip": PropertyType("ip", "INTEGER", _coerce_ip, _identity),
    "mixed": PropertyType("mixed", "TEXT", lambda value, clock: value, _identity),
}


def get_property_type(type_name: str) -> PropertyType:
    """Get property type definition, defaulting to mixed if unknown."""
    return PROPERTY_TYPES.get(type_name, PROPERTY_TYPES["mixed"])


def get_storage_type(type_name: str) -> str:
    """Get SQL storage type for a property type."""
    return get_property_type(type_name).storage_type


def coerce_value(type_name: str, value: Any, clock: Clock | None = None) -> Any:
    return get_property_type(type_name).coerce(value, clock or system_clock)


def serialize_value(type_name: str, value: Any) -> Any:
    return get_property_type(type_name).serialize(value)
