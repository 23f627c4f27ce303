"""Validación de entradas, antes de construir cualquier petición.

Cada helper devuelve el valor sin cambios o lanza `SudojoValidationError`;
aquí no hay I/O, así que un identificador inválido nunca llega al transporte.
"""

from __future__ import annotations

import re

from core.domain.errors import SudojoValidationError

_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)
# ASCII digits only; `\d` would also accept other Unicode digits.
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

MIN_LEVEL = 1
MAX_LEVEL = 12
MIN_TECHNIQUE = 1
MAX_TECHNIQUE = 37
USER_ID_MAX_LENGTH = 128
HISTORY_MAX_LIMIT = 100


def is_valid_uuid(value: object) -> bool:
    return isinstance(value, str) and _UUID_RE.fullmatch(value) is not None


def validate_uuid(value: str, field: str = "UUID") -> str:
    if not value:
        raise SudojoValidationError(f"{field} is required", reason="required", field=field, value=value)
    if not is_valid_uuid(value):
        raise SudojoValidationError(
            f'Invalid {field} format: "{value}". '
            "Expected UUID format (xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx)",
            reason="invalid_format",
            field=field,
            value=value,
        )
    return value


def validate_date(value: str, field: str = "date") -> str:
    """Solo comprueba la forma `YYYY-MM-DD`; la validez del calendario la decide el backend."""

    if not value:
        raise SudojoValidationError(f"{field} is required", reason="required", field=field, value=value)
    if not isinstance(value, str) or _DATE_RE.fullmatch(value) is None:
        raise SudojoValidationError(
            f'Invalid {field} format: "{value}". Expected YYYY-MM-DD format',
            reason="invalid_format",
            field=field,
            value=value,
        )
    return value


def validate_int_range(value: int, field: str, minimum: int, maximum: int | None = None) -> int:
    # bool is an int subclass; True must not pass as level 1.
    if isinstance(value, bool) or not isinstance(value, int):
        raise SudojoValidationError(
            f'Invalid {field}: "{value}". Expected an integer',
            reason="invalid_format",
            field=field,
            value=value,
        )
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f"{minimum}-{maximum}" if maximum is not None else f">= {minimum}"
        raise SudojoValidationError(
            f"Invalid {field}: {value}. Expected {bounds}",
            reason="out_of_range",
            field=field,
            value=value,
            minimum=minimum,
            maximum=maximum,
        )
    return value


def validate_length(value: str, field: str, minimum: int, maximum: int) -> str:
    length = len(value) if isinstance(value, str) else 0
    if length < minimum or length > maximum:
        raise SudojoValidationError(
            f'Invalid {field}: "{value}". Expected {minimum}-{maximum} characters',
            reason="invalid_length",
            field=field,
            value=value,
            minimum=minimum,
            maximum=maximum,
        )
    return value


def validate_level(level: int, field: str = "level") -> int:
    return validate_int_range(level, field, MIN_LEVEL, MAX_LEVEL)


def validate_technique(technique: int, field: str = "technique") -> int:
    return validate_int_range(technique, field, MIN_TECHNIQUE, MAX_TECHNIQUE)


def validate_user_id(user_id: str) -> str:
    return validate_length(user_id, "userId", 1, USER_ID_MAX_LENGTH)


def validate_pagination(limit: int | None, offset: int | None) -> tuple[int | None, int | None]:
    if limit is not None:
        validate_int_range(limit, "limit", 1, HISTORY_MAX_LIMIT)
    if offset is not None:
        validate_int_range(offset, "offset", 0)
    return limit, offset
