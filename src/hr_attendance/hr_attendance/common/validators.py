"""Request validation pipeline.

A validator is a plain callable ``(payload) -> list[FieldError]``. ``validate``
runs them all against one payload and raises a single ``ValidationError``
carrying every field error, so handlers only ever see valid input.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterable, Mapping, Sequence

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


Validator = Callable[[Mapping[str, Any]], list]


def validate(payload: Any, *steps: Validator) -> Mapping[str, Any]:
    data = {} if payload is None else payload
    if not isinstance(data, Mapping):
        raise ValidationError("Validation errors", errors=[asdict(FieldError("body", "must be a JSON object"))])
    errors: list[FieldError] = []
    for step in steps:
        errors.extend(step(data))
    if errors:
        raise ValidationError("Validation errors", errors=[asdict(e) for e in errors])
    return data


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def required(*fields: str) -> Validator:
    def step(data):
        return [FieldError(f, f"{f} is required") for f in fields if _missing(data.get(f))]

    return step


def iso_datetime(field: str, *, optional: bool = False) -> Validator:
    def step(data):
        value = data.get(field)
        if _missing(value):
            return [] if optional else [FieldError(field, f"{field} is required")]
        try:
            parse_iso_datetime(str(value))
        except ValueError:
            return [FieldError(field, f"{field} must be an ISO-8601 timestamp")]
        return []

    return step


def iso_date(field: str, *, optional: bool = True) -> Validator:
    def step(data):
        value = data.get(field)
        if _missing(value):
            return [] if optional else [FieldError(field, f"{field} is required")]
        try:
            parse_iso_date(str(value))
        except ValueError:
            return [FieldError(field, f"{field} must be a YYYY-MM-DD date")]
        return []

    return step


def one_of(field: str, choices: Iterable[str], *, optional: bool = False) -> Validator:
    allowed = tuple(choices)

    def step(data):
        value = data.get(field)
        if _missing(value):
            return [] if optional else [FieldError(field, f"{field} is required")]
        if value not in allowed:
            return [FieldError(field, f"{field} must be one of: {', '.join(allowed)}")]
        return []

    return step


def _finite_numbers(values: Sequence[Any]) -> bool:
    try:
        return all(not isinstance(v, bool) and math.isfinite(float(v)) for v in values)
    except (TypeError, ValueError):
        return False


def location(field: str = "location") -> Validator:
    """GeoJSON-style ``{"coordinates": [lng, lat]}``."""

    def step(data):
        value = data.get(field)
        coords = value.get("coordinates") if isinstance(value, Mapping) else None
        if not isinstance(coords, (list, tuple)) or len(coords) != 2 or not _finite_numbers(coords):
            return [FieldError(field, f"{field}.coordinates must be [longitude, latitude]")]
        lng, lat = float(coords[0]), float(coords[1])
        if not (-180.0 <= lng <= 180.0 and -90.0 <= lat <= 90.0):
            return [FieldError(field, f"{field}.coordinates out of range")]
        return []

    return step


def descriptor(field: str, length: int) -> Validator:
    def step(data):
        value = data.get(field)
        if not isinstance(value, (list, tuple)) or len(value) != length or not _finite_numbers(value):
            return [FieldError(field, f"{field} must be an array of {length} numbers")]
        return []

    return step


def positive_int(field: str, *, optional: bool = False) -> Validator:
    def step(data):
        value = data.get(field)
        if _missing(value):
            return [] if optional else [FieldError(field, f"{field} is required")]
        try:
            ok = not isinstance(value, bool) and int(value) > 0
        except (TypeError, ValueError):
            ok = False
        return [] if ok else [FieldError(field, f"{field} must be a positive integer")]

    return step


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", errors=[asdict(FieldError(field_name, "required"))])
    return value.strip()
