from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from outletstock.errors import ValidationError
from outletstock.time_utils import parse_iso_date


# Field kinds understood by validate_fields
KIND_ID = "id"
KIND_QUANTITY = "quantity"
KIND_DATE = "date"
KIND_TEXT = "text"

# Ids are stored as signed 64-bit integers
MAX_ID = 2 ** 63 - 1
ID_RE = re.compile(r"[0-9]+")

# Numeric(12, 3) quantities, Numeric(12, 2) money amounts
NUMERIC_PRECISION = 12
QUANTITY_PLACES = 3
AMOUNT_PLACES = 2


@dataclass(frozen=True)
class FieldRule:
    """
    One payload field of a recordable transaction.

    - key: name in the JSON / form payload (camelCase wire name)
    - attr: model attribute it lands on
    - kind: KIND_ID, KIND_QUANTITY, KIND_DATE or KIND_TEXT
    - label: human name used in error messages ("Product ID", "Card sales")
    - places: decimal places allowed for KIND_QUANTITY
    """
    key: str
    attr: str
    kind: str
    label: str
    required: bool = True
    places: int = QUANTITY_PLACES


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_id(value: Any, label: str) -> int:
    # bool is an int subclass; "true" is not an id
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be an integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and ID_RE.fullmatch(value.strip()):
        number = int(value.strip())
    else:
        raise ValidationError(f"{label} must be an integer")
    if not 0 <= number <= MAX_ID:
        raise ValidationError(f"{label} must be an integer")
    return number


def coerce_quantity(value: Any, label: str, places: int = QUANTITY_PLACES) -> Decimal:
    """
    Numeric and non-negative, as a Decimal.

    Must fit the column exactly: at most `places` decimal places and
    NUMERIC_PRECISION digits overall. Nothing is rounded.
    """
    if isinstance(value, bool) or _is_blank(value):
        raise ValidationError(f"{label} must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{label} must be a number")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{label} must be a number")
    if number < 0:
        raise ValidationError(f"{label} cannot be negative")
    if number >= Decimal(10) ** (NUMERIC_PRECISION - places):
        raise ValidationError(f"{label} is too large")
    if number != number.quantize(Decimal(1).scaleb(-places)):
        raise ValidationError(f"{label} allows at most {places} decimal places")
    return number


def coerce_date(value: Any, tz_name: str | None = None) -> date:
    if isinstance(value, date):
        return value
    if _is_blank(value) or not isinstance(value, str):
        raise ValidationError("Valid date is required")
    try:
        return parse_iso_date(value, tz_name)
    except ValueError:
        raise ValidationError("Valid date is required")


def validate_fields(
    payload: Mapping[str, Any] | None,
    rules: tuple[FieldRule, ...],
    *,
    tz_name: str | None = None,
) -> dict:
    """
    Validate a payload against an ordered tuple of FieldRules.

    Rules are checked in declaration order and the first failure is raised,
    so the caller sees exactly one message naming one field.

    Returns {attr: cleaned_value} for every rule whose field was present.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValidationError("Invalid JSON payload")

    cleaned: dict = {}
    for rule in rules:
        raw = payload.get(rule.key)

        if _is_blank(raw):
            if not rule.required:
                cleaned[rule.attr] = None
                continue
            if rule.kind == KIND_ID:
                raise ValidationError(f"{rule.label} is required")
            if rule.kind == KIND_QUANTITY:
                raise ValidationError(f"{rule.label} must be a number")
            if rule.kind == KIND_DATE:
                raise ValidationError("Valid date is required")
            raise ValidationError(f"{rule.label} is required")

        if rule.kind == KIND_ID:
            cleaned[rule.attr] = coerce_id(raw, rule.label)
        elif rule.kind == KIND_QUANTITY:
            cleaned[rule.attr] = coerce_quantity(raw, rule.label, rule.places)
        elif rule.kind == KIND_DATE:
            cleaned[rule.attr] = coerce_date(raw, tz_name)
        elif rule.kind == KIND_TEXT:
            cleaned[rule.attr] = str(raw).strip()
        else:
            raise ValueError(f"Unknown field kind {rule.kind!r}")

    return cleaned


# =============================================================================
# QUERY STRING HELPERS
# =============================================================================

def optional_id_arg(args: Mapping[str, str], key: str, label: str) -> int | None:
    raw = args.get(key)
    if _is_blank(raw):
        return None
    return coerce_id(raw, label)


def optional_date_arg(args: Mapping[str, str], key: str, tz_name: str | None = None) -> date | None:
    raw = args.get(key)
    if _is_blank(raw):
        return None
    try:
        return parse_iso_date(raw, tz_name)
    except ValueError:
        raise ValidationError(f"{key} must be a valid ISO-8601 date")


def required_date_arg(args: Mapping[str, str], key: str, message: str, tz_name: str | None = None) -> date:
    raw = args.get(key)
    if _is_blank(raw):
        raise ValidationError(message)
    try:
        return parse_iso_date(raw, tz_name)
    except ValueError:
        raise ValidationError(message)
