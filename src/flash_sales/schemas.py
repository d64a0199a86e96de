"""Boundary validation for flash sale payloads.

Payloads are already HTML-sanitized when they get here. These helpers check
required fields and coerce types so the engine only sees clean records.
"""
from __future__ import annotations
from typing import Any, Dict, List, Tuple

from ..dao import IMMUTABLE_FIELDS, normalize_product_ids
from .errors import ValidationError

REQUIRED_FIELDS = ("title", "discount", "startDate", "endDate")

INT_FIELDS = ("discount", "order")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer")


def _check_fields(data: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    clean = dict(data)
    errors: List[str] = []
    for name in INT_FIELDS:
        if name not in clean or clean[name] is None:
            continue
        try:
            clean[name] = _coerce_int(name, clean[name])
        except ValueError as e:
            errors.append(str(e))
    discount = clean.get("discount")
    if isinstance(discount, int) and not 0 <= discount <= 100:
        errors.append("discount must be between 0 and 100")
    if "productIds" in clean:
        try:
            clean["productIds"] = normalize_product_ids(clean["productIds"])
        except ValueError as e:
            errors.append(str(e))
    return clean, errors


def validate_create(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    missing = [f for f in REQUIRED_FIELDS if _is_blank(data.get(f))]
    if missing:
        raise ValidationError("All required fields must be filled", [f"{f} is required" for f in missing])
    clean, errors = _check_fields(data)
    if errors:
        raise ValidationError("Invalid flash sale data", errors)
    return clean


def validate_update(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    data = {k: v for k, v in data.items() if k not in IMMUTABLE_FIELDS}
    # required fields may be changed but never cleared
    blanked = [f for f in REQUIRED_FIELDS if f in data and _is_blank(data[f])]
    if blanked:
        raise ValidationError("Required fields cannot be emptied", [f"{f} is required" for f in blanked])
    clean, errors = _check_fields(data)
    if "isActive" in clean and not isinstance(clean["isActive"], bool):
        errors.append("isActive must be a boolean")
    if errors:
        raise ValidationError("Invalid flash sale data", errors)
    return clean
