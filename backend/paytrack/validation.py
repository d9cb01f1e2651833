# Overview: Error taxonomy and request payload coercion shared by routes and services.

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any

from paytrack.time_utils import parse_due_date
from .models import STATUS_PENDING


# Largest amount the NUMERIC(12, 2) columns can hold
MAX_AMOUNT = 9_999_999_999.99

# Largest primary key a BIGINT (and SQLite INTEGER) can store
MAX_ID = 2**63 - 1


class ValidationError(ValueError):
    """400-level input problem."""


class AuthError(Exception):
    """401: bad or missing credentials."""


class NotFoundError(LookupError):
    """404: the addressed record does not exist."""


class StorageError(Exception):
    """
    500: any database failure, including constraint violations and
    rolled-back transactions. str(err) is the driver's own message.
    """


class ImportFileError(ValueError):
    """400: the uploaded file is missing, empty, or not a spreadsheet."""


def json_object(data: Any) -> dict:
    """Request body as a dict; an absent body reads as empty."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def is_storable_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= MAX_ID


def require_fields(data: dict, *fields: str) -> None:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")


def coerce_amount(value: Any, field: str = "amount", *, positive: bool = False) -> float:
    """
    Accept ints, floats and numeric strings ("1,250.50" included).

    Booleans, NaN/inf and scientific notation are rejected.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number")

    if isinstance(value, str):
        stripped = value.strip().replace(",", "")
        if not stripped:
            raise ValidationError(f"{field} must be a number")
        if "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain number (scientific notation not allowed)")
        try:
            value = float(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be a number")

    if not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be a number")

    amount = float(value)
    if math.isnan(amount) or math.isinf(amount):
        raise ValidationError(f"{field} must be a finite number")
    if amount > MAX_AMOUNT or amount < -MAX_AMOUNT:
        raise ValidationError(f"{field} is out of range")
    if positive and amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return amount


def coerce_id(value: Any, field: str = "id") -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValidationError(f"{field} must be an integer")


def coerce_due_date(value: Any, field: str = "dueDate") -> date:
    try:
        parsed = parse_due_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)")
    if parsed is None:
        raise ValidationError(f"{field} is required")
    return parsed


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class CustomerInput:
    name: str
    contact: str | None
    outstanding_amount: float
    due_date: date
    payment_status: str


def customer_input_from_payload(data: dict) -> CustomerInput:
    """
    Build a CustomerInput from the JSON body of POST /customers (camelCase keys).

    name, outstandingAmount and dueDate are required; paymentStatus defaults
    to "Pending".
    """
    require_fields(data, "name", "outstandingAmount", "dueDate")
    name = str(data["name"]).strip()
    if not name:
        raise ValidationError("name is required")

    return CustomerInput(
        name=name,
        contact=_optional_text(data.get("contact")),
        outstanding_amount=coerce_amount(data["outstandingAmount"], "outstandingAmount"),
        due_date=coerce_due_date(data["dueDate"]),
        payment_status=_optional_text(data.get("paymentStatus")) or STATUS_PENDING,
    )
