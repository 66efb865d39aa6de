"""Request validation: pydantic schemas for shape, database rules for the rest.

Error messages are keyed by field and phrased the way API clients already
display them ("The building name field is required.").
"""
from __future__ import annotations
from typing import Any, Dict, List, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy import func, select

from extensions import db
from .errors import ValidationFailed
from .persistence import in_id_range


def attribute_label(field: str) -> str:
    return field.replace("_", " ")


def _message(err: Dict[str, Any], attr: str) -> str:
    kind = err.get("type", "")
    ctx = err.get("ctx") or {}
    if kind == "missing":
        return f"The {attr} field is required."
    if kind == "string_too_short":
        if ctx.get("min_length", 1) <= 1:
            return f"The {attr} field is required."
        return f"The {attr} field must be at least {ctx['min_length']} characters."
    if kind == "string_too_long":
        return f"The {attr} field must not be greater than {ctx.get('max_length')} characters."
    if kind == "string_type":
        return f"The {attr} field must be a string."
    if kind in ("int_type", "int_parsing", "int_from_float"):
        return f"The {attr} field must be an integer."
    if kind in ("bool_type", "bool_parsing"):
        return f"The {attr} field must be true or false."
    if kind in ("enum", "literal_error"):
        return f"The selected {attr} is invalid."
    if kind == "value_error" and "email" in str(err.get("msg", "")).lower():
        return f"The {attr} field must be a valid email address."
    return str(err.get("msg", "Invalid value."))


def format_errors(ve: ValidationError) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for err in ve.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "payload"
        out.setdefault(field, []).append(_message(err, attribute_label(field)))
    return out


class Validator:
    """Collects field errors from a pydantic schema and database rules.

    Rules are skipped for fields that already failed, so a missing name is
    reported as missing and not also as taken. ``validated()`` raises
    ``ValidationFailed`` with every collected error at once.
    """

    def __init__(self, schema: Type[BaseModel], payload: Any):
        self.payload: Dict[str, Any] = payload if isinstance(payload, dict) else {}
        self.errors: Dict[str, List[str]] = {}
        self.data: BaseModel | None = None
        try:
            self.data = schema.model_validate(self.payload)
        except ValidationError as ve:
            self.errors = format_errors(ve)

    def value(self, field: str) -> Any:
        if self.data is not None:
            return getattr(self.data, field)
        raw = self.payload.get(field)
        return raw.strip() if isinstance(raw, str) else raw

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def _checkable(self, field: str) -> bool:
        return field not in self.errors and self.value(field) is not None

    def unique(self, field: str, column, ignore_id: int | None = None) -> "Validator":
        if not self._checkable(field):
            return self
        model = column.class_
        stmt = select(func.count()).select_from(model).where(column == self.value(field))
        if ignore_id is not None:
            stmt = stmt.where(model.id != ignore_id)
        if db.session.scalar(stmt):
            self.add_error(field, taken_message(field))
        return self

    def exists(self, field: str, model) -> "Validator":
        if not self._checkable(field):
            return self
        try:
            pk = int(self.value(field))
        except (TypeError, ValueError):
            self.add_error(field, f"The {attribute_label(field)} field must be an integer.")
            return self
        if not in_id_range(pk) or db.session.get(model, pk) is None:
            self.add_error(field, invalid_message(field))
        return self

    def validated(self) -> BaseModel:
        if self.errors:
            raise ValidationFailed(self.errors)
        return self.data


def taken_message(field: str) -> str:
    return f"The {attribute_label(field)} has already been taken."


def taken(field: str) -> ValidationFailed:
    return ValidationFailed({field: [taken_message(field)]})


def invalid_message(field: str) -> str:
    return f"The selected {attribute_label(field)} is invalid."


def invalid(field: str) -> ValidationFailed:
    return ValidationFailed({field: [invalid_message(field)]})
