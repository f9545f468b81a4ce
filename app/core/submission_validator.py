# app/core/submission_validator.py

import re
from datetime import date
from typing import Any, Dict

from app.core.exceptions import SubmissionValidationError
from app.schemas.form_schema import FieldSpec, FormSchema

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_value(field: FieldSpec, value: Any) -> Any:
    """Return the normalised answer or raise ValueError with the reason"""

    if field.type == "checkbox":
        if not isinstance(value, bool):
            raise ValueError("must be true or false")
        return value

    if field.type == "number":
        if isinstance(value, bool):
            raise ValueError("must be a number")
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            try:
                number = float(value)
            except ValueError:
                raise ValueError("must be a number")
            return int(number) if number.is_integer() else number
        raise ValueError("must be a number")

    if not isinstance(value, str):
        raise ValueError("must be a string")

    if field.type == "email" and not EMAIL_PATTERN.match(value):
        raise ValueError("must be a valid email address")

    if field.type == "select" and value not in (field.options or []):
        raise ValueError(f"must be one of {field.options}")

    if field.type == "date":
        try:
            date.fromisoformat(value)
        except ValueError:
            raise ValueError("must be a date in YYYY-MM-DD format")

    return value


def validate_submission(form: FormSchema, answers: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate end-user answers against a stored form schema.

    All violations are collected before raising so the client can highlight
    every bad input at once.

    Returns:
        Cleaned answers keyed by field name (empty optional answers dropped)

    Raises:
        SubmissionValidationError: with a reason per offending field
    """
    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}
    known = {field.name for field in form.fields}

    for key in answers:
        if key not in known:
            errors[key] = "unknown field"

    for field in form.fields:
        value = answers.get(field.name)

        if _is_empty(value):
            if field.required:
                errors[field.name] = "this field is required"
            continue

        try:
            cleaned[field.name] = _check_value(field, value)
        except ValueError as e:
            errors[field.name] = str(e)

    if errors:
        raise SubmissionValidationError(errors)

    return cleaned
