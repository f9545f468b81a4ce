"""Tests for validating end-user answers against a stored form."""

import pytest

from app.core.exceptions import SubmissionValidationError
from app.core.submission_validator import validate_submission
from app.schemas.form_schema import FormSchema


@pytest.fixture
def form(feedback_form):
    feedback_form["fields"].extend([
        {"name": "plan", "label": "Plan", "type": "select", "required": False,
         "options": ["Basic", "Pro"]},
        {"name": "subscribe", "label": "Subscribe", "type": "checkbox", "required": False},
        {"name": "visit_date", "label": "Visit date", "type": "date", "required": False},
    ])
    return FormSchema.model_validate(feedback_form)


def _errors(form, answers):
    with pytest.raises(SubmissionValidationError) as exc:
        validate_submission(form, answers)
    return exc.value.errors


def test_valid_answers_returned_cleaned(form):
    cleaned = validate_submission(form, {
        "name": "Ada",
        "email": "ada@example.com",
        "rating": "5",
        "comments": "",
        "plan": "Pro",
        "subscribe": True,
        "visit_date": "2026-10-19",
    })

    assert cleaned == {
        "name": "Ada",
        "email": "ada@example.com",
        "rating": 5,
        "plan": "Pro",
        "subscribe": True,
        "visit_date": "2026-10-19",
    }


def test_missing_required_answers(form):
    errors = _errors(form, {"name": "  "})

    assert errors == {
        "name": "this field is required",
        "email": "this field is required",
        "rating": "this field is required",
    }


def test_unknown_field_rejected(form):
    errors = _errors(form, {"name": "Ada", "email": "ada@example.com", "rating": 4, "age": 30})

    assert errors == {"age": "unknown field"}


@pytest.mark.parametrize("answer,field", [
    ({"email": "not-an-email"}, "email"),
    ({"rating": "five"}, "rating"),
    ({"rating": True}, "rating"),
    ({"plan": "Enterprise"}, "plan"),
    ({"subscribe": "yes"}, "subscribe"),
    ({"visit_date": "19/10/2026"}, "visit_date"),
    ({"name": 42}, "name"),
])
def test_invalid_answer_reported_per_field(form, answer, field):
    answers = {"name": "Ada", "email": "ada@example.com", "rating": 4, **answer}

    errors = _errors(form, answers)

    assert list(errors) == [field]


def test_all_errors_collected(form):
    errors = _errors(form, {"email": "nope", "rating": "x"})

    assert set(errors) == {"name", "email", "rating"}


def test_fractional_number_kept(form):
    cleaned = validate_submission(form, {"name": "Ada", "email": "ada@example.com", "rating": "4.5"})

    assert cleaned["rating"] == 4.5
