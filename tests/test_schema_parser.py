"""Tests for turning raw model output into a validated FormSchema."""

import json

import pytest

from app.agents.form_generator.schema_parser import SchemaParser, strip_code_fences
from app.core.exceptions import SchemaValidationError


@pytest.fixture
def parser():
    return SchemaParser()


def _with_fields(form: dict, fields: list) -> str:
    return json.dumps({**form, "fields": fields})


class TestStripCodeFences:
    def test_clean_text_untouched(self):
        assert strip_code_fences('{"a": 1}') == '{"a": 1}'

    def test_json_fence_removed(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence_removed(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_unterminated_fence_removed(self):
        assert strip_code_fences('```json\n{"a": 1}') == '{"a": 1}'

    def test_idempotent(self):
        once = strip_code_fences('  ```json\n{"a": 1}\n```  ')
        assert strip_code_fences(once) == once


class TestParseValid:
    def test_preserves_field_order(self, parser, feedback_json):
        form = parser.parse(feedback_json)

        assert form.title == "Feedback Form"
        assert [f.name for f in form.fields] == ["name", "email", "rating", "comments"]
        assert len({f.name for f in form.fields}) == len(form.fields)

    def test_fenced_and_clean_output_parse_identically(self, parser, feedback_json):
        clean = parser.parse(feedback_json)
        fenced = parser.parse(f"```json\n{feedback_json}\n```")

        assert clean == fenced

    def test_select_with_options(self, parser, feedback_form):
        raw = _with_fields(feedback_form, [
            {"name": "plan", "label": "Plan", "type": "select", "required": True,
             "options": ["Basic", "Pro"]},
        ])

        form = parser.parse(raw)

        assert form.fields[0].options == ["Basic", "Pro"]

    def test_empty_options_on_non_select_treated_as_absent(self, parser, feedback_form):
        raw = _with_fields(feedback_form, [
            {"name": "name", "label": "Name", "type": "text", "required": True, "options": []},
        ])

        form = parser.parse(raw)

        assert form.fields[0].options is None
        assert "options" not in form.field_dicts()[0]

    def test_empty_description_allowed(self, parser, feedback_form):
        feedback_form["description"] = ""

        form = parser.parse(json.dumps(feedback_form))

        assert form.description == ""

    def test_extra_keys_ignored(self, parser, feedback_form):
        feedback_form["fields"][0]["placeholder"] = "Jane Doe"

        form = parser.parse(json.dumps(feedback_form))

        assert "placeholder" not in form.field_dicts()[0]


class TestParseRejects:
    def test_prose_refusal(self, parser):
        with pytest.raises(SchemaValidationError) as exc:
            parser.parse("Sorry, I can't help with that.")
        assert exc.value.rule == "json"

    def test_empty_response(self, parser):
        with pytest.raises(SchemaValidationError):
            parser.parse("   ")

    def test_json_embedded_in_prose_is_not_extracted(self, parser, feedback_json):
        with pytest.raises(SchemaValidationError):
            parser.parse(f"Here is your form: {feedback_json}")

    def test_top_level_array(self, parser):
        with pytest.raises(SchemaValidationError) as exc:
            parser.parse("[]")
        assert exc.value.rule == "object"

    def test_select_without_options(self, parser, feedback_form):
        raw = _with_fields(feedback_form, [
            {"name": "plan", "label": "Plan", "type": "select", "required": True},
        ])

        with pytest.raises(SchemaValidationError) as exc:
            parser.parse(raw)

        assert exc.value.rule == "select_requires_options"
        assert exc.value.field == "fields[0] (plan)"

    def test_select_with_empty_options(self, parser, feedback_form):
        raw = _with_fields(feedback_form, [
            {"name": "plan", "label": "Plan", "type": "select", "required": True, "options": []},
        ])

        with pytest.raises(SchemaValidationError):
            parser.parse(raw)

    def test_options_on_non_select(self, parser, feedback_form):
        feedback_form["fields"][2]["options"] = ["1", "2", "3"]

        with pytest.raises(SchemaValidationError) as exc:
            parser.parse(json.dumps(feedback_form))

        assert exc.value.rule == "options_only_for_select"
        assert "rating" in exc.value.field

    def test_duplicate_names(self, parser, feedback_form):
        feedback_form["fields"][1]["name"] = "name"

        with pytest.raises(SchemaValidationError) as exc:
            parser.parse(json.dumps(feedback_form))

        assert exc.value.rule == "duplicate_name"
        assert "name" in exc.value.message

    def test_unknown_type(self, parser, feedback_form):
        feedback_form["fields"][0]["type"] = "phone"

        with pytest.raises(SchemaValidationError) as exc:
            parser.parse(json.dumps(feedback_form))

        assert exc.value.field == "fields[0] (name).type"

    def test_required_missing(self, parser, feedback_form):
        del feedback_form["fields"][3]["required"]

        with pytest.raises(SchemaValidationError) as exc:
            parser.parse(json.dumps(feedback_form))

        assert exc.value.field == "fields[3] (comments).required"

    def test_required_must_be_boolean(self, parser, feedback_form):
        feedback_form["fields"][0]["required"] = "yes"

        with pytest.raises(SchemaValidationError):
            parser.parse(json.dumps(feedback_form))

    def test_name_must_be_identifier_safe(self, parser, feedback_form):
        feedback_form["fields"][0]["name"] = "full name"

        with pytest.raises(SchemaValidationError):
            parser.parse(json.dumps(feedback_form))

    def test_no_fields(self, parser, feedback_form):
        feedback_form["fields"] = []

        with pytest.raises(SchemaValidationError) as exc:
            parser.parse(json.dumps(feedback_form))

        assert exc.value.field == "fields"

    def test_missing_title(self, parser, feedback_form):
        del feedback_form["title"]

        with pytest.raises(SchemaValidationError) as exc:
            parser.parse(json.dumps(feedback_form))

        assert exc.value.field == "title"

    def test_missing_description(self, parser, feedback_form):
        del feedback_form["description"]

        with pytest.raises(SchemaValidationError) as exc:
            parser.parse(json.dumps(feedback_form))

        assert exc.value.field == "description"
        assert exc.value.rule == "missing"
