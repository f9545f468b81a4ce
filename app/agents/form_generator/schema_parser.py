# app/agents/form_generator/schema_parser.py

import json
import re
from typing import Any, Sequence

from pydantic import ValidationError

from app.core.exceptions import SchemaValidationError
from app.schemas.form_schema import FormSchema

_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?```$")


def strip_code_fences(text: str) -> str:
    """
    Remove a leading ```lang line and a trailing ``` the model may emit
    despite instructions. Clean text is returned unchanged.
    """
    text = text.strip()
    if text.startswith("```"):
        text = _OPENING_FENCE.sub("", text, count=1)
    if text.endswith("```"):
        text = _CLOSING_FENCE.sub("", text, count=1)
    return text.strip()


def _describe_location(data: Any, loc: Sequence[Any]) -> str:
    """('fields', 2, 'options') -> "fields[2] (rating).options" """
    if not loc:
        return "form"

    parts = []
    node = data
    for part in loc:
        if isinstance(part, int):
            label = f"[{part}]"
            node = node[part] if isinstance(node, list) and part < len(node) else None
            if isinstance(node, dict) and isinstance(node.get("name"), str):
                label += f" ({node['name']})"
            parts.append(label)
        else:
            parts.append(f".{part}" if parts else str(part))
            node = node.get(part) if isinstance(node, dict) else None

    return "".join(parts)


class SchemaParser:
    """Turns raw model text into a validated FormSchema or fails loudly."""

    def parse(self, raw: str) -> FormSchema:
        if raw is None:
            raise SchemaValidationError("Empty LLM response", rule="non_empty")

        text = strip_code_fences(raw)
        if not text:
            raise SchemaValidationError("Empty LLM response", rule="non_empty")

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SchemaValidationError(
                f"Model output is not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
                rule="json"
            ) from e

        if not isinstance(data, dict):
            raise SchemaValidationError(
                f"Model output must be a JSON object, got {type(data).__name__}",
                rule="object"
            )

        try:
            return FormSchema.model_validate(data)
        except ValidationError as e:
            error = e.errors()[0]
            field = _describe_location(data, error["loc"])
            raise SchemaValidationError(
                f"{field}: {error['msg']}",
                field=field,
                rule=error["type"]
            ) from e
