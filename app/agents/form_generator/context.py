# app/agents/form_generator/context.py

import json
import logging
from typing import Any, Dict, List, Sequence

from app.schemas.form_schema import FormSchema
from app.schemas.forms import RetrievedMatch

logger = logging.getLogger(__name__)

SEPARATOR = "\n---\n"
TRUNCATION_MARK = "..."


def render_form_block(title: str, description: str, fields: List[Dict[str, Any]]) -> str:
    """Compact text rendering of a form, shared by context blocks and summaries."""
    return (
        f"Title: {title}\n"
        f"Description: {description}\n"
        f"Fields: {json.dumps(fields, ensure_ascii=False, separators=(',', ':'))}"
    )


def summarize_form(form: FormSchema) -> str:
    """Deterministic summary that gets embedded for future retrieval."""
    return render_form_block(form.title, form.description, form.field_dicts())


class ContextAssembler:
    """
    Turns retrieved matches into a bounded context block.

    At most ``max_matches`` blocks are used, each cut to
    ``max_chars_per_match``, and blocks stop being added once the total would
    exceed ``max_total_chars``.
    """

    def __init__(
        self,
        max_matches: int = 3,
        max_chars_per_match: int = 1500,
        max_total_chars: int = 4500
    ):
        if max_matches < 1:
            raise ValueError("max_matches must be a positive integer")
        if max_chars_per_match <= len(TRUNCATION_MARK):
            raise ValueError(f"max_chars_per_match must be longer than {len(TRUNCATION_MARK)} characters")
        if max_total_chars < max_chars_per_match:
            raise ValueError("max_total_chars must be at least max_chars_per_match")

        self.max_matches = max_matches
        self.max_chars_per_match = max_chars_per_match
        self.max_total_chars = max_total_chars

    def _render(self, index: int, match: RetrievedMatch) -> str:
        block = (
            f"Example {index} (similarity {match.similarity_score:.2f})\n"
            + render_form_block(
                match.title,
                match.description,
                [field.model_dump(exclude_none=True) for field in match.fields],
            )
        )
        if len(block) > self.max_chars_per_match:
            block = block[:self.max_chars_per_match - len(TRUNCATION_MARK)] + TRUNCATION_MARK
        return block

    def build(self, matches: Sequence[RetrievedMatch]) -> str:
        if not matches:
            return ""

        blocks: List[str] = []
        total = 0

        for i, match in enumerate(matches[:self.max_matches], 1):
            block = self._render(i, match)
            added = len(block) + (len(SEPARATOR) if blocks else 0)
            if total + added > self.max_total_chars:
                logger.info(f"Context budget reached after {len(blocks)} example(s)")
                break
            blocks.append(block)
            total += added

        return SEPARATOR.join(blocks)
