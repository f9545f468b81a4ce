# app/schemas/forms.py

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.form_schema import FieldSpec, FormSchema


class GenerateFormRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    prompt: str = Field(min_length=5)  # natural language description of the form


class RetrievedMatch(BaseModel):
    """A prior form of the same owner, ranked by similarity (higher is closer)"""

    form_id: Optional[str] = None
    title: str
    description: str = ""
    fields: List[FieldSpec]
    similarity_score: float


class FormRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: str
    title: str
    content: FormSchema
    embedding: List[float]
    created_at: Optional[datetime] = None


class FormSummary(BaseModel):
    """FormRecord without its embedding, for listing and rendering"""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: str
    title: str
    content: FormSchema
    created_at: Optional[datetime] = None


class FormSubmissionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    form_id: UUID
    content: Dict[str, Any]
    submitted_at: Optional[datetime] = None
