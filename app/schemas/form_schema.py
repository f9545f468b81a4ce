# app/schemas/form_schema.py

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr, field_validator, model_validator
from pydantic_core import PydanticCustomError


FieldType = Literal["text", "email", "number", "textarea", "checkbox", "select", "file", "date"]

FIELD_TYPES = ("text", "email", "number", "textarea", "checkbox", "select", "file", "date")

FIELD_NAME_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"


class FieldSpec(BaseModel):
    """One form input as produced by the generator"""

    name: StrictStr = Field(pattern=FIELD_NAME_PATTERN)
    label: StrictStr = Field(min_length=1)
    type: FieldType
    required: StrictBool
    options: Optional[List[StrictStr]] = None

    @model_validator(mode="after")
    def check_options(self) -> "FieldSpec":
        if self.type == "select":
            if not self.options:
                raise PydanticCustomError(
                    "select_requires_options",
                    "select field '{name}' requires a non-empty 'options' list",
                    {"name": self.name},
                )
        elif self.options:
            raise PydanticCustomError(
                "options_only_for_select",
                "field '{name}' of type '{type}' must not define 'options'",
                {"name": self.name, "type": self.type},
            )
        else:
            # [] on a non-select field means "no options"
            self.options = None
        return self


class FormSchema(BaseModel):
    """The contract the generative model must satisfy"""

    title: StrictStr = Field(min_length=1)
    description: StrictStr
    fields: List[FieldSpec] = Field(min_length=1)

    @field_validator("fields")
    @classmethod
    def check_unique_names(cls, fields: List[FieldSpec]) -> List[FieldSpec]:
        seen = set()
        for field in fields:
            if field.name in seen:
                raise PydanticCustomError(
                    "duplicate_name",
                    "duplicate field name '{name}'",
                    {"name": field.name},
                )
            seen.add(field.name)
        return fields

    def field_dicts(self) -> List[dict]:
        return [field.model_dump(exclude_none=True) for field in self.fields]
