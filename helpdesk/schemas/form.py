from __future__ import annotations

from pydantic import Field

from .base import CamelModel
from .enums import FieldType


class ControlOption(CamelModel):
    value: str
    label: str


class FormControl(CamelModel):
    field_id: str
    label: str
    kind: str
    field_type: FieldType
    required: bool
    options: list[ControlOption] = Field(default_factory=list)


class PublicForm(CamelModel):
    theme_color: str
    categories: list[str]
    priorities: list[str]
    requester_types: list[str]
    grades: list[str]
    sections: list[str]
    custom_fields: list[FormControl]
