from __future__ import annotations

import re

from pydantic import Field, field_validator, model_validator

from .base import CamelModel
from .enums import DEFAULT_CATEGORIES, FieldType

THEME_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def check_theme_color(value: str) -> str:
    if not THEME_COLOR_RE.match(value or ""):
        raise ValueError("themeColor must be a hex colour like #0870b8")
    return value.lower()


class CustomField(CamelModel):
    id: str
    label: str
    type: FieldType = FieldType.SHORT_TEXT
    options: list[str] | None = None
    required: bool = False

    @model_validator(mode="after")
    def _check_options(self) -> "CustomField":
        if self.type == FieldType.SHORT_TEXT:
            self.options = None
            return self
        cleaned = [option.strip() for option in self.options or [] if option and option.strip()]
        if not cleaned:
            raise ValueError(f"Field '{self.label}' of type {self.type.value} needs at least one option")
        self.options = cleaned
        return self


class CustomFieldCreate(CamelModel):
    label: str = Field(..., min_length=1)
    type: FieldType = FieldType.SHORT_TEXT
    options: list[str] | None = None
    required: bool = False

    @field_validator("label")
    @classmethod
    def _strip_label(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("label is required")
        return value.strip()


class EmailConfig(CamelModel):
    smtp_host: str = "smtp.gmis.sch.id"
    smtp_port: str = "587"
    sender_email: str = "it.support@gmis.sch.id"
    sender_name: str = "GMIS IT Support"
    auth_enabled: bool = True


class NotificationPreferences(CamelModel):
    notify_on_creation: bool = True
    notify_on_status_change: bool = True
    notify_on_assignment: bool = True
    notify_on_resolution: bool = True


class AppSettings(CamelModel):
    theme_color: str = "#0870b8"
    categories: list[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    custom_fields: list[CustomField] = Field(default_factory=list)
    email_config: EmailConfig = Field(default_factory=EmailConfig)
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)

    @field_validator("theme_color")
    @classmethod
    def _validate_theme(cls, value: str) -> str:
        return check_theme_color(value)

    @field_validator("categories")
    @classmethod
    def _dedupe_categories(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for name in value:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen

    def field_by_id(self, field_id: str) -> CustomField | None:
        return next((field for field in self.custom_fields if field.id == field_id), None)


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1)


class ThemeUpdate(CamelModel):
    theme_color: str

    @field_validator("theme_color")
    @classmethod
    def _validate_theme(cls, value: str) -> str:
        return check_theme_color(value)

