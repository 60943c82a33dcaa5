from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from .base import CamelModel
from .enums import Priority, RequesterType, TicketStatus


class CreatedBy(CamelModel):
    name: str
    email: str


class Comment(CamelModel):
    id: str
    user_id: str
    user_name: str
    text: str
    created_at: datetime


class Ticket(CamelModel):
    id: str
    title: str
    description: str
    category: str
    status: TicketStatus = TicketStatus.OPEN
    priority: Priority = Priority.MEDIUM
    requester_type: RequesterType = RequesterType.TEACHER
    grade: str | None = None
    section: str | None = None
    student_name: str | None = None
    created_by: CreatedBy
    assigned_to: str | None = None
    created_at: datetime
    updated_at: datetime
    comments: list[Comment] = Field(default_factory=list)
    custom_data: dict[str, Any] = Field(default_factory=dict)


class TicketSubmission(CamelModel):
    name: str
    email: str
    title: str
    description: str
    category: str
    priority: Priority = Priority.MEDIUM
    requester_type: RequesterType = RequesterType.TEACHER
    grade: str | None = None
    section: str | None = None
    student_name: str | None = None
    custom_data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", "title", "description", "category")
    @classmethod
    def _ensure_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name, title, description and category are required")
        return value.strip()

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        cleaned = (value or "").strip()
        local, _, domain = cleaned.partition("@")
        if not local or "." not in domain:
            raise ValueError("email must be a valid address")
        return cleaned

    @field_validator("grade", "section", "student_name")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class StatusUpdate(CamelModel):
    status: TicketStatus


class AssignmentUpdate(CamelModel):
    staff_id: str


class CommentCreate(CamelModel):
    text: str

    @field_validator("text")
    @classmethod
    def _ensure_text(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("comment text is required")
        return value.strip()


class TicketFilters(CamelModel):
    status: TicketStatus | None = None
    priority: Priority | None = None
    search: str = ""


class CustomAnswer(CamelModel):
    field_id: str
    label: str
    value: Any


class TicketOutcome(CamelModel):
    ticket: Ticket
    notice: str | None = None


class TicketDetail(CamelModel):
    ticket: Ticket
    answers: list[CustomAnswer] = Field(default_factory=list)
    assignee_name: str | None = None
