from __future__ import annotations

from pydantic import Field, field_validator

from .base import CamelModel
from .enums import Role


class User(CamelModel):
    id: str
    name: str
    email: str
    role: Role
    password_hash: str = Field(default="", repr=False)

    def public(self) -> "UserPublic":
        return UserPublic(id=self.id, name=self.name, email=self.email, role=self.role)


class UserPublic(CamelModel):
    id: str
    name: str
    email: str
    role: Role


class UserCreate(CamelModel):
    name: str
    email: str
    role: Role = Role.SUPPORT
    password: str = Field(..., min_length=6)

    @field_validator("name", "email")
    @classmethod
    def _ensure_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("name and email are required")
        return value.strip()


class LoginPayload(CamelModel):
    email: str
    password: str


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic
