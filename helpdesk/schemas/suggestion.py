from __future__ import annotations

from pydantic import Field

from .base import CamelModel


class Suggestion(CamelModel):
    text: str
    sources: list[str] = Field(default_factory=list)
