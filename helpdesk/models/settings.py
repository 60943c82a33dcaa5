from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

SETTINGS_ROW_ID = "main"


class SettingsRecord(Base):
    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(String(16), primary_key=True, default=SETTINGS_ROW_ID)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
