from __future__ import annotations

from .base import CamelModel


class CategoryCount(CamelModel):
    category: str
    count: int


class DashboardStats(CamelModel):
    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]
    by_category: list[CategoryCount]
    opened_today: int
    critical_open: int
