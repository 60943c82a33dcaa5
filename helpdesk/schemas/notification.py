from __future__ import annotations

from .base import CamelModel
from .enums import NotificationEvent


class Notification(CamelModel):
    """A simulated outbound email: recorded and surfaced, never delivered."""

    event: NotificationEvent
    ticket_id: str
    recipient: str
    message: str
    relay_host: str
