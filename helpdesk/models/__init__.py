from .base import Base
from .settings import SETTINGS_ROW_ID, SettingsRecord
from .ticket import TicketRecord
from .user import UserRecord

__all__ = ["Base", "SETTINGS_ROW_ID", "SettingsRecord", "TicketRecord", "UserRecord"]
