from .enums import FieldType, NotificationEvent, Priority, RequesterType, Role, TicketStatus
from .settings import (
    AppSettings,
    CategoryCreate,
    CustomField,
    CustomFieldCreate,
    EmailConfig,
    NotificationPreferences,
    ThemeUpdate,
)
from .ticket import (
    AssignmentUpdate,
    Comment,
    CommentCreate,
    CreatedBy,
    CustomAnswer,
    StatusUpdate,
    Ticket,
    TicketDetail,
    TicketFilters,
    TicketOutcome,
    TicketSubmission,
)
from .user import LoginPayload, LoginResponse, User, UserCreate, UserPublic
from .notification import Notification
from .suggestion import Suggestion
from .form import ControlOption, FormControl, PublicForm
from .dashboard import CategoryCount, DashboardStats

__all__ = [
    "FieldType",
    "NotificationEvent",
    "Priority",
    "RequesterType",
    "Role",
    "TicketStatus",
    "AppSettings",
    "CategoryCreate",
    "CustomField",
    "CustomFieldCreate",
    "EmailConfig",
    "NotificationPreferences",
    "ThemeUpdate",
    "AssignmentUpdate",
    "Comment",
    "CommentCreate",
    "CreatedBy",
    "CustomAnswer",
    "StatusUpdate",
    "Ticket",
    "TicketDetail",
    "TicketFilters",
    "TicketOutcome",
    "TicketSubmission",
    "LoginPayload",
    "LoginResponse",
    "User",
    "UserCreate",
    "UserPublic",
    "Notification",
    "Suggestion",
    "ControlOption",
    "FormControl",
    "PublicForm",
    "CategoryCount",
    "DashboardStats",
]
