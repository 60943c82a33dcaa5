from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    ADMIN = "Admin"
    SUPPORT = "IT Support Staff"
    COORDINATOR = "Coordinator"


class RequesterType(str, Enum):
    STUDENT = "Student"
    PARENT = "Parent"
    TEACHER = "Teacher"
    STAFF = "Staff"


class TicketStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class FieldType(str, Enum):
    SHORT_TEXT = "SHORT_TEXT"
    DROPDOWN = "DROPDOWN"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"


class NotificationEvent(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    ASSIGN = "assign"
    CLOSE = "close"


# Requester types that identify a pupil by grade and section
CLASSROOM_REQUESTERS = frozenset({RequesterType.STUDENT, RequesterType.PARENT})

# Coordinators can log in but are not offered as assignees
ASSIGNABLE_ROLES = frozenset({Role.ADMIN, Role.SUPPORT})

DEFAULT_CATEGORIES = [
    "Network/Wi-Fi",
    "Hardware (PC/Laptop)",
    "Printer/Scanner",
    "Software/App Support",
    "Smart Board/Projector",
    "Email/Account Access",
    "Other",
]

GRADES = ["Nursery", "KG", "Prep", "1", "2", "3", "4", "5", "6", "7", "8", "9", "10", "11", "12"]
SECTIONS = ["A", "B", "C", "D"]
