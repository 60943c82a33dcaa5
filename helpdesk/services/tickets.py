from __future__ import annotations

import random
from collections import Counter

from loguru import logger
from nanoid import generate

from helpdesk.schemas import (
    CategoryCount,
    Comment,
    CreatedBy,
    DashboardStats,
    NotificationEvent,
    Priority,
    RequesterType,
    Ticket,
    TicketDetail,
    TicketFilters,
    TicketOutcome,
    TicketStatus,
    TicketSubmission,
    User,
)
from helpdesk.schemas.enums import ASSIGNABLE_ROLES, CLASSROOM_REQUESTERS
from helpdesk.services.forms import clean_answers, rendered_answers
from helpdesk.services.notifications import NotificationDispatcher
from helpdesk.services.repositories import TicketRepository, UserRepository
from helpdesk.services.settings_service import ConfigService
from helpdesk.utils.time import local_date, utc_now

TICKET_ID_PREFIX = "T-"
ID_ATTEMPTS = 5


class TicketNotFoundError(LookupError):
    pass


class TicketIdExhaustedError(RuntimeError):
    pass


def generate_ticket_id() -> str:
    return f"{TICKET_ID_PREFIX}{random.randint(1000, 9998)}"


class TicketService:
    def __init__(
        self,
        *,
        tickets: TicketRepository,
        users: UserRepository,
        config: ConfigService,
        dispatcher: NotificationDispatcher,
        timezone: str = "UTC",
    ) -> None:
        self.tickets = tickets
        self.users = users
        self.config = config
        self.dispatcher = dispatcher
        self.timezone = timezone

    def _new_id(self) -> str:
        for _ in range(ID_ATTEMPTS):
            candidate = generate_ticket_id()
            if self.tickets.get_by_id(candidate) is None:
                return candidate
            logger.debug("Ticket id {ticket_id} already taken, drawing again", ticket_id=candidate)
        raise TicketIdExhaustedError(f"No free ticket id after {ID_ATTEMPTS} attempts")

    def submit(self, payload: TicketSubmission) -> TicketOutcome:
        settings = self.config.get()
        if payload.category not in settings.categories:
            raise ValueError(f"Unknown category '{payload.category}'")

        classroom = payload.requester_type in CLASSROOM_REQUESTERS
        now = utc_now()
        ticket = Ticket(
            id=self._new_id(),
            title=payload.title,
            description=payload.description,
            category=payload.category,
            status=TicketStatus.OPEN,
            priority=payload.priority,
            requester_type=payload.requester_type,
            grade=payload.grade if classroom else None,
            section=payload.section if classroom else None,
            student_name=payload.student_name if payload.requester_type == RequesterType.PARENT else None,
            created_by=CreatedBy(name=payload.name, email=payload.email),
            created_at=now,
            updated_at=now,
            custom_data=clean_answers(settings.custom_fields, payload.custom_data),
        )
        self.tickets.upsert(ticket)
        logger.info("Created ticket id={ticket_id} category={category}", ticket_id=ticket.id, category=ticket.category)

        notification = self.dispatcher.notify(NotificationEvent.CREATE, ticket, settings)
        return TicketOutcome(ticket=ticket, notice=notification.message if notification else None)

    def get(self, ticket_id: str) -> Ticket:
        ticket = self.tickets.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")
        return ticket

    def detail(self, ticket_id: str) -> TicketDetail:
        ticket = self.get(ticket_id)
        settings = self.config.get()
        assignee = self.users.get_by_id(ticket.assigned_to) if ticket.assigned_to else None
        return TicketDetail(
            ticket=ticket,
            answers=rendered_answers(settings.custom_fields, ticket.custom_data),
            assignee_name=assignee.name if assignee else None,
        )

    def change_status(self, ticket_id: str, status: TicketStatus) -> TicketOutcome:
        current = self.get(ticket_id)
        updated = current.model_copy(update={"status": status, "updated_at": utc_now()})
        self.tickets.upsert(updated)
        logger.info(
            "Ticket {ticket_id} status {old} -> {new}",
            ticket_id=ticket_id,
            old=current.status.value,
            new=status.value,
        )

        event = NotificationEvent.CLOSE if status == TicketStatus.CLOSED else NotificationEvent.UPDATE
        notification = self.dispatcher.notify(event, updated, self.config.get())
        return TicketOutcome(ticket=updated, notice=notification.message if notification else None)

    def assign(self, ticket_id: str, staff_id: str) -> TicketOutcome:
        current = self.get(ticket_id)
        staff = self.users.get_by_id(staff_id)
        if staff is None or staff.role not in ASSIGNABLE_ROLES:
            raise ValueError(f"'{staff_id}' is not an assignable staff member")

        updated = current.model_copy(update={"assigned_to": staff.id, "updated_at": utc_now()})
        self.tickets.upsert(updated)
        logger.info("Ticket {ticket_id} assigned to {staff_id}", ticket_id=ticket_id, staff_id=staff.id)

        notification = self.dispatcher.notify(
            NotificationEvent.ASSIGN, updated, self.config.get(), assignee_name=staff.name
        )
        return TicketOutcome(ticket=updated, notice=notification.message if notification else None)

    def add_comment(self, ticket_id: str, author: User, text: str) -> Ticket:
        current = self.get(ticket_id)
        now = utc_now()
        comment = Comment(id=generate(size=10), user_id=author.id, user_name=author.name, text=text, created_at=now)
        updated = current.model_copy(update={"comments": [*current.comments, comment], "updated_at": now})
        self.tickets.upsert(updated)
        logger.info("Comment added to ticket {ticket_id} by {user_id}", ticket_id=ticket_id, user_id=author.id)
        return updated

    def search(self, filters: TicketFilters) -> list[Ticket]:
        needle = filters.search.strip().lower()
        results = []
        for ticket in self.tickets.list():
            if filters.status and ticket.status != filters.status:
                continue
            if filters.priority and ticket.priority != filters.priority:
                continue
            if needle and not any(
                needle in haystack.lower()
                for haystack in (ticket.title, ticket.id, ticket.category, ticket.created_by.name)
            ):
                continue
            results.append(ticket)
        return results

    def dashboard(self) -> DashboardStats:
        tickets = self.tickets.list()
        settings = self.config.get()
        today = local_date(utc_now(), self.timezone)

        by_status = Counter(ticket.status.value for ticket in tickets)
        by_priority = Counter(ticket.priority.value for ticket in tickets)
        by_category = Counter(ticket.category for ticket in tickets)

        return DashboardStats(
            total=len(tickets),
            by_status={status.value: by_status.get(status.value, 0) for status in TicketStatus},
            by_priority={priority.value: by_priority.get(priority.value, 0) for priority in Priority},
            by_category=[
                CategoryCount(category=category, count=by_category.get(category, 0))
                for category in settings.categories
            ],
            opened_today=sum(1 for ticket in tickets if local_date(ticket.created_at, self.timezone) == today),
            critical_open=sum(
                1
                for ticket in tickets
                if ticket.priority == Priority.CRITICAL and ticket.status != TicketStatus.CLOSED
            ),
        )
