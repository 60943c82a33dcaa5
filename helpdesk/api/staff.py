from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from helpdesk.api.deps import get_current_user, get_repositories, get_ticket_service, service_errors
from helpdesk.schemas import (
    AssignmentUpdate,
    CommentCreate,
    DashboardStats,
    Priority,
    StatusUpdate,
    Suggestion,
    Ticket,
    TicketDetail,
    TicketFilters,
    TicketOutcome,
    TicketStatus,
    TicketSubmission,
    User,
    UserPublic,
)
from helpdesk.services.auth import assignable_staff
from helpdesk.services.repositories import Repositories
from helpdesk.services.suggestions import SuggestionClient, get_suggestion_client
from helpdesk.services.tickets import TicketService

ALL = "ALL"

router = APIRouter(prefix="/staff", tags=["staff"], dependencies=[Depends(get_current_user)])


def _parse_filter(
    value: str | None, enum_cls: type[TicketStatus] | type[Priority]
) -> TicketStatus | Priority | None:
    if not value or value.upper() == ALL:
        return None
    return enum_cls(value.upper())


@router.get("/me", response_model=UserPublic)
def me(user: User = Depends(get_current_user)) -> UserPublic:
    return user.public()


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(service: TicketService = Depends(get_ticket_service)) -> DashboardStats:
    with service_errors("dashboard"):
        return service.dashboard()


@router.get("/tickets", response_model=list[Ticket])
def list_tickets(
    status_filter: str | None = Query(default=None, alias="status"),
    priority: str | None = Query(default=None),
    search: str = Query(default=""),
    service: TicketService = Depends(get_ticket_service),
) -> list[Ticket]:
    with service_errors("list_tickets"):
        filters = TicketFilters(
            status=_parse_filter(status_filter, TicketStatus),
            priority=_parse_filter(priority, Priority),
            search=search,
        )
        return service.search(filters)


@router.post("/tickets", response_model=TicketOutcome, status_code=status.HTTP_201_CREATED)
def create_ticket(
    payload: TicketSubmission,
    service: TicketService = Depends(get_ticket_service),
) -> TicketOutcome:
    # manual entry on behalf of a caller follows the public submission rules
    with service_errors("create_ticket"):
        return service.submit(payload)


@router.get("/tickets/{ticket_id}", response_model=TicketDetail)
def ticket_detail(ticket_id: str, service: TicketService = Depends(get_ticket_service)) -> TicketDetail:
    with service_errors("ticket_detail"):
        return service.detail(ticket_id)


@router.put("/tickets/{ticket_id}/status", response_model=TicketOutcome)
def update_status(
    ticket_id: str,
    payload: StatusUpdate,
    service: TicketService = Depends(get_ticket_service),
) -> TicketOutcome:
    with service_errors("update_status"):
        return service.change_status(ticket_id, payload.status)


@router.put("/tickets/{ticket_id}/assignment", response_model=TicketOutcome)
def assign_ticket(
    ticket_id: str,
    payload: AssignmentUpdate,
    service: TicketService = Depends(get_ticket_service),
) -> TicketOutcome:
    with service_errors("assign_ticket"):
        return service.assign(ticket_id, payload.staff_id)


@router.post("/tickets/{ticket_id}/comments", response_model=Ticket, status_code=status.HTTP_201_CREATED)
def add_comment(
    ticket_id: str,
    payload: CommentCreate,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service),
) -> Ticket:
    with service_errors("add_comment"):
        return service.add_comment(ticket_id, user, payload.text)


@router.post("/tickets/{ticket_id}/suggestion", response_model=Suggestion)
async def suggest_fix(
    ticket_id: str,
    service: TicketService = Depends(get_ticket_service),
    client: SuggestionClient = Depends(get_suggestion_client),
) -> Suggestion:
    with service_errors("suggest_fix"):
        ticket = service.get(ticket_id)
    return await client.suggest(ticket)


@router.get("/assignees", response_model=list[UserPublic])
def assignees(repos: Repositories = Depends(get_repositories)) -> list[UserPublic]:
    return [user.public() for user in assignable_staff(repos.users)]
