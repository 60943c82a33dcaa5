from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from helpdesk.api.deps import get_config_service, get_repositories, get_ticket_service, service_errors
from helpdesk.schemas import (
    LoginPayload,
    LoginResponse,
    Priority,
    PublicForm,
    RequesterType,
    TicketOutcome,
    TicketSubmission,
)
from helpdesk.schemas.enums import GRADES, SECTIONS
from helpdesk.services.auth import AuthenticationError, authenticate, issue_token
from helpdesk.services.forms import render_controls
from helpdesk.services.repositories import Repositories
from helpdesk.services.settings_service import ConfigService
from helpdesk.services.tickets import TicketService

router = APIRouter()


@router.get("/form", response_model=PublicForm)
def public_form(config: ConfigService = Depends(get_config_service)) -> PublicForm:
    settings = config.get()
    return PublicForm(
        theme_color=settings.theme_color,
        categories=settings.categories,
        priorities=[priority.value for priority in Priority],
        requester_types=[requester.value for requester in RequesterType],
        grades=GRADES,
        sections=SECTIONS,
        custom_fields=render_controls(settings.custom_fields),
    )


@router.post(
    "/tickets",
    response_model=TicketOutcome,
    status_code=status.HTTP_201_CREATED,
)
def submit_ticket(
    payload: TicketSubmission,
    service: TicketService = Depends(get_ticket_service),
) -> TicketOutcome:
    with service_errors("submit_ticket"):
        return service.submit(payload)


@router.post("/auth/login", response_model=LoginResponse)
def login(payload: LoginPayload, repos: Repositories = Depends(get_repositories)) -> LoginResponse:
    try:
        user = authenticate(repos.users, payload.email, payload.password)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    return LoginResponse(access_token=issue_token(user), user=user.public())


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
