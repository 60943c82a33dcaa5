from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, Iterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from helpdesk.core.config import get_settings
from helpdesk.schemas import Role, User
from helpdesk.services.auth import AuthenticationError, resolve_token_user
from helpdesk.services.db import db_session
from helpdesk.services.kv_store import get_kv_store, kv_repositories
from helpdesk.services.notifications import NotificationDispatcher
from helpdesk.services.repositories import Repositories, sql_repositories
from helpdesk.services.settings_service import ConfigService
from helpdesk.services.tickets import TicketNotFoundError, TicketService

_bearer = HTTPBearer(auto_error=False)


def get_repositories() -> Generator[Repositories, None, None]:
    settings = get_settings()
    if settings.storage_backend == "json":
        yield kv_repositories(get_kv_store(settings.kv_store_path))
        return
    with db_session() as session:
        yield sql_repositories(session)


def get_config_service(repos: Repositories = Depends(get_repositories)) -> ConfigService:
    return ConfigService(repos.settings)


def get_ticket_service(
    repos: Repositories = Depends(get_repositories),
    config: ConfigService = Depends(get_config_service),
) -> TicketService:
    return TicketService(
        tickets=repos.tickets,
        users=repos.users,
        config=config,
        dispatcher=NotificationDispatcher(),
        timezone=get_settings().timezone,
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    repos: Repositories = Depends(get_repositories),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return resolve_token_user(repos.users, credentials.credentials)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user


@contextmanager
def service_errors(action: str) -> Iterator[None]:
    """Map service exceptions onto HTTP responses."""
    try:
        yield
    except HTTPException:
        raise
    except TicketNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        logger.warning("Invalid request for {action}: {error}", action=action, error=exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unhandled error during {action}", action=action)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error") from exc
