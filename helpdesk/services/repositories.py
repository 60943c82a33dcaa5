"""
Persistence boundary for tickets, staff accounts and the settings singleton.

Two interchangeable backends implement the same contracts:
  - ``Sql*Repository``: SQLAlchemy tables ``tickets``, ``users``, ``settings``
  - ``KeyValue*Repository`` (see ``kv_store``): one JSON document per fixed key

Read paths never raise for storage faults; they log and degrade to an empty
collection or default settings. Writes propagate their errors.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from loguru import logger
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from helpdesk.models import SETTINGS_ROW_ID, SettingsRecord, TicketRecord, UserRecord
from helpdesk.schemas import AppSettings, Ticket, User
from helpdesk.utils.time import ensure_utc


class TicketRepository(ABC):
    @abstractmethod
    def list(self) -> list[Ticket]:
        """All tickets, newest ``created_at`` first."""

    @abstractmethod
    def get_by_id(self, ticket_id: str) -> Ticket | None: ...

    @abstractmethod
    def upsert(self, ticket: Ticket) -> Ticket:
        """Insert, or replace the whole stored record with the same id."""


class UserRepository(ABC):
    @abstractmethod
    def list(self) -> list[User]: ...

    @abstractmethod
    def add(self, user: User) -> User: ...

    def get_by_id(self, user_id: str) -> User | None:
        return next((user for user in self.list() if user.id == user_id), None)

    def get_by_email(self, email: str) -> User | None:
        return next((user for user in self.list() if user.email == email), None)


class SettingsRepository(ABC):
    @abstractmethod
    def get(self) -> AppSettings:
        """Stored settings, or a default-populated record when none exist."""

    @abstractmethod
    def save(self, settings: AppSettings) -> AppSettings: ...


@dataclass
class Repositories:
    tickets: TicketRepository
    users: UserRepository
    settings: SettingsRepository


def newest_first(tickets: list[Ticket]) -> list[Ticket]:
    return sorted(tickets, key=lambda ticket: ensure_utc(ticket.created_at), reverse=True)


class SqlTicketRepository(TicketRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> list[Ticket]:
        stmt = select(TicketRecord).order_by(TicketRecord.created_at.desc())
        try:
            records = list(self.session.scalars(stmt))
        except SQLAlchemyError as exc:
            logger.warning("Ticket list unavailable, returning empty: {error}", error=exc)
            self.session.rollback()
            return []
        return [self._to_ticket(record) for record in records]

    def get_by_id(self, ticket_id: str) -> Ticket | None:
        try:
            record = self.session.get(TicketRecord, ticket_id)
        except SQLAlchemyError as exc:
            logger.warning("Ticket lookup failed for id={ticket_id}: {error}", ticket_id=ticket_id, error=exc)
            self.session.rollback()
            return None
        return self._to_ticket(record) if record else None

    def upsert(self, ticket: Ticket) -> Ticket:
        self.session.merge(self._to_record(ticket))
        self.session.flush()
        logger.debug("Stored ticket id={ticket_id}", ticket_id=ticket.id)
        return ticket

    @staticmethod
    def _to_record(ticket: Ticket) -> TicketRecord:
        return TicketRecord(
            id=ticket.id,
            title=ticket.title,
            description=ticket.description,
            category=ticket.category,
            status=ticket.status.value,
            priority=ticket.priority.value,
            requester_type=ticket.requester_type.value,
            grade=ticket.grade,
            section=ticket.section,
            student_name=ticket.student_name,
            created_by_name=ticket.created_by.name,
            created_by_email=ticket.created_by.email,
            assigned_to=ticket.assigned_to,
            created_at=ensure_utc(ticket.created_at),
            updated_at=ensure_utc(ticket.updated_at),
            comments=[comment.model_dump(mode="json") for comment in ticket.comments],
            custom_data=dict(ticket.custom_data),
        )

    @staticmethod
    def _to_ticket(record: TicketRecord) -> Ticket:
        return Ticket(
            id=record.id,
            title=record.title,
            description=record.description,
            category=record.category,
            status=record.status,
            priority=record.priority,
            requester_type=record.requester_type,
            grade=record.grade,
            section=record.section,
            student_name=record.student_name,
            created_by={"name": record.created_by_name, "email": record.created_by_email},
            assigned_to=record.assigned_to,
            created_at=ensure_utc(record.created_at),
            updated_at=ensure_utc(record.updated_at),
            comments=record.comments or [],
            custom_data=dict(record.custom_data or {}),
        )


class SqlUserRepository(UserRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> list[User]:
        try:
            records = list(self.session.scalars(select(UserRecord).order_by(UserRecord.name)))
        except SQLAlchemyError as exc:
            logger.warning("User list unavailable, returning empty: {error}", error=exc)
            self.session.rollback()
            return []
        return [self._to_user(record) for record in records]

    def get_by_email(self, email: str) -> User | None:
        stmt = select(UserRecord).where(UserRecord.email == email)
        try:
            record = self.session.scalars(stmt).first()
        except SQLAlchemyError as exc:
            logger.warning("User lookup failed: {error}", error=exc)
            self.session.rollback()
            return None
        return self._to_user(record) if record else None

    def add(self, user: User) -> User:
        self.session.add(
            UserRecord(
                id=user.id,
                name=user.name,
                email=user.email,
                role=user.role.value,
                password_hash=user.password_hash,
            )
        )
        self.session.flush()
        logger.info("Created staff account id={user_id} role={role}", user_id=user.id, role=user.role.value)
        return user

    @staticmethod
    def _to_user(record: UserRecord) -> User:
        return User(
            id=record.id,
            name=record.name,
            email=record.email,
            role=record.role,
            password_hash=record.password_hash,
        )


class SqlSettingsRepository(SettingsRepository):
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self) -> AppSettings:
        try:
            record = self.session.get(SettingsRecord, SETTINGS_ROW_ID)
        except SQLAlchemyError as exc:
            logger.warning("Settings unavailable, using defaults: {error}", error=exc)
            self.session.rollback()
            return AppSettings()
        if record is None:
            return AppSettings()
        try:
            return AppSettings.model_validate(record.payload)
        except ValidationError as exc:
            logger.warning("Stored settings invalid, using defaults: {error}", error=exc)
            return AppSettings()

    def save(self, settings: AppSettings) -> AppSettings:
        self.session.merge(SettingsRecord(id=SETTINGS_ROW_ID, payload=settings.to_wire()))
        self.session.flush()
        logger.info("Saved settings singleton")
        return settings


def sql_repositories(session: Session) -> Repositories:
    return Repositories(
        tickets=SqlTicketRepository(session),
        users=SqlUserRepository(session),
        settings=SqlSettingsRepository(session),
    )
