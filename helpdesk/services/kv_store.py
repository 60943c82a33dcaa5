from __future__ import annotations

import json
import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from helpdesk.schemas import AppSettings, Ticket, User
from helpdesk.services.repositories import (
    Repositories,
    SettingsRepository,
    TicketRepository,
    UserRepository,
    newest_first,
)

USERS_KEY = "edu_it_users"
TICKETS_KEY = "edu_it_tickets"
SETTINGS_KEY = "edu_it_settings"


class JsonKeyValueStore:
    """A single JSON document holding one value per key, rewritten on every set."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Key-value store {path} unreadable: {error}", path=self.path, error=exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Key-value store {path} is not a JSON object; ignoring", path=self.path)
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2)
            os.replace(tmp_name, self.path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class KeyValueTicketRepository(TicketRepository):
    def __init__(self, store: JsonKeyValueStore) -> None:
        self.store = store

    def _raw(self) -> list[dict[str, Any]]:
        value = self.store.get(TICKETS_KEY, [])
        return value if isinstance(value, list) else []

    def list(self) -> list[Ticket]:
        tickets: list[Ticket] = []
        for item in self._raw():
            try:
                tickets.append(Ticket.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed stored ticket: {error}", error=exc)
        return newest_first(tickets)

    def get_by_id(self, ticket_id: str) -> Ticket | None:
        return next((ticket for ticket in self.list() if ticket.id == ticket_id), None)

    def upsert(self, ticket: Ticket) -> Ticket:
        raw = self._raw()
        payload = ticket.to_wire()
        for index, item in enumerate(raw):
            if isinstance(item, dict) and item.get("id") == ticket.id:
                raw[index] = payload
                break
        else:
            raw.append(payload)
        self.store.set(TICKETS_KEY, raw)
        logger.debug("Stored ticket id={ticket_id}", ticket_id=ticket.id)
        return ticket


class KeyValueUserRepository(UserRepository):
    def __init__(self, store: JsonKeyValueStore) -> None:
        self.store = store

    def list(self) -> list[User]:
        raw = self.store.get(USERS_KEY, [])
        users: list[User] = []
        for item in raw if isinstance(raw, list) else []:
            try:
                users.append(User.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed stored user: {error}", error=exc)
        return users

    def add(self, user: User) -> User:
        raw = self.store.get(USERS_KEY, [])
        raw = raw if isinstance(raw, list) else []
        raw.append(user.to_wire())
        self.store.set(USERS_KEY, raw)
        logger.info("Created staff account id={user_id} role={role}", user_id=user.id, role=user.role.value)
        return user


class KeyValueSettingsRepository(SettingsRepository):
    def __init__(self, store: JsonKeyValueStore) -> None:
        self.store = store

    def get(self) -> AppSettings:
        raw = self.store.get(SETTINGS_KEY)
        if not raw:
            return AppSettings()
        try:
            return AppSettings.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Stored settings invalid, using defaults: {error}", error=exc)
            return AppSettings()

    def save(self, settings: AppSettings) -> AppSettings:
        self.store.set(SETTINGS_KEY, settings.to_wire())
        logger.info("Saved settings singleton")
        return settings


@lru_cache
def get_kv_store(path: Path) -> JsonKeyValueStore:
    return JsonKeyValueStore(path)


def kv_repositories(store: JsonKeyValueStore) -> Repositories:
    return Repositories(
        tickets=KeyValueTicketRepository(store),
        users=KeyValueUserRepository(store),
        settings=KeyValueSettingsRepository(store),
    )
