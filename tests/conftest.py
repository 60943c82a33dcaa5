from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from helpdesk.core.config import get_settings
from helpdesk.models import Base
from helpdesk.schemas import CreatedBy, Ticket
from helpdesk.services.db import reset_engine
from helpdesk.services.kv_store import JsonKeyValueStore, get_kv_store, kv_repositories
from helpdesk.services.notifications import NotificationDispatcher
from helpdesk.services.repositories import sql_repositories
from helpdesk.services.settings_service import ConfigService
from helpdesk.services.suggestions import get_suggestion_client
from helpdesk.services.tickets import TicketService


def _clear_caches() -> None:
    get_settings.cache_clear()
    reset_engine()
    get_kv_store.cache_clear()
    get_suggestion_client.cache_clear()


@pytest.fixture
def kv_store(tmp_path):
    return JsonKeyValueStore(tmp_path / "store.json")


@pytest.fixture
def sql_session(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'repo.db'}")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(params=["json", "sql"])
def repos(request, kv_store):
    if request.param == "json":
        return kv_repositories(kv_store)
    return sql_repositories(request.getfixturevalue("sql_session"))


@pytest.fixture
def config(repos):
    return ConfigService(repos.settings)


@pytest.fixture
def service(repos, config):
    return TicketService(
        tickets=repos.tickets,
        users=repos.users,
        config=config,
        dispatcher=NotificationDispatcher(),
        timezone="Asia/Jakarta",
    )


@pytest.fixture
def make_ticket():
    def _make(**overrides) -> Ticket:
        created = overrides.pop("created_at", datetime(2024, 5, 6, 8, 30, tzinfo=timezone.utc))
        data = {
            "id": "T-1234",
            "title": "Projector flickers",
            "description": "The projector in room 12 keeps flickering during class.",
            "category": "Smart Board/Projector",
            "created_by": CreatedBy(name="Ms. Rivera", email="rivera@school.edu"),
            "created_at": created,
            "updated_at": created + timedelta(minutes=1),
        }
        data.update(overrides)
        return Ticket(**data)

    return _make


@pytest.fixture
def log_messages():
    messages: list[str] = []
    sink_id = logger.add(messages.append, format="{message}", level="DEBUG")
    yield messages
    logger.remove(sink_id)


@pytest.fixture(params=["sql", "json"])
def client(request, tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", request.param)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("KV_STORE_PATH", str(tmp_path / "api.json"))
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret")
    monkeypatch.setenv("SEED_DEFAULT_USERS", "true")
    _clear_caches()

    from helpdesk.main import app

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    _clear_caches()


def _login(client: TestClient, email: str, password: str = "password") -> dict[str, str]:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "gladson.lawrence@gmis.sch.id")


@pytest.fixture
def support_headers(client):
    return _login(client, "john@school.edu")
