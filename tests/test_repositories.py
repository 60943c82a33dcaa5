from datetime import datetime, timedelta, timezone

from helpdesk.models import SETTINGS_ROW_ID, SettingsRecord
from helpdesk.schemas import AppSettings, Role, TicketStatus, User
from helpdesk.services.kv_store import TICKETS_KEY, KeyValueSettingsRepository, KeyValueTicketRepository
from helpdesk.services.repositories import SqlSettingsRepository


def test_missing_ticket_returns_none(repos):
    assert repos.tickets.get_by_id("T-0000") is None
    assert repos.tickets.list() == []


def test_upsert_twice_keeps_one_record(repos, make_ticket):
    ticket = make_ticket()

    repos.tickets.upsert(ticket)
    repos.tickets.upsert(ticket)

    assert [stored.id for stored in repos.tickets.list()] == ["T-1234"]


def test_upsert_replaces_the_whole_record(repos, make_ticket):
    repos.tickets.upsert(make_ticket(custom_data={"room": "12B"}))

    repos.tickets.upsert(make_ticket(status=TicketStatus.CLOSED, title="Projector fixed"))

    stored = repos.tickets.get_by_id("T-1234")
    assert stored.status == TicketStatus.CLOSED
    assert stored.title == "Projector fixed"
    assert stored.custom_data == {}


def test_list_is_newest_first(repos, make_ticket):
    base = datetime(2024, 5, 6, 8, 0, tzinfo=timezone.utc)
    repos.tickets.upsert(make_ticket(id="T-1001", created_at=base))
    repos.tickets.upsert(make_ticket(id="T-1003", created_at=base + timedelta(hours=2)))
    repos.tickets.upsert(make_ticket(id="T-1002", created_at=base + timedelta(hours=1)))

    assert [ticket.id for ticket in repos.tickets.list()] == ["T-1003", "T-1002", "T-1001"]


def test_round_trip_keeps_timestamps_in_utc(repos, make_ticket):
    repos.tickets.upsert(make_ticket())

    stored = repos.tickets.get_by_id("T-1234")

    assert stored.created_at == datetime(2024, 5, 6, 8, 30, tzinfo=timezone.utc)
    assert stored.created_by.email == "rivera@school.edu"


def test_settings_default_when_nothing_stored(repos):
    settings = repos.settings.get()

    assert settings == AppSettings()
    assert settings.theme_color == "#0870b8"
    assert "Other" in settings.categories


def test_settings_save_then_get(repos):
    settings = AppSettings(theme_color="#112233", categories=["Network/Wi-Fi"])

    repos.settings.save(settings)

    assert repos.settings.get() == settings


def test_users_add_and_lookup(repos):
    repos.users.add(User(id="9", name="Ana Coordinator", email="ana@school.edu", role=Role.COORDINATOR))

    assert repos.users.get_by_email("ana@school.edu").id == "9"
    assert repos.users.get_by_id("9").role == Role.COORDINATOR
    assert repos.users.get_by_id("missing") is None


def test_kv_store_uses_fixed_keys(kv_store, make_ticket):
    KeyValueTicketRepository(kv_store).upsert(make_ticket())

    raw = kv_store.get(TICKETS_KEY)

    assert raw[0]["id"] == "T-1234"
    assert raw[0]["createdBy"] == {"name": "Ms. Rivera", "email": "rivera@school.edu"}


def test_corrupt_kv_file_degrades_to_defaults(kv_store):
    kv_store.path.write_text("{not json", encoding="utf-8")

    assert KeyValueTicketRepository(kv_store).list() == []
    assert KeyValueSettingsRepository(kv_store).get() == AppSettings()


def test_malformed_ticket_entries_are_skipped(kv_store, make_ticket):
    repository = KeyValueTicketRepository(kv_store)
    repository.upsert(make_ticket())
    kv_store.set(TICKETS_KEY, [*kv_store.get(TICKETS_KEY), {"id": "T-9999"}])

    assert [ticket.id for ticket in repository.list()] == ["T-1234"]


def test_invalid_settings_row_degrades_to_defaults(sql_session):
    sql_session.add(SettingsRecord(id=SETTINGS_ROW_ID, payload={"themeColor": "teal"}))
    sql_session.commit()

    assert SqlSettingsRepository(sql_session).get() == AppSettings()
