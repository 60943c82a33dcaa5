from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from helpdesk.core.config import get_settings
from helpdesk.models import Base


def _normalize_url(database_url: str) -> tuple[str, bool]:
    url = make_url(database_url)
    is_sqlite = url.drivername.startswith("sqlite")
    if is_sqlite and url.database and url.database != ":memory:":
        db_path = Path(url.database).expanduser()
        if db_path.parent:
            db_path.parent.mkdir(parents=True, exist_ok=True)
        # Rebuild URL so SQLAlchemy can handle relative paths nicely
        return f"sqlite:///{db_path}", is_sqlite
    return database_url, is_sqlite


@lru_cache
def get_engine() -> Engine:
    database_url, is_sqlite = _normalize_url(get_settings().database_url)
    return create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )


@lru_cache
def get_sessionmaker() -> sessionmaker[Session]:
    return sessionmaker(bind=get_engine(), autocommit=False, autoflush=False, expire_on_commit=False)


def init_db() -> None:
    Base.metadata.create_all(bind=get_engine())


def reset_engine() -> None:
    """Drop cached engine/session factory, e.g. after DATABASE_URL changes."""
    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_sessionmaker.cache_clear()
    get_engine.cache_clear()


@contextmanager
def db_session() -> Generator[Session, None, None]:
    session: Session = get_sessionmaker()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
