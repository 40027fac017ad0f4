import os

# Tests never touch the project database or a Redis server
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_CACHE_URL", "")

import threading
from datetime import date
from typing import Iterable

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from quorum.api.deps import get_policy_resolver
from quorum.db import build_engine, get_session, init_db
from quorum.engine import PolicyResolver
from quorum.main import app


class FakeHolidays:
    """Holiday lookup over a fixed set of dates, for any country."""

    def __init__(self, days: Iterable[date] = ()) -> None:
        self.days = set(days)
        self.calls = 0
        self._lock = threading.Lock()

    def is_holiday(self, country: str, day: date) -> bool:
        with self._lock:
            self.calls += 1
        return day in self.days


@pytest.fixture
def holidays() -> FakeHolidays:
    return FakeHolidays()


@pytest.fixture
def resolver(holidays: FakeHolidays) -> PolicyResolver:
    return PolicyResolver(holidays)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session: Session, resolver: PolicyResolver):
    def override_session():
        yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_policy_resolver] = lambda: resolver
    yield TestClient(app)
    app.dependency_overrides.clear()
