"""
Fixtures shared by the store and route tests. Storage runs against both backends.
"""

from datetime import datetime, timedelta, timezone

import pytest

from clubsphere.database import build_engine, build_session_factory, create_tables
from clubsphere.storage.memory import MemoryStorage
from clubsphere.storage.records import ClubCategory, NewClub, NewUser, UserRole
from clubsphere.storage.sessions import SessionStore
from clubsphere.storage.sql import SqlStorage


class TickingClock:
    """Returns a time one second later on every call."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


class ManualClock:
    """Monotonic-style clock the test advances by hand."""

    def __init__(self, start: float = 1000.0):
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture(params=['memory', 'sql'])
def storage(request, clock):
    if request.param == 'memory':
        yield MemoryStorage(clock=clock)
        return

    engine = build_engine('sqlite:///:memory:')
    create_tables(engine)
    try:
        yield SqlStorage(build_session_factory(engine), clock=clock)
    finally:
        engine.dispose()


@pytest.fixture
def session_clock():
    return ManualClock()


@pytest.fixture
def sessions(session_clock):
    return SessionStore(ttl_seconds=600, check_period_seconds=60, clock=session_clock)


@pytest.fixture
def make_user(storage):
    counter = {'value': 0}

    def _make_user(username: str | None = None, role: UserRole = UserRole.student, password: str = 'hashed'):
        counter['value'] += 1
        name = username or f'user{counter["value"]}'
        return storage.create_user(
            NewUser(
                username=name,
                password=password,
                email=f'{name}@school.test',
                full_name=name.title(),
                school_id=f'STU{counter["value"]:03d}',
                role=role,
            )
        )

    return _make_user


@pytest.fixture
def make_club(storage):
    def _make_club(
        name: str = 'Chess Club',
        description: str = 'Weekly chess practice and tournaments.',
        category: ClubCategory = ClubCategory.academic,
        leader_id: str | None = None,
    ):
        data = NewClub(name=name, description=description, category=category)
        if leader_id is not None:
            return storage.create_club_with_leader(data, leader_id=leader_id)
        return storage.create_club(data)

    return _make_club
