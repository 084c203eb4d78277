# backend/tests/conftest.py
"""
Pytest configuration for the booking service.

Every test gets its own file-backed SQLite database under tmp_path, so
worker threads in concurrency tests can open their own connections to the
same data. Lock registry and availability cache are fresh per test and
shared by every service instance the test builds, the way the running
application shares its process-wide singletons.
"""

import os
import sys

# CRITICAL: Set testing mode BEFORE any app imports!
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

# Add the backend directory to Python path so imports work
backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from typing import Callable, Generator, List

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.api.dependencies.database import get_db
from app.api.dependencies.services import get_availability_cache_dep, get_lock_registry_dep
from app.core.booking_lock import ProfessionalLockRegistry
from app.core.schedule import ScheduleTemplate
from app.database import build_engine, init_db
from app.main import app
from app.services.availability_cache import AvailabilityCache
from app.services.booking_service import BookingService


@pytest.fixture
def engine(tmp_path) -> Generator[Engine, None, None]:
    test_engine = build_engine(f"sqlite:///{tmp_path / 'bookings.db'}")
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lock_registry() -> ProfessionalLockRegistry:
    return ProfessionalLockRegistry()


@pytest.fixture
def availability_cache() -> AvailabilityCache:
    return AvailabilityCache(max_entries=100, ttl_seconds=600.0)


@pytest.fixture
def template() -> ScheduleTemplate:
    return ScheduleTemplate()


@pytest.fixture
def booking_service(
    db: Session,
    lock_registry: ProfessionalLockRegistry,
    availability_cache: AvailabilityCache,
    template: ScheduleTemplate,
) -> BookingService:
    return BookingService(
        db,
        lock_registry=lock_registry,
        availability_cache=availability_cache,
        template=template,
    )


@pytest.fixture
def make_service(
    session_factory: sessionmaker,
    lock_registry: ProfessionalLockRegistry,
    availability_cache: AvailabilityCache,
    template: ScheduleTemplate,
) -> Generator[Callable[[], BookingService], None, None]:
    """Build services with their own sessions, as concurrent requests would."""
    sessions: List[Session] = []

    def _make() -> BookingService:
        session = session_factory()
        sessions.append(session)
        return BookingService(
            session,
            lock_registry=lock_registry,
            availability_cache=availability_cache,
            template=template,
        )

    yield _make

    for session in sessions:
        session.close()


@pytest.fixture
def client(
    session_factory: sessionmaker,
    lock_registry: ProfessionalLockRegistry,
    availability_cache: AvailabilityCache,
) -> Generator[TestClient, None, None]:
    def _override_get_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_lock_registry_dep] = lambda: lock_registry
    app.dependency_overrides[get_availability_cache_dep] = lambda: availability_cache
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
