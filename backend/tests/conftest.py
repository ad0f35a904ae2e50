import pytest
from fastapi.testclient import TestClient
from datetime import datetime, timedelta, UTC

from tutor.app import create_app
from tutor.config import Settings
from tutor.database import InMemoryProgressStore, InMemoryUsageStore
from tutor.services.progress_engine import ProgressEngine
from tutor.services.usage_tracking_service import UsageTrackingService


class FakeClock:
    """Controllable clock for services that stamp times"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    """Clock fixed at 2024-03-15 10:00 UTC."""
    return FakeClock(datetime(2024, 3, 15, 10, 0, tzinfo=UTC))


@pytest.fixture
def progress_store():
    return InMemoryProgressStore()


@pytest.fixture
def engine(progress_store, clock):
    """Progress engine with the default achievement table."""
    return ProgressEngine(progress_store, clock=clock)


@pytest.fixture
def usage_service(clock):
    """Usage tracking service backed by an in-memory store."""
    return UsageTrackingService(InMemoryUsageStore(), clock=clock)


@pytest.fixture
def app():
    """Create a test FastAPI app with fresh services."""
    return create_app(Settings(leaderboard_limit=3))


@pytest.fixture
def client(app):
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client
