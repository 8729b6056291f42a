import os

import pytest

# Keep the module-level app off the on-disk database.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient

from highscores.app import create_app
from highscores.core import build_engine
from highscores.services import AbuseGuard, LeaderboardService, MemoryStore, SQLModelStore

START_MS = 1_700_000_000_000
COOLDOWN_MS = 30_000
DAY_MS = 86_400_000


class FakeClock:
    def __init__(self, start=START_MS):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        backend = MemoryStore()
    else:
        backend = SQLModelStore(build_engine("sqlite://"))
    backend.initialize(reset=True)
    yield backend
    if request.param == "sql":
        backend.engine.dispose()


@pytest.fixture()
def guard(store, clock):
    return AbuseGuard(
        store,
        clock=clock,
        cooldown_ms=COOLDOWN_MS,
        daily_limit=50,
        window_ms=DAY_MS,
    )


@pytest.fixture()
def service(store, guard, clock):
    return LeaderboardService(store, guard, clock=clock, max_score=3600)


@pytest.fixture()
def client(service):
    with TestClient(create_app(service)) as test_client:
        yield test_client
