import logging
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from factdesk.core.config import Settings
from factdesk.db import models  # noqa: F401
from factdesk.db.base import Base
from factdesk.db.session import build_engine, build_session_factory
from factdesk.main import create_app
from factdesk.models.auth import Actor
from factdesk.security.jwt import create_access_token
from factdesk.services.claim_store import ClaimStore
from factdesk.services.fact_checkers import FactCheckerService
from factdesk.services.leaderboard import Leaderboard
from factdesk.services.verdict_ledger import VerdictLedger

logger = logging.getLogger(__name__)


def dt(*args):
    return datetime(*args, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when a test tells it to."""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="sqlite://", SECRET_KEY="test-secret-key", AUTO_CREATE_TABLES=True)


@pytest.fixture
def engine(settings):
    engine = build_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock(dt(2026, 3, 2, 9, 0, 0))


@pytest.fixture
def claim_store(db, settings, clock):
    return ClaimStore(db, settings, clock)


@pytest.fixture
def fact_checkers(db, settings, clock, claim_store):
    return FactCheckerService(db, settings, clock, claims=claim_store)


@pytest.fixture
def ledger(db, settings, clock, claim_store):
    return VerdictLedger(db, settings, clock, claims=claim_store)


@pytest.fixture
def leaderboard(db, settings, clock):
    return Leaderboard(db, settings, clock)


@pytest.fixture
def moderator():
    return Actor(user_id="mod-1", roles=["moderator"])


@pytest.fixture
def author():
    return Actor(user_id="user-1", roles=["user"])


@pytest.fixture
def make_claim(claim_store, author):
    def _make(title="Fuel prices doubled", category="economy", submitter=None, **kwargs):
        return claim_store.submit(
            submitter_id=(submitter or author).user_id,
            title=title,
            description=kwargs.pop("description", "Posted on a community forum"),
            category=category,
            **kwargs,
        )
    return _make


@pytest.fixture
def make_checker(fact_checkers, moderator, clock):
    """Create a fact-checker profile; approved and available unless told otherwise."""
    counter = {"n": 0}

    def _make(user_id=None, expertise=None, approve=True, active=True):
        counter["n"] += 1
        user_id = user_id or f"checker-{counter['n']}"
        fc = fact_checkers.apply(user_id, expertise_areas=expertise or [])
        if approve:
            fact_checkers.approve(fc.id, moderator)
        if not active:
            fact_checkers.set_availability(user_id, False)
        # distinct join times keep ordering deterministic
        clock.advance(seconds=1)
        return fc
    return _make


# API fixtures

@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(settings):
    def _headers(user_id="user-1", roles=None):
        token = create_access_token(user_id, roles=roles or ["user"], settings=settings)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def moderator_headers(auth_headers):
    return auth_headers("mod-1", ["moderator"])
