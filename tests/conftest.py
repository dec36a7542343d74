"""Shared fixtures: per-test SQLite database, frozen clock, in-memory mailer."""

from datetime import datetime, timedelta

import pytest

from app.db.postgres import init_engine
from app.db.schema import init_db
from app.models.verification import DeliveryResult
from app.services.mail_dispatcher import MessageDispatcher
from app.services.verification_repository import VerificationRepository
from app.services.verification_service import VerificationService

TEST_BLOCKLIST = ["gmail.com", "yahoo.com", "outlook.com", "hotmail.com"]
START = datetime(2026, 1, 15, 9, 0, 0)


class FrozenClock:
    def __init__(self, now: datetime = START):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class InMemoryDispatcher(MessageDispatcher):
    """Records messages instead of sending them."""

    def __init__(self):
        self.sent = []
        self.fail_with = None

    def send(self, destination, template_id, payload):
        if self.fail_with:
            return DeliveryResult(delivered=False, error=self.fail_with)
        self.sent.append({"to": destination, "template_id": template_id, "payload": payload})
        return DeliveryResult(delivered=True)

    @property
    def last_token(self):
        return self.sent[-1]["payload"]["token"]


@pytest.fixture
def database(tmp_path):
    """Fresh file-backed SQLite database per test."""
    init_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db()
    yield


@pytest.fixture
def repository(database):
    return VerificationRepository()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def dispatcher():
    return InMemoryDispatcher()


@pytest.fixture
def service(repository, dispatcher, clock):
    return VerificationService(
        repository=repository,
        dispatcher=dispatcher,
        blocked_domains=TEST_BLOCKLIST,
        clock=clock,
        ttl=timedelta(hours=24),
    )


@pytest.fixture
def account_id(repository, clock):
    return repository.create_account("john@example.org", "not-a-real-hash", clock.now())
