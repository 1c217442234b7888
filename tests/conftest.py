"""Общие фикстуры: БД в памяти, фабрики событий, фейковый отправитель писем."""
import os

# Настройки окружения до импорта модулей приложения
os.environ.setdefault("ADMIN_API_KEYS", "test-admin-key")
os.environ.setdefault("TIMEZONE", "UTC")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.database import set_sqlite_pragma
from database.models import Base, Event
from services.notification_service import NotificationConfig
from utils.exceptions import NotificationError

TODAY = "2026-02-10"
ADMIN_KEY = "test-admin-key"


class FakeSender:
    """Запоминает письма вместо отправки; может падать на выбранных адресатах."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to, subject, body):
        if to in self.fail_for:
            raise NotificationError(f"SMTP down for {to}")
        self.sent.append({"to": to, "subject": subject, "body": body})

    def recipients(self):
        return [message["to"] for message in self.sent]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    event.listen(engine, "connect", set_sqlite_pragma)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_event(db):
    """Фабрика событий; по умолчанию регистрация открыта на TODAY."""

    def _make_event(
        name="Python Programming Workshop",
        category="Online Workshop",
        registration_start="2026-02-01",
        registration_end="2026-02-28",
        event_date="2026-03-15"
    ):
        event = Event(
            name=name,
            category=category,
            registration_start=registration_start,
            registration_end=registration_end,
            event_date=event_date
        )
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make_event


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def no_admin_config():
    return NotificationConfig()


@pytest.fixture
def form_data():
    """Корректные данные формы без event_id."""
    return {
        "full_name": "Jane O'Brien-Smith.",
        "email": "Jane@College.edu",
        "college_name": "St. Xavier's College, Mumbai",
        "department": "Computer Science & Engineering",
    }


@pytest.fixture
def client(db, sender):
    """TestClient с БД из фикстуры, фейковым отправителем и фиксированным 'сегодня'."""
    from fastapi.testclient import TestClient
    from api.main import app
    from api.deps import get_email_sender, get_today
    from database.database import get_db

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: sender
    app.dependency_overrides[get_today] = lambda: TODAY

    yield TestClient(app)

    app.dependency_overrides.clear()
