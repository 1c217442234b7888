"""Тесты хранилища событий."""
import pytest

from database.models import Registration
from services import event_service
from services.registration_service import create_registration
from utils.exceptions import EventValidationError, StorageError


def event_data(**overrides):
    data = {
        "name": "  AI/ML Hackathon 2026  ",
        "category": "Hackathon",
        "registration_start": "2026-01-01",
        "registration_end": "2026-02-28",
        "event_date": "2026-03-20",
    }
    data.update(overrides)
    return data


def registration_record(event_id, email="jane@college.edu"):
    return {
        "full_name": "Jane Doe",
        "email": email,
        "college_name": "City College",
        "department": "Physics",
        "event_id": event_id,
    }


class TestCreateEvent:

    def test_create_trims_name(self, db):
        event = event_service.create_event(db, event_data())
        assert event.id is not None
        assert event.name == "AI/ML Hackathon 2026"
        assert event_service.get_event(db, event.id).event_date == "2026-03-20"

    def test_accepts_date_objects(self, db):
        from datetime import date
        event = event_service.create_event(db, event_data(event_date=date(2026, 3, 20)))
        assert event.event_date == "2026-03-20"

    def test_end_before_start_rejected(self, db):
        with pytest.raises(EventValidationError) as exc_info:
            event_service.create_event(db, event_data(registration_end="2025-12-31"))
        assert "registration_end" in exc_info.value.errors

    def test_event_date_before_start_rejected(self, db):
        with pytest.raises(EventValidationError) as exc_info:
            event_service.create_event(db, event_data(event_date="2025-12-15"))
        assert "event_date" in exc_info.value.errors

    def test_blank_name_rejected(self, db):
        with pytest.raises(EventValidationError) as exc_info:
            event_service.create_event(db, event_data(name="   "))
        assert exc_info.value.errors["name"] == "Event name cannot be empty."

    def test_bad_date_format_rejected(self, db):
        with pytest.raises(EventValidationError) as exc_info:
            event_service.create_event(db, event_data(event_date="20/03/2026"))
        assert exc_info.value.errors["event_date"] == "Date must be in YYYY-MM-DD format."

    def test_same_day_window_allowed(self, db):
        event = event_service.create_event(db, event_data(
            registration_start="2026-02-10", registration_end="2026-02-10", event_date="2026-02-10"
        ))
        assert event.id is not None

    def test_category_not_restricted_to_known_set(self, db):
        event = event_service.create_event(db, event_data(category="Meetup"))
        assert event.category == "Meetup"


class TestQueries:

    def test_get_missing_event_returns_none(self, db):
        assert event_service.get_event(db, 999) is None

    def test_all_events_ordered_by_event_date(self, make_event, db):
        make_event(name="Late", event_date="2026-04-01")
        make_event(name="Early", event_date="2026-03-01")
        assert [e.name for e in event_service.get_all_events(db)] == ["Early", "Late"]

    def test_active_events_use_window(self, make_event, db):
        make_event(name="Open")
        make_event(name="Closed", registration_start="2026-01-01", registration_end="2026-01-31")
        make_event(name="Upcoming", registration_start="2026-03-01", registration_end="2026-03-10", event_date="2026-03-20")
        assert [e.name for e in event_service.get_active_events(db, "2026-02-10")] == ["Open"]

    def test_filter_helpers(self, make_event, db):
        a = make_event(name="Zeta", event_date="2026-03-01")
        b = make_event(name="Alpha", event_date="2026-03-01")
        c = make_event(name="Gamma", event_date="2026-04-01")

        assert event_service.get_all_event_dates(db) == ["2026-04-01", "2026-03-01"]
        assert list(event_service.get_events_by_date(db, "2026-03-01").items()) == [(b.id, "Alpha"), (a.id, "Zeta")]
        options = event_service.get_all_events_options(db)
        assert list(options)[0] == c.id
        assert options[c.id] == "Gamma (2026-04-01)"

    def test_category_options(self):
        assert event_service.get_category_options() == [
            "Online Workshop", "Hackathon", "Conference", "One-day Workshop"
        ]


class TestUpdateAndDelete:

    def test_update_missing_event(self, db):
        assert event_service.update_event(db, 999, event_data()) == 0

    def test_update_changes_fields(self, make_event, db):
        event = make_event()
        assert event_service.update_event(db, event.id, event_data(name="Renamed")) == 1
        assert event_service.get_event(db, event.id).name == "Renamed"

    def test_update_rewrites_registration_date_key(self, make_event, db):
        event = make_event(event_date="2026-03-15")
        create_registration(db, registration_record(event.id))

        event_service.update_event(db, event.id, event_data(event_date="2026-03-22"))

        registration = db.query(Registration).one()
        db.refresh(registration)
        assert registration.event_date == "2026-03-22"

    def test_update_date_conflict_raises_storage_error(self, make_event, db):
        first = make_event(name="First", event_date="2026-03-15")
        second = make_event(name="Second", event_date="2026-03-22")
        create_registration(db, registration_record(first.id))
        create_registration(db, registration_record(second.id))

        with pytest.raises(StorageError):
            event_service.update_event(db, second.id, event_data(event_date="2026-03-15"))

    def test_delete_cascades_to_registrations(self, make_event, db):
        event = make_event()
        other = make_event(name="Other", event_date="2026-03-16")
        create_registration(db, registration_record(event.id))
        create_registration(db, registration_record(event.id, email="john@college.edu"))
        create_registration(db, registration_record(other.id))

        assert event_service.delete_event(db, event.id) == 1

        remaining = db.query(Registration).all()
        assert [r.event_id for r in remaining] == [other.id]

    def test_delete_missing_event(self, db):
        assert event_service.delete_event(db, 999) == 0
