from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from database.models import Event, EventCategory, Registration, MAX_ID
from utils.exceptions import EventValidationError, StorageError
from utils.timezone import to_iso_date
from utils.validation import clean_text, MAX_FIELD_LENGTH
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

DATE_FIELDS = ("registration_start", "registration_end", "event_date")


def get_category_options() -> List[str]:
    """Категории, которые предлагаются в форме события"""
    return [category.value for category in EventCategory]


def validate_event_data(data: Dict) -> Dict[str, str]:
    """Проверить и нормализовать данные формы события"""
    errors = {}
    cleaned = {}

    name = clean_text(data.get("name"))
    if not name:
        errors["name"] = "Event name cannot be empty."
    elif len(name) > MAX_FIELD_LENGTH:
        errors["name"] = f"Event name must be less than {MAX_FIELD_LENGTH} characters."
    cleaned["name"] = name

    category = clean_text(data.get("category"))
    if not category:
        errors["category"] = "Please select a category."
    elif len(category) > MAX_FIELD_LENGTH:
        errors["category"] = f"Category must be less than {MAX_FIELD_LENGTH} characters."
    cleaned["category"] = category

    for field in DATE_FIELDS:
        value = data.get(field)
        if value is None or value == "":
            errors[field] = "This date is required."
            continue
        try:
            cleaned[field] = to_iso_date(value)
        except ValueError:
            errors[field] = "Date must be in YYYY-MM-DD format."

    start = cleaned.get("registration_start")
    end = cleaned.get("registration_end")
    event_date = cleaned.get("event_date")

    if start and end and end < start:
        errors["registration_end"] = "Registration end date must be after or equal to the start date."
    if start and event_date and event_date < start:
        errors["event_date"] = "Event date must be after or equal to the registration start date."

    if errors:
        raise EventValidationError(errors)
    return cleaned


def create_event(db: Session, data: Dict) -> Event:
    """Создать событие"""
    cleaned = validate_event_data(data)
    event = Event(**cleaned)
    db.add(event)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create event '{cleaned['name']}': {e}")
        raise StorageError("There was an error creating the event. Please try again.") from e
    db.refresh(event)
    logger.info(f"Event created: {event.id} - {event.name} ({event.category}, {event.event_date})")
    return event


def update_event(db: Session, event_id: int, data: Dict) -> int:
    """Обновить событие, возвращает количество измененных строк"""
    event = get_event(db, event_id)
    if not event:
        return 0

    cleaned = validate_event_data(data)
    date_changed = cleaned["event_date"] != event.event_date
    for field, value in cleaned.items():
        setattr(event, field, value)

    try:
        if date_changed:
            # Ключ уникальности регистраций хранит дату события
            db.query(Registration).filter(Registration.event_id == event_id).update(
                {Registration.event_date: cleaned["event_date"]},
                synchronize_session=False
            )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Event {event_id} date change conflicts with existing registrations: {e}")
        raise StorageError(
            "Changing the event date would create duplicate registrations for the same date."
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update event {event_id}: {e}")
        raise StorageError("There was an error updating the event. Please try again.") from e

    logger.info(f"Event updated: {event_id}")
    return 1


def delete_event(db: Session, event_id: int) -> int:
    """Удалить событие вместе с регистрациями"""
    event = get_event(db, event_id)
    if not event:
        return 0

    db.delete(event)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete event {event_id}: {e}")
        raise StorageError("There was an error deleting the event. Please try again.") from e

    logger.info(f"Event deleted: {event_id}")
    return 1


def get_event(db: Session, event_id: int) -> Optional[Event]:
    if not 0 < event_id <= MAX_ID:
        return None
    return db.query(Event).filter(Event.id == event_id).first()


def get_all_events(db: Session) -> List[Event]:
    """Все события по дате проведения"""
    return db.query(Event).order_by(Event.event_date.asc(), Event.id.asc()).all()


def get_active_events(db: Session, today: str) -> List[Event]:
    """События, регистрация на которые открыта сегодня"""
    return db.query(Event).filter(
        Event.registration_start <= today,
        Event.registration_end >= today
    ).order_by(Event.event_date.asc(), Event.id.asc()).all()


def get_all_event_dates(db: Session) -> List[str]:
    """Все даты событий, новые первыми (фильтр в админке)"""
    rows = db.query(Event.event_date).distinct().order_by(Event.event_date.desc()).all()
    return [row[0] for row in rows]


def get_events_by_date(db: Session, event_date: str) -> Dict[int, str]:
    """События на дату: id -> название"""
    events = db.query(Event).filter(Event.event_date == event_date).order_by(Event.name.asc()).all()
    return {event.id: event.name for event in events}


def get_all_events_options(db: Session) -> Dict[int, str]:
    """Все события для фильтра: id -> "название (дата)", новые первыми"""
    events = db.query(Event).order_by(Event.event_date.desc(), Event.id.asc()).all()
    return {event.id: f"{event.name} ({event.event_date})" for event in events}
