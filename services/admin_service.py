"""Выборки для админки: фильтры списка регистраций, счетчики, список событий"""
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from services.eligibility import event_status
from services.event_service import (
    get_all_event_dates, get_all_events, get_all_events_options, get_event, get_events_by_date
)
from services.registration_service import (
    get_filtered_registrations, get_registration_count, get_registration_count_by_date
)
from utils.timezone import format_registration_datetime


def registration_to_dict(reg) -> Dict:
    return {
        "id": reg.id,
        "full_name": reg.full_name,
        "email": reg.email,
        "college_name": reg.college_name,
        "department": reg.department,
        "event_id": reg.event_id,
        "event_name": reg.event.name,
        "event_date": reg.event.event_date,
        "category": reg.event.category,
        "created_at": format_registration_datetime(reg.created_at),
    }


def event_to_dict(event, today: str) -> Dict:
    return {
        "id": event.id,
        "name": event.name,
        "category": event.category,
        "registration_start": event.registration_start,
        "registration_end": event.registration_end,
        "event_date": event.event_date,
        "status": event_status(event, today),
    }


def list_events(db: Session, today: str) -> List[Dict]:
    """Все события со статусом окна регистрации"""
    return [event_to_dict(event, today) for event in get_all_events(db)]


def get_filter_options(db: Session, event_date: Optional[str] = None) -> Dict:
    """Списки фильтра: даты (новые первыми) и события выбранной даты или все"""
    if event_date:
        events = get_events_by_date(db, event_date)
    else:
        events = get_all_events_options(db)

    return {
        "event_dates": get_all_event_dates(db),
        "events": [{"id": event_id, "name": name} for event_id, name in events.items()],
    }


def list_registrations(
    db: Session,
    event_id: Optional[int] = None,
    event_date: Optional[str] = None
) -> Dict:
    """Список регистраций по фильтру и число участников"""
    registrations = get_filtered_registrations(db, event_id=event_id, event_date=event_date)

    if event_id is not None:
        count = get_registration_count(db, event_id)
        event = get_event(db, event_id)
        label = event.name if event else ""
    elif event_date is not None:
        count = get_registration_count_by_date(db, event_date)
        label = f"Events on {event_date}"
    else:
        count = len(registrations)
        label = "All events"

    return {
        "count": count,
        "label": label,
        "registrations": [registration_to_dict(reg) for reg in registrations],
    }
