from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database.database import get_db
from api.deps import get_today
from api.models.event import (
    EventListResponse, EventResponse, RegistrationStatusResponse, SelectionOptionsResponse
)
from services.admin_service import event_to_dict
from services.eligibility import is_registration_open, resolve_selection
from services.event_service import get_active_events, get_all_events
from typing import Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])

CLOSED_MESSAGE = "Event registration is currently closed. Please check back later."


@router.get("/", response_model=EventListResponse)
async def get_open_events(db: Session = Depends(get_db), today: str = Depends(get_today)):
    """Получить список событий с открытой регистрацией"""
    events = get_active_events(db, today)
    logger.info(f"Open events on {today}: {len(events)}")
    return EventListResponse(events=[EventResponse(**event_to_dict(event, today)) for event in events])


@router.get("/status", response_model=RegistrationStatusResponse)
async def get_registration_status(db: Session = Depends(get_db), today: str = Depends(get_today)):
    """Открыта ли регистрация хотя бы на одно событие"""
    is_open = is_registration_open(get_all_events(db), today)
    return RegistrationStatusResponse(open=is_open, message=None if is_open else CLOSED_MESSAGE)


@router.get("/options", response_model=SelectionOptionsResponse)
async def get_selection_options(
    category: Optional[str] = None,
    event_date: Optional[str] = None,
    db: Session = Depends(get_db),
    today: str = Depends(get_today)
):
    """Варианты для списков категория -> дата -> событие по текущему выбору"""
    options = resolve_selection(get_active_events(db, today), today, category=category, event_date=event_date)
    return SelectionOptionsResponse(
        categories=options.categories,
        event_dates=options.event_dates,
        events=[{"id": event_id, "name": name} for event_id, name in options.events.items()]
    )
