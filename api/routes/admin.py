from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from sqlalchemy.orm import Session
from database.database import get_db
from database.models import MAX_ID
from api.auth import require_admin
from api.deps import get_today
from api.models.event import EventCreate, EventListResponse, EventResponse, FilterOptionsResponse
from api.models.registration import RegistrationListResponse, RegistrationResponse
from api.models.settings import NotificationSettingsResponse, NotificationSettingsUpdate
from services import admin_service, event_service, registration_service, settings_service
from utils.exceptions import EventValidationError, SettingsValidationError, StorageError
from utils.export import export_filename, export_registrations_to_csv, export_registrations_to_excel
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])

NO_CACHE_HEADERS = {
    "Cache-Control": "private, no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _registration_filters(event_id: Optional[int], event_date: Optional[str]):
    """Пустые значения из формы фильтра считаем отсутствующими"""
    return (event_id or None), (event_date or None)


# События

@router.get("/events", response_model=EventListResponse)
async def list_events(db: Session = Depends(get_db), today: str = Depends(get_today)):
    """Все события со статусом регистрации"""
    return EventListResponse(events=admin_service.list_events(db, today))


@router.post("/events", response_model=EventResponse, status_code=201)
async def create_event(event: EventCreate, db: Session = Depends(get_db), today: str = Depends(get_today)):
    """Создать событие"""
    try:
        new_event = event_service.create_event(db, event.model_dump())
    except EventValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return EventResponse(**admin_service.event_to_dict(new_event, today))


@router.get("/events/categories", response_model=List[str])
async def get_categories():
    """Категории для формы события"""
    return event_service.get_category_options()


@router.get("/events/filter-options", response_model=FilterOptionsResponse)
async def get_filter_options(event_date: Optional[str] = None, db: Session = Depends(get_db)):
    """Даты и события для фильтра списка регистраций"""
    return FilterOptionsResponse(**admin_service.get_filter_options(db, event_date or None))


@router.get("/events/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int = Path(..., ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
    today: str = Depends(get_today)
):
    """Получить событие"""
    event = event_service.get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return EventResponse(**admin_service.event_to_dict(event, today))


@router.put("/events/{event_id}", response_model=EventResponse)
async def update_event(
    event: EventCreate,
    event_id: int = Path(..., ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
    today: str = Depends(get_today)
):
    """Обновить событие"""
    try:
        updated = event_service.update_event(db, event_id, event.model_dump())
    except EventValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except StorageError as e:
        raise HTTPException(status_code=409, detail=str(e))

    if not updated:
        raise HTTPException(status_code=404, detail="Event not found")
    return EventResponse(**admin_service.event_to_dict(event_service.get_event(db, event_id), today))


@router.delete("/events/{event_id}", status_code=204)
async def delete_event(event_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    """Удалить событие вместе с регистрациями"""
    try:
        deleted = event_service.delete_event(db, event_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail="Event not found")
    return Response(status_code=204)


# Регистрации

@router.get("/registrations", response_model=RegistrationListResponse)
async def list_registrations(
    event_id: Optional[int] = Query(None, ge=1, le=MAX_ID),
    event_date: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Регистрации по фильтру; event_id важнее event_date"""
    event_id, event_date = _registration_filters(event_id, event_date)
    return RegistrationListResponse(**admin_service.list_registrations(db, event_id, event_date))


@router.get("/registrations/export.csv")
async def export_csv(
    event_id: Optional[int] = Query(None, ge=1, le=MAX_ID),
    event_date: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Выгрузить регистрации в CSV"""
    event_id, event_date = _registration_filters(event_id, event_date)
    content = export_registrations_to_csv(db, event_id=event_id, event_date=event_date)
    filename = export_filename("csv")
    logger.info(f"CSV export {filename}: event_id={event_id}, event_date={event_date}")
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"', **NO_CACHE_HEADERS}
    )


@router.get("/registrations/export.xlsx")
async def export_excel(
    event_id: Optional[int] = Query(None, ge=1, le=MAX_ID),
    event_date: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Выгрузить регистрации в Excel"""
    event_id, event_date = _registration_filters(event_id, event_date)
    content = export_registrations_to_excel(db, event_id=event_id, event_date=event_date)
    filename = export_filename("xlsx")
    logger.info(f"Excel export {filename}: event_id={event_id}, event_date={event_date}")
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"', **NO_CACHE_HEADERS}
    )


@router.get("/registrations/{registration_id}", response_model=RegistrationResponse)
async def get_registration(registration_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    """Получить регистрацию"""
    registration = registration_service.get_registration(db, registration_id)
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    return RegistrationResponse(**admin_service.registration_to_dict(registration))


@router.delete("/registrations/{registration_id}", status_code=204)
async def delete_registration(registration_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    """Удалить регистрацию"""
    try:
        deleted = registration_service.delete_registration(db, registration_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not deleted:
        raise HTTPException(status_code=404, detail="Registration not found")
    return Response(status_code=204)


# Настройки уведомлений

@router.get("/settings", response_model=NotificationSettingsResponse)
async def get_settings(db: Session = Depends(get_db)):
    """Текущие настройки уведомлений админа"""
    return settings_service.get_notification_settings(db)


@router.put("/settings", response_model=NotificationSettingsResponse)
async def update_settings(update: NotificationSettingsUpdate, db: Session = Depends(get_db)):
    """Изменить адрес админа и флаг уведомлений"""
    try:
        return settings_service.update_notification_settings(
            db, update.admin_email, update.admin_notification_enabled
        )
    except SettingsValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
