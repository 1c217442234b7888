"""Регистрации: проверка формы, запись, выборки для админки"""
from dataclasses import dataclass
from typing import Dict, List, Optional
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database.models import Event, Registration, utc_now_seconds
from services.eligibility import is_event_open, is_registration_open
from services.event_service import get_all_events, get_event
from services.notification_service import (
    EmailSender, NotificationConfig, dispatch_registration_notifications
)
from utils.exceptions import (
    DuplicateRegistrationError, RegistrationClosedError,
    RegistrationValidationError, StorageError
)
from utils.timezone import get_local_today
from utils.validation import clamp, clean_text, validate_registration_fields

logger = logging.getLogger(__name__)

FORM_FIELDS = ("full_name", "email", "college_name", "department")

SELECT_EVENT_MESSAGE = "Please select an event."
EVENT_UNAVAILABLE_MESSAGE = "The selected event is no longer available."
DUPLICATE_MESSAGE = "You have already registered for an event on this date with this email address."


@dataclass
class ValidatedRegistration:
    """Проверенные и нормализованные данные формы"""
    full_name: str
    email: str
    college_name: str
    department: str
    event: Event

    def to_record(self) -> Dict:
        return {
            "full_name": clamp(self.full_name),
            "email": clamp(self.email),
            "college_name": clamp(self.college_name),
            "department": clamp(self.department),
            "event_id": self.event.id,
        }


def _parse_event_id(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        event_id = int(str(value).strip())
    except ValueError:
        return None
    return event_id if event_id > 0 else None


def validate_submission(db: Session, data: Dict, today: str) -> ValidatedRegistration:
    """
    Проверить форму регистрации целиком.

    Ошибки полей собираются все сразу. Выбор события проверяется
    последовательно и останавливается на первой ошибке: не выбрано,
    недоступно (нет в БД или окно регистрации уже закрыто), дубликат
    по email и дате события.

    Raises:
        RegistrationValidationError: словарь поле -> сообщение
    """
    cleaned = {field: clean_text(data.get(field)) for field in FORM_FIELDS}
    errors = validate_registration_fields(cleaned)

    event_id = _parse_event_id(data.get("event_id"))
    if event_id is None:
        errors["event_id"] = SELECT_EVENT_MESSAGE
        raise RegistrationValidationError(errors)

    event = get_event(db, event_id)
    if event is None or not is_event_open(event, today):
        errors["event_id"] = EVENT_UNAVAILABLE_MESSAGE
        raise RegistrationValidationError(errors)

    if "email" not in errors and is_duplicate_registration(db, cleaned["email"], event.id):
        errors["email"] = DUPLICATE_MESSAGE

    if errors:
        raise RegistrationValidationError(errors)

    return ValidatedRegistration(event=event, **cleaned)


def create_registration(db: Session, data: Dict) -> Registration:
    """Записать регистрацию; email приводится к нижнему регистру"""
    event = get_event(db, data["event_id"])
    if event is None:
        raise StorageError(f"Event {data['event_id']} does not exist")

    registration = Registration(
        full_name=data["full_name"],
        email=data["email"].lower(),
        college_name=data["college_name"],
        department=data["department"],
        event_id=data["event_id"],
        event_date=event.event_date,
        created_at=data.get("created_at") or utc_now_seconds()
    )
    db.add(registration)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_duplicate_registration(db, registration.email, data["event_id"]):
            logger.warning(f"Concurrent duplicate registration rejected for event {data['event_id']}")
            raise DuplicateRegistrationError(DUPLICATE_MESSAGE) from e
        logger.error(f"Constraint violation while saving registration: {e}")
        raise StorageError("There was an error processing your registration. Please try again.") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error while saving registration: {e}")
        raise StorageError("There was an error processing your registration. Please try again.") from e

    db.refresh(registration)
    return registration


def submit_registration(
    db: Session,
    data: Dict,
    config: NotificationConfig,
    sender: EmailSender,
    today: Optional[str] = None
) -> Registration:
    """Полный цикл: окно открыто -> проверка -> запись -> письма"""
    today = today or get_local_today()

    # Проверяем на каждой отправке: окно могло закрыться, пока форма была открыта
    if not is_registration_open(get_all_events(db), today):
        raise RegistrationClosedError("Event registration is currently closed. Please check back later.")

    try:
        validated = validate_submission(db, data, today)
    except RegistrationValidationError as e:
        logger.info(f"Registration rejected: {', '.join(sorted(e.errors))}")
        raise

    registration = create_registration(db, validated.to_record())
    logger.info(
        f"Registration {registration.id} created for event {registration.event_id} "
        f"({registration.event.name}, {registration.event_date})"
    )

    # Письма не влияют на результат регистрации
    dispatch_registration_notifications(registration, registration.event, config, sender)
    return registration


def is_duplicate_registration(db: Session, email: str, event_id: int) -> bool:
    """Есть ли регистрация с тем же email на любое событие в ту же дату"""
    event = get_event(db, event_id)
    if event is None:
        return False

    count = db.query(func.count(Registration.id)).join(Event, Registration.event_id == Event.id).filter(
        Registration.email == email.lower(),
        Event.event_date == event.event_date
    ).scalar()
    return count > 0


def get_registration(db: Session, registration_id: int) -> Optional[Registration]:
    return db.query(Registration).options(joinedload(Registration.event)).filter(
        Registration.id == registration_id
    ).first()


def get_registration_count(db: Session, event_id: int) -> int:
    return db.query(func.count(Registration.id)).filter(Registration.event_id == event_id).scalar()


def get_registration_count_by_date(db: Session, event_date: str) -> int:
    return db.query(func.count(Registration.id)).join(Event, Registration.event_id == Event.id).filter(
        Event.event_date == event_date
    ).scalar()


def get_filtered_registrations(
    db: Session,
    event_id: Optional[int] = None,
    event_date: Optional[str] = None
) -> List[Registration]:
    """Регистрации с событием, новые первыми; event_id важнее event_date"""
    query = db.query(Registration).join(Event, Registration.event_id == Event.id).options(
        joinedload(Registration.event)
    )

    if event_id is not None:
        query = query.filter(Registration.event_id == event_id)
    elif event_date is not None:
        query = query.filter(Event.event_date == event_date)

    return query.order_by(Registration.created_at.desc(), Registration.id.desc()).all()


def delete_registration(db: Session, registration_id: int) -> int:
    """Удалить регистрацию, событие не трогаем"""
    try:
        deleted = db.query(Registration).filter(Registration.id == registration_id).delete(
            synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete registration {registration_id}: {e}")
        raise StorageError("There was an error deleting the registration. Please try again.") from e

    if deleted:
        logger.info(f"Registration deleted: {registration_id}")
    return deleted
