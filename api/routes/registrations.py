from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database.database import get_db
from api.deps import get_email_sender, get_today
from api.models.registration import RegistrationCreate, RegistrationCreatedResponse
from services.notification_service import EmailSender
from services.registration_service import submit_registration
from services.settings_service import get_notification_config
from utils.exceptions import (
    DuplicateRegistrationError, RegistrationClosedError,
    RegistrationValidationError, StorageError
)
from utils.timezone import format_registration_datetime

router = APIRouter(prefix="/api/registrations", tags=["registrations"])


@router.post("/", response_model=RegistrationCreatedResponse, status_code=201)
def create_registration(
    registration: RegistrationCreate,
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
    today: str = Depends(get_today)
):
    """Зарегистрироваться на событие; обычный def, SMTP выполняется в пуле потоков"""
    try:
        new_registration = submit_registration(
            db,
            registration.model_dump(),
            get_notification_config(db),
            sender,
            today=today
        )
    except RegistrationClosedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except RegistrationValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})
    except DuplicateRegistrationError as e:
        raise HTTPException(status_code=409, detail={"errors": {"email": str(e)}})
    except StorageError:
        raise HTTPException(
            status_code=500,
            detail="There was an error processing your registration. Please try again."
        )

    event = new_registration.event
    return RegistrationCreatedResponse(
        id=new_registration.id,
        event_id=event.id,
        event_name=event.name,
        event_date=event.event_date,
        email=new_registration.email,
        created_at=format_registration_datetime(new_registration.created_at),
        message=(
            f'Thank you for registering! Your registration for "{event.name}" on {event.event_date} '
            f"has been confirmed. A confirmation email has been sent to {new_registration.email}."
        )
    )
