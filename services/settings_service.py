from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from database.models import NotificationSettings
from services.notification_service import NotificationConfig
from utils.exceptions import SettingsValidationError, StorageError
from utils.validation import clean_text, is_valid_email, MAX_FIELD_LENGTH
from config import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)

SETTINGS_ROW_ID = 1


def _find_settings_row(db: Session) -> Optional[NotificationSettings]:
    return db.query(NotificationSettings).filter(NotificationSettings.id == SETTINGS_ROW_ID).first()


def get_notification_settings(db: Session) -> NotificationSettings:
    """Получить строку настроек, при первом обращении создать из .env"""
    row = _find_settings_row(db)
    if row:
        return row

    row = NotificationSettings(
        id=SETTINGS_ROW_ID,
        admin_email=settings.ADMIN_EMAIL,
        admin_notification_enabled=settings.ADMIN_NOTIFICATION_ENABLED
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        # Строку уже создал параллельный запрос
        db.rollback()
        logger.info("Notification settings row already seeded, reloading")
        return _find_settings_row(db)

    db.refresh(row)
    return row


def get_notification_config(db: Session) -> NotificationConfig:
    """Снимок настроек для отправки писем"""
    row = get_notification_settings(db)
    return NotificationConfig(
        admin_email=row.admin_email or None,
        admin_notification_enabled=bool(row.admin_notification_enabled)
    )


def update_notification_settings(
    db: Session,
    admin_email: Optional[str],
    admin_notification_enabled: bool
) -> NotificationSettings:
    """Сохранить адрес админа и флаг уведомлений"""
    admin_email = clean_text(admin_email)
    errors = {}

    if admin_notification_enabled and not admin_email:
        errors["admin_email"] = "Admin email address is required when admin notifications are enabled."
    elif admin_email and (len(admin_email) > MAX_FIELD_LENGTH or not is_valid_email(admin_email)):
        errors["admin_email"] = "Please enter a valid email address."

    if errors:
        raise SettingsValidationError(errors)

    row = get_notification_settings(db)
    row.admin_email = admin_email or None
    row.admin_notification_enabled = bool(admin_notification_enabled)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save notification settings: {e}")
        raise StorageError("There was an error saving the settings. Please try again.") from e

    db.refresh(row)
    logger.info(
        f"Notification settings updated: enabled={row.admin_notification_enabled}, "
        f"admin_email={'set' if row.admin_email else 'empty'}"
    )
    return row
