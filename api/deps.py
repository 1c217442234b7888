from services.notification_service import EmailSender
from utils.timezone import get_local_today


def get_today() -> str:
    """Dependency: сегодняшняя дата YYYY-MM-DD в часовом поясе приложения"""
    return get_local_today()


def get_email_sender() -> EmailSender:
    """Dependency: отправитель писем из настроек"""
    return EmailSender.from_settings()
