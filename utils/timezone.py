"""Утилиты для работы с часовым поясом"""
from datetime import datetime, date
import zoneinfo
from config import settings

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_local_now() -> datetime:
    """Получить текущее время в локальном часовом поясе"""
    return datetime.now(settings.timezone)


def get_local_today() -> str:
    """Сегодняшняя дата в локальном часовом поясе в формате YYYY-MM-DD"""
    return get_local_now().strftime(DATE_FORMAT)


def to_iso_date(value) -> str:
    """Привести date/datetime/строку к YYYY-MM-DD, строку проверяем на формат"""
    if isinstance(value, datetime):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, date):
        return value.isoformat()
    return datetime.strptime(str(value).strip(), DATE_FORMAT).strftime(DATE_FORMAT)


def utc_to_local(utc_dt: datetime) -> datetime:
    """Конвертировать UTC время в локальное (возвращает aware datetime)"""
    if utc_dt.tzinfo is None:
        # Если время без часового пояса, считаем его UTC
        utc_dt = utc_dt.replace(tzinfo=zoneinfo.ZoneInfo("UTC"))
    return utc_dt.astimezone(settings.timezone)


def format_registration_datetime(utc_dt: datetime, format_str: str = DATETIME_FORMAT) -> str:
    """Форматировать время регистрации из UTC в локальное время для отображения"""
    if utc_dt is None:
        return ""
    local_dt = utc_to_local(utc_dt)
    return local_dt.strftime(format_str)
