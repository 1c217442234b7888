"""Проверка полей формы регистрации"""
import re
from typing import Dict, Optional
from email_validator import validate_email, EmailNotValidError

MAX_FIELD_LENGTH = 255

FULL_NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-'.]+$")
ORGANIZATION_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-'.&,]+$")

# Поле -> (подпись в сообщениях, шаблон допустимых символов, текст ошибки символов)
TEXT_FIELDS = {
    "full_name": (
        "Full name",
        FULL_NAME_PATTERN,
        "Full name can only contain letters, spaces, hyphens, apostrophes, and periods."
    ),
    "college_name": (
        "College name",
        ORGANIZATION_PATTERN,
        "College name can only contain letters, numbers, spaces, and basic punctuation."
    ),
    "department": (
        "Department",
        ORGANIZATION_PATTERN,
        "Department can only contain letters, numbers, spaces, and basic punctuation."
    ),
}


def clean_text(value) -> str:
    """Обрезать пробелы по краям, None превращается в пустую строку"""
    if value is None:
        return ""
    return str(value).strip()


def clamp(value: str, max_length: int = MAX_FIELD_LENGTH) -> str:
    """Обрезать до максимальной длины перед записью в БД"""
    return value[:max_length]


def is_valid_full_name(name: str) -> bool:
    return bool(FULL_NAME_PATTERN.match(name))


def is_valid_organization(value: str) -> bool:
    """Название колледжа или кафедры"""
    return bool(ORGANIZATION_PATTERN.match(value))


def is_valid_email(email: str) -> bool:
    """Синтаксическая проверка адреса, без DNS"""
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_text_field(field_name: str, value: str) -> Optional[str]:
    """Вернуть текст первой ошибки поля или None"""
    label, pattern, charset_message = TEXT_FIELDS[field_name]
    if not value:
        return f"{label} is required."
    if len(value) > MAX_FIELD_LENGTH:
        return f"{label} must be less than {MAX_FIELD_LENGTH} characters."
    if not pattern.match(value):
        return charset_message
    return None


def validate_email_field(value: str) -> Optional[str]:
    if not value:
        return "Email address is required."
    if len(value) > MAX_FIELD_LENGTH:
        return f"Email must be less than {MAX_FIELD_LENGTH} characters."
    if not is_valid_email(value):
        return "Please enter a valid email address."
    return None


def validate_registration_fields(data: Dict[str, str]) -> Dict[str, str]:
    """
    Проверить все текстовые поля формы.

    Значения уже должны быть обрезаны по краям. Возвращает словарь
    поле -> ошибка (пустой, если все поля корректны); каждое поле
    проверяется независимо, чтобы показать все ошибки сразу.
    """
    errors = {}
    for field_name in ("full_name", "college_name", "department"):
        error = validate_text_field(field_name, data.get(field_name, ""))
        if error:
            errors[field_name] = error

    error = validate_email_field(data.get("email", ""))
    if error:
        errors["email"] = error

    return errors
