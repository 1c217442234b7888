"""Исключения сервисного слоя"""
from typing import Dict


class RegistrationValidationError(Exception):
    """Ошибки заполнения формы регистрации, по полям"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))


class EventValidationError(Exception):
    """Ошибки формы события в админке, по полям"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))


class RegistrationClosedError(Exception):
    """Нет ни одного события с открытой регистрацией"""
    pass


class StorageError(Exception):
    """Нарушение ограничения БД или ошибка соединения при записи"""
    pass


class DuplicateRegistrationError(StorageError):
    """Сработало ограничение уникальности (email, дата события)"""
    pass


class NotificationError(Exception):
    """Не удалось отправить письмо"""
    pass


class SettingsValidationError(Exception):
    """Ошибки формы настроек уведомлений"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))
