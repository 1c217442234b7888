from pydantic_settings import BaseSettings
from typing import Optional, List
import zoneinfo
import json


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./event_registration.db"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Ключи доступа к админке, строка из .env (CSV или JSON-список)
    ADMIN_API_KEYS: Optional[str] = None

    # Timezone, в котором считается "сегодня" для окон регистрации
    TIMEZONE: str = "UTC"

    # Почта
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    MAIL_FROM: str = "noreply@example.com"
    SITE_NAME: str = "Event Registration"

    # Начальные значения настроек уведомлений админа (дальше редактируются через API)
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_NOTIFICATION_ENABLED: bool = False

    @property
    def timezone(self):
        """Возвращает объект timezone"""
        try:
            return zoneinfo.ZoneInfo(self.TIMEZONE)
        except zoneinfo.ZoneInfoNotFoundError:
            from datetime import timezone
            return timezone.utc

    @property
    def admin_api_keys(self) -> List[str]:
        """
        Возвращает список ключей админки.
        Поддерживает форматы:
        - CSV:  "key1,key2"
        - JSON: "[\"key1\", \"key2\"]"
        """
        raw = self.ADMIN_API_KEYS
        if not raw:
            return []

        # Если вдруг пришел JSON-список
        try:
            data = json.loads(raw)
            if isinstance(data, list):
                return [str(x).strip() for x in data if str(x).strip()]
        except ValueError:
            pass

        # Обычная строка с ключами через запятую
        return [x.strip() for x in raw.split(",") if x.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
