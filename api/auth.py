import hmac
import logging
from typing import Optional
from fastapi import Header, HTTPException
from config import settings

logger = logging.getLogger(__name__)


def validate_admin_api_key(api_key: Optional[str]) -> bool:
    """
    Проверка ключа админки

    Args:
        api_key: значение заголовка X-API-Key

    Returns:
        True если ключ совпадает с одним из ADMIN_API_KEYS
    """
    if not api_key:
        return False

    # Сравнение за постоянное время, как при проверке подписи
    return any(
        hmac.compare_digest(api_key.encode(), valid_key.encode())
        for valid_key in settings.admin_api_keys
    )


async def require_admin(
    x_api_key: Optional[str] = Header(None, alias="X-API-Key")
) -> None:
    """Dependency для админских роутов"""
    if not x_api_key:
        raise HTTPException(status_code=401, detail="Authentication required")

    if not validate_admin_api_key(x_api_key):
        logger.warning(f"Invalid admin API key attempt: {x_api_key[:4]}...")
        raise HTTPException(status_code=401, detail="Invalid API key")
