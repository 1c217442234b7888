from pydantic import BaseModel
from typing import Optional


class NotificationSettingsUpdate(BaseModel):
    admin_email: Optional[str] = None
    admin_notification_enabled: bool = False


class NotificationSettingsResponse(BaseModel):
    admin_email: Optional[str] = None
    admin_notification_enabled: bool

    class Config:
        from_attributes = True
