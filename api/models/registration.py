from pydantic import BaseModel
from typing import Optional, List, Union


class RegistrationCreate(BaseModel):
    # Поля необязательные на уровне схемы: ошибки по полям собирает сервис
    full_name: Optional[str] = None
    email: Optional[str] = None
    college_name: Optional[str] = None
    department: Optional[str] = None
    category: Optional[str] = None
    event_date: Optional[str] = None
    event_id: Optional[Union[int, str]] = None


class RegistrationCreatedResponse(BaseModel):
    id: int
    event_id: int
    event_name: str
    event_date: str
    email: str
    created_at: str
    message: str


class RegistrationResponse(BaseModel):
    id: int
    full_name: str
    email: str
    college_name: str
    department: str
    event_id: int
    event_name: str
    event_date: str
    category: str
    created_at: str


class RegistrationListResponse(BaseModel):
    count: int
    label: str
    registrations: List[RegistrationResponse]
