from pydantic import BaseModel
from typing import Optional, List, Union
from datetime import date


class EventCreate(BaseModel):
    name: str
    category: str
    registration_start: Union[date, str]
    registration_end: Union[date, str]
    event_date: Union[date, str]


class EventResponse(BaseModel):
    id: int
    name: str
    category: str
    registration_start: str
    registration_end: str
    event_date: str
    status: str


class EventListResponse(BaseModel):
    events: List[EventResponse]


class EventOption(BaseModel):
    id: int
    name: str


class RegistrationStatusResponse(BaseModel):
    open: bool
    message: Optional[str] = None


class SelectionOptionsResponse(BaseModel):
    categories: List[str]
    event_dates: List[str]
    events: List[EventOption]


class FilterOptionsResponse(BaseModel):
    event_dates: List[str]
    events: List[EventOption]
