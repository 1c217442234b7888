"""
Открыта ли регистрация и какие категории/даты/события можно выбрать.

Все функции чистые: принимают список событий и "сегодня" (YYYY-MM-DD) и ничего
не читают из БД. Каскад категория -> дата -> событие пересчитывается целиком
при каждом изменении фильтров.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

STATUS_UPCOMING = "upcoming"
STATUS_OPEN = "open"
STATUS_CLOSED = "closed"


@dataclass
class SelectionOptions:
    """Варианты для выпадающих списков формы регистрации"""
    categories: List[str] = field(default_factory=list)
    event_dates: List[str] = field(default_factory=list)
    events: Dict[int, str] = field(default_factory=dict)


def is_event_open(event, today: str) -> bool:
    """Окно регистрации включает обе границы"""
    return event.registration_start <= today <= event.registration_end


def event_status(event, today: str) -> str:
    """Статус окна регистрации события для админки"""
    if today < event.registration_start:
        return STATUS_UPCOMING
    if is_event_open(event, today):
        return STATUS_OPEN
    return STATUS_CLOSED


def open_events(events: Iterable, today: str) -> list:
    return [event for event in events if is_event_open(event, today)]


def is_registration_open(events: Iterable, today: str) -> bool:
    """Регистрация открыта, если открыто хотя бы одно событие"""
    return any(is_event_open(event, today) for event in events)


def active_categories(events: Iterable, today: str) -> List[str]:
    """Категории открытых событий, по возрастанию"""
    return sorted({event.category for event in open_events(events, today)})


def dates_for_category(events: Iterable, category: str, today: str) -> List[str]:
    """Даты открытых событий категории, по возрастанию"""
    return sorted({
        event.event_date
        for event in open_events(events, today)
        if event.category == category
    })


def events_for_category_and_date(events: Iterable, category: str, event_date: str, today: str) -> Dict[int, str]:
    """Открытые события категории на дату: id -> название, по названию"""
    matching = [
        event for event in open_events(events, today)
        if event.category == category and event.event_date == event_date
    ]
    matching.sort(key=lambda e: (e.name, e.id))
    return {event.id: event.name for event in matching}


def resolve_selection(
    events: Iterable,
    today: str,
    category: Optional[str] = None,
    event_date: Optional[str] = None
) -> SelectionOptions:
    """Пересчитать все три списка по текущим фильтрам"""
    events = list(events)
    options = SelectionOptions(categories=active_categories(events, today))

    # Устаревшая категория (окно закрылось между показом и выбором) дает пустые списки ниже
    if not category or category not in options.categories:
        return options

    options.event_dates = dates_for_category(events, category, today)
    if not event_date or event_date not in options.event_dates:
        return options

    options.events = events_for_category_and_date(events, category, event_date, today)
    return options
