from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime
import enum

Base = declarative_base()

# Верхняя граница INTEGER в SQLite
MAX_ID = 2 ** 63 - 1


def utc_now_seconds() -> datetime:
    """Текущее время UTC с точностью до секунды"""
    return datetime.utcnow().replace(microsecond=0)


class EventCategory(str, enum.Enum):
    ONLINE_WORKSHOP = "Online Workshop"
    HACKATHON = "Hackathon"
    CONFERENCE = "Conference"
    ONE_DAY_WORKSHOP = "One-day Workshop"


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_registration_dates", "registration_start", "registration_end"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # Даты храним строками YYYY-MM-DD: формат фиксированной ширины, сравнение строк корректно
    registration_start = Column(String(10), nullable=False)
    registration_end = Column(String(10), nullable=False)
    event_date = Column(String(10), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    # Категория не ограничена EventCategory на уровне БД
    category = Column(String(255), nullable=False, index=True)

    # Relationships
    registrations = relationship(
        "Registration",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True
    )


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        # Один email на одну дату события, даже если события разные
        UniqueConstraint("email", "event_date", name="uq_registrations_email_event_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    college_name = Column(String(255), nullable=False)
    department = Column(String(255), nullable=False)
    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True
    )
    # Копия events.event_date для ключа уникальности, переписывается при смене даты события
    event_date = Column(String(10), nullable=False)
    created_at = Column(DateTime, default=utc_now_seconds, nullable=False)

    # Relationships
    event = relationship("Event", back_populates="registrations")


class NotificationSettings(Base):
    __tablename__ = "notification_settings"

    id = Column(Integer, primary_key=True)
    admin_email = Column(String(255), nullable=True)
    admin_notification_enabled = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime, default=utc_now_seconds, onupdate=utc_now_seconds, nullable=False)
