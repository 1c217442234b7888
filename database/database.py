from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from config import settings


def set_sqlite_pragma(dbapi_connection, connection_record):
    """SQLite по умолчанию не проверяет внешние ключи и не делает каскадное удаление"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {}
)

if "sqlite" in settings.DATABASE_URL:
    event.listen(engine, "connect", set_sqlite_pragma)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency для получения сессии БД"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Инициализация БД - создание всех таблиц"""
    from database.models import Base
    Base.metadata.create_all(bind=engine)
