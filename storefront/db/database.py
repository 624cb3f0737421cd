"""
Конфигурация базы данных.

Содержит движок SQLAlchemy и фабрику сессий.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from storefront.core.config import settings


def build_engine(url: str, **kwargs):
    """
    Создание движка SQLAlchemy.

    Для SQLite отключается проверка потока, так как FastAPI выполняет
    синхронные эндпоинты в пуле потоков.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)  # Проверка соединения перед использованием
    return create_engine(
        url,
        future=True,
        echo=bool(settings.DEBUG),  # Логирование SQL запросов в режиме отладки
        **kwargs,
    )


engine = build_engine(settings.DATABASE_URL)

# Фабрика сессий базы данных
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
    future=True,
)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency для получения сессии базы данных.

    Yields:
        Session: Сессия SQLAlchemy

    Note:
        Незафиксированные изменения откатываются при закрытии сессии
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
