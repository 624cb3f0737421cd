#!/usr/bin/env python3
"""
Скрипт для инициализации базы данных.

Создает таблицы, категории по умолчанию и учетную запись администратора.
"""

import logging
import sys

from sqlalchemy import inspect, select
from sqlalchemy.orm import Session

from storefront.core.auth import AuthService
from storefront.core.config import settings
from storefront.db.database import SessionLocal, engine
from storefront.db.models import Base, Category, User, UserRole

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Mandatory Signs", "✅", "Mandatory instruction and compliance signs"),
    ("Banner Signs", "🏳️", "Large format banner signs for display"),
    ("Door Signs", "🚪", "Signs for doors and entrances"),
    ("Hazard Notifier Boards Signs", "⚠️", "Hazard notification and warning board signs"),
    ("Recycling Signs", "♻️", "Recycling and waste management signs"),
    ("Road Signs", "🛣️", "Road safety and traffic signs"),
    ("Site Notice Board Signs", "📋", "Site notice boards and information signs"),
    ("Bespoke Multipurpose Signs", "🎨", "Custom-made multipurpose signs"),
    ("First Aid Fire Safety Signs", "🧯", "First aid and fire safety signs"),
    ("Multi Purpose Signs", "📌", "General multi-purpose signs"),
    ("PPE Signs", "🦺", "Personal protective equipment signs"),
    ("Hazard Signs", "☢️", "Hazard warning and danger signs"),
    ("Prohibition Signs", "🚫", "Prohibition and restriction signs"),
]


def seed_categories(db: Session) -> int:
    """Создает отсутствующие категории по умолчанию."""
    existing = set(db.scalars(select(Category.name)).all())
    created = 0
    for name, emoji, description in DEFAULT_CATEGORIES:
        if name in existing:
            continue
        db.add(Category(name=name, emoji=emoji, description=description))
        created += 1
    db.commit()
    return created


def ensure_admin(db: Session, username: str, password: str) -> User:
    """Создает администратора или обновляет его пароль."""
    admin = db.scalar(select(User).where(User.username == username))
    hashed_password = AuthService.get_password_hash(password)
    if admin is None:
        admin = User(username=username, hashed_password=hashed_password, role=UserRole.ADMIN)
        db.add(admin)
        logger.info(f"Admin '{username}' created")
    else:
        admin.hashed_password = hashed_password
        admin.role = UserRole.ADMIN
        logger.info(f"Admin '{username}' password updated")
    db.commit()
    db.refresh(admin)
    return admin


def init_database() -> bool:
    """Создает все таблицы и начальные данные."""
    logger.info("🗄️ Инициализация базы данных...")

    try:
        Base.metadata.create_all(bind=engine)
        tables = inspect(engine).get_table_names()
        logger.info(f"📋 Таблиц в базе: {len(tables)} ({', '.join(tables)})")

        db = SessionLocal()
        try:
            created = seed_categories(db)
            logger.info(f"✅ Категорий создано: {created}")
            ensure_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        finally:
            db.close()
        return True

    except Exception as e:
        logger.error(f"❌ Ошибка инициализации базы данных: {e}")
        return False


if __name__ == "__main__":
    success = init_database()
    if not success:
        sys.exit(1)
