"""
Сервис пользователей: создание компаний, доступы к категориям, удаление.
"""

import logging
from typing import Iterable, List, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from storefront.core.auth import AuthService
from storefront.core.config import settings
from storefront.core.exceptions import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from storefront.db.models import Category, User, UserCategory, UserRole
from storefront.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def user_to_dict(user: User) -> dict:
    """Пользователь с доступными категориями (по алфавиту) для ответа API."""
    categories = sorted(
        (link.category for link in user.category_links), key=lambda category: category.name
    )
    return {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "created_at": user.created_at,
        "categories": [
            {"id": category.id, "name": category.name, "emoji": category.emoji}
            for category in categories
        ],
    }


class UserService:
    """Управление учетными записями."""

    def __init__(self, config=settings):
        self.config = config

    def check_password(self, password: str, field: str = "Password") -> None:
        if len(password or "") < self.config.MIN_PASSWORD_LENGTH:
            raise InvalidInputError(
                f"{field} must be at least {self.config.MIN_PASSWORD_LENGTH} characters"
            )

    def list_users(self, db: Session) -> Sequence[User]:
        stmt = (
            select(User)
            .options(selectinload(User.category_links).selectinload(UserCategory.category))
            .order_by(User.created_at.desc(), User.id.desc())
        )
        return db.scalars(stmt).all()

    def get_user(self, db: Session, user_id: int) -> User:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def create_user(self, db: Session, data: UserCreate) -> User:
        """
        Создать пользователя-компанию.

        Требуется хотя бы одна категория, пароль не короче минимальной длины
        и уникальный username.
        """
        username = data.username.strip()
        if not username or not data.password:
            raise InvalidInputError("Username and password are required")
        self.check_password(data.password)
        categories = self._load_categories(db, data.category_ids)

        # Проверяем уникальность username
        if db.scalar(select(User.id).where(User.username == username)) is not None:
            raise ConflictError("Username already taken")

        user = User(
            username=username,
            hashed_password=AuthService.get_password_hash(data.password),
            role=UserRole.USER,
            category_links=[UserCategory(category=category) for category in categories],
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Username already taken")
        db.refresh(user)
        logger.info(
            f"User {user.id} '{user.username}' created with categories "
            f"{[category.id for category in categories]}"
        )
        return user

    def set_categories(self, db: Session, user_id: int, category_ids: Iterable[int]) -> User:
        """Заменить доступы пользователя к категориям."""
        user = self.get_user(db, user_id)
        if user.role == UserRole.ADMIN:
            raise InvalidInputError("Admin users have access to all categories")
        categories = self._load_categories(db, category_ids)

        user.category_links.clear()
        db.flush()
        user.category_links.extend(UserCategory(category=category) for category in categories)
        db.commit()
        db.refresh(user)
        return user

    def delete_user(self, db: Session, user_id: int) -> None:
        """Удалить пользователя вместе с заказами, адресами и доступами."""
        user = self.get_user(db, user_id)
        if user.role == UserRole.ADMIN:
            raise PermissionDeniedError("Cannot delete admin users")

        db.delete(user)
        db.commit()
        logger.info(f"User {user_id} deleted")

    def change_password(
        self, db: Session, user_id: int, current_password: str, new_password: str
    ) -> None:
        if not current_password or not new_password:
            raise InvalidInputError("Current password and new password are required")
        self.check_password(new_password, field="New password")

        user = self.get_user(db, user_id)
        if not AuthService.verify_password(current_password, user.hashed_password):
            raise InvalidInputError("Current password is incorrect")

        user.hashed_password = AuthService.get_password_hash(new_password)
        db.commit()

    @staticmethod
    def _load_categories(db: Session, category_ids: Iterable[int]) -> List[Category]:
        ids = list(dict.fromkeys(category_ids or []))
        if not ids:
            raise InvalidInputError("At least one category is required")

        categories = db.scalars(select(Category).where(Category.id.in_(ids))).all()
        found = {category.id for category in categories}
        missing = [cid for cid in ids if cid not in found]
        if missing:
            raise NotFoundError(
                f"Unknown category ID(s): {', '.join(str(cid) for cid in missing)}"
            )
        return list(categories)


user_service = UserService()
