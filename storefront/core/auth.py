"""
Модуль аутентификации и авторизации.

Содержит функции для работы с JWT токенами, хеширования паролей
и получения контекста текущего пользователя (Actor).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.exceptions import AuthenticationError, PermissionDeniedError
from storefront.db.database import get_db
from storefront.db.models import User, UserRole

# Настройка хеширования паролей
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"

# HTTP Bearer схема; отсутствие токена обрабатываем сами, чтобы вернуть 401
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Actor:
    """
    Контекст аутентифицированного пользователя.

    Получается один раз на запрос и явно передается в сервисы.
    """

    id: int
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, username=user.username, role=user.role)


class AuthService:
    """Сервис для работы с аутентификацией."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Проверка пароля."""
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Хеширование пароля."""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(
        data: dict, expires_delta: Optional[timedelta] = None
    ) -> str:
        """Создание JWT токена."""
        to_encode = data.copy()
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Проверка JWT токена."""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        except jwt.PyJWTError:
            return None

    def authenticate(self, db: Session, username: str, password: str) -> User:
        """Проверка логина и пароля."""
        user = db.query(User).filter(User.username == username).first()
        if not user or not self.verify_password(password, user.hashed_password):
            raise AuthenticationError("Incorrect username or password")
        return user

    def issue_token(self, user: User) -> str:
        return self.create_access_token(
            data={"sub": str(user.id), "role": user.role.value}
        )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Получение текущего пользователя из токена."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError()

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise AuthenticationError()

    user = db.get(User, int(user_id))
    if user is None:
        raise AuthenticationError()

    return user


def get_current_actor(current_user: User = Depends(get_current_user)) -> Actor:
    """Контекст текущего пользователя для сервисов."""
    return Actor.from_user(current_user)


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Проверка прав администратора."""
    if not actor.is_admin:
        raise PermissionDeniedError()
    return actor


# Экспорт сервиса
auth_service = AuthService()
