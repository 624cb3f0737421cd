"""
API эндпоинты аутентификации.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.auth import Actor, auth_service, get_current_actor, get_current_user
from storefront.core.config import settings
from storefront.db.database import get_db
from storefront.db.models import User
from storefront.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    UserOut,
)
from storefront.services.user_service import user_service, user_to_dict

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """
    Вход в систему.

    Args:
        login_data: Данные для входа (username, password)
        db: Сессия базы данных

    Returns:
        JWT токен и информация о пользователе

    Raises:
        AuthenticationError: При неверных учетных данных
    """
    user = auth_service.authenticate(db, login_data.username.strip(), login_data.password)
    return {
        "access_token": auth_service.issue_token(user),
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        "user": user_to_dict(user),
    }


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    """Профиль текущего пользователя с доступными категориями."""
    return user_to_dict(current_user)


@router.post("/change-password")
def change_password(
    password_data: ChangePasswordRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Смена пароля текущего пользователя."""
    user_service.change_password(
        db, actor.id, password_data.current_password, password_data.new_password
    )
    return {"message": "Password changed successfully"}
