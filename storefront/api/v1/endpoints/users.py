"""
API эндпоинты управления пользователями-компаниями (только ADMIN).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.auth import Actor, require_admin
from storefront.db.database import get_db
from storefront.schemas.user import UserCategoriesUpdate, UserCreate, UserOut
from storefront.services.user_service import user_service, user_to_dict

router = APIRouter()


@router.get("", response_model=List[UserOut])
def list_users(actor: Actor = Depends(require_admin), db: Session = Depends(get_db)):
    """Список пользователей с доступными категориями."""
    return [user_to_dict(user) for user in user_service.list_users(db)]


@router.post("", response_model=UserOut, status_code=201)
def create_user(
    user_data: UserCreate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Создать пользователя-компанию.

    Args:
        user_data: username, пароль и ID категорий (минимум одна)
        actor: Текущий пользователь (должен быть админом)
        db: Сессия базы данных

    Returns:
        Созданный пользователь
    """
    return user_to_dict(user_service.create_user(db, user_data))


@router.put("/{user_id}/categories", response_model=UserOut)
def update_user_categories(
    user_id: int,
    data: UserCategoriesUpdate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Заменить доступы пользователя к категориям."""
    return user_to_dict(user_service.set_categories(db, user_id, data.category_ids))


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Удалить пользователя вместе с его заказами. Администраторов удалить нельзя."""
    user_service.delete_user(db, user_id)
    return {"message": "User deleted"}
