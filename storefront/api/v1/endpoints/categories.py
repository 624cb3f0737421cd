"""
API endpoints для работы с категориями товаров.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.auth import Actor, get_current_actor, require_admin
from storefront.db.database import get_db
from storefront.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from storefront.services.catalog_service import catalog_service, category_to_dict

router = APIRouter()


@router.get("", response_model=List[CategoryOut])
def list_categories(
    actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)
):
    """
    Получить список категорий с количеством товаров.

    Компания видит только категории, к которым у нее есть доступ.
    """
    return catalog_service.list_categories(db, actor)


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(
    category_data: CategoryCreate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Создать новую категорию."""
    return category_to_dict(catalog_service.create_category(db, category_data))


@router.put("/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    category_data: CategoryUpdate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Обновить категорию."""
    return category_to_dict(
        catalog_service.update_category(db, category_id, category_data)
    )


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Удалить категорию вместе с ее товарами."""
    catalog_service.delete_category(db, category_id)
    return {"message": "Category deleted"}
