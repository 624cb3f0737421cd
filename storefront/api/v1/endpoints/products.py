"""
API endpoints для работы с товарами.

Список товаров всегда ограничен видимостью текущего пользователя.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import Actor, get_current_actor, require_admin
from storefront.db.database import get_db
from storefront.schemas.product import ProductCreate, ProductOut, ProductUpdate
from storefront.services.catalog_service import catalog_service

router = APIRouter()


@router.get("", response_model=List[ProductOut])
def list_products(
    category_id: Optional[int] = Query(None, description="Фильтр по категории"),
    q: Optional[str] = Query(None, description="Поиск по названию"),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """
    Получить каталог товаров.

    ADMIN получает все товары. Компания получает товары своих категорий,
    назначенные ей или не назначенные никому.

    Args:
        category_id: Фильтр по категории
        q: Поиск по названию
        actor: Текущий пользователь
        db: Сессия базы данных

    Returns:
        List[ProductOut]: Товары, новые первыми
    """
    return catalog_service.list_products(db, actor, category_id=category_id, q=q)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Получить товар, если он виден текущему пользователю."""
    return catalog_service.get_visible_product(db, actor, product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    product_data: ProductCreate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Создать товар."""
    return catalog_service.create_product(db, product_data)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Обновить товар; передайте assigned_to_id=null, чтобы снять назначение."""
    return catalog_service.update_product(db, product_id, product_data)


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Удалить товар."""
    catalog_service.delete_product(db, product_id)
    return {"message": "Product deleted"}
