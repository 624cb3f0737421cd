"""
Сервис каталога: категории, товары и видимость товаров для компаний.

Пользователь с ролью USER видит товар, только если у него есть доступ
к категории товара и товар назначен ему или не назначен никому.
Назначение сужает видимость, но не расширяет ее за пределы категорий.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import Select

from storefront.core.auth import Actor
from storefront.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from storefront.db.models import Category, Product, User, UserCategory, UserRole
from storefront.schemas.category import CategoryCreate, CategoryUpdate
from storefront.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def category_to_dict(category: Category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "emoji": category.emoji,
        "description": category.description,
        "products_count": len(category.products),
    }


def granted_category_ids(actor: Actor) -> Select:
    """Подзапрос ID категорий, доступных пользователю."""
    return select(UserCategory.category_id).where(UserCategory.user_id == actor.id)


def visible_products(actor: Actor) -> Select:
    """
    Запрос товаров, видимых пользователю.

    ADMIN получает все товары без ограничений.
    """
    stmt = select(Product).options(
        selectinload(Product.category), selectinload(Product.assigned_to)
    )
    if actor.is_admin:
        return stmt
    return stmt.where(
        Product.category_id.in_(granted_category_ids(actor)),
        or_(Product.assigned_to_id == actor.id, Product.assigned_to_id.is_(None)),
    )


class CatalogService:
    """Операции с категориями и товарами."""

    # ==================== КАТЕГОРИИ ====================

    def list_categories(self, db: Session, actor: Actor) -> List[dict]:
        """Категории с количеством товаров; USER видит только свои категории."""
        stmt = (
            select(Category, func.count(Product.id).label("products_count"))
            .outerjoin(Product, Product.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.name)
        )
        if not actor.is_admin:
            stmt = stmt.where(Category.id.in_(granted_category_ids(actor)))

        return [
            {
                "id": category.id,
                "name": category.name,
                "emoji": category.emoji,
                "description": category.description,
                "products_count": int(products_count or 0),
            }
            for category, products_count in db.execute(stmt).all()
        ]

    def get_category(self, db: Session, category_id: int) -> Category:
        category = db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    def create_category(self, db: Session, data: CategoryCreate) -> Category:
        name = data.name.strip()
        emoji = data.emoji.strip()
        if not name or not emoji:
            raise InvalidInputError("Name and emoji are required")

        # Проверяем уникальность имени
        if db.scalar(select(Category.id).where(Category.name == name)) is not None:
            raise ConflictError("Category name already exists")

        category = Category(
            name=name,
            emoji=emoji,
            description=(data.description or "").strip() or None,
        )
        db.add(category)
        self._commit_unique(db, "Category name already exists")
        logger.info(f"Category {category.id} '{category.name}' created")
        return category

    def update_category(
        self, db: Session, category_id: int, data: CategoryUpdate
    ) -> Category:
        category = self.get_category(db, category_id)
        updates = data.model_dump(exclude_unset=True)

        new_name = (updates.get("name") or "").strip()
        if new_name and new_name != category.name:
            existing = db.scalar(select(Category.id).where(Category.name == new_name))
            if existing is not None:
                raise ConflictError("Category name already exists")
            category.name = new_name
        if (updates.get("emoji") or "").strip():
            category.emoji = updates["emoji"].strip()
        if "description" in updates:
            category.description = (updates["description"] or "").strip() or None

        self._commit_unique(db, "Category name already exists")
        return category

    def delete_category(self, db: Session, category_id: int) -> None:
        """Удаление категории вместе с ее товарами."""
        category = self.get_category(db, category_id)
        db.delete(category)
        db.commit()
        logger.info(f"Category {category_id} deleted with its products")

    # ==================== ТОВАРЫ ====================

    def list_products(
        self,
        db: Session,
        actor: Actor,
        category_id: Optional[int] = None,
        q: Optional[str] = None,
    ) -> Sequence[Product]:
        stmt = visible_products(actor)
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        if q:
            stmt = stmt.where(Product.name.ilike(f"%{q.strip()}%"))
        stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc())
        return db.scalars(stmt).all()

    def get_visible_product(self, db: Session, actor: Actor, product_id: int) -> Product:
        product = db.scalar(visible_products(actor).where(Product.id == product_id))
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, db: Session, data: ProductCreate) -> Product:
        self.get_category(db, data.category_id)
        if data.assigned_to_id is not None:
            self._get_company(db, data.assigned_to_id)

        product = Product(
            name=data.name.strip(),
            description=data.description.strip(),
            price=data.price,
            image=data.image or None,
            category_id=data.category_id,
            assigned_to_id=data.assigned_to_id,
        )
        if not product.name or not product.description:
            raise InvalidInputError("Name, description, price, and category are required")

        db.add(product)
        db.commit()
        db.refresh(product)
        logger.info(f"Product {product.id} '{product.name}' created")
        return product

    def update_product(self, db: Session, product_id: int, data: ProductUpdate) -> Product:
        product = db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product not found")

        updates = data.model_dump(exclude_unset=True)
        if "category_id" in updates and updates["category_id"] is not None:
            self.get_category(db, updates["category_id"])
            product.category_id = updates["category_id"]
        if "assigned_to_id" in updates:
            if updates["assigned_to_id"] is not None:
                self._get_company(db, updates["assigned_to_id"])
            product.assigned_to_id = updates["assigned_to_id"]
        for field in ("name", "description"):
            value = (updates.get(field) or "").strip()
            if value:
                setattr(product, field, value)
        if updates.get("price") is not None:
            product.price = updates["price"]
        if "image" in updates:
            product.image = updates["image"] or None

        db.commit()
        db.refresh(product)
        return product

    def delete_product(self, db: Session, product_id: int) -> None:
        product = db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product not found")
        db.delete(product)
        db.commit()

    # ==================== ВСПОМОГАТЕЛЬНОЕ ====================

    @staticmethod
    def _get_company(db: Session, user_id: int) -> User:
        user = db.get(User, user_id)
        if user is None or user.role != UserRole.USER:
            raise NotFoundError("Assigned user not found")
        return user

    @staticmethod
    def _commit_unique(db: Session, message: str) -> None:
        """Коммит с переводом нарушения уникальности в ConflictError."""
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(message)


catalog_service = CatalogService()
