import os

# Настройки должны быть заданы до импорта приложения
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASS"] = ""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from init_db import ensure_admin
from storefront.core.auth import auth_service, pwd_context
from storefront.db.database import build_engine, get_db
from storefront.db.models import Base, Category, Product
from storefront.main import app
from storefront.schemas.user import UserCreate
from storefront.services.notification_service import get_notifier
from storefront.services.user_service import user_service

engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(
    bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
)

# Минимальная стоимость bcrypt, чтобы тесты не тратили время на хеширование
pwd_context.update(bcrypt__rounds=4)


class RecordingNotifier:
    """Подмена диспетчера: запоминает письма вместо отправки."""

    def __init__(self):
        self.confirmations = []
        self.status_updates = []

    def order_confirmation(self, data):
        self.confirmations.append(data)
        return True

    def status_update(self, data):
        self.status_updates.append(data)
        return True


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(notifier):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {auth_service.issue_token(user)}"}


@pytest.fixture
def admin(db):
    return ensure_admin(db, "admin", "admin123")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def make_category(db):
    def _make(name="Tools", emoji="✅", description=None):
        category = Category(name=name, emoji=emoji, description=description)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture
def make_product(db):
    def _make(category, name="Hammer", price="9.99", assigned_to=None):
        product = Product(
            name=name,
            description=f"{name} description",
            price=Decimal(price),
            category_id=category.id,
            assigned_to_id=assigned_to.id if assigned_to else None,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_company(db):
    def _make(username, categories, password="secret"):
        return user_service.create_user(
            db,
            UserCreate(
                username=username,
                password=password,
                category_ids=[category.id for category in categories],
            ),
        )

    return _make
