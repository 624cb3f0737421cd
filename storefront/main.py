"""
Главный модуль FastAPI приложения Storefront API.

Содержит конфигурацию приложения, middleware, обработчики ошибок и роутеры.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from storefront.api.v1.routers import api_router
from storefront.core.config import settings
from storefront.core.exceptions import StoreError
from storefront.services.notification_service import (
    start_notification_dispatcher,
    stop_notification_dispatcher,
)

# Настройка логирования
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Storefront API",
    description="API B2B-витрины: каталог по категориям компаний, заказы и уведомления",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Настройка CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    """Ошибки бизнес-логики -> JSON с видом ошибки."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.detail}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.kind},
        headers=headers,
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Ошибки БД логируются, клиенту возвращается общий ответ без деталей."""
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": "internal"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error": "internal"},
    )


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Storefront API", "version": "1.0.0"}


# Подключение API роутеров
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    """
    Событие запуска приложения.

    Запускает фоновую отправку email-уведомлений.
    """
    await start_notification_dispatcher()


@app.on_event("shutdown")
async def shutdown_event():
    """
    Событие завершения приложения.

    Останавливает отправку уведомлений.
    """
    await stop_notification_dispatcher()
