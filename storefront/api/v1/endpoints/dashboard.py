"""
API эндпоинт статистики для административной панели.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.auth import Actor, require_admin
from storefront.db.database import get_db
from storefront.schemas.order import DashboardStats
from storefront.services.order_service import order_service

router = APIRouter()


@router.get("", response_model=DashboardStats)
def get_dashboard_stats(
    actor: Actor = Depends(require_admin), db: Session = Depends(get_db)
):
    """
    Получить статистику для дашборда.

    Выручка считается по всем заказам, кроме отмененных.
    """
    return order_service.dashboard(db)
