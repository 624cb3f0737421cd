"""
API эндпоинты адресной книги текущего пользователя.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.auth import Actor, get_current_actor
from storefront.db.database import get_db
from storefront.schemas.address import AddressCreate, AddressOut
from storefront.services.address_service import address_service

router = APIRouter()


@router.get("", response_model=List[AddressOut])
def list_addresses(
    actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)
):
    """Сохраненные адреса: сначала адрес по умолчанию, затем новые."""
    return address_service.list_addresses(db, actor)


@router.post("", response_model=AddressOut, status_code=201)
def create_address(
    address_data: AddressCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Сохранить адрес; is_default=true снимает флаг с прежнего адреса."""
    return address_service.create_address(db, actor, address_data)


@router.put("/{address_id}/default", response_model=AddressOut)
def set_default_address(
    address_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    return address_service.set_default(db, actor, address_id)


@router.delete("/{address_id}")
def delete_address(
    address_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    address_service.delete_address(db, actor, address_id)
    return {"message": "Address deleted"}
