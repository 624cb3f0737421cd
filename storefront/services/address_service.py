"""
Сервис адресной книги пользователя.
"""

import logging
from typing import Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.orm import Session

from storefront.core.auth import Actor
from storefront.core.exceptions import NotFoundError
from storefront.db.models import Address
from storefront.schemas.address import AddressCreate

logger = logging.getLogger(__name__)


class AddressService:
    """Сохраненные адреса; у пользователя не более одного адреса по умолчанию."""

    def list_addresses(self, db: Session, actor: Actor) -> Sequence[Address]:
        stmt = (
            select(Address)
            .where(Address.user_id == actor.id)
            .order_by(desc(Address.is_default), desc(Address.created_at), desc(Address.id))
        )
        return db.scalars(stmt).all()

    def create_address(self, db: Session, actor: Actor, data: AddressCreate) -> Address:
        if data.is_default:
            self._unset_defaults(db, actor.id)

        address = Address(
            user_id=actor.id,
            label=data.label.strip(),
            street=data.street.strip(),
            city=data.city.strip(),
            region=data.region.strip(),
            postal_code=data.postal_code.strip(),
            country=(data.country or "").strip() or "UK",
            is_default=data.is_default,
        )
        db.add(address)
        # Снятие старого адреса по умолчанию и вставка нового - одна транзакция
        db.commit()
        db.refresh(address)
        return address

    def set_default(self, db: Session, actor: Actor, address_id: int) -> Address:
        address = self._get_own(db, actor, address_id)
        self._unset_defaults(db, actor.id)
        address.is_default = True
        db.commit()
        db.refresh(address)
        return address

    def delete_address(self, db: Session, actor: Actor, address_id: int) -> None:
        address = self._get_own(db, actor, address_id)
        db.delete(address)
        db.commit()

    @staticmethod
    def _get_own(db: Session, actor: Actor, address_id: int) -> Address:
        address = db.get(Address, address_id)
        if address is None or address.user_id != actor.id:
            raise NotFoundError("Address not found")
        return address

    @staticmethod
    def _unset_defaults(db: Session, user_id: int) -> None:
        db.execute(
            update(Address)
            .where(Address.user_id == user_id, Address.is_default.is_(True))
            .values(is_default=False)
        )


address_service = AddressService()
