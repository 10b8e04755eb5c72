"""
Snapshot Record Mapping

Plain-dict shapes of the store entities as they sit in JSON snapshots.
Reservations and sales embed full item / user records, since a sold item no
longer exists in the catalog snapshot.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from uuid_utils import UUID

from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.reservation_entity import Reservation
from comic_collector.service.store.domain.entity.sale_entity import Sale
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.enum.reservation_status import ReservationStatus
from comic_collector.service.store.domain.value_object.email import Email
from comic_collector.service.store.domain.value_object.money import Money


def _to_iso(moment: Optional[datetime]) -> Optional[str]:
    return moment.isoformat() if moment is not None else None


def _from_iso(raw: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(raw) if raw is not None else None


def item_to_record(item: ItemEntity) -> dict[str, Any]:
    return {
        'id': str(item.id),
        'name': item.name,
        'description': item.description,
        'price': {'amount': str(item.price.amount), 'currency': item.price.currency},
    }


def record_to_item(record: dict[str, Any]) -> ItemEntity:
    return ItemEntity(
        id=UUID(record['id']),
        name=record['name'],
        description=record['description'],
        price=Money(
            amount=Decimal(record['price']['amount']),
            currency=record['price']['currency'],
        ),
    )


def user_to_record(user: UserEntity) -> dict[str, Any]:
    return {
        'id': user.id,
        'first_name': user.first_name,
        'last_name': user.last_name,
        'email': user.email.value,
    }


def record_to_user(record: dict[str, Any]) -> UserEntity:
    return UserEntity(
        id=int(record['id']),
        first_name=record['first_name'],
        last_name=record['last_name'],
        email=Email(record['email']),
    )


def reservation_to_record(reservation: Reservation) -> dict[str, Any]:
    return {
        'id': str(reservation.id),
        'user': user_to_record(reservation.user),
        'item': item_to_record(reservation.item),
        'created_at': _to_iso(reservation.created_at),
        'expires_at': _to_iso(reservation.expires_at),
        'status': reservation.status.value,
    }


def record_to_reservation(record: dict[str, Any]) -> Reservation:
    return Reservation(
        id=UUID(record['id']),
        user=record_to_user(record['user']),
        item=record_to_item(record['item']),
        created_at=_from_iso(record['created_at']),  # type: ignore[arg-type]
        expires_at=_from_iso(record.get('expires_at')),
        status=ReservationStatus(record['status']),
    )


def sale_to_record(sale: Sale) -> dict[str, Any]:
    return {
        'id': str(sale.id),
        'user': user_to_record(sale.user),
        'item': item_to_record(sale.item),
        'occurred_at': _to_iso(sale.occurred_at),
    }


def record_to_sale(record: dict[str, Any]) -> Sale:
    return Sale(
        id=UUID(record['id']),
        user=record_to_user(record['user']),
        item=record_to_item(record['item']),
        occurred_at=_from_iso(record['occurred_at']),  # type: ignore[arg-type]
    )
