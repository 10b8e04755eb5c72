from datetime import datetime
from typing import Iterable, List, Optional

from uuid_utils import UUID

from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.interface.i_reservation_repo import IReservationRepo
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.reservation_entity import Reservation
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.enum.reservation_status import ReservationStatus
from comic_collector.service.store.domain.store_errors import ReservationNotFoundError
from comic_collector.service.store.driven_adapter.repo.json_snapshot_store import (
    JsonSnapshotStore,
)
from comic_collector.service.store.driven_adapter.repo.snapshot_record import (
    record_to_reservation,
    reservation_to_record,
)


class ReservationRepoImpl(IReservationRepo):
    """In-memory reservations, optionally mirrored to a JSON snapshot"""

    def __init__(self, *, snapshot_store: Optional[JsonSnapshotStore] = None) -> None:
        self.snapshot_store = snapshot_store
        self._reservations: dict[UUID, Reservation] = {}
        if snapshot_store is not None:
            for record in snapshot_store.load():
                reservation = record_to_reservation(record)
                self._reservations[reservation.id] = reservation

    async def _flush(self) -> None:
        if self.snapshot_store is not None:
            await self.snapshot_store.write(
                [reservation_to_record(r) for r in self._ordered(self._reservations.values())]
            )

    @staticmethod
    def _ordered(reservations: Iterable[Reservation]) -> List[Reservation]:
        return sorted(reservations)

    @Logger.io
    async def save(self, *, reservation: Reservation) -> Reservation:
        self._reservations[reservation.id] = reservation
        await self._flush()
        return reservation

    @Logger.io
    async def update(self, *, reservation: Reservation) -> Reservation:
        if reservation.id not in self._reservations:
            raise ReservationNotFoundError(f'Reservation not found: {reservation.id}')
        self._reservations[reservation.id] = reservation
        await self._flush()
        return reservation

    async def find_by_id(self, *, reservation_id: UUID) -> Reservation | None:
        return self._reservations.get(reservation_id)

    async def find_by_item(self, *, item: ItemEntity) -> List[Reservation]:
        return self._ordered(r for r in self._reservations.values() if r.item_id == item.id)

    async def find_by_user(self, *, user: UserEntity) -> List[Reservation]:
        return self._ordered(r for r in self._reservations.values() if r.user_id == user.id)

    async def find_active_by_item(self, *, item: ItemEntity) -> List[Reservation]:
        return self._ordered(
            r for r in self._reservations.values() if r.item_id == item.id and r.is_active
        )

    async def find_by_status(self, *, status: ReservationStatus) -> List[Reservation]:
        return self._ordered(r for r in self._reservations.values() if r.status == status)

    async def find_expired(self, *, as_of: datetime) -> List[Reservation]:
        return self._ordered(r for r in self._reservations.values() if r.is_expired_at(as_of))

    async def list_all(self) -> List[Reservation]:
        return self._ordered(self._reservations.values())
