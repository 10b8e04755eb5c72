"""
Reservation Repository Interface

Listings come back in the reservation natural order
(expires_at ascending, ties broken by id).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from uuid_utils import UUID

from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.reservation_entity import Reservation
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.enum.reservation_status import ReservationStatus


class IReservationRepo(ABC):
    @abstractmethod
    async def save(self, *, reservation: Reservation) -> Reservation:
        pass

    @abstractmethod
    async def update(self, *, reservation: Reservation) -> Reservation:
        """
        Raises:
            ReservationNotFoundError: When no reservation with this id is stored
        """
        pass

    @abstractmethod
    async def find_by_id(self, *, reservation_id: UUID) -> Reservation | None:
        pass

    @abstractmethod
    async def find_by_item(self, *, item: ItemEntity) -> List[Reservation]:
        pass

    @abstractmethod
    async def find_by_user(self, *, user: UserEntity) -> List[Reservation]:
        pass

    @abstractmethod
    async def find_active_by_item(self, *, item: ItemEntity) -> List[Reservation]:
        pass

    @abstractmethod
    async def find_by_status(self, *, status: ReservationStatus) -> List[Reservation]:
        pass

    @abstractmethod
    async def find_expired(self, *, as_of: datetime) -> List[Reservation]:
        """Every reservation whose expires_at lies strictly before as_of, whatever its status"""
        pass

    @abstractmethod
    async def list_all(self) -> List[Reservation]:
        pass
