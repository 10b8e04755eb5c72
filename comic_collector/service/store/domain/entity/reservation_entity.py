from datetime import datetime
from typing import Optional

import attrs
import uuid_utils
from uuid_utils import UUID

from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.enum.reservation_status import ReservationStatus
from comic_collector.service.store.domain.store_errors import (
    InvalidExpiryError,
    InvalidReservationError,
    ReservationAlreadyActiveError,
    ReservationAlreadyExpiredError,
)


@attrs.define(eq=False)
class Reservation:
    """
    Time-boxed hold of one item by one user

    State machine:
        ACTIVE  --deactivate()-->  EXPIRED
        EXPIRED --activate()---->  ACTIVE   (created_at reset, expiry re-assigned by the service)

    The entity only guards its own consistency (expiry never before creation);
    hold duration and cancellation rules live in ReservationService.
    """

    id: UUID
    user: UserEntity
    item: ItemEntity
    created_at: datetime
    expires_at: Optional[datetime] = None
    status: ReservationStatus = ReservationStatus.ACTIVE

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        user: Optional[UserEntity],
        item: Optional[ItemEntity],
        now: datetime,
    ) -> 'Reservation':
        if user is None:
            raise InvalidReservationError('Reservation user cannot be empty')
        if item is None:
            raise InvalidReservationError('Reservation item cannot be empty')

        return cls(
            id=uuid_utils.uuid7(),
            user=user,
            item=item,
            created_at=now,
            status=ReservationStatus.ACTIVE,
        )

    @property
    def item_id(self) -> UUID:
        return self.item.id

    @property
    def user_id(self) -> Optional[int]:
        return self.user.id

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    def is_expired_at(self, moment: datetime) -> bool:
        """True once the hold's expiry lies strictly before the given moment"""
        return self.expires_at is not None and self.expires_at < moment

    @Logger.io
    def set_expiry(self, expires_at: Optional[datetime]) -> None:
        if expires_at is None:
            raise InvalidExpiryError('Expiry cannot be empty')
        if expires_at < self.created_at:
            raise InvalidExpiryError('Expiry cannot precede the reservation creation time')
        self.expires_at = expires_at

    @Logger.io
    def activate(self, *, now: datetime) -> None:
        """
        Re-open an expired hold

        Raises:
            ReservationAlreadyActiveError: When the hold is still active
        """
        if self.status == ReservationStatus.ACTIVE:
            raise ReservationAlreadyActiveError(
                f'Reservation {self.id} is already active, cancel it and try again'
            )
        self.created_at = now
        self.status = ReservationStatus.ACTIVE

    @Logger.io
    def deactivate(self) -> None:
        """
        Raises:
            ReservationAlreadyExpiredError: When the hold already expired
        """
        if self.status == ReservationStatus.EXPIRED:
            raise ReservationAlreadyExpiredError(f'Reservation {self.id} already expired')
        self.status = ReservationStatus.EXPIRED

    @property
    def sort_key(self) -> tuple[bool, datetime, str]:
        # Unset expiry sorts after every dated one
        return (
            self.expires_at is None,
            self.expires_at or self.created_at,
            str(self.id),
        )

    def __lt__(self, other: 'Reservation') -> bool:
        return self.sort_key < other.sort_key

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Reservation) and other.id == self.id

    def __hash__(self) -> int:
        return hash(self.id)
