"""
Reservation Service

Owns the hold policy: who may reserve what, for how long, and when a hold may
still be cancelled. The Reservation entity only guards its own consistency.

Policy (defaults from settings):
- at most MAX_ACTIVE_RESERVATIONS_PER_USER active holds per user
- one active hold per item, by anyone
- a hold lasts RESERVATION_HOLD_DURATION_DAYS
- a hold may be cancelled during the first RESERVATION_CANCEL_WINDOW_HOURS only

reserve / reactivate run inside the critical section of both the item and the
user, so concurrent callers cannot break the per-item or per-user invariants
between the availability check and the write. When built with the item
repository, items that left the catalog (sold or removed) cannot be held.
"""

from datetime import timedelta
from typing import List, Optional

from uuid_utils import UUID

from comic_collector.platform.config.core_setting import settings
from comic_collector.platform.exception.exceptions import CustomBaseError
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.platform.state.keyed_lock import KeyedLock
from comic_collector.platform.types.clock import Clock, utc_now
from comic_collector.service.store.app.interface.i_item_repo import IItemRepo
from comic_collector.service.store.app.interface.i_reservation_repo import IReservationRepo
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.reservation_entity import Reservation
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.store_errors import (
    InvalidReservationError,
    ItemUnavailableError,
    ReservationNotCancelableError,
    ReservationNotFoundError,
    ReservationQuotaExceededError,
)


class ReservationService:
    def __init__(
        self,
        *,
        reservation_repo: IReservationRepo,
        keyed_lock: KeyedLock,
        item_repo: Optional[IItemRepo] = None,
        clock: Clock = utc_now,
        max_active_per_user: Optional[int] = None,
        cancel_window_hours: Optional[int] = None,
        hold_duration_days: Optional[int] = None,
    ) -> None:
        self.reservation_repo = reservation_repo
        self.keyed_lock = keyed_lock
        self.item_repo = item_repo
        self.clock = clock
        self.max_active_per_user = (
            max_active_per_user or settings.MAX_ACTIVE_RESERVATIONS_PER_USER
        )
        self.cancel_window = timedelta(
            hours=cancel_window_hours or settings.RESERVATION_CANCEL_WINDOW_HOURS
        )
        self.hold_duration = timedelta(
            days=hold_duration_days or settings.RESERVATION_HOLD_DURATION_DAYS
        )

    async def _find_violation(
        self, *, user: UserEntity, item: ItemEntity
    ) -> CustomBaseError | None:
        """First reservation rule the (user, item) pair breaks, or None"""
        if self.item_repo is not None and await self.item_repo.find_by_id(item_id=item.id) is None:
            return ItemUnavailableError(f"Item '{item.name}' is no longer in the catalog")

        if not await self.is_available(item=item):
            return ItemUnavailableError(f"Item '{item.name}' is not available for reservation")

        active = await self.active_reservations_of(user=user)
        if len(active) >= self.max_active_per_user:
            return ReservationQuotaExceededError(
                f'User has reached the limit of {self.max_active_per_user} simultaneous reservations'
            )

        if any(reservation.item_id == item.id for reservation in active):
            return ItemUnavailableError(
                f"User already holds an active reservation for item '{item.name}'"
            )
        return None

    async def can_reserve(
        self, *, user: Optional[UserEntity], item: Optional[ItemEntity]
    ) -> bool:
        if user is None or user.id is None or item is None:
            return False
        return await self._find_violation(user=user, item=item) is None

    @Logger.io
    async def reserve(
        self, *, user: Optional[UserEntity], item: Optional[ItemEntity]
    ) -> Reservation:
        """
        Place a hold on an item

        Raises:
            InvalidReservationError: Missing item, or a user without a registry id
            ItemUnavailableError: Item already held (by anyone, including this user)
            ReservationQuotaExceededError: User already at the active-hold limit
        """
        if user is None:
            raise InvalidReservationError('Reservation user cannot be empty')
        if user.id is None:
            raise InvalidReservationError('Reservation user must be registered first')
        if item is None:
            raise InvalidReservationError('Reservation item cannot be empty')

        async with self.keyed_lock.hold(
            KeyedLock.item_key(item.id), KeyedLock.user_key(user.id)
        ):
            # Re-checked under the lock; can_reserve() answers may be stale by now
            if violation := await self._find_violation(user=user, item=item):
                raise violation

            now = self.clock()
            reservation = Reservation.create(user=user, item=item, now=now)
            reservation.set_expiry(now + self.hold_duration)
            await self.reservation_repo.save(reservation=reservation)

        Logger.base.info(
            f'📌 [RESERVE] Reservation {reservation.id} created: user {user.id} holds '
            f"item '{item.name}' until {reservation.expires_at.isoformat()}"  # type: ignore[union-attr]
        )
        return reservation

    @Logger.io
    async def reactivate(self, *, reservation: Reservation) -> Reservation:
        """
        Re-open an expired hold under the same rules as a new reservation

        Raises:
            ReservationAlreadyActiveError: The hold is still active
            ItemUnavailableError / ReservationQuotaExceededError: As for reserve()
        """
        if reservation is None:
            raise InvalidReservationError('Reservation cannot be empty')

        async with self.keyed_lock.hold(
            KeyedLock.item_key(reservation.item_id), KeyedLock.user_key(reservation.user_id)
        ):
            if not reservation.is_active and (
                violation := await self._find_violation(
                    user=reservation.user, item=reservation.item
                )
            ):
                raise violation

            now = self.clock()
            reservation.activate(now=now)
            reservation.set_expiry(now + self.hold_duration)
            await self.reservation_repo.update(reservation=reservation)

        Logger.base.info(f'🔁 [REACTIVATE] Reservation {reservation.id} active again')
        return reservation

    @Logger.io
    async def sweep_expired(self) -> List[Reservation]:
        """
        Expire every hold whose expiry has passed

        Returns the whole matched set, including holds that were already
        EXPIRED before this run, so repeated calls return the same list until
        new holds age out.
        """
        now = self.clock()
        expired = await self.reservation_repo.find_expired(as_of=now)

        transitioned = 0
        for reservation in expired:
            if not reservation.is_active:
                continue
            async with self.keyed_lock.hold(KeyedLock.item_key(reservation.item_id)):
                # A purchase or cancel may have retired it while we waited
                if not reservation.is_active:
                    continue
                reservation.deactivate()
                await self.reservation_repo.update(reservation=reservation)
                transitioned += 1

        if transitioned:
            Logger.base.info(
                f'🧹 [SWEEP] Expired {transitioned} reservation(s), {len(expired)} past due in total'
            )
        return expired

    async def is_available(self, *, item: Optional[ItemEntity]) -> bool:
        if item is None:
            return False
        active = await self.reservation_repo.find_active_by_item(item=item)
        return not active

    async def active_reservations_of(self, *, user: Optional[UserEntity]) -> List[Reservation]:
        if user is None or user.id is None:
            return []
        reservations = await self.reservation_repo.find_by_user(user=user)
        return [reservation for reservation in reservations if reservation.is_active]

    @Logger.io
    async def cancel(self, *, reservation: Optional[Reservation]) -> None:
        """
        Release a hold early, allowed only shortly after it was placed

        Raises:
            ReservationNotCancelableError: Hold not active, or cancel window elapsed
        """
        if reservation is None:
            raise InvalidReservationError('Reservation cannot be empty')

        async with self.keyed_lock.hold(KeyedLock.item_key(reservation.item_id)):
            if not reservation.is_active:
                raise ReservationNotCancelableError('Only active reservations can be cancelled')

            hours = int(self.cancel_window.total_seconds() // 3600)
            if self.clock() > reservation.created_at + self.cancel_window:
                raise ReservationNotCancelableError(
                    f'Reservations cannot be cancelled more than {hours} hour(s) after creation'
                )

            reservation.deactivate()
            await self.reservation_repo.update(reservation=reservation)

        Logger.base.info(f'↩️ [CANCEL] Reservation {reservation.id} cancelled')

    @Logger.io
    async def find_by_id(self, *, reservation_id: UUID) -> Reservation:
        reservation = await self.reservation_repo.find_by_id(reservation_id=reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(f'Reservation not found: {reservation_id}')
        return reservation
