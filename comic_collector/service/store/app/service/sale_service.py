"""
Sale Service

Turns an item into a completed sale and reconciles the buyer's hold.

purchase() flow, inside the item + buyer critical section:
1. Eligibility: nobody else holds the item and it was never sold
2. Look up the buyer's own active hold (optional, walk-up purchases are fine)
3. Save the Sale  <- failures here raise SaleNotProcessableError, nothing recorded
4. Retire the hold, then remove the item from the catalog

Step 4 only runs once the sale is durable. Its steps are retried; if one still
fails the sale stays recorded and shows up in unreconciled_sales() until
reconcile_pending() repairs the leftover hold / catalog row.
"""

from typing import Awaitable, Callable, List, Optional, Tuple

from comic_collector.platform.config.core_setting import settings
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.platform.state.keyed_lock import KeyedLock
from comic_collector.platform.types.clock import Clock, utc_now
from comic_collector.service.store.app.interface.i_item_repo import IItemRepo
from comic_collector.service.store.app.interface.i_reservation_repo import IReservationRepo
from comic_collector.service.store.app.interface.i_sale_repo import ISaleRepo
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.reservation_entity import Reservation
from comic_collector.service.store.domain.entity.sale_entity import Sale
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.enum.reservation_status import ReservationStatus
from comic_collector.service.store.domain.store_errors import (
    InvalidSaleError,
    ItemNotFoundError,
    ItemUnavailableError,
    SaleNotProcessableError,
)


class SaleService:
    def __init__(
        self,
        *,
        sale_repo: ISaleRepo,
        reservation_repo: IReservationRepo,
        item_repo: IItemRepo,
        keyed_lock: KeyedLock,
        clock: Clock = utc_now,
        compensation_attempts: Optional[int] = None,
    ) -> None:
        self.sale_repo = sale_repo
        self.reservation_repo = reservation_repo
        self.item_repo = item_repo
        self.keyed_lock = keyed_lock
        self.clock = clock
        self.compensation_attempts = compensation_attempts or settings.SALE_COMPENSATION_ATTEMPTS

    async def can_purchase(
        self, *, user: Optional[UserEntity], item: Optional[ItemEntity]
    ) -> bool:
        if user is None or user.id is None or item is None:
            return False
        return await self.is_available_for_purchase(item=item, user=user)

    async def is_available_for_purchase(
        self, *, item: Optional[ItemEntity], user: Optional[UserEntity]
    ) -> bool:
        """
        Free items are purchasable by anyone; a held item only by its holder
        """
        if item is None or user is None or user.id is None:
            return False

        active = await self.reservation_repo.find_active_by_item(item=item)
        if not active:
            return True
        return any(reservation.user_id == user.id for reservation in active)

    async def find_active_hold_for(
        self, *, user: Optional[UserEntity], item: Optional[ItemEntity]
    ) -> Reservation | None:
        if user is None or user.id is None or item is None:
            return None

        reservations = await self.reservation_repo.find_by_user(user=user)
        return next(
            (r for r in reservations if r.is_active and r.item_id == item.id),
            None,
        )

    @Logger.io
    async def purchase(
        self, *, user: Optional[UserEntity], item: Optional[ItemEntity]
    ) -> Sale:
        """
        Sell an item to a user

        Raises:
            InvalidSaleError: Missing item, or a user without a registry id
            ItemUnavailableError: Someone else holds the item, or it was already sold
            SaleNotProcessableError: Persisting the sale failed (nothing recorded)
        """
        if user is None:
            raise InvalidSaleError('Sale user cannot be empty')
        if user.id is None:
            raise InvalidSaleError('Sale user must be registered first')
        if item is None:
            raise InvalidSaleError('Sale item cannot be empty')

        async with self.keyed_lock.hold(KeyedLock.item_key(item.id), KeyedLock.user_key(user.id)):
            if not await self.is_available_for_purchase(item=item, user=user):
                raise ItemUnavailableError(f"Item '{item.name}' is not available for sale")

            if await self.sale_repo.find_by_item(item=item):
                raise ItemUnavailableError(f"Item '{item.name}' has already been sold")

            hold = await self.find_active_hold_for(user=user, item=item)

            try:
                sale = Sale.create(user=user, item=item, now=self.clock())
                await self.sale_repo.save(sale=sale)
            except Exception as e:
                raise SaleNotProcessableError(f'Failed to process sale: {e}') from e

            retired = hold is None or await self._retry(
                step='retire hold', action=lambda: self._retire_hold(hold)
            )
            removed = await self._retry(
                step='remove item', action=lambda: self._remove_item(item)
            )

        if not (retired and removed):
            Logger.base.error(
                f'⚠️ [SALE] Sale {sale.id} recorded but post-sale cleanup is incomplete, '
                f'left for reconcile_pending()'
            )

        Logger.base.info(
            f"💰 [SALE] Sale {sale.id}: user {user.id} bought '{item.name}' "
            f'for {sale.final_price}' + (f' (hold {hold.id} retired)' if hold and retired else '')
        )
        return sale

    async def _retire_hold(self, hold: Reservation) -> None:
        hold.deactivate()
        try:
            await self.reservation_repo.update(reservation=hold)
        except Exception:
            # Not persisted, so the hold is still active as far as the store knows
            hold.status = ReservationStatus.ACTIVE
            raise

    async def _remove_item(self, item: ItemEntity) -> None:
        try:
            await self.item_repo.delete(item_id=item.id)
        except ItemNotFoundError:
            # Already gone, which is the state we want
            pass

    async def _retry(self, *, step: str, action: Callable[[], Awaitable[None]]) -> bool:
        for attempt in range(1, self.compensation_attempts + 1):
            try:
                await action()
                return True
            except Exception as e:
                Logger.base.warning(
                    f'⚠️ [SALE] {step} failed (attempt {attempt}/{self.compensation_attempts}): {e}'
                )
        return False

    async def _leftovers(self, sale: Sale) -> Tuple[List[Reservation], bool]:
        """Holds still active on the sold item, and whether it is still listed"""
        stale_holds = await self.reservation_repo.find_active_by_item(item=sale.item)
        still_listed = await self.item_repo.find_by_id(item_id=sale.item_id) is not None
        return stale_holds, still_listed

    async def unreconciled_sales(self) -> List[Sale]:
        """Recorded sales whose item is still held or still in the catalog"""
        pending: List[Sale] = []
        for sale in await self.sale_repo.list_all():
            stale_holds, still_listed = await self._leftovers(sale)
            if stale_holds or still_listed:
                pending.append(sale)
        return pending

    @Logger.io
    async def reconcile_pending(self) -> List[Sale]:
        """
        Compensating job for sales whose post-sale cleanup failed

        Works through unreconciled_sales(): retires any hold still active on
        the sold item and drops the item from the catalog if it is still
        listed. The scan runs over the recorded sales rather than in-process
        bookkeeping, so cleanup lost to a restart is picked up too. A sale
        whose repair fails is logged and left for the next run; the others
        are still repaired.

        Returns:
            The sales that needed (and got) repairs
        """
        repaired: List[Sale] = []
        for sale in await self.unreconciled_sales():
            try:
                async with self.keyed_lock.hold(KeyedLock.item_key(sale.item_id)):
                    # Re-read under the lock; a concurrent run may have fixed it
                    stale_holds, still_listed = await self._leftovers(sale)
                    for hold in stale_holds:
                        await self._retire_hold(hold)
                    if still_listed:
                        await self._remove_item(sale.item)
            except Exception as e:
                Logger.base.error(
                    f'❌ [RECONCILE] Sale {sale.id} still inconsistent, retrying next run: {e}'
                )
                continue

            if not stale_holds and not still_listed:
                continue
            repaired.append(sale)
            Logger.base.info(
                f'🩹 [RECONCILE] Sale {sale.id}: retired {len(stale_holds)} hold(s)'
                + (', removed item from catalog' if still_listed else '')
            )
        return repaired
