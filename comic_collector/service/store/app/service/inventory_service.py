"""
Inventory Service

Read-only views over the catalog joined with reservation and sale history.
"""

from collections import Counter
from typing import List, Optional, Tuple

from uuid_utils import UUID

from comic_collector.platform.exception.exceptions import DomainError
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.dto.inventory_stats import InventoryStats
from comic_collector.service.store.app.interface.i_item_repo import IItemRepo
from comic_collector.service.store.app.interface.i_reservation_repo import IReservationRepo
from comic_collector.service.store.app.interface.i_sale_repo import ISaleRepo
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.enum.reservation_status import ReservationStatus


class InventoryService:
    def __init__(
        self,
        *,
        item_repo: IItemRepo,
        reservation_repo: IReservationRepo,
        sale_repo: ISaleRepo,
    ) -> None:
        self.item_repo = item_repo
        self.reservation_repo = reservation_repo
        self.sale_repo = sale_repo

    async def _held_item_ids(self) -> set[UUID]:
        active = await self.reservation_repo.find_by_status(status=ReservationStatus.ACTIVE)
        return {reservation.item_id for reservation in active}

    async def is_available(self, *, item: Optional[ItemEntity]) -> bool:
        if item is None:
            return False
        return not await self.reservation_repo.find_active_by_item(item=item)

    async def available_items(self) -> List[ItemEntity]:
        held = await self._held_item_ids()
        return [item for item in await self.item_repo.list_all() if item.id not in held]

    async def reserved_items(self) -> List[ItemEntity]:
        active = await self.reservation_repo.find_by_status(status=ReservationStatus.ACTIVE)
        seen: dict[UUID, ItemEntity] = {}
        for reservation in active:
            seen.setdefault(reservation.item_id, reservation.item)
        return list(seen.values())

    @staticmethod
    def _top(counts: Counter, items: dict[UUID, ItemEntity], limit: int) -> List[Tuple[ItemEntity, int]]:
        if limit <= 0:
            raise DomainError('limit must be positive')
        # Counter.most_common keeps first-seen order among equal counts
        return [(items[item_id], count) for item_id, count in counts.most_common(limit)]

    async def most_sold(self, *, limit: int) -> List[Tuple[ItemEntity, int]]:
        sales = await self.sale_repo.list_all()
        counts = Counter(sale.item_id for sale in sales)
        items = {sale.item_id: sale.item for sale in sales}
        return self._top(counts, items, limit)

    async def most_reserved(self, *, limit: int) -> List[Tuple[ItemEntity, int]]:
        reservations = await self.reservation_repo.list_all()
        counts = Counter(reservation.item_id for reservation in reservations)
        items = {reservation.item_id: reservation.item for reservation in reservations}
        return self._top(counts, items, limit)

    async def inactive_items(self) -> List[ItemEntity]:
        """Catalog items nobody ever reserved or bought"""
        touched = {r.item_id for r in await self.reservation_repo.list_all()}
        touched |= {s.item_id for s in await self.sale_repo.list_all()}
        return [item for item in await self.item_repo.list_all() if item.id not in touched]

    @Logger.io
    async def stats(self) -> InventoryStats:
        items = await self.item_repo.list_all()
        active = await self.reservation_repo.find_by_status(status=ReservationStatus.ACTIVE)
        held = {reservation.item_id for reservation in active}
        sales = await self.sale_repo.list_all()

        return InventoryStats(
            total_items=len(items),
            available_items=sum(1 for item in items if item.id not in held),
            reserved_items=len(held),
            total_sales=len(sales),
            active_reservations=len(active),
            inactive_items=len(await self.inactive_items()),
        )
