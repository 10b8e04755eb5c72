from typing import List, Optional

from uuid_utils import UUID

from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.interface.i_item_repo import IItemRepo
from comic_collector.service.store.app.interface.i_reservation_repo import IReservationRepo
from comic_collector.service.store.app.interface.i_sale_repo import ISaleRepo
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.store_errors import (
    ItemNameAlreadyExistsError,
    ItemNotFoundError,
    ItemNotRemovableError,
)
from comic_collector.service.store.domain.value_object.money import Money


class CatalogService:
    """Maintains the comic catalog: one ItemEntity per copy on sale"""

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

    async def name_exists(self, *, name: str, exclude_id: Optional[UUID] = None) -> bool:
        wanted = name.strip().lower()
        for item in await self.item_repo.list_all():
            if item.name.lower() == wanted and item.id != exclude_id:
                return True
        return False

    @Logger.io
    async def add_item(self, *, name: str, description: str, price: Money) -> ItemEntity:
        """
        Raises:
            InvalidItemError: Blank name/description or missing price
            ItemNameAlreadyExistsError: Another item already uses the name
        """
        item = ItemEntity.create(name=name, description=description, price=price)
        if await self.name_exists(name=item.name):
            raise ItemNameAlreadyExistsError(f"An item named '{item.name}' already exists")

        await self.item_repo.save(item=item)
        Logger.base.info(f"📚 [CATALOG] Added item {item.id} '{item.name}' at {item.price}")
        return item

    @Logger.io
    async def get_item(self, *, item_id: UUID) -> ItemEntity:
        item = await self.item_repo.find_by_id(item_id=item_id)
        if item is None:
            raise ItemNotFoundError(f'Item not found: {item_id}')
        return item

    @Logger.io
    async def update_item(
        self,
        *,
        item_id: UUID,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Optional[Money] = None,
    ) -> ItemEntity:
        item = await self.get_item(item_id=item_id)

        if name is not None:
            if await self.name_exists(name=name, exclude_id=item.id):
                raise ItemNameAlreadyExistsError(f"An item named '{name.strip()}' already exists")
            item.rename(name)
        if description is not None:
            item.describe(description)
        if price is not None:
            item.reprice(price)

        await self.item_repo.update(item=item)
        Logger.base.info(f'📚 [CATALOG] Updated item {item.id}')
        return item

    async def can_remove_item(self, *, item: Optional[ItemEntity]) -> bool:
        """An item with an active hold or any recorded sale stays in the catalog"""
        if item is None:
            return False
        if await self.reservation_repo.find_active_by_item(item=item):
            return False
        return not await self.sale_repo.find_by_item(item=item)

    @Logger.io
    async def remove_item(self, *, item_id: UUID) -> None:
        item = await self.get_item(item_id=item_id)
        if not await self.can_remove_item(item=item):
            raise ItemNotRemovableError(
                f"Item '{item.name}' has active reservations or recorded sales"
            )
        await self.item_repo.delete(item_id=item.id)
        Logger.base.info(f"🗑️ [CATALOG] Removed item {item.id} '{item.name}'")

    async def search_items(self, *, criteria: Optional[str] = None) -> List[ItemEntity]:
        items = await self.item_repo.list_all()
        if criteria is None or not criteria.strip():
            return items

        needle = criteria.strip().lower()
        return [
            item
            for item in items
            if needle in item.name.lower() or needle in item.description.lower()
        ]
