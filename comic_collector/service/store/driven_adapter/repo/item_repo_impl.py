from typing import List, Optional

from uuid_utils import UUID

from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.interface.i_item_repo import IItemRepo
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.store_errors import ItemNotFoundError
from comic_collector.service.store.driven_adapter.repo.json_snapshot_store import (
    JsonSnapshotStore,
)
from comic_collector.service.store.driven_adapter.repo.snapshot_record import (
    item_to_record,
    record_to_item,
)


class ItemRepoImpl(IItemRepo):
    """In-memory catalog, optionally mirrored to a JSON snapshot"""

    def __init__(self, *, snapshot_store: Optional[JsonSnapshotStore] = None) -> None:
        self.snapshot_store = snapshot_store
        self._items: dict[UUID, ItemEntity] = {}
        if snapshot_store is not None:
            for record in snapshot_store.load():
                item = record_to_item(record)
                self._items[item.id] = item

    async def _flush(self) -> None:
        if self.snapshot_store is not None:
            await self.snapshot_store.write([item_to_record(item) for item in self._items.values()])

    async def find_by_id(self, *, item_id: UUID) -> ItemEntity | None:
        return self._items.get(item_id)

    async def find_by_name(self, *, name: str) -> List[ItemEntity]:
        needle = name.strip().lower()
        return [item for item in self._items.values() if needle in item.name.lower()]

    async def list_all(self) -> List[ItemEntity]:
        return list(self._items.values())

    @Logger.io
    async def save(self, *, item: ItemEntity) -> ItemEntity:
        self._items[item.id] = item
        await self._flush()
        return item

    @Logger.io
    async def update(self, *, item: ItemEntity) -> ItemEntity:
        if item.id not in self._items:
            raise ItemNotFoundError(f'Item not found: {item.id}')
        self._items[item.id] = item
        await self._flush()
        return item

    @Logger.io
    async def delete(self, *, item_id: UUID) -> None:
        if self._items.pop(item_id, None) is None:
            raise ItemNotFoundError(f'Item not found: {item_id}')
        await self._flush()
