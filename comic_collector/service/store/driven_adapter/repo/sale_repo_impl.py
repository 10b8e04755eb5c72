from typing import List, Optional

from uuid_utils import UUID

from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.interface.i_sale_repo import ISaleRepo
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.sale_entity import Sale
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.driven_adapter.repo.json_snapshot_store import (
    JsonSnapshotStore,
)
from comic_collector.service.store.driven_adapter.repo.snapshot_record import (
    record_to_sale,
    sale_to_record,
)


class SaleRepoImpl(ISaleRepo):
    """Append-only sale ledger, optionally mirrored to a JSON snapshot"""

    def __init__(self, *, snapshot_store: Optional[JsonSnapshotStore] = None) -> None:
        self.snapshot_store = snapshot_store
        self._sales: dict[UUID, Sale] = {}
        if snapshot_store is not None:
            for record in snapshot_store.load():
                sale = record_to_sale(record)
                self._sales[sale.id] = sale

    @Logger.io
    async def save(self, *, sale: Sale) -> Sale:
        self._sales[sale.id] = sale
        if self.snapshot_store is not None:
            await self.snapshot_store.write([sale_to_record(s) for s in sorted(self._sales.values())])
        return sale

    async def find_by_user(self, *, user: UserEntity) -> List[Sale]:
        return sorted(s for s in self._sales.values() if s.user_id == user.id)

    async def find_by_item(self, *, item: ItemEntity) -> List[Sale]:
        return sorted(s for s in self._sales.values() if s.item_id == item.id)

    async def list_all(self) -> List[Sale]:
        return sorted(self._sales.values())
