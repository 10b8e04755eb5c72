"""
Item Repository Interface

Catalog persistence consumed by the store services.
"""

from abc import ABC, abstractmethod
from typing import List

from uuid_utils import UUID

from comic_collector.service.store.domain.entity.item_entity import ItemEntity


class IItemRepo(ABC):
    @abstractmethod
    async def find_by_id(self, *, item_id: UUID) -> ItemEntity | None:
        pass

    @abstractmethod
    async def find_by_name(self, *, name: str) -> List[ItemEntity]:
        """Case-insensitive substring match on the item name"""
        pass

    @abstractmethod
    async def list_all(self) -> List[ItemEntity]:
        pass

    @abstractmethod
    async def save(self, *, item: ItemEntity) -> ItemEntity:
        pass

    @abstractmethod
    async def update(self, *, item: ItemEntity) -> ItemEntity:
        """
        Raises:
            ItemNotFoundError: When no item with this id is stored
        """
        pass

    @abstractmethod
    async def delete(self, *, item_id: UUID) -> None:
        """
        Raises:
            ItemNotFoundError: When no item with this id is stored
        """
        pass
