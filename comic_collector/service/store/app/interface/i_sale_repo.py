from abc import ABC, abstractmethod
from typing import List

from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.sale_entity import Sale
from comic_collector.service.store.domain.entity.user_entity import UserEntity


class ISaleRepo(ABC):
    @abstractmethod
    async def save(self, *, sale: Sale) -> Sale:
        pass

    @abstractmethod
    async def find_by_user(self, *, user: UserEntity) -> List[Sale]:
        pass

    @abstractmethod
    async def find_by_item(self, *, item: ItemEntity) -> List[Sale]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Sale]:
        pass
