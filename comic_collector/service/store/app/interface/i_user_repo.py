from abc import ABC, abstractmethod
from typing import List

from comic_collector.service.store.domain.entity.user_entity import UserEntity


class IUserRepo(ABC):
    @abstractmethod
    async def find_by_id(self, *, user_id: int) -> UserEntity | None:
        pass

    @abstractmethod
    async def find_by_email(self, *, email: str) -> UserEntity | None:
        pass

    @abstractmethod
    async def list_all(self) -> List[UserEntity]:
        pass

    @abstractmethod
    async def save(self, *, user: UserEntity) -> UserEntity:
        """Persist a new user and assign its integer id"""
        pass

    @abstractmethod
    async def update(self, *, user: UserEntity) -> UserEntity:
        """
        Raises:
            UserNotFoundError: When no user with this id is stored
        """
        pass

    @abstractmethod
    async def delete(self, *, user_id: int) -> None:
        """
        Raises:
            UserNotFoundError: When no user with this id is stored
        """
        pass
