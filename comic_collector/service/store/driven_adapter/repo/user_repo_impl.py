from typing import List, Optional

from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.interface.i_user_repo import IUserRepo
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.store_errors import UserNotFoundError
from comic_collector.service.store.driven_adapter.repo.json_snapshot_store import (
    JsonSnapshotStore,
)
from comic_collector.service.store.driven_adapter.repo.snapshot_record import (
    record_to_user,
    user_to_record,
)


class UserRepoImpl(IUserRepo):
    """In-memory user registry with sequential integer ids"""

    def __init__(self, *, snapshot_store: Optional[JsonSnapshotStore] = None) -> None:
        self.snapshot_store = snapshot_store
        self._users: dict[int, UserEntity] = {}
        self._last_id = 0
        if snapshot_store is not None:
            for record in snapshot_store.load():
                user = record_to_user(record)
                self._users[user.id] = user  # type: ignore[index]
            self._last_id = max(self._users, default=0)

    async def _flush(self) -> None:
        if self.snapshot_store is None:
            return
        await self.snapshot_store.write([user_to_record(user) for user in self._users.values()])

    async def find_by_id(self, *, user_id: int) -> UserEntity | None:
        return self._users.get(user_id)

    async def find_by_email(self, *, email: str) -> UserEntity | None:
        wanted = email.strip().lower()
        return next((user for user in self._users.values() if user.email.value == wanted), None)

    async def list_all(self) -> List[UserEntity]:
        return list(self._users.values())

    @Logger.io
    async def save(self, *, user: UserEntity) -> UserEntity:
        if user.id is None:
            self._last_id += 1
            user.id = self._last_id
        else:
            self._last_id = max(self._last_id, user.id)
        self._users[user.id] = user
        await self._flush()
        return user

    @Logger.io
    async def update(self, *, user: UserEntity) -> UserEntity:
        if user.id is None or user.id not in self._users:
            raise UserNotFoundError(f'User not found: {user.id}')
        self._users[user.id] = user
        await self._flush()
        return user

    @Logger.io
    async def delete(self, *, user_id: int) -> None:
        if self._users.pop(user_id, None) is None:
            raise UserNotFoundError(f'User not found: {user_id}')
        await self._flush()
