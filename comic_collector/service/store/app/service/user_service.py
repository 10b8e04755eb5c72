from datetime import timedelta
from typing import List, Optional

from comic_collector.platform.config.core_setting import settings
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.platform.types.clock import Clock, utc_now
from comic_collector.service.store.app.interface.i_reservation_repo import IReservationRepo
from comic_collector.service.store.app.interface.i_sale_repo import ISaleRepo
from comic_collector.service.store.app.interface.i_user_repo import IUserRepo
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.store_errors import (
    EmailAlreadyExistsError,
    UserNotFoundError,
    UserNotRemovableError,
)
from comic_collector.service.store.domain.value_object.email import Email


class UserService:
    """
    Customer registry

    A user may only be removed once they hold no active reservation and have
    not bought anything in the last RECENT_SALES_DAYS days.
    """

    def __init__(
        self,
        *,
        user_repo: IUserRepo,
        reservation_repo: IReservationRepo,
        sale_repo: ISaleRepo,
        clock: Clock = utc_now,
        recent_sales_days: Optional[int] = None,
    ) -> None:
        self.user_repo = user_repo
        self.reservation_repo = reservation_repo
        self.sale_repo = sale_repo
        self.clock = clock
        self.recent_sales_window = timedelta(
            days=recent_sales_days or settings.RECENT_SALES_DAYS
        )

    @Logger.io
    async def register_user(self, *, first_name: str, last_name: str, email: str) -> UserEntity:
        """
        Raises:
            InvalidUserError / InvalidEmailError: Blank names or malformed email
            EmailAlreadyExistsError: The email is already registered
        """
        user = UserEntity.create(first_name=first_name, last_name=last_name, email=email)
        if await self.user_repo.find_by_email(email=user.email.value) is not None:
            raise EmailAlreadyExistsError(f'Email already registered: {user.email}')

        saved = await self.user_repo.save(user=user)
        Logger.base.info(f'👤 [USER] Registered user {saved.id}')
        return saved

    @Logger.io
    async def get_user(self, *, user_id: int) -> UserEntity:
        user = await self.user_repo.find_by_id(user_id=user_id)
        if user is None:
            raise UserNotFoundError(f'User not found: {user_id}')
        return user

    @Logger.io
    async def update_user(
        self,
        *,
        user_id: int,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserEntity:
        user = await self.get_user(user_id=user_id)

        if email is not None:
            new_email = Email(email)
            owner = await self.user_repo.find_by_email(email=new_email.value)
            if owner is not None and owner.id != user.id:
                raise EmailAlreadyExistsError(f'Email already registered: {new_email}')
            user.change_email(new_email.value)
        user.change_name(first_name=first_name, last_name=last_name)

        await self.user_repo.update(user=user)
        Logger.base.info(f'👤 [USER] Updated user {user.id}')
        return user

    async def can_remove_user(self, *, user: Optional[UserEntity]) -> bool:
        if user is None:
            return False

        reservations = await self.reservation_repo.find_by_user(user=user)
        if any(reservation.is_active for reservation in reservations):
            return False

        since = self.clock() - self.recent_sales_window
        sales = await self.sale_repo.find_by_user(user=user)
        return not any(sale.occurred_at >= since for sale in sales)

    @Logger.io
    async def remove_user(self, *, user_id: int) -> None:
        user = await self.get_user(user_id=user_id)
        if not await self.can_remove_user(user=user):
            raise UserNotRemovableError(
                f'User {user_id} has active reservations or recent purchases'
            )
        await self.user_repo.delete(user_id=user_id)
        Logger.base.info(f'🗑️ [USER] Removed user {user_id}')

    async def search_users(self, *, criteria: Optional[str] = None) -> List[UserEntity]:
        users = await self.user_repo.list_all()
        if criteria is None or not criteria.strip():
            return users

        needle = criteria.strip().lower()
        return [
            user
            for user in users
            if needle in user.first_name.lower()
            or needle in user.last_name.lower()
            or needle in user.email.value
        ]
