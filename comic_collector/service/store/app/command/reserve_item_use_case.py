from typing import Self

from dependency_injector.wiring import Provide, inject
from uuid_utils import UUID

from comic_collector.platform.config.di import Container
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.service.catalog_service import CatalogService
from comic_collector.service.store.app.service.reservation_service import ReservationService
from comic_collector.service.store.app.service.user_service import UserService
from comic_collector.service.store.domain.entity.reservation_entity import Reservation


class ReserveItemUseCase:
    def __init__(
        self,
        *,
        user_service: UserService,
        catalog_service: CatalogService,
        reservation_service: ReservationService,
    ) -> None:
        self.user_service = user_service
        self.catalog_service = catalog_service
        self.reservation_service = reservation_service

    @classmethod
    @inject
    def build(
        cls,
        user_service: UserService = Provide[Container.user_service],
        catalog_service: CatalogService = Provide[Container.catalog_service],
        reservation_service: ReservationService = Provide[Container.reservation_service],
    ) -> Self:
        return cls(
            user_service=user_service,
            catalog_service=catalog_service,
            reservation_service=reservation_service,
        )

    @Logger.io
    async def execute(self, *, user_id: int, item_id: UUID) -> Reservation:
        """
        Raises:
            UserNotFoundError / ItemNotFoundError: Unknown identifiers
            ItemUnavailableError / ReservationQuotaExceededError: Hold rules
        """
        user = await self.user_service.get_user(user_id=user_id)
        item = await self.catalog_service.get_item(item_id=item_id)
        return await self.reservation_service.reserve(user=user, item=item)
