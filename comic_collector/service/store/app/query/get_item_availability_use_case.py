from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from uuid_utils import UUID

from comic_collector.platform.config.di import Container
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.dto.item_availability import ItemAvailability
from comic_collector.service.store.app.service.catalog_service import CatalogService
from comic_collector.service.store.app.service.reservation_service import ReservationService
from comic_collector.service.store.app.service.sale_service import SaleService
from comic_collector.service.store.app.service.user_service import UserService


class GetItemAvailabilityUseCase:
    def __init__(
        self,
        *,
        catalog_service: CatalogService,
        user_service: UserService,
        reservation_service: ReservationService,
        sale_service: SaleService,
    ) -> None:
        self.catalog_service = catalog_service
        self.user_service = user_service
        self.reservation_service = reservation_service
        self.sale_service = sale_service

    @classmethod
    @inject
    def build(
        cls,
        catalog_service: CatalogService = Provide[Container.catalog_service],
        user_service: UserService = Provide[Container.user_service],
        reservation_service: ReservationService = Provide[Container.reservation_service],
        sale_service: SaleService = Provide[Container.sale_service],
    ) -> Self:
        return cls(
            catalog_service=catalog_service,
            user_service=user_service,
            reservation_service=reservation_service,
            sale_service=sale_service,
        )

    @Logger.io
    async def execute(self, *, item_id: UUID, user_id: Optional[int] = None) -> ItemAvailability:
        item = await self.catalog_service.get_item(item_id=item_id)

        if user_id is None:
            # Anonymous view: only a free item can be reserved or bought
            free = await self.reservation_service.is_available(item=item)
            return ItemAvailability(item_id=item.id, reservable=free, purchasable=free)

        user = await self.user_service.get_user(user_id=user_id)
        return ItemAvailability(
            item_id=item.id,
            reservable=await self.reservation_service.can_reserve(user=user, item=item),
            purchasable=await self.sale_service.can_purchase(user=user, item=item),
            user_id=user_id,
        )
