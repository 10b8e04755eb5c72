from typing import List, Self

from dependency_injector.wiring import Provide, inject

from comic_collector.platform.config.di import Container
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.service.reservation_service import ReservationService
from comic_collector.service.store.app.service.user_service import UserService
from comic_collector.service.store.domain.entity.reservation_entity import Reservation


class ListUserReservationsUseCase:
    def __init__(
        self, *, user_service: UserService, reservation_service: ReservationService
    ) -> None:
        self.user_service = user_service
        self.reservation_service = reservation_service

    @classmethod
    @inject
    def build(
        cls,
        user_service: UserService = Provide[Container.user_service],
        reservation_service: ReservationService = Provide[Container.reservation_service],
    ) -> Self:
        return cls(user_service=user_service, reservation_service=reservation_service)

    @Logger.io
    async def execute(self, *, user_id: int) -> List[Reservation]:
        user = await self.user_service.get_user(user_id=user_id)
        return await self.reservation_service.active_reservations_of(user=user)
