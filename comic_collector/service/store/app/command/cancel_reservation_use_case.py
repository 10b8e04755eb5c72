from typing import Self

from dependency_injector.wiring import Provide, inject
from uuid_utils import UUID

from comic_collector.platform.config.di import Container
from comic_collector.platform.exception.exceptions import ForbiddenError
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.service.reservation_service import ReservationService
from comic_collector.service.store.domain.entity.reservation_entity import Reservation


class CancelReservationUseCase:
    """
    Release a hold on behalf of its holder

    Flow:
    1. Load the reservation
    2. Only the user holding it may cancel
    3. ReservationService.cancel applies the status and cancel-window rules
    """

    def __init__(self, *, reservation_service: ReservationService) -> None:
        self.reservation_service = reservation_service

    @classmethod
    @inject
    def build(
        cls,
        reservation_service: ReservationService = Provide[Container.reservation_service],
    ) -> Self:
        return cls(reservation_service=reservation_service)

    @Logger.io
    async def execute(self, *, reservation_id: UUID, user_id: int) -> Reservation:
        reservation = await self.reservation_service.find_by_id(reservation_id=reservation_id)

        if reservation.user_id != user_id:
            raise ForbiddenError('Only the holder can cancel this reservation')

        await self.reservation_service.cancel(reservation=reservation)
        return reservation
