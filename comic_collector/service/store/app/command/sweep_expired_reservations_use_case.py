from typing import Self

from dependency_injector.wiring import Provide, inject

from comic_collector.platform.config.di import Container
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.dto.sweep_result import SweepResult
from comic_collector.service.store.app.service.reservation_service import ReservationService
from comic_collector.service.store.app.service.sale_service import SaleService


class SweepExpiredReservationsUseCase:
    """Periodic housekeeping: expire overdue holds, then repair half-finished sales"""

    def __init__(
        self,
        *,
        reservation_service: ReservationService,
        sale_service: SaleService,
    ) -> None:
        self.reservation_service = reservation_service
        self.sale_service = sale_service

    @classmethod
    @inject
    def build(
        cls,
        reservation_service: ReservationService = Provide[Container.reservation_service],
        sale_service: SaleService = Provide[Container.sale_service],
    ) -> Self:
        return cls(reservation_service=reservation_service, sale_service=sale_service)

    @Logger.io
    async def execute(self) -> SweepResult:
        expired = await self.reservation_service.sweep_expired()
        reconciled = await self.sale_service.reconcile_pending()
        return SweepResult(expired=expired, reconciled=reconciled)
