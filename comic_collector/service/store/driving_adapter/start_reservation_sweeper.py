"""
Reservation Sweeper (Background Task)

Expires overdue holds and repairs half-finished sales every
SWEEP_INTERVAL_SECONDS. The sweeper runs inside the process that owns the DI
container, next to whatever places holds and purchases, so it works on the
same repositories:

    async with store_lifespan() as container:
        await ReserveItemUseCase.build().execute(user_id=..., item_id=...)
        ...

With RESERVATION_SNAPSHOT_PATH / SALE_SNAPSHOT_PATH set, holds and sales
placed before a restart are loaded again and swept as well.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

import anyio

from comic_collector.platform.config.core_setting import settings
from comic_collector.platform.config.di import Container, cleanup, container, setup
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.app.command.sweep_expired_reservations_use_case import (
    SweepExpiredReservationsUseCase,
)


async def sweep_forever(
    use_case: SweepExpiredReservationsUseCase, *, interval_seconds: float
) -> None:
    while True:
        try:
            result = await use_case.execute()
            Logger.base.info(
                f'🧹 [Reservation Sweeper] Run done: expired={result.total_expired}, '
                f'reconciled={result.total_reconciled}'
            )
        except Exception as e:
            # Retried on the next tick
            Logger.base.error(f'❌ [Reservation Sweeper] Run failed: {e}')
        await anyio.sleep(interval_seconds)


@asynccontextmanager
async def store_lifespan(*, interval_seconds: Optional[float] = None) -> AsyncIterator[Container]:
    """Wire the container and keep the sweeper running until the block exits"""
    Logger.base.info('🚀 [Store] Starting up...')
    setup()
    interval = interval_seconds or settings.SWEEP_INTERVAL_SECONDS

    try:
        use_case = SweepExpiredReservationsUseCase.build()
        async with anyio.create_task_group() as tg:
            tg.start_soon(  # type: ignore[arg-type]
                lambda: sweep_forever(use_case, interval_seconds=interval)
            )
            Logger.base.info(f'✅ [Reservation Sweeper] Sweeping every {interval}s')

            yield container

            Logger.base.info('🛑 [Store] Shutting down...')
            tg.cancel_scope.cancel()
    finally:
        cleanup()
        Logger.base.info('👋 [Store] Shutdown complete')
