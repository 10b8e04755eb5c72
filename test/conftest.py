"""
Test Configuration and Fixtures

This module provides:
- Test log directory setup (before any application import)
- A controllable clock
- In-memory repositories and the store services wired on top of them
- Sample users and catalog items

Architecture:
- Unit tests: build services on the fixtures below, or mock collaborators with AsyncMock
- Integration tests: wire the DI container and override its clock / repositories
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# loguru_io_config reads TEST_LOG_DIR at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402

from comic_collector.platform.state.keyed_lock import KeyedLock  # noqa: E402
from comic_collector.service.store.app.service.catalog_service import CatalogService  # noqa: E402
from comic_collector.service.store.app.service.inventory_service import (  # noqa: E402
    InventoryService,
)
from comic_collector.service.store.app.service.reservation_service import (  # noqa: E402
    ReservationService,
)
from comic_collector.service.store.app.service.sale_service import SaleService  # noqa: E402
from comic_collector.service.store.app.service.user_service import UserService  # noqa: E402
from comic_collector.service.store.domain.entity.item_entity import ItemEntity  # noqa: E402
from comic_collector.service.store.domain.entity.user_entity import UserEntity  # noqa: E402
from comic_collector.service.store.domain.value_object.money import Money  # noqa: E402
from comic_collector.service.store.driven_adapter.repo.item_repo_impl import (  # noqa: E402
    ItemRepoImpl,
)
from comic_collector.service.store.driven_adapter.repo.reservation_repo_impl import (  # noqa: E402
    ReservationRepoImpl,
)
from comic_collector.service.store.driven_adapter.repo.sale_repo_impl import (  # noqa: E402
    SaleRepoImpl,
)
from comic_collector.service.store.driven_adapter.repo.user_repo_impl import (  # noqa: E402
    UserRepoImpl,
)


T0 = datetime(2026, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when a test moves it"""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def keyed_lock() -> KeyedLock:
    return KeyedLock()


@pytest.fixture
def item_repo() -> ItemRepoImpl:
    return ItemRepoImpl()


@pytest.fixture
def user_repo() -> UserRepoImpl:
    return UserRepoImpl()


@pytest.fixture
def reservation_repo() -> ReservationRepoImpl:
    return ReservationRepoImpl()


@pytest.fixture
def sale_repo() -> SaleRepoImpl:
    return SaleRepoImpl()


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def reservation_service(
    reservation_repo: ReservationRepoImpl,
    item_repo: ItemRepoImpl,
    keyed_lock: KeyedLock,
    clock: FixedClock,
) -> ReservationService:
    return ReservationService(
        reservation_repo=reservation_repo,
        keyed_lock=keyed_lock,
        item_repo=item_repo,
        clock=clock,
        max_active_per_user=3,
        cancel_window_hours=1,
        hold_duration_days=2,
    )


@pytest.fixture
def sale_service(
    sale_repo: SaleRepoImpl,
    reservation_repo: ReservationRepoImpl,
    item_repo: ItemRepoImpl,
    keyed_lock: KeyedLock,
    clock: FixedClock,
) -> SaleService:
    return SaleService(
        sale_repo=sale_repo,
        reservation_repo=reservation_repo,
        item_repo=item_repo,
        keyed_lock=keyed_lock,
        clock=clock,
        compensation_attempts=3,
    )


@pytest.fixture
def catalog_service(
    item_repo: ItemRepoImpl, reservation_repo: ReservationRepoImpl, sale_repo: SaleRepoImpl
) -> CatalogService:
    return CatalogService(item_repo=item_repo, reservation_repo=reservation_repo, sale_repo=sale_repo)


@pytest.fixture
def user_service(
    user_repo: UserRepoImpl,
    reservation_repo: ReservationRepoImpl,
    sale_repo: SaleRepoImpl,
    clock: FixedClock,
) -> UserService:
    return UserService(
        user_repo=user_repo,
        reservation_repo=reservation_repo,
        sale_repo=sale_repo,
        clock=clock,
        recent_sales_days=30,
    )


@pytest.fixture
def inventory_service(
    item_repo: ItemRepoImpl, reservation_repo: ReservationRepoImpl, sale_repo: SaleRepoImpl
) -> InventoryService:
    return InventoryService(item_repo=item_repo, reservation_repo=reservation_repo, sale_repo=sale_repo)


# =============================================================================
# Sample data
# =============================================================================


@pytest.fixture
async def alice(user_repo: UserRepoImpl) -> AsyncGenerator[UserEntity, None]:
    user = UserEntity.create(first_name='Alice', last_name='Moreno', email='alice@example.com')
    yield await user_repo.save(user=user)


@pytest.fixture
async def bob(user_repo: UserRepoImpl) -> AsyncGenerator[UserEntity, None]:
    user = UserEntity.create(first_name='Bob', last_name='Silva', email='bob@example.com')
    yield await user_repo.save(user=user)


@pytest.fixture
async def comics(item_repo: ItemRepoImpl) -> AsyncGenerator[list[ItemEntity], None]:
    """Five single-copy comics priced 1000, 2000, ... 5000 CLP"""
    items = [
        ItemEntity.create(
            name=f'Mafalda Vol. {n}',
            description=f'Collected strips, volume {n}',
            price=Money.pesos(n * 1000),
        )
        for n in range(1, 6)
    ]
    for item in items:
        await item_repo.save(item=item)
    yield items


@pytest.fixture
def comic(comics: list[ItemEntity]) -> ItemEntity:
    return comics[0]
