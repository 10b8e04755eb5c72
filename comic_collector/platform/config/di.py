"""
https://python-dependency-injector.ets-labs.org/index.html
"""

from dependency_injector import containers, providers

from comic_collector.platform.config.core_setting import settings
from comic_collector.platform.state.keyed_lock import KeyedLock
from comic_collector.platform.types.clock import utc_now
from comic_collector.service.store.app.service.catalog_service import CatalogService
from comic_collector.service.store.app.service.inventory_service import InventoryService
from comic_collector.service.store.app.service.reservation_service import ReservationService
from comic_collector.service.store.app.service.sale_service import SaleService
from comic_collector.service.store.app.service.user_service import UserService
from comic_collector.service.store.driven_adapter.repo.item_repo_impl import ItemRepoImpl
from comic_collector.service.store.driven_adapter.repo.json_snapshot_store import (
    snapshot_store_for,
)
from comic_collector.service.store.driven_adapter.repo.reservation_repo_impl import (
    ReservationRepoImpl,
)
from comic_collector.service.store.driven_adapter.repo.sale_repo_impl import SaleRepoImpl
from comic_collector.service.store.driven_adapter.repo.user_repo_impl import UserRepoImpl


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Object(settings)

    # Time source, overridden with a fixed clock in tests
    clock = providers.Object(utc_now)

    # In-process critical sections shared by every service touching reservations / sales
    keyed_lock = providers.Singleton(KeyedLock)

    # Snapshots (None when the path is unset)
    catalog_snapshot_store = providers.Singleton(
        snapshot_store_for, path=config_service.provided.CATALOG_SNAPSHOT_PATH
    )
    user_snapshot_store = providers.Singleton(
        snapshot_store_for, path=config_service.provided.USER_SNAPSHOT_PATH
    )
    reservation_snapshot_store = providers.Singleton(
        snapshot_store_for, path=config_service.provided.RESERVATION_SNAPSHOT_PATH
    )
    sale_snapshot_store = providers.Singleton(
        snapshot_store_for, path=config_service.provided.SALE_SNAPSHOT_PATH
    )

    # Repositories
    item_repo = providers.Singleton(ItemRepoImpl, snapshot_store=catalog_snapshot_store)
    user_repo = providers.Singleton(UserRepoImpl, snapshot_store=user_snapshot_store)
    reservation_repo = providers.Singleton(
        ReservationRepoImpl, snapshot_store=reservation_snapshot_store
    )
    sale_repo = providers.Singleton(SaleRepoImpl, snapshot_store=sale_snapshot_store)

    # Services
    reservation_service = providers.Singleton(
        ReservationService,
        reservation_repo=reservation_repo,
        keyed_lock=keyed_lock,
        item_repo=item_repo,
        clock=clock,
        max_active_per_user=config_service.provided.MAX_ACTIVE_RESERVATIONS_PER_USER,
        cancel_window_hours=config_service.provided.RESERVATION_CANCEL_WINDOW_HOURS,
        hold_duration_days=config_service.provided.RESERVATION_HOLD_DURATION_DAYS,
    )
    sale_service = providers.Singleton(
        SaleService,
        sale_repo=sale_repo,
        reservation_repo=reservation_repo,
        item_repo=item_repo,
        keyed_lock=keyed_lock,
        clock=clock,
        compensation_attempts=config_service.provided.SALE_COMPENSATION_ATTEMPTS,
    )
    catalog_service = providers.Singleton(
        CatalogService,
        item_repo=item_repo,
        reservation_repo=reservation_repo,
        sale_repo=sale_repo,
    )
    user_service = providers.Singleton(
        UserService,
        user_repo=user_repo,
        reservation_repo=reservation_repo,
        sale_repo=sale_repo,
        clock=clock,
        recent_sales_days=config_service.provided.RECENT_SALES_DAYS,
    )
    inventory_service = providers.Singleton(
        InventoryService,
        item_repo=item_repo,
        reservation_repo=reservation_repo,
        sale_repo=sale_repo,
    )


container = Container()


def setup() -> None:
    from comic_collector.platform.config.wire_modules import WIRE_MODULES

    container.wire(modules=WIRE_MODULES)


def cleanup() -> None:
    container.unwire()
    container.reset_singletons()
