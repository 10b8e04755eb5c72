"""
Unit tests for the orjson snapshot store and the repositories mirrored to it
"""

from pathlib import Path

import orjson
import pytest

from comic_collector.platform.state.keyed_lock import KeyedLock
from comic_collector.service.store.app.service.reservation_service import ReservationService
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.sale_entity import Sale
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.enum.reservation_status import ReservationStatus
from comic_collector.service.store.domain.value_object.money import Money
from comic_collector.service.store.driven_adapter.repo.item_repo_impl import ItemRepoImpl
from comic_collector.service.store.driven_adapter.repo.json_snapshot_store import (
    JsonSnapshotStore,
    snapshot_store_for,
)
from comic_collector.service.store.driven_adapter.repo.reservation_repo_impl import (
    ReservationRepoImpl,
)
from comic_collector.service.store.driven_adapter.repo.sale_repo_impl import SaleRepoImpl
from comic_collector.service.store.driven_adapter.repo.user_repo_impl import UserRepoImpl


pytestmark = pytest.mark.unit


class TestJsonSnapshotStore:
    def test_missing_or_empty_file_loads_nothing(self, tmp_path: Path) -> None:
        store = JsonSnapshotStore(path=tmp_path / 'missing.json')
        assert store.load() == []

        (tmp_path / 'empty.json').write_bytes(b'')
        assert JsonSnapshotStore(path=tmp_path / 'empty.json').load() == []

    async def test_write_then_load(self, tmp_path: Path) -> None:
        store = JsonSnapshotStore(path=tmp_path / 'nested' / 'records.json')

        await store.write([{'id': 1, 'name': 'x'}])

        assert store.load() == [{'id': 1, 'name': 'x'}]
        assert not (tmp_path / 'nested' / 'records.json.tmp').exists()

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / 'broken.json'
        path.write_bytes(b'{not json')

        with pytest.raises(orjson.JSONDecodeError):
            JsonSnapshotStore(path=path).load()

    def test_non_array_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / 'object.json'
        path.write_bytes(b'{"id": 1}')

        with pytest.raises(ValueError):
            JsonSnapshotStore(path=path).load()

    def test_snapshot_store_for(self, tmp_path: Path) -> None:
        assert snapshot_store_for(None) is None
        assert snapshot_store_for(tmp_path / 'a.json').path == tmp_path / 'a.json'


class TestMirroredRepositories:
    async def test_catalog_survives_a_restart(self, tmp_path: Path) -> None:
        path = tmp_path / 'catalog.json'
        repo = ItemRepoImpl(snapshot_store=JsonSnapshotStore(path=path))
        kept = ItemEntity.create(name='Condorito', description='Classic', price=Money.of('12.50', 'USD'))
        dropped = ItemEntity.create(name='Mampato', description='Adventure', price=Money.pesos(800))
        await repo.save(item=kept)
        await repo.save(item=dropped)
        await repo.delete(item_id=dropped.id)

        reloaded = ItemRepoImpl(snapshot_store=JsonSnapshotStore(path=path))

        items = await reloaded.list_all()
        assert items == [kept]
        assert items[0].price == Money.of('12.50', 'USD')
        assert items[0].name == 'Condorito'

    async def test_users_survive_a_restart_and_keep_counting(self, tmp_path: Path) -> None:
        path = tmp_path / 'users.json'
        repo = UserRepoImpl(snapshot_store=JsonSnapshotStore(path=path))
        await repo.save(user=UserEntity.create(first_name='Ana', last_name='Rojas', email='ana@example.com'))
        await repo.save(user=UserEntity.create(first_name='Luis', last_name='Paz', email='luis@example.com'))

        reloaded = UserRepoImpl(snapshot_store=JsonSnapshotStore(path=path))
        carol = await reloaded.save(
            user=UserEntity.create(first_name='Carol', last_name='Vera', email='carol@example.com')
        )

        assert (await reloaded.find_by_email(email='luis@example.com')).id == 2  # type: ignore[union-attr]
        assert carol.id == 3

    async def test_holds_and_sales_survive_a_restart_and_are_swept(
        self, tmp_path: Path, clock, alice: UserEntity, bob: UserEntity, comics: list[ItemEntity]
    ) -> None:
        """
        Given: a hold and a sale written through snapshot-backed repositories
        When: a fresh process loads the snapshots and sweeps after the hold expired
        Then: the reloaded hold is expired and the reloaded sale still blocks a second sale
        """
        reservations_path = tmp_path / 'reservations.json'
        sales_path = tmp_path / 'sales.json'
        held, sold = comics[0], comics[1]

        before = ReservationService(
            reservation_repo=ReservationRepoImpl(
                snapshot_store=JsonSnapshotStore(path=reservations_path)
            ),
            keyed_lock=KeyedLock(),
            clock=clock,
        )
        hold = await before.reserve(user=alice, item=held)
        sale = Sale.create(user=bob, item=sold, now=clock())
        await SaleRepoImpl(snapshot_store=JsonSnapshotStore(path=sales_path)).save(sale=sale)

        reservation_repo = ReservationRepoImpl(
            snapshot_store=JsonSnapshotStore(path=reservations_path)
        )
        sale_repo = SaleRepoImpl(snapshot_store=JsonSnapshotStore(path=sales_path))
        after = ReservationService(
            reservation_repo=reservation_repo, keyed_lock=KeyedLock(), clock=clock
        )
        clock.advance(days=3)

        assert await after.sweep_expired() == [hold]
        reloaded_hold = await reservation_repo.find_by_id(reservation_id=hold.id)
        assert reloaded_hold is not None
        assert reloaded_hold.status == ReservationStatus.EXPIRED
        assert reloaded_hold.user_id == alice.id
        assert reloaded_hold.expires_at == hold.expires_at

        reloaded_sales = await sale_repo.find_by_item(item=sold)
        assert reloaded_sales == [sale]
        assert reloaded_sales[0].final_price == Money.pesos(2380)
        assert reloaded_sales[0].occurred_at == sale.occurred_at

        # Expired status is itself persisted
        third_start = ReservationRepoImpl(snapshot_store=JsonSnapshotStore(path=reservations_path))
        assert await third_start.find_by_status(status=ReservationStatus.ACTIVE) == []
