"""
Unit tests for ReservationService

Test Coverage:
1. can_reserve / reserve rules (item held, quota, duplicate hold)
2. Cancel window
3. Expiry sweep (strict boundary, idempotence)
4. Reactivation
5. Concurrent reserve calls
"""

import asyncio

import pytest
import uuid_utils

from comic_collector.service.store.app.service.reservation_service import ReservationService
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.enum.reservation_status import ReservationStatus
from comic_collector.service.store.domain.store_errors import (
    InvalidReservationError,
    ItemUnavailableError,
    ReservationAlreadyActiveError,
    ReservationNotCancelableError,
    ReservationNotFoundError,
    ReservationQuotaExceededError,
)
from comic_collector.service.store.driven_adapter.repo.reservation_repo_impl import (
    ReservationRepoImpl,
)


pytestmark = pytest.mark.unit


class TestReserve:
    async def test_reserve_sets_two_day_expiry_and_persists(
        self,
        reservation_service: ReservationService,
        reservation_repo: ReservationRepoImpl,
        alice: UserEntity,
        comic: ItemEntity,
        clock,
    ) -> None:
        reservation = await reservation_service.reserve(user=alice, item=comic)

        assert reservation.is_active
        assert reservation.created_at == clock.now
        assert (reservation.expires_at - reservation.created_at).days == 2
        assert await reservation_repo.find_by_id(reservation_id=reservation.id) is reservation

    async def test_can_reserve_is_false_right_after_reserving(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity
    ) -> None:
        assert await reservation_service.can_reserve(user=alice, item=comic)

        await reservation_service.reserve(user=alice, item=comic)

        assert not await reservation_service.can_reserve(user=alice, item=comic)
        assert not await reservation_service.is_available(item=comic)

    async def test_can_reserve_with_missing_arguments(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity
    ) -> None:
        assert not await reservation_service.can_reserve(user=None, item=comic)
        assert not await reservation_service.can_reserve(user=alice, item=None)

    async def test_reserve_with_missing_arguments(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity
    ) -> None:
        with pytest.raises(InvalidReservationError):
            await reservation_service.reserve(user=None, item=comic)
        with pytest.raises(InvalidReservationError):
            await reservation_service.reserve(user=alice, item=None)

    async def test_unsaved_users_are_not_one_shared_customer(
        self, reservation_service: ReservationService, comic: ItemEntity
    ) -> None:
        """
        Given: two users built but never saved, so both still have no id
        When: they ask about holds on the same comic
        Then: neither may reserve, and neither sees any hold as their own
        """
        first = UserEntity.create(first_name='Ana', last_name='Rojas', email='ana@example.com')
        second = UserEntity.create(first_name='Luis', last_name='Paz', email='luis@example.com')

        assert not await reservation_service.can_reserve(user=first, item=comic)
        with pytest.raises(InvalidReservationError, match='registered'):
            await reservation_service.reserve(user=first, item=comic)
        assert await reservation_service.active_reservations_of(user=second) == []
        assert await reservation_service.is_available(item=comic)

    async def test_item_held_by_someone_else_is_unavailable(
        self,
        reservation_service: ReservationService,
        alice: UserEntity,
        bob: UserEntity,
        comic: ItemEntity,
    ) -> None:
        await reservation_service.reserve(user=alice, item=comic)

        assert not await reservation_service.can_reserve(user=bob, item=comic)
        with pytest.raises(ItemUnavailableError):
            await reservation_service.reserve(user=bob, item=comic)

    async def test_same_user_cannot_hold_the_same_item_twice(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity
    ) -> None:
        await reservation_service.reserve(user=alice, item=comic)

        with pytest.raises(ItemUnavailableError):
            await reservation_service.reserve(user=alice, item=comic)

    async def test_quota_then_cancel_then_retry(
        self,
        reservation_service: ReservationService,
        alice: UserEntity,
        comics: list[ItemEntity],
    ) -> None:
        """
        Given: a user already holding 3 active reservations
        When: a 4th reserve is attempted
        Then: it fails with ReservationQuotaExceededError, and succeeds after cancelling one
        """
        held = [await reservation_service.reserve(user=alice, item=item) for item in comics[:3]]

        assert not await reservation_service.can_reserve(user=alice, item=comics[3])
        with pytest.raises(ReservationQuotaExceededError):
            await reservation_service.reserve(user=alice, item=comics[3])

        await reservation_service.cancel(reservation=held[0])
        fourth = await reservation_service.reserve(user=alice, item=comics[3])

        assert fourth.is_active
        assert len(await reservation_service.active_reservations_of(user=alice)) == 3

    async def test_active_reservations_of_missing_user_is_empty(
        self, reservation_service: ReservationService
    ) -> None:
        assert await reservation_service.active_reservations_of(user=None) == []


class TestCancel:
    async def test_cancel_inside_the_window(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity, clock
    ) -> None:
        reservation = await reservation_service.reserve(user=alice, item=comic)
        clock.advance(hours=1)  # exactly at the edge is still allowed

        await reservation_service.cancel(reservation=reservation)

        assert reservation.status == ReservationStatus.EXPIRED
        assert await reservation_service.is_available(item=comic)

    async def test_cancel_one_second_after_the_window_fails(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity, clock
    ) -> None:
        reservation = await reservation_service.reserve(user=alice, item=comic)
        clock.advance(hours=1, seconds=1)

        with pytest.raises(ReservationNotCancelableError):
            await reservation_service.cancel(reservation=reservation)
        assert reservation.is_active

    async def test_cancel_inactive_reservation_fails(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity
    ) -> None:
        reservation = await reservation_service.reserve(user=alice, item=comic)
        await reservation_service.cancel(reservation=reservation)

        with pytest.raises(ReservationNotCancelableError):
            await reservation_service.cancel(reservation=reservation)

    async def test_cancel_missing_reservation(self, reservation_service: ReservationService) -> None:
        with pytest.raises(InvalidReservationError):
            await reservation_service.cancel(reservation=None)


class TestSweepExpired:
    async def test_sweep_boundary(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity, clock
    ) -> None:
        """
        Given: a hold created at T with a 2-day duration
        When: sweeping at T+1 day, then at T+2 days+1 second
        Then: only the second sweep expires it
        """
        reservation = await reservation_service.reserve(user=alice, item=comic)

        clock.advance(days=1)
        assert await reservation_service.sweep_expired() == []
        assert reservation.is_active

        clock.advance(days=1, seconds=1)
        assert await reservation_service.sweep_expired() == [reservation]
        assert reservation.status == ReservationStatus.EXPIRED

    async def test_sweep_twice_returns_the_same_set(
        self,
        reservation_service: ReservationService,
        alice: UserEntity,
        comics: list[ItemEntity],
        clock,
    ) -> None:
        for item in comics[:2]:
            await reservation_service.reserve(user=alice, item=item)
        clock.advance(days=3)

        first = await reservation_service.sweep_expired()
        second = await reservation_service.sweep_expired()

        assert len(first) == 2
        assert first == second
        assert all(not reservation.is_active for reservation in second)

    async def test_exact_expiry_moment_is_not_swept(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity, clock
    ) -> None:
        reservation = await reservation_service.reserve(user=alice, item=comic)
        clock.advance(days=2)

        assert await reservation_service.sweep_expired() == []
        assert reservation.is_active


class TestReactivate:
    async def test_reactivate_expired_hold_renews_it(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity, clock
    ) -> None:
        reservation = await reservation_service.reserve(user=alice, item=comic)
        clock.advance(days=3)
        await reservation_service.sweep_expired()

        renewed = await reservation_service.reactivate(reservation=reservation)

        assert renewed.is_active
        assert renewed.created_at == clock.now
        assert renewed.expires_at == clock.now + reservation_service.hold_duration

    async def test_reactivate_active_hold_fails(
        self, reservation_service: ReservationService, alice: UserEntity, comic: ItemEntity
    ) -> None:
        reservation = await reservation_service.reserve(user=alice, item=comic)

        with pytest.raises(ReservationAlreadyActiveError):
            await reservation_service.reactivate(reservation=reservation)

    async def test_reactivate_respects_holds_by_others(
        self,
        reservation_service: ReservationService,
        alice: UserEntity,
        bob: UserEntity,
        comic: ItemEntity,
    ) -> None:
        reservation = await reservation_service.reserve(user=alice, item=comic)
        await reservation_service.cancel(reservation=reservation)
        await reservation_service.reserve(user=bob, item=comic)

        with pytest.raises(ItemUnavailableError):
            await reservation_service.reactivate(reservation=reservation)
        assert not reservation.is_active


class TestFindById:
    async def test_unknown_id(self, reservation_service: ReservationService) -> None:
        with pytest.raises(ReservationNotFoundError):
            await reservation_service.find_by_id(reservation_id=uuid_utils.uuid7())


class TestConcurrentReserve:
    async def test_only_one_of_many_concurrent_holds_on_an_item_wins(
        self,
        reservation_service: ReservationService,
        reservation_repo: ReservationRepoImpl,
        user_repo,
        comic: ItemEntity,
    ) -> None:
        users = [
            await user_repo.save(
                user=UserEntity.create(first_name=f'U{n}', last_name='Test', email=f'u{n}@example.com')
            )
            for n in range(10)
        ]

        results = await asyncio.gather(
            *(reservation_service.reserve(user=user, item=comic) for user in users),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == len(users) - 1
        assert all(isinstance(r, ItemUnavailableError) for r in failures)
        assert len(await reservation_repo.find_active_by_item(item=comic)) == 1

    async def test_one_user_racing_for_four_items_gets_at_most_three(
        self,
        reservation_service: ReservationService,
        alice: UserEntity,
        comics: list[ItemEntity],
    ) -> None:
        results = await asyncio.gather(
            *(reservation_service.reserve(user=alice, item=item) for item in comics[:4]),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], ReservationQuotaExceededError)
        assert len(await reservation_service.active_reservations_of(user=alice)) == 3
