"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from comic_collector.service.store.app.command import (
    cancel_reservation_use_case,
    purchase_item_use_case,
    reserve_item_use_case,
    sweep_expired_reservations_use_case,
)
from comic_collector.service.store.app.query import (
    get_item_availability_use_case,
    list_user_reservations_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    reserve_item_use_case,
    cancel_reservation_use_case,
    purchase_item_use_case,
    sweep_expired_reservations_use_case,
    get_item_availability_use_case,
    list_user_reservations_use_case,
]
