"""Application layer DTOs"""

from comic_collector.service.store.app.dto.inventory_stats import InventoryStats
from comic_collector.service.store.app.dto.item_availability import ItemAvailability
from comic_collector.service.store.app.dto.sweep_result import SweepResult

__all__ = [
    'InventoryStats',
    'ItemAvailability',
    'SweepResult',
]
