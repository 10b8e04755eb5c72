"""Inventory snapshot DTO."""

import attrs


@attrs.define(frozen=True)
class InventoryStats:
    total_items: int
    available_items: int
    reserved_items: int
    total_sales: int
    active_reservations: int
    inactive_items: int  # Never reserved and never sold
