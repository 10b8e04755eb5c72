"""Reservation Status Enum"""

from enum import StrEnum


class ReservationStatus(StrEnum):
    ACTIVE = 'active'
    EXPIRED = 'expired'
