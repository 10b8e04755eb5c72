"""
Sweep Result DTO

Outcome of one expiry sweep followed by sale reconciliation.
"""

import attrs

from comic_collector.service.store.domain.entity.reservation_entity import Reservation
from comic_collector.service.store.domain.entity.sale_entity import Sale


@attrs.define
class SweepResult:
    expired: list[Reservation]  # Every reservation past due, already EXPIRED ones included
    reconciled: list[Sale]  # Sales whose leftover hold or catalog row was repaired

    @property
    def total_expired(self) -> int:
        return len(self.expired)

    @property
    def total_reconciled(self) -> int:
        return len(self.reconciled)
