from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

import attrs
import uuid_utils
from uuid_utils import UUID

from comic_collector.platform.config.core_setting import settings
from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.store_errors import InvalidSaleError
from comic_collector.service.store.domain.value_object.money import Money


@attrs.define(eq=False, frozen=True)
class Sale:
    """
    Completed purchase of one item by one user

    The final price is not stored: it is derived from the item's current price
    every time it is read.
    """

    TAX_RATE: ClassVar[Decimal] = settings.SALE_TAX_RATE

    id: UUID
    user: UserEntity
    item: ItemEntity
    occurred_at: datetime

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        user: Optional[UserEntity],
        item: Optional[ItemEntity],
        now: datetime,
    ) -> 'Sale':
        if user is None:
            raise InvalidSaleError('Sale user cannot be empty')
        if item is None:
            raise InvalidSaleError('Sale item cannot be empty')
        return cls(id=uuid_utils.uuid7(), user=user, item=item, occurred_at=now)

    @property
    def item_id(self) -> UUID:
        return self.item.id

    @property
    def user_id(self) -> Optional[int]:
        return self.user.id

    @property
    def tax(self) -> Money:
        # Rounded half-up to the item currency's minor unit on construction
        return self.item.price.multiply_by(self.TAX_RATE)

    @property
    def final_price(self) -> Money:
        return self.item.price + self.tax

    @property
    def sort_key(self) -> tuple[datetime, str]:
        return (self.occurred_at, str(self.id))

    def __lt__(self, other: 'Sale') -> bool:
        return self.sort_key < other.sort_key

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Sale) and other.id == self.id

    def __hash__(self) -> int:
        return hash(self.id)
