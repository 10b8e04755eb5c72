from typing import Optional

import attrs
import uuid_utils
from uuid_utils import UUID

from comic_collector.platform.logging.loguru_io import Logger
from comic_collector.service.store.domain.store_errors import InvalidItemError
from comic_collector.service.store.domain.value_object.money import Money


def _require_text(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidItemError(f'Item {field_name} cannot be empty')
    return str(value).strip()


def _require_price(price: Optional[Money]) -> Money:
    if price is None:
        raise InvalidItemError('Item price cannot be empty')
    if not isinstance(price, Money):
        raise InvalidItemError(f'Item price must be Money, got {type(price).__name__}')
    return price


@attrs.define(eq=False)
class ItemEntity:
    """
    A single purchasable unit in the catalog (one comic copy)

    Referenced, never owned, by reservations and sales.
    """

    id: UUID
    name: str
    description: str
    price: Money

    def __attrs_post_init__(self) -> None:
        self.name = _require_text(self.name, 'name')
        self.description = _require_text(self.description, 'description')
        self.price = _require_price(self.price)

    @classmethod
    @Logger.io
    def create(cls, *, name: str, description: str, price: Money) -> 'ItemEntity':
        return cls(id=uuid_utils.uuid7(), name=name, description=description, price=price)

    def rename(self, name: str) -> None:
        self.name = _require_text(name, 'name')

    def describe(self, description: str) -> None:
        self.description = _require_text(description, 'description')

    def reprice(self, price: Money) -> None:
        self.price = _require_price(price)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ItemEntity) and other.id == self.id

    def __hash__(self) -> int:
        return hash(self.id)
