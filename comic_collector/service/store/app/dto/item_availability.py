"""Item availability DTO."""

from typing import Optional

import attrs
from uuid_utils import UUID


@attrs.define(frozen=True)
class ItemAvailability:
    """
    What a caller may do with an item right now

    purchasable is answered for user_id; without a user only a free item
    counts as purchasable.
    """

    item_id: UUID
    reservable: bool
    purchasable: bool
    user_id: Optional[int] = None
