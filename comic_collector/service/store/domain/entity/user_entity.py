from typing import Optional

import attrs

from comic_collector.service.store.domain.store_errors import InvalidUserError
from comic_collector.service.store.domain.value_object.email import Email


def _require_name(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidUserError(f'{field_name} cannot be empty')
    return str(value).strip()


@attrs.define(eq=False)
class UserEntity:
    first_name: str
    last_name: str
    email: Email
    id: Optional[int] = None  # Assigned by the user repository on first save

    def __attrs_post_init__(self) -> None:
        self.first_name = _require_name(self.first_name, 'First name')
        self.last_name = _require_name(self.last_name, 'Last name')
        if not isinstance(self.email, Email):
            self.email = Email(self.email)

    @classmethod
    def create(cls, *, first_name: str, last_name: str, email: str) -> 'UserEntity':
        return cls(first_name=first_name, last_name=last_name, email=Email(email))

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'

    def change_name(self, *, first_name: Optional[str] = None, last_name: Optional[str] = None) -> None:
        if first_name is not None:
            self.first_name = _require_name(first_name, 'First name')
        if last_name is not None:
            self.last_name = _require_name(last_name, 'Last name')

    def change_email(self, email: str) -> None:
        self.email = Email(email)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserEntity):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)
