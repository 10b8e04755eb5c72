"""Email Value Object"""

import re

import attrs

from comic_collector.service.store.domain.store_errors import InvalidEmailError


EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


@attrs.define(frozen=True)
class Email:
    """Normalized (trimmed, lower-cased) e-mail address"""

    value: str

    def __attrs_post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise InvalidEmailError('Email cannot be empty')
        normalized = self.value.strip().lower()
        if not EMAIL_PATTERN.match(normalized):
            raise InvalidEmailError(f'Invalid email format: {self.value}')
        object.__setattr__(self, 'value', normalized)

    def __str__(self) -> str:
        return self.value
