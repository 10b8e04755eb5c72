"""
Money Value Object

Exact decimal amount tagged with an ISO 4217 currency code. The amount is
always stored at the currency's minor-unit precision (ROUND_HALF_UP), and
arithmetic / ordering is only defined between amounts of the same currency.
"""

from decimal import ROUND_HALF_UP, Decimal, DivisionByZero, InvalidOperation
from typing import Self, Union

import attrs

from comic_collector.service.store.domain.store_errors import (
    CurrencyMismatchError,
    InvalidMoneyError,
)


# ISO 4217 minor units for the currencies the store prices in
CURRENCY_DECIMAL_PLACES: dict[str, int] = {
    'ARS': 2,
    'BRL': 2,
    'CLP': 0,
    'COP': 2,
    'EUR': 2,
    'GBP': 2,
    'JPY': 0,
    'KRW': 0,
    'MXN': 2,
    'PEN': 2,
    'TWD': 2,
    'USD': 2,
}
DEFAULT_DECIMAL_PLACES = 2

Number = Union[Decimal, int, float, str]


def decimal_places_for(currency: str) -> int:
    return CURRENCY_DECIMAL_PLACES.get(currency, DEFAULT_DECIMAL_PLACES)


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, bool):
        raise InvalidMoneyError(f'Invalid amount: {value!r}')
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so 0.1 becomes Decimal('0.1'), not its binary expansion
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidMoneyError(f'Invalid amount: {value!r}')


@attrs.define(frozen=True, order=False)
class Money:
    """Money (Value Object)"""

    amount: Decimal
    currency: str

    def __attrs_post_init__(self) -> None:
        currency = self.currency.strip().upper() if isinstance(self.currency, str) else ''
        if len(currency) != 3 or not currency.isalpha():
            raise InvalidMoneyError(f'Invalid currency code: {self.currency!r}')

        amount = _to_decimal(self.amount)
        if not amount.is_finite():
            raise InvalidMoneyError(f'Invalid amount: {self.amount!r}')

        exponent = Decimal(1).scaleb(-decimal_places_for(currency))
        object.__setattr__(self, 'currency', currency)
        object.__setattr__(self, 'amount', amount.quantize(exponent, rounding=ROUND_HALF_UP))

    @classmethod
    def of(cls, amount: Number, currency: str) -> Self:
        return cls(amount=_to_decimal(amount), currency=currency)

    @classmethod
    def pesos(cls, amount: Number) -> Self:
        """Chilean pesos, the catalog's default currency"""
        return cls.of(amount, 'CLP')

    @classmethod
    def zero(cls, currency: str) -> Self:
        return cls.of(0, currency)

    @property
    def decimal_places(self) -> int:
        return decimal_places_for(self.currency)

    def _ensure_same_currency(self, other: 'Money') -> None:
        if not isinstance(other, Money):
            raise InvalidMoneyError(f'Expected Money, got {type(other).__name__}')
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f'Cannot operate on different currencies: {self.currency} and {other.currency}'
            )

    def add(self, other: 'Money') -> 'Money':
        self._ensure_same_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: 'Money') -> 'Money':
        self._ensure_same_currency(other)
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def multiply(self, other: 'Money') -> 'Money':
        self._ensure_same_currency(other)
        return Money(amount=self.amount * other.amount, currency=self.currency)

    def divide(self, other: 'Money') -> 'Money':
        self._ensure_same_currency(other)
        try:
            quotient = self.amount / other.amount
        except (DivisionByZero, InvalidOperation):
            raise InvalidMoneyError('Cannot divide by a zero amount')
        return Money(amount=quotient, currency=self.currency)

    def multiply_by(self, factor: Number) -> 'Money':
        """Scale by a plain number (rates, quantities)"""
        return Money(amount=self.amount * _to_decimal(factor), currency=self.currency)

    def __add__(self, other: 'Money') -> 'Money':
        return self.add(other)

    def __sub__(self, other: 'Money') -> 'Money':
        return self.subtract(other)

    def __mul__(self, other: 'Money | Number') -> 'Money':
        if isinstance(other, Money):
            return self.multiply(other)
        return self.multiply_by(other)

    def __truediv__(self, other: 'Money') -> 'Money':
        return self.divide(other)

    def __gt__(self, other: 'Money') -> bool:
        self._ensure_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: 'Money') -> bool:
        self._ensure_same_currency(other)
        return self.amount >= other.amount

    def __lt__(self, other: 'Money') -> bool:
        self._ensure_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: 'Money') -> bool:
        self._ensure_same_currency(other)
        return self.amount <= other.amount

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def __str__(self) -> str:
        return f'{self.currency} {self.amount:,.{self.decimal_places}f}'
