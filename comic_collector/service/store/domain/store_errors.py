"""
Store domain errors

Concrete error types for the catalog / reservation / sale rules. Each one
extends a platform base class that fixes its kind:

- DomainError (400): the caller passed something invalid
- NotFoundError (404): the referenced entity does not exist
- ConflictError (409): a business rule refused the operation
- ProcessingError (500): persistence failed mid-operation
"""

from comic_collector.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    ProcessingError,
)


# Validation
class InvalidMoneyError(DomainError):
    pass


class CurrencyMismatchError(DomainError):
    pass


class InvalidEmailError(DomainError):
    pass


class InvalidItemError(DomainError):
    pass


class InvalidUserError(DomainError):
    pass


class InvalidReservationError(DomainError):
    pass


class InvalidExpiryError(DomainError):
    pass


class InvalidSaleError(DomainError):
    pass


# Not found
class ItemNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class ReservationNotFoundError(NotFoundError):
    pass


# State conflict
class ReservationAlreadyActiveError(ConflictError):
    pass


class ReservationAlreadyExpiredError(ConflictError):
    pass


class ItemUnavailableError(ConflictError):
    pass


class ReservationQuotaExceededError(ConflictError):
    pass


class ReservationNotCancelableError(ConflictError):
    pass


class EmailAlreadyExistsError(ConflictError):
    pass


class ItemNameAlreadyExistsError(ConflictError):
    pass


class ItemNotRemovableError(ConflictError):
    pass


class UserNotRemovableError(ConflictError):
    pass


# Processing failure
class SaleNotProcessableError(ProcessingError):
    pass
