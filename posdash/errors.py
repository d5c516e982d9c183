"""Domain errors raised by the checkout core."""

from __future__ import annotations


class PosError(Exception):
    """Base class for point-of-sale domain errors."""


class EmptyCartError(PosError):
    """Raised when settling a cart with no lines."""


class InvalidCredentialsError(PosError):
    """Raised when a staff login does not match any account."""


class DuplicatePhoneError(PosError):
    """Raised when registering a phone number that already has a customer."""


class CustomerNotFoundError(PosError):
    """Raised when editing a customer id that does not exist."""
