"""
Registry Errors — Reject-with-reason error types.

Error hierarchy:
    RegistryError (base)
    ├── NotOwnerError
    ├── PausedError
    ├── NotPausedError
    ├── InvalidDurationError
    ├── InvalidLabelError
    ├── AlreadyRegisteredError
    ├── UnknownLabelError
    ├── NotRegistrationOwnerError
    ├── InvalidAddressError
    ├── InvalidPriceError
    ├── InsufficientPaymentError
    └── InsufficientFundsError

Every error carries a stable ``reason`` code. Guards report violations
with the same code, so a rejected transition maps back to exactly one
error class via ``error_for_code``.
"""

from __future__ import annotations

from typing import Any


class RegistryError(Exception):
    """Base error for all registry rejections."""

    reason: str = "rejected"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotOwnerError(RegistryError):
    """Caller is not the registry owner."""

    reason = "not_owner"


class PausedError(RegistryError):
    """Operation is blocked because the registry is paused."""

    reason = "paused"


class NotPausedError(RegistryError):
    """Unpause requested while the registry is not paused."""

    reason = "not_paused"


class InvalidDurationError(RegistryError):
    """Registration duration is not a positive integer of seconds."""

    reason = "invalid_duration"


class InvalidLabelError(RegistryError):
    """Label is empty or contains characters that cannot be registered."""

    reason = "invalid_label"


class AlreadyRegisteredError(RegistryError):
    """Label has an active, unexpired registration."""

    reason = "already_registered"

    def __init__(
        self,
        message: str,
        label: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.label = label


class UnknownLabelError(RegistryError):
    """No active registration exists for the label."""

    reason = "unknown_label"


class NotRegistrationOwnerError(RegistryError):
    """Caller does not hold the registration it tries to change."""

    reason = "not_registration_owner"


class InvalidAddressError(RegistryError):
    """Address is malformed or the zero address."""

    reason = "invalid_address"


class InvalidPriceError(RegistryError):
    """Price is negative, not an integer, or set for a non-component."""

    reason = "invalid_price"


class InsufficientPaymentError(RegistryError):
    """Attached value does not cover the quoted price."""

    reason = "insufficient_payment"


class InsufficientFundsError(RegistryError):
    """Sender balance on the ledger cannot cover a transfer."""

    reason = "insufficient_funds"

    def __init__(
        self,
        message: str,
        address: str | None = None,
        required: int = 0,
        available: int = 0,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.address = address
        self.required = required
        self.available = available


_ERRORS: dict[str, type[RegistryError]] = {
    cls.reason: cls
    for cls in (
        NotOwnerError,
        PausedError,
        NotPausedError,
        InvalidDurationError,
        InvalidLabelError,
        AlreadyRegisteredError,
        UnknownLabelError,
        NotRegistrationOwnerError,
        InvalidAddressError,
        InvalidPriceError,
        InsufficientPaymentError,
        InsufficientFundsError,
    )
}


def error_for_code(code: str) -> type[RegistryError]:
    """Map a violation code to its error class (base class if unknown)."""
    return _ERRORS.get(code, RegistryError)
