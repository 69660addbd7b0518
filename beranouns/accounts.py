"""
Accounts and addresses.

Addresses are ``0x`` followed by 40 hex digits. They are compared
case-insensitively and always stored lower-case.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from typing import Union

ZERO_ADDRESS = "0x" + "0" * 40

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass(frozen=True)
class Account:
    """A signer identity on the ledger."""
    address: str
    label: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", normalize_address(self.address))

    @classmethod
    def from_seed(cls, seed: str, label: str = "") -> Account:
        """Derive a deterministic account from a seed string."""
        digest = hashlib.sha256(f"beranouns:account:{seed}".encode()).hexdigest()
        return cls(address="0x" + digest[:40], label=label or seed)

    def __str__(self) -> str:
        return self.address


AddressLike = Union[str, Account]


def is_address(value: object) -> bool:
    """Check that ``value`` is a well-formed address string."""
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


def normalize_address(value: AddressLike) -> str:
    """Return the canonical lower-case form of an address.

    Raises:
        ValueError: If ``value`` is not a well-formed address.
    """
    if isinstance(value, Account):
        return value.address
    if not is_address(value):
        raise ValueError(f"Not a valid address: {value!r}")
    return value.lower()


def to_address(value: AddressLike | None) -> str | None:
    """Best-effort conversion used by request builders.

    Malformed inputs are passed through unchanged so the address
    guard can reject them with a proper reason.
    """
    if value is None:
        return None
    if isinstance(value, Account):
        return value.address
    if is_address(value):
        return value.lower()
    return value


def is_zero_address(value: str) -> bool:
    return is_address(value) and value.lower() == ZERO_ADDRESS


def derive_contract_address(deployer: str, nonce: int) -> str:
    """Deterministic contract address for ``deployer`` at ``nonce``."""
    digest = hashlib.sha256(f"{normalize_address(deployer)}:{nonce}".encode()).hexdigest()
    return "0x" + digest[-40:]
