"""
In-Memory Ledger — the execution environment the registry runs on.

The ledger plays the part a dev chain plays for a contract:
    - Total ordering: one transaction per block, gap-free block numbers
    - Clock: non-decreasing block timestamps, adjustable for tests
    - Identity: deterministic, pre-funded signer accounts
    - Balances: value transfers between addresses
    - Receipts: success or revert, with the revert reason

All transactions run under a single re-entrant lock, so checks and
state changes inside one transaction can never interleave with another.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Literal

from ..accounts import Account, AddressLike, normalize_address
from .errors import InsufficientFundsError

logger = logging.getLogger(__name__)

WEI_PER_ETHER = 10**18
DEFAULT_BALANCE = 10_000 * WEI_PER_ETHER


@dataclass
class LedgerConfig:
    """Configuration for the in-memory ledger."""

    chain_id: int = 80085
    genesis_timestamp: int | None = None  # None: read from the clock
    block_time: int = 1
    default_balance: int = DEFAULT_BALANCE

    def __post_init__(self) -> None:
        for name in ("chain_id", "block_time", "default_balance"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
        if self.genesis_timestamp is not None and (
            isinstance(self.genesis_timestamp, bool) or not isinstance(self.genesis_timestamp, int)
        ):
            raise ValueError("genesis_timestamp must be an integer or None")
        if self.chain_id <= 0:
            raise ValueError("chain_id must be positive")
        if self.block_time < 0:
            raise ValueError("block_time must be >= 0")
        if self.default_balance < 0:
            raise ValueError("default_balance must be >= 0")


@dataclass(frozen=True)
class Block:
    number: int
    timestamp: int
    sender: str
    action: str


@dataclass
class Receipt:
    """Outcome of one transaction."""
    transaction_hash: str
    block_number: int
    timestamp: int
    sender: str
    action: str
    status: Literal["success", "reverted"] = "success"
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction_hash": self.transaction_hash,
            "block_number": self.block_number,
            "timestamp": self.timestamp,
            "sender": self.sender,
            "action": self.action,
            "status": self.status,
            "reason": self.reason,
        }


@dataclass
class Transaction:
    """Handle for the transaction currently being executed."""
    block: Block
    status: Literal["success", "reverted"] = "success"
    reason: str | None = None
    _hash: str = field(default="", repr=False)

    @property
    def timestamp(self) -> int:
        return self.block.timestamp

    @property
    def block_number(self) -> int:
        return self.block.number

    def revert(self, reason: str) -> None:
        self.status = "reverted"
        self.reason = reason

    def receipt(self) -> Receipt:
        return Receipt(
            transaction_hash=self._hash,
            block_number=self.block.number,
            timestamp=self.block.timestamp,
            sender=self.block.sender,
            action=self.block.action,
            status=self.status,
            reason=self.reason,
        )


class Ledger:
    """
    Single, strictly ordered ledger.

    Usage:
        ledger = Ledger()
        owner, alice = ledger.signers(2)

        with ledger.transaction(owner.address, "mint") as tx:
            ...  # check, then apply; raise to revert

        ledger.increase_time(3600)
        ledger.mine()
    """

    def __init__(
        self,
        config: LedgerConfig | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.config = config or LedgerConfig()
        self._clock = clock or time.time
        self._lock = threading.RLock()
        self._time_offset = 0
        self._block_number = 0
        genesis = self.config.genesis_timestamp
        self._timestamp = int(self._clock()) if genesis is None else genesis
        self.genesis_timestamp = self._timestamp
        self._balances: dict[str, int] = {}
        self._nonces: dict[str, int] = {}
        self._receipts: list[Receipt] = []
        self._signers: list[Account] = []

    # -------------------------------------------------------------------------
    # Chain state
    # -------------------------------------------------------------------------

    @property
    def chain_id(self) -> int:
        return self.config.chain_id

    @property
    def block_number(self) -> int:
        return self._block_number

    @property
    def timestamp(self) -> int:
        """Timestamp of the latest block."""
        return self._timestamp

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def _next_timestamp(self) -> int:
        wall = int(self._clock()) + self._time_offset
        return max(self._timestamp + self.config.block_time, wall)

    def _mine_block(self, sender: str, action: str) -> Block:
        self._block_number += 1
        self._timestamp = self._next_timestamp()
        return Block(
            number=self._block_number,
            timestamp=self._timestamp,
            sender=sender,
            action=action,
        )

    def mine(self, blocks: int = 1) -> int:
        """Mine empty blocks; returns the new block number."""
        if blocks < 1:
            raise ValueError("blocks must be >= 1")
        with self._lock:
            for _ in range(blocks):
                self._mine_block("", "mine")
            return self._block_number

    def increase_time(self, seconds: int) -> None:
        """Shift the clock for all following blocks."""
        if seconds < 0:
            raise ValueError("Time can only move forward")
        with self._lock:
            self._time_offset += seconds

    def advance_to(self, timestamp: int) -> None:
        """Make sure the next block is stamped at ``timestamp`` or later."""
        with self._lock:
            wall = int(self._clock()) + self._time_offset
            if timestamp > wall:
                self._time_offset += timestamp - wall

    @contextmanager
    def transaction(self, sender: AddressLike, action: str) -> Iterator[Transaction]:
        """Execute one transaction in its own block.

        The lock is held for the whole body. An exception raised by the
        body marks the receipt as reverted and propagates.
        """
        sender_address = normalize_address(sender)
        with self._lock:
            block = self._mine_block(sender_address, action)
            nonce = self._nonces.get(sender_address, 0)
            self._nonces[sender_address] = nonce + 1
            tx = Transaction(
                block=block,
                _hash="0x" + hashlib.sha256(
                    f"{self.chain_id}:{sender_address}:{nonce}:{action}".encode()
                ).hexdigest(),
            )
            try:
                yield tx
            except Exception as exc:
                tx.revert(getattr(exc, "reason", type(exc).__name__))
                raise
            finally:
                self._receipts.append(tx.receipt())
                if tx.status == "reverted":
                    logger.debug(
                        f"Block {block.number}: {action} from {sender_address} reverted ({tx.reason})"
                    )

    def nonce(self, address: AddressLike) -> int:
        return self._nonces.get(normalize_address(address), 0)

    def receipts(self) -> list[Receipt]:
        return list(self._receipts)

    # -------------------------------------------------------------------------
    # Accounts & balances
    # -------------------------------------------------------------------------

    def signers(self, count: int = 10) -> list[Account]:
        """Deterministic funded accounts, stable across calls."""
        with self._lock:
            while len(self._signers) < count:
                index = len(self._signers)
                account = Account.from_seed(
                    f"{self.chain_id}:{index}",
                    label=f"signer{index}",
                )
                self._balances[account.address] = (
                    self._balances.get(account.address, 0) + self.config.default_balance
                )
                self._signers.append(account)
            return self._signers[:count]

    def fund(self, address: AddressLike, amount: int) -> int:
        if amount < 0:
            raise ValueError("amount must be >= 0")
        key = normalize_address(address)
        with self._lock:
            self._balances[key] = self._balances.get(key, 0) + amount
            return self._balances[key]

    def balance_of(self, address: AddressLike) -> int:
        return self._balances.get(normalize_address(address), 0)

    def transfer(self, sender: AddressLike, recipient: AddressLike, amount: int) -> None:
        """Move ``amount`` from ``sender`` to ``recipient``.

        Raises:
            InsufficientFundsError: If ``sender`` cannot cover ``amount``.
        """
        if amount < 0:
            raise ValueError("amount must be >= 0")
        source = normalize_address(sender)
        destination = normalize_address(recipient)
        with self._lock:
            available = self._balances.get(source, 0)
            if available < amount:
                raise InsufficientFundsError(
                    f"Balance {available} of {source} cannot cover {amount}",
                    address=source,
                    required=amount,
                    available=available,
                )
            self._balances[source] = available - amount
            self._balances[destination] = self._balances.get(destination, 0) + amount

    def snapshot(self) -> dict[str, Any]:
        return {
            "chain_id": self.chain_id,
            "block_number": self._block_number,
            "timestamp": self._timestamp,
            "balances": {a: b for a, b in sorted(self._balances.items()) if b},
            "receipt_count": len(self._receipts),
        }
