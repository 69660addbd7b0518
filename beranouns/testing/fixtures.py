"""
Test Fixtures - Common setups for registry tests.

Provides:
    - Sample labels
    - A fixed clock so block timestamps are deterministic
    - One-call deployment with named signers
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from beranouns.accounts import Account
from beranouns.contract import Beranouns
from beranouns.registrar.ledger import Ledger, LedgerConfig

GENESIS_TIMESTAMP = 1_700_000_000

# Sample labels for testing
SAMPLE_LABELS = {
    "bear": "\U0001F43B",
    "polar_bear": "\U0001F43B\u200d\u2744\ufe0f",
    "waving": "\U0001F44B\U0001F3FD",
    "flag": "\U0001F1E9\U0001F1EA",
    "keycap": "1\ufe0f\u20e3",
    "family": "\U0001F468\u200d\U0001F469\u200d\U0001F467",
    "mixed": "\U0001F43Bhoney\U0001F36F",
    "ascii": "bera",
}


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = GENESIS_TIMESTAMP) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class Deployment:
    """A deployed registry with its ledger and named signers."""
    registry: Beranouns
    ledger: Ledger
    owner: Account
    others: list[Account]
    clock: FixedClock

    @property
    def alice(self) -> Account:
        return self.others[0]

    @property
    def bob(self) -> Account:
        return self.others[1]


def create_test_ledger(clock: FixedClock | None = None, **config: Any) -> Ledger:
    """Ledger with a fixed clock and genesis at ``GENESIS_TIMESTAMP``."""
    clock = clock or FixedClock()
    return Ledger(
        config=LedgerConfig(genesis_timestamp=int(clock()), **config),
        clock=clock,
    )


def deploy_beranouns(
    name: str = "Beranouns",
    symbol: str = "BRNS",
    signers: int = 4,
    fees_collector: Account | str | None = None,
    **kwargs: Any,
) -> Deployment:
    """
    Deploy a registry the way the canonical scenario does.

    The first signer deploys and becomes owner; the fee collector
    defaults to the owner.

    Args:
        name: Registry name
        symbol: Registry symbol
        signers: Number of funded signers (at least 3)
        fees_collector: Fee collector, defaults to the owner
        **kwargs: Passed to ``Beranouns.deploy`` (pricing, logger, ...)
    """
    if signers < 3:
        raise ValueError("signers must be >= 3")
    clock = FixedClock()
    ledger = create_test_ledger(clock)
    owner, *others = ledger.signers(signers)
    registry = Beranouns.deploy(
        name,
        symbol,
        fees_collector if fees_collector is not None else owner,
        deployer=owner,
        ledger=ledger,
        **kwargs,
    )
    return Deployment(
        registry=registry,
        ledger=ledger,
        owner=owner,
        others=others,
        clock=clock,
    )
