"""
Shared fixtures for the Beranouns test suite.

Every test gets a fresh deployment on a fixed-clock ledger:
    owner  - deployer, registry owner and default fee collector
    alice  - funded signer, no privileges
    bob    - funded signer, no privileges
"""

from __future__ import annotations

import io
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable

import pytest

from beranouns import Account, Beranouns, ComponentPricing
from beranouns.monitoring import configure_logging
from beranouns.registrar import TransitionResult
from beranouns.testing import Deployment, deploy_beranouns

ETHER = 10**18


# =============================================================================
# Concurrency Helpers
# =============================================================================

def parallel(
    operations: list[Callable[[], Any]],
    max_workers: int = 8,
) -> list[Any]:
    """
    Execute operations in parallel and collect results.

    Returns results in the same order as operations. Exceptions are
    returned in place of results.
    """
    results: list[Any] = [None] * len(operations)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(op): i
            for i, op in enumerate(operations)
        }

        for future in as_completed(futures):
            idx = futures[future]
            try:
                results[idx] = future.result()
            except Exception as e:
                results[idx] = e

    return results


def exactly_one(results: list[TransitionResult]) -> bool:
    """Check that exactly one result was allowed."""
    allowed_count = sum(1 for r in results if isinstance(r, TransitionResult) and r.allowed)
    return allowed_count == 1


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def log_output() -> io.StringIO:
    """Route registry logs to a buffer instead of stderr."""
    output = io.StringIO()
    configure_logging(output=output)
    return output


@pytest.fixture
def deployment() -> Deployment:
    """Registry deployed by the first signer with free registrations."""
    return deploy_beranouns("Beranouns", "BRNS")


@pytest.fixture
def priced_deployment() -> Deployment:
    """Registry where every component costs one ether per year."""
    return deploy_beranouns(pricing=ComponentPricing(default_price=ETHER))


@pytest.fixture
def registry(deployment: Deployment) -> Beranouns:
    """Registry handle bound to the owner."""
    return deployment.registry


@pytest.fixture
def owner(deployment: Deployment) -> Account:
    return deployment.owner


@pytest.fixture
def alice(deployment: Deployment) -> Account:
    return deployment.alice


@pytest.fixture
def bob(deployment: Deployment) -> Account:
    return deployment.bob
