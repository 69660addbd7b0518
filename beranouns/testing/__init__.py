"""
Beranouns - Testing Utilities

Components:
    deploy_beranouns   - Deploy on a fixed-clock ledger with named signers
    assert_reverts     - Expect a registry rejection with a given reason
    assert_unchanged   - Expect no state change (atomic rejection)

Usage:
    from beranouns.testing import deploy_beranouns, assert_reverts

    deployment = deploy_beranouns()
    with assert_reverts("not_owner"):
        deployment.registry.connect(deployment.alice).pause()
"""

from beranouns.testing.assertions import (
    RevertCapture,
    assert_reverts,
    assert_unchanged,
    registry_state,
)
from beranouns.testing.fixtures import (
    GENESIS_TIMESTAMP,
    SAMPLE_LABELS,
    Deployment,
    FixedClock,
    create_test_ledger,
    deploy_beranouns,
)

__all__ = [
    # Assertions
    "assert_reverts",
    "assert_unchanged",
    "registry_state",
    "RevertCapture",
    # Fixtures
    "deploy_beranouns",
    "create_test_ledger",
    "Deployment",
    "FixedClock",
    "GENESIS_TIMESTAMP",
    "SAMPLE_LABELS",
]
