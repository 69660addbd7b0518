"""
Registry Assertions - revert and atomicity checks for tests.

Example:
    with assert_reverts("not_owner"):
        registry.connect(alice).pause()

    with assert_unchanged(registry.registrar):
        with assert_reverts("paused"):
            registry.mint("🐻", "🐻", SECONDS_PER_YEAR, owner, owner)
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from beranouns.registrar.errors import RegistryError
from beranouns.registrar.registrar import NameRegistrar


class RevertCapture:
    """Holds the error caught by ``assert_reverts``."""

    def __init__(self) -> None:
        self.error: RegistryError | None = None

    @property
    def reason(self) -> str | None:
        return self.error.reason if self.error else None


@contextmanager
def assert_reverts(reason: str | None = None) -> Iterator[RevertCapture]:
    """Assert that the body raises a RegistryError with ``reason``.

    Args:
        reason: Expected reason code; None accepts any registry error.
    """
    capture = RevertCapture()
    try:
        yield capture
    except RegistryError as e:
        capture.error = e
        if reason is not None and e.reason != reason:
            raise AssertionError(
                f"Expected revert with reason {reason!r}, got {e.reason!r}: {e}"
            ) from e
        return
    raise AssertionError(f"Expected revert with reason {reason!r}, but call succeeded")


def registry_state(registrar: NameRegistrar) -> dict[str, Any]:
    """State that a rejected request must leave untouched."""
    snapshot = registrar.snapshot()
    return {
        "config": snapshot["config"],
        "pause": snapshot["pause"],
        "pricing": snapshot["pricing"],
        "registrations": snapshot["registrations"],
        "balances": snapshot["ledger"]["balances"],
    }


@contextmanager
def assert_unchanged(registrar: NameRegistrar) -> Iterator[None]:
    """Assert that registry state is identical before and after the body."""
    before = registry_state(registrar)
    yield
    after = registry_state(registrar)
    if before != after:
        changed = sorted(k for k in before if before[k] != after[k])
        raise AssertionError(f"Registry state changed: {changed}")
