"""
Pause Gate Tests

Goal: The owner controls a global gate on registration changes.

Required Tests:
    ✓ pause / unpause toggle the flag
    ✓ Pausing twice or unpausing while active is rejected
    ✓ Non-owners cannot toggle the gate, and the flag is unchanged
    ✓ Registration actions are blocked while paused
    ✓ Administration stays available while paused
"""

import pytest

from beranouns import SECONDS_PER_YEAR, NotOwnerError, NotPausedError, PausedError
from beranouns.testing import assert_reverts, assert_unchanged


class TestPauseToggle:

    # =========================================================================
    # Owner toggles
    # =========================================================================

    def test_pause_sets_flag(self, registry):
        registry.pause()
        assert registry.paused() is True

    def test_unpause_clears_flag(self, registry):
        registry.pause()
        registry.unpause()
        assert registry.paused() is False

    def test_pause_records_block_and_caller(self, registry, owner, deployment):
        registry.pause()

        state = registry.registrar.pause_state
        assert state.changed_by == owner.address
        assert state.changed_at == deployment.ledger.timestamp

    def test_toggle_many_times(self, registry):
        for _ in range(5):
            registry.pause()
            assert registry.paused() is True
            registry.unpause()
            assert registry.paused() is False

    # =========================================================================
    # Redundant toggles
    # =========================================================================

    def test_pause_when_paused_rejected(self, registry):
        registry.pause()

        with pytest.raises(PausedError):
            registry.pause()
        assert registry.paused() is True

    def test_unpause_when_unpaused_rejected(self, registry):
        with pytest.raises(NotPausedError):
            registry.unpause()
        assert registry.paused() is False


class TestPauseAuthority:
    """Only the owner may pause or unpause."""

    def test_non_owner_pause_rejected(self, registry, alice):
        with assert_unchanged(registry.registrar):
            with assert_reverts("not_owner"):
                registry.connect(alice).pause()

        assert registry.paused() is False

    def test_non_owner_unpause_rejected(self, registry, alice):
        registry.pause()

        with assert_unchanged(registry.registrar):
            with pytest.raises(NotOwnerError):
                registry.connect(alice).unpause()

        assert registry.paused() is True

    def test_not_owner_reported_before_pause_state(self, registry, alice):
        registry.pause()

        with assert_reverts("not_owner"):
            registry.connect(alice).pause()

    def test_rejected_toggle_is_a_reverted_transaction(self, registry, alice, deployment):
        with assert_reverts("not_owner"):
            registry.connect(alice).pause()

        receipt = deployment.ledger.receipts()[-1]
        assert receipt.status == "reverted"
        assert receipt.reason == "not_owner"
        assert receipt.sender == alice.address


class TestPausedRegistry:
    """Registration changes are blocked while paused."""

    def test_mint_blocked(self, registry, owner):
        registry.pause()

        with assert_unchanged(registry.registrar):
            with assert_reverts("paused"):
                registry.mint("🐻", "🐻", SECONDS_PER_YEAR, owner, owner)

        assert registry.registration("🐻") is None
        assert registry.total_supply() == 0

    def test_renew_transfer_set_target_blocked(self, registry, owner, alice):
        registry.mint("🐻", "🐻", SECONDS_PER_YEAR, owner, owner)
        registry.pause()

        with assert_unchanged(registry.registrar):
            with assert_reverts("paused"):
                registry.renew("🐻", SECONDS_PER_YEAR)
            with assert_reverts("paused"):
                registry.transfer("🐻", alice)
            with assert_reverts("paused"):
                registry.set_target("🐻", alice)

    def test_paused_reported_before_argument_errors(self, registry, owner):
        registry.pause()

        with assert_reverts("paused"):
            registry.mint("", "", 0, "bera", owner)

    def test_mint_allowed_after_unpause(self, registry, owner):
        registry.pause()
        registry.unpause()

        registration = registry.mint("🐻", "🐻", SECONDS_PER_YEAR, owner, owner)
        assert registration.token_id == 1

    def test_administration_allowed_while_paused(self, registry, alice):
        registry.pause()

        registry.set_default_price(5)
        registry.set_fees_collector(alice)

        assert registry.component_price("a") == 5
        assert registry.fees_collector() == alice.address

    def test_reads_allowed_while_paused(self, registry, owner):
        registry.mint("🐻", "🐻", SECONDS_PER_YEAR, owner, owner)
        registry.pause()

        assert registry.resolve("🐻") == owner.address
        assert registry.balance_of(owner) == 1
        assert registry.price("🐻", SECONDS_PER_YEAR).total == 0
