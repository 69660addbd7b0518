"""
Tests for the error hierarchy and the invariant catalogue.
"""

import pytest

from beranouns import (
    AlreadyRegisteredError,
    InsufficientFundsError,
    NotOwnerError,
    PausedError,
    RegistryError,
)
from beranouns.accounts import ZERO_ADDRESS, derive_contract_address, is_zero_address, to_address
from beranouns.registrar import REGISTRY_INVARIANTS, RegistryAction, RegistryInvariant
from beranouns.registrar.errors import error_for_code
from beranouns.registrar.invariants import get_invariant, list_registry_invariants


class TestErrors:

    @pytest.mark.parametrize(
        "code,cls",
        [
            ("not_owner", NotOwnerError),
            ("paused", PausedError),
            ("already_registered", AlreadyRegisteredError),
            ("insufficient_funds", InsufficientFundsError),
            ("something_else", RegistryError),
        ],
    )
    def test_error_for_code(self, code, cls):
        assert error_for_code(code) is cls

    def test_every_guard_code_maps_to_a_subclass(self):
        for invariant in REGISTRY_INVARIANTS:
            cls = error_for_code(invariant.code)
            assert cls is not RegistryError
            assert cls.reason == invariant.code

    def test_errors_carry_details(self):
        error = PausedError("Registry is paused", details={"action": "mint"})

        assert isinstance(error, RegistryError)
        assert error.reason == "paused"
        assert error.message == "Registry is paused"
        assert error.details == {"action": "mint"}
        assert str(error) == "Registry is paused"

    def test_insufficient_funds_fields(self):
        error = InsufficientFundsError("short", address="0xabc", required=5, available=1)

        assert (error.address, error.required, error.available) == ("0xabc", 5, 1)


class TestInvariantCatalogue:

    def test_ids_unique_and_namespaced(self):
        ids = [inv.id for inv in REGISTRY_INVARIANTS]

        assert len(ids) == len(set(ids))
        assert all(i.startswith("registry.") for i in ids)

    def test_invariants_follow_protocol(self):
        assert all(isinstance(inv, RegistryInvariant) for inv in REGISTRY_INVARIANTS)

    def test_every_action_is_guarded(self):
        covered = set().union(*(inv.actions for inv in REGISTRY_INVARIANTS))

        assert covered == set(RegistryAction)

    def test_violation_record(self, registry, alice):
        result = registry.registrar.request("pause", alice)

        assert result.violations[0].to_dict() == {
            "invariant_id": "registry.access.owner_only",
            "code": "not_owner",
            "message": result.violations[0].message,
        }

    def test_get_invariant(self):
        assert get_invariant("registry.access.owner_only").code == "not_owner"
        assert get_invariant("registry.nope") is None

    def test_listing(self, registry):
        listed = registry.registrar.list_invariants()

        assert listed == list_registry_invariants()
        owner_only = listed[0]
        assert owner_only["id"] == "registry.access.owner_only"
        assert "pause" in owner_only["actions"]
        assert owner_only["actions"] == sorted(owner_only["actions"])


class TestAddresses:

    def test_to_address_passes_malformed_through(self):
        assert to_address("bera") == "bera"
        assert to_address(None) is None
        assert to_address("0x" + "AB" * 20) == "0x" + "ab" * 20

    def test_zero_address(self):
        assert is_zero_address(ZERO_ADDRESS)
        assert not is_zero_address("0x" + "01" * 20)
        assert not is_zero_address("0x0")

    def test_contract_address_depends_on_nonce(self):
        deployer = "0x" + "ab" * 20

        assert derive_contract_address(deployer, 0) != derive_contract_address(deployer, 1)
        assert derive_contract_address(deployer, 0) == derive_contract_address(deployer.upper().replace("0X", "0x"), 0)
