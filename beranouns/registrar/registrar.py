"""
Name Registrar — single authority for registry state.

Architecture:
    1. A call becomes a TransitionRequest (action, actor, target, args)
    2. The ledger opens a transaction: new block, lock held
    3. Guard invariants are checked against a RegistryView
    4. Accepted: the change is applied. Rejected: nothing changes
    5. An Attestation records the decision either way

Checks and changes for one request run inside the same ledger
transaction, so every request sees the state left by the previous one
and a rejected request never leaves partial changes behind.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable

from ..accounts import AddressLike, derive_contract_address, is_address, is_zero_address, normalize_address, to_address
from ..monitoring.logging import StructuredLogger, get_logger
from .components import normalize_label, split_components
from .errors import InvalidAddressError
from .invariants import REGISTRY_INVARIANTS, RegistryInvariant, RegistryView, list_registry_invariants
from .ledger import Ledger, Transaction
from .pricing import ComponentPricing, FlatPricing, PriceQuote, PricingStrategy, quote
from .states import PauseState, RegistryConfig, Registration
from .transitions import (
    DecisionKind,
    InvariantViolation,
    RegistryAction,
    TransitionRequest,
    TransitionResult,
)

SNAPSHOT_VERSION = 1


@dataclass
class Attestation:
    """
    Record of a registrar decision.

    Every request produces an attestation, whether allowed or denied.
    Attestations are immutable once created.
    """
    id: str
    timestamp: datetime
    actor: str
    action: str
    target: str | None
    decision: str  # "allowed" or "denied"
    reason: str
    invariants_checked: list[str]
    block_number: int | None = None
    block_timestamp: int | None = None
    value: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "actor": self.actor,
            "action": self.action,
            "target": self.target,
            "decision": self.decision,
            "reason": self.reason,
            "invariants_checked": self.invariants_checked,
            "block_number": self.block_number,
            "block_timestamp": self.block_timestamp,
            "value": self.value,
            "metadata": self.metadata,
        }


class AttestationStore:
    """
    Storage for attestations.

    Attestations are:
    - Immutable once stored
    - Queryable by various criteria
    - Replayable to reconstruct state
    """

    def __init__(self) -> None:
        self._attestations: list[Attestation] = []

    def record(self, attestation: Attestation) -> None:
        self._attestations.append(attestation)

    def query(
        self,
        actor: str | None = None,
        action: str | None = None,
        target: str | None = None,
        since: datetime | None = None,
        decision: str | None = None,
    ) -> list[Attestation]:
        """Query attestations by criteria."""
        results = self._attestations

        if actor:
            results = [a for a in results if a.actor == actor]
        if action:
            results = [a for a in results if a.action == action]
        if target:
            results = [a for a in results if a.target == target]
        if since:
            results = [a for a in results if a.timestamp >= since]
        if decision:
            results = [a for a in results if a.decision == decision]

        return results

    def all(self) -> list[Attestation]:
        return list(self._attestations)

    def count(self) -> int:
        return len(self._attestations)


class NameRegistrar:
    """
    The Name Registrar — owns config, pause state, pricing and registrations.

    Usage:
        ledger = Ledger()
        owner, alice = ledger.signers(2)
        registrar = NameRegistrar.deploy("Beranouns", "BRNS", owner, deployer=owner, ledger=ledger)

        result = registrar.request(
            action="mint",
            actor=alice.address,
            target="🐻",
            value=10**18,
            metadata={"metadata": "🐻", "duration": 31536000,
                      "owner": alice.address, "target_address": alice.address},
        )
        if result.denied:
            print(result.reason)
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        fees_collector: AddressLike,
        *,
        owner: AddressLike,
        ledger: Ledger | None = None,
        pricing: PricingStrategy | None = None,
        invariants: list[RegistryInvariant] | None = None,
        logger: StructuredLogger | None = None,
        address: str | None = None,
    ) -> None:
        if not isinstance(name, str) or not isinstance(symbol, str):
            raise ValueError("name and symbol must be strings")
        collector = to_address(fees_collector)
        if not is_address(collector) or is_zero_address(collector):
            raise InvalidAddressError(
                f"Invalid fees collector: {fees_collector!r}",
                details={"fees_collector": str(fees_collector)},
            )
        owner_address = to_address(owner)
        if not is_address(owner_address) or is_zero_address(owner_address):
            raise InvalidAddressError(f"Invalid owner: {owner!r}")

        self._ledger = ledger or Ledger()
        self._config = RegistryConfig(
            name=name,
            symbol=symbol,
            fees_collector=collector,
            owner=owner_address,
        )
        self._initial_config = self._config
        self._pause = PauseState()
        self._pricing: PricingStrategy = pricing if pricing is not None else ComponentPricing()
        self._initial_pricing = deepcopy(self._pricing)
        self._invariants = list(invariants) if invariants is not None else list(REGISTRY_INVARIANTS)
        self._registrations: dict[str, Registration] = {}
        self._tokens: dict[int, str] = {}
        self._next_token_id = 1
        self._attestation_store = AttestationStore()
        self.address = address or derive_contract_address(
            owner_address, self._ledger.nonce(owner_address)
        )
        self._logger = (logger or get_logger()).bind(registry=self.address)

    @classmethod
    def deploy(
        cls,
        name: str,
        symbol: str,
        fees_collector: AddressLike,
        *,
        deployer: AddressLike,
        ledger: Ledger | None = None,
        **kwargs: Any,
    ) -> NameRegistrar:
        """Deploy in its own ledger transaction; the deployer becomes owner.

        Raises:
            InvalidAddressError: If ``fees_collector`` is malformed or zero.
        """
        ledger = ledger or Ledger()
        deployer_address = normalize_address(deployer)
        address = derive_contract_address(deployer_address, ledger.nonce(deployer_address))
        with ledger.transaction(deployer_address, "deploy"):
            registrar = cls(
                name,
                symbol,
                fees_collector,
                owner=deployer_address,
                ledger=ledger,
                address=address,
                **kwargs,
            )
        registrar._logger.info(
            "registry_deployed",
            f"Deployed {name} ({symbol})",
            owner=deployer_address,
            fees_collector=registrar._config.fees_collector,
        )
        return registrar

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def config(self) -> RegistryConfig:
        return self._config

    @property
    def pause_state(self) -> PauseState:
        return self._pause

    @property
    def paused(self) -> bool:
        return self._pause.paused

    @property
    def pricing(self) -> PricingStrategy:
        return self._pricing

    @property
    def attestation_store(self) -> AttestationStore:
        return self._attestation_store

    def registration(self, label: str, include_expired: bool = False) -> Registration | None:
        """Registration for ``label``; expired ones only when asked for."""
        current = self._registrations.get(normalize_label(label))
        if current is None:
            return None
        if include_expired or current.is_active(self._ledger.timestamp):
            return current
        return None

    def resolve(self, label: str) -> str | None:
        current = self.registration(label)
        return current.target if current else None

    def owner_of(self, token_id: int) -> str | None:
        label = self._tokens.get(token_id)
        if label is None:
            return None
        current = self.registration(label)
        return current.owner if current and current.token_id == token_id else None

    def balance_of(self, address: AddressLike) -> int:
        """Number of active registrations held by ``address``."""
        holder = normalize_address(address)
        now = self._ledger.timestamp
        return sum(
            1 for r in self._registrations.values()
            if r.owner == holder and r.is_active(now)
        )

    def total_supply(self) -> int:
        now = self._ledger.timestamp
        return sum(1 for r in self._registrations.values() if r.is_active(now))

    def list_registrations(self, include_expired: bool = False) -> list[Registration]:
        now = self._ledger.timestamp
        return sorted(
            (r for r in self._registrations.values() if include_expired or r.is_active(now)),
            key=lambda r: r.token_id,
        )

    def quote(self, label: str, duration: int) -> PriceQuote:
        return quote(self._pricing, normalize_label(label), duration)

    def list_invariants(self) -> list[dict[str, Any]]:
        return list_registry_invariants(self._invariants)

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    def request(
        self,
        action: str | RegistryAction,
        actor: AddressLike,
        target: str | None = None,
        value: int = 0,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Request a state transition.

        This is the entry point for every state change. It never raises
        for a rejected request; callers inspect the result or call
        ``result.raise_for_rejection()``.

        Args:
            action: The transition action (e.g. "pause", "mint")
            actor: The calling address
            target: Label the action applies to (None for admin actions)
            value: Payment attached to the call
            metadata: Call arguments (duration, owner, price, ...)

        Returns:
            TransitionResult with the decision and violations
        """
        if isinstance(action, str):
            action = RegistryAction(action)
        if isinstance(target, str):
            target = normalize_label(target)

        request = TransitionRequest(
            action=action,
            actor=normalize_address(actor),
            target=target,
            value=value,
            metadata=dict(metadata or {}),
        )

        with self._ledger.transaction(request.actor, action.value) as tx:
            view = self._view(tx.timestamp)
            checked, violations = self._check_invariants(request, view)

            if violations:
                tx.revert(violations[0].code)
                result = TransitionResult(
                    kind=DecisionKind.REJECTED,
                    request=request,
                    violations=violations,
                )
            else:
                state_id, output = self._apply(request, tx)
                result = TransitionResult(
                    kind=DecisionKind.ACCEPTED,
                    request=request,
                    state_id=state_id,
                    order_index=tx.block_number,
                    applied_invariants=checked,
                    output=output,
                )

            self._attestation_store.record(Attestation(
                id=result.attestation_id,
                timestamp=result.timestamp,
                actor=request.actor,
                action=action.value,
                target=target,
                decision="allowed" if result.allowed else "denied",
                reason=result.reason,
                invariants_checked=checked,
                block_number=tx.block_number,
                block_timestamp=tx.timestamp,
                value=value,
                metadata=request.metadata,
            ))

        if result.allowed:
            self._logger.transition_accepted(action.value, request.actor, tx.block_number, target=target)
        else:
            self._logger.transition_rejected(
                action.value, request.actor, result.reason_code or "rejected", target=target
            )
        return result

    def _view(self, now: int) -> RegistryView:
        return RegistryView(
            config=self._config,
            pause=self._pause,
            registrations=self._registrations,
            pricing=self._pricing,
            now=now,
            balance_of=self._ledger.balance_of,
        )

    def _check_invariants(
        self,
        request: TransitionRequest,
        view: RegistryView,
    ) -> tuple[list[str], list[InvariantViolation]]:
        checked: list[str] = []
        violations: list[InvariantViolation] = []

        for invariant in self._invariants:
            if request.action not in invariant.actions:
                continue
            checked.append(invariant.id)
            violations.extend(invariant.check(request, view))

        return checked, violations

    def _apply(self, request: TransitionRequest, tx: Transaction) -> tuple[str, Any]:
        handlers: dict[RegistryAction, Callable[[TransitionRequest, Transaction], tuple[str, Any]]] = {
            RegistryAction.PAUSE: self._apply_pause,
            RegistryAction.UNPAUSE: self._apply_pause,
            RegistryAction.SET_COMPONENT_PRICE: self._apply_pricing,
            RegistryAction.REMOVE_COMPONENT_PRICE: self._apply_pricing,
            RegistryAction.SET_DEFAULT_PRICE: self._apply_pricing,
            RegistryAction.SET_FEES_COLLECTOR: self._apply_config,
            RegistryAction.TRANSFER_OWNERSHIP: self._apply_config,
            RegistryAction.MINT: self._apply_mint,
            RegistryAction.RENEW: self._apply_renew,
            RegistryAction.TRANSFER: self._apply_update,
            RegistryAction.SET_TARGET: self._apply_update,
        }
        return handlers[request.action](request, tx)

    def _apply_pause(self, request: TransitionRequest, tx: Transaction) -> tuple[str, Any]:
        paused = request.action == RegistryAction.PAUSE
        self._pause = PauseState(paused=paused, changed_at=tx.timestamp, changed_by=request.actor)
        self._logger.pause_changed(paused, request.actor, block_number=tx.block_number)
        return "pause", paused

    def _apply_pricing(self, request: TransitionRequest, tx: Transaction) -> tuple[str, Any]:
        args = request.metadata
        pricing = self._pricing
        if request.action == RegistryAction.SET_COMPONENT_PRICE:
            pricing.set_price(args["component"], args["price"])
            return "pricing", args["price"]
        if request.action == RegistryAction.REMOVE_COMPONENT_PRICE:
            return "pricing", pricing.remove_price(args["component"])
        if isinstance(pricing, FlatPricing):
            pricing.price = args["price"]
        else:
            pricing.default_price = args["price"]
        return "pricing", args["price"]

    def _apply_config(self, request: TransitionRequest, tx: Transaction) -> tuple[str, Any]:
        args = request.metadata
        if request.action == RegistryAction.SET_FEES_COLLECTOR:
            self._config = self._config.with_changes(fees_collector=args["fees_collector"].lower())
            return "config", self._config.fees_collector
        self._config = self._config.with_changes(owner=args["new_owner"].lower())
        self._logger.info(
            "ownership_transferred",
            previous_owner=request.actor,
            new_owner=self._config.owner,
        )
        return "config", self._config.owner

    def _charge(self, request: TransitionRequest, price: PriceQuote) -> int:
        """Move the quoted price to the fee collector; owner calls are free."""
        if request.actor == self._config.owner or price.total == 0:
            return 0
        self._ledger.transfer(request.actor, self._config.fees_collector, price.total)
        return price.total

    def _apply_mint(self, request: TransitionRequest, tx: Transaction) -> tuple[str, Any]:
        args = request.metadata
        label = request.target
        assert label is not None
        price = quote(self._pricing, label, args["duration"])
        charged = self._charge(request, price)

        expired = self._registrations.get(label)
        if expired is not None:
            self._tokens.pop(expired.token_id, None)

        registration = Registration(
            token_id=self._next_token_id,
            label=label,
            metadata=args.get("metadata", ""),
            components=split_components(label),
            owner=args["owner"].lower(),
            target=args["target_address"].lower(),
            registered_at=tx.timestamp,
            expires_at=tx.timestamp + args["duration"],
        )
        self._next_token_id += 1
        self._registrations[label] = registration
        self._tokens[registration.token_id] = label

        self._logger.registration_minted(
            label,
            registration.token_id,
            registration.owner,
            registration.expires_at,
            price=charged,
        )
        return label, registration

    def _apply_renew(self, request: TransitionRequest, tx: Transaction) -> tuple[str, Any]:
        label = request.target
        assert label is not None
        duration = request.metadata["duration"]
        self._charge(request, quote(self._pricing, label, duration))
        current = self._registrations[label]
        renewed = replace(current, expires_at=current.expires_at + duration)
        self._registrations[label] = renewed
        return label, renewed

    def _apply_update(self, request: TransitionRequest, tx: Transaction) -> tuple[str, Any]:
        label = request.target
        assert label is not None
        current = self._registrations[label]
        if request.action == RegistryAction.TRANSFER:
            updated = replace(current, owner=request.metadata["to"].lower())
        else:
            updated = replace(current, target=request.metadata["target_address"].lower())
        self._registrations[label] = updated
        return label, updated

    # -------------------------------------------------------------------------
    # Snapshot & replay
    # -------------------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        """
        Serialisable snapshot of the registry.

        Used to:
        - Save state to disk
        - Compare a replayed registrar with the original
        - Debug state issues
        """
        return {
            "version": SNAPSHOT_VERSION,
            "address": self.address,
            "config": self._config.to_dict(),
            "pause": self._pause.to_dict(),
            "pricing": self._pricing.to_dict(),
            "registrations": {
                label: registration.to_dict()
                for label, registration in sorted(
                    self._registrations.items(), key=lambda item: item[1].token_id
                )
            },
            "attestation_count": self._attestation_store.count(),
            "ledger": self._ledger.snapshot(),
        }

    def replay(self, attestations: list[dict[str, Any]]) -> NameRegistrar:
        """
        Replay attestations onto a fresh ledger to reconstruct state.

        Only accepted attestations are replayed. Callers are funded with
        the value they attached. The fresh ledger's clock is pinned to
        genesis and advanced to each recorded block timestamp, so
        registration and expiry times match the original.

        Args:
            attestations: Attestation dicts (``Attestation.to_dict()``)

        Returns:
            New NameRegistrar with replayed state
        """
        genesis = self._ledger.genesis_timestamp
        ledger = Ledger(
            config=replace(self._ledger.config, genesis_timestamp=genesis),
            clock=lambda: genesis,
        )
        initial = self._initial_config
        replayed = NameRegistrar.deploy(
            initial.name,
            initial.symbol,
            initial.fees_collector,
            deployer=initial.owner,
            ledger=ledger,
            pricing=deepcopy(self._initial_pricing),
            invariants=self._invariants,
            logger=self._logger,
        )

        for att in attestations:
            if att.get("decision") != "allowed":
                continue
            value = att.get("value", 0)
            if value:
                ledger.fund(att["actor"], value)
            if att.get("block_timestamp") is not None:
                ledger.advance_to(att["block_timestamp"])
            replayed.request(
                action=att["action"],
                actor=att["actor"],
                target=att.get("target"),
                value=value,
                metadata=att.get("metadata", {}),
            )

        return replayed
