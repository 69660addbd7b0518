"""
Registry Transitions — requests, decisions and violations.

Every mutating call on the registry becomes a TransitionRequest:
    - action: what is being attempted (pause, mint, ...)
    - actor: the caller address, attributed by the ledger
    - target: the label the request acts on (None for admin actions)
    - metadata: call arguments (duration, owner, price, ...)

The registrar answers with a TransitionResult that is either accepted
(with the block that ordered it) or rejected (with the violations).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from .errors import RegistryError, error_for_code


class RegistryAction(Enum):
    """Registry transition actions."""
    # Administration
    PAUSE = "pause"
    UNPAUSE = "unpause"
    SET_COMPONENT_PRICE = "set_component_price"
    REMOVE_COMPONENT_PRICE = "remove_component_price"
    SET_DEFAULT_PRICE = "set_default_price"
    SET_FEES_COLLECTOR = "set_fees_collector"
    TRANSFER_OWNERSHIP = "transfer_ownership"

    # Registrations
    MINT = "mint"
    RENEW = "renew"
    TRANSFER = "transfer"
    SET_TARGET = "set_target"


ADMIN_ACTIONS = frozenset({
    RegistryAction.PAUSE,
    RegistryAction.UNPAUSE,
    RegistryAction.SET_COMPONENT_PRICE,
    RegistryAction.REMOVE_COMPONENT_PRICE,
    RegistryAction.SET_DEFAULT_PRICE,
    RegistryAction.SET_FEES_COLLECTOR,
    RegistryAction.TRANSFER_OWNERSHIP,
})

REGISTRATION_ACTIONS = frozenset({
    RegistryAction.MINT,
    RegistryAction.RENEW,
    RegistryAction.TRANSFER,
    RegistryAction.SET_TARGET,
})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TransitionRequest:
    """
    Request for a state transition.

    Submitted to the registrar, which accepts or rejects it based on
    the guard invariants.
    """
    action: RegistryAction
    actor: str
    target: str | None = None
    value: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    request_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "actor": self.actor,
            "target": self.target,
            "value": self.value,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat(),
            **self.metadata,
        }


class DecisionKind(Enum):
    """Registrar decision outcomes."""
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class InvariantViolation:
    """Record of a guard failure."""
    invariant_id: str
    code: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "invariant_id": self.invariant_id,
            "code": self.code,
            "message": self.message,
        }


@dataclass
class TransitionResult:
    """
    Decision for a transition request.

    Accepted results carry the block number that ordered the change and
    the id of the state that changed (a label, or "config"/"pause").
    Rejected results carry the violations that caused the rejection.
    """
    kind: DecisionKind
    request: TransitionRequest

    # On acceptance
    state_id: str | None = None
    order_index: int | None = None
    applied_invariants: list[str] = field(default_factory=list)
    output: Any = None

    # On rejection
    violations: list[InvariantViolation] = field(default_factory=list)

    attestation_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def allowed(self) -> bool:
        return self.kind == DecisionKind.ACCEPTED

    @property
    def denied(self) -> bool:
        return self.kind == DecisionKind.REJECTED

    @property
    def reason(self) -> str:
        """Human-readable reason for the decision."""
        if self.allowed:
            return f"Transition accepted, registered as {self.state_id}"
        violation_msgs = [v.message for v in self.violations]
        return f"Transition denied: {'; '.join(violation_msgs)}"

    @property
    def reason_code(self) -> str | None:
        """Code of the first violation, None when accepted."""
        if self.violations:
            return self.violations[0].code
        return None

    def raise_for_rejection(self) -> None:
        """Raise the error mapped from the first violation, if any.

        Raises:
            RegistryError: Subclass matching the violation code.
        """
        if self.allowed:
            return
        first = self.violations[0] if self.violations else None
        if first is None:
            raise RegistryError(self.reason)
        error_cls = error_for_code(first.code)
        raise error_cls(
            first.message,
            details={
                "action": self.request.action.value,
                "actor": self.request.actor,
                "target": self.request.target,
                "violations": [v.to_dict() for v in self.violations],
            },
        )
