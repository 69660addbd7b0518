"""
Registry Invariants — guards evaluated before any state change.

    Access:
        - registry.access.owner_only
    Pause:
        - registry.pause.when_not_paused
        - registry.pause.when_paused
    Arguments:
        - registry.args.positive_duration
        - registry.args.valid_label
        - registry.args.valid_address
        - registry.args.valid_price
    Registrations:
        - registry.registration.available
        - registry.registration.exists
        - registry.registration.holder_only
    Payment:
        - registry.payment.sufficient

Invariants are checked in list order and all violations are collected.
The first violation decides which error a rejected call raises, so the
access and pause guards come first.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from ..accounts import is_address, is_zero_address
from .components import is_single_component, label_problem, normalize_label
from .pricing import ComponentPricing, FlatPricing, PricingStrategy, price_problem, quote
from .states import PauseState, RegistryConfig, Registration
from .transitions import (
    ADMIN_ACTIONS,
    REGISTRATION_ACTIONS,
    InvariantViolation,
    RegistryAction,
    TransitionRequest,
)


@dataclass(frozen=True)
class RegistryView:
    """Read-only view of registry state handed to invariants."""
    config: RegistryConfig
    pause: PauseState
    registrations: Mapping[str, Registration]
    pricing: PricingStrategy
    now: int
    balance_of: Callable[[str], int]

    def active(self, label: str | None) -> Registration | None:
        if not isinstance(label, str):
            return None
        registration = self.registrations.get(label)
        if registration is not None and registration.is_active(self.now):
            return registration
        return None


@runtime_checkable
class RegistryInvariant(Protocol):
    """
    Protocol for registry guards.

    Each invariant:
    - Has a unique ID (namespaced: registry.*)
    - Declares the actions it applies to
    - Returns violations on failure, an empty list otherwise
    """

    @property
    def id(self) -> str:
        ...

    @property
    def description(self) -> str:
        ...

    @property
    def actions(self) -> frozenset[RegistryAction]:
        ...

    def check(
        self,
        request: TransitionRequest,
        view: RegistryView,
    ) -> list[InvariantViolation]:
        ...


@dataclass
class BaseInvariant(ABC):
    """Base class for registry invariants."""

    code: str = "rejected"

    @property
    @abstractmethod
    def id(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...

    @property
    @abstractmethod
    def actions(self) -> frozenset[RegistryAction]:
        ...

    def applies_to(self, request: TransitionRequest) -> bool:
        return request.action in self.actions

    @abstractmethod
    def check(
        self,
        request: TransitionRequest,
        view: RegistryView,
    ) -> list[InvariantViolation]:
        ...

    def _violation(
        self,
        message: str,
        code: str | None = None,
    ) -> InvariantViolation:
        return InvariantViolation(
            invariant_id=self.id,
            code=code or self.code,
            message=message,
        )


# =============================================================================
# Access
# =============================================================================

@dataclass
class OwnerOnlyInvariant(BaseInvariant):
    """Administrative actions are reserved to the registry owner."""

    code: str = "not_owner"

    @property
    def id(self) -> str:
        return "registry.access.owner_only"

    @property
    def description(self) -> str:
        return "Only the registry owner may perform administrative actions"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return ADMIN_ACTIONS

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        if request.actor != view.config.owner:
            return [self._violation(
                f"Caller {request.actor} is not the owner; "
                f"{request.action.value} requires {view.config.owner}"
            )]
        return []


# =============================================================================
# Pause
# =============================================================================

@dataclass
class WhenNotPausedInvariant(BaseInvariant):
    """
    Registration actions are blocked while paused.

    Pausing an already paused registry is rejected with the same code.
    """

    code: str = "paused"

    @property
    def id(self) -> str:
        return "registry.pause.when_not_paused"

    @property
    def description(self) -> str:
        return "Registration changes and pause require the registry to be unpaused"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return REGISTRATION_ACTIONS | {RegistryAction.PAUSE}

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        if view.pause.paused:
            return [self._violation(f"Registry is paused, cannot {request.action.value}")]
        return []


@dataclass
class WhenPausedInvariant(BaseInvariant):
    """Unpause only makes sense while paused."""

    code: str = "not_paused"

    @property
    def id(self) -> str:
        return "registry.pause.when_paused"

    @property
    def description(self) -> str:
        return "Unpause requires the registry to be paused"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return frozenset({RegistryAction.UNPAUSE})

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        if not view.pause.paused:
            return [self._violation("Registry is not paused")]
        return []


# =============================================================================
# Arguments
# =============================================================================

def _duration_problem(duration: Any) -> str | None:
    if isinstance(duration, bool) or not isinstance(duration, int):
        return f"Duration must be an integer number of seconds, got {duration!r}"
    if duration <= 0:
        return f"Duration must be positive, got {duration}"
    return None


@dataclass
class PositiveDurationInvariant(BaseInvariant):
    code: str = "invalid_duration"

    @property
    def id(self) -> str:
        return "registry.args.positive_duration"

    @property
    def description(self) -> str:
        return "Registration duration must be a positive number of seconds"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return frozenset({RegistryAction.MINT, RegistryAction.RENEW})

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        problem = _duration_problem(request.metadata.get("duration"))
        return [self._violation(problem)] if problem else []


@dataclass
class ValidLabelInvariant(BaseInvariant):
    code: str = "invalid_label"

    @property
    def id(self) -> str:
        return "registry.args.valid_label"

    @property
    def description(self) -> str:
        return "Labels must be non-empty and free of whitespace and control characters"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return frozenset({RegistryAction.MINT})

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        problem = label_problem(request.target)
        if problem:
            return [self._violation(problem)]
        if not isinstance(request.metadata.get("metadata", ""), str):
            return [self._violation("Metadata must be a string")]
        return []


@dataclass
class ValidAddressInvariant(BaseInvariant):
    """Address arguments must be well-formed and non-zero."""

    code: str = "invalid_address"

    ADDRESS_ARGUMENTS = {
        RegistryAction.MINT: ("owner", "target_address"),
        RegistryAction.SET_FEES_COLLECTOR: ("fees_collector",),
        RegistryAction.TRANSFER_OWNERSHIP: ("new_owner",),
        RegistryAction.TRANSFER: ("to",),
        RegistryAction.SET_TARGET: ("target_address",),
    }

    @property
    def id(self) -> str:
        return "registry.args.valid_address"

    @property
    def description(self) -> str:
        return "Address arguments must be valid, non-zero addresses"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return frozenset(self.ADDRESS_ARGUMENTS)

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        violations = []
        for key in self.ADDRESS_ARGUMENTS[request.action]:
            value = request.metadata.get(key)
            if not is_address(value):
                violations.append(self._violation(f"Invalid {key} address: {value!r}"))
            elif is_zero_address(value):
                violations.append(self._violation(f"{key} must not be the zero address"))
        return violations


@dataclass
class ValidPriceInvariant(BaseInvariant):
    code: str = "invalid_price"

    @property
    def id(self) -> str:
        return "registry.args.valid_price"

    @property
    def description(self) -> str:
        return "Prices must be non-negative integers set for single components"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return frozenset({
            RegistryAction.SET_COMPONENT_PRICE,
            RegistryAction.REMOVE_COMPONENT_PRICE,
            RegistryAction.SET_DEFAULT_PRICE,
        })

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        if request.action == RegistryAction.SET_DEFAULT_PRICE:
            if not isinstance(view.pricing, (ComponentPricing, FlatPricing)):
                return [self._violation(
                    f"Pricing strategy {type(view.pricing).__name__} has no default price"
                )]
        else:
            if not isinstance(view.pricing, ComponentPricing):
                return [self._violation(
                    f"Pricing strategy {type(view.pricing).__name__} has no component prices"
                )]
            component = request.metadata.get("component")
            if not isinstance(component, str) or not is_single_component(normalize_label(component)):
                return [self._violation(f"Not a single component: {component!r}")]
            if request.action == RegistryAction.REMOVE_COMPONENT_PRICE:
                return []

        problem = price_problem(request.metadata.get("price"))
        return [self._violation(problem)] if problem else []


# =============================================================================
# Registrations
# =============================================================================

@dataclass
class LabelAvailableInvariant(BaseInvariant):
    """At most one active registration per label."""

    code: str = "already_registered"

    @property
    def id(self) -> str:
        return "registry.registration.available"

    @property
    def description(self) -> str:
        return "A label can only be minted when it has no active registration"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return frozenset({RegistryAction.MINT})

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        current = view.active(request.target)
        if current is not None:
            return [self._violation(
                f"Label {request.target!r} is registered until {current.expires_at}"
            )]
        return []


@dataclass
class RegistrationExistsInvariant(BaseInvariant):
    code: str = "unknown_label"

    @property
    def id(self) -> str:
        return "registry.registration.exists"

    @property
    def description(self) -> str:
        return "Renew, transfer and retarget need an active registration"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return frozenset({RegistryAction.RENEW, RegistryAction.TRANSFER, RegistryAction.SET_TARGET})

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        if view.active(request.target) is None:
            return [self._violation(f"No active registration for {request.target!r}")]
        return []


@dataclass
class RegistrationHolderInvariant(BaseInvariant):
    code: str = "not_registration_owner"

    @property
    def id(self) -> str:
        return "registry.registration.holder_only"

    @property
    def description(self) -> str:
        return "Only the registration owner may transfer or retarget it"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return frozenset({RegistryAction.TRANSFER, RegistryAction.SET_TARGET})

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        current = view.active(request.target)
        if current is not None and current.owner != request.actor:
            return [self._violation(
                f"{request.actor} does not own {request.target!r} (owner: {current.owner})"
            )]
        return []


# =============================================================================
# Payment
# =============================================================================

@dataclass
class SufficientPaymentInvariant(BaseInvariant):
    """
    Non-owner callers pay the quoted price.

    The attached value must cover the quote and the caller's balance
    must cover the attached value. The registry owner mints and renews
    for free.
    """

    code: str = "insufficient_payment"

    @property
    def id(self) -> str:
        return "registry.payment.sufficient"

    @property
    def description(self) -> str:
        return "Attached value must cover the price for non-owner callers"

    @property
    def actions(self) -> frozenset[RegistryAction]:
        return frozenset({RegistryAction.MINT, RegistryAction.RENEW})

    def check(self, request: TransitionRequest, view: RegistryView) -> list[InvariantViolation]:
        if request.actor == view.config.owner:
            return []
        duration = request.metadata.get("duration")
        if _duration_problem(duration) or label_problem(request.target):
            return []  # reported by the argument guards

        price = quote(view.pricing, request.target, duration)
        value = request.value
        if value < price.total:
            return [self._violation(
                f"Payment {value} is below price {price.total} for {request.target!r}"
            )]
        available = view.balance_of(request.actor)
        if available < value:
            return [self._violation(
                f"Balance {available} of {request.actor} cannot cover {value}",
                code="insufficient_funds",
            )]
        return []


# =============================================================================
# Invariant Registry
# =============================================================================

REGISTRY_INVARIANTS: list[RegistryInvariant] = [
    # Access
    OwnerOnlyInvariant(),
    # Pause
    WhenNotPausedInvariant(),
    WhenPausedInvariant(),
    # Arguments
    PositiveDurationInvariant(),
    ValidLabelInvariant(),
    ValidAddressInvariant(),
    ValidPriceInvariant(),
    # Registrations
    LabelAvailableInvariant(),
    RegistrationExistsInvariant(),
    RegistrationHolderInvariant(),
    # Payment
    SufficientPaymentInvariant(),
]


def get_invariant(invariant_id: str) -> RegistryInvariant | None:
    for inv in REGISTRY_INVARIANTS:
        if inv.id == invariant_id:
            return inv
    return None


def list_registry_invariants(
    invariants: list[RegistryInvariant] | None = None,
) -> list[dict[str, Any]]:
    """List invariants with their metadata."""
    return [
        {
            "id": inv.id,
            "description": inv.description,
            "actions": sorted(a.value for a in inv.actions),
        }
        for inv in (REGISTRY_INVARIANTS if invariants is None else invariants)
    ]
