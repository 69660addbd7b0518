"""
Beranouns Registrar Module

Every meaningful registry change is a mediated transition:
- Guard invariants decide (owner-only, pause gate, argument checks,
  label availability, payment)
- The ledger orders it (one transaction per block, under one lock)
- An attestation records it, accepted or not

    ┌──────────────────────────────────────────────┐
    │  Beranouns (contract facade, bound caller)   │
    └──────────────────────┬───────────────────────┘
                           ▼
    ┌──────────────────────────────────────────────┐
    │  NameRegistrar                               │
    │  - RegistryConfig / PauseState               │
    │  - Registrations, PricingStrategy            │
    │  - Invariants → TransitionResult             │
    │  - AttestationStore, snapshot, replay        │
    └──────────────────────┬───────────────────────┘
                           ▼
    ┌──────────────────────────────────────────────┐
    │  Ledger: blocks, clock, balances, receipts   │
    └──────────────────────────────────────────────┘
"""

from .components import split_components
from .errors import (
    AlreadyRegisteredError,
    InsufficientFundsError,
    InsufficientPaymentError,
    InvalidAddressError,
    InvalidDurationError,
    InvalidLabelError,
    InvalidPriceError,
    NotOwnerError,
    NotPausedError,
    NotRegistrationOwnerError,
    PausedError,
    RegistryError,
    UnknownLabelError,
)
from .invariants import (
    REGISTRY_INVARIANTS,
    OwnerOnlyInvariant,
    RegistryInvariant,
    RegistryView,
    WhenNotPausedInvariant,
    WhenPausedInvariant,
)
from .ledger import Ledger, LedgerConfig, Receipt
from .pricing import ComponentPricing, FlatPricing, PriceQuote, PricingStrategy
from .registrar import Attestation, AttestationStore, NameRegistrar
from .states import SECONDS_PER_YEAR, PauseState, RegistryConfig, Registration
from .transitions import (
    DecisionKind,
    InvariantViolation,
    RegistryAction,
    TransitionRequest,
    TransitionResult,
)

__all__ = [
    # Registrar
    "NameRegistrar",
    "Attestation",
    "AttestationStore",
    # Ledger
    "Ledger",
    "LedgerConfig",
    "Receipt",
    # State
    "RegistryConfig",
    "PauseState",
    "Registration",
    "SECONDS_PER_YEAR",
    # Pricing
    "PricingStrategy",
    "ComponentPricing",
    "FlatPricing",
    "PriceQuote",
    "split_components",
    # Transitions
    "RegistryAction",
    "TransitionRequest",
    "TransitionResult",
    "DecisionKind",
    "InvariantViolation",
    # Invariants
    "REGISTRY_INVARIANTS",
    "RegistryInvariant",
    "RegistryView",
    "OwnerOnlyInvariant",
    "WhenNotPausedInvariant",
    "WhenPausedInvariant",
    # Errors
    "RegistryError",
    "NotOwnerError",
    "PausedError",
    "NotPausedError",
    "InvalidDurationError",
    "InvalidLabelError",
    "AlreadyRegisteredError",
    "UnknownLabelError",
    "NotRegistrationOwnerError",
    "InvalidAddressError",
    "InvalidPriceError",
    "InsufficientPaymentError",
    "InsufficientFundsError",
]
