"""
Beranouns - an emoji naming registry on an in-memory, strictly ordered ledger.

Architecture:
    Beranouns (caller-bound facade) → NameRegistrar → Ledger

Public API (stable):
    Beranouns       - Contract handle. deploy(), connect(), mint(), pause(), ...
    Ledger          - Execution environment: blocks, clock, balances, signers.
    Account         - Signer identity.
    DeploymentConfig, load_deployment_config - YAML/JSON deployment files.

Registry:
    name(), symbol(), fees_collector(), owner(), paused()
    pause(), unpause()                        - owner only
    mint(label, metadata, duration, owner, target, value=0)
    renew(), transfer(), set_target(), resolve()
    set_component_price(), set_default_price() - owner only
    set_fees_collector(), transfer_ownership() - owner only

Internals (for advanced users):
    beranouns.registrar   - NameRegistrar, invariants, transitions, attestations
    beranouns.monitoring  - Structured logging
    beranouns.testing     - Fixtures and revert assertions

Example:
    from beranouns import Beranouns, Ledger, SECONDS_PER_YEAR

    ledger = Ledger()
    owner, alice = ledger.signers(2)

    registry = Beranouns.deploy("Beranouns", "BRNS", owner, deployer=owner, ledger=ledger)
    registry.mint("🐻", "🐻", SECONDS_PER_YEAR, owner, owner)
    registry.resolve("🐻")     # owner's address
"""

from beranouns.accounts import ZERO_ADDRESS, Account, is_address
from beranouns.config import ConfigError, DeploymentConfig, load_deployment_config
from beranouns.contract import Beranouns
from beranouns.registrar import (
    SECONDS_PER_YEAR,
    AlreadyRegisteredError,
    ComponentPricing,
    FlatPricing,
    InsufficientFundsError,
    InsufficientPaymentError,
    InvalidAddressError,
    InvalidDurationError,
    InvalidLabelError,
    InvalidPriceError,
    Ledger,
    LedgerConfig,
    NameRegistrar,
    NotOwnerError,
    NotPausedError,
    NotRegistrationOwnerError,
    PausedError,
    Registration,
    RegistryError,
    UnknownLabelError,
    split_components,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Contract
    "Beranouns",
    "NameRegistrar",
    "Registration",
    "SECONDS_PER_YEAR",
    # Ledger & accounts
    "Ledger",
    "LedgerConfig",
    "Account",
    "ZERO_ADDRESS",
    "is_address",
    # Pricing
    "ComponentPricing",
    "FlatPricing",
    "split_components",
    # Config
    "DeploymentConfig",
    "load_deployment_config",
    "ConfigError",
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
