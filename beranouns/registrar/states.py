"""
Registry State Models

The registry holds three kinds of state:
    - RegistryConfig: name, symbol, fee collector and owner
    - PauseState: the owner-controlled gate on mutating operations
    - Registration: one label record bound to an owner and a target

Config and pause state are replaced wholesale on change (frozen
dataclasses), so a rejected request can never leave a half-applied
update behind.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

SECONDS_PER_YEAR = 3600 * 24 * 365


@dataclass(frozen=True)
class RegistryConfig:
    """
    Deployment configuration.

    ``name`` and ``symbol`` are fixed at construction. ``fees_collector``
    and ``owner`` only change through owner-only registry actions.
    """
    name: str
    symbol: str
    fees_collector: str
    owner: str

    def with_changes(self, **changes: Any) -> RegistryConfig:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "fees_collector": self.fees_collector,
            "owner": self.owner,
        }


@dataclass(frozen=True)
class PauseState:
    """Global pause gate. Starts unpaused."""
    paused: bool = False
    changed_at: int | None = None
    changed_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "paused": self.paused,
            "changed_at": self.changed_at,
            "changed_by": self.changed_by,
        }


@dataclass(frozen=True)
class Registration:
    """
    A label record.

    Attributes:
        token_id: Monotonic identifier, starting at 1.
        label: Registered label (registry key).
        metadata: Free-form string supplied as the second mint argument.
        components: Label split into user-perceived characters.
        owner: Address that controls the registration.
        target: Address the label resolves to.
        registered_at: Ledger timestamp of the mint.
        expires_at: Ledger timestamp after which the label is free again.
    """
    token_id: int
    label: str
    metadata: str
    components: tuple[str, ...]
    owner: str
    target: str
    registered_at: int
    expires_at: int

    def is_active(self, now: int) -> bool:
        return now < self.expires_at

    @property
    def duration(self) -> int:
        return self.expires_at - self.registered_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "token_id": self.token_id,
            "label": self.label,
            "metadata": self.metadata,
            "components": list(self.components),
            "owner": self.owner,
            "target": self.target,
            "registered_at": self.registered_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Registration:
        return cls(
            token_id=data["token_id"],
            label=data["label"],
            metadata=data.get("metadata", ""),
            components=tuple(data.get("components", ())),
            owner=data["owner"],
            target=data["target"],
            registered_at=data["registered_at"],
            expires_at=data["expires_at"],
        )
