"""
Deployment configuration.

A deployment file describes one registry instance:

    name: Beranouns
    symbol: BRNS
    fees_collector: "0x..."      # optional, defaults to the deployer
    pricing:
      default_price: 0
      components:
        "🐻": 1000000000000000000
    chain:
      chain_id: 80085
      block_time: 1

YAML (``.yaml``/``.yml``) and JSON (``.json``) are supported.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from beranouns.accounts import is_address, is_zero_address
from beranouns.registrar.ledger import LedgerConfig
from beranouns.registrar.pricing import ComponentPricing

logger = logging.getLogger(__name__)

_TOP_LEVEL_KEYS = {"name", "symbol", "fees_collector", "pricing", "chain"}


class ConfigError(ValueError):
    """Raised for unreadable or invalid deployment configuration."""


@dataclass
class DeploymentConfig:
    """Settings for deploying a registry.

    Args:
        name: Registry display name.
        symbol: Registry symbol.
        fees_collector: Address receiving fees; None means the deployer.
        default_price: Yearly price of components without their own price.
        component_prices: Yearly price per component.
        chain_id: Ledger chain id.
        block_time: Seconds between consecutive blocks.

    Example:
        config = DeploymentConfig(component_prices={"🐻": 10**18})
        registry = Beranouns.from_config(config, deployer=owner, ledger=ledger)
    """

    name: str = "Beranouns"
    symbol: str = "BRNS"
    fees_collector: str | None = None
    default_price: int = 0
    component_prices: dict[str, int] = field(default_factory=dict)
    chain_id: int = 80085
    block_time: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ConfigError("name must be a non-empty string")
        if not isinstance(self.symbol, str) or not self.symbol:
            raise ConfigError("symbol must be a non-empty string")
        if self.fees_collector is not None:
            if not is_address(self.fees_collector) or is_zero_address(self.fees_collector):
                raise ConfigError(f"Invalid fees_collector: {self.fees_collector!r}")
            self.fees_collector = self.fees_collector.lower()
        if not isinstance(self.component_prices, dict):
            raise ConfigError("component_prices must be a mapping")
        try:
            self.pricing()
            self.ledger_config()
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def pricing(self) -> ComponentPricing:
        """Fresh pricing strategy for a deployment."""
        return ComponentPricing(
            default_price=self.default_price,
            prices=dict(self.component_prices),
        )

    def ledger_config(self) -> LedgerConfig:
        return LedgerConfig(chain_id=self.chain_id, block_time=self.block_time)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeploymentConfig:
        if not isinstance(data, dict):
            raise ConfigError("Deployment config must be a mapping")
        unknown = set(data) - _TOP_LEVEL_KEYS
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")

        pricing = data.get("pricing") or {}
        chain = data.get("chain") or {}
        if not isinstance(pricing, dict) or not isinstance(chain, dict):
            raise ConfigError("pricing and chain must be mappings")

        defaults = cls.__dataclass_fields__
        return cls(
            name=data.get("name", defaults["name"].default),
            symbol=data.get("symbol", defaults["symbol"].default),
            fees_collector=data.get("fees_collector"),
            default_price=pricing.get("default_price", 0),
            component_prices=pricing.get("components") or {},
            chain_id=chain.get("chain_id", defaults["chain_id"].default),
            block_time=chain.get("block_time", defaults["block_time"].default),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "symbol": self.symbol,
            "pricing": {
                "default_price": self.default_price,
                "components": dict(self.component_prices),
            },
            "chain": {
                "chain_id": self.chain_id,
                "block_time": self.block_time,
            },
        }
        if self.fees_collector is not None:
            data["fees_collector"] = self.fees_collector
        return data

    def save(self, path: str | Path) -> None:
        """Write to a YAML or JSON file, chosen by suffix."""
        path = Path(path)
        data = self.to_dict()

        if path.suffix in (".yaml", ".yml"):
            with open(path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
        elif path.suffix == ".json":
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        else:
            raise ConfigError(f"Unsupported file format: {path.suffix}")

        logger.info(f"Saved deployment config to {path}")


def load_deployment_config(path: str | Path) -> DeploymentConfig:
    """Load a deployment config from a YAML or JSON file.

    Raises:
        ConfigError: If the file is missing, unparsable or invalid.
    """
    path = Path(path)

    try:
        if path.suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        elif path.suffix == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigError(f"Unsupported file format: {path.suffix}")
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    config = DeploymentConfig.from_dict(data or {})
    logger.debug(f"Loaded deployment config from {path}")
    return config
