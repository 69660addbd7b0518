"""
Pricing strategies.

A strategy prices a label per year from its components. Quotes are
pro-rated by duration and rounded up to the smallest ledger unit, so a
registration never costs less than its share of the yearly price.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, runtime_checkable

from .components import is_single_component, normalize_label, split_components
from .states import SECONDS_PER_YEAR


@dataclass(frozen=True)
class PriceQuote:
    """Price of registering ``label`` for ``duration`` seconds."""
    label: str
    duration: int
    components: tuple[str, ...]
    per_year: int
    total: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "duration": self.duration,
            "components": list(self.components),
            "per_year": self.per_year,
            "total": self.total,
        }


@runtime_checkable
class PricingStrategy(Protocol):
    """Maps label components to a yearly price."""

    def price_per_year(self, components: Sequence[str]) -> int:
        ...

    def to_dict(self) -> dict[str, Any]:
        ...


def prorate(per_year: int, duration: int) -> int:
    """Ceil of ``per_year * duration / SECONDS_PER_YEAR``."""
    return -(-per_year * duration // SECONDS_PER_YEAR)


def quote(strategy: PricingStrategy, label: str, duration: int) -> PriceQuote:
    components = split_components(label)
    per_year = strategy.price_per_year(components)
    return PriceQuote(
        label=label,
        duration=duration,
        components=components,
        per_year=per_year,
        total=prorate(per_year, duration),
    )


def price_problem(price: object) -> str | None:
    """Return why ``price`` is unusable, or None."""
    if isinstance(price, bool) or not isinstance(price, int):
        return f"Price must be an integer, got {type(price).__name__}"
    if price < 0:
        return f"Price must be >= 0, got {price}"
    return None


@dataclass
class FlatPricing:
    """Same yearly price for every label."""
    price: int = 0

    def price_per_year(self, components: Sequence[str]) -> int:
        return self.price

    def to_dict(self) -> dict[str, Any]:
        return {"strategy": "flat", "price": self.price}


@dataclass
class ComponentPricing:
    """
    Per-component yearly prices with a default.

    A label's yearly price is the sum of its components' prices.
    Components without an explicit price use ``default_price``.

    Example:
        pricing = ComponentPricing(default_price=10)
        pricing.set_price("🐻", 1_000)
        pricing.price_per_year(("🐻", "a"))   # 1010
    """
    default_price: int = 0
    prices: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        problem = price_problem(self.default_price)
        if problem:
            raise ValueError(problem)
        prices = self.prices
        self.prices = {}
        for component, price in prices.items():
            self.set_price(component, price)

    @staticmethod
    def _validate(component: str, price: int) -> None:
        if not isinstance(component, str) or not is_single_component(normalize_label(component)):
            raise ValueError(f"Not a single component: {component!r}")
        problem = price_problem(price)
        if problem:
            raise ValueError(problem)

    def set_price(self, component: str, price: int) -> None:
        self._validate(component, price)
        self.prices[normalize_label(component)] = price

    def remove_price(self, component: str) -> bool:
        return self.prices.pop(normalize_label(component), None) is not None

    def price_for(self, component: str) -> int:
        return self.prices.get(normalize_label(component), self.default_price)

    def price_per_year(self, components: Sequence[str]) -> int:
        return sum(self.price_for(c) for c in components)

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategy": "component",
            "default_price": self.default_price,
            "prices": dict(self.prices),
        }
