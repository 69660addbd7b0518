"""
Beranouns contract facade.

A ``Beranouns`` handle is bound to one caller, the way a contract object
is bound to a signer. ``connect(account)`` returns a handle over the same
registry for another caller. Write methods raise the ``RegistryError``
subclass matching the rejection; read methods never change state.

Example:
    ledger = Ledger()
    owner, alice = ledger.signers(2)

    beranouns = Beranouns.deploy("Beranouns", "BRNS", owner, deployer=owner, ledger=ledger)
    beranouns.pause()
    beranouns.unpause()
    beranouns.mint("🐻", "🐻", SECONDS_PER_YEAR, owner, owner)

    beranouns.connect(alice).pause()   # raises NotOwnerError
"""

from __future__ import annotations

from typing import Any

from beranouns.accounts import AddressLike, normalize_address, to_address
from beranouns.config import DeploymentConfig
from beranouns.registrar.ledger import Ledger
from beranouns.registrar.pricing import ComponentPricing, PriceQuote
from beranouns.registrar.registrar import NameRegistrar
from beranouns.registrar.states import Registration
from beranouns.registrar.transitions import RegistryAction, TransitionResult


class Beranouns:
    """Caller-bound handle on a NameRegistrar."""

    def __init__(self, registrar: NameRegistrar, caller: AddressLike) -> None:
        self._registrar = registrar
        self._caller = normalize_address(caller)

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
    ) -> Beranouns:
        """Deploy a registry; the returned handle is bound to the deployer."""
        registrar = NameRegistrar.deploy(
            name,
            symbol,
            fees_collector,
            deployer=deployer,
            ledger=ledger,
            **kwargs,
        )
        return cls(registrar, deployer)

    @classmethod
    def from_config(
        cls,
        config: DeploymentConfig,
        *,
        deployer: AddressLike,
        ledger: Ledger | None = None,
        **kwargs: Any,
    ) -> Beranouns:
        return cls.deploy(
            config.name,
            config.symbol,
            config.fees_collector or deployer,
            deployer=deployer,
            ledger=ledger or Ledger(config=config.ledger_config()),
            pricing=config.pricing(),
            **kwargs,
        )

    def connect(self, account: AddressLike) -> Beranouns:
        return Beranouns(self._registrar, account)

    @property
    def registrar(self) -> NameRegistrar:
        return self._registrar

    @property
    def ledger(self) -> Ledger:
        return self._registrar.ledger

    @property
    def address(self) -> str:
        return self._registrar.address

    @property
    def caller(self) -> str:
        return self._caller

    def _send(
        self,
        action: RegistryAction,
        target: str | None = None,
        value: int = 0,
        **args: Any,
    ) -> TransitionResult:
        result = self._registrar.request(
            action=action,
            actor=self._caller,
            target=target,
            value=value,
            metadata=args,
        )
        result.raise_for_rejection()
        return result

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def name(self) -> str:
        return self._registrar.config.name

    def symbol(self) -> str:
        return self._registrar.config.symbol

    def fees_collector(self) -> str:
        return self._registrar.config.fees_collector

    def owner(self) -> str:
        return self._registrar.config.owner

    def paused(self) -> bool:
        return self._registrar.paused

    def registration(self, label: str, include_expired: bool = False) -> Registration | None:
        return self._registrar.registration(label, include_expired=include_expired)

    def resolve(self, label: str) -> str | None:
        return self._registrar.resolve(label)

    def owner_of(self, token_id: int) -> str | None:
        return self._registrar.owner_of(token_id)

    def balance_of(self, address: AddressLike) -> int:
        return self._registrar.balance_of(address)

    def total_supply(self) -> int:
        return self._registrar.total_supply()

    def price(self, label: str, duration: int) -> PriceQuote:
        return self._registrar.quote(label, duration)

    def component_price(self, component: str) -> int:
        pricing = self._registrar.pricing
        if isinstance(pricing, ComponentPricing):
            return pricing.price_for(component)
        return pricing.price_per_year((component,))

    # -------------------------------------------------------------------------
    # Administration (owner only)
    # -------------------------------------------------------------------------

    def pause(self) -> None:
        self._send(RegistryAction.PAUSE)

    def unpause(self) -> None:
        self._send(RegistryAction.UNPAUSE)

    def set_component_price(self, component: str, price: int) -> None:
        self._send(RegistryAction.SET_COMPONENT_PRICE, component=component, price=price)

    def remove_component_price(self, component: str) -> bool:
        return self._send(RegistryAction.REMOVE_COMPONENT_PRICE, component=component).output

    def set_default_price(self, price: int) -> None:
        self._send(RegistryAction.SET_DEFAULT_PRICE, price=price)

    def set_fees_collector(self, fees_collector: AddressLike) -> None:
        self._send(RegistryAction.SET_FEES_COLLECTOR, fees_collector=to_address(fees_collector))

    def transfer_ownership(self, new_owner: AddressLike) -> None:
        self._send(RegistryAction.TRANSFER_OWNERSHIP, new_owner=to_address(new_owner))

    # -------------------------------------------------------------------------
    # Registrations
    # -------------------------------------------------------------------------

    def mint(
        self,
        label: str,
        metadata: str,
        duration: int,
        owner: AddressLike,
        target: AddressLike,
        value: int = 0,
    ) -> Registration:
        """Register ``label`` for ``duration`` seconds.

        Raises:
            PausedError: The registry is paused.
            InvalidDurationError: ``duration`` is not a positive integer.
            InvalidLabelError: ``label`` is empty or malformed.
            AlreadyRegisteredError: ``label`` has an active registration.
            InvalidAddressError: ``owner`` or ``target`` is invalid or zero.
            InsufficientPaymentError: ``value`` does not cover the price.
        """
        return self._send(
            RegistryAction.MINT,
            target=label,
            value=value,
            metadata=metadata,
            duration=duration,
            owner=to_address(owner),
            target_address=to_address(target),
        ).output

    def renew(self, label: str, duration: int, value: int = 0) -> Registration:
        return self._send(RegistryAction.RENEW, target=label, value=value, duration=duration).output

    def transfer(self, label: str, to: AddressLike) -> Registration:
        return self._send(RegistryAction.TRANSFER, target=label, to=to_address(to)).output

    def set_target(self, label: str, target: AddressLike) -> Registration:
        return self._send(RegistryAction.SET_TARGET, target=label, target_address=to_address(target)).output

    def __repr__(self) -> str:
        return f"Beranouns(address={self.address!r}, caller={self._caller!r})"
