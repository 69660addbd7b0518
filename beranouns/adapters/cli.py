"""
CLI Adapter - Command-line interface.

Thin wrapper over the registry: every command deploys on a fresh
in-memory ledger, so nothing persists between runs.
"""

from __future__ import annotations

import argparse
import json
import sys

from beranouns.config import ConfigError, DeploymentConfig, load_deployment_config
from beranouns.registrar.errors import RegistryError
from beranouns.registrar.states import SECONDS_PER_YEAR


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="beranouns",
        description="Emoji naming registry",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # components command
    components_parser = subparsers.add_parser(
        "components", help="Split a label into priced components"
    )
    components_parser.add_argument("label", help="Label to split")

    # quote command
    quote_parser = subparsers.add_parser("quote", help="Price a registration")
    quote_parser.add_argument("label", help="Label to price")
    quote_parser.add_argument(
        "-d", "--duration",
        type=int,
        default=SECONDS_PER_YEAR,
        help=f"Duration in seconds (default: {SECONDS_PER_YEAR})",
    )
    quote_parser.add_argument("-c", "--config", help="Deployment config (YAML or JSON)")

    # simulate command
    simulate_parser = subparsers.add_parser(
        "simulate", help="Deploy, mint and print the resulting registry snapshot"
    )
    simulate_parser.add_argument("-c", "--config", help="Deployment config (YAML or JSON)")
    simulate_parser.add_argument(
        "-m", "--mint",
        action="append",
        default=[],
        metavar="LABEL",
        help="Label to mint as the owner (repeatable)",
    )
    simulate_parser.add_argument(
        "-d", "--duration",
        type=int,
        default=SECONDS_PER_YEAR,
        help="Registration duration in seconds",
    )
    simulate_parser.add_argument(
        "--pause", action="store_true", help="Pause the registry after minting"
    )

    # invariants command
    subparsers.add_parser("invariants", help="List registry invariants")

    # version command
    subparsers.add_parser("version", help="Show version")

    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 0

    if parsed.command == "version":
        from beranouns import __version__
        print(f"beranouns {__version__}")
        return 0

    if parsed.command == "invariants":
        return _cmd_invariants()

    if parsed.command == "components":
        return _cmd_components(parsed)

    try:
        if parsed.command == "quote":
            return _cmd_quote(parsed)
        if parsed.command == "simulate":
            return _cmd_simulate(parsed)
    except (RegistryError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 1


def _load_config(path: str | None) -> DeploymentConfig:
    return load_deployment_config(path) if path else DeploymentConfig()


def _checked_label(label: str) -> str | None:
    """NFC form of a registrable label; prints the problem and returns None otherwise."""
    from beranouns.registrar.components import label_problem, normalize_label

    problem = label_problem(label)
    if problem:
        print(f"Error: {problem}", file=sys.stderr)
        return None
    return normalize_label(label)


def _cmd_components(args: argparse.Namespace) -> int:
    """Print each component with its code points."""
    from beranouns.registrar.components import split_components

    label = _checked_label(args.label)
    if label is None:
        return 1

    for component in split_components(label):
        codepoints = " ".join(f"U+{ord(ch):04X}" for ch in component)
        print(f"  {component}\t{codepoints}")
    return 0


def _cmd_quote(args: argparse.Namespace) -> int:
    from beranouns.registrar.pricing import quote

    label = _checked_label(args.label)
    if label is None:
        return 1
    if args.duration <= 0:
        print("Error: duration must be positive", file=sys.stderr)
        return 1

    config = _load_config(args.config)
    price = quote(config.pricing(), label, args.duration)
    print(json.dumps(price.to_dict(), ensure_ascii=False, indent=2))
    return 0


def _cmd_simulate(args: argparse.Namespace) -> int:
    from beranouns.contract import Beranouns
    from beranouns.registrar.ledger import Ledger

    config = _load_config(args.config)
    ledger = Ledger(config=config.ledger_config())
    owner = ledger.signers(1)[0]
    registry = Beranouns.from_config(config, deployer=owner, ledger=ledger)

    for label in args.mint:
        registry.mint(label, label, args.duration, owner, owner)

    if args.pause:
        registry.pause()

    print(json.dumps(registry.registrar.snapshot(), ensure_ascii=False, indent=2))
    return 0


def _cmd_invariants() -> int:
    from beranouns.registrar.invariants import list_registry_invariants

    print("Registry invariants:")
    print()
    for inv in list_registry_invariants():
        print(f"  {inv['id']:36} - {inv['description']}")
        print(f"  {'':36}   actions: {', '.join(inv['actions'])}")
    return 0
