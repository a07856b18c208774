# tfsm/cli.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Command-line tools for tfsm machines.

Usage:
    python -m tfsm visualize package.module:machine
    python -m tfsm visualize package.module:Water,other.module:factory --formats console,md
    python -m tfsm v package.module:machine -f md --verbose

TARGET names a StateMachine, a StateMachineAdapter instance or subclass, or a
zero-argument factory returning one of those.

Exit Codes:
    0 - Success
    2 - Usage error, or a target could not be imported or built
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from tfsm.adapter import StateMachineAdapter
from tfsm.core.state_machine import StateMachine
from tfsm.visualize import render_mermaid

logger = logging.getLogger(__name__)

FORMAT_CONSOLE = "console"
FORMAT_MD = "md"
FORMATS = (FORMAT_CONSOLE, FORMAT_MD)

EXIT_OK = 0
EXIT_ERROR = 2


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _formats(value: str) -> List[str]:
    formats = _split(value)
    unknown = [f for f in formats if f not in FORMATS]
    if unknown:
        raise argparse.ArgumentTypeError(f"unknown format(s): {', '.join(unknown)}")
    return formats


def load_target(target: str) -> Tuple[Any, Optional[Path]]:
    """
    Import ``module:attribute`` and turn it into a machine.

    :return: The machine and the source file of its module, when it has one.
    :raises ValueError: If the target is malformed or does not yield a machine.
    """
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Target must look like 'module:attribute', got {target!r}")

    module = importlib.import_module(module_name)
    value: Any = module
    for part in attribute.split("."):
        value = getattr(value, part)

    if isinstance(value, type) and issubclass(value, StateMachineAdapter):
        value = value()
    elif callable(value) and not isinstance(value, (StateMachine, StateMachineAdapter)):
        value = value()

    if not isinstance(value, (StateMachine, StateMachineAdapter)):
        raise ValueError(f"{target!r} is not a state machine")

    source = getattr(module, "__file__", None)
    return value, Path(source) if source else None


def _visualize(args: argparse.Namespace) -> int:
    for target in args.targets:
        try:
            machine, source = load_target(target)
        except (ImportError, AttributeError, ValueError) as exc:
            logger.error("Cannot load %s: %s", target, exc)
            return EXIT_ERROR

        graph = render_mermaid(machine)
        if FORMAT_CONSOLE in args.formats:
            print(graph)
        if FORMAT_MD in args.formats:
            if source is None:
                logger.error("Cannot write markdown for %s: module has no source file", target)
                return EXIT_ERROR
            output = source.with_suffix(".md")
            output.write_text(graph, encoding="utf-8")
            logger.info("Wrote %s", output)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tfsm", description="Tools for tfsm state machines")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    visualize = subparsers.add_parser("visualize", aliases=["v"], help="render state machine graphs")
    visualize.add_argument("targets", type=_split, help="comma-separated module:attribute targets")
    visualize.add_argument(
        "-f",
        "--formats",
        type=_formats,
        default=[FORMAT_CONSOLE],
        help=f"comma-separated output formats: {FORMAT_CONSOLE}, {FORMAT_MD} (mermaid)",
    )
    visualize.set_defaults(handler=_visualize)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return args.handler(args)
