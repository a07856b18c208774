# tests/helpers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import asyncio
from enum import Enum
from typing import Any


class Matter(str, Enum):
    SOLID = "SOLID"
    LIQUID = "LIQUID"
    GAS = "GAS"
    PLASMA = "PLASMA"


class Phase(str, Enum):
    MELT = "MELT"
    FREEZE = "FREEZE"
    VAPORIZE = "VAPORIZE"
    CONDENSE = "CONDENSE"


async def later(value: Any, delay: float = 0) -> Any:
    """Resolve to ``value`` after yielding to the event loop."""
    await asyncio.sleep(delay)
    return value


async def never() -> None:
    """An awaitable that never settles on its own."""
    await asyncio.Event().wait()
