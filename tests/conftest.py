# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, List

import pytest

from tests.helpers import Matter, Phase
from tfsm import StateMachine


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "timing: mark test as relying on short real-time sleeps")


@pytest.fixture
def matter_states() -> List[Dict[str, Any]]:
    """SOLID, LIQUID and GAS with their temperatures as data."""
    return [
        {"name": Matter.SOLID, "data": {"temperature": -100}},
        {"name": Matter.LIQUID, "data": {"temperature": 50}},
        {"name": Matter.GAS, "data": {"temperature": 200}},
    ]


@pytest.fixture
def matter_transitions() -> List[Dict[str, Any]]:
    """MELT, FREEZE, VAPORIZE and CONDENSE between the matter states."""
    return [
        {"name": Phase.MELT, "from": Matter.SOLID, "to": Matter.LIQUID},
        {"name": Phase.FREEZE, "from": Matter.LIQUID, "to": Matter.SOLID},
        {"name": Phase.VAPORIZE, "from": Matter.LIQUID, "to": Matter.GAS},
        {"name": Phase.CONDENSE, "from": Matter.GAS, "to": Matter.LIQUID},
    ]


@pytest.fixture
def machine_factory(matter_states, matter_transitions):
    """Returns a factory building a fresh matter machine starting in SOLID."""

    def _factory(initial=Matter.SOLID, config=None, states=None, transitions=None):
        return StateMachine(
            initial,
            matter_states if states is None else states,
            matter_transitions if transitions is None else transitions,
            config,
        )

    return _factory


@pytest.fixture
def machine(machine_factory) -> StateMachine:
    """A matter machine in SOLID with no hooks."""
    return machine_factory()


@pytest.fixture
def call_log() -> List[str]:
    """A list hooks append their label to, to assert on ordering."""
    return []


@pytest.fixture
def recorder(call_log):
    """Returns a factory of hooks that record a label and return a fixed result."""

    def _make(label: str, result: Any = None):
        def _hook(context, *args, **kwargs):
            call_log.append(label)
            return result

        return _hook

    return _make
