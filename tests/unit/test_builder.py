# tests/unit/test_builder.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from tests.helpers import Matter, Phase
from tfsm import AbsentStateError, MachineBuilder, StateMachine


@pytest.fixture
def builder():
    return (
        MachineBuilder()
        .initial(Matter.SOLID)
        .state(Matter.SOLID, data=-100)
        .state(Matter.LIQUID, data=50)
        .transition(Phase.MELT, Matter.SOLID, Matter.LIQUID)
        .transition(Phase.FREEZE, Matter.LIQUID, Matter.SOLID)
    )


def test_build(builder):
    machine = builder.build()
    assert type(machine) is StateMachine
    assert machine.state == Matter.SOLID
    assert machine.data == -100
    assert machine.all_transitions == [Phase.MELT, Phase.FREEZE]


def test_declarations_are_exposed(builder):
    assert [state.name for state in builder.states] == [Matter.SOLID, Matter.LIQUID]
    assert [transition.name for transition in builder.transitions] == [Phase.MELT, Phase.FREEZE]


def test_build_without_initial_state():
    with pytest.raises(ValueError, match="Initial state not set"):
        MachineBuilder().state("A").build()


def test_build_validates(builder):
    with pytest.raises(AbsentStateError):
        builder.transition(Phase.VAPORIZE, Matter.LIQUID, Matter.GAS).build()


def test_config_is_applied(builder):
    machine = builder.config(timeout=3).build()
    assert machine.config.timeout == 3


def test_builds_independent_machines(builder):
    first = builder.build()
    second = builder.build()
    assert first.graph.find_state(Matter.SOLID) is not second.graph.find_state(Matter.SOLID)


@pytest.mark.asyncio
async def test_machine_wide_hooks(builder, call_log, recorder):
    machine = (
        builder.before_each_state(recorder("before-each-state"))
        .after_each_state(recorder("after-each-state"))
        .before_each_transition([recorder("before-each-transition")])
        .after_each_transition(recorder("after-each-transition"))
        .build()
    )
    await machine.do_transition(Phase.MELT)
    assert call_log == [
        "after-each-state",
        "before-each-transition",
        "after-each-transition",
        "before-each-state",
    ]
