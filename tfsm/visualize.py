# tfsm/visualize.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""Render a machine's state/transition graph as a Mermaid flowchart."""

from __future__ import annotations

from typing import Any, Dict, Union

from tfsm.adapter import StateMachineAdapter
from tfsm.core.state_machine import StateMachine
from tfsm.core.states import State


def _label(name: Any) -> str:
    return str(getattr(name, "value", name))


def _node(node_id: int, state: State) -> str:
    return f"{node_id}({len(state.before)} {_label(state.name)} {len(state.after)})"


def render_mermaid(machine: Union[StateMachine, StateMachineAdapter]) -> str:
    """
    Render one edge line per transition, in declaration order.

    Nodes show ``<before hooks> <name> <after hooks>``; edges show the same
    for the transition. Node ids are numbered from 1 by first appearance.
    """
    if isinstance(machine, StateMachineAdapter):
        machine = machine.machine

    graph = machine.graph
    node_ids: Dict[str, int] = {}

    def node_id(name: str) -> int:
        if name not in node_ids:
            node_ids[name] = len(node_ids) + 1
        return node_ids[name]

    lines = ["graph TD "]
    for transition in graph.transitions:
        source = graph.find_state(transition.from_state)
        target = graph.find_state(transition.to_state)
        source_id = node_id(_label(source.name))
        target_id = node_id(_label(target.name))
        lines.append(
            f"    {_node(source_id, source)} --> "
            f"|{len(transition.before)} {_label(transition.name)} {len(transition.after)}| "
            f"{_node(target_id, target)}"
        )
    return "\n".join(lines) + "\n"
