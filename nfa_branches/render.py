from __future__ import annotations
from pathlib import Path
from typing import List, Sequence, Union

from graphviz import Digraph

from .bitset import bit
from .models import CompiledAutomaton, TraceStep


# =============================================================================
# Text tables
# =============================================================================

def _make_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    # Each column is as wide as its widest cell; the header is underlined with -+-.
    widths = [max(len(cell) for cell in column) for column in zip(headers, *rows)]
    lines = [
        " | ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip()
        for row in [headers, *rows]
    ]
    lines.insert(1, "-+-".join("-" * w for w in widths))
    return "\n".join(lines)


def _state_set(names: Sequence[str]) -> str:
    return "{" + ", ".join(names) + "}" if names else "∅"


def format_grammar(automaton: CompiledAutomaton) -> str:
    return "\n".join([
        f"States:   {', '.join(automaton.states)}",
        f"Alphabet: {', '.join(automaton.alphabet)}",
        f"Start:    {automaton.states[automaton.start_index]}",
        f"Accept:   {', '.join(automaton.state_names(automaton.accept_mask))}",
    ])


def transition_table(automaton: CompiledAutomaton) -> str:
    # One row per state, one column per symbol.
    rows: List[List[str]] = []
    for i, name in enumerate(automaton.states):
        markers = []
        if i == automaton.start_index:
            markers.append("START")
        if automaton.accept_mask & bit(i):
            markers.append("ACCEPT")
        row = [name, ",".join(markers)]
        for s in range(len(automaton.alphabet)):
            row.append(_state_set(automaton.state_names(automaton.next[i][s])))
        rows.append(row)
    return _make_table(["State", "Markers", *automaton.alphabet], rows)


def step_table(automaton: CompiledAutomaton, trace: Sequence[TraceStep]) -> str:
    rows = [
        [str(t.step), "ε" if t.symbol is None else t.symbol, ", ".join(automaton.state_names(t.frontier))]
        for t in trace
    ]
    return _make_table(["Step", "Input", "States"], rows)


def live_table(text: str, live: Sequence[int]) -> str:
    # Explicit explorer: how many (path, state) elements were alive after each step.
    rows = [[str(i), "ε" if i == 0 else text[i - 1], str(n)] for i, n in enumerate(live)]
    return _make_table(["Step", "Input", "Live"], rows)


def format_branch(branch: Sequence[str]) -> str:
    return " -> ".join(branch)


# =============================================================================
# Graphviz export
# =============================================================================

def branches_to_dot(
    automaton: CompiledAutomaton, text: str, branches: Sequence[Sequence[str]]
) -> Digraph:
    """
    Directed graph of the reconstructed branches: step i of a path is labeled
    with input character i. Accepting states are drawn as double circles.
    """
    dot = Digraph("NFArun")
    dot.attr(rankdir="LR")
    dot.attr("node", shape="circle")

    for path in branches:
        for i in range(len(path) - 1):
            label = text[i] if i < len(text) else ""
            dot.edge(path[i], path[i + 1], label=label)
    for name in automaton.state_names(automaton.accept_mask):
        dot.node(name, shape="doublecircle")
    return dot


def export_dot(
    path: Union[str, Path], automaton: CompiledAutomaton, text: str, branches: Sequence[Sequence[str]]
) -> str:
    # Writes DOT source only; rendering is left to the Graphviz `dot` tool.
    return branches_to_dot(automaton, text, branches).save(filename=str(path))
