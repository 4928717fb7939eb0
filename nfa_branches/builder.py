from __future__ import annotations
import logging
from types import MappingProxyType
from typing import Dict, List

from .bitset import MAX_STATES, bit, mask_of
from .models import CompiledAutomaton, GrammarDefinition, TransitionKey

log = logging.getLogger(__name__)


class GrammarError(ValueError):
    pass


def _index_names(names: List[str], kind: str) -> Dict[str, int]:
    index: Dict[str, int] = {}
    for i, name in enumerate(names):
        if name in index:
            raise GrammarError(f"Duplicate {kind} '{name}'")
        index[name] = i
    return index


def build_automaton(grammar: GrammarDefinition) -> CompiledAutomaton:
    """
    Validate a grammar definition and compile it into bitmask form.

    Checks run in a fixed order and the first failure raises GrammarError;
    no automaton is produced in that case.
    """
    if not grammar.states:
        raise GrammarError("No states")
    if len(grammar.states) > MAX_STATES:
        raise GrammarError(f"Too many states: {len(grammar.states)} (max is {MAX_STATES})")
    if not grammar.alphabet:
        raise GrammarError("No alphabet")
    if not grammar.start:
        raise GrammarError("No start state")
    if grammar.start not in grammar.states:
        raise GrammarError(f"Start state '{grammar.start}' not in states")
    if not grammar.accept:
        raise GrammarError("No accept states")
    for a in grammar.accept:
        if a not in grammar.states:
            raise GrammarError(f"Accept state '{a}' not in states")
    if any(sym == "" for sym in grammar.alphabet):
        raise GrammarError("Empty symbol not allowed")

    state_index = _index_names(grammar.states, "state")
    symbol_index = _index_names(grammar.alphabet, "symbol")

    rows: List[List[int]] = [[0] * len(grammar.alphabet) for _ in grammar.states]

    # Sorted so the first reported problem does not depend on dict ordering.
    for raw in sorted(grammar.transition):
        key = TransitionKey.parse(raw)
        if key is None:
            raise GrammarError(f"Invalid transition key: {raw!r} (expected 'state,symbol')")
        src = state_index.get(key.state)
        if src is None:
            raise GrammarError(f"Transition from unknown state: {key.state!r}")
        sym = symbol_index.get(key.symbol)
        if sym is None:
            raise GrammarError(f"Transition with unknown symbol: {key.symbol!r}")
        for target in grammar.transition[raw]:
            dst = state_index.get(target)
            if dst is None:
                raise GrammarError(f"Transition to unknown state: {target!r}")
            rows[src][sym] |= bit(dst)

    accept_mask = mask_of(state_index[a] for a in grammar.accept)

    automaton = CompiledAutomaton(
        states=tuple(grammar.states),
        alphabet=tuple(grammar.alphabet),
        state_index=MappingProxyType(state_index),
        symbol_index=MappingProxyType(symbol_index),
        next=tuple(tuple(row) for row in rows),
        accept_mask=accept_mask,
        start_index=state_index[grammar.start],
    )
    log.debug(
        "compiled automaton: %d states, %d symbols, %d transition keys, accept=%s",
        len(automaton.states), len(automaton.alphabet), len(grammar.transition),
        automaton.state_names(accept_mask),
    )
    return automaton
