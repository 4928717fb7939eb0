from __future__ import annotations
import logging
from typing import Dict, List, Sequence, Tuple

from .bitset import iter_bits
from .engine import run, run_with_predecessors
from .models import CompiledAutomaton

log = logging.getLogger(__name__)

DEFAULT_BRANCH_LIMIT = 32

Branch = List[str]


def reconstruct_branches(
    automaton: CompiledAutomaton,
    text: str,
    final_frontier: int,
    history: Sequence[Dict[int, int]],
    limit: int = DEFAULT_BRANCH_LIMIT,
) -> List[Branch]:
    """
    Walk the predecessor history backwards from every accepting state in
    final_frontier down to step 0, collecting at most `limit` start-to-final paths.

    Discovery order: final states by ascending index, then predecessors by
    ascending index at every fork. A history whose length is not len(text) + 1
    gives an empty result.
    """
    if len(history) != len(text) + 1 or limit <= 0:
        return []

    branches: List[Branch] = []
    n = len(text)

    for final in iter_bits(final_frontier & automaton.accept_mask):
        # Stack entries: (step, state, indices of the path from step+1 to n).
        stack: List[Tuple[int, int, Tuple[int, ...]]] = [(n, final, ())]
        while stack:
            pos, state, suffix = stack.pop()
            path = (state,) + suffix
            if pos == 0:
                branches.append([automaton.states[i] for i in path])
                if len(branches) >= limit:
                    log.debug("branch limit %d reached for %r", limit, text)
                    return branches
                continue
            preds = history[pos].get(state)
            if not preds:
                continue
            # Pushed highest first so the lowest predecessor is expanded next.
            for p in reversed(list(iter_bits(preds))):
                stack.append((pos - 1, p, path))

    return branches


def accepted_branches(
    automaton: CompiledAutomaton, text: str, limit: int = DEFAULT_BRANCH_LIMIT
) -> List[Branch]:
    result = run(automaton, text)
    if not result.accepted:
        return []
    tracked = run_with_predecessors(automaton, text)
    return reconstruct_branches(automaton, text, result.final_frontier, tracked.history, limit)
