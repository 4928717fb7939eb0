from __future__ import annotations
import logging
from typing import Dict, List, Optional, Tuple

from .bitset import bit, iter_bits
from .models import CompiledAutomaton, PredecessorRun, RunResult, TraceStep

log = logging.getLogger(__name__)


# =============================================================================
# Per-run context
# =============================================================================

class RunContext:
    """
    State private to one run of one input string: the transition memo.

    The automaton is immutable, so a (frontier, symbol) entry can never go stale
    while the context lives. A context is never shared between runs.
    """

    def __init__(self, automaton: CompiledAutomaton):
        self.automaton = automaton
        self.cache: Dict[Tuple[int, int], int] = {}
        self.hits = 0
        self.misses = 0

    def advance(self, frontier: int, symbol: int) -> int:
        key = (frontier, symbol)
        cached = self.cache.get(key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        nxt = self.automaton.step(frontier, symbol)
        self.cache[key] = nxt
        return nxt


# =============================================================================
# Bitset run
# =============================================================================

def run(
    automaton: CompiledAutomaton,
    text: str,
    want_trace: bool = False,
    context: Optional[RunContext] = None,
) -> RunResult:
    ctx = context if context is not None else RunContext(automaton)
    curr = automaton.start_mask
    trace: Optional[List[TraceStep]] = [TraceStep(0, None, curr)] if want_trace else None

    for pos, ch in enumerate(text):
        sym = automaton.symbol_index.get(ch)
        if sym is None:
            log.debug("reject %r: %r at %d is not in the alphabet", text, ch, pos)
            return RunResult(False, curr, pos, trace)

        curr = ctx.advance(curr, sym)
        if trace is not None:
            trace.append(TraceStep(pos + 1, ch, curr))
        if curr == 0:
            log.debug("reject %r: no active state after %d symbol(s)", text, pos + 1)
            return RunResult(False, 0, pos + 1, trace)

    log.debug("run %r: cache hits=%d misses=%d", text, ctx.hits, ctx.misses)
    return RunResult(automaton.is_accepting(curr), curr, len(text), trace)


# =============================================================================
# Run with predecessor tracking
# =============================================================================

def run_with_predecessors(automaton: CompiledAutomaton, text: str) -> PredecessorRun:
    # No memo here: every step needs the per-source attribution, which a cached union loses.
    curr = automaton.start_mask
    history: List[Dict[int, int]] = [{automaton.start_index: 0}]

    for ch in text:
        sym = automaton.symbol_index.get(ch)
        if sym is None:
            return PredecessorRun(False, curr, history)

        nxt = 0
        preds: Dict[int, int] = {}
        for i in iter_bits(curr):
            reached = automaton.next[i][sym]
            nxt |= reached
            for j in iter_bits(reached):
                preds[j] = preds.get(j, 0) | bit(i)

        curr = nxt
        if curr == 0:
            return PredecessorRun(False, 0, history)
        history.append(preds)

    return PredecessorRun(automaton.is_accepting(curr), curr, history)
