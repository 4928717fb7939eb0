from __future__ import annotations
import logging
import queue
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .models import CompiledAutomaton

log = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class ExplicitElement:
    path: Tuple[str, ...]
    state: str


@dataclass
class ExplicitRun:
    accepted: bool
    elements: List[ExplicitElement] = field(default_factory=list)
    accept_states: Tuple[str, ...] = ()
    live: List[int] = field(default_factory=list)  # live[step] = elements alive after that step

    @property
    def branches(self) -> List[List[str]]:
        return [list(e.path) for e in self.elements if e.state in self.accept_states]


def _successors(automaton: CompiledAutomaton, element: ExplicitElement, symbol: int) -> List[ExplicitElement]:
    # Read-only lookup against the shared automaton; safe from any worker thread.
    src = automaton.state_index[element.state]
    out: List[ExplicitElement] = []
    for dst in automaton.targets(src, symbol):
        name = automaton.states[dst]
        out.append(ExplicitElement(element.path + (name,), name))
    return out


def _advance_sequential(
    automaton: CompiledAutomaton, frontier: List[ExplicitElement], symbol: int
) -> List[ExplicitElement]:
    nxt: List[ExplicitElement] = []
    for element in frontier:
        nxt.extend(_successors(automaton, element, symbol))
    return nxt


def _advance_parallel(
    pool: ThreadPoolExecutor,
    automaton: CompiledAutomaton,
    frontier: List[ExplicitElement],
    symbol: int,
) -> List[ExplicitElement]:
    results: "queue.SimpleQueue[ExplicitElement]" = queue.SimpleQueue()

    def work(element: ExplicitElement) -> None:
        for succ in _successors(automaton, element, symbol):
            results.put(succ)

    futures = [pool.submit(work, e) for e in frontier]
    # Barrier: nothing is read from `results` until every element has finished.
    wait(futures)
    for f in futures:
        f.result()

    nxt: List[ExplicitElement] = []
    while not results.empty():
        nxt.append(results.get_nowait())
    return nxt


def run_explicit(
    automaton: CompiledAutomaton, text: str, workers: Optional[int] = None
) -> ExplicitRun:
    """
    Advance every live (path, state) pair one character at a time.

    Each step fans the frontier out over a bounded thread pool and joins before
    the next character is read. Duplicate elements are kept, not merged.
    An unknown character rejects the whole run.
    """
    accept_states = tuple(automaton.state_names(automaton.accept_mask))
    start = automaton.states[automaton.start_index]
    frontier = [ExplicitElement((start,), start)]
    live = [1]

    pool: Optional[ThreadPoolExecutor] = None
    if workers is None or workers > 1:
        pool = ThreadPoolExecutor(max_workers=workers or 32)

    try:
        for pos, ch in enumerate(text):
            sym = automaton.symbol_index.get(ch)
            if sym is None:
                log.debug("explicit reject %r: %r at %d is not in the alphabet", text, ch, pos)
                return ExplicitRun(False, [], accept_states, live)

            if pool is not None and len(frontier) > 1:
                frontier = _advance_parallel(pool, automaton, frontier, sym)
            else:
                frontier = _advance_sequential(automaton, frontier, sym)
            # Completion order of the workers is arbitrary; keep results reproducible.
            frontier.sort()
            live.append(len(frontier))
            log.debug("explicit step %d (%r): %d live element(s)", pos + 1, ch, len(frontier))

            if not frontier:
                return ExplicitRun(False, [], accept_states, live)
    finally:
        if pool is not None:
            pool.shutdown(wait=True)

    accepted = any(e.state in accept_states for e in frontier)
    return ExplicitRun(accepted, frontier, accept_states, live)
