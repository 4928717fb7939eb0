from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from .bitset import bit, iter_bits, names_of


# =============================================================================
# Declarative grammar (what the user writes in states.json / states.toml)
# =============================================================================

class TransitionKey(NamedTuple):
    state: str
    symbol: str

    @classmethod
    def parse(cls, raw: str) -> Optional["TransitionKey"]:
        # "q0,a" -> ("q0", "a"); anything without exactly one comma is malformed.
        parts = raw.split(",")
        if len(parts) != 2:
            return None
        return cls(parts[0], parts[1])


@dataclass
class GrammarDefinition:
    """
    The grammar as declared: names only, nothing indexed yet.

    transition maps the composite "state,symbol" key to its list of target states.
    Validation is the builder's job; this class only carries the data.
    """
    states: List[str] = field(default_factory=list)
    alphabet: List[str] = field(default_factory=list)
    transition: Dict[str, List[str]] = field(default_factory=dict)
    start: str = ""
    accept: List[str] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GrammarDefinition":
        transition = data.get("transition") or {}
        return cls(
            states=list(data.get("states") or []),
            alphabet=list(data.get("alphabet") or []),
            transition={k: list(v) for k, v in transition.items()},
            start=data.get("start") or "",
            accept=list(data.get("accept") or []),
        )


# =============================================================================
# Compiled automaton (immutable, shared by every run)
# =============================================================================

@dataclass(frozen=True)
class CompiledAutomaton:
    states: Tuple[str, ...]
    alphabet: Tuple[str, ...]
    state_index: Mapping[str, int]
    symbol_index: Mapping[str, int]
    next: Tuple[Tuple[int, ...], ...]  # next[state][symbol] -> bitmask of targets
    accept_mask: int
    start_index: int

    @property
    def start_mask(self) -> int:
        return bit(self.start_index)

    def targets(self, state: int, symbol: int) -> List[int]:
        return list(iter_bits(self.next[state][symbol]))

    def step(self, frontier: int, symbol: int) -> int:
        # Plain union over the frontier, no memoization.
        out = 0
        for i in iter_bits(frontier):
            out |= self.next[i][symbol]
        return out

    def is_accepting(self, frontier: int) -> bool:
        return (frontier & self.accept_mask) != 0

    def state_names(self, mask: int) -> List[str]:
        return names_of(mask, self.states)


# =============================================================================
# Run results
# =============================================================================

@dataclass(frozen=True)
class TraceStep:
    step: int
    symbol: Optional[str]  # None for step 0
    frontier: int


@dataclass
class RunResult:
    accepted: bool
    final_frontier: int
    consumed: int  # characters actually read before the run stopped
    trace: Optional[List[TraceStep]] = None


@dataclass
class PredecessorRun:
    accepted: bool
    final_frontier: int
    # history[step][target] -> bitmask of source states at step - 1
    history: List[Dict[int, int]]
