from .models import GrammarDefinition, TransitionKey, CompiledAutomaton, TraceStep, RunResult, PredecessorRun
from .builder import GrammarError, build_automaton
from .engine import RunContext, run, run_with_predecessors
from .branches import DEFAULT_BRANCH_LIMIT, reconstruct_branches, accepted_branches
from .explorer import ExplicitElement, ExplicitRun, run_explicit
from .loader import GrammarLoadError, load_grammar

__all__ = [
    "GrammarDefinition",
    "TransitionKey",
    "CompiledAutomaton",
    "TraceStep",
    "RunResult",
    "PredecessorRun",
    "GrammarError",
    "build_automaton",
    "RunContext",
    "run",
    "run_with_predecessors",
    "DEFAULT_BRANCH_LIMIT",
    "reconstruct_branches",
    "accepted_branches",
    "ExplicitElement",
    "ExplicitRun",
    "run_explicit",
    "GrammarLoadError",
    "load_grammar",
]
