from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from .branches import reconstruct_branches
from .builder import GrammarError, build_automaton
from .config import ConfigError, Settings, load_settings, merge_settings
from .engine import run, run_with_predecessors
from .explorer import run_explicit
from .loader import GrammarLoadError, load_grammar
from .models import CompiledAutomaton
from . import render

log = logging.getLogger(__name__)


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="nfa-branches",
        description="Test strings against an NFA loaded from a grammar file",
    )
    p.add_argument("-c", "--config", help="TOML settings file ([nfa] table)")
    p.add_argument("-f", "--file", dest="grammar", help="Grammar file, JSON or .toml (default: states.json)")
    p.add_argument("-v", "--verbose", action="store_true", default=None,
                   help="Print state sets per step (live element counts with --explicit)")
    p.add_argument("--branches", action="store_true", default=None,
                   help="Print branches for accepted strings")
    p.add_argument("--maxbranches", dest="max_branches", type=int,
                   help="Max branches to print when --branches is set (default: 32)")
    p.add_argument("--dot", help="Export reconstructed branches to a Graphviz DOT file (with --branches)")
    p.add_argument("--explicit", action="store_true",
                   help="Use the explicit path-per-branch explorer instead of the bitset engine")
    p.add_argument("--workers", type=int, help="Worker threads for --explicit")
    p.add_argument("--show-table", action="store_true", help="Print the transition table at startup")
    p.add_argument("--log-level", help="Logging level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: WARNING)")
    return p


def _print_branches(out: TextIO, branches: List[List[str]], limit: int) -> None:
    if not branches:
        print("Branches: none", file=out)
        return
    print(f"Branches (max {limit}):", file=out)
    for i, b in enumerate(branches, start=1):
        print(f"  {i:2d}: {render.format_branch(b)}", file=out)


def _export(out: TextIO, settings: Settings, automaton: CompiledAutomaton, line: str,
            branches: List[List[str]]) -> None:
    if not settings.dot or not branches:
        return
    try:
        path = render.export_dot(settings.dot, automaton, line, branches)
    except OSError as ex:
        print(f"DOT write error: {ex}", file=sys.stderr)
        return
    print(f"DOT exported to {path} (use: dot -Tpng {path} -o run.png)", file=out)


def evaluate(out: TextIO, settings: Settings, automaton: CompiledAutomaton, line: str,
             explicit: bool = False) -> bool:
    """Test one string and print the outcome the way the interactive loop does."""
    if explicit:
        explored = run_explicit(automaton, line, workers=settings.workers)
        print(f"{'Accepted' if explored.accepted else 'Rejected'}: {line!r}", file=out)
        if explored.accepted and settings.branches:
            branches = explored.branches[:settings.max_branches]
            _print_branches(out, branches, settings.max_branches)
            _export(out, settings, automaton, line, branches)
        if settings.verbose:
            print("Live elements per step:", file=out)
            print(render.live_table(line, explored.live), file=out)
        return explored.accepted

    result = run(automaton, line, want_trace=settings.verbose)
    if result.accepted:
        print(f"Accepted: {line!r}", file=out)
        if settings.branches:
            tracked = run_with_predecessors(automaton, line)
            branches = reconstruct_branches(
                automaton, line, result.final_frontier, tracked.history, settings.max_branches)
            _print_branches(out, branches, settings.max_branches)
            _export(out, settings, automaton, line, branches)
    else:
        print(f"Rejected: {line!r}", file=out)

    if settings.verbose and result.trace is not None:
        print("State sets per step:", file=out)
        print(render.step_table(automaton, result.trace), file=out)
    return result.accepted


def main(argv: Optional[List[str]] = None, stdin: Optional[TextIO] = None,
         stdout: Optional[TextIO] = None) -> int:
    args = _parser().parse_args(argv)
    inp = stdin if stdin is not None else sys.stdin
    out = stdout if stdout is not None else sys.stdout

    try:
        settings = merge_settings(load_settings(args.config), {
            "grammar": args.grammar,
            "verbose": args.verbose,
            "branches": args.branches,
            "max_branches": args.max_branches,
            "dot": args.dot,
            "workers": args.workers,
            "log_level": args.log_level,
        })
    except ConfigError as ex:
        print(f"CONFIG ERROR: {ex}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        automaton = build_automaton(load_grammar(settings.grammar))
    except GrammarLoadError as ex:
        print(f"Error reading grammar: {ex}", file=sys.stderr)
        return 1
    except GrammarError as ex:
        print(f"Error building NFA: {ex}", file=sys.stderr)
        return 2

    if args.show_table:
        print(render.format_grammar(automaton), file=out)
        print(render.transition_table(automaton), file=out)

    print("NFA ready. Enter strings to test (Ctrl+D to end):", file=out)
    try:
        for raw in inp:
            line = raw.strip()
            if not line:
                continue
            evaluate(out, settings, automaton, line, explicit=args.explicit)
    except KeyboardInterrupt:
        print("", file=out)
    except Exception as ex:  # unexpected
        log.exception("unexpected failure")
        print(f"FATAL: {type(ex).__name__}: {ex}", file=sys.stderr)
        return 99
    return 0


if __name__ == "__main__":
    sys.exit(main())
