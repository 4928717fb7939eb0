from itertools import product

from nfa_branches import RunContext, TraceStep, run, run_with_predecessors


def all_strings(alphabet, max_len):
    for n in range(max_len + 1):
        for chars in product(alphabet, repeat=n):
            yield "".join(chars)


def test_accepts_ab(automaton):
    result = run(automaton, "ab")
    assert result.accepted
    assert automaton.state_names(result.final_frontier) == ["q2"]
    assert result.consumed == 2


def test_rejects_non_accepting_frontier(automaton):
    result = run(automaton, "a")
    assert not result.accepted
    assert automaton.state_names(result.final_frontier) == ["q1"]


def test_unknown_symbol_rejects_immediately(automaton):
    result = run(automaton, "cab", want_trace=True)
    assert not result.accepted
    assert result.consumed == 0
    assert result.final_frontier == automaton.start_mask
    assert result.trace == [TraceStep(0, None, 0b001)]


def test_unknown_symbol_mid_string_stops_there(automaton):
    result = run(automaton, "abc")
    assert not result.accepted
    assert result.consumed == 2


def test_dead_frontier(automaton):
    result = run(automaton, "bab", want_trace=True)
    assert not result.accepted
    assert result.final_frontier == 0
    assert result.consumed == 1
    assert result.trace == [TraceStep(0, None, 0b001), TraceStep(1, "b", 0)]


def test_empty_input_accepts_only_if_start_accepts(automaton, complete_pair):
    assert not run(automaton, "").accepted
    assert run(complete_pair, "").accepted


def test_trace_records_every_step(automaton):
    result = run(automaton, "ab", want_trace=True)
    assert result.trace == [
        TraceStep(0, None, 0b001),
        TraceStep(1, "a", 0b010),
        TraceStep(2, "b", 0b100),
    ]
    assert run(automaton, "ab").trace is None


def test_nondeterministic_frontier(ends_with_ab):
    result = run(ends_with_ab, "aab")
    assert result.accepted
    assert ends_with_ab.state_names(result.final_frontier) == ["s", "f"]


def test_run_is_deterministic(ends_with_ab):
    for text in all_strings("ab", 6):
        first = run(ends_with_ab, text)
        second = run(ends_with_ab, text)
        assert (first.accepted, first.final_frontier) == (second.accepted, second.final_frontier)
        assert first.accepted == text.endswith("ab")


def test_cache_reuses_frontier_symbol_pairs(ends_with_ab):
    ctx = RunContext(ends_with_ab)
    run(ends_with_ab, "bbbb", context=ctx)
    assert ctx.misses == 1
    assert ctx.hits == 3
    assert ctx.cache == {(0b001, 1): 0b001}


def test_memoized_step_matches_fresh_union(ends_with_ab):
    ctx = RunContext(ends_with_ab)
    for frontier in range(1 << len(ends_with_ab.states)):
        for sym in range(len(ends_with_ab.alphabet)):
            expected = 0
            for i in range(len(ends_with_ab.states)):
                if frontier & (1 << i):
                    expected |= ends_with_ab.next[i][sym]
            assert ctx.advance(frontier, sym) == expected
            assert ctx.advance(frontier, sym) == expected


def test_predecessor_history(automaton):
    tracked = run_with_predecessors(automaton, "ab")
    assert tracked.accepted
    assert tracked.final_frontier == 0b100
    assert tracked.history == [{0: 0}, {1: 0b001}, {2: 0b010}]


def test_predecessors_record_every_source(diamond):
    tracked = run_with_predecessors(diamond, "xx")
    assert tracked.history[1] == {1: 0b0001, 2: 0b0001}
    assert tracked.history[2] == {3: 0b0110}


def test_predecessor_run_stops_early(automaton):
    dead = run_with_predecessors(automaton, "bb")
    assert not dead.accepted
    assert dead.final_frontier == 0
    assert len(dead.history) == 1

    unknown = run_with_predecessors(automaton, "ac")
    assert not unknown.accepted
    assert len(unknown.history) == 2


def test_predecessor_run_agrees_with_run(ends_with_ab):
    for text in all_strings("abz", 4):
        fast = run(ends_with_ab, text)
        tracked = run_with_predecessors(ends_with_ab, text)
        assert fast.accepted == tracked.accepted
        assert fast.final_frontier == tracked.final_frontier
