import pytest

from nfa_branches import GrammarDefinition, build_automaton


def scenario_grammar() -> GrammarDefinition:
    # q0 -a-> q1 -b-> q2 -a-> q1, accept q2: (ab)(ab)*
    return GrammarDefinition(
        states=["q0", "q1", "q2"],
        alphabet=["a", "b"],
        transition={"q0,a": ["q1"], "q1,b": ["q2"], "q2,a": ["q1"]},
        start="q0",
        accept=["q2"],
    )


@pytest.fixture
def grammar():
    return scenario_grammar()


@pytest.fixture
def automaton():
    return build_automaton(scenario_grammar())


@pytest.fixture
def ends_with_ab():
    return build_automaton(GrammarDefinition(
        states=["s", "x", "f"],
        alphabet=["a", "b"],
        transition={"s,a": ["s", "x"], "s,b": ["s"], "x,b": ["f"]},
        start="s",
        accept=["f"],
    ))


@pytest.fixture
def diamond():
    # a0 forks to l and r on x; both rejoin at f on the next x.
    return build_automaton(GrammarDefinition(
        states=["a0", "l", "r", "f"],
        alphabet=["x"],
        transition={"a0,x": ["l", "r"], "l,x": ["f"], "r,x": ["f"]},
        start="a0",
        accept=["f", "l", "r"],
    ))


@pytest.fixture
def complete_pair():
    # Every state reaches every state: 2**n accepting paths for input of length n.
    return build_automaton(GrammarDefinition(
        states=["s", "t"],
        alphabet=["x"],
        transition={"s,x": ["s", "t"], "t,x": ["s", "t"]},
        start="s",
        accept=["s", "t"],
    ))
