import itertools
import random
from typing import Iterable, Iterator, Sequence, Tuple

from automata.fsa_model import EPSILON, Automaton, State, Transition, TransitionTable


def make_automaton(states: Sequence[str],
                   alphabet: Sequence[str],
                   transitions: Iterable[Tuple[str, str, str]],
                   start: str,
                   accepting: Iterable[str] = ()) -> Automaton:
    """Short-hand for building test automata from (from, symbol, to) triples."""
    accepting = set(accepting)
    return Automaton(
        states=tuple(State(s, is_start=(s == start), is_accept=(s in accepting)) for s in states),
        alphabet=tuple(alphabet),
        transitions=tuple(Transition(*t) for t in transitions),
    )


def all_words(alphabet: Sequence[str], max_length: int) -> Iterator[Tuple[str, ...]]:
    """Every word up to max_length, shortest first."""
    for length in range(max_length + 1):
        yield from itertools.product(alphabet, repeat=length)


def accepts_from(table: TransitionTable, state: int, word: Sequence[str]) -> bool:
    """DFA run starting from an arbitrary state. Undefined moves reject."""
    for symbol in word:
        state = table.target(state, symbol)
        if state is None:
            return False
    return table.accepting[state]


def distinguishing_word(dfa: Automaton, first: str, second: str, max_length: int):
    """A word accepted from exactly one of the two states, or None if none exists up to max_length."""
    table = TransitionTable(dfa)
    s1, s2 = table.index[first], table.index[second]
    for word in all_words(dfa.alphabet, max_length):
        if accepts_from(table, s1, word) != accepts_from(table, s2, word):
            return word
    return None


def random_dfa(rng: random.Random, max_states: int = 6, alphabet: Sequence[str] = ('a', 'b'),
               density: float = 0.8) -> Automaton:
    count = rng.randint(1, max_states)
    states = [f's{i}' for i in range(count)]
    transitions = [
        (state, symbol, rng.choice(states))
        for state in states for symbol in alphabet
        if rng.random() < density
    ]
    accepting = [state for state in states if rng.random() < 0.4]
    return make_automaton(states, alphabet, transitions, 's0', accepting)


def random_nfa(rng: random.Random, max_states: int = 5, alphabet: Sequence[str] = ('a', 'b'),
               epsilon_chance: float = 0.2) -> Automaton:
    count = rng.randint(1, max_states)
    states = [f'q{i}' for i in range(count)]
    transitions = []
    for state in states:
        for symbol in alphabet:
            for target in rng.sample(states, rng.randint(0, min(2, count))):
                transitions.append((state, symbol, target))
        if rng.random() < epsilon_chance:
            transitions.append((state, EPSILON, rng.choice(states)))
    accepting = [state for state in states if rng.random() < 0.3]
    return make_automaton(states, alphabet, transitions, 'q0', accepting)
