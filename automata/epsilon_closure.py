from typing import FrozenSet, Iterable, Union

from .fsa_model import Automaton, TransitionTable


def closure_of_indices(table: TransitionTable, seeds: Iterable[int]) -> FrozenSet[int]:
    """Epsilon closure over state indices. Each state is expanded at most once."""
    closure = set(seeds)
    stack = list(closure)

    while stack:
        state = stack.pop()
        for target in table.epsilon[state]:
            if target not in closure:
                closure.add(target)
                stack.append(target)

    return frozenset(closure)


def epsilon_closure(nfa: Union[Automaton, TransitionTable], states: Iterable[str]) -> FrozenSet[str]:
    """
    Computes the epsilon closure of a set of states.

    The result is the smallest superset of ``states`` closed under following epsilon
    transitions. Closure is idempotent and monotone. An empty input gives an empty closure.

    Args:
        nfa: The automaton (or an already built TransitionTable for it)
        states: State ids to start from; a single id may be passed as a string

    Returns:
        FrozenSet[str]: The ids of the states in the closure

    Raises:
        UnknownStateError: If any id is not a state of the automaton
    """
    table = nfa if isinstance(nfa, TransitionTable) else TransitionTable(nfa)
    if isinstance(states, str):
        states = [states]
    closure = closure_of_indices(table, table.indices(states))
    return frozenset(table.ids[i] for i in closure)
