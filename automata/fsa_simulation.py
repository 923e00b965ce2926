from typing import List, NamedTuple, Optional, Sequence, Set, Union

from .epsilon_closure import closure_of_indices
from .fsa_model import TransitionTable, as_automaton
from .partition_refinement import require_deterministic

Word = Union[str, Sequence[str]]


class SimulationResult(NamedTuple):
    """
    Outcome of running a word through an automaton.

    For a DFA ``path`` holds the (state, symbol, next_state) steps taken; for an NFA it
    holds the sorted list of active states before the first symbol and after each one.
    """
    accepted: bool
    path: List
    rejection_reason: Optional[str] = None
    rejection_position: Optional[int] = None


def _symbols(word: Word) -> List[str]:
    # A string is read one character per symbol
    return list(word)


def simulate_dfa(dfa, word: Word) -> SimulationResult:
    """
    Runs a word through a (possibly partial) DFA. An undefined move rejects.

    Raises:
        UnknownSymbolError / NotDeterministicError: If the automaton is not a DFA
    """
    automaton = as_automaton(dfa)
    require_deterministic(automaton)
    table = TransitionTable(automaton)

    current = table.start
    path = []
    symbols = _symbols(word)

    for position, symbol in enumerate(symbols):
        if symbol not in table.alphabet:
            return SimulationResult(False, path, f"Symbol '{symbol}' not in alphabet", position)

        target = table.target(current, symbol)
        if target is None:
            return SimulationResult(
                False, path,
                f"No transition defined for symbol '{symbol}' from state '{table.ids[current]}'",
                position
            )

        path.append((table.ids[current], symbol, table.ids[target]))
        current = target

    if table.accepting[current]:
        return SimulationResult(True, path)
    return SimulationResult(
        False, path, f"Ended in non-accepting state '{table.ids[current]}'", len(symbols)
    )


def simulate_nfa(nfa, word: Word) -> SimulationResult:
    """Runs a word through an NFA by tracking the set of active states, epsilon moves included."""
    table = TransitionTable(as_automaton(nfa))
    current = closure_of_indices(table, [table.start])
    path = [table.names(current)]
    symbols = _symbols(word)

    for position, symbol in enumerate(symbols):
        if symbol not in table.alphabet:
            return SimulationResult(False, path, f"Symbol '{symbol}' not in alphabet", position)

        reached: Set[int] = set()
        for state in current:
            reached.update(table.moves[state].get(symbol, ()))
        current = closure_of_indices(table, reached)
        path.append(table.names(current))

        if not current:
            return SimulationResult(False, path, f"No transitions possible on symbol '{symbol}'", position)

    if any(table.accepting[state] for state in current):
        return SimulationResult(True, path)
    return SimulationResult(False, path, "No active state is accepting", len(symbols))


def accepts(automaton, word: Word) -> bool:
    """True if the automaton accepts the word, using the DFA or NFA walk as appropriate."""
    automaton = as_automaton(automaton)
    if automaton.is_deterministic:
        return simulate_dfa(automaton, word).accepted
    return simulate_nfa(automaton, word).accepted
