from collections import deque
from typing import List, Set

from .fsa_model import Automaton, State, Transition, TransitionTable, as_automaton
from .partition_refinement import require_deterministic


def is_complete(fsa) -> bool:
    """
    Checks if the FSA is complete.

    An FSA is complete if for each state and each symbol, there is at least one transition.
    Epsilon transitions are ignored for the completeness check.
    """
    automaton = as_automaton(fsa)
    defined = {(t.source, t.symbol) for t in automaton.transitions if not t.is_epsilon}
    return all((state, symbol) in defined for state in automaton.state_ids for symbol in automaton.alphabet)


def reachable_states(fsa) -> Set[str]:
    """States reachable from the start state, following epsilon moves as well."""
    automaton = as_automaton(fsa)
    table = TransitionTable(automaton)

    reachable = {table.start}
    queue = deque([table.start])
    while queue:
        current = queue.popleft()
        targets = set(table.epsilon[current])
        for symbol_targets in table.moves[current].values():
            targets |= symbol_targets
        for target in targets:
            if target not in reachable:
                reachable.add(target)
                queue.append(target)

    return {table.ids[i] for i in reachable}


def remove_unreachable_states(fsa) -> Automaton:
    """Remove states that are unreachable from the start state."""
    automaton = as_automaton(fsa)
    reachable = reachable_states(automaton)

    return Automaton(
        states=tuple(state for state in automaton.states if state.id in reachable),
        alphabet=automaton.alphabet,
        transitions=tuple(t for t in automaton.transitions if t.source in reachable),
    )


def complete_dfa(dfa) -> Automaton:
    """
    Completes a DFA by adding a dead state and the missing transitions, if any are missing.

    The dead state is called ``DEAD`` (``DEAD_1``, ``DEAD_2``, ... if that name is taken);
    it is non-accepting and loops to itself on every symbol.

    Raises:
        UnknownSymbolError / NotDeterministicError: If the input is not a DFA
    """
    automaton = as_automaton(dfa)
    require_deterministic(automaton)

    if is_complete(automaton):
        return automaton

    dead_state_name = "DEAD"
    counter = 1
    while dead_state_name in automaton:
        dead_state_name = f"DEAD_{counter}"
        counter += 1

    defined = {(t.source, t.symbol) for t in automaton.transitions}
    added: List[Transition] = [
        Transition(state, symbol, dead_state_name)
        for state in automaton.state_ids + (dead_state_name,)
        for symbol in automaton.alphabet
        if (state, symbol) not in defined
    ]

    return Automaton(
        states=automaton.states + (State(dead_state_name),),
        alphabet=automaton.alphabet,
        transitions=automaton.transitions + tuple(added),
    )
