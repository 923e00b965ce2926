from collections import deque
from typing import Dict, Optional

from .fsa_model import TransitionTable, as_automaton
from .partition_refinement import require_deterministic


def find_state_mapping(dfa1, dfa2) -> Optional[Dict[str, str]]:
    """
    Find a bijective mapping between states of two DFAs if they are isomorphic.

    Both DFAs may be partial; an undefined move only matches an undefined move.

    Args:
        dfa1: First DFA
        dfa2: Second DFA

    Returns:
        A dictionary mapping states from dfa1 to dfa2, or None if no mapping exists
    """
    first, second = as_automaton(dfa1), as_automaton(dfa2)
    require_deterministic(first)
    require_deterministic(second)

    # Quick checks
    if len(first.states) != len(second.states):
        return None
    if len(first.accepting) != len(second.accepting):
        return None
    if set(first.alphabet) != set(second.alphabet):
        return None

    table1, table2 = TransitionTable(first), TransitionTable(second)
    mapping: Dict[int, int] = {}
    used = set()
    queue = deque([(table1.start, table2.start)])

    while queue:
        state1, state2 = queue.popleft()

        if state1 in mapping:
            if mapping[state1] != state2:
                return None  # Inconsistent mapping
            continue
        if state2 in used:
            return None  # Not injective

        mapping[state1] = state2
        used.add(state2)

        if table1.accepting[state1] != table2.accepting[state2]:
            return None

        for symbol in first.alphabet:
            target1 = table1.target(state1, symbol)
            target2 = table2.target(state2, symbol)
            if (target1 is None) != (target2 is None):
                return None
            if target1 is not None:
                queue.append((target1, target2))

    # Unreachable states cannot be matched this way
    if len(mapping) != len(table1):
        return None

    return {table1.ids[s1]: table2.ids[s2] for s1, s2 in mapping.items()}


def are_dfas_isomorphic(dfa1, dfa2) -> bool:
    """
    Check if two DFAs are isomorphic (structurally identical up to state renaming).
    """
    return find_state_mapping(dfa1, dfa2) is not None
