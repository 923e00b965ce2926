import logging
from collections import deque
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple

from .epsilon_closure import closure_of_indices
from .fsa_errors import StateSpaceTooLarge
from .fsa_model import TransitionTable, as_automaton
from .fsa_results import ConversionResult, StepKind, StepTrace, build_automaton, subset_state_name

logger = logging.getLogger(__name__)

DEFAULT_MAX_DFA_STATES = 10000


class StateSetArena:
    """
    Interning table for subset-construction states.

    Each distinct set of NFA state indices gets a dense DFA id the first time it is
    seen. The key is the sorted, deduplicated tuple of indices, so two sets are the
    same DFA state iff they have the same members.
    """

    def __init__(self, max_states: int = DEFAULT_MAX_DFA_STATES):
        if max_states < 1:
            raise ValueError("max_states must be at least 1")
        self.max_states = max_states
        self.members: List[Tuple[int, ...]] = []
        self._ids: Dict[Tuple[int, ...], int] = {}

    def intern(self, states: Iterable[int]) -> Tuple[int, bool]:
        """Returns (dfa id, created) for a set of NFA state indices."""
        key = tuple(sorted(set(states)))
        existing = self._ids.get(key)
        if existing is not None:
            return existing, False

        if len(self.members) >= self.max_states:
            logger.warning("Subset construction stopped at the %d state ceiling", self.max_states)
            raise StateSpaceTooLarge(
                f"Subset construction would exceed {self.max_states} DFA states",
                {'max_states': self.max_states}
            )

        dfa_id = len(self.members)
        self.members.append(key)
        self._ids[key] = dfa_id
        return dfa_id, True

    def __len__(self) -> int:
        return len(self.members)


def move(table: TransitionTable, states: Iterable[int], symbol: str) -> FrozenSet[int]:
    """All states reachable from ``states`` by one ``symbol`` transition (no epsilon moves)."""
    result: Set[int] = set()
    for state in states:
        result.update(table.moves[state].get(symbol, ()))
    return frozenset(result)


def nfa_to_dfa(nfa, max_states: int = DEFAULT_MAX_DFA_STATES) -> ConversionResult:
    """
    Converts an NFA (epsilon moves allowed) to an equivalent DFA using subset construction.

    Only subsets reachable from the start closure are built. When ``move(S, a)`` is
    empty no transition is emitted, so the result is a partial DFA: an undefined move
    rejects. Each DFA state is named after its members, e.g. ``{q0,q1}``.

    Args:
        nfa: An Automaton, or its plain description
        max_states: Ceiling on the number of DFA states

    Returns:
        ConversionResult: The DFA, the step trace and each DFA state's NFA members

    Raises:
        NoStartStateError: If the NFA does not have exactly one start state
        UnknownStateError: If a transition references an unknown state
        UnknownSymbolError: If a transition uses a symbol outside the alphabet
        StateSpaceTooLarge: If more than ``max_states`` DFA states would be needed
    """
    table = TransitionTable(as_automaton(nfa))
    arena = StateSetArena(max_states)
    trace = StepTrace()

    names: List[str] = []
    accepting: List[bool] = []
    edges: List[Tuple[int, str, int]] = []

    def describe(members: Iterable[int]) -> str:
        return subset_state_name(table.names(members))

    def register(members: Tuple[int, ...]) -> None:
        # Ids may contain ',' '{' or '}', so two different subsets can describe alike
        name = describe(members)
        suffix = 2
        while name in taken:
            name = f'{describe(members)}#{suffix}'
            suffix += 1
        taken.add(name)
        names.append(name)
        accepting.append(any(table.accepting[i] for i in members))

    taken: Set[str] = set()
    start_closure = closure_of_indices(table, [table.start])
    start_id, _ = arena.intern(start_closure)
    register(arena.members[start_id])
    start_name = names[start_id]
    trace.record(
        StepKind.CLOSURE_COMPUTED,
        f"ε-closure({table.ids[table.start]}) = {start_name}",
        seeds=[table.ids[table.start]],
        closure=table.names(start_closure),
    )
    trace.record(
        StepKind.STATE_CREATED,
        f"Start state {start_name} created" + (" (accepting)" if accepting[start_id] else ""),
        state=start_name, members=table.names(start_closure), accepting=accepting[start_id], start=True,
    )

    worklist = deque([start_id])
    while worklist:
        current = worklist.popleft()
        current_name = names[current]

        for symbol in table.alphabet:
            moved = move(table, arena.members[current], symbol)
            if not moved:
                continue

            closure = closure_of_indices(table, moved)
            target, created = arena.intern(closure)
            if created:
                register(arena.members[target])
            target_name = names[target]

            trace.record(
                StepKind.CLOSURE_COMPUTED,
                f"move({current_name}, {symbol}) = {describe(moved)}, ε-closure = {target_name}",
                state=current_name, symbol=symbol, move=table.names(moved), closure=table.names(closure),
            )
            if created:
                worklist.append(target)
                trace.record(
                    StepKind.STATE_CREATED,
                    f"New state {target_name} created" + (" (accepting)" if accepting[target] else ""),
                    state=target_name, members=table.names(closure), accepting=accepting[target], start=False,
                )
            else:
                trace.record(StepKind.STATE_REUSED, f"State {target_name} already exists", state=target_name)

            edges.append((current, symbol, target))
            trace.record(
                StepKind.TRANSITION_ADDED,
                f"δ({current_name}, {symbol}) = {target_name}",
                source=current_name, symbol=symbol, target=target_name,
            )

    dfa = build_automaton(names, start_id, accepting, table.alphabet, edges)
    logger.debug("Subset construction built %d DFA states from %d NFA states", len(names), len(table))

    state_members = {names[i]: table.names(members) for i, members in enumerate(arena.members)}
    return ConversionResult(dfa, trace.steps, state_members)
