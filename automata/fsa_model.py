from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from .fsa_errors import AutomatonError, NoStartStateError, UnknownStateError, UnknownSymbolError

# Marker for empty-string moves. '' is accepted on input as an alias.
EPSILON = 'ε'
EPSILON_ALIASES = frozenset({EPSILON, ''})


def normalise_symbol(symbol: str) -> str:
    if not isinstance(symbol, str):
        raise UnknownSymbolError(f"Symbols must be strings, got {symbol!r}", {'symbol': symbol})
    return EPSILON if symbol in EPSILON_ALIASES else symbol


def _state_id(value) -> str:
    # Integer ids are allowed on input, but every id is handled as a string internally
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise AutomatonError(f"State id must be a string or integer, got {value!r}", {'state': value})
    return str(value)


def _flag(entry: Mapping, key: str) -> bool:
    value = entry.get(key, False)
    if not isinstance(value, bool):
        raise AutomatonError(f"{key} must be a boolean, got {value!r}", {'state': entry.get('id'), 'key': key})
    return value


@dataclass(frozen=True)
class State:
    id: str
    is_start: bool = False
    is_accept: bool = False

    def to_dict(self) -> Dict:
        return {'id': self.id, 'isStart': self.is_start, 'isAccept': self.is_accept}


@dataclass(frozen=True)
class Transition:
    source: str
    symbol: str
    target: str

    @property
    def is_epsilon(self) -> bool:
        return self.symbol == EPSILON

    def to_dict(self) -> Dict:
        return {'from': self.source, 'symbol': self.symbol, 'to': self.target}


@dataclass(frozen=True)
class Automaton:
    """
    An immutable finite automaton (NFA or DFA).

    Construction normalises the input (epsilon aliases, duplicate alphabet symbols
    and duplicate transitions are collapsed, first occurrence wins) and then checks
    the structural invariants:

    - state ids are unique
    - exactly one state is the start state
    - every transition endpoint is a state of the automaton
    - every non-epsilon transition symbol is in the alphabet, and epsilon is not

    Determinism is not checked here; the same class is used for NFAs and DFAs.
    """
    states: Tuple[State, ...]
    alphabet: Tuple[str, ...]
    transitions: Tuple[Transition, ...] = ()
    _by_id: Dict[str, State] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        states = tuple(self.states)
        by_id: Dict[str, State] = {}
        for state in states:
            if state.id in by_id:
                raise AutomatonError(f"Duplicate state id '{state.id}'", {'state': state.id})
            by_id[state.id] = state

        starts = [state.id for state in states if state.is_start]
        if len(starts) != 1:
            raise NoStartStateError(
                f"Automaton must have exactly one start state, found {len(starts)}",
                {'start_states': starts}
            )

        alphabet: List[str] = []
        for symbol in self.alphabet:
            symbol = normalise_symbol(symbol)
            if symbol == EPSILON:
                raise UnknownSymbolError("Epsilon cannot be part of the alphabet", {'symbol': symbol})
            if symbol not in alphabet:
                alphabet.append(symbol)
        known_symbols = set(alphabet)

        transitions: List[Transition] = []
        seen: Set[Transition] = set()
        for transition in self.transitions:
            transition = Transition(transition.source, normalise_symbol(transition.symbol), transition.target)
            for endpoint in (transition.source, transition.target):
                if endpoint not in by_id:
                    raise UnknownStateError(
                        f"Transition {transition.source} -{transition.symbol}-> {transition.target} "
                        f"references unknown state '{endpoint}'",
                        {'state': endpoint}
                    )
            if not transition.is_epsilon and transition.symbol not in known_symbols:
                raise UnknownSymbolError(
                    f"Symbol '{transition.symbol}' is not in the alphabet",
                    {'symbol': transition.symbol}
                )
            if transition not in seen:
                seen.add(transition)
                transitions.append(transition)

        object.__setattr__(self, 'states', states)
        object.__setattr__(self, 'alphabet', tuple(alphabet))
        object.__setattr__(self, 'transitions', tuple(transitions))
        object.__setattr__(self, '_by_id', by_id)

    @classmethod
    def from_description(cls, description: Mapping) -> 'Automaton':
        """
        Builds an automaton from its plain description:

            {
                'states': [{'id': 'q0', 'isStart': True, 'isAccept': False}, ...],
                'alphabet': ['a', 'b'],
                'transitions': [{'from': 'q0', 'symbol': 'a', 'to': 'q1'}, ...],
                'start': 'q0'            # optional, must agree with isStart
            }

        Raises:
            AutomatonError: If the description is malformed or violates an invariant
        """
        if not isinstance(description, Mapping):
            raise AutomatonError("Automaton description must be a dictionary")

        for key in ('states', 'alphabet', 'transitions'):
            if key not in description:
                raise AutomatonError(f"Missing required key: {key}", {'key': key})
            if not isinstance(description[key], list):
                raise AutomatonError(f"{key} must be a list", {'key': key})

        states = []
        for entry in description['states']:
            if not isinstance(entry, Mapping) or 'id' not in entry:
                raise AutomatonError("Each state must be a dictionary with an 'id'", {'state': entry})
            states.append(State(
                id=_state_id(entry['id']),
                is_start=_flag(entry, 'isStart'),
                is_accept=_flag(entry, 'isAccept'),
            ))

        transitions = []
        for entry in description['transitions']:
            if not isinstance(entry, Mapping) or not all(k in entry for k in ('from', 'symbol', 'to')):
                raise AutomatonError(
                    "Each transition must be a dictionary with 'from', 'symbol' and 'to'",
                    {'transition': entry}
                )
            transitions.append(Transition(_state_id(entry['from']), entry['symbol'], _state_id(entry['to'])))

        automaton = cls(states=tuple(states), alphabet=tuple(description['alphabet']),
                        transitions=tuple(transitions))

        declared_start = description.get('start')
        if declared_start is not None and _state_id(declared_start) != automaton.start:
            raise NoStartStateError(
                f"Declared start '{declared_start}' does not match the start state '{automaton.start}'",
                {'start': declared_start}
            )
        return automaton

    def to_description(self) -> Dict:
        return {
            'states': [state.to_dict() for state in self.states],
            'alphabet': list(self.alphabet),
            'transitions': [transition.to_dict() for transition in self.transitions],
            'start': self.start,
        }

    @property
    def start(self) -> str:
        return next(state.id for state in self.states if state.is_start)

    @property
    def state_ids(self) -> Tuple[str, ...]:
        return tuple(state.id for state in self.states)

    @property
    def accepting(self) -> FrozenSet[str]:
        return frozenset(state.id for state in self.states if state.is_accept)

    @property
    def has_epsilon_transitions(self) -> bool:
        return any(transition.is_epsilon for transition in self.transitions)

    @property
    def is_deterministic(self) -> bool:
        """No epsilon moves and at most one target per (state, symbol)."""
        if self.has_epsilon_transitions:
            return False
        pairs = [(t.source, t.symbol) for t in self.transitions]
        return len(pairs) == len(set(pairs))

    def state(self, state_id: str) -> State:
        try:
            return self._by_id[state_id]
        except KeyError:
            raise UnknownStateError(f"Unknown state '{state_id}'", {'state': state_id}) from None

    def __contains__(self, state_id) -> bool:
        return state_id in self._by_id

    def targets(self, state_id: str, symbol: str) -> List[str]:
        symbol = normalise_symbol(symbol)
        return [t.target for t in self.transitions if t.source == state_id and t.symbol == symbol]


class TransitionTable:
    """
    Id-indexed view of an automaton used by the algorithms.

    States are numbered densely in declared order; ``moves[i][symbol]`` and
    ``epsilon[i]`` hold the target indices of state ``i``.
    """

    def __init__(self, automaton: Automaton):
        self.automaton = automaton
        self.ids: Tuple[str, ...] = automaton.state_ids
        self.index: Dict[str, int] = {state_id: i for i, state_id in enumerate(self.ids)}
        self.alphabet: Tuple[str, ...] = automaton.alphabet
        self.start: int = self.index[automaton.start]
        self.accepting: List[bool] = [state.is_accept for state in automaton.states]
        self.moves: List[Dict[str, Set[int]]] = [{} for _ in self.ids]
        self.epsilon: List[Set[int]] = [set() for _ in self.ids]

        for transition in automaton.transitions:
            source = self.index[transition.source]
            target = self.index[transition.target]
            if transition.is_epsilon:
                self.epsilon[source].add(target)
            else:
                self.moves[source].setdefault(transition.symbol, set()).add(target)

    def __len__(self) -> int:
        return len(self.ids)

    def indices(self, state_ids: Iterable[str]) -> Set[int]:
        """Maps state ids to indices, raising UnknownStateError for ids that are not states."""
        result = set()
        for state_id in state_ids:
            try:
                result.add(self.index[state_id])
            except (KeyError, TypeError):
                raise UnknownStateError(f"Unknown state '{state_id}'", {'state': state_id}) from None
        return result

    def names(self, indices: Iterable[int]) -> List[str]:
        return [self.ids[i] for i in sorted(indices)]

    def target(self, state: int, symbol: str) -> Optional[int]:
        """The single target of a deterministic move, or None when it is undefined."""
        targets = self.moves[state].get(symbol)
        if not targets:
            return None
        return next(iter(targets))


def as_automaton(value) -> Automaton:
    """Accepts either an Automaton or its plain description."""
    if isinstance(value, Automaton):
        return value
    return Automaton.from_description(value)
