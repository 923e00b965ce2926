from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

from .fsa_model import Automaton, State, Transition


class StepKind(str, Enum):
    CLOSURE_COMPUTED = 'ClosureComputed'
    STATE_CREATED = 'StateCreated'
    STATE_REUSED = 'StateReused'
    TRANSITION_ADDED = 'TransitionAdded'
    PARTITION_SPLIT = 'PartitionSplit'
    PARTITION_STABLE = 'PartitionStable'


@dataclass(frozen=True)
class Step:
    """One human-readable decision made while converting or minimising."""
    kind: StepKind
    description: str
    payload: Dict = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {'description': self.description, 'kind': self.kind.value, 'payload': self.payload}


class StepTrace:
    """Ordered accumulator of steps, passed explicitly through one conversion call."""

    def __init__(self):
        self._steps: List[Step] = []

    def record(self, kind: StepKind, description: str, **payload) -> Step:
        step = Step(kind, description, payload)
        self._steps.append(step)
        return step

    @property
    def steps(self) -> List[Step]:
        return list(self._steps)

    def __iter__(self):
        return iter(self._steps)

    def __len__(self):
        return len(self._steps)


class ConversionResult(NamedTuple):
    """Output of nfa_to_dfa / minimise_dfa"""
    automaton: Automaton
    steps: List[Step]
    # Output state name -> the input state ids it stands for
    state_members: Dict[str, List[str]]

    def to_dict(self) -> Dict:
        return {
            'automaton': self.automaton.to_description(),
            'steps': [step.to_dict() for step in self.steps],
            'state_members': {name: list(members) for name, members in self.state_members.items()},
        }


def subset_state_name(members: Sequence[str]) -> str:
    """Name of a subset-construction state, e.g. ``{q0,q1}``. Members are kept in the given order."""
    return '{' + ','.join(members) + '}'


def block_state_name(index: int) -> str:
    return f'P{index}'


def build_automaton(names: Sequence[str],
                    start: int,
                    accepting: Sequence[bool],
                    alphabet: Sequence[str],
                    edges: Iterable[Tuple[int, str, int]]) -> Automaton:
    """
    Turns an id-indexed automaton into an Automaton value.

    Args:
        names: Output state names, indexed by internal id
        start: Internal id of the start state
        accepting: Acceptance flag per internal id
        alphabet: Alphabet of the output automaton
        edges: (source id, symbol, target id) triples, in output order
    """
    states = tuple(
        State(id=name, is_start=(i == start), is_accept=bool(accepting[i]))
        for i, name in enumerate(names)
    )
    transitions = tuple(Transition(names[source], symbol, names[target]) for source, symbol, target in edges)
    return Automaton(states=states, alphabet=tuple(alphabet), transitions=transitions)


def summarise(automaton: Automaton) -> Dict:
    """Counts shown next to a conversion result."""
    return {
        'states_count': len(automaton.states),
        'alphabet_size': len(automaton.alphabet),
        'transitions_count': len(automaton.transitions),
        'accepting_states_count': len(automaton.accepting),
        'has_epsilon_transitions': automaton.has_epsilon_transitions,
        'is_deterministic': automaton.is_deterministic,
    }
