from .epsilon_closure import epsilon_closure
from .fsa_equivalence import are_dfas_isomorphic, find_state_mapping
from .fsa_errors import (
    AutomatonError,
    NoStartStateError,
    NotDeterministicError,
    RefinementDidNotConverge,
    StateSpaceTooLarge,
    UnknownStateError,
    UnknownSymbolError,
)
from .fsa_model import EPSILON, Automaton, State, Transition
from .fsa_results import ConversionResult, Step, StepKind
from .partition_refinement import minimise_dfa
from .subset_construction import DEFAULT_MAX_DFA_STATES, nfa_to_dfa
