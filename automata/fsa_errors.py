from typing import Dict, Optional


class AutomatonError(ValueError):
    """
    Base class for every error raised by the automata engine.

    Args:
        message: Short diagnostic message
        detail: The offending id/symbol (or other small payload) that caused the error
    """

    def __init__(self, message: str, detail: Optional[Dict] = None):
        super().__init__(message)
        self.detail = detail or {}

    @property
    def kind(self) -> str:
        return type(self).__name__


class NoStartStateError(AutomatonError):
    """The automaton does not have exactly one start state."""


class UnknownStateError(AutomatonError):
    """A transition or closure request references a state that does not exist."""


class UnknownSymbolError(AutomatonError):
    """A symbol outside the alphabet was used, or epsilon was used where it is forbidden."""


class NotDeterministicError(AutomatonError):
    """More than one target was given for a (state, symbol) pair of a DFA."""


class RefinementDidNotConverge(AutomatonError):
    """Partition refinement exceeded its iteration bound. Indicates a bug, not bad input."""


class StateSpaceTooLarge(AutomatonError):
    """Subset construction would exceed the configured DFA state ceiling."""
