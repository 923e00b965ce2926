import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .fsa_errors import NotDeterministicError, RefinementDidNotConverge, UnknownSymbolError
from .fsa_model import EPSILON, Automaton, TransitionTable, as_automaton
from .fsa_results import ConversionResult, StepKind, StepTrace, block_state_name, build_automaton

logger = logging.getLogger(__name__)


def require_deterministic(dfa: Automaton) -> None:
    """Raises if ``dfa`` has epsilon moves or more than one target for a (state, symbol) pair."""
    targets: Dict[Tuple[str, str], str] = {}
    for transition in dfa.transitions:
        if transition.is_epsilon:
            raise UnknownSymbolError(
                f"DFA transitions cannot use epsilon (from state '{transition.source}')",
                {'state': transition.source, 'symbol': EPSILON}
            )
        key = (transition.source, transition.symbol)
        if key in targets and targets[key] != transition.target:
            raise NotDeterministicError(
                f"DFA minimisation requires a deterministic FSA: state '{transition.source}' "
                f"has more than one transition on '{transition.symbol}'",
                {'state': transition.source, 'symbol': transition.symbol}
            )
        targets[key] = transition.target


def minimise_dfa(dfa) -> ConversionResult:
    """
    Minimises a DFA by partition refinement (Moore's algorithm).

    The DFA may be partial. While refining, an undefined move is read as a move into
    an implicit non-accepting sink that loops on every symbol, so a state with a
    missing move and a state moving into a dead state are treated alike. The sink is
    never part of the output.

    Every iteration computes the signature of each state (the block each symbol leads
    to) against a snapshot of the current partition and only then replaces the
    partition, so a split never sees a half-updated partition.

    Unreachable states are kept; use remove_unreachable_states first to drop them.

    Args:
        dfa: An Automaton, or its plain description

    Returns:
        ConversionResult: The minimal DFA (states named P0, P1, ...), the step trace
        and the original states merged into each block

    Raises:
        UnknownSymbolError: If a transition uses epsilon or a symbol outside the alphabet
        NotDeterministicError: If a (state, symbol) pair has more than one target
        RefinementDidNotConverge: If refinement exceeds its iteration bound
    """
    automaton = as_automaton(dfa)
    require_deterministic(automaton)
    table = TransitionTable(automaton)
    alphabet = table.alphabet
    real_count = len(table)

    successors: List[Tuple[Optional[int], ...]] = [
        tuple(table.target(state, symbol) for symbol in alphabet) for state in range(real_count)
    ]
    sink: Optional[int] = None
    if any(target is None for row in successors for target in row):
        sink = real_count
    delta: List[Tuple[int, ...]] = [tuple(sink if t is None else t for t in row) for row in successors]
    accepting = list(table.accepting)
    if sink is not None:
        delta.append(tuple(sink for _ in alphabet))
        accepting.append(False)
    size = len(delta)

    trace = StepTrace()

    def members(block: Sequence[int]) -> List[str]:
        return [table.ids[s] for s in block if s != sink]

    def show(block: Sequence[int]) -> str:
        return '{' + ', '.join(members(block)) + '}'

    accept_block = [s for s in range(size) if accepting[s]]
    reject_block = [s for s in range(size) if not accepting[s]]
    blocks: List[List[int]] = [block for block in (accept_block, reject_block) if block]
    trace.record(
        StepKind.PARTITION_SPLIT,
        f"Initial partition: accepting {show(accept_block)}, non-accepting {show(reject_block)}",
        iteration=0, blocks=[members(block) for block in blocks if members(block)],
    )

    for iteration in range(1, size + 1):
        block_of = [0] * size
        for index, block in enumerate(blocks):
            for state in block:
                block_of[state] = index

        refined: List[List[int]] = []
        splits: List[Tuple[List[int], List[List[int]]]] = []
        for block in blocks:
            if len(block) == 1:
                refined.append(block)
                continue
            groups: Dict[Tuple[int, ...], List[int]] = {}
            for state in block:
                signature = tuple(block_of[target] for target in delta[state])
                groups.setdefault(signature, []).append(state)
            refined.extend(groups.values())
            if len(groups) > 1:
                splits.append((block, list(groups.values())))

        if not splits:
            trace.record(
                StepKind.PARTITION_STABLE,
                f"Iteration {iteration}: no block can be split, partition is stable",
                iteration=iteration, blocks=[members(block) for block in blocks if members(block)],
            )
            break

        for block, parts in splits:
            # Splitting off the sink alone is not visible in the output
            if sum(1 for part in parts if members(part)) < 2:
                continue
            trace.record(
                StepKind.PARTITION_SPLIT,
                f"Iteration {iteration}: block {show(block)} split into "
                + ' | '.join(show(part) for part in parts if members(part)),
                iteration=iteration, block=members(block), into=[members(part) for part in parts if members(part)],
            )
        blocks = refined
    else:
        raise RefinementDidNotConverge(
            f"Partition refinement did not converge within {size} iterations",
            {'iterations': size}
        )

    final_blocks = sorted((block for block in blocks if members(block)), key=min)
    output_of: Dict[int, int] = {}
    for output_id, block in enumerate(final_blocks):
        for state in block:
            output_of[state] = output_id

    edges: List[Tuple[int, str, int]] = []
    for output_id, block in enumerate(final_blocks):
        for position, symbol in enumerate(alphabet):
            target = next(
                (successors[s][position] for s in block if s != sink and successors[s][position] is not None),
                None
            )
            if target is not None:
                edges.append((output_id, symbol, output_of[target]))

    names = [block_state_name(i) for i in range(len(final_blocks))]
    result = build_automaton(
        names,
        output_of[table.start],
        [accepting[block[0]] for block in final_blocks],
        alphabet,
        edges,
    )
    logger.debug("Minimised %d DFA states to %d in %d iterations", real_count, len(names), iteration)

    state_members = {names[i]: members(block) for i, block in enumerate(final_blocks)}
    return ConversionResult(result, trace.steps, state_members)
