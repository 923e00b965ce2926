import json
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .epsilon_closure import epsilon_closure
from .fsa_errors import AutomatonError, RefinementDidNotConverge, StateSpaceTooLarge
from .fsa_model import Automaton
from .fsa_properties import complete_dfa
from .fsa_results import summarise
from .fsa_simulation import simulate_dfa, simulate_nfa
from .partition_refinement import minimise_dfa
from .subset_construction import DEFAULT_MAX_DFA_STATES, nfa_to_dfa

logger = logging.getLogger(__name__)


def _engine_error_response(error: AutomatonError) -> JsonResponse:
    if isinstance(error, StateSpaceTooLarge):
        status = 413
    elif isinstance(error, RefinementDidNotConverge):
        logger.error("Partition refinement did not converge: %s", error)
        status = 500
    else:
        status = 400
    return JsonResponse({'error': str(error), 'kind': error.kind, 'detail': error.detail}, status=status)


def _percentage(part: int, whole: int) -> float:
    return round((part / whole) * 100, 2) if whole > 0 else 0


@csrf_exempt
@require_POST
def convert_nfa_to_dfa(request):
    """
    Django view to handle NFA to DFA conversion requests.

    Expects a POST request with a JSON body containing:
    - automaton: The automaton description (can be deterministic or non-deterministic)

    Returns a JSON response with the converted DFA, the conversion steps and statistics.
    """
    try:
        data = json.loads(request.body)
        description = data.get('automaton')

        if not description:
            return JsonResponse({'error': 'Missing automaton definition'}, status=400)

        nfa = Automaton.from_description(description)
        max_states = getattr(settings, 'AUTOMATA_MAX_DFA_STATES', DEFAULT_MAX_DFA_STATES)
        result = nfa_to_dfa(nfa, max_states=max_states)

        original_stats = summarise(nfa)
        converted_stats = summarise(result.automaton)
        conversion_stats = {
            'states_added': converted_stats['states_count'] - original_stats['states_count'],
            'states_change_percentage': _percentage(
                converted_stats['states_count'] - original_stats['states_count'], original_stats['states_count']
            ),
            'transitions_added': converted_stats['transitions_count'] - original_stats['transitions_count'],
            'epsilon_transitions_removed': original_stats['has_epsilon_transitions'],
            'was_already_deterministic': original_stats['is_deterministic']
        }

        if original_stats['is_deterministic']:
            message = 'Input was already a DFA, returned equivalent DFA'
        else:
            message = 'NFA successfully converted to DFA'

        return JsonResponse({
            'success': True,
            **result.to_dict(),
            'statistics': {
                'original': original_stats,
                'converted': converted_stats,
                'conversion': conversion_stats
            },
            'message': message
        })

    except AutomatonError as e:
        return _engine_error_response(e)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Unexpected error during NFA to DFA conversion")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def min_dfa(request):
    """
    Django view to handle DFA minimisation requests.

    Expects a POST request with a JSON body containing:
    - automaton: The automaton description (must be deterministic)

    Returns a JSON response with the minimised DFA, the refinement steps and statistics.
    """
    try:
        data = json.loads(request.body)
        description = data.get('automaton')

        if not description:
            return JsonResponse({'error': 'Missing automaton definition'}, status=400)

        dfa = Automaton.from_description(description)
        result = minimise_dfa(dfa)

        original_stats = summarise(dfa)
        minimised_stats = summarise(result.automaton)
        reduction_stats = {
            'states_reduced': original_stats['states_count'] - minimised_stats['states_count'],
            'states_reduction_percentage': _percentage(
                original_stats['states_count'] - minimised_stats['states_count'], original_stats['states_count']
            ),
            'transitions_reduced': original_stats['transitions_count'] - minimised_stats['transitions_count'],
            'is_already_minimal': original_stats['states_count'] == minimised_stats['states_count']
        }

        return JsonResponse({
            'success': True,
            **result.to_dict(),
            'statistics': {
                'original': original_stats,
                'minimised': minimised_stats,
                'reduction': reduction_stats
            },
            'message': 'DFA minimised successfully' if not reduction_stats['is_already_minimal']
                       else 'DFA was already minimal'
        })

    except AutomatonError as e:
        return _engine_error_response(e)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Unexpected error during DFA minimisation")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def compute_epsilon_closure(request):
    """
    Expects a JSON body with ``automaton`` and ``states`` (a list of state ids, or one id)
    and returns the epsilon closure of those states.
    """
    try:
        data = json.loads(request.body)
        description = data.get('automaton')
        states = data.get('states')

        if not description:
            return JsonResponse({'error': 'Missing automaton definition'}, status=400)
        if states is None:
            return JsonResponse({'error': 'Missing states parameter'}, status=400)

        nfa = Automaton.from_description(description)
        closure = epsilon_closure(nfa, states)

        # Keep the declared state order
        return JsonResponse({
            'success': True,
            'closure': [state_id for state_id in nfa.state_ids if state_id in closure]
        })

    except AutomatonError as e:
        return _engine_error_response(e)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Unexpected error computing epsilon closure")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def simulate(request):
    """
    Runs an input string through an automaton.
    Automatically uses the DFA walk for deterministic automata and the NFA walk otherwise.
    """
    try:
        data = json.loads(request.body)
        description = data.get('automaton')
        input_string = data.get('input', '')

        if not description:
            return JsonResponse({'error': 'Missing automaton definition'}, status=400)

        automaton = Automaton.from_description(description)
        if automaton.is_deterministic:
            result, fsa_type = simulate_dfa(automaton, input_string), 'dfa'
        else:
            result, fsa_type = simulate_nfa(automaton, input_string), 'nfa'

        return JsonResponse({
            'accepted': result.accepted,
            'type': fsa_type,
            'path': result.path,
            'rejection_reason': result.rejection_reason,
            'rejection_position': result.rejection_position
        })

    except AutomatonError as e:
        return _engine_error_response(e)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Unexpected error during simulation")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def dfa_to_complete(request):
    """
    Django view to handle DFA completion requests.

    Returns the DFA with an explicit dead state added for every missing move.
    """
    try:
        data = json.loads(request.body)
        description = data.get('automaton')

        if not description:
            return JsonResponse({'error': 'Missing automaton definition'}, status=400)

        dfa = Automaton.from_description(description)
        completed = complete_dfa(dfa)
        dead_state_added = len(completed.states) > len(dfa.states)

        return JsonResponse({
            'success': True,
            'automaton': completed.to_description(),
            'dead_state_added': dead_state_added,
            'message': 'DFA completed by adding a dead state' if dead_state_added
                       else 'DFA was already complete, no changes needed'
        })

    except AutomatonError as e:
        return _engine_error_response(e)
    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Unexpected error during DFA completion")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)
