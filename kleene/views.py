import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .conf import get_notation
from .description import automaton_from_fsa, parse_description
from .elimination import EliminationResult, automaton_to_regex
from .notation import Notation, render, render_all
from .regex_parser import parse_regex
from .simplify import simplify

logger = logging.getLogger(__name__)


def _requested_notation(data: dict) -> Notation:
    name = data.get('notation')
    if name is None:
        return get_notation()
    return Notation.from_name(name)


def _conversion_payload(result: EliminationResult, notation: Notation, include_trace: bool) -> dict:
    payload = {
        'success': True,
        'regex': render(result.pattern, notation),
        'notation': notation.value,
        'renderings': render_all(result.pattern),
        'rounds': len(result.rounds),
    }
    if include_trace:
        payload['trace'] = [
            {
                'eliminated': elimination_round.ripped,
                'edges': [
                    {'from': source, 'to': target, 'regex': render(pattern, notation)}
                    for source, target, pattern in elimination_round.edges
                ],
            }
            for elimination_round in result.rounds
        ]
    return payload


@csrf_exempt
@require_POST
def fsa_to_regex(request):
    """
    Django view to handle **FSA → regex** conversion by state elimination.

    Expects a POST request with a JSON body containing:
    - fsa: The FSA definition (states, alphabet, transitions, startingState, acceptingStates)
    - notation: Optional notation name (posix, posix_latex, math, math_latex)
    - trace: Optional flag to include every elimination round

    Returns a JSON response with the regular expression in the requested
    notation and in every other notation.
    """
    try:
        data = json.loads(request.body)
        fsa = data.get('fsa')

        if not fsa:
            return JsonResponse({'error': 'Missing FSA definition'}, status=400)

        notation = _requested_notation(data)
        result = automaton_to_regex(automaton_from_fsa(fsa))
        return JsonResponse(_conversion_payload(result, notation, bool(data.get('trace'))))

    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("FSA to regex conversion failed")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def description_to_regex(request):
    """
    Django view converting a line-format automaton description to a regex.

    Expects a POST request with a JSON body containing:
    - description: The automaton description text
    - notation: Optional notation name
    - trace: Optional flag to include every elimination round
    """
    try:
        data = json.loads(request.body)
        description = data.get('description')

        if not description:
            return JsonResponse({'error': 'Missing automaton description'}, status=400)

        notation = _requested_notation(data)
        result = automaton_to_regex(parse_description(description))
        return JsonResponse(_conversion_payload(result, notation, bool(data.get('trace'))))

    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Description to regex conversion failed")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def simplify_regex(request):
    """
    Django view returning the canonical form of a regular expression.

    Expects a POST request with a JSON body containing:
    - regex: The regular expression to simplify
    - notation: Optional notation name
    """
    try:
        data = json.loads(request.body)
        regex = data.get('regex')

        if regex is None:
            return JsonResponse({'error': 'Missing regex parameter'}, status=400)

        notation = _requested_notation(data)
        simplified = simplify(parse_regex(regex))

        return JsonResponse({
            'success': True,
            'regex': regex,
            'simplified': render(simplified, notation),
            'notation': notation.value,
            'renderings': render_all(simplified),
        })

    except ValueError as e:
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Regex simplification failed")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)
