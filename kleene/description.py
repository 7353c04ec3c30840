"""Build automata from their external descriptions.

Two formats are accepted. The line format:

    Q            vertex names separated by whitespace
    q0           the start vertex
    F            accepting vertex names
    qi qj a      one transition per line; omit the symbol for ε
    ...

and the FSA dictionary:

    {
        'states': ['S0', 'S1'],
        'alphabet': ['a'],
        'transitions': {'S0': {'a': ['S1'], '': ['S0']}},
        'startingState': 'S0',
        'acceptingStates': ['S1']
    }

where the '' symbol is an ε transition.
"""
from typing import Dict, List, Tuple

from .automaton import Automaton, Label
from .exceptions import ConstructionError, DescriptionSyntaxError


def parse_description(text: str) -> Automaton:
    """
    Parse the line format into a raw automaton.

    Args:
        text: The description; blank lines are ignored

    Returns:
        Automaton: The automaton, transitions added in line order

    Raises:
        DescriptionSyntaxError: If a line is malformed or names an unknown vertex
    """
    lines = [(number, line.split()) for number, line in enumerate(text.splitlines(), start=1) if line.strip()]
    if len(lines) < 3:
        raise DescriptionSyntaxError("Description needs a vertex line, a start vertex line and a final vertex line")

    (states_line, states), (start_line, start), (finals_line, finals) = lines[:3]

    seen = set()
    for name in states:
        if name in seen:
            raise DescriptionSyntaxError(f"Duplicate vertex '{name}'", states_line)
        seen.add(name)

    def check(name: str, line: int) -> str:
        if name not in seen:
            raise DescriptionSyntaxError(f"Unknown vertex '{name}'", line)
        return name

    if len(start) != 1:
        raise DescriptionSyntaxError("Expected exactly one start vertex", start_line)
    check(start[0], start_line)
    for name in finals:
        check(name, finals_line)

    transitions: List[Tuple[str, str, Label]] = []
    for number, tokens in lines[3:]:
        if len(tokens) not in (2, 3):
            raise DescriptionSyntaxError("Expected 'from to [symbol]'", number)
        source, target = check(tokens[0], number), check(tokens[1], number)
        transitions.append((source, target, tokens[2] if len(tokens) == 3 else None))

    return Automaton.build(states, transitions, start[0], finals)


def validate_fsa_structure(fsa: Dict) -> Dict:
    """
    Validates that the FSA dictionary has the structure needed for conversion.

    Args:
        fsa: The FSA dictionary to validate

    Returns:
        Dict: Validation result with 'valid' boolean and optional 'error' message
    """
    if not isinstance(fsa, dict):
        return {'valid': False, 'error': 'FSA must be a dictionary'}

    required_keys = ['states', 'alphabet', 'transitions', 'startingState', 'acceptingStates']

    for key in required_keys:
        if key not in fsa:
            return {'valid': False, 'error': f'Missing required key: {key}'}

    if not isinstance(fsa['states'], list):
        return {'valid': False, 'error': 'states must be a list'}

    if not isinstance(fsa['alphabet'], list):
        return {'valid': False, 'error': 'alphabet must be a list'}

    if not isinstance(fsa['transitions'], dict):
        return {'valid': False, 'error': 'transitions must be a dictionary'}

    if not isinstance(fsa['acceptingStates'], list):
        return {'valid': False, 'error': 'acceptingStates must be a list'}

    if fsa.get('startingState') and fsa['startingState'] not in fsa['states']:
        return {'valid': False, 'error': 'Starting state not in states list'}

    for state in fsa['acceptingStates']:
        if state not in fsa['states']:
            return {'valid': False, 'error': f'Accepting state {state} not in states list'}

    for state, by_symbol in fsa['transitions'].items():
        if state not in fsa['states']:
            return {'valid': False, 'error': f'Transition source {state} not in states list'}
        if not isinstance(by_symbol, dict):
            return {'valid': False, 'error': f'Transitions for {state} must be a dictionary'}
        for symbol, targets in by_symbol.items():
            if not isinstance(targets, list):
                return {'valid': False, 'error': f'Targets of {state} on {symbol!r} must be a list'}
            for target in targets:
                if target not in fsa['states']:
                    return {'valid': False, 'error': f'Transition target {target} not in states list'}

    return {'valid': True}


def automaton_from_fsa(fsa: Dict) -> Automaton:
    """
    Build a raw automaton from an FSA dictionary.

    Raises:
        ConstructionError: If the dictionary is malformed or has no starting state
    """
    validation = validate_fsa_structure(fsa)
    if not validation['valid']:
        raise ConstructionError(f"Invalid FSA structure: {validation['error']}")

    transitions: List[Tuple[str, str, Label]] = []
    for state in fsa['states']:
        for symbol, targets in fsa['transitions'].get(state, {}).items():
            for target in targets:
                transitions.append((state, target, symbol or None))

    return Automaton.build(fsa['states'], transitions, fsa['startingState'], fsa['acceptingStates'])
