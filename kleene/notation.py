"""Textual notations for patterns.

Rendering is presentation only: the four notations spell the same tree with
different operator symbols, and every one of them parenthesizes by operator
precedence (union binds loosest, then concatenation, then repetition).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple, Union

from .exceptions import UnsimplifiablePatternError
from .patterns import INFINITY, Concat, EmptySet, Epsilon, Literal, Or, Pattern, Quantified, Tag

UNION, CONCAT, ATOM = 0, 1, 2

LATEX_SPECIALS = {
    '\\': r'\textbackslash{}',
    '{': r'\{',
    '}': r'\}',
    '$': r'\$',
    '&': r'\&',
    '#': r'\#',
    '_': r'\_',
    '%': r'\%',
    '^': r'\^{}',
    '~': r'\~{}',
}


class Notation(Enum):
    POSIX = 'posix'
    POSIX_LATEX = 'posix_latex'
    MATH = 'math'
    MATH_LATEX = 'math_latex'

    @classmethod
    def from_name(cls, name: Union['Notation', str]) -> 'Notation':
        """Look up a notation by its value, e.g. 'math_latex'."""
        if isinstance(name, Notation):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            choices = ', '.join(notation.value for notation in cls)
            raise ValueError(f"Unknown notation '{name}'. Expected one of: {choices}")


def _latex_escape(text: str) -> str:
    return ''.join(LATEX_SPECIALS.get(char, char) for char in text)


@dataclass(frozen=True)
class Spelling:
    """Operator symbols for one notation."""
    empty_set: str
    epsilon: str
    union: str
    star: str
    plus: str
    # None spells x? as a union with epsilon
    optional: Optional[str]
    exact: str
    at_least: str
    between: str
    escape: Callable[[str], str]


SPELLINGS = {
    Notation.POSIX: Spelling(
        empty_set='[]', epsilon='()', union='|',
        star='*', plus='+', optional='?',
        exact='{{{0}}}', at_least='{{{0},}}', between='{{{0},{1}}}',
        escape=lambda text: text,
    ),
    Notation.POSIX_LATEX: Spelling(
        empty_set='[]', epsilon='()', union=r' \mid ',
        star='^{*}', plus='^{+}', optional='^{?}',
        exact=r'\{{{0}\}}', at_least=r'\{{{0},\}}', between=r'\{{{0},{1}\}}',
        escape=_latex_escape,
    ),
    Notation.MATH: Spelling(
        empty_set='Ø', epsilon='ε', union=' ∪ ',
        star='*', plus='⁺', optional=None,
        exact='^{0}', at_least='^{{{0},}}', between='^{{{0},{1}}}',
        escape=lambda text: text,
    ),
    Notation.MATH_LATEX: Spelling(
        empty_set=r'\emptyset', epsilon=r'\varepsilon', union=r' \cup ',
        star='^{*}', plus='^{+}', optional=None,
        exact='^{{{0}}}', at_least='^{{{0},}}', between='^{{{0},{1}}}',
        escape=_latex_escape,
    ),
}


def _format_bound(bound) -> str:
    return str(int(bound))


def _quantifier(spelling: Spelling, lower, upper) -> str:
    if lower == 0 and upper == INFINITY:
        return spelling.star
    if lower == 1 and upper == INFINITY:
        return spelling.plus
    if lower == 0 and upper == 1 and spelling.optional is not None:
        return spelling.optional
    if lower == upper:
        return spelling.exact.format(_format_bound(lower))
    if upper == INFINITY:
        return spelling.at_least.format(_format_bound(lower))
    return spelling.between.format(_format_bound(lower), _format_bound(upper))


def _wrap(text: str, level: int, required: int) -> str:
    if level < required:
        return f"({text})"
    return text


def _render(pattern: Pattern, spelling: Spelling) -> Tuple[str, int]:
    """Return the text of `pattern` together with its precedence level."""
    if isinstance(pattern, Literal):
        if isinstance(pattern.symbol, Tag):
            return spelling.escape(pattern.symbol.name), ATOM
        text = spelling.escape(pattern.symbol)
        return text, ATOM if len(pattern.symbol) <= 1 else CONCAT

    if isinstance(pattern, EmptySet):
        return spelling.empty_set, ATOM

    if isinstance(pattern, Epsilon):
        return spelling.epsilon, ATOM

    if isinstance(pattern, Or):
        if not pattern.patterns:
            return spelling.empty_set, ATOM
        if len(pattern.patterns) == 1:
            return _render(pattern.patterns[0], spelling)
        parts = [_render(member, spelling)[0] for member in pattern.patterns]
        return spelling.union.join(parts), UNION

    if isinstance(pattern, Concat):
        if not pattern.patterns:
            return spelling.epsilon, ATOM
        if len(pattern.patterns) == 1:
            return _render(pattern.patterns[0], spelling)
        parts = [_wrap(*_render(member, spelling), CONCAT) for member in pattern.patterns]
        return ''.join(parts), CONCAT

    if isinstance(pattern, Quantified):
        text, level = _render(pattern.pattern, spelling)
        if pattern.lower == 0 and pattern.upper == 1 and spelling.optional is None:
            # x? has no operator in formal notation
            return f"({text}{spelling.union}{spelling.epsilon})", ATOM
        # Nested repetitions such as (a{2})* always keep their parentheses
        if isinstance(pattern.pattern, Quantified):
            level = CONCAT
        return _wrap(text, level, ATOM) + _quantifier(spelling, pattern.lower, pattern.upper), ATOM

    raise UnsimplifiablePatternError(pattern)


def render(pattern: Pattern, notation: Optional[Union[Notation, str]] = None) -> str:
    """
    Render a pattern in the given notation.

    Args:
        pattern: The pattern to render
        notation: A Notation or its name. When omitted the notation from
            kleene.conf.get_notation() is used.

    Returns:
        str: The textual form of the pattern
    """
    if notation is None:
        from .conf import get_notation
        notation = get_notation()
    return _render(pattern, SPELLINGS[Notation.from_name(notation)])[0]


def render_all(pattern: Pattern) -> dict:
    """Render a pattern in every notation, keyed by notation name."""
    return {notation.value: render(pattern, notation) for notation in Notation}
