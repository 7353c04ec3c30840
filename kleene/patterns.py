import math
from abc import ABC
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

INFINITY = math.inf


@dataclass(frozen=True)
class Tag:
    """Opaque symbol. Tags are never merged with neighbouring string literals."""
    name: str

    def __str__(self) -> str:
        return self.name


Symbol = Union[str, Tag]
Bound = Union[int, float]


class Pattern(ABC):
    """Base class for regular-expression trees.

    Patterns are immutable and compare by structure, so two separately built
    trees for the same written expression are equal.
    """

    def render(self, notation=None) -> str:
        """Render the pattern as text.

        Args:
            notation: A Notation or notation name. Defaults to the globally
                configured notation.
        """
        from .notation import render
        return render(self, notation)

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Literal(Pattern):
    """A single symbol, or a run of string symbols folded together."""
    symbol: Symbol


@dataclass(frozen=True)
class EmptySet(Pattern):
    """The language with no strings."""


@dataclass(frozen=True)
class Epsilon(Pattern):
    """The language containing only the empty string."""


@dataclass(frozen=True)
class Or(Pattern):
    """Union of the member patterns."""
    patterns: Tuple[Pattern, ...]

    def __init__(self, patterns: Iterable[Pattern] = ()):
        object.__setattr__(self, 'patterns', tuple(patterns))


@dataclass(frozen=True)
class Concat(Pattern):
    """Concatenation of the member patterns, in order."""
    patterns: Tuple[Pattern, ...]

    def __init__(self, patterns: Iterable[Pattern] = ()):
        object.__setattr__(self, 'patterns', tuple(patterns))


@dataclass(frozen=True)
class Quantified(Pattern):
    """Between `lower` and `upper` repetitions of `pattern`.

    `upper` may be INFINITY. (0, INFINITY) is the Kleene star, (1, INFINITY)
    is plus and (0, 1) is optional.
    """
    lower: Bound
    upper: Bound
    pattern: Pattern


def star(pattern: Pattern) -> Quantified:
    return Quantified(0, INFINITY, pattern)


def plus(pattern: Pattern) -> Quantified:
    return Quantified(1, INFINITY, pattern)


def optional(pattern: Pattern) -> Quantified:
    return Quantified(0, 1, pattern)


def as_pattern(label: Optional[Union[Pattern, Symbol]]) -> Pattern:
    """Coerce a transition label into a Pattern.

    None and the empty string stand for an epsilon transition, any other
    string or Tag becomes a Literal.
    """
    if isinstance(label, Pattern):
        return label
    if label is None or label == '' or label == 'ε':
        return Epsilon()
    if isinstance(label, (str, Tag)):
        return Literal(label)
    raise TypeError(f"Cannot use {label!r} as a transition label")
