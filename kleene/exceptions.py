"""Exceptions raised by the pattern algebra and the elimination engine."""

from typing import Optional


class KleeneError(Exception):
    """Base exception for all conversion errors."""

    pass


class ConstructionError(KleeneError, ValueError):
    """Raised when an automaton is built or generalized from malformed input."""

    pass


class GNFAInvariantError(KleeneError, RuntimeError):
    """Raised when state elimination finds the graph is not a complete GNFA.

    The offending ordered vertex pair is kept on the exception so a caller
    can tell which edge was expected.
    """

    def __init__(self, message: str, source: Optional[str] = None, target: Optional[str] = None) -> None:
        self.source = source
        self.target = target
        super().__init__(message)

    def __str__(self) -> str:
        if self.source is not None and self.target is not None:
            return f"{super().__str__()} (edge {self.source} -> {self.target})"
        return super().__str__()


class UnsimplifiablePatternError(KleeneError, TypeError):
    """Raised when a pattern kind has no simplification or rendering rule."""

    def __init__(self, pattern: object) -> None:
        self.pattern = pattern
        super().__init__(f"No rule for pattern of type {type(pattern).__name__}")


class PatternSyntaxError(KleeneError, ValueError):
    """Raised when a regular expression cannot be parsed."""

    def __init__(self, message: str, position: int = -1) -> None:
        self.position = position
        super().__init__(message)

    def __str__(self) -> str:
        if self.position >= 0:
            return f"{super().__str__()} at position {self.position}"
        return super().__str__()


class DescriptionSyntaxError(KleeneError, ValueError):
    """Raised when a textual automaton description is malformed."""

    def __init__(self, message: str, line: int = -1) -> None:
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        if self.line >= 0:
            return f"{super().__str__()} on line {self.line}"
        return super().__str__()
