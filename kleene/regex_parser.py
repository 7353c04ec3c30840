from typing import List, Optional

from .exceptions import PatternSyntaxError
from .patterns import INFINITY, Concat, EmptySet, Epsilon, Literal, Or, Pattern, Quantified

POSTFIX_OPERATORS = ['*', '+', '?', '{']
RESERVED = ['|', '(', ')', '*', '+', '?', '{', '}']


class RegexParser:
    """Recursive descent parser turning a regex string into a Pattern tree.

    The tree is returned exactly as written; pass it through simplify() for
    the canonical form.
    """

    def __init__(self, regex: str):
        self.regex = regex
        self.pos = 0

    def peek(self) -> Optional[str]:
        """Look at current character without consuming."""
        return self.regex[self.pos] if self.pos < len(self.regex) else None

    def consume(self) -> Optional[str]:
        """Consume and return current character."""
        if self.pos < len(self.regex):
            char = self.regex[self.pos]
            self.pos += 1
            return char
        return None

    def parse(self) -> Pattern:
        """Parse the whole regex and return the pattern tree."""
        if not self.regex:
            return Epsilon()

        if self.regex[0] in POSTFIX_OPERATORS:
            raise PatternSyntaxError(f"Regex cannot start with '{self.regex[0]}'", 0)

        result = self.parse_union()
        if self.pos < len(self.regex):
            raise PatternSyntaxError(f"Unexpected character '{self.regex[self.pos]}'", self.pos)
        return result

    def parse_union(self) -> Pattern:
        """Parse union (|) - lowest precedence."""
        alternatives = [self.parse_concat()]

        while self.peek() == '|':
            self.consume()
            if self.peek() in POSTFIX_OPERATORS:
                raise PatternSyntaxError(f"Unexpected '{self.peek()}' after '|'", self.pos)
            alternatives.append(self.parse_concat())

        if len(alternatives) == 1:
            return alternatives[0]
        return Or(alternatives)

    def parse_concat(self) -> Pattern:
        """Parse concatenation - implicit, higher precedence than union."""
        factors: List[Pattern] = []
        while self.peek() is not None and self.peek() not in ['|', ')']:
            factors.append(self.parse_postfix())

        if not factors:
            return Epsilon()
        if len(factors) == 1:
            return factors[0]
        return Concat(factors)

    def parse_postfix(self) -> Pattern:
        """Parse postfix operators (*, +, ?, {n,m}) - highest precedence."""
        inner = self.parse_atom()

        while self.peek() in POSTFIX_OPERATORS:
            operator = self.consume()
            if operator == '*':
                inner = Quantified(0, INFINITY, inner)
            elif operator == '+':
                inner = Quantified(1, INFINITY, inner)
            elif operator == '?':
                inner = Quantified(0, 1, inner)
            else:
                lower, upper = self.parse_bounds()
                inner = Quantified(lower, upper, inner)

        return inner

    def parse_bounds(self):
        """Parse the rest of {n}, {n,} or {n,m} after the opening brace."""
        start = self.pos - 1
        lower = self.parse_number()
        if lower is None:
            raise PatternSyntaxError("Expected a repetition count after '{'", self.pos)

        upper = lower
        if self.peek() == ',':
            self.consume()
            upper = self.parse_number()
            if upper is None:
                upper = INFINITY

        if self.peek() != '}':
            raise PatternSyntaxError("Expected '}'", self.pos)
        self.consume()

        if upper < lower:
            raise PatternSyntaxError(f"Repetition bounds {{{lower},{upper}}} are out of order", start)
        return lower, upper

    def parse_number(self) -> Optional[int]:
        digits = ''
        while self.peek() is not None and self.peek().isdigit():
            digits += self.consume()
        return int(digits) if digits else None

    def parse_atom(self) -> Pattern:
        """Parse atomic expressions."""
        char = self.peek()

        if char == '(':
            self.consume()

            # () is the empty string
            if self.peek() == ')':
                self.consume()
                return Epsilon()

            inner = self.parse_union()
            if self.peek() != ')':
                raise PatternSyntaxError("Expected ')'", self.pos)
            self.consume()
            return inner

        elif char == 'ε':
            self.consume()
            return Epsilon()

        elif char == '∅':
            self.consume()
            return EmptySet()

        elif char == '\\':
            self.consume()
            escaped = self.consume()
            if escaped is None:
                raise PatternSyntaxError("Dangling escape", self.pos)
            return Literal(escaped)

        elif char is not None and char not in RESERVED:
            self.consume()
            return Literal(char)

        raise PatternSyntaxError(f"Unexpected '{char}'", self.pos)


def parse_regex(regex: str) -> Pattern:
    """
    Parse a regular expression into a pattern tree.

    Args:
        regex (str): The expression. Supports single characters, ε, ∅,
            union (|), implicit concatenation, *, +, ?, {n}, {n,}, {n,m},
            grouping with () and backslash escapes.

    Returns:
        Pattern: The unsimplified tree

    Raises:
        PatternSyntaxError: If the expression is malformed
    """
    return RegexParser(regex).parse()
