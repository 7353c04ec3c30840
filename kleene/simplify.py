"""Rewrite patterns into canonical form.

simplify() works bottom-up: every sub-pattern is simplified before the rules
for its parent are applied. Each rule preserves the denoted language, and the
output is a fixed point (simplifying it again returns an equal pattern).
"""
from typing import List, Optional

from .exceptions import UnsimplifiablePatternError
from .patterns import INFINITY, Bound, Concat, EmptySet, Epsilon, Literal, Or, Pattern, Quantified


def simplify(pattern: Pattern) -> Pattern:
    """
    Return the canonical form of a pattern.

    Args:
        pattern: Any pattern tree

    Returns:
        Pattern: An equivalent pattern no rewrite rule applies to

    Raises:
        UnsimplifiablePatternError: For a pattern type without rules
    """
    if isinstance(pattern, (Literal, EmptySet, Epsilon)):
        return pattern
    if isinstance(pattern, Or):
        return _simplify_or(pattern)
    if isinstance(pattern, Concat):
        return _simplify_concat(pattern)
    if isinstance(pattern, Quantified):
        return _simplify_quantified(pattern)
    raise UnsimplifiablePatternError(pattern)


def _simplify_or(pattern: Or) -> Pattern:
    members: List[Pattern] = []
    for member in pattern.patterns:
        member = simplify(member)

        # Rule: ∅|R → R
        if isinstance(member, EmptySet):
            continue

        # Rule: (R|S)|T → R|S|T, then R|R → R keeping the first occurrence
        nested = member.patterns if isinstance(member, Or) else (member,)
        for item in nested:
            if item not in members:
                members.append(item)

    if not members:
        return EmptySet()
    if len(members) == 1:
        return members[0]

    # Rule: ε|R → R?
    if Epsilon() in members:
        rest = [member for member in members if not isinstance(member, Epsilon)]
        return simplify(Quantified(0, 1, Or(rest)))

    return Or(members)


def _simplify_concat(pattern: Concat) -> Pattern:
    members: List[Pattern] = []
    for member in pattern.patterns:
        member = simplify(member)

        # Rule: εR → R
        if isinstance(member, Epsilon):
            continue

        # Rule: ∅R → ∅
        if isinstance(member, EmptySet):
            return EmptySet()

        members.append(member)

    if not members:
        return Epsilon()
    if len(members) == 1:
        return members[0]

    # Rule: (RS)T → RST
    flattened: List[Pattern] = []
    for member in members:
        if isinstance(member, Concat):
            flattened.extend(member.patterns)
        else:
            flattened.append(member)

    # Rule: RR → R{2}, R{l,u}R → R{l+1,u+1}, R{l1,u1}R{l2,u2} → R{l1+l2,u1+u2}
    merged: List[Pattern] = []
    for member in flattened:
        while merged:
            combined = _merge_adjacent(merged[-1], member)
            if combined is None:
                break
            merged.pop()
            member = combined
        merged.append(member)

    if len(merged) == 1:
        return merged[0]

    # Rule: a b → ab, for string symbols only
    if all(isinstance(member, Literal) and isinstance(member.symbol, str) for member in merged):
        return Literal(''.join(member.symbol for member in merged))

    return Concat(merged)


def _merge_adjacent(previous: Pattern, current: Pattern) -> Optional[Pattern]:
    """Combine two neighbouring factors of a concatenation, or return None."""
    if previous == current:
        return simplify(Quantified(2, 2, current))
    if isinstance(previous, Quantified) and previous.pattern == current:
        return simplify(Quantified(previous.lower + 1, previous.upper + 1, current))
    if isinstance(current, Quantified) and current.pattern == previous:
        return simplify(Quantified(current.lower + 1, current.upper + 1, previous))
    if (isinstance(previous, Quantified) and isinstance(current, Quantified) and
            previous.pattern == current.pattern):
        return simplify(Quantified(previous.lower + current.lower,
                                   previous.upper + current.upper,
                                   current.pattern))
    return None


def _simplify_quantified(pattern: Quantified) -> Pattern:
    lower, upper = pattern.lower, pattern.upper
    body = simplify(pattern.pattern)

    # Rule: R{0} → ε
    if upper == 0:
        return Epsilon()

    # Rule: ε{l,u} → ε
    if isinstance(body, Epsilon):
        return body

    # Rule: ∅* → ε, ∅{l,u} → ∅ for l > 0
    if isinstance(body, EmptySet):
        return Epsilon() if lower == 0 else body

    # Rule: (R{l2,u2}){l,u} → R{l*l2,u*u2} when every count in between is reachable
    if isinstance(body, Quantified) and composable(lower, upper, body.lower, body.upper):
        return simplify(Quantified(_product(lower, body.lower),
                                   _product(upper, body.upper),
                                   body.pattern))

    # Rule: R{1} → R
    if lower == 1 and upper == 1:
        return body

    return Quantified(lower, upper, body)


def _product(left: Bound, right: Bound) -> Bound:
    # 0 * ∞ is 0 repetitions, not NaN
    if left == 0 or right == 0:
        return 0
    return left * right


def composable(lower: Bound, upper: Bound, inner_lower: Bound, inner_upper: Bound) -> bool:
    """
    Check whether (R{inner_lower,inner_upper}){lower,upper} equals R{lower*inner_lower,upper*inner_upper}.

    k outer repetitions give between k*inner_lower and k*inner_upper copies of
    R. The nesting collapses only when these ranges leave no gaps for
    consecutive k, e.g. (a{2})* denotes even counts and is kept as is.
    """
    if lower == upper or inner_lower <= 1:
        return True
    if inner_upper == INFINITY:
        return lower > 0
    # the ranges for k and k + 1 touch once k * (inner_upper - inner_lower) >= inner_lower - 1
    return lower * (inner_upper - inner_lower) >= inner_lower - 1
