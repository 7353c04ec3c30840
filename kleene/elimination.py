"""State elimination: the constructive half of Kleene's theorem.

generalize() turns an automaton into a GNFA with a fresh start vertex (no
incoming edges), a fresh accept vertex (no outgoing edges) and an edge,
possibly labelled ∅, for every other ordered pair. convert() then rips out
one vertex per round, rerouting every path through it, until only the two
fresh vertices remain. The label between them is the answer.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .automaton import Automaton, Stage, Vertex
from .exceptions import ConstructionError, GNFAInvariantError
from .patterns import INFINITY, Concat, EmptySet, Epsilon, Or, Pattern, Quantified

logger = logging.getLogger(__name__)

START_NAME = 'gnfa_start'
ACCEPT_NAME = 'gnfa_accept'


@dataclass
class EliminationRound:
    """The vertex removed in one round and the edges rewritten around it."""
    ripped: str
    edges: List[Tuple[str, str, Pattern]] = field(default_factory=list)


@dataclass
class EliminationResult:
    pattern: Pattern
    rounds: List[EliminationRound] = field(default_factory=list)


def generalize(automaton: Automaton) -> None:
    """
    Convert an automaton into a GNFA in place.

    The new start and accept vertices are appended after the original
    vertices, so convert() eliminates every original vertex first.

    Raises:
        ConstructionError: If the automaton is empty, has no start vertex,
            or was already generalized
    """
    if automaton.stage is not Stage.RAW:
        raise ConstructionError(f"Automaton is already {automaton.stage.value}")
    if not automaton.vertices:
        raise ConstructionError("Cannot generalize an automaton with no vertices")
    if automaton.initial is None:
        raise ConstructionError("Automaton has no start vertex")

    start = Vertex(START_NAME)
    accept = Vertex(ACCEPT_NAME)

    automaton.add_edge(start, automaton.initial, Epsilon())
    for final in automaton.finals:
        automaton.add_edge(final, accept, Epsilon())

    automaton.vertices.extend([start, accept])
    automaton.initial = start
    automaton.finals = [accept]

    # Complete the graph: nothing leaves accept, nothing enters start
    for q1 in automaton.vertices:
        if q1 is accept:
            continue
        for q2 in automaton.vertices:
            if q2 is start:
                continue
            if automaton.edge(q1, q2) is None:
                automaton.add_edge(q1, q2, EmptySet())

    automaton.stage = Stage.GENERALIZED
    logger.info("Generalized automaton to a GNFA with %d vertices", len(automaton.vertices))


def _is_empty_route(automaton: Automaton, source: Vertex, target: Vertex) -> bool:
    edge = automaton.edge(source, target)
    return edge is None or isinstance(edge.pattern, EmptySet)


def _required_pattern(automaton: Automaton, source: Vertex, target: Vertex) -> Pattern:
    edge = automaton.edge(source, target)
    if edge is None:
        raise GNFAInvariantError("Missing edge in GNFA; was the automaton generalized?",
                                 source.name, target.name)
    return edge.pattern


def eliminate_vertex(automaton: Automaton, rip: Vertex, skip_empty_routes: bool = True) -> EliminationRound:
    """
    Remove one vertex from a GNFA, rerouting every path that passed through it.

    For each pair (qi, qj) the new label is R1 (R2)* R3 | R4, where R1 is
    qi → rip, R2 the self-loop on rip, R3 rip → qj and R4 qi → qj. All new
    labels are computed from the graph as it was before this round and only
    then written back.

    Args:
        automaton: A generalized automaton
        rip: The vertex to remove; never the start or accept vertex
        skip_empty_routes: Leave pairs alone when R1 or R3 is ∅

    Returns:
        EliminationRound: The rewritten edges, for tracing
    """
    start, accept = automaton.initial, automaton.finals[0]
    loop = _required_pattern(automaton, rip, rip)

    staged: List[Tuple[Vertex, Vertex, Pattern]] = []
    for qi in automaton.vertices:
        if qi is accept or qi is rip:
            continue
        for qj in automaton.vertices:
            if qj is start or qj is rip:
                continue
            if skip_empty_routes and (_is_empty_route(automaton, qi, rip) or
                                      _is_empty_route(automaton, rip, qj)):
                continue

            r1 = _required_pattern(automaton, qi, rip)
            r3 = _required_pattern(automaton, rip, qj)
            r4 = _required_pattern(automaton, qi, qj)
            staged.append((qi, qj, Or([Concat([r1, Quantified(0, INFINITY, loop), r3]), r4])))

    elimination_round = EliminationRound(rip.name)
    for qi, qj, pattern in staged:
        edge = automaton.replace_edge(qi, qj, pattern)
        elimination_round.edges.append((qi.name, qj.name, edge.pattern))
        logger.debug("%s -> %s: %s", qi.name, qj.name, edge.pattern)

    automaton.remove_vertex(rip)
    return elimination_round


def convert(automaton: Automaton, skip_empty_routes: bool = True,
            on_round: Optional[Callable[[EliminationRound], None]] = None) -> Pattern:
    """
    Eliminate vertices until only the start and accept vertices remain.

    Vertices are removed in the order they were added, so the sentinels
    appended by generalize() are never chosen.

    Args:
        automaton: A generalized automaton
        skip_empty_routes: Skip vertex pairs with no route through the ripped vertex
        on_round: Called with each EliminationRound after it is applied

    Returns:
        Pattern: The label of the edge from the start to the accept vertex

    Raises:
        GNFAInvariantError: If the automaton is not a complete GNFA
    """
    if automaton.stage is not Stage.GENERALIZED:
        raise GNFAInvariantError(
            f"convert() needs a generalized automaton, this one is {automaton.stage.value}")

    automaton.stage = Stage.ELIMINATING
    start, accept = automaton.initial, automaton.finals[0]
    rounds = 0

    while len(automaton.vertices) > 2:
        rip = automaton.vertices[0]
        logger.debug("-------- %s --------", rip.name)
        elimination_round = eliminate_vertex(automaton, rip, skip_empty_routes)
        rounds += 1
        if on_round is not None:
            on_round(elimination_round)

    final = automaton.edge(start, accept)
    if final is None:
        raise GNFAInvariantError("No edge left between the start and accept vertices",
                                 start.name, accept.name)

    automaton.stage = Stage.SOLVED
    logger.info("Eliminated %d vertices", rounds)
    return final.pattern


def solve(automaton: Automaton, skip_empty_routes: bool = True) -> Pattern:
    """Generalize an automaton and eliminate all of its original vertices."""
    generalize(automaton)
    return convert(automaton, skip_empty_routes)


def automaton_to_regex(automaton: Automaton, skip_empty_routes: bool = True) -> EliminationResult:
    """
    Run the whole conversion and keep a record of every elimination round.

    Returns:
        EliminationResult: The final pattern and the per-round trace
    """
    rounds: List[EliminationRound] = []
    generalize(automaton)
    pattern = convert(automaton, skip_empty_routes, on_round=rounds.append)
    return EliminationResult(pattern, rounds)
