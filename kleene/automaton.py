from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .exceptions import ConstructionError
from .patterns import Or, Pattern, Symbol, as_pattern
from .simplify import simplify

Label = Optional[Union[Pattern, Symbol]]


class Stage(Enum):
    """Progress of a conversion: Raw → Generalized → Eliminating → Solved."""
    RAW = 'raw'
    GENERALIZED = 'generalized'
    ELIMINATING = 'eliminating'
    SOLVED = 'solved'


class Vertex:
    """A state. Vertices are compared by identity, so names may repeat."""

    def __init__(self, name: str):
        self.name = name
        self.outgoing: Dict['Vertex', 'Edge'] = {}
        self.incoming: Dict['Vertex', 'Edge'] = {}

    def __repr__(self) -> str:
        return f"Vertex({self.name!r})"


class Edge:
    """A transition from `source` to `target` labelled with a pattern."""

    def __init__(self, source: Vertex, target: Vertex, pattern: Pattern):
        self.source = source
        self.target = target
        self.pattern = pattern

    def __repr__(self) -> str:
        return f"Edge({self.source.name!r} -> {self.target.name!r}: {self.pattern!r})"


class Automaton:
    """
    A finite automaton whose transitions are labelled with patterns.

    There is at most one edge per ordered vertex pair. Adding a second
    transition between the same pair unions it into the existing label, and
    every stored label is kept in canonical (simplified) form.
    """

    def __init__(self, vertices: Sequence[Vertex],
                 transitions: Union[Mapping[Tuple[Vertex, Vertex], Label], Iterable[Tuple[Vertex, Vertex, Label]]],
                 initial: Optional[Vertex], finals: Iterable[Vertex]):
        if initial is None:
            raise ConstructionError("Automaton has no start vertex")

        self.vertices: List[Vertex] = list(vertices)
        self.initial = initial
        self.finals: List[Vertex] = list(finals)
        self.transitions: Dict[Tuple[Vertex, Vertex], Edge] = {}
        self.stage = Stage.RAW

        members = set(self.vertices)
        if initial not in members:
            raise ConstructionError(f"Start vertex {initial.name} is not one of the automaton's vertices")
        for final in self.finals:
            if final not in members:
                raise ConstructionError(f"Final vertex {final.name} is not one of the automaton's vertices")

        if isinstance(transitions, Mapping):
            entries = [(source, target, label) for (source, target), label in transitions.items()]
        else:
            entries = list(transitions)

        for source, target, label in entries:
            if source not in members or target not in members:
                raise ConstructionError(
                    f"Transition {source.name} -> {target.name} uses a vertex outside the automaton")
            self.add_edge(source, target, as_pattern(label))

    @classmethod
    def build(cls, states: Sequence[str], transitions: Iterable[Tuple[str, str, Label]],
              initial: Optional[str], finals: Iterable[str]) -> 'Automaton':
        """
        Build an automaton from vertex names.

        Args:
            states: Unique vertex names, in elimination order
            transitions: (from, to, label) triples; a None or '' label is ε
            initial: Name of the start vertex
            finals: Names of the accepting vertices

        Returns:
            Automaton: A raw automaton ready to generalize
        """
        by_name: Dict[str, Vertex] = {}
        for name in states:
            if name in by_name:
                raise ConstructionError(f"Duplicate state name: {name}")
            by_name[name] = Vertex(name)

        def lookup(name: str, role: str) -> Vertex:
            if name not in by_name:
                raise ConstructionError(f"{role} {name} is not in states list")
            return by_name[name]

        start = lookup(initial, 'Start state') if initial else None
        return cls(
            list(by_name.values()),
            [(lookup(source, 'State'), lookup(target, 'State'), label) for source, target, label in transitions],
            start,
            [lookup(name, 'Accepting state') for name in finals],
        )

    def edge(self, source: Vertex, target: Vertex) -> Optional[Edge]:
        return self.transitions.get((source, target))

    def add_edge(self, source: Vertex, target: Vertex, pattern: Pattern) -> Edge:
        """
        Add a transition, merging it with any existing edge for the same pair.

        Returns:
            Edge: The stored edge, whose label is the simplified union
        """
        existing = self.transitions.get((source, target))
        if existing is not None:
            pattern = Or([pattern, existing.pattern])

        edge = Edge(source, target, simplify(pattern))
        source.outgoing[target] = edge
        target.incoming[source] = edge
        self.transitions[(source, target)] = edge
        return edge

    def remove_edge(self, edge: Edge) -> None:
        """Remove an edge. The edge must currently belong to the automaton."""
        del edge.source.outgoing[edge.target]
        del edge.target.incoming[edge.source]
        del self.transitions[(edge.source, edge.target)]

    def replace_edge(self, source: Vertex, target: Vertex, pattern: Pattern) -> Edge:
        """Set the label for a pair outright instead of unioning with it."""
        existing = self.edge(source, target)
        if existing is not None:
            self.remove_edge(existing)
        return self.add_edge(source, target, pattern)

    def remove_vertex(self, vertex: Vertex) -> None:
        """Remove a vertex together with all of its incident edges."""
        for edge in list(vertex.outgoing.values()):
            self.remove_edge(edge)
        for edge in list(vertex.incoming.values()):
            self.remove_edge(edge)
        self.vertices.remove(vertex)

    def adjacency(self) -> List[Tuple[str, str, Pattern]]:
        """Snapshot of all edges as (from name, to name, pattern), in vertex order."""
        return [
            (source.name, edge.target.name, edge.pattern)
            for source in self.vertices
            for edge in source.outgoing.values()
        ]

    def __repr__(self) -> str:
        names = ', '.join(vertex.name for vertex in self.vertices)
        return f"Automaton([{names}], stage={self.stage.value})"
