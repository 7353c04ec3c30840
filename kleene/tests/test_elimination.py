from django.test import TestCase
from kleene.automaton import Automaton, Stage
from kleene.description import parse_description
from kleene.elimination import (
    ACCEPT_NAME, START_NAME, automaton_to_regex, convert, eliminate_vertex, generalize, solve
)
from kleene.exceptions import ConstructionError, GNFAInvariantError
from kleene.notation import Notation
from kleene.patterns import INFINITY, Concat, EmptySet, Epsilon, Literal, Or, Quantified, star

EVEN_LENGTH = """
even odd
even
even
even odd 0
even odd 1
odd even 0
odd even 1
"""

NOT_110 = """
a b c
a
a b c
a b 1
b c 1
c c 1
b a 0
a a 0
"""

LAB2Q5 = """
q0 q1 q2
q0
q1 q2
q0 q1 a
q0 q2 b
q1 q2
q1 q0 b
q2 q2 a
q2 q2 b
q2 q1 b
"""


def single_one():
    """Accepts exactly the string '1'."""
    return Automaton.build(['q0', 'accept'], [('q0', 'accept', '1')], 'q0', ['accept'])


class TestGeneralize(TestCase):

    def test_sentinels_appended(self):
        """Fresh start and accept vertices go after the original vertices"""
        automaton = single_one()
        generalize(automaton)

        names = [vertex.name for vertex in automaton.vertices]
        self.assertEqual(names, ['q0', 'accept', START_NAME, ACCEPT_NAME])
        self.assertEqual(automaton.initial.name, START_NAME)
        self.assertEqual([vertex.name for vertex in automaton.finals], [ACCEPT_NAME])
        self.assertEqual(automaton.stage, Stage.GENERALIZED)

    def test_epsilon_edges_to_old_start_and_finals(self):
        """start′ → q0 and every final → accept′ are ε"""
        automaton = Automaton.build(['p', 'q', 'r'], [], 'p', ['q', 'r'])
        p, q, r = automaton.vertices
        generalize(automaton)
        start, accept = automaton.initial, automaton.finals[0]

        self.assertEqual(automaton.edge(start, p).pattern, Epsilon())
        self.assertEqual(automaton.edge(q, accept).pattern, Epsilon())
        self.assertEqual(automaton.edge(r, accept).pattern, Epsilon())
        self.assertEqual(automaton.edge(p, accept).pattern, EmptySet())

    def test_graph_is_completed(self):
        """Every pair not leaving accept′ or entering start′ has an edge"""
        automaton = Automaton.build(['p', 'q'], [('p', 'q', 'a')], 'p', ['q'])
        generalize(automaton)
        start, accept = automaton.initial, automaton.finals[0]

        for q1 in automaton.vertices:
            for q2 in automaton.vertices:
                edge = automaton.edge(q1, q2)
                if q1 is accept or q2 is start:
                    self.assertIsNone(edge)
                else:
                    self.assertIsNotNone(edge)

        # 3 sources × 3 targets
        self.assertEqual(len(automaton.transitions), 9)

    def test_existing_edges_kept(self):
        """Completion never overwrites a real transition"""
        automaton = Automaton.build(['p', 'q'], [('p', 'q', 'a')], 'p', ['q'])
        p, q = automaton.vertices
        generalize(automaton)
        self.assertEqual(automaton.edge(p, q).pattern, Literal('a'))
        self.assertEqual(automaton.edge(q, p).pattern, EmptySet())

    def test_rejects_empty_automaton(self):
        """Zero vertices cannot be generalized"""
        automaton = single_one()
        automaton.vertices.clear()
        with self.assertRaises(ConstructionError):
            generalize(automaton)

    def test_rejects_second_generalize(self):
        """A GNFA is not generalized again"""
        automaton = single_one()
        generalize(automaton)
        with self.assertRaises(ConstructionError):
            generalize(automaton)


class TestConvert(TestCase):

    def test_single_symbol(self):
        """An automaton accepting only '1' yields 1"""
        pattern = solve(single_one())
        self.assertEqual(pattern, Literal('1'))
        self.assertEqual(pattern.render(Notation.POSIX), '1')

    def test_even_length(self):
        """Strings of even length over {0, 1}"""
        pattern = solve(parse_description(EVEN_LENGTH))
        bit = Or([Literal('1'), Literal('0')])
        expected = Quantified(0, 1, Concat([bit, star(Quantified(2, 2, bit)), bit]))
        self.assertEqual(pattern, expected)
        self.assertEqual(pattern.render(Notation.POSIX), '((1|0)((1|0){2})*(1|0))?')

    def test_unreachable_accepting_state(self):
        """No path from start to the accepting state gives ∅"""
        automaton = Automaton.build(['q0', 'q1'], [('q0', 'q0', 'a')], 'q0', ['q1'])
        self.assertEqual(solve(automaton), EmptySet())

    def test_no_accepting_states(self):
        """An empty final set gives ∅"""
        automaton = Automaton.build(['q0'], [('q0', 'q0', 'a')], 'q0', [])
        self.assertEqual(solve(automaton), EmptySet())

    def test_self_loop(self):
        """A single accepting state with a loop is a star"""
        automaton = Automaton.build(['q'], [('q', 'q', 'a')], 'q', ['q'])
        self.assertEqual(solve(automaton), Quantified(0, INFINITY, Literal('a')))

    def test_union_of_branches(self):
        """Two accepting branches become a union"""
        automaton = Automaton.build(['s', 'x', 'y'], [('s', 'x', 'a'), ('s', 'y', 'b')], 's', ['x', 'y'])
        self.assertEqual(solve(automaton), Or([Literal('b'), Literal('a')]))

    def test_epsilon_transition(self):
        """An ε path to the accepting state gives ε"""
        self.assertEqual(solve(parse_description("p q\np\nq\np q")), Epsilon())

    def test_dfa_with_cycles(self):
        """Odd number of a's interleaved with b's"""
        automaton = Automaton.build(
            ['S0', 'S1'],
            [('S0', 'S1', 'a'), ('S0', 'S0', 'b'), ('S1', 'S0', 'a'), ('S1', 'S1', 'b')],
            'S0', ['S1'],
        )
        pattern = solve(automaton)
        self.assertEqual(pattern.render(Notation.POSIX), 'b*a(ab*a|b)*')

    def test_skip_makes_no_difference(self):
        """Skipping ∅ routes is an optimization only"""
        for text in [EVEN_LENGTH, NOT_110, LAB2Q5]:
            with_skip = solve(parse_description(text), skip_empty_routes=True)
            without_skip = solve(parse_description(text), skip_empty_routes=False)
            self.assertEqual(with_skip, without_skip)

    def test_result_is_canonical(self):
        """The surviving label is already simplified"""
        from kleene.simplify import simplify
        for text in [EVEN_LENGTH, NOT_110, LAB2Q5]:
            pattern = solve(parse_description(text))
            self.assertEqual(simplify(pattern), pattern)

    def test_stage_reaches_solved(self):
        """Only the two sentinels remain"""
        automaton = parse_description(LAB2Q5)
        solve(automaton)
        self.assertEqual(automaton.stage, Stage.SOLVED)
        self.assertEqual([vertex.name for vertex in automaton.vertices], [START_NAME, ACCEPT_NAME])
        self.assertEqual(len(automaton.transitions), 1)


class TestEliminationRounds(TestCase):

    def test_round_count(self):
        """n vertices after generalization take n - 2 rounds"""
        for text, states in [(EVEN_LENGTH, 2), (NOT_110, 3), (LAB2Q5, 3)]:
            automaton = parse_description(text)
            generalize(automaton)
            self.assertEqual(len(automaton.vertices), states + 2)

            rounds = []
            convert(automaton, on_round=rounds.append)
            self.assertEqual(len(rounds), states)

    def test_elimination_order(self):
        """Vertices go in insertion order"""
        result = automaton_to_regex(parse_description(NOT_110))
        self.assertEqual([elimination_round.ripped for elimination_round in result.rounds], ['a', 'b', 'c'])

    def test_graph_stays_complete(self):
        """After every round each eligible pair still has an edge"""
        automaton = parse_description(LAB2Q5)
        generalize(automaton)
        start, accept = automaton.initial, automaton.finals[0]
        checked = []

        def check_complete(elimination_round):
            for qi in automaton.vertices:
                if qi is accept:
                    continue
                for qj in automaton.vertices:
                    if qj is start:
                        continue
                    self.assertIsNotNone(automaton.edge(qi, qj), msg=f"{qi.name} -> {qj.name}")
            checked.append(elimination_round.ripped)

        convert(automaton, on_round=check_complete)
        self.assertEqual(checked, ['q0', 'q1', 'q2'])

    def test_round_records_rewritten_edges(self):
        """The trace lists every rewritten pair with its new label"""
        result = automaton_to_regex(parse_description(EVEN_LENGTH))
        first = result.rounds[0]
        bit = Or([Literal('1'), Literal('0')])

        self.assertEqual(first.ripped, 'even')
        self.assertEqual(first.edges, [
            ('odd', 'odd', Quantified(2, 2, bit)),
            ('odd', ACCEPT_NAME, bit),
            (START_NAME, 'odd', bit),
            (START_NAME, ACCEPT_NAME, Epsilon()),
        ])

    def test_only_routed_pairs_rewritten(self):
        """Pairs with no route through the ripped vertex are left alone"""
        automaton = Automaton.build(['r', 'x'], [('x', 'r', 'a'), ('r', 'x', 'b'), ('r', 'r', 'c')], 'x', ['x'])
        generalize(automaton)
        rip, x = automaton.vertices[0], automaton.vertices[1]
        elimination_round = eliminate_vertex(automaton, rip)

        # start -> r and r -> accept are ∅
        self.assertEqual(automaton.edge(x, x).pattern, Concat([Literal('a'), star(Literal('c')), Literal('b')]))
        self.assertEqual([(source, target) for source, target, _ in elimination_round.edges], [('x', 'x')])


class TestEliminationErrors(TestCase):

    def test_convert_requires_generalize(self):
        """A raw automaton is not a GNFA"""
        with self.assertRaises(GNFAInvariantError):
            convert(single_one())

    def test_convert_twice(self):
        """A solved automaton cannot be converted again"""
        automaton = single_one()
        solve(automaton)
        with self.assertRaises(GNFAInvariantError):
            convert(automaton)

    def test_missing_self_loop(self):
        """The ripped vertex must have a self-loop edge"""
        automaton = single_one()
        generalize(automaton)
        q0 = automaton.vertices[0]
        automaton.remove_edge(automaton.edge(q0, q0))

        with self.assertRaises(GNFAInvariantError) as context:
            convert(automaton)
        self.assertEqual(context.exception.source, 'q0')
        self.assertEqual(context.exception.target, 'q0')
        self.assertIn('q0 -> q0', str(context.exception))

    def test_missing_direct_edge(self):
        """R4 must exist for every rerouted pair"""
        automaton = single_one()
        generalize(automaton)
        q0 = automaton.vertices[0]
        start, accept = automaton.initial, automaton.finals[0]
        automaton.add_edge(q0, accept, Literal('x'))
        automaton.remove_edge(automaton.edge(start, accept))

        with self.assertRaises(GNFAInvariantError) as context:
            convert(automaton)
        self.assertEqual(context.exception.source, START_NAME)
        self.assertEqual(context.exception.target, ACCEPT_NAME)

    def test_missing_route_without_skip(self):
        """With skipping disabled a missing R1 is an invariant violation"""
        automaton = single_one()
        generalize(automaton)
        q0, q_accept = automaton.vertices[0], automaton.vertices[1]
        automaton.remove_edge(automaton.edge(q_accept, q0))

        with self.assertRaises(GNFAInvariantError):
            convert(automaton, skip_empty_routes=False)
