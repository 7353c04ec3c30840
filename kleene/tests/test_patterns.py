from django.test import TestCase
from kleene.patterns import (
    INFINITY, Concat, EmptySet, Epsilon, Literal, Or, Quantified, Tag, as_pattern, optional, plus, star
)


class TestPatterns(TestCase):

    def test_structural_equality(self):
        """Separately built trees for the same expression are equal"""
        first = Concat([Or([Literal('a'), Literal('b')]), star(Literal('c'))])
        second = Concat([Or([Literal('a'), Literal('b')]), star(Literal('c'))])
        self.assertEqual(first, second)
        self.assertIsNot(first, second)
        self.assertEqual(hash(first), hash(second))

    def test_structural_inequality(self):
        """Order, kind and payload all matter"""
        self.assertNotEqual(Or([Literal('a'), Literal('b')]), Or([Literal('b'), Literal('a')]))
        self.assertNotEqual(Or([Literal('a')]), Concat([Literal('a')]))
        self.assertNotEqual(Literal('a'), Literal('b'))
        self.assertNotEqual(Epsilon(), EmptySet())
        self.assertNotEqual(Quantified(0, 1, Literal('a')), Quantified(0, 2, Literal('a')))

    def test_leaf_patterns_equal(self):
        """Payload-free variants are all equal to each other"""
        self.assertEqual(EmptySet(), EmptySet())
        self.assertEqual(Epsilon(), Epsilon())

    def test_lists_are_stored_as_tuples(self):
        """Or and Concat accept any iterable and keep an immutable tuple"""
        members = [Literal('a'), Literal('b')]
        pattern = Or(members)
        members.append(Literal('c'))
        self.assertEqual(pattern.patterns, (Literal('a'), Literal('b')))
        self.assertEqual(Concat(iter(members)).patterns, tuple(members))

    def test_empty_lists_allowed(self):
        """Or and Concat may be built empty"""
        self.assertEqual(Or().patterns, ())
        self.assertEqual(Concat([]).patterns, ())

    def test_patterns_are_immutable(self):
        """Assigning to a field fails"""
        pattern = Literal('a')
        with self.assertRaises(AttributeError):
            pattern.symbol = 'b'

    def test_tags(self):
        """Tags compare by name and differ from string literals"""
        self.assertEqual(Literal(Tag('start')), Literal(Tag('start')))
        self.assertNotEqual(Literal(Tag('a')), Literal('a'))
        self.assertEqual(str(Tag('start')), 'start')

    def test_quantifier_helpers(self):
        """star, plus and optional build the matching bounds"""
        a = Literal('a')
        self.assertEqual(star(a), Quantified(0, INFINITY, a))
        self.assertEqual(plus(a), Quantified(1, INFINITY, a))
        self.assertEqual(optional(a), Quantified(0, 1, a))

    def test_as_pattern(self):
        """Transition labels are coerced into patterns"""
        self.assertEqual(as_pattern('a'), Literal('a'))
        self.assertEqual(as_pattern(''), Epsilon())
        self.assertEqual(as_pattern(None), Epsilon())
        self.assertEqual(as_pattern('ε'), Epsilon())
        self.assertEqual(as_pattern(Tag('x')), Literal(Tag('x')))
        self.assertEqual(as_pattern(star(Literal('a'))), star(Literal('a')))

        with self.assertRaises(TypeError):
            as_pattern(3)
