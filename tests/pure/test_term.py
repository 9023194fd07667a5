import unittest
from copy import deepcopy

from simplebool.lang.error import InvalidTermError
from simplebool.pure.term import Kind, Term

V = Term.variable
L = Term.abstraction
A = Term.application


def identity(name="y"):
    return L(name, V(name, 0))


class TermTestCase(unittest.TestCase):

    def test_is_invalid(self):
        should_fail = [Term(), L("x"), A(V("x", 0), None), L("", V("x", 0)), V("", 0)]
        for case in should_fail:
            self.assertTrue(case.is_invalid(), case)

        should_pass = [V("x", 0), identity(), A(V("x", 0), V("y", 1))]
        for case in should_pass:
            self.assertFalse(case.is_invalid(), case)

    def test_check(self):
        should_raise = [Term(), A(V("x", 0), Term()), L("x", A(L("y"), V("y", 0)))]
        for case in should_raise:
            self.assertRaises(InvalidTermError, case.check)

        L("x", A(identity(), V("y", 0))).check()

    def test_accessors(self):
        self.assertRaises(InvalidTermError, lambda: V("x", 0).body)
        self.assertRaises(InvalidTermError, lambda: identity().left)
        self.assertRaises(InvalidTermError, lambda: V("x", 0).right)
        self.assertEqual(V("y", 0), identity().body)

    def test_display(self):
        cases = {
            "[x=0]": V("x", 0),
            "{λ x. ([x=0] <- [y=25])}": L("x", A(V("x", 0), V("y", 25))),
            "(({λ y. [y=0]} <- [a=0]) <- [b=1])": A(A(identity(), V("a", 0)), V("b", 1)),
            "<ERROR>": Term(),
        }
        for expected, case in cases.items():
            self.assertEqual(expected, case.display())

    def test_equality_ignores_complete(self):
        complete = identity()
        complete.complete = True
        self.assertEqual(identity(), complete)
        self.assertNotEqual(identity("x"), identity("y"))
        self.assertNotEqual(V("x", 0), V("x", 1))

    def test_unhashable(self):
        self.assertRaises(TypeError, hash, V("x", 0))


class CombineTestCase(unittest.TestCase):

    def test_placeholder(self):
        term = Term()
        term.combine(V("x", 0))
        self.assertEqual(V("x", 0), term)

    def test_variable_and_application(self):
        term = V("x", 23)
        term.combine(V("y", 24))
        self.assertEqual(A(V("x", 23), V("y", 24)), term)

        term.combine(V("z", 25))
        self.assertEqual(A(A(V("x", 23), V("y", 24)), V("z", 25)), term)

    def test_abstraction(self):
        term = L("x")
        term.combine(V("x", 0))
        self.assertEqual(identity("x"), term)
        self.assertFalse(term.is_invalid())

        # incomplete: later terms extend the body
        term.combine(V("y", 25))
        self.assertEqual(L("x", A(V("x", 0), V("y", 25))), term)

        # complete: later terms are applied to the abstraction
        term.complete = True
        term.combine(V("z", 25))
        self.assertEqual(A(L("x", A(V("x", 0), V("y", 25))), V("z", 25)), term)
        self.assertTrue(term.is_application)
        self.assertTrue(term.left.complete)

    def test_combined_term_is_moved(self):
        new = V("y", 1)
        term = V("x", 0)
        term.combine(new)
        self.assertEqual(Kind.INVALID, new.kind)

    def test_invalid(self):
        should_raise = [Term(), L("y"), A(V("x", 0), None), A(V("x", 0), L("y")), L("x", A(Term(), V("y", 1)))]
        for case in should_raise:
            self.assertRaises(InvalidTermError, V("x", 0).combine, case)


class ShiftTestCase(unittest.TestCase):

    def test_identity(self):
        cases = [V("x", 3), identity(), L("x", A(V("x", 0), L("y", A(V("y", 0), V("z", 7)))))]
        for case in cases:
            shifted = deepcopy(case)
            shifted.shift(0)
            self.assertEqual(case, shifted)

    def test_shift(self):
        cases = {
            (2, "[x=3]"): V("x", 1),
            (2, "{λ x. ([x=0] <- [y=3])}"): L("x", A(V("x", 0), V("y", 1))),
            (1, "{λ x. {λ y. ([x=1] <- ([y=0] <- [z=3]))}}"): L("x", L("y", A(V("x", 1), A(V("y", 0), V("z", 2))))),
            (-1, "({λ x. [a=1]} <- [b=0])"): A(L("x", V("a", 2)), V("b", 1)),
        }
        for (distance, expected), case in cases.items():
            case.shift(distance)
            self.assertEqual(expected, case.display())

    def test_negative_index(self):
        self.assertRaises(AssertionError, V("x", 0).shift, -1)

    def test_invalid(self):
        should_raise = [Term(), L("x"), A(V("x", 0), Term())]
        for case in should_raise:
            self.assertRaises(InvalidTermError, case.shift, 1)


class SubstituteTestCase(unittest.TestCase):

    def test_substitute(self):
        term = A(V("x", 0), L("y", A(V("y", 0), V("x", 1))))
        term.substitute(0, V("z", 5))
        self.assertEqual(A(V("z", 5), L("y", A(V("y", 0), V("z", 6)))), term)

    def test_other_indices_untouched(self):
        term = A(V("a", 1), L("y", V("a", 2)))
        term.substitute(0, identity())
        self.assertEqual(A(V("a", 1), L("y", V("a", 2))), term)

    def test_copies_are_independent(self):
        term = A(V("x", 0), V("x", 0))
        term.substitute(0, L("y", V("w", 1)))

        self.assertIsNot(term.left, term.right)
        term.left.shift(3)
        self.assertEqual(L("y", V("w", 4)), term.left)
        self.assertEqual(L("y", V("w", 1)), term.right)

    def test_invalid(self):
        self.assertRaises(InvalidTermError, V("x", 0).substitute, 0, Term())
        self.assertRaises(InvalidTermError, Term().substitute, 0, V("x", 0))
        self.assertRaises(InvalidTermError, A(V("x", 0), L("y")).substitute, 0, V("z", 0))


class SubstTopTestCase(unittest.TestCase):

    def test_bound_variable_replaced(self):
        # body of λx. x f, where f is free
        abstraction = L("x", A(V("x", 0), V("f", 1)))
        result = abstraction.subst_top(identity())
        self.assertEqual(A(identity(), V("f", 0)), result)

    def test_nested_abstraction(self):
        abstraction = L("x", L("y", V("x", 1)))
        self.assertEqual(L("y", identity("z")), abstraction.subst_top(identity("z")))

    def test_free_variable_in_argument(self):
        abstraction = L("x", L("y", V("x", 1)))
        self.assertEqual(L("y", V("a", 1)), abstraction.subst_top(V("a", 0)))

    def test_unused_argument(self):
        abstraction = L("x", A(V("a", 1), V("b", 2)))
        self.assertEqual(A(V("a", 0), V("b", 1)), abstraction.subst_top(identity()))

    def test_not_an_abstraction(self):
        self.assertRaises(InvalidTermError, V("x", 0).subst_top, identity())

    def test_no_body(self):
        self.assertRaises(InvalidTermError, L("x").subst_top, identity())


if __name__ == '__main__':
    unittest.main()
