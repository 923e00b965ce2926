import random

from django.test import TestCase

from automata.epsilon_closure import epsilon_closure
from automata.fsa_errors import UnknownStateError
from automata.fsa_model import EPSILON
from automata.tests.helpers import make_automaton, random_nfa


class TestEpsilonClosure(TestCase):
    """Test cases for epsilon closure computation"""

    def setUp(self):
        # q0 -ε-> q1 -ε-> q2, q2 -ε-> q0 (loop), q3 reachable only on 'a'
        self.nfa = make_automaton(
            ['q0', 'q1', 'q2', 'q3'], ['a'],
            [
                ('q0', EPSILON, 'q1'),
                ('q1', EPSILON, 'q2'),
                ('q2', EPSILON, 'q0'),
                ('q2', 'a', 'q3'),
            ],
            start='q0', accepting=['q3']
        )

    def test_follows_chains_and_loops(self):
        self.assertEqual(epsilon_closure(self.nfa, {'q1'}), frozenset({'q0', 'q1', 'q2'}))

    def test_no_epsilon_moves(self):
        self.assertEqual(epsilon_closure(self.nfa, {'q3'}), frozenset({'q3'}))

    def test_single_id_as_string(self):
        self.assertEqual(epsilon_closure(self.nfa, 'q3'), frozenset({'q3'}))

    def test_symbol_moves_are_not_followed(self):
        self.assertNotIn('q3', epsilon_closure(self.nfa, {'q0'}))

    def test_empty_input(self):
        self.assertEqual(epsilon_closure(self.nfa, set()), frozenset())

    def test_unknown_state(self):
        with self.assertRaises(UnknownStateError) as context:
            epsilon_closure(self.nfa, {'q0', 'q7'})
        self.assertEqual(context.exception.detail, {'state': 'q7'})

    def test_self_loop(self):
        nfa = make_automaton(['q0', 'q1'], ['a'], [('q0', EPSILON, 'q0'), ('q0', 'a', 'q1')], start='q0')
        self.assertEqual(epsilon_closure(nfa, {'q0'}), frozenset({'q0'}))


class TestEpsilonClosureLaws(TestCase):
    """Closure is extensive, idempotent and monotone on generated NFAs"""

    def test_idempotent_and_extensive(self):
        rng = random.Random(7)
        for _ in range(40):
            nfa = random_nfa(rng, epsilon_chance=0.6)
            states = set(rng.sample(nfa.state_ids, rng.randint(1, len(nfa.states))))
            closure = epsilon_closure(nfa, states)

            self.assertTrue(states <= closure)
            self.assertEqual(epsilon_closure(nfa, closure), closure)

    def test_monotone(self):
        rng = random.Random(11)
        for _ in range(40):
            nfa = random_nfa(rng, epsilon_chance=0.6)
            larger = set(rng.sample(nfa.state_ids, rng.randint(1, len(nfa.states))))
            smaller = set(rng.sample(sorted(larger), rng.randint(1, len(larger))))

            self.assertTrue(epsilon_closure(nfa, smaller) <= epsilon_closure(nfa, larger))
