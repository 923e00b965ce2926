from django.test import TestCase

from automata import are_dfas_isomorphic, find_state_mapping
from automata.fsa_model import EPSILON
from automata.fsa_properties import complete_dfa, is_complete, reachable_states, remove_unreachable_states
from automata.fsa_simulation import simulate_dfa
from automata.partition_refinement import minimise_dfa
from automata.tests.helpers import all_words, make_automaton


class TestCompleteDfa(TestCase):
    """Test cases for completing a partial DFA"""

    def setUp(self):
        self.partial = make_automaton(
            ['S0', 'S1'], ['a', 'b'], [('S0', 'a', 'S1')], start='S0', accepting=['S1']
        )

    def test_is_complete(self):
        self.assertFalse(is_complete(self.partial))
        self.assertTrue(is_complete(complete_dfa(self.partial)))

    def test_dead_state_added(self):
        completed = complete_dfa(self.partial)

        self.assertEqual(completed.state_ids, ('S0', 'S1', 'DEAD'))
        self.assertNotIn('DEAD', completed.accepting)
        self.assertEqual(completed.targets('S0', 'b'), ['DEAD'])
        self.assertEqual(completed.targets('DEAD', 'a'), ['DEAD'])
        self.assertEqual(len(completed.transitions), 6)

    def test_dead_state_name_clash(self):
        dfa = make_automaton(['DEAD', 'DEAD_1'], ['a'], [('DEAD', 'a', 'DEAD_1')], start='DEAD')
        self.assertIn('DEAD_2', complete_dfa(dfa).state_ids)

    def test_complete_dfa_unchanged(self):
        dfa = complete_dfa(self.partial)
        self.assertEqual(complete_dfa(dfa), dfa)

    def test_language_unchanged(self):
        completed = complete_dfa(self.partial)
        for word in all_words(['a', 'b'], 4):
            self.assertEqual(simulate_dfa(self.partial, word).accepted, simulate_dfa(completed, word).accepted)

    def test_minimising_completed_dfa_keeps_one_dead_state(self):
        minimised = minimise_dfa(complete_dfa(self.partial)).automaton
        self.assertEqual(len(minimised.states), 3)
        self.assertTrue(is_complete(minimised))


class TestReachability(TestCase):
    """Test cases for reachability and pruning"""

    def setUp(self):
        self.nfa = make_automaton(
            ['q0', 'q1', 'q2', 'u'], ['a'],
            [('q0', EPSILON, 'q1'), ('q1', 'a', 'q2'), ('u', 'a', 'q0')],
            start='q0', accepting=['q2', 'u']
        )

    def test_reachable_states(self):
        self.assertEqual(reachable_states(self.nfa), {'q0', 'q1', 'q2'})

    def test_remove_unreachable_states(self):
        pruned = remove_unreachable_states(self.nfa)

        self.assertEqual(pruned.state_ids, ('q0', 'q1', 'q2'))
        self.assertEqual(pruned.accepting, frozenset({'q2'}))
        self.assertEqual(len(pruned.transitions), 2)
        self.assertEqual(len(self.nfa.states), 4)


class TestIsomorphism(TestCase):
    """Test cases for DFA isomorphism checks"""

    def setUp(self):
        self.dfa = make_automaton(
            ['S0', 'S1'], ['a', 'b'],
            [('S0', 'a', 'S1'), ('S0', 'b', 'S0'), ('S1', 'a', 'S0')],
            start='S0', accepting=['S1']
        )

    def test_renamed_copy(self):
        renamed = make_automaton(
            ['y', 'x'], ['b', 'a'],
            [('x', 'a', 'y'), ('x', 'b', 'x'), ('y', 'a', 'x')],
            start='x', accepting=['y']
        )
        self.assertEqual(find_state_mapping(self.dfa, renamed), {'S0': 'x', 'S1': 'y'})

    def test_different_acceptance(self):
        other = make_automaton(
            ['S0', 'S1'], ['a', 'b'],
            [('S0', 'a', 'S1'), ('S0', 'b', 'S0'), ('S1', 'a', 'S0')],
            start='S0', accepting=['S0']
        )
        self.assertFalse(are_dfas_isomorphic(self.dfa, other))

    def test_undefined_move_only_matches_undefined(self):
        completed = complete_dfa(self.dfa)
        self.assertFalse(are_dfas_isomorphic(self.dfa, completed))

    def test_unreachable_state_breaks_mapping(self):
        padded = make_automaton(
            ['S0', 'S1', 'U'], ['a', 'b'],
            [('S0', 'a', 'S1'), ('S0', 'b', 'S0'), ('S1', 'a', 'S0')],
            start='S0', accepting=['S1']
        )
        other = make_automaton(
            ['S0', 'S1', 'V'], ['a', 'b'],
            [('S0', 'a', 'S1'), ('S0', 'b', 'S0'), ('S1', 'a', 'S0')],
            start='S0', accepting=['S1']
        )
        self.assertIsNone(find_state_mapping(padded, other))
