"""Test the module `tazone.learning.imprecise`."""
import logging

import pytest

from tazone.automata.constraint import Constraint
from tazone.automata.timed_automaton import Constant
from tazone.automata.timed_automaton import CopyFrom
from tazone.automata.timed_automaton import TATransition
from tazone.automata.timed_automaton import TimedAutomaton
from tazone.learning import imprecise
from tazone.learning.imprecise import ImpreciseClockHandler
from tazone.learning.neighbor import NeighborConditions
from tazone.symbolic.elementary import ElementaryLanguage
from tazone.symbolic.renaming import RenamingRelation
from tazone.symbolic.timed_condition import TimedCondition


logging.getLogger('tazone').setLevel('ERROR')


def one_delay(lower, upper):
    c = TimedCondition.top(1)
    c.restrict_upper_bound(0, 0, (upper, False))
    c.restrict_lower_bound(0, 0, (lower, False))
    return c


def open_interval(clock, lower, upper):
    return (
        Constraint(clock, '>', lower),
        Constraint(clock, '<', upper))


def jump_automaton(resets):
    """Return automaton with `s0 --a--> s1`, guard `1 < x0 < 2`."""
    aut = TimedAutomaton()
    s0 = aut.add_state(is_match=False, initial=True)
    s1 = aut.add_state(is_match=True)
    s0.add_transition('a', s1, resets, open_interval(0, 1, 2))
    return aut, s0, s1


def push_imprecise(handler, state):
    source = ElementaryLanguage('', one_delay(1, 2))
    target = ElementaryLanguage('', one_delay(1, 2))
    return handler.push(state, RenamingRelation(), source, target)


def test_push():
    aut, s0, s1 = jump_automaton(((0, Constant(0)),))
    handler = ImpreciseClockHandler()
    source = ElementaryLanguage('', one_delay(1, 2))
    target = ElementaryLanguage('', one_delay(1, 2))
    # precise renaming
    r = RenamingRelation([(0, 0)])
    assert not handler.push(s0, r, source, target)
    assert len(handler) == 0, len(handler)
    # imprecise
    assert push_imprecise(handler, s0)
    assert len(handler) == 1, len(handler)
    # same pair
    assert push_imprecise(handler, s0)
    assert len(handler) == 1, len(handler)


def test_run():
    aut, s0, s1 = jump_automaton(((0, Constant(0)),))
    handler = ImpreciseClockHandler()
    push_imprecise(handler, s0)
    handler.run()
    assert len(handler) == 0, len(handler)
    guards = [t.guard for t in s0.next['a']]
    guards_ = [
        open_interval(0, 1, 2),
        (Constraint(0, '>=', 1), Constraint(0, '<=', 2)),
        open_interval(0, 1, 3)]
    assert guards == guards_, guards
    for t in s0.next['a']:
        assert t.target is s1, t
        assert t.resets == ((0, Constant(0)),), t
    # visited pairs are skipped
    push_imprecise(handler, s0)
    handler.run()
    assert len(s0.next['a']) == 3, s0.next['a']


def test_run_internal_reset():
    aut, s0, s1 = jump_automaton(((1, Constant(0)),))
    s2 = aut.add_state(is_match=False)
    guard = open_interval(0, 1, 2) + open_interval(1, 0, 1)
    s1.add_transition('b', s2, guard=guard)
    handler = ImpreciseClockHandler()
    push_imprecise(handler, s0)
    handler.run()
    transitions = s1.next['b']
    assert transitions[0].guard == guard, transitions
    relaxed = (
        Constraint(0, '>=', 1), Constraint(0, '<=', 2),
        Constraint(1, '>', 0), Constraint(1, '<', 1))
    t = TATransition(s2, (), relaxed)
    assert t in transitions, transitions
    for t in transitions:
        assert t.target is s2, t


def test_run_merges_after_relaxation():
    aut, s0, s1 = jump_automaton(((0, Constant(0)),))
    handler = ImpreciseClockHandler()
    push_imprecise(handler, s0)
    handler.run()
    assert not aut.deterministic()
    aut.merge_nondeterministic_branching()
    assert aut.deterministic()
    transitions = s0.next['a']
    assert len(transitions) == 1, transitions
    guard = transitions[0].guard
    assert guard == open_interval(0, 1, 3) or guard == (
        Constraint(0, '>=', 1), Constraint(0, '<', 3)), guard


def test_handle_one():
    aut, s0, s1 = jump_automaton(((0, Constant(0)),))
    neighbor = NeighborConditions(one_delay(1, 2), [])
    successor = neighbor.successor('a')
    relaxed = (Constraint(0, '>=', 1), Constraint(0, '<=', 2))
    # no match
    new = list()
    t = TATransition(s1, (), (Constraint(0, '>', 3),))
    r = imprecise._handle_one(neighbor, t, successor, new)
    assert r == (False, False, None), r
    assert new == [], new
    # relaxed guard is not weaker
    t = TATransition(s1, (), relaxed)
    r = imprecise._handle_one(neighbor, t, successor, new)
    assert r == (True, True, None), r
    assert new == [], new
    # without upper bound
    t = TATransition(s1, (), (Constraint(0, '>', 1),))
    r = imprecise._handle_one(neighbor, t, successor, new)
    assert r == (True, False, None), r
    t_ = TATransition(s1, (), (Constraint(0, '>=', 1),))
    assert new == [t_], new


def test_handle_one_propagation():
    aut, s0, s1 = jump_automaton(((0, Constant(0)),))
    s2 = aut.add_state(is_match=False)
    guard = (Constraint(0, '<', 1), Constraint(1, '>', 1))
    s1.add_transition('b', s2, guard=guard)
    neighbor = NeighborConditions(one_delay(1, 2), [])
    successor = neighbor.successor('a')
    guard = open_interval(0, 1, 2)
    # reset of the new clock
    new = list()
    t = TATransition(s1, ((1, Constant(0)),), guard)
    r = imprecise._handle_one(neighbor, t, successor, new)
    assert r == (True, True, (s1, successor)), r
    assert len(new) == 1, new
    # imprecise clock overwritten by an integer
    t = TATransition(s1, ((0, Constant(0)),), guard)
    r = imprecise._handle_one(neighbor, t, successor, new)
    assert r == (True, True, None), r
    # all clocks of the target assigned constants
    resets = ((0, Constant(0)), (1, Constant(0.5)))
    t = TATransition(s1, resets, guard)
    r = imprecise._handle_one(neighbor, t, successor, new)
    assert r == (True, True, None), r
    # imprecise clock copied
    resets = ((0, Constant(0)), (1, CopyFrom(0)))
    t = TATransition(s1, resets, guard)
    r = imprecise._handle_one(neighbor, t, successor, new)
    other = neighbor.make_after_external_transition(resets, 2)
    assert r == (True, True, (s1, other)), r
    assert other.imprecise_clocks() == [1], other
    assert len(new) == 4, new


def test_handle_one_unused_clock():
    aut, s0, s1 = jump_automaton(((0, Constant(0)),))
    s2 = aut.add_state(is_match=False)
    s1.add_transition('b', s2, guard=(Constraint(0, '<', 3),))
    # x_0 in (1, 2) precise, x_1 = 0 imprecise
    c = one_delay(1, 2).extend_zero()
    neighbor = NeighborConditions(c, [0])
    successor = neighbor.successor('a')
    guard = open_interval(0, 1, 2) + (Constraint(1, '<=', 0),)
    t = TATransition(s1, ((2, CopyFrom(0)),), guard)
    new = list()
    r = imprecise._handle_one(neighbor, t, successor, new)
    # clock 1 is unused at `s1`
    assert r == (True, True, None), r
    relaxed = open_interval(0, 1, 2) + (Constraint(1, '<', 1),)
    assert new == [TATransition(s1, ((2, CopyFrom(0)),), relaxed)], new


def test_run_state_without_transitions():
    aut, s0, s1 = jump_automaton(((0, Constant(0)),))
    handler = ImpreciseClockHandler()
    push_imprecise(handler, s1)
    handler.run()
    assert len(handler) == 0, len(handler)
    assert s1.next == dict(), s1.next
    assert len(s0.next['a']) == 1, s0.next


def test_run_self_loop():
    aut = TimedAutomaton()
    s0 = aut.add_state(is_match=True, initial=True)
    t = s0.add_transition('a', s0)
    handler = ImpreciseClockHandler()
    push_imprecise(handler, s0)
    handler.run()
    assert len(handler) == 0, len(handler)
    assert s0.next['a'] == [t], s0.next


def test_push_requires_simple_target():
    aut, s0, s1 = jump_automaton(((0, Constant(0)),))
    handler = ImpreciseClockHandler()
    source = ElementaryLanguage('', one_delay(1, 2))
    target = ElementaryLanguage('', one_delay(0, 2))
    with pytest.raises(AssertionError):
        handler.push(s0, RenamingRelation(), source, target)
    assert len(handler) == 0, len(handler)
