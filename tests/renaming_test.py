"""Test the module `tazone.symbolic.renaming`."""
import logging

from tazone.automata.timed_automaton import Constant
from tazone.automata.timed_automaton import CopyFrom
from tazone.symbolic.renaming import RenamingRelation
from tazone.symbolic.timed_condition import TimedCondition


logging.getLogger('tazone').setLevel('ERROR')


def one_delay(lower, upper):
    c = TimedCondition.top(1)
    c.restrict_upper_bound(0, 0, (upper, False))
    c.restrict_lower_bound(0, 0, (lower, False))
    return c


def test_variables():
    r = RenamingRelation([(2, 0), (1, 1), (2, 1)])
    assert r.left_variables() == [1, 2], r.left_variables()
    assert r.right_variables() == [0, 1], r.right_variables()
    assert len(r) == 3, len(r)
    assert list(r) == [(2, 0), (1, 1), (2, 1)], list(r)
    s = str(r)
    assert s == '{x2 = y0, x1 = y1, x2 = y1}', s


def test_eq():
    u = RenamingRelation([(0, 1), (1, 0)])
    v = RenamingRelation([(1, 0), (0, 1)])
    assert u == v, (u, v)
    assert hash(u) == hash(v)
    assert u != RenamingRelation()


def test_imprecise_clocks():
    source = one_delay(1, 2)
    target = one_delay(1, 2)
    r = RenamingRelation([(0, 0)])
    assert not r.imprecise_clocks(source, target)
    # unmapped clock in an interval
    r = RenamingRelation()
    assert r.imprecise_clocks(source, target)
    # unmapped clock with a single value
    target = TimedCondition.empty()
    assert not r.imprecise_clocks(source, target)
    # mapped to a clock in another interval
    target = one_delay(0, 1)
    r = RenamingRelation([(0, 0)])
    assert r.imprecise_clocks(source, target)


def test_to_resets():
    # x_0 in (1, 2), x_1 = 0
    source = one_delay(1, 2).extend_zero()
    target = one_delay(1, 2).extend_zero()
    r = RenamingRelation([(0, 1)])
    resets = r.to_resets(source, target)
    resets_ = ((0, Constant(1.5)), (1, CopyFrom(0)))
    assert resets == resets_, (resets, resets_)
    r = RenamingRelation([(0, 0)])
    resets = r.to_resets(source, target)
    resets_ = ((1, Constant(0)),)
    assert resets == resets_, (resets, resets_)
