"""Test the module `tazone.symbolic.timed_condition`."""
from fractions import Fraction
import logging

import pytest

from tazone.symbolic.timed_condition import TimedCondition
from tazone.symbolic.zone import Bounds
from tazone.symbolic.zone import Zone


logging.getLogger('tazone').setLevel('ERROR')


def one_delay(lower, upper):
    """Return condition `tau_0 in (lower, upper)`."""
    c = TimedCondition.top(1)
    c.restrict_upper_bound(0, 0, (upper, False))
    c.restrict_lower_bound(0, 0, (lower, False))
    return c


def two_delays():
    """Return condition `tau_0, tau_1 in (0, 1)`."""
    return one_delay(0, 1).extend_zero() + one_delay(0, 1)


def test_empty():
    c = TimedCondition.empty()
    assert c.size() == 1, c.size()
    assert c.is_simple(), c
    assert c.is_point(0), c
    s = str(c)
    assert s == 'tau_0 in {0}', s


def test_concatenate():
    # tau_0 in (0, 1) /\ tau_0 + tau_1 = 1 /\ tau_1 in (0, 1)
    left = TimedCondition(Zone.top(3))
    left.zone.tighten(1, 2, (1, False))
    left.zone.tighten(2, 1, (0, False))
    left.zone.tighten(1, 0, (1, True))
    left.zone.tighten(0, 1, (-1, True))
    left.zone.tighten(2, 0, (1, False))
    left.zone.tighten(0, 2, (0, False))
    # tau_0 in (0, 1)
    right = TimedCondition(Zone.top(2))
    right.zone.tighten(1, 0, (1, False))
    right.zone.tighten(0, 1, (0, False))
    result = left + right
    # tau_0 in (0, 1) /\ tau_0 + tau_1 in (1, 2) /\ tau_1 in (0, 2)
    assert result.size() == 2, result.size()
    z = result.zone
    assert z.value(1, 2) == Bounds(1, False), z
    assert z.value(2, 1) == Bounds(0, False), z
    assert z.value(1, 0) == Bounds(2, False), z
    assert z.value(0, 1) == Bounds(-1, False), z
    assert z.value(2, 0) == Bounds(2, False), z
    assert z.value(0, 2) == Bounds(0, False), z


def test_concatenate_empty():
    c = one_delay(0, 1)
    r = TimedCondition.empty() + c
    assert r == c, (r, c)
    r = c + TimedCondition.empty()
    assert r == c, (r, c)


def test_restrict():
    c = TimedCondition.top(2)
    c.restrict_upper_bound(0, 1, (2, True))
    c.restrict_lower_bound(0, 0, (1, True))
    r = c.upper_bound(1, 1)
    assert r == Bounds(1, True), r
    r = c.lower_bound(0, 1)
    assert r == Bounds(1, True), r
    r = c.upper_bound(0, 0)
    assert r == Bounds(2, True), r
    with pytest.raises(AssertionError):
        c.upper_bound(0, 2)


def test_clock_interval():
    c = one_delay(1, 2).extend_zero()
    assert c.size() == 2, c.size()
    lower, upper = c.clock_interval(0)
    assert lower == Bounds(1, False), lower
    assert upper == Bounds(2, False), upper
    assert c.is_point(1), c
    assert not c.is_point(0), c


def test_is_simple():
    assert one_delay(0, 1).is_simple()
    assert one_delay(3, 4).is_simple()
    assert not one_delay(0, 2).is_simple()
    assert not TimedCondition.top(1).is_simple()
    c = one_delay(0, 1).extend_zero()
    assert c.is_simple(), c
    # both delays in (0, 1), so their sum in (0, 2)
    c = two_delays()
    assert not c.is_simple(), c


def test_extend_zero():
    c = one_delay(0, 1).extend_zero()
    assert c.size() == 2, c.size()
    r = c.upper_bound(1, 1)
    assert r == Bounds(0, True), r
    r = c.upper_bound(0, 1)
    assert r == Bounds(1, False), r


def test_time_successor():
    c = TimedCondition.empty()
    c = c.time_successor()
    assert c == one_delay(0, 1), c
    c = c.time_successor()
    d = TimedCondition.top(1)
    d.restrict_upper_bound(0, 0, (1, True))
    d.restrict_lower_bound(0, 0, (1, True))
    assert c == d, (c, d)
    c = c.time_successor()
    assert c == one_delay(1, 2), c
    # two clocks: x_0 in (0, 1) and x_1 = 0
    c = one_delay(0, 1).extend_zero()
    c = c.time_successor()
    lower, upper = c.clock_interval(1)
    assert lower == Bounds(0, False), lower
    assert upper == Bounds(1, False), upper
    # x_0 reaches 1 first
    c = c.time_successor()
    assert c.is_point(0), c
    assert not c.is_point(1), c
    r = c.upper_bound(0, 0)
    assert r == Bounds(1, False), r


def test_time_successor_requires_simple():
    c = one_delay(0, 2)
    with pytest.raises(AssertionError):
        c.time_successor()


def test_enumerate():
    c = one_delay(0, 2)
    r = c.enumerate()
    r_ = [one_delay(0, 1), one_delay(1, 2)]
    point = TimedCondition.top(1)
    point.restrict_upper_bound(0, 0, (1, True))
    point.restrict_lower_bound(0, 0, (1, True))
    r_.append(point)
    assert set(r) == set(r_), (r, r_)
    assert len(r) == 3, r
    # two delays in (0, 1)
    c = two_delays()
    r = c.enumerate()
    assert len(r) == 3, r
    assert all(x.is_simple() for x in r), r
    # unbounded
    with pytest.raises(AssertionError):
        TimedCondition.top(1).enumerate()


def test_sample():
    c = two_delays()
    for region in c.enumerate():
        values = region.sample()
        assert len(values) == 2, values
        assert all(isinstance(v, Fraction) for v in values), values
        r = TimedCondition.from_valuation(values)
        assert r == region, (r, region)


def test_to_durations():
    values = [Fraction(3, 2), Fraction(1, 2)]
    r = TimedCondition.to_durations(values)
    assert r == [1, Fraction(1, 2)], r


def test_from_valuation():
    c = TimedCondition.from_valuation([Fraction(1, 2)])
    assert c == one_delay(0, 1), c
    c = TimedCondition.from_valuation([1])
    assert c.is_point(0), c
    r = c.upper_bound(0, 0)
    assert r == Bounds(1, True), r


def test_convex_hull():
    u = one_delay(0, 1)
    v = one_delay(1, 2)
    h = TimedCondition.convex_hull([u, v])
    r = h.lower_bound(0, 0)
    assert r == Bounds(0, False), r
    r = h.upper_bound(0, 0)
    assert r == Bounds(2, False), r
