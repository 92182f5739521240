"""Clock constraints and guards.

A guard is a `tuple` of `Constraint`s, read as their conjunction.
The empty guard is `TRUE`. Guards here constrain single clocks,
so each guard is a box.
"""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import collections
import logging
import math

from tazone.symbolic.zone import INF
from tazone.symbolic.zone import ZERO
from tazone.symbolic.zone import Zone
from tazone.symbolic import zone as _zone


ORDERS = ('<', '<=', '>=', '>')
NEGATION = {'<': '>=', '<=': '>', '>=': '<', '>': '<='}
log = logging.getLogger(__name__)


class Constraint(collections.namedtuple(
        'Constraint', ['clock', 'order', 'constant'])):
    """Comparison of the clock with index `clock` to `constant`."""

    __slots__ = ()

    def __new__(cls, clock, order, constant):
        assert clock >= 0, clock
        assert order in ORDERS, order
        return super(Constraint, cls).__new__(
            cls, clock, order, constant)

    @property
    def is_upper_bound(self):
        return self.order in ('<', '<=')

    @property
    def is_lower_bound(self):
        return self.order in ('>', '>=')

    def negation(self):
        return Constraint(
            self.clock, NEGATION[self.order], self.constant)

    def satisfied_by(self, value):
        c = self.constant
        if self.order == '<':
            return value < c
        elif self.order == '<=':
            return value <= c
        elif self.order == '>=':
            return value >= c
        return value > c

    def constrain(self, zone):
        """Intersect `zone` with `self`."""
        i = self.clock + 1
        c = self.constant
        if self.order == '<':
            zone.tighten(i, 0, (c, False))
        elif self.order == '<=':
            zone.tighten(i, 0, (c, True))
        elif self.order == '>=':
            zone.tighten(0, i, (- c, True))
        else:
            zone.tighten(0, i, (- c, False))
        return zone

    def __str__(self):
        return 'x{x} {op} {c}'.format(
            x=self.clock, op=self.order, c=self.constant)


def clock_count(*guards):
    """Return one plus the largest clock index in `guards`."""
    return max(
        (c.clock + 1 for guard in guards for c in guard),
        default=0)


def conjunction(*guards):
    return tuple(c for guard in guards for c in guard)


def constrain(zone, guard):
    """Intersect `zone` with `guard`, in place."""
    for c in guard:
        c.constrain(zone)
    return zone


def to_zone(guard, clocks=None):
    """Return zone of `guard` over `clocks` clocks."""
    if clocks is None:
        clocks = clock_count(guard)
    assert clocks >= clock_count(guard), (clocks, guard)
    zone = Zone.top(clocks + 1)
    return constrain(zone, guard).canonize()


def from_zone(zone):
    """Return guard of the bounds on each clock in `zone`.

    Constraints between clocks are omitted, so the result
    contains `zone`.
    """
    assert zone.is_satisfiable(), zone
    guard = list()
    for i in range(1, zone.size):
        lower = zone.value(0, i)
        if lower != ZERO:
            order = '>=' if lower.closed else '>'
            guard.append(Constraint(i - 1, order, - lower.value))
        upper = zone.value(i, 0)
        if upper.value != INF:
            order = '<=' if upper.closed else '<'
            guard.append(Constraint(i - 1, order, upper.value))
    return tuple(guard)


def satisfiable(guard):
    return to_zone(guard).is_satisfiable()


def satisfied(guard, valuation):
    """Return `True` if clock `valuation` satisfies `guard`."""
    return all(c.satisfied_by(valuation[c.clock]) for c in guard)


def is_weaker(left, right):
    """Return `True` if `left` contains `right`."""
    n = clock_count(left, right)
    return _zone.is_weaker(to_zone(left, n), to_zone(right, n))


def has_upper_bound(guard):
    return any(c.is_upper_bound for c in guard)


def union_hull(guards):
    """Return smallest guard that contains all `guards`."""
    guards = list(guards)
    n = clock_count(*guards)
    zones = [to_zone(guard, n) for guard in guards]
    return from_zone(_zone.union_hull(zones))


def union_is_convex(left, right):
    """Return `True` if the union of two boxes is a box."""
    n = clock_count(left, right)
    u = to_zone(left, n)
    v = to_zone(right, n)
    if _zone.is_weaker(u, v) or _zone.is_weaker(v, u):
        return True
    differ = [
        i for i in range(1, n + 1)
        if (u.value(0, i), u.value(i, 0)) !=
            (v.value(0, i), v.value(i, 0))]
    if len(differ) != 1:
        return False
    (i,) = differ
    return (
        not _gap(u.value(i, 0), v.value(0, i)) and
        not _gap(v.value(i, 0), u.value(0, i)))


def _gap(upper, lower):
    """Return `True` if values above `lower` are above `upper`.

    @param upper: bound on `x - x_0`
    @param lower: bound on `x_0 - x`
    """
    low = - lower.value
    if upper.value < low:
        return True
    return (
        upper.value == low and
        not upper.closed and not lower.closed)


def add_upper_bound(guard):
    """Return `guard` with clocks bounded from above.

    Each clock with a lower bound `x >= c` and no upper bound
    gets `x <= c`, and `x > c` gets `x < c + 1`.
    """
    bounded = {c.clock for c in guard if c.is_upper_bound}
    new = list(guard)
    for c in guard:
        if not c.is_lower_bound or c.clock in bounded:
            continue
        if c.order == '>=':
            new.append(Constraint(c.clock, '<=', c.constant))
        else:
            new.append(Constraint(c.clock, '<', c.constant + 1))
        bounded.add(c.clock)
    return tuple(new)


def negate(guard):
    r"""Return `list` of disjoint guards covering the negation.

    The negation of `c_1 /\ ... /\ c_k` is the disjoint union
    of `c_1 /\ ... /\ c_{i-1} /\ ~ c_i` over `i`.
    """
    result = list()
    prefix = list()
    for c in guard:
        result.append(tuple(prefix) + (c.negation(),))
        prefix.append(c)
    return result


def complement(guards):
    """Return `list` of disjoint guards covering no one of `guards`."""
    result = [tuple()]
    for guard in guards:
        pieces = negate(guard)
        result = [
            u + v for u in result for v in pieces
            if satisfiable(u + v)]
    return result


def max_constant(constant):
    return int(math.ceil(constant))


def max_constants(guards, clocks):
    """Return `list` of the largest constant compared to each clock."""
    constants = [0] * clocks
    for guard in guards:
        for c in guard:
            constants[c.clock] = max(
                constants[c.clock], max_constant(c.constant))
    return constants


def format_guard(guard):
    if not guard:
        return 'TRUE'
    return r' /\ '.join(str(c) for c in guard)
