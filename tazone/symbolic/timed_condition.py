"""Timing regions of the delays that compose a timed word.

A timed condition over the delays `tau_0, ..., tau_{n-1}` is
a zone over the clocks `x_1, ..., x_n` with

    x_i = tau_{i-1} + tau_i + ... + tau_{n-1}

so `x_i` is the value of clock `i - 1`, the time since the
`(i - 1)`-th event of the word. Each sum `tau_i + ... + tau_j`
is a difference of two such clocks.
"""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import collections
from fractions import Fraction
import logging
import math

from tazone.symbolic.zone import Bounds
from tazone.symbolic.zone import INF
from tazone.symbolic.zone import ZERO
from tazone.symbolic.zone import Zone
from tazone.symbolic import zone as _zone


log = logging.getLogger(__name__)


class TimedCondition(object):
    """Zone that encodes partial sums of delays."""

    def __init__(self, zone=None):
        if zone is None:
            zone = Zone.zero(2)
        self.zone = zone

    @classmethod
    def empty(cls):
        """Return the condition `tau_0 = 0`."""
        return cls(Zone.zero(2))

    @classmethod
    def top(cls, size):
        """Return condition with `size` unconstrained delays."""
        assert size >= 1, size
        zone = Zone.top(size + 1)
        for i in range(1, size):
            zone.tighten(i + 1, i, ZERO)
        return cls(zone.canonize())

    @classmethod
    def from_valuation(cls, values):
        """Return the region that contains the clock `values`.

        @param values: `list` of clock values,
            item `c` for clock `c`
        """
        n = len(values)
        zone = Zone.top(n + 1)
        x = [0] + list(values)
        for i in range(n + 1):
            for j in range(n + 1):
                if i == j:
                    continue
                d = x[i] - x[j]
                k = math.floor(d)
                if d == k:
                    zone.tighten(i, j, (k, True))
                else:
                    zone.tighten(i, j, (k + 1, False))
        return cls(zone.canonize())

    @classmethod
    def convex_hull(cls, conditions):
        """Return the union hull of `conditions`."""
        zones = [c.zone for c in conditions]
        return cls(_zone.union_hull(zones))

    @staticmethod
    def to_durations(values):
        """Return delays `tau_i` from clock values `x_{i+1}`."""
        n = len(values)
        return [values[i] - values[i + 1] for i in range(n - 1)] + [
            values[n - 1]]

    def size(self):
        """Return number of delays."""
        return self.zone.size - 1

    def copy(self):
        return type(self)(self.zone.copy())

    def is_satisfiable(self):
        return self.zone.is_satisfiable()

    def _indices(self, i, j):
        """Return `(a, b)` with `x_a - x_b = tau_i + ... + tau_j`."""
        n = self.size()
        assert 0 <= i <= j < n, (i, j, n)
        return _sum_indices(i, j, n)

    def upper_bound(self, i, j):
        """Return upper bound on `tau_i + ... + tau_j`."""
        a, b = self._indices(i, j)
        return self.zone.value(a, b)

    def lower_bound(self, i, j):
        """Return lower bound on `tau_i + ... + tau_j`.

        The bound `(c, True)` means `>= c`,
        and `(c, False)` means `> c`.
        """
        a, b = self._indices(i, j)
        return - self.zone.value(b, a)

    def restrict_upper_bound(self, i, j, bound):
        """Intersect with `tau_i + ... + tau_j (<|<=) bound`."""
        a, b = self._indices(i, j)
        self.zone.tighten(a, b, bound)
        self.zone.canonize()

    def restrict_lower_bound(self, i, j, bound):
        """Intersect with `tau_i + ... + tau_j (>|>=) bound`."""
        a, b = self._indices(i, j)
        self.zone.tighten(b, a, - Bounds(*bound))
        self.zone.canonize()

    def clock_interval(self, clock):
        """Return lower and upper bound of `clock`."""
        n = self.size()
        return (
            self.lower_bound(clock, n - 1),
            self.upper_bound(clock, n - 1))

    def is_point(self, clock):
        """Return `True` if `clock` has a single possible value."""
        lower, upper = self.clock_interval(clock)
        return (
            lower.closed and upper.closed and
            lower.value == upper.value)

    def is_simple(self):
        """Return `True` if each sum of delays is simple.

        A simple sum takes either a single integer value,
        or values in an open interval of length one.
        """
        n = self.size()
        for i in range(n):
            for j in range(i, n):
                lower = self.lower_bound(i, j)
                upper = self.upper_bound(i, j)
                if not _is_simple_interval(lower, upper):
                    return False
        return True

    def _non_simple_pair(self):
        n = self.size()
        for i in range(n):
            for j in range(i, n):
                lower = self.lower_bound(i, j)
                upper = self.upper_bound(i, j)
                if not _is_simple_interval(lower, upper):
                    return i, j
        return None

    def concatenate(self, right):
        """Return condition of delays of `self` followed by `right`.

        The last delay of `self` and the first delay of `right`
        are merged, so the result has
        `self.size() + right.size() - 1` delays.
        """
        n = self.size()
        m = right.size()
        size = n + m - 1
        zone = Zone.top(size + 1)
        for i in range(size):
            for j in range(i, size):
                if j < n - 1:
                    upper = self.upper_bound(i, j)
                    lower = self.lower_bound(i, j)
                elif i > n - 1:
                    upper = right.upper_bound(i - n + 1, j - n + 1)
                    lower = right.lower_bound(i - n + 1, j - n + 1)
                else:
                    upper = (
                        self.upper_bound(i, n - 1) +
                        right.upper_bound(0, j - n + 1))
                    lower = (
                        self.lower_bound(i, n - 1) +
                        right.lower_bound(0, j - n + 1))
                a, b = _sum_indices(i, j, size)
                zone.tighten(a, b, upper)
                zone.tighten(b, a, - lower)
        return type(self)(zone.canonize())

    __add__ = concatenate

    def extend_zero(self):
        """Return condition with one more delay, equal to zero.

        This is the condition right after an action.
        """
        n = self.zone.size
        zone = self.zone.copy().resize(n + 1)
        zone.tighten(n, 0, ZERO)
        zone.tighten(0, n, ZERO)
        return type(self)(zone.canonize())

    def time_successor(self):
        """Return the next region reached by letting time pass.

        Requires a simple condition. The differences between
        clocks stay the same. If some clocks have integer values,
        then these move into the open interval above. Otherwise,
        the clocks with the largest fractional part reach the next
        integer.
        """
        assert self.is_simple(), self
        zone = self.zone.copy().canonize()
        m = zone.matrix
        n = zone.size
        points = [
            i for i in range(1, n)
            if m[i][0].closed]
        if points:
            for i in points:
                k = m[i][0].value
                m[i][0] = Bounds(k + 1, False)
                m[0][i] = Bounds(- k, False)
        else:
            floor = {i: - m[0][i].value for i in range(1, n)}
            largest = [
                i for i in range(1, n)
                if all(
                    - m[j][i].value >= floor[i] - floor[j]
                    for j in range(1, n) if j != i)]
            for i in largest:
                k = floor[i] + 1
                m[i][0] = Bounds(k, True)
                m[0][i] = Bounds(- k, True)
        zone._canonical = False
        zone.canonize()
        assert zone.is_satisfiable(), zone
        return type(self)(zone)

    def enumerate(self):
        """Return `list` of simple conditions contained in `self`.

        Assumes that all sums of delays are bounded.
        """
        result = list()
        queue = collections.deque([self.copy()])
        while queue:
            c = queue.popleft()
            if not c.is_satisfiable():
                continue
            pair = c._non_simple_pair()
            if pair is None:
                result.append(c)
                continue
            i, j = pair
            lower = c.lower_bound(i, j)
            upper = c.upper_bound(i, j)
            assert upper.value < INF, (
                'cannot enumerate unbounded condition', self)
            for k in range(
                    math.floor(lower.value),
                    math.ceil(upper.value) + 1):
                point = c.copy()
                point.restrict_upper_bound(i, j, (k, True))
                point.restrict_lower_bound(i, j, (k, True))
                queue.append(point)
                interval = c.copy()
                interval.restrict_upper_bound(i, j, (k + 1, False))
                interval.restrict_lower_bound(i, j, (k, False))
                queue.append(interval)
        log.debug('{n} simple conditions in {c}'.format(
            n=len(result), c=self))
        return result

    def sample(self):
        """Return clock values in `self`, as `Fraction`s."""
        assert self.is_satisfiable(), self
        zone = self.zone.copy()
        values = list()
        for i in range(1, zone.size):
            upper = zone.value(i, 0)
            lower = - zone.value(0, i)
            low = Fraction(lower.value)
            if upper.value == INF:
                x = low + 1
            elif lower.value == upper.value:
                x = low
            else:
                x = (low + Fraction(upper.value)) / 2
            zone.tighten(i, 0, (x, True))
            zone.tighten(0, i, (- x, True))
            values.append(x)
        return values

    def __eq__(self, other):
        if not isinstance(other, TimedCondition):
            return NotImplemented
        return self.zone == other.zone

    def __hash__(self):
        return hash(self.zone)

    def __str__(self):
        if not self.is_satisfiable():
            return 'FALSE'
        n = self.size()
        c = list()
        for i in range(n):
            for j in range(i, n):
                lower = self.lower_bound(i, j)
                upper = self.upper_bound(i, j)
                if i == j:
                    s = 'tau_{i}'.format(i=i)
                else:
                    s = 'tau_{i}..tau_{j}'.format(i=i, j=j)
                c.append('{s} in {r}'.format(
                    s=s, r=_format_interval(lower, upper)))
        return r' /\ '.join(c)

    def __repr__(self):
        return 'TimedCondition({z!r})'.format(z=self.zone)


def _sum_indices(i, j, n):
    if j + 2 <= n:
        return i + 1, j + 2
    return i + 1, 0


def _is_simple_interval(lower, upper):
    if upper.value == INF:
        return False
    if lower.closed and upper.closed:
        return lower.value == upper.value
    if not lower.closed and not upper.closed:
        return (
            upper.value - lower.value == 1 and
            lower.value == math.floor(lower.value))
    return False


def _format_interval(lower, upper):
    if lower.closed and upper.closed and lower.value == upper.value:
        return '{{{v}}}'.format(v=lower.value)
    left = '[' if lower.closed else '('
    right = ']' if upper.closed else ')'
    return '{left}{a}, {b}{right}'.format(
        left=left, a=lower.value, b=upper.value, right=right)
