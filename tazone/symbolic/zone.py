"""Difference-bound matrices over clock variables.

A zone over the clocks `x_1, ..., x_n` is a conjunction of
constraints of the form `x_i - x_j < c` or `x_i - x_j <= c`,
where `x_0` is a reference clock fixed at zero. The zone is
stored as the `(n + 1) x (n + 1)` matrix of its bounds.

Reference
=========

David L. Dill
    "Timing assumptions and verification of
    finite-state concurrent systems"
    Automatic Verification Methods for Finite State Systems
    LNCS Vol.407, pp.197--212, 1989
"""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import collections
import logging


INF = float('inf')
log = logging.getLogger(__name__)


class Bounds(collections.namedtuple('Bounds', ['value', 'closed'])):
    """Upper bound `value` on a clock difference.

    If `closed`, then the bound is non-strict (`<=`),
    otherwise strict (`<`). Tuple order makes a smaller
    bound also a tighter one.
    """

    __slots__ = ()

    def __add__(self, other):
        """Return bound on the sum of two differences."""
        return Bounds(
            self.value + other.value,
            self.closed and other.closed)

    def __neg__(self):
        return Bounds(- self.value, self.closed)

    def __str__(self):
        op = '<=' if self.closed else '<'
        return '{op} {v}'.format(op=op, v=self.value)


ZERO = Bounds(0, True)
UNBOUNDED = Bounds(INF, False)


class Zone(object):
    """Conjunction of bounds on clock differences.

    The entry `(i, j)` of `self.matrix` bounds `x_i - x_j`.
    Closure (shortest paths) is computed lazily, before
    reading entries, comparing, or testing emptiness.
    """

    def __init__(self, matrix, canonical=False):
        n = len(matrix)
        assert n >= 1, n
        assert all(len(row) == n for row in matrix), matrix
        self.matrix = matrix
        self._canonical = canonical

    @classmethod
    def top(cls, size):
        """Return zone where clocks are only non-negative.

        @param size: dimension of the matrix,
            so number of clocks plus one
        """
        assert size >= 1, size
        matrix = [[UNBOUNDED] * size for _ in range(size)]
        for i in range(size):
            matrix[i][i] = ZERO
            matrix[0][i] = ZERO
        return cls(matrix, canonical=True)

    @classmethod
    def zero(cls, size):
        """Return zone where all clocks equal zero."""
        assert size >= 1, size
        matrix = [[ZERO] * size for _ in range(size)]
        return cls(matrix, canonical=True)

    @property
    def size(self):
        """Dimension of the matrix."""
        return len(self.matrix)

    def copy(self):
        matrix = [list(row) for row in self.matrix]
        return type(self)(matrix, self._canonical)

    def value(self, i, j):
        """Return tightest bound on `x_i - x_j`."""
        self.canonize()
        return self.matrix[i][j]

    def tighten(self, i, j, bound):
        """Intersect with `x_i - x_j (<|<=) bound.value`."""
        n = self.size
        assert 0 <= i < n and 0 <= j < n, (i, j, n)
        bound = Bounds(*bound)
        if bound < self.matrix[i][j]:
            self.matrix[i][j] = bound
            self._canonical = False
        return self

    def canonize(self):
        """Replace each entry by the tightest derivable bound."""
        if self._canonical:
            return self
        m = self.matrix
        n = len(m)
        for k in range(n):
            row_k = m[k]
            for i in range(n):
                m_ik = m[i][k]
                if m_ik.value == INF:
                    continue
                row_i = m[i]
                for j in range(n):
                    s = m_ik + row_k[j]
                    if s < row_i[j]:
                        row_i[j] = s
        self._canonical = True
        return self

    def is_satisfiable(self):
        """Return `True` if no negative cycle exists."""
        self.canonize()
        return all(
            self.matrix[i][i] >= ZERO
            for i in range(self.size))

    def conjoin(self, other):
        """Intersect `self` with `other` in place."""
        assert self.size == other.size, (self.size, other.size)
        for i, row in enumerate(other.matrix):
            for j, bound in enumerate(row):
                self.tighten(i, j, bound)
        return self

    def elapse(self):
        """Let time pass: drop upper bounds of clocks."""
        self.canonize()
        for i in range(1, self.size):
            self.matrix[i][0] = UNBOUNDED
        return self

    def unconstrain(self, i):
        """Forget all constraints on `x_i`, except `x_i >= 0`."""
        assert 0 < i < self.size, (i, self.size)
        self.canonize()
        m = self.matrix
        for j in range(self.size):
            if j == i:
                continue
            m[i][j] = UNBOUNDED
            m[j][i] = m[j][0]
        return self

    def apply_resets(self, assignments):
        """Assign clocks simultaneously.

        @param assignments: `dict` that maps each assigned
            index `i` to a pair `(k, d)`, meaning `x_i := x_k + d`.
            Constants are `(0, d)`, copies `(k, 0)`.
        """
        self.canonize()
        old = self.matrix
        n = self.size
        source = [assignments.get(i, (i, 0)) for i in range(n)]
        assert source[0] == (0, 0), source
        matrix = list()
        for i, (k, d) in enumerate(source):
            row = list()
            for j, (l, e) in enumerate(source):
                if i == j:
                    row.append(ZERO)
                    continue
                bound = old[k][l]
                row.append(Bounds(bound.value + d - e, bound.closed))
            matrix.append(row)
        self.matrix = matrix
        return self

    def extrapolate(self, max_constants):
        """Abstract bounds beyond the maximal constant of each clock.

        @param max_constants: `list` of maximal constants,
            the item `c` for the clock with index `c + 1`
        """
        self.canonize()
        n = self.size
        bounds = [0] + [
            max_constants[i] if i < len(max_constants) else 0
            for i in range(n - 1)]
        m = self.matrix
        changed = False
        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                if i != 0 and m[i][j] > Bounds(bounds[i], True):
                    m[i][j] = UNBOUNDED
                    changed = True
                elif j != 0 and m[i][j] < Bounds(- bounds[j], False):
                    m[i][j] = Bounds(- bounds[j], False)
                    changed = True
        if changed:
            self._canonical = False
            self.canonize()
        return self

    def resize(self, size):
        """Project to, or extend with unconstrained clocks to, `size`."""
        self.canonize()
        other = Zone.top(size)
        k = min(size, self.size)
        for i in range(k):
            for j in range(k):
                other.matrix[i][j] = self.matrix[i][j]
        other._canonical = size <= self.size
        other.canonize()
        self.matrix = other.matrix
        return self

    def __eq__(self, other):
        if not isinstance(other, Zone):
            return NotImplemented
        if self.size != other.size:
            return False
        return self.canonize().matrix == other.canonize().matrix

    def __hash__(self):
        self.canonize()
        return hash(tuple(map(tuple, self.matrix)))

    def __str__(self):
        if not self.is_satisfiable():
            return 'FALSE'
        c = list()
        for i, row in enumerate(self.matrix):
            for j, bound in enumerate(row):
                if i == j or bound.value == INF:
                    continue
                if i == 0 and bound == ZERO:
                    continue
                s = '(x{i} - x{j} {b})'.format(i=i, j=j, b=bound)
                c.append(s)
        if not c:
            return 'TRUE'
        return r' /\ '.join(c)

    def __repr__(self):
        return 'Zone({m})'.format(m=self.matrix)


def is_weaker(left, right):
    """Return `True` if `left` contains `right`."""
    assert left.size == right.size, (left.size, right.size)
    if not right.is_satisfiable():
        return True
    if not left.is_satisfiable():
        return False
    return all(
        r <= u
        for row_l, row_r in zip(left.matrix, right.matrix)
        for u, r in zip(row_l, row_r))


def union_hull(zones):
    """Return the smallest zone that contains all `zones`.

    Entrywise loosest bound, so an over-approximation
    of the union. Empty zones are ignored.
    """
    zones = list(zones)
    assert zones, zones
    size = zones[0].size
    assert all(z.size == size for z in zones), zones
    nonempty = [z for z in zones if z.is_satisfiable()]
    if not nonempty:
        return zones[0].copy()
    matrix = [
        [max(z.matrix[i][j] for z in nonempty)
         for j in range(size)]
        for i in range(size)]
    return Zone(matrix, canonical=True)
