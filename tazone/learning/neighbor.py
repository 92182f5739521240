"""Regions near an observed region, for clocks known imprecisely.

A learned transition can jump to a state whose clocks take
values that only approximate those observed. Such a clock is
imprecise: its actual value may lie in the neighboring regions.
"""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
from fractions import Fraction
import logging

from tazone.automata import constraint as cst
from tazone.automata.timed_automaton import Constant
from tazone.automata.timed_automaton import CopyFrom
from tazone.symbolic.timed_condition import TimedCondition


log = logging.getLogger(__name__)


class NeighborConditions(object):
    """Simple timed condition with imprecise clocks relaxed.

    The relaxed zone widens the interval of each imprecise clock
    by one region in each direction, and forgets the relations
    of that clock to the other clocks.

    @param condition: simple `TimedCondition`
    @param precise_clocks: container of clocks
    """

    def __init__(self, condition, precise_clocks):
        self.condition = condition
        self.precise_clocks = frozenset(precise_clocks)
        self.relaxed = _relax(condition, self.precise_clocks)

    @property
    def clock_size(self):
        return self.condition.size()

    def copy(self):
        return type(self)(self.condition.copy(), self.precise_clocks)

    def imprecise_clocks(self):
        return [
            c for c in range(self.clock_size)
            if c not in self.precise_clocks]

    def match(self, transition):
        """Return `True` if the relaxed zone meets the guard."""
        guard = transition.guard
        n = max(self.clock_size, cst.clock_count(guard))
        zone = self.relaxed.copy().resize(n + 1)
        return cst.constrain(zone, guard).is_satisfiable()

    def may_match(self, transitions):
        """Return `True` if some guard meets a later relaxed zone."""
        zone = self.relaxed.copy().elapse()
        for t in transitions:
            n = max(self.clock_size, cst.clock_count(t.guard))
            z = zone.copy().resize(n + 1)
            if cst.constrain(z, t.guard).is_satisfiable():
                return True
        return False

    def to_relaxed_guard(self):
        return cst.from_zone(self.relaxed)

    def min_clock_lower_bound(self):
        return min(
            self.condition.clock_interval(c)[0].value
            for c in range(self.clock_size))

    def successor(self, action):
        """Return conditions right after `action`.

        The clock that starts with `action` is precise.
        """
        log.debug('successor after "{a}"'.format(a=action))
        n = self.clock_size
        return type(self)(
            self.condition.extend_zero(),
            self.precise_clocks | {n})

    def successor_assign(self):
        """Let time pass to the next region, in place."""
        self.condition = self.condition.time_successor()
        self.relaxed = _relax(self.condition, self.precise_clocks)

    def make_after_external_transition(self, resets, clock_size):
        """Return conditions after a transition that assigns clocks.

        A concrete valuation is sampled from the condition after
        the action, and `resets` applied to it. Clocks assigned an
        integer become precise, a non-integral constant makes the
        clock imprecise, a copy inherits the precision of its source.
        Clocks skipped by an assignment past the current clocks are 0,
        so precise.

        @param resets: `tuple` of `(clock, Constant | CopyFrom)`
        @param clock_size: number of clocks of the target state
        """
        n = self.clock_size
        values = self.condition.extend_zero().sample()
        precise = set(self.precise_clocks)
        precise.add(n)
        new_values = list(values)
        new_precise = set(precise)
        for clock, value in resets:
            while clock >= len(new_values):
                new_precise.add(len(new_values))
                new_values.append(Fraction(0))
            if isinstance(value, CopyFrom):
                new_values[clock] = values[value.clock]
                if value.clock in precise:
                    new_precise.add(clock)
                else:
                    new_precise.discard(clock)
            else:
                assert isinstance(value, Constant), value
                new_values[clock] = Fraction(value.value)
                if value.is_integral:
                    new_precise.add(clock)
                else:
                    new_precise.discard(clock)
        k = max(1, min(clock_size, len(new_values)))
        condition = TimedCondition.from_valuation(new_values[:k])
        return type(self)(
            condition,
            {c for c in new_precise if c < k})

    def __eq__(self, other):
        if not isinstance(other, NeighborConditions):
            return NotImplemented
        return (
            self.condition == other.condition and
            self.precise_clocks == other.precise_clocks)

    def __hash__(self):
        return hash((self.condition, self.precise_clocks))

    def __str__(self):
        return '{c}, precise clocks: {p}'.format(
            c=self.condition, p=sorted(self.precise_clocks))


def _relax(condition, precise_clocks):
    """Return zone with imprecise clocks widened."""
    zone = condition.zone.copy()
    for clock in range(condition.size()):
        if clock in precise_clocks:
            continue
        lower, upper = condition.clock_interval(clock)
        k = lower.value
        if condition.is_point(clock):
            if k == 0:
                low = (0, True)
                high = (1, False)
            else:
                low = (k - 1, False)
                high = (k + 1, False)
        else:
            low = (k, True)
            high = (upper.value, True)
        i = clock + 1
        zone.unconstrain(i)
        zone.tighten(i, 0, high)
        zone.tighten(0, i, (- low[0], low[1]))
    return zone.canonize()
