"""Correspondence between clocks of two timed conditions.

When a learned prefix is identified with another one,
the clocks of the target are given the values of clocks
of the source. A renaming relation records which clocks
correspond. A clock of the target is imprecise if
its value cannot be recovered exactly this way.
"""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import logging
import math

from tazone.automata.timed_automaton import Constant
from tazone.automata.timed_automaton import CopyFrom


log = logging.getLogger(__name__)


class RenamingRelation(object):
    """Pairs `(left, right)` of a source and a target clock."""

    def __init__(self, pairs=None):
        if pairs is None:
            pairs = list()
        self.pairs = [(int(u), int(v)) for u, v in pairs]

    def left_variables(self):
        return sorted({u for u, _ in self.pairs})

    def right_variables(self):
        return sorted({v for _, v in self.pairs})

    def imprecise_clocks(self, source, target):
        """Return `True` if some clock of `target` is imprecise.

        A clock of `target` is precise if it corresponds to a
        clock of `source` within the same interval, or if it has a
        single possible value, so a constant can be assigned.

        @type source, target: `TimedCondition`
        """
        mapped = dict()
        for u, v in self.pairs:
            mapped.setdefault(v, list()).append(u)
        for clock in range(target.size()):
            if clock not in mapped:
                if not target.is_point(clock):
                    log.debug('clock {c} is imprecise'.format(c=clock))
                    return True
                continue
            interval = target.clock_interval(clock)
            if any(source.clock_interval(u) != interval
                   for u in mapped[clock]):
                log.debug('renaming of clock {c} is inexact'.format(
                    c=clock))
                return True
        return False

    def to_resets(self, source, target):
        """Return resets that move `source` clocks to `target` clocks.

        Clocks of `target` that are not renamed are assigned
        their value if it is an integer, otherwise the midpoint
        of their interval, which marks them as imprecise.

        @rtype: `tuple` of `(clock, Constant | CopyFrom)`
        """
        mapped = {v: u for u, v in self.pairs}
        resets = list()
        for clock in range(target.size()):
            if clock in mapped:
                if mapped[clock] != clock:
                    resets.append((clock, CopyFrom(mapped[clock])))
                continue
            lower, _ = target.clock_interval(clock)
            if target.is_point(clock):
                value = lower.value
            else:
                value = math.floor(lower.value) + 0.5
            resets.append((clock, Constant(value)))
        return tuple(resets)

    def __iter__(self):
        return iter(self.pairs)

    def __len__(self):
        return len(self.pairs)

    def __eq__(self, other):
        if not isinstance(other, RenamingRelation):
            return NotImplemented
        return sorted(self.pairs) == sorted(other.pairs)

    def __hash__(self):
        return hash(tuple(sorted(self.pairs)))

    def __str__(self):
        c = ['x{u} = y{v}'.format(u=u, v=v) for u, v in self.pairs]
        return '{' + ', '.join(c) + '}'
