"""Symbolic membership queries answered by concrete ones.

An elementary language is a union of regions. The system under
learning accepts either all or none of the timed words in a
region, so one sample per region decides the whole language.
"""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import logging

from tazone.symbolic.timed_condition import TimedCondition


log = logging.getLogger(__name__)


class SymbolicMembershipOracle(object):
    """Answer which part of an elementary language is accepted.

    @param sul: system under learning, with methods
        `reset` and `step`, as `tazone.steps.SUL`
    """

    def __init__(self, sul):
        self.sul = sul
        self.count = 0
        self._cache = dict()

    def membership(self, timed_word):
        """Return `True` if `sul` accepts `timed_word`.

        @type timed_word: `TimedWord`
        """
        self.count += 1
        word, durations = timed_word
        assert len(durations) == len(word) + 1, timed_word
        self.sul.reset()
        for action, duration in zip(word, durations):
            self.sul.step(action, duration)
        return self.sul.step(None, durations[-1])

    def query(self, elementary):
        """Return `list` of conditions where `elementary` is accepted.

        The list is empty if no timed word is accepted, and contains
        only the condition of `elementary` if all are accepted.
        Otherwise, each item is a convex hull of accepted regions
        that contains no rejected region.

        @type elementary: `ElementaryLanguage`
        @rtype: `list` of `TimedCondition`
        """
        key = (elementary.word, elementary.timed_condition.copy())
        if key in self._cache:
            return [c.copy() for c in self._cache[key]]
        accepted = list()
        rejected = list()
        for region in elementary.enumerate():
            if self.membership(region.sample()):
                accepted.append(region.timed_condition)
            else:
                rejected.append(region.timed_condition)
        log.debug((
            'query {e}: {a} regions accepted, '
            '{r} rejected').format(
                e=elementary, a=len(accepted), r=len(rejected)))
        if not accepted:
            result = list()
        elif not rejected:
            result = [elementary.timed_condition.copy()]
        else:
            result = _group(accepted, rejected)
        self._cache[key] = result
        return [c.copy() for c in result]


def _group(accepted, rejected):
    """Return hulls of `accepted` that contain no `rejected` region."""
    hulls = list()
    for c in accepted:
        for i, hull in enumerate(hulls):
            other = TimedCondition.convex_hull([hull, c])
            if not any(_meets(other, r) for r in rejected):
                hulls[i] = other
                break
        else:
            hulls.append(c)
    return hulls


def _meets(left, right):
    zone = left.zone.copy().conjoin(right.zone)
    return zone.is_satisfiable()
