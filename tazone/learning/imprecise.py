"""Relax guards to account for imprecise clocks.

When a learned transition jumps to a state with clocks that
are only approximately known, the guards reached from there
may be too tight. The handler propagates the imprecision
forward and appends transitions with relaxed guards.
"""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import logging

from tazone.automata import constraint as cst
from tazone.automata.timed_automaton import Constant
from tazone.automata.timed_automaton import CopyFrom
from tazone.automata.timed_automaton import TATransition
from tazone.learning.neighbor import NeighborConditions


log = logging.getLogger(__name__)


class ImpreciseClockHandler(object):
    """Worklist of states paired with neighbor conditions.

    Call `push` for each jump of the learned automaton,
    then `run` to relax the guards.
    """

    def __init__(self):
        # ordered set of `(TAState, NeighborConditions)`
        self._pending = dict()
        self._visited = set()

    def __len__(self):
        return len(self._pending)

    def push(self, jumped_state, renaming, source, target):
        """Record a jump to `jumped_state`, if clocks are imprecise.

        @type renaming: `RenamingRelation`
        @type source, target: `ElementaryLanguage`
        @return: `True` if recorded
        """
        assert target.timed_condition.is_simple(), (
            'requires simple target condition', target)
        imprecise = renaming.imprecise_clocks(
            source.timed_condition, target.timed_condition)
        if not imprecise:
            return False
        neighbor = NeighborConditions(
            target.timed_condition.copy(),
            renaming.right_variables())
        log.debug('push imprecise neighbors: {s!r}, {n}'.format(
            s=jumped_state, n=neighbor))
        self._pending[(jumped_state, neighbor)] = None
        return True

    def run(self):
        """Relax guards until no pending pair remains.

        Transitions are only appended, never removed.
        """
        log.info('++ run')
        while self._pending:
            pair = next(iter(self._pending))
            del self._pending[pair]
            h = hash(pair)
            if h in self._visited:
                continue
            self._visited.add(h)
            state, neighbor = pair
            self._relax(state, neighbor.copy())
        log.info('-- run')

    def _relax(self, state, neighbor):
        horizon = max(cst.max_constants(
            (t.guard for _, t in state.transitions()),
            state.clock_size() or 1))
        no_match = True
        while True:
            log.debug('current neighbors: {s!r}, {n}'.format(
                s=state, n=neighbor))
            match_bounded = False
            for action, transitions in state.next.items():
                successor = neighbor.successor(action)
                new = list()
                for t in list(transitions):
                    matched, bounded, result = _handle_one(
                        neighbor, t, successor, new)
                    if matched:
                        no_match = False
                    match_bounded = match_bounded or bounded
                    if result is not None:
                        self._pending.setdefault(result, None)
                for t in new:
                    if t not in transitions:
                        transitions.append(t)
            if not (match_bounded or no_match):
                break
            transitions = [t for _, t in state.transitions()]
            if no_match and not neighbor.may_match(transitions):
                break
            if neighbor.min_clock_lower_bound() > horizon:
                break
            neighbor.successor_assign()


def _handle_one(neighbor, transition, successor, new_transitions):
    """Relax `transition` if `neighbor` matches it.

    @return: `(matched, upper_bounded, pending)`,
        where `pending` is a pair `(TAState, NeighborConditions)`
        to process next, or `None`
    """
    if not neighbor.match(transition):
        return False, False, None
    guard = transition.guard
    upper_bounded = cst.has_upper_bound(guard)
    relaxed = neighbor.to_relaxed_guard()
    if not upper_bounded:
        relaxed = tuple(c for c in relaxed if not c.is_upper_bound)
    log.debug('matched {g}, relaxed guard: {r}'.format(
        g=cst.format_guard(guard), r=cst.format_guard(relaxed)))
    if not cst.is_weaker(relaxed, guard) or cst.is_weaker(guard, relaxed):
        return True, upper_bounded, None
    target = transition.target
    resets = transition.resets
    new_transitions.append(TATransition(target, resets, relaxed))
    if resets == ((neighbor.clock_size, Constant(0)),):
        return True, upper_bounded, (target, successor)
    clock_size = cst.clock_count(
        *(t.guard for _, t in target.transitions()))
    copies = [v for _, v in resets if isinstance(v, CopyFrom)]
    assigned = dict(resets)
    if not copies and all(
            isinstance(assigned.get(c), Constant)
            for c in range(clock_size)):
        return True, upper_bounded, None
    copied = {v.clock for v in copies}

    def absorbed(clock):
        v = assigned.get(clock)
        overwritten = isinstance(v, Constant) and v.is_integral
        return (
            (clock >= clock_size or overwritten) and
            clock not in copied)

    if all(absorbed(c) for c in neighbor.imprecise_clocks()):
        return True, upper_bounded, None
    other = neighbor.make_after_external_transition(resets, clock_size)
    log.debug('neighbors after external transition: {s!r}, {n}'.format(
        s=target, n=other))
    return True, upper_bounded, (target, other)
