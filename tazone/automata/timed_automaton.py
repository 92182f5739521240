"""Timed automata as graphs of states with guarded transitions.

A `TimedAutomaton` owns its `TAState`s. Each state maps actions
to ordered lists of `TATransition`s. A transition is a value:
a target state, simultaneous resets, and a guard.

Reference
=========

Rajeev Alur, David L. Dill
    "A theory of timed automata"
    Theoretical Computer Science, Vol.126, No.2, pp.183--235, 1994
"""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import collections
import logging
import math

import natsort

from tazone.automata import constraint as cst
from tazone.automata import zone_automaton as _za


UNOBSERVABLE = 'ε'
log = logging.getLogger(__name__)


class Constant(collections.namedtuple('Constant', ['value'])):
    """Assignment of a constant to a clock."""

    __slots__ = ()

    @property
    def is_integral(self):
        return self.value == math.floor(self.value)

    def __str__(self):
        return str(self.value)


class CopyFrom(collections.namedtuple('CopyFrom', ['clock'])):
    """Assignment of the value of another clock."""

    __slots__ = ()

    def __str__(self):
        return 'x{c}'.format(c=self.clock)


class TATransition(collections.namedtuple(
        'TATransition', ['target', 'resets', 'guard'])):
    """Guarded edge to `target` that assigns clocks.

    @param target: `TAState` in the same automaton
    @param resets: `tuple` of `(clock, Constant | CopyFrom)`,
        applied simultaneously
    @param guard: `tuple` of `Constraint`
    """

    __slots__ = ()

    def __new__(cls, target, resets=(), guard=()):
        return super(TATransition, cls).__new__(
            cls, target, tuple(resets), tuple(guard))

    @staticmethod
    def imprecise_constant_assign_size(resets):
        """Return number of non-integral constants in `resets`."""
        return sum(
            1 for _, value in resets
            if isinstance(value, Constant) and not value.is_integral)

    def assignments(self):
        """Return resets as input to `Zone.apply_resets`."""
        d = dict()
        for clock, value in self.resets:
            if isinstance(value, CopyFrom):
                d[clock + 1] = (value.clock + 1, 0)
            else:
                d[clock + 1] = (0, value.value)
        return d

    def clock_size(self):
        n = cst.clock_count(self.guard)
        for clock, value in self.resets:
            n = max(n, clock + 1)
            if isinstance(value, CopyFrom):
                n = max(n, value.clock + 1)
        return n

    def __repr__(self):
        return 'TATransition({t!r}, {r!r}, {g!r})'.format(
            t=self.target, r=self.resets, g=self.guard)


class TAState(object):
    """Location of a timed automaton.

    States compare by identity.

    @param is_match: `True` if accepting
    """

    def __init__(self, is_match=False):
        self.is_match = is_match
        # action -> list of `TATransition`
        self.next = dict()

    def add_transition(self, action, target, resets=(), guard=()):
        """Append a transition and return it."""
        t = TATransition(target, resets, guard)
        self.next.setdefault(action, list()).append(t)
        return t

    def transitions(self):
        """Yield pairs `(action, transition)`."""
        for action, transitions in self.next.items():
            for t in transitions:
                yield action, t

    def clock_size(self):
        return max(
            (t.clock_size() for _, t in self.transitions()),
            default=0)

    def deterministic(self):
        """Return `True` if no two guards of an action overlap."""
        for action, transitions in self.next.items():
            for j, u in enumerate(transitions):
                for t in transitions[:j]:
                    if cst.satisfiable(cst.conjunction(t.guard, u.guard)):
                        log.debug((
                            'overlapping guards on "{a}": '
                            '{t} and {u}').format(
                                a=action,
                                t=cst.format_guard(t.guard),
                                u=cst.format_guard(u.guard)))
                        return False
        return True

    def add_upper_bound_for_unobservable_transitions(self):
        transitions = self.next.get(UNOBSERVABLE)
        if not transitions:
            return
        transitions[:] = [
            TATransition(
                t.target, t.resets, cst.add_upper_bound(t.guard))
            for t in transitions]

    def merge_nondeterministic_branching(self):
        """Merge transitions of each action with overlapping guards.

        Repeat until neither step applies:

          1. remove a transition whose guard is contained in the
             guard of a different transition to the same target
          2. replace two transitions with overlapping guards by
             one, with the union hull of their guards

        Of two merged transitions, the resets and target kept
        are those with more imprecise constant assignments,
        or those of the earlier one.
        """
        for action, transitions in self.next.items():
            changed = True
            while changed:
                changed = _remove_subsumed(transitions)
                changed = _merge_overlapping(transitions) or changed

    def simplify(self):
        """Remove empty and duplicate guards, merge convex unions."""
        for action in list(self.next):
            transitions = list()
            for t in self.next[action]:
                if t in transitions or not cst.satisfiable(t.guard):
                    continue
                transitions.append(t)
            _merge_convex(transitions)
            if transitions:
                self.next[action] = transitions
            else:
                del self.next[action]

    def __repr__(self):
        return 'TAState(is_match={m}, at {i})'.format(
            m=self.is_match, i=hex(id(self)))


def _remove_subsumed(transitions):
    changed = False
    i = 0
    while i < len(transitions):
        t = transitions[i]
        if any(u != t and u.target is t.target and
                cst.is_weaker(u.guard, t.guard)
               for u in transitions):
            log.debug('remove subsumed guard {g}'.format(
                g=cst.format_guard(t.guard)))
            del transitions[i]
            changed = True
        else:
            i += 1
    return changed


def _merge_overlapping(transitions):
    changed = False
    i = 0
    while i < len(transitions):
        j = i + 1
        while j < len(transitions):
            t = transitions[i]
            u = transitions[j]
            if not cst.satisfiable(cst.conjunction(t.guard, u.guard)):
                j += 1
                continue
            assert t.target.is_match == u.target.is_match, (t, u)
            n = TATransition.imprecise_constant_assign_size
            keep = u if n(t.resets) < n(u.resets) else t
            guard = cst.union_hull([t.guard, u.guard])
            transitions[i] = TATransition(keep.target, keep.resets, guard)
            del transitions[j]
            changed = True
            log.debug('merged guards into {g}'.format(
                g=cst.format_guard(guard)))
        i += 1
    return changed


def _merge_convex(transitions):
    merged = True
    while merged:
        merged = False
        for i, t in enumerate(transitions):
            for j in range(i + 1, len(transitions)):
                u = transitions[j]
                if (t.target is not u.target or
                        t.resets != u.resets or
                        not cst.union_is_convex(t.guard, u.guard)):
                    continue
                guard = cst.union_hull([t.guard, u.guard])
                transitions[i] = TATransition(t.target, t.resets, guard)
                del transitions[j]
                merged = True
                break
            if merged:
                break


class TimedAutomaton(object):
    """Automaton over actions, with clocks.

    @param states: `list` of `TAState`
    @param initial_states: `list` of `TAState`,
        a subset of `states`
    @param max_constraints: `list` of maximal constants,
        item `c` for clock `c`
    """

    def __init__(
            self, states=None,
            initial_states=None,
            max_constraints=None):
        if states is None:
            states = list()
        if initial_states is None:
            initial_states = list()
        if max_constraints is None:
            max_constraints = list()
        self.states = states
        self.initial_states = initial_states
        self.max_constraints = max_constraints

    def add_state(self, is_match=False, initial=False):
        """Return a new state of `self`."""
        state = TAState(is_match)
        self.states.append(state)
        if initial:
            self.initial_states.append(state)
        return state

    def clock_size(self):
        """Return number of clocks used."""
        return max(
            (s.clock_size() for s in self.states),
            default=0)

    def state_size(self):
        return len(self.states)

    def transition_size(self):
        return sum(
            len(transitions)
            for s in self.states
            for transitions in s.next.values())

    def make_max_constants(self, states=None):
        """Set `self.max_constraints` from guards of `states`.

        @param states: `list` of `TAState`,
            by default `self.states`
        """
        if states is None:
            states = self.states
        guards = [t.guard for s in states for _, t in s.transitions()]
        constants = cst.max_constants(guards, self.clock_size())
        self.max_constraints = constants
        return constants

    def deterministic(self):
        return all(s.deterministic() for s in self.states)

    def merge_nondeterministic_branching(self):
        for state in self.states:
            state.merge_nondeterministic_branching()

    def add_upper_bound_for_unobservable_transitions(self):
        for state in self.states:
            state.add_upper_bound_for_unobservable_transitions()

    def simplify(self):
        """Simplify transitions of each state in place.

        @return: `self`
        """
        for state in self.states:
            state.simplify()
        return self

    def simplify_strong(self):
        """Merge states that are bisimilar, then simplify.

        The partition starts from acceptance, and is refined
        by the actions, guards, and resets of transitions,
        and the blocks of their targets.

        @return: `self`
        """
        log.info('++ simplify_strong')
        self.simplify()
        block = {s: int(s.is_match) for s in self.states}
        n = len(set(block.values()))
        while True:
            signatures = dict()
            refined = dict()
            for s in self.states:
                sig = (block[s], frozenset(
                    (action, t.guard, t.resets, block[t.target])
                    for action, t in s.transitions()))
                refined[s] = signatures.setdefault(sig, len(signatures))
            block = refined
            if len(signatures) == n:
                break
            n = len(signatures)
        self._quotient(block)
        self.simplify()
        log.info('-- simplify_strong: {n} states'.format(
            n=self.state_size()))
        return self

    def _quotient(self, block):
        """Keep one state per block, in the order of `self.states`."""
        representative = dict()
        for s in self.states:
            representative.setdefault(block[s], s)
        states = [
            s for s in self.states
            if representative[block[s]] is s]
        for s in states:
            for action, transitions in s.next.items():
                transitions[:] = [
                    TATransition(
                        representative[block[t.target]],
                        t.resets, t.guard)
                    for t in transitions]
        initial = list()
        for s in self.initial_states:
            r = representative[block[s]]
            if r not in initial:
                initial.append(r)
        self.states = states
        self.initial_states = initial

    def simplify_with_zones(self):
        """Remove states and transitions unused by accepted runs.

        A state or transition is used if it occurs in the zone
        automaton, after removing zone states that are unreachable
        or cannot reach an accepting zone state.

        @return: `self`
        """
        self.check_consistency()
        log.info('++ simplify_with_zones')
        za = _za.ta_to_za(self)
        za.remove_dead_states()
        live_states = set()
        live = collections.defaultdict(set)
        for u, d in za.nodes(data=True):
            live_states.add(d['ta_state'])
        for u, _, d in za.edges(data=True):
            state = za.nodes[u]['ta_state']
            live[state, d['action']].add(d['transition'])
        self.states = [s for s in self.states if s in live_states]
        self.initial_states = [
            s for s in self.initial_states if s in live_states]
        for state in self.states:
            for action in list(state.next):
                used = live.get((state, action), set())
                transitions = [t for t in state.next[action] if t in used]
                if transitions:
                    state.next[action] = transitions
                else:
                    del state.next[action]
        log.info('-- simplify_with_zones: {n} states'.format(
            n=self.state_size()))
        return self

    def make_complete(self, alphabet):
        """Route each missing step to a rejecting sink.

        For each state and action in `alphabet`, the clock valuations
        that no guard covers lead to a new sink state.
        If `self` has no initial states, then the sink is initial.
        """
        sink = None
        for state in list(self.states):
            for action in alphabet:
                guards = [t.guard for t in state.next.get(action, ())]
                rest = cst.complement(guards)
                if not rest:
                    continue
                if sink is None:
                    sink = self._add_sink(alphabet)
                for guard in rest:
                    state.add_transition(action, sink, guard=guard)
        if not self.initial_states:
            if sink is None:
                sink = self._add_sink(alphabet)
            self.initial_states.append(sink)

    def _add_sink(self, alphabet):
        sink = self.add_state(is_match=False)
        for action in alphabet:
            sink.add_transition(action, sink)
        log.debug('added sink state')
        return sink

    def complement(self, alphabet):
        """Return automaton of the complement timed language.

        @param alphabet: iterable of actions
        """
        self.check_consistency()
        assert self.deterministic(), 'requires deterministic automaton'
        alphabet = list(alphabet)
        other = self.copy()
        other.make_complete(alphabet)
        for state in other.states:
            state.is_match = not state.is_match
        return other

    def copy(self):
        """Return automaton with fresh states and same transitions."""
        self.check_consistency()
        umap = {s: TAState(s.is_match) for s in self.states}
        for s, r in umap.items():
            for action, transitions in s.next.items():
                r.next[action] = [
                    TATransition(umap[t.target], t.resets, t.guard)
                    for t in transitions]
        return type(self)(
            [umap[s] for s in self.states],
            [umap[s] for s in self.initial_states],
            list(self.max_constraints))

    def check_consistency(self):
        """Assert that `self` refers only to its own states."""
        states = set(self.states)
        assert len(states) == len(self.states), self.states
        for s in self.initial_states:
            assert s in states, ('foreign initial state', s)
        for s in self.states:
            for action, t in s.transitions():
                assert t.target in states, (
                    'foreign target', s, action, t)
                assert isinstance(t.guard, tuple), t
                assert isinstance(t.resets, tuple), t

    def __str__(self):
        index = {s: i for i, s in enumerate(self.states)}
        initial = set(self.initial_states)
        c = [
            'Timed automaton with {n} states and {m} clocks\n'.format(
                n=self.state_size(), m=self.clock_size())]
        for s in self.states:
            flags = list()
            if s in initial:
                flags.append('initial')
            if s.is_match:
                flags.append('accepting')
            c.append('state {i} {f}\n'.format(
                i=index[s], f=flags))
            for action in natsort.natsorted(s.next, key=str):
                for t in s.next[action]:
                    c.append('    {a}, {g} / {r} -> {j}\n'.format(
                        a=action,
                        g=cst.format_guard(t.guard),
                        r=format_resets(t.resets),
                        j=index.get(t.target, '?')))
        return ''.join(c)


def format_resets(resets):
    if not resets:
        return '{}'
    c = [
        'x{c} := {v}'.format(c=clock, v=value)
        for clock, value in resets]
    return ', '.join(c)
