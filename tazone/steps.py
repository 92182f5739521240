"""Simulate timed automata as systems under learning."""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import collections
import logging

from tazone.automata import constraint as cst
from tazone.automata.timed_automaton import CopyFrom


log = logging.getLogger(__name__)
Configuration = collections.namedtuple(
    'Configuration', ['location', 'valuation'])


class SUL(object):
    """System under learning.

    Subclasses implement `reset` and `step`.
    """

    def reset(self):
        """Return to the initial configuration."""
        raise NotImplementedError('subclass should implement')

    def step(self, action, duration):
        """Let `duration` elapse, then read `action`.

        If `action` is `None`, then only time elapses.

        @return: `True` if accepting after the step
        """
        raise NotImplementedError('subclass should implement')


class History(object):
    """Record current and past configurations."""

    def __init__(self):
        self.state = None
        # finite behavior
        self.past = list()

    def update(self, state):
        """Set `self.state` to `state`, update `self.past`."""
        self.past.append(self.state)
        self.state = state


class TimedAutomatonRunner(History, SUL):
    """Run a timed automaton on concrete timed words.

    The first enabled transition fires. If none is enabled,
    then the run moves to a rejecting sink, represented
    by the location `None`.

    @type automaton: `TimedAutomaton`
    """

    def __init__(self, automaton):
        super(TimedAutomatonRunner, self).__init__()
        self.automaton = automaton
        self._clock_size = automaton.clock_size()

    def reset(self):
        """Return `True` if the initial configuration is accepting."""
        if self.automaton.initial_states:
            location = self.automaton.initial_states[0]
        else:
            location = None
        self.past = list()
        self.state = Configuration(location, (0,) * self._clock_size)
        return self.accepting()

    def accepting(self):
        location = self.state.location
        return location is not None and location.is_match

    def step(self, action, duration):
        if self.state is None:
            raise ValueError('first call method `reset`')
        if duration < 0:
            raise ValueError(
                'negative duration: {d}'.format(d=duration))
        location, valuation = self.state
        valuation = tuple(v + duration for v in valuation)
        if action is not None and location is not None:
            location, valuation = self._fire(location, action, valuation)
        self.update(Configuration(location, valuation))
        log.debug('step "{a}" after {d}: {c}'.format(
            a=action, d=duration, c=self.state))
        return self.accepting()

    def _fire(self, location, action, valuation):
        for t in location.next.get(action, ()):
            if cst.satisfied(t.guard, valuation):
                return t.target, _assign(valuation, t.resets)
        return None, valuation


def _assign(valuation, resets):
    """Return `valuation` after simultaneous `resets`."""
    new = list(valuation)
    for clock, value in resets:
        if isinstance(value, CopyFrom):
            new[clock] = valuation[value.clock]
        else:
            new[clock] = value.value
    return tuple(new)
