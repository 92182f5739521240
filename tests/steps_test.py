"""Test the module `tazone.steps`."""
from fractions import Fraction
import logging

import pytest

from tazone.automata.constraint import Constraint
from tazone.automata.timed_automaton import Constant
from tazone.automata.timed_automaton import CopyFrom
from tazone.automata.timed_automaton import TimedAutomaton
from tazone import steps


logging.getLogger('tazone').setLevel('ERROR')


def two_clock_automaton():
    aut = TimedAutomaton()
    s0 = aut.add_state(is_match=False, initial=True)
    s1 = aut.add_state(is_match=True)
    s0.add_transition(
        'a', s1,
        resets=[(0, Constant(0)), (1, CopyFrom(0))],
        guard=[Constraint(0, '<', 2)])
    s1.add_transition(
        'b', s0, guard=[Constraint(1, '>', 1)])
    return aut


def test_runner():
    aut = two_clock_automaton()
    s0, s1 = aut.states
    runner = steps.TimedAutomatonRunner(aut)
    r = runner.reset()
    assert r is False, r
    assert runner.state == steps.Configuration(s0, (0, 0)), runner.state
    r = runner.step('a', Fraction(3, 2))
    assert r is True, r
    # resets are simultaneous
    c = steps.Configuration(s1, (0, Fraction(3, 2)))
    assert runner.state == c, runner.state
    r = runner.step(None, 1)
    assert r is True, r
    r = runner.step('b', 0)
    assert r is False, r
    assert runner.state.location is s0, runner.state
    assert len(runner.past) == 3, runner.past


def test_runner_sink():
    aut = two_clock_automaton()
    runner = steps.TimedAutomatonRunner(aut)
    runner.reset()
    # guard not enabled
    r = runner.step('a', 3)
    assert r is False, r
    assert runner.state.location is None, runner.state
    # the sink absorbs
    r = runner.step(None, 1)
    assert r is False, r
    r = runner.step('b', 1)
    assert r is False, r
    # no transition for the action
    runner.reset()
    r = runner.step('c', 0)
    assert r is False, r
    assert runner.state.location is None, runner.state


def test_runner_errors():
    aut = two_clock_automaton()
    runner = steps.TimedAutomatonRunner(aut)
    with pytest.raises(ValueError):
        runner.step('a', 1)
    runner.reset()
    with pytest.raises(ValueError):
        runner.step('a', -1)


def test_runner_without_initial_states():
    runner = steps.TimedAutomatonRunner(TimedAutomaton())
    r = runner.reset()
    assert r is False, r
    r = runner.step(None, 1)
    assert r is False, r


def test_sul():
    sul = steps.SUL()
    with pytest.raises(NotImplementedError):
        sul.reset()
    with pytest.raises(NotImplementedError):
        sul.step('a', 0)


def test_history():
    h = steps.History()
    assert h.state is None, h.state
    h.update(1)
    h.update(2)
    assert h.state == 2, h.state
    assert h.past == [None, 1], h.past
