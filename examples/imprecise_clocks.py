"""How guards are relaxed after a jump with an imprecise clock.

A learner identified the prefix "a" after a delay in (1, 2)
with the prefix "" after a delay in (1, 2), by a renaming that
does not relate the clock. The clock value after the jump
is then known only approximately.
"""
import logging

from tazone.automata import constraint as cst
from tazone.automata.timed_automaton import Constant
from tazone.automata.timed_automaton import TimedAutomaton
from tazone.learning.imprecise import ImpreciseClockHandler
from tazone.symbolic.elementary import ElementaryLanguage
from tazone.symbolic.renaming import RenamingRelation
from tazone.symbolic.timed_condition import TimedCondition


def jump_automaton():
    aut = TimedAutomaton()
    s0 = aut.add_state(is_match=False, initial=True)
    s1 = aut.add_state(is_match=True)
    s0.add_transition(
        'a', s1,
        resets=[(0, Constant(0))],
        guard=[cst.Constraint(0, '>', 1), cst.Constraint(0, '<', 2)])
    return aut


def one_clock_in(lower, upper):
    """Return condition of one delay in `(lower, upper)`."""
    c = TimedCondition.top(1)
    c.zone.tighten(1, 0, (upper, False))
    c.zone.tighten(0, 1, (- lower, False))
    return c


def main():
    aut = jump_automaton()
    print(aut)
    source = ElementaryLanguage('', one_clock_in(1, 2))
    target = ElementaryLanguage('', one_clock_in(1, 2))
    renaming = RenamingRelation()
    handler = ImpreciseClockHandler()
    jumped = aut.initial_states[0]
    if handler.push(jumped, renaming, source, target):
        handler.run()
    print('relaxed:')
    print(aut)
    aut.merge_nondeterministic_branching()
    print('merged:')
    print(aut)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    main()
