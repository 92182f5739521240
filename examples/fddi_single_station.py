"""The FDDI protocol with a single station, as a timed automaton.

The actions are renamed as follows:

  - TT (token arrives): `a`
  - RT (token released): `b`
  - tau (asynchronous transmission): `c`
"""
import logging
import sys

from tazone.automata import constraint as cst
from tazone.automata import enumeration as enum
from tazone.automata.timed_automaton import Constant
from tazone.automata.timed_automaton import TimedAutomaton
from tazone.learning.oracle import SymbolicMembershipOracle
from tazone.steps import TimedAutomatonRunner
from tazone.symbolic.elementary import ElementaryLanguage
from tazone.symbolic.timed_condition import TimedCondition


ALPHABET = ['a', 'b', 'c']
# clocks
X = 0
Y = 1
Z = 2


def fddi(sa=20, trtt=100):
    """Return automaton of a station with parameters SA and TRTT."""
    aut = TimedAutomaton()
    idle_z = aut.add_state(is_match=True, initial=True)
    st_z = aut.add_state(is_match=True)
    at_z = aut.add_state(is_match=True)
    idle_y = aut.add_state(is_match=True)
    st_y = aut.add_state(is_match=True)
    at_y = aut.add_state(is_match=True)
    zero = Constant(0)
    idle_z.add_transition('a', st_z, resets=[(Y, zero), (X, zero)])
    idle_y.add_transition('a', st_y, resets=[(Z, zero), (X, zero)])
    st_z.add_transition(
        'b', idle_y,
        guard=[cst.Constraint(X, '>=', sa), cst.Constraint(Z, '>=', trtt)])
    at_z.add_transition('b', idle_y)
    st_y.add_transition(
        'b', idle_z,
        guard=[cst.Constraint(X, '>=', sa), cst.Constraint(Y, '>=', trtt)])
    at_y.add_transition('b', idle_z)
    st_z.add_transition(
        'c', at_z,
        guard=[cst.Constraint(X, '>=', sa), cst.Constraint(Z, '<', trtt)])
    st_y.add_transition(
        'c', at_y,
        guard=[cst.Constraint(X, '>=', sa), cst.Constraint(Y, '>=', trtt)])
    aut.make_max_constants()
    return aut


def main(sa=20, trtt=100):
    aut = fddi(sa, trtt)
    print(aut)
    aut.simplify_strong()
    aut.simplify_with_zones()
    print('simplified:')
    print(aut)
    complement = aut.complement(ALPHABET)
    complement.simplify_strong()
    complement.simplify_with_zones()
    print('complement:')
    print(complement)
    print(enum.to_dot(complement))
    # which timings of "ab" does a fast station accept ?
    small = fddi(sa=1, trtt=2)
    oracle = SymbolicMembershipOracle(TimedAutomatonRunner(small))
    c = TimedCondition.top(3)
    c.restrict_upper_bound(0, 2, (3, True))
    language = ElementaryLanguage('ab', c)
    result = oracle.query(language)
    print('accepted regions of {w}:'.format(w=language))
    for r in result:
        print('    {r}'.format(r=r))
    print('{n} membership queries'.format(n=oracle.count))


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    args = [int(s) for s in sys.argv[1:3]]
    main(*args)
