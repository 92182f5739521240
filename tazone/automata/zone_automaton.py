"""Zone graph of a timed automaton.

Each node pairs a state of the timed automaton with a zone of
clock valuations reachable there. Extrapolation with maximal
constants keeps the number of zones finite.
"""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import collections
import logging

import networkx as nx

from tazone.automata import constraint as cst
from tazone.symbolic.zone import Zone


log = logging.getLogger(__name__)


class ZoneAutomaton(nx.MultiDiGraph):
    """Multigraph of symbolic states.

    Node attributes:

      - `ta_state`: `TAState`
      - `zone`: `Zone`

    Edge attributes:

      - `action`
      - `transition`: `TATransition` that the edge is made of

    The attribute `initial_nodes` is a `set` of nodes.
    """

    def __init__(self, *arg, **kw):
        super(ZoneAutomaton, self).__init__(*arg, **kw)
        self.initial_nodes = set()
        self._umap = dict()

    def find_or_add(self, ta_state, zone):
        """Return node for `(ta_state, zone)`, and if it is new.

        @rtype: `tuple(int, bool)`
        """
        key = (ta_state, zone)
        u = self._umap.get(key)
        if u is not None:
            return u, False
        u = len(self._umap)
        self._umap[key] = u
        self.add_node(u, ta_state=ta_state, zone=zone)
        return u, True

    def accepting_nodes(self):
        return {
            u for u, d in self.nodes(data=True)
            if d['ta_state'].is_match}

    def remove_dead_states(self):
        """Remove nodes unreachable from, or not reaching, acceptance."""
        reachable = set(self.initial_nodes)
        for u in self.initial_nodes:
            reachable.update(nx.descendants(self, u))
        accepting = self.accepting_nodes()
        coreachable = set(accepting)
        for u in accepting:
            coreachable.update(nx.ancestors(self, u))
        dead = set(self).difference(reachable & coreachable)
        self.remove_nodes_from(dead)
        self.initial_nodes.intersection_update(self)
        self._umap = {
            k: u for k, u in self._umap.items()
            if u not in dead}
        log.debug('removed {n} dead zone states'.format(n=len(dead)))


def ta_to_za(automaton, max_constants=None):
    """Return zone automaton of `automaton`.

    @type automaton: `TimedAutomaton`
    @param max_constants: maximal constant of each clock,
        by default the larger of `automaton.max_constraints`
        and the constants in guards
    @rtype: `ZoneAutomaton`
    """
    log.info('++ ta_to_za')
    n = automaton.clock_size()
    if max_constants is None:
        max_constants = _max_constants(automaton, n)
    g = ZoneAutomaton()
    queue = collections.deque()
    for state in automaton.initial_states:
        zone = Zone.zero(n + 1).elapse().extrapolate(max_constants)
        u, new = g.find_or_add(state, zone)
        g.initial_nodes.add(u)
        if new:
            queue.append(u)
    while queue:
        u = queue.popleft()
        d = g.nodes[u]
        zone = d['zone']
        for action, t in d['ta_state'].transitions():
            z = cst.constrain(zone.copy(), t.guard)
            if not z.is_satisfiable():
                continue
            z.apply_resets(t.assignments())
            z.elapse().extrapolate(max_constants)
            v, new = g.find_or_add(t.target, z)
            g.add_edge(u, v, action=action, transition=t)
            if new:
                queue.append(v)
    log.info('-- ta_to_za: {n} zone states'.format(n=len(g)))
    return g


def _max_constants(automaton, n):
    guards = [
        t.guard for s in automaton.states
        for _, t in s.transitions()]
    constants = cst.max_constants(guards, n)
    for i, c in enumerate(automaton.max_constraints[:n]):
        constants[i] = max(constants[i], c)
    return constants
