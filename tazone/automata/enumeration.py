"""Dump timed automata as graphs, for inspection."""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import logging
import math

import natsort
import networkx as nx

from tazone.automata import timed_automaton as _ta


logger = logging.getLogger(__name__)


def dump_automaton(automaton, fname='automaton.pdf', prog='dot'):
    """Dump graph of `automaton` to file `fname`.

    The file format is the extension of `fname`.
    """
    pd = to_pydot(automaton)
    ext = fname.split('.')[-1]
    pd.write(fname, prog=prog, format=ext)
    logger.info('dumped automaton to "{f}"'.format(f=fname))


def to_dot(automaton):
    """Return DOT text of `automaton`."""
    return to_pydot(automaton).to_string()


def to_pydot(automaton):
    """Return `pydot.Dot` for `automaton`."""
    g = automaton_to_graph(automaton)
    h = _format_nx(g)
    return nx.drawing.nx_pydot.to_pydot(h)


def automaton_to_graph(automaton):
    """Return enumerated graph of `automaton`.

    Nodes are the indices of `automaton.states`.
    Node attributes are `is_match` and `initial`,
    edge attributes `action`, `guard`, and `resets`.

    @type automaton: `TimedAutomaton`
    @rtype: `networkx.MultiDiGraph`
    """
    g = nx.MultiDiGraph()
    umap = dict()
    initial = set(automaton.initial_states)
    for state in automaton.states:
        u = _find_or_add_state(state, umap)
        g.add_node(
            u, is_match=state.is_match,
            initial=(state in initial))
    for state in automaton.states:
        u = umap[state]
        for action in natsort.natsorted(state.next, key=str):
            for t in state.next[action]:
                v = _find_or_add_state(t.target, umap)
                g.add_edge(
                    u, v, action=action,
                    guard=t.guard, resets=t.resets)
    assert len(g) == len(umap), (g.nodes, umap)
    return g


def _find_or_add_state(state, umap):
    """Return integer node for `state`.

    If absent, then a fresh node is created.
    """
    return umap.setdefault(state, len(umap))


def _format_nx(g):
    """Return graph with labels ready to be dumped.

    @type g: `networkx.MultiDiGraph`
    @rtype: `networkx.MultiDiGraph`
    """
    h = nx.MultiDiGraph()
    for u, d in g.nodes(data=True):
        shape = 'doublecircle' if d['is_match'] else 'circle'
        attr = dict(label=_quote(u), shape=shape)
        if d['initial']:
            attr['style'] = 'bold'
        h.add_node(u, **attr)
    for u, v, d in g.edges(data=True):
        c = [str(x) for x in d['guard']]
        if c:
            guard = _square_conj(c)
        else:
            guard = 'TRUE'
        label = '{a}, {g} / {r}'.format(
            a=d['action'], g=guard,
            r=_ta.format_resets(d['resets']))
        h.add_edge(u, v, label=_quote(label))
    return h


def _quote(s):
    return '"{s}"'.format(s=s)


def _square_conj(p, n=None, op=r'&and;'):
    """Return conjunction arranged vertically.

    The number of conjuncts per line is
    picked to make the result more balanced,
    closer to a square.
    The formatting characters are for `dot`.

    @param p: iterable of conjuncts
    @param n: number of items in `p`
        (useful when `p` is a generator)
    """
    if n is None:
        n = len(p)
    assert n > 0, n
    m = math.ceil(n**0.5)
    c = list()
    for i, s in enumerate(p):
        c.append(op)
        s = ' ({s}) '.format(s=s)
        c.append(s)
        if (i + 1) % m == 0:
            c.append(r'\l')
    # single line ?
    if n <= 2:
        c.pop(0)
    return ''.join(c)
