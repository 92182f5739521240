"""Symbolic timed automata for learning real-time systems.

Zones and timed conditions in `tazone.symbolic`,
timed automata in `tazone.automata`,
and guard relaxation and membership queries in `tazone.learning`.
"""
try:
    from tazone._version import version as __version__
except ImportError:
    __version__ = None
