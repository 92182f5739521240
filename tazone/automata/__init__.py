"""Timed automata, their zone graphs, and guards."""
