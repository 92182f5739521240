"""Zones, timed conditions, and renaming relations."""
