"""Classroom election backend: candidates, phases, ballots and results."""

__version__ = "1.0.0"
