"""Orchestration of queries run against many repositories on a remote platform."""

__version__ = "0.1.0"
