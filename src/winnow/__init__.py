"""Reachability-based unused-file classifier."""

__version__ = "0.1.0"
