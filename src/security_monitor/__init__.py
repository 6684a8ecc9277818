"""Continuous security monitor: scan source trees, suppress repeats, alert sinks."""

__version__ = "0.1.0"
