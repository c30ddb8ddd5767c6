"""Samples, loaders, client settings and column views of MySQL server status counters."""

__version__ = "0.1.0"