"""Stateless consensus core: many analyzers' findings in, one prioritized report out."""

__version__ = "1.0.0"
