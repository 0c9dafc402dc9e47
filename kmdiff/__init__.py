"""Differential k-mer analysis: Poisson test, corrections, aggregation and CLI options."""

__version__ = "1.1.0"