"""Procedural level and terrain generation on rectangular tile grids."""

__version__ = "0.1.0"
