"""Hex Chess: rules engine for a hexagonal chess variant on a 37-cell star board."""

__version__ = "0.1.0"
