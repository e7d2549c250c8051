"""Objective progress engine for the restaurant-operations dashboard."""

__version__ = "0.1.0"
