"""Utility modules for the objective progress engine."""

from .dates import coerce_date, days_between

__all__ = [
    "coerce_date",
    "days_between",
]
