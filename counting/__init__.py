"""Unique rewrite counting."""
from .brute_force import brute_force_count, enumerate_rewrites  # noqa: F401
from .unique_counter import (  # noqa: F401
    PositionContribution,
    count_unique_rewrites,
    position_contributions,
)

__all__ = [
    "PositionContribution",
    "brute_force_count",
    "count_unique_rewrites",
    "enumerate_rewrites",
    "position_contributions",
]
