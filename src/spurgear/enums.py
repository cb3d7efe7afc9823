"""Type-safe enums for spurgear."""

from enum import Enum


class CutStrategy(Enum):
    """How tooth gaps are carved out of the blank"""
    SEQUENTIAL = "sequential"  # One subtraction per tooth, each consuming the previous mesh
    COMPOUND = "compound"  # Union all cutters first, then subtract once
