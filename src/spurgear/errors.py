"""
Exception types raised by spurgear.

Validation problems are reported before any geometry is built; geometry
problems abort a build without leaving a partial mesh or file behind.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .calculator.validation import ValidationResult
    from .core.mesh_repair import ManifoldReport


class SpurGearError(Exception):
    """Base class for all spurgear errors."""


class InvalidParametersError(SpurGearError, ValueError):
    """Gear parameters cannot describe a gear (e.g. fewer than 3 teeth)."""

    def __init__(self, message: str, validation: Optional["ValidationResult"] = None):
        super().__init__(message)
        self.validation = validation


class MalformedMeshError(SpurGearError, ValueError):
    """A mesh buffer or STL text does not describe whole triangles."""


class DegenerateBooleanError(SpurGearError, RuntimeError):
    """The boolean engine was given, or would produce, a non-manifold solid."""

    def __init__(self, message: str, report: Optional["ManifoldReport"] = None):
        super().__init__(message)
        self.report = report


class GenerationCancelledError(SpurGearError):
    """Gear generation was cancelled or ran past its timeout."""
