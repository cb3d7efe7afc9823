"""
Spur Gear Calculator - dimensions and validation for spur gear designs.

All design functions return GearDesign models for type safety.

Example:
    >>> from spurgear.calculator import design_from_parameters, validate_parameters
    >>>
    >>> design = design_from_parameters(teeth=24, module=1.5)
    >>> result = validate_parameters(design.parameters)
    >>> result.valid
    True
"""

from .constants import STANDARD_MODULES

from .core import (
    # Utility functions
    nearest_standard_module,
    is_standard_module,
    cutter_clearance_mm,

    # Calculations
    calculate_gear,
    design_from_parameters,
)

from .validation import (
    validate_parameters,
    ensure_valid,
    calculate_minimum_teeth,
    Severity,
    ValidationMessage,
    ValidationResult,
)

from .output import (
    to_json,
    to_markdown,
    to_summary,
)

# Convenience imports
from ..io import GearParameters, GearDimensions, GearDesign

__all__ = [
    "STANDARD_MODULES",
    "nearest_standard_module",
    "is_standard_module",
    "cutter_clearance_mm",
    "calculate_gear",
    "design_from_parameters",
    "validate_parameters",
    "ensure_valid",
    "calculate_minimum_teeth",
    "Severity",
    "ValidationMessage",
    "ValidationResult",
    "to_json",
    "to_markdown",
    "to_summary",
    "GearParameters",
    "GearDimensions",
    "GearDesign",
]
