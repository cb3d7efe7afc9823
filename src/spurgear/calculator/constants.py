"""
Engineering and numeric constants for spurgear.

This module centralizes the numerical constants used by the calculator,
validation and geometry modules.

MODIFICATION GUIDELINES:
- Always include units in constant names (_MM, _DEG) where they apply
- Add new constants here rather than hardcoding in functions

Constants are grouped by category:
- Tooth proportions (ISO 53 basic rack)
- Cutter sizing
- Boolean engine numerics
- Validation thresholds
"""

# =============================================================================
# TOOTH PROPORTIONS (ISO 53 basic rack)
# =============================================================================

ADDENDUM_FACTOR = 1.0
"""Addendum as a multiple of module."""

DEDENDUM_FACTOR = 1.25
"""Dedendum as a multiple of module (addendum + 0.25 clearance)."""

DEFAULT_PRESSURE_ANGLE_DEG = 20.0

# ISO 54 / DIN 780 standard modules (mm)
STANDARD_MODULES = [
    0.3, 0.4, 0.5, 0.6, 0.7, 0.75, 0.8, 0.9, 1.0,
    1.125, 1.25, 1.375, 1.5, 1.75, 2.0, 2.25, 2.5, 2.75,
    3.0, 3.5, 4.0, 4.5, 5.0, 5.5, 6.0, 7.0, 8.0, 9.0, 10.0,
    11.0, 12.0, 14.0, 16.0, 18.0, 20.0, 22.0, 25.0
]

# =============================================================================
# CUTTER SIZING
# =============================================================================

CUTTER_SIZE_FACTOR = 2.0
"""Nominal tooth-gap cutter edge length as a multiple of module."""

CUTTER_OVERSIZE = 1.05
"""Oversize applied to the cutter footprint for clean full-depth cuts."""

CUTTER_HEIGHT_OVERSIZE = 1.1
"""Cutter height as a multiple of thickness so it overshoots both faces."""

BLANK_SEGMENTS_PER_TOOTH = 2
"""Radial facets of the blank cylinder per tooth."""

# =============================================================================
# BOOLEAN ENGINE NUMERICS
# =============================================================================

TOLERANCE_SCALE = 1e-6
"""Boolean tolerance as a fraction of the operands' bounding-box diagonal."""

MIN_TOLERANCE = 1e-12
"""Floor for the tolerance of very small or empty operands."""

# =============================================================================
# VALIDATION THRESHOLDS
# =============================================================================

MIN_TEETH = 3
"""Fewer teeth than this cannot describe a gear."""

MAX_RECOMMENDED_TEETH = 200
"""Above this the sequential build becomes slow."""

PRESSURE_ANGLE_MIN_DEG = 14.5
PRESSURE_ANGLE_MAX_DEG = 25.0
"""Range of common standard pressure angles."""

STANDARD_MODULE_TOLERANCE = 0.001
