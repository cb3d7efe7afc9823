"""
Spur Gear Calculator - Core Calculations

Pure mathematical functions for spur gear dimensions.
Returns typed GearDimensions / GearDesign models for type safety.

Reference standards:
- ISO 53 (basic rack tooth proportions)
- ISO 54 (standard modules)
"""

from math import pi, cos, sin, radians
from typing import Optional

from ..io import GearParameters, GearDimensions, GearDesign
from .constants import (
    ADDENDUM_FACTOR,
    DEDENDUM_FACTOR,
    STANDARD_MODULES,
    STANDARD_MODULE_TOLERANCE,
    CUTTER_SIZE_FACTOR,
    CUTTER_OVERSIZE,
    CUTTER_HEIGHT_OVERSIZE,
    BLANK_SEGMENTS_PER_TOOTH,
)


def nearest_standard_module(module: float) -> float:
    """Find nearest ISO standard module"""
    return min(STANDARD_MODULES, key=lambda m: abs(m - module))


def is_standard_module(module: float, tolerance: float = STANDARD_MODULE_TOLERANCE) -> bool:
    """Check if module is a standard value"""
    nearest = nearest_standard_module(module)
    return abs(module - nearest) < tolerance


def calculate_gear(params: GearParameters) -> GearDimensions:
    """
    Calculate spur gear dimensions from the four input parameters.

    Formulas:
    - pitch radius  r   = z·m / 2
    - addendum      ha  = m
    - dedendum      hf  = 1.25·m
    - base radius   rb  = r·cos(α)
    - outer radius  ra  = r + ha
    - root radius   rf  = r - hf

    Args:
        params: Gear parameters (not validated here - see validate_parameters)

    Returns:
        GearDimensions with all derived values
    """
    z = params.teeth
    m = params.module_mm

    pitch_radius_mm = z * m / 2
    addendum_mm = ADDENDUM_FACTOR * m
    dedendum_mm = DEDENDUM_FACTOR * m
    base_radius_mm = pitch_radius_mm * cos(radians(params.pressure_angle_deg))
    outer_radius_mm = pitch_radius_mm + addendum_mm
    root_radius_mm = pitch_radius_mm - dedendum_mm

    # Tooth gaps are cut by square cutters centred on the pitch circle
    cutter_size_mm = CUTTER_SIZE_FACTOR * m * CUTTER_OVERSIZE
    cutter_height_mm = params.thickness_mm * CUTTER_HEIGHT_OVERSIZE

    return GearDimensions(
        pitch_radius_mm=pitch_radius_mm,
        pitch_diameter_mm=2 * pitch_radius_mm,
        addendum_mm=addendum_mm,
        dedendum_mm=dedendum_mm,
        base_radius_mm=base_radius_mm,
        outer_radius_mm=outer_radius_mm,
        outer_diameter_mm=2 * outer_radius_mm,
        root_radius_mm=root_radius_mm,
        root_diameter_mm=2 * root_radius_mm,
        circular_pitch_mm=pi * m,
        cutter_size_mm=cutter_size_mm,
        cutter_height_mm=cutter_height_mm,
        blank_segments=BLANK_SEGMENTS_PER_TOOTH * z,
    )


def cutter_clearance_mm(params: GearParameters) -> float:
    """
    Gap between neighbouring cutters at their innermost corners.

    Each cutter is a square of side ``s`` centred on the pitch circle and
    aligned with the radial direction.  Its inner face sits at radius
    ``r - s/2``; neighbouring cutters are ``2π/z`` apart.  The clearance is
    twice the distance from the bisector between two neighbours to the
    nearest (inner) corner of either cutter.

    Returns:
        Clearance in mm; negative means the cutters overlap.
    """
    dims = calculate_gear(params)
    half = dims.cutter_size_mm / 2
    inner_radius = dims.pitch_radius_mm - half
    half_angle = pi / params.teeth

    # Distance from the bisector plane to the nearest inner corner
    corner_offset = inner_radius * sin(half_angle) - half * cos(half_angle)
    return 2 * corner_offset


def design_from_parameters(
    teeth: int = 12,
    module: float = 1.0,
    pressure_angle: float = 20.0,
    thickness: float = 2.0,
    params: Optional[GearParameters] = None,
) -> GearDesign:
    """
    Build a complete GearDesign from raw numbers (or a GearParameters).

    Args:
        teeth: Number of teeth
        module: Module (mm)
        pressure_angle: Pressure angle (degrees)
        thickness: Face width / gear thickness (mm)
        params: Ready-made parameters; overrides the numeric arguments

    Returns:
        GearDesign with parameters and dimensions
    """
    if params is None:
        params = GearParameters(
            teeth=teeth,
            module_mm=module,
            pressure_angle_deg=pressure_angle,
            thickness_mm=thickness,
        )

    return GearDesign(parameters=params, dimensions=calculate_gear(params))
