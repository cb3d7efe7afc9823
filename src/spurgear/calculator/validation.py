"""
Spur Gear Calculator - Validation Rules

Parameter validation based on:
- Geometric feasibility (a gear needs at least three teeth and real sizes)
- ISO 53 / ISO 54 conventions
- Limits of the rectangular-cutter tooth approximation

Errors block generation; warnings and infos are reported but do not.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from math import sin, radians, isfinite
from typing import List, Optional

from ..errors import InvalidParametersError
from ..io import GearParameters
from .constants import (
    MIN_TEETH,
    MAX_RECOMMENDED_TEETH,
    PRESSURE_ANGLE_MIN_DEG,
    PRESSURE_ANGLE_MAX_DEG,
)
from .core import is_standard_module, nearest_standard_module, cutter_clearance_mm

logger = logging.getLogger(__name__)


def calculate_minimum_teeth(pressure_angle_deg: float) -> int:
    """
    Calculate minimum teeth without undercut for given pressure angle.

    Formula: z_min = 2 / sin²(α)

    Args:
        pressure_angle_deg: Pressure angle in degrees (0 < α < 90)

    Returns:
        Minimum number of teeth (rounded up)
    """
    alpha_rad = radians(pressure_angle_deg)
    sin_alpha = sin(alpha_rad)
    z_min = 2.0 / (sin_alpha ** 2)
    return int(z_min) + 1  # Round up for safety


class Severity(Enum):
    """Validation message severity"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationMessage:
    """A single validation finding"""
    severity: Severity
    code: str
    message: str
    suggestion: Optional[str] = None


@dataclass
class ValidationResult:
    """Complete validation result"""
    valid: bool  # True if no errors
    messages: List[ValidationMessage] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    @property
    def infos(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.INFO]


def validate_parameters(params: GearParameters) -> ValidationResult:
    """
    Validate gear parameters against geometric and engineering rules.

    Args:
        params: Gear parameters

    Returns:
        ValidationResult with all findings
    """
    messages: List[ValidationMessage] = []

    # Impossible geometry first; the remaining checks assume it passed
    messages.extend(_validate_finite(params))
    messages.extend(_validate_teeth(params))
    messages.extend(_validate_module(params))
    messages.extend(_validate_thickness(params))

    has_errors = any(m.severity == Severity.ERROR for m in messages)

    if not has_errors:
        messages.extend(_validate_pressure_angle(params))
        messages.extend(_validate_cutter_overlap(params))
        messages.extend(_validate_tooth_count_practical(params))

    return ValidationResult(
        valid=not has_errors,
        messages=messages
    )


def ensure_valid(params: GearParameters) -> ValidationResult:
    """
    Validate parameters and raise if any error was found.

    Warnings are logged, not raised.

    Raises:
        InvalidParametersError: If validation produced errors
    """
    result = validate_parameters(params)

    for warning in result.warnings:
        logger.warning(f"{warning.code}: {warning.message}")

    if not result.valid:
        details = "; ".join(m.message for m in result.errors)
        raise InvalidParametersError(f"Invalid gear parameters: {details}", validation=result)

    return result


def _validate_finite(params: GearParameters) -> List[ValidationMessage]:
    """Reject NaN and infinite values"""
    messages = []

    for name in ("module_mm", "pressure_angle_deg", "thickness_mm"):
        value = getattr(params, name)
        if not isfinite(value):
            messages.append(ValidationMessage(
                severity=Severity.ERROR,
                code="NON_FINITE_PARAMETER",
                message=f"{name} must be a finite number, got {value}",
            ))

    return messages


def _validate_teeth(params: GearParameters) -> List[ValidationMessage]:
    """Check there are enough teeth to form a gear"""
    messages = []

    if params.teeth < MIN_TEETH:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="TEETH_TOO_FEW",
            message=f"{params.teeth} teeth is below the minimum of {MIN_TEETH}",
            suggestion=f"Use at least {MIN_TEETH} teeth"
        ))

    return messages


def _validate_module(params: GearParameters) -> List[ValidationMessage]:
    """Check module is positive and note non-standard values"""
    messages = []
    module = params.module_mm

    if not module > 0:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="MODULE_NOT_POSITIVE",
            message=f"Module must be positive, got {module}",
            suggestion="Use a positive module, e.g. 1.0 mm"
        ))
    elif isfinite(module) and not is_standard_module(module):
        nearest = nearest_standard_module(module)
        messages.append(ValidationMessage(
            severity=Severity.INFO,
            code="NON_STANDARD_MODULE",
            message=f"Module {module:.3f}mm is not an ISO 54 standard value",
            suggestion=f"Nearest standard module is {nearest}mm"
        ))

    return messages


def _validate_thickness(params: GearParameters) -> List[ValidationMessage]:
    """Check thickness is positive"""
    messages = []

    if not params.thickness_mm > 0:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="THICKNESS_NOT_POSITIVE",
            message=f"Thickness must be positive, got {params.thickness_mm}",
            suggestion="Use a positive thickness, e.g. 2.0 mm"
        ))

    return messages


def _validate_pressure_angle(params: GearParameters) -> List[ValidationMessage]:
    """Check pressure angle is a common value"""
    messages = []
    pa = params.pressure_angle_deg

    if pa < PRESSURE_ANGLE_MIN_DEG or pa > PRESSURE_ANGLE_MAX_DEG:
        messages.append(ValidationMessage(
            severity=Severity.WARNING,
            code="PRESSURE_ANGLE_UNUSUAL",
            message=f"Pressure angle {pa}° is outside the usual "
                    f"{PRESSURE_ANGLE_MIN_DEG}-{PRESSURE_ANGLE_MAX_DEG}° range",
            suggestion="20° is the standard choice"
        ))

    if 0 < pa < 90:
        z_min = calculate_minimum_teeth(pa)
        if params.teeth < z_min:
            messages.append(ValidationMessage(
                severity=Severity.INFO,
                code="TEETH_BELOW_UNDERCUT_LIMIT",
                message=f"{params.teeth} teeth is below the undercut limit of {z_min} "
                        f"for a {pa}° involute profile",
                suggestion="Teeth are approximated by rectangular gaps, so this only "
                           "matters if the part will be re-profiled"
            ))

    return messages


def _validate_cutter_overlap(params: GearParameters) -> List[ValidationMessage]:
    """Check neighbouring tooth-gap cutters do not overlap"""
    messages = []
    clearance = cutter_clearance_mm(params)

    if clearance < 0:
        messages.append(ValidationMessage(
            severity=Severity.WARNING,
            code="CUTTERS_OVERLAP",
            message=f"Neighbouring tooth cutters overlap by {-clearance:.3f}mm; "
                    "teeth near the root will merge",
            suggestion="Increase the tooth count"
        ))

    return messages


def _validate_tooth_count_practical(params: GearParameters) -> List[ValidationMessage]:
    """Warn about tooth counts that make generation slow"""
    messages = []

    if params.teeth > MAX_RECOMMENDED_TEETH:
        messages.append(ValidationMessage(
            severity=Severity.WARNING,
            code="HIGH_TOOTH_COUNT",
            message=f"{params.teeth} teeth will take a long time to generate",
            suggestion="Use the compound cutting strategy or fewer teeth"
        ))

    return messages
