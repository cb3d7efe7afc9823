"""
Tests for gear parameter validation.

No geometry building - all tests are fast.
"""

import math
import pytest

from spurgear.calculator.validation import (
    Severity,
    ValidationMessage,
    ValidationResult,
    calculate_minimum_teeth,
    ensure_valid,
    validate_parameters,
    _validate_cutter_overlap,
    _validate_module,
    _validate_teeth,
)
from spurgear.errors import InvalidParametersError, SpurGearError
from spurgear.io import GearParameters


def _codes(messages):
    """Extract code strings from a list of ValidationMessages."""
    return [m.code for m in messages]


class TestValidateParameters:
    """Tests for validate_parameters()."""

    def test_default_gear_is_valid(self, default_params):
        result = validate_parameters(default_params)
        assert result.valid
        assert result.errors == []

    @pytest.mark.parametrize("teeth", [0, 1, 2])
    def test_too_few_teeth(self, teeth):
        result = validate_parameters(GearParameters(teeth=teeth))
        assert not result.valid
        assert "TEETH_TOO_FEW" in _codes(result.errors)

    def test_three_teeth_allowed(self):
        assert validate_parameters(GearParameters(teeth=3)).valid

    @pytest.mark.parametrize("module", [0.0, -1.0])
    def test_module_not_positive(self, module):
        result = validate_parameters(GearParameters(module_mm=module))
        assert "MODULE_NOT_POSITIVE" in _codes(result.errors)

    @pytest.mark.parametrize("thickness", [0.0, -2.0])
    def test_thickness_not_positive(self, thickness):
        result = validate_parameters(GearParameters(thickness_mm=thickness))
        assert "THICKNESS_NOT_POSITIVE" in _codes(result.errors)

    def test_nan_rejected(self):
        result = validate_parameters(GearParameters(module_mm=math.nan))
        assert not result.valid
        assert "NON_FINITE_PARAMETER" in _codes(result.errors)

    def test_infinite_thickness_rejected(self):
        result = validate_parameters(GearParameters(thickness_mm=math.inf))
        assert "NON_FINITE_PARAMETER" in _codes(result.errors)

    def test_multiple_errors_reported(self):
        result = validate_parameters(GearParameters(teeth=2, module_mm=0.0, thickness_mm=0.0))
        assert set(_codes(result.errors)) >= {
            "TEETH_TOO_FEW", "MODULE_NOT_POSITIVE", "THICKNESS_NOT_POSITIVE"
        }

    def test_unusual_pressure_angle_warns(self):
        result = validate_parameters(GearParameters(pressure_angle_deg=35.0))
        assert result.valid
        assert "PRESSURE_ANGLE_UNUSUAL" in _codes(result.warnings)

    def test_overlapping_cutters_warn(self):
        result = validate_parameters(GearParameters(teeth=4))
        assert result.valid
        assert "CUTTERS_OVERLAP" in _codes(result.warnings)

    def test_high_tooth_count_warns(self):
        result = validate_parameters(GearParameters(teeth=250))
        assert "HIGH_TOOTH_COUNT" in _codes(result.warnings)

    def test_undercut_limit_is_informational(self, default_params):
        """12 teeth is below the 20° undercut limit but still valid."""
        result = validate_parameters(default_params)
        assert "TEETH_BELOW_UNDERCUT_LIMIT" in _codes(result.infos)
        assert "TEETH_BELOW_UNDERCUT_LIMIT" not in _codes(result.warnings)
        assert result.valid


class TestInternalValidators:
    """Tests that call individual validators directly."""

    def test_teeth_ok(self):
        assert _validate_teeth(GearParameters(teeth=12)) == []

    def test_non_standard_module_info(self):
        messages = _validate_module(GearParameters(module_mm=1.1))
        assert _codes(messages) == ["NON_STANDARD_MODULE"]
        assert messages[0].severity == Severity.INFO
        assert "1.125" in messages[0].suggestion or "1.0" in messages[0].suggestion

    def test_standard_module_silent(self):
        assert _validate_module(GearParameters(module_mm=2.0)) == []

    def test_cutter_overlap_silent_for_default(self, default_params):
        assert _validate_cutter_overlap(default_params) == []


class TestEnsureValid:
    """Tests for ensure_valid()."""

    def test_returns_result_when_valid(self, default_params):
        result = ensure_valid(default_params)
        assert isinstance(result, ValidationResult)
        assert result.valid

    def test_raises_with_validation_attached(self):
        with pytest.raises(InvalidParametersError) as exc_info:
            ensure_valid(GearParameters(teeth=2))

        assert exc_info.value.validation is not None
        assert "TEETH_TOO_FEW" in _codes(exc_info.value.validation.errors)

    def test_error_is_value_error(self):
        """Callers catching ValueError or SpurGearError both see it."""
        with pytest.raises(ValueError):
            ensure_valid(GearParameters(module_mm=-1.0))
        with pytest.raises(SpurGearError):
            ensure_valid(GearParameters(module_mm=-1.0))

    def test_warnings_are_logged(self, caplog):
        with caplog.at_level("WARNING"):
            ensure_valid(GearParameters(teeth=4))
        assert any("CUTTERS_OVERLAP" in r.message for r in caplog.records)


class TestMinimumTeeth:
    """Tests for calculate_minimum_teeth()."""

    def test_twenty_degrees(self):
        """z_min = 2 / sin²(20°) ≈ 17.1 -> 18."""
        assert calculate_minimum_teeth(20.0) == 18

    def test_larger_angle_needs_fewer_teeth(self):
        assert calculate_minimum_teeth(25.0) < calculate_minimum_teeth(14.5)


class TestValidationResult:
    """Tests for the ValidationResult container."""

    def test_filters_by_severity(self):
        result = ValidationResult(valid=False, messages=[
            ValidationMessage(Severity.ERROR, "E", "error"),
            ValidationMessage(Severity.WARNING, "W", "warning"),
            ValidationMessage(Severity.INFO, "I", "info"),
        ])
        assert _codes(result.errors) == ["E"]
        assert _codes(result.warnings) == ["W"]
        assert _codes(result.infos) == ["I"]
