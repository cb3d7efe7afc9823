"""
Tests for the gear dimension calculator.
"""

import math
import pytest

from spurgear.calculator import (
    STANDARD_MODULES,
    calculate_gear,
    cutter_clearance_mm,
    design_from_parameters,
    is_standard_module,
    nearest_standard_module,
)
from spurgear.io import GearParameters, GearDimensions, GearDesign


class TestCalculateGear:
    """Tests for calculate_gear()."""

    def test_returns_dimensions(self, default_params):
        dims = calculate_gear(default_params)
        assert isinstance(dims, GearDimensions)

    def test_default_gear_dimensions(self, default_params):
        """12 teeth, module 1: r = 6, ra = 7, rf = 4.75."""
        dims = calculate_gear(default_params)

        assert dims.pitch_radius_mm == pytest.approx(6.0)
        assert dims.pitch_diameter_mm == pytest.approx(12.0)
        assert dims.addendum_mm == pytest.approx(1.0)
        assert dims.dedendum_mm == pytest.approx(1.25)
        assert dims.outer_radius_mm == pytest.approx(7.0)
        assert dims.outer_diameter_mm == pytest.approx(14.0)
        assert dims.root_radius_mm == pytest.approx(4.75)
        assert dims.root_diameter_mm == pytest.approx(9.5)

    def test_base_radius_uses_pressure_angle(self, default_params):
        dims = calculate_gear(default_params)
        assert dims.base_radius_mm == pytest.approx(6.0 * math.cos(math.radians(20.0)))

    def test_dimensions_scale_with_module(self):
        """Every length scales linearly with the module."""
        small = calculate_gear(GearParameters(teeth=20, module_mm=1.0))
        large = calculate_gear(GearParameters(teeth=20, module_mm=2.5))

        assert large.pitch_radius_mm == pytest.approx(2.5 * small.pitch_radius_mm)
        assert large.outer_radius_mm == pytest.approx(2.5 * small.outer_radius_mm)
        assert large.root_radius_mm == pytest.approx(2.5 * small.root_radius_mm)

    def test_cutter_matches_original_proportions(self, default_params):
        """Cutter is 2.1 m square and 1.1 x the thickness high."""
        dims = calculate_gear(default_params)
        assert dims.cutter_size_mm == pytest.approx(2.1)
        assert dims.cutter_height_mm == pytest.approx(2.2)

    def test_blank_has_two_facets_per_tooth(self):
        dims = calculate_gear(GearParameters(teeth=17))
        assert dims.blank_segments == 34

    def test_circular_pitch(self):
        dims = calculate_gear(GearParameters(module_mm=2.0))
        assert dims.circular_pitch_mm == pytest.approx(2.0 * math.pi)


class TestCutterClearance:
    """Tests for cutter_clearance_mm()."""

    @pytest.mark.parametrize("teeth", [3, 4])
    def test_few_teeth_overlap(self, teeth):
        assert cutter_clearance_mm(GearParameters(teeth=teeth)) < 0

    @pytest.mark.parametrize("teeth", [6, 12, 40])
    def test_normal_gears_clear(self, teeth):
        assert cutter_clearance_mm(GearParameters(teeth=teeth)) > 0

    def test_clearance_grows_with_teeth(self):
        assert (cutter_clearance_mm(GearParameters(teeth=20))
                > cutter_clearance_mm(GearParameters(teeth=8)))


class TestStandardModules:
    """Tests for ISO 54 module helpers."""

    def test_standard_values_recognised(self):
        for module in (0.5, 1.0, 1.5, 2.0):
            assert module in STANDARD_MODULES
            assert is_standard_module(module)

    def test_non_standard_value(self):
        assert not is_standard_module(1.1)

    def test_nearest_standard_module(self):
        assert nearest_standard_module(1.05) == 1.0
        assert nearest_standard_module(1.45) == 1.5


class TestDesignFromParameters:
    """Tests for design_from_parameters()."""

    def test_defaults(self):
        design = design_from_parameters()

        assert isinstance(design, GearDesign)
        assert design.parameters.teeth == 12
        assert design.parameters.module_mm == 1.0
        assert design.parameters.pressure_angle_deg == 20.0
        assert design.parameters.thickness_mm == 2.0
        assert design.dimensions is not None

    def test_raw_numbers(self):
        design = design_from_parameters(teeth=30, module=2.0, pressure_angle=25.0, thickness=8.0)
        assert design.parameters.teeth == 30
        assert design.dimensions.pitch_radius_mm == pytest.approx(30.0)

    def test_params_override_numbers(self):
        params = GearParameters(teeth=40)
        design = design_from_parameters(teeth=10, params=params)
        assert design.parameters.teeth == 40

    def test_parameters_are_immutable(self, default_params):
        with pytest.raises(Exception):
            default_params.teeth = 20
