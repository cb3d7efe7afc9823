"""
Pytest configuration and shared fixtures for spurgear tests.
"""

import json
import pytest


# ─── Parameters ──────────────────────────────────────────────────────────


@pytest.fixture
def default_params():
    """The default gear: 12 teeth, module 1, 20° pressure angle, 2 mm thick."""
    from spurgear.io import GearParameters
    return GearParameters()


@pytest.fixture
def sample_design_dict():
    """Design dict as written by save_design_json."""
    return {
        "parameters": {
            "teeth": 24,
            "module_mm": 1.5,
            "pressure_angle_deg": 20.0,
            "thickness_mm": 5.0,
        },
        "schema_version": "1.0",
    }


@pytest.fixture
def temp_json_file(tmp_path, sample_design_dict):
    """Design JSON file on disk."""
    json_file = tmp_path / "design.json"
    json_file.write_text(json.dumps(sample_design_dict))
    return json_file


# ─── Meshes ──────────────────────────────────────────────────────────────


@pytest.fixture
def unit_box():
    """2 x 2 x 2 box centred on the origin (volume 8)."""
    from spurgear.core import make_box
    return make_box(2.0, 2.0, 2.0)


@pytest.fixture
def blank_cylinder():
    """The default gear's blank: outer radius 7, thickness 2, 24 facets."""
    from spurgear.core import make_cylinder
    return make_cylinder(7.0, 2.0, 24)


# ─── Module-scoped built geometry ────────────────────────────────────────


@pytest.fixture(scope="module")
def built_default_gear():
    """Module-scoped mesh of the default 12-tooth gear."""
    from spurgear import generate
    return generate()
