"""
JSON input/output for spur gear parameters.

Loads and saves gear designs so that a generated STL can be reproduced
exactly from the parameters that produced it.

Uses Pydantic for automatic validation and type coercion.
"""

import json
from pathlib import Path
from typing import Optional, Union, Dict, Any

from pydantic import BaseModel, ConfigDict

SCHEMA_VERSION = "1.0"

# Field names used by the original web form, mapped to ours
_LEGACY_KEYS = {
    "module": "module_mm",
    "pressureAngle": "pressure_angle_deg",
    "pressure_angle": "pressure_angle_deg",
    "thickness": "thickness_mm",
}


class GearParameters(BaseModel):
    """The four inputs that fully determine a gear.

    Instances are immutable; every generation call receives its own
    parameters explicitly.  Range checks (teeth >= 3, module > 0, ...) live
    in ``spurgear.calculator.validation`` so that they can be reported with
    codes and suggestions instead of a bare type error.
    """
    model_config = ConfigDict(frozen=True, extra='ignore')

    teeth: int = 12
    module_mm: float = 1.0
    pressure_angle_deg: float = 20.0
    thickness_mm: float = 2.0


class GearDimensions(BaseModel):
    """Dimensions derived from GearParameters by the calculator."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    pitch_radius_mm: float
    pitch_diameter_mm: float
    addendum_mm: float
    dedendum_mm: float
    base_radius_mm: float
    outer_radius_mm: float
    outer_diameter_mm: float
    root_radius_mm: float
    root_diameter_mm: float
    circular_pitch_mm: float
    cutter_size_mm: float  # Footprint edge of one tooth-gap cutter (with oversize)
    cutter_height_mm: float  # Cutter height, overshoots both faces
    blank_segments: int  # Radial facets of the blank cylinder


class GearDesign(BaseModel):
    """Complete gear design: inputs plus derived dimensions."""
    model_config = ConfigDict(extra='ignore')

    parameters: GearParameters
    dimensions: Optional[GearDimensions] = None
    schema_version: str = SCHEMA_VERSION


def _normalize_parameter_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Rename legacy form keys (module, pressureAngle, ...) to field names."""
    normalized = {}
    for key, value in data.items():
        normalized[_LEGACY_KEYS.get(key, key)] = value
    return normalized


def load_design_json(filepath: Union[str, Path]) -> GearDesign:
    """
    Load a gear design from JSON.

    Accepts either a full design (``{"parameters": {...}, "dimensions":
    {...}}``) or a bare parameter object (``{"teeth": 12, ...}``), with or
    without a ``design`` wrapper.

    Args:
        filepath: Path to JSON file

    Returns:
        GearDesign (dimensions may be None when the file only holds parameters)

    Raises:
        FileNotFoundError: If file doesn't exist
        ValidationError: If fields have the wrong types
        ValueError: If the JSON holds no gear parameters
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Design file not found: {filepath}")

    with open(filepath, 'r') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("Invalid design JSON - expected an object")

    # Check for 'design' wrapper (some exports have this)
    if 'design' in data:
        data = data['design']

    if 'parameters' not in data:
        if 'teeth' not in data:
            raise ValueError(
                "Invalid design JSON - must contain a 'parameters' section or a 'teeth' field"
            )
        data = {'parameters': data}

    data = dict(data)
    data['parameters'] = _normalize_parameter_keys(data['parameters'])

    return GearDesign.model_validate(data)


def save_design_json(design: GearDesign, filepath: Union[str, Path]) -> None:
    """
    Save a gear design to JSON.

    Args:
        design: Gear design to save
        filepath: Path to save JSON file
    """
    filepath = Path(filepath)

    data = design.model_dump(mode='json', exclude_none=True)
    data['schema_version'] = SCHEMA_VERSION

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=2)
