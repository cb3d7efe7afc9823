"""
Spurgear IO - JSON design files and STL export.

Example:
    >>> from spurgear.io import load_design_json, save_design_json, write_stl
    >>> from spurgear.calculator import design_from_parameters
    >>>
    >>> design = design_from_parameters(teeth=24, module=1.5)
    >>> save_design_json(design, "design.json")
    >>> loaded = load_design_json("design.json")
"""

# Parameter models first: calculator and core import them from here
from .loaders import (
    SCHEMA_VERSION,
    GearParameters,
    GearDimensions,
    GearDesign,
    load_design_json,
    save_design_json,
)

from .stl import (
    DEFAULT_SOLID_NAME,
    DEFAULT_FILENAME,
    to_solid_text,
    parse_solid_text,
    write_stl,
    read_stl,
)

__all__ = [
    "SCHEMA_VERSION",
    "GearParameters",
    "GearDimensions",
    "GearDesign",
    "load_design_json",
    "save_design_json",
    "DEFAULT_SOLID_NAME",
    "DEFAULT_FILENAME",
    "to_solid_text",
    "parse_solid_text",
    "write_stl",
    "read_stl",
]
