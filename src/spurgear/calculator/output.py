"""Output formatters for spur gear designs.

Converts typed GearDesign models to JSON, Markdown and plain-text output.
All functions expect GearDesign; designs without dimensions get them
calculated on the fly.

Uses Pydantic's model_dump(mode='json') for serialization.
"""

import json
from typing import Optional, TYPE_CHECKING

from ..io import GearDesign, SCHEMA_VERSION
from .core import calculate_gear

if TYPE_CHECKING:
    from .validation import ValidationResult


def _design_to_dict(design: GearDesign) -> dict:
    """Convert a design to a JSON-compatible dict, filling in dimensions."""
    if design.dimensions is None:
        design = GearDesign(
            parameters=design.parameters,
            dimensions=calculate_gear(design.parameters),
            schema_version=design.schema_version,
        )
    return design.model_dump(mode='json')


def _messages_to_list(messages) -> list:
    return [
        {
            'severity': msg.severity.value,
            'code': msg.code,
            'message': msg.message,
            'suggestion': msg.suggestion
        }
        for msg in messages
    ]


def to_json(
    design: GearDesign,
    validation: Optional["ValidationResult"] = None,
    indent: int = 2,
) -> str:
    """Convert GearDesign to JSON string.

    Args:
        design: GearDesign from design_from_parameters()
        validation: Optional validation results to include in output
        indent: JSON indentation level (default: 2)

    Returns:
        JSON string with schema version, parameters, dimensions and
        optional validation
    """
    design_dict = _design_to_dict(design)

    if 'schema_version' not in design_dict:
        design_dict['schema_version'] = SCHEMA_VERSION

    if validation:
        design_dict['validation'] = {
            'valid': validation.valid,
            'errors': _messages_to_list(validation.errors),
            'warnings': _messages_to_list(validation.warnings),
            'infos': _messages_to_list(validation.infos),
        }

    return json.dumps(design_dict, indent=indent)


def to_markdown(
    design: GearDesign,
    validation: Optional["ValidationResult"] = None,
) -> str:
    """Convert GearDesign to a markdown specification.

    Args:
        design: GearDesign from design_from_parameters()
        validation: Optional validation results to include

    Returns:
        Markdown specification string
    """
    design_dict = _design_to_dict(design)
    params = design_dict["parameters"]
    dims = design_dict["dimensions"]

    md = "# Spur Gear Design Specification\n\n"

    md += "## Parameters\n\n"
    md += f"| Parameter | Value |\n"
    md += f"|-----------|-------|\n"
    md += f"| Number of Teeth | {params['teeth']} |\n"
    md += f"| Module | {params['module_mm']:.3f} mm |\n"
    md += f"| Pressure Angle | {params['pressure_angle_deg']:.1f}° |\n"
    md += f"| Thickness | {params['thickness_mm']:.3f} mm |\n\n"

    md += "## Dimensions\n\n"
    md += f"| Dimension | Value |\n"
    md += f"|-----------|-------|\n"
    md += f"| Outer Diameter (OD) | {dims['outer_diameter_mm']:.3f} mm |\n"
    md += f"| Pitch Diameter | {dims['pitch_diameter_mm']:.3f} mm |\n"
    md += f"| Root Diameter | {dims['root_diameter_mm']:.3f} mm |\n"
    md += f"| Base Radius | {dims['base_radius_mm']:.3f} mm |\n"
    md += f"| Addendum | {dims['addendum_mm']:.3f} mm |\n"
    md += f"| Dedendum | {dims['dedendum_mm']:.3f} mm |\n"
    md += f"| Circular Pitch | {dims['circular_pitch_mm']:.3f} mm |\n"
    md += "\n"

    md += "## Tooth Cutters\n\n"
    md += f"| Parameter | Value |\n"
    md += f"|-----------|-------|\n"
    md += f"| Cutter Footprint | {dims['cutter_size_mm']:.3f} × {dims['cutter_size_mm']:.3f} mm |\n"
    md += f"| Cutter Height | {dims['cutter_height_mm']:.3f} mm |\n"
    md += f"| Blank Facets | {dims['blank_segments']} |\n"
    md += "\n"

    if validation:
        md += "## Validation\n\n"

        if validation.valid:
            md += "**Status:** ✅ Design is valid\n\n"
        else:
            md += "**Status:** ❌ Design has errors\n\n"

        if validation.errors:
            md += "### Errors\n\n"
            for msg in validation.errors:
                md += f"- **{msg.code}**: {msg.message}\n"
                if msg.suggestion:
                    md += f"  - *Suggestion*: {msg.suggestion}\n"
            md += "\n"

        if validation.warnings:
            md += "### Warnings\n\n"
            for msg in validation.warnings:
                md += f"- **{msg.code}**: {msg.message}\n"
                if msg.suggestion:
                    md += f"  - *Suggestion*: {msg.suggestion}\n"
            md += "\n"

        if validation.infos:
            md += "### Information\n\n"
            for msg in validation.infos:
                md += f"- {msg.message}\n"
            md += "\n"

    md += "## Notes\n\n"
    md += "- All dimensions in millimeters unless otherwise noted\n"
    md += "- Tooth gaps are cut with rectangular cutters; flanks are not involute\n"
    md += "- The pressure angle only affects the base radius\n"
    md += "\n"

    md += "---\n"
    md += "*Generated by Spurgear*\n"

    return md


def to_summary(
    design: GearDesign,
    validation: Optional["ValidationResult"] = None,
) -> str:
    """Convert GearDesign to formatted text summary.

    Args:
        design: GearDesign from design_from_parameters()
        validation: Optional validation results; warnings are listed

    Returns:
        Multi-line formatted summary string
    """
    design_dict = _design_to_dict(design)
    params = design_dict["parameters"]
    dims = design_dict["dimensions"]

    lines = [
        "═══ Spur Gear Design ═══",
        f"Teeth: {params['teeth']}",
        f"Module: {params['module_mm']:.3f} mm",
        f"Pressure angle: {params['pressure_angle_deg']:.1f}°",
        f"Thickness: {params['thickness_mm']:.2f} mm",
        "",
        "Dimensions:",
        f"  Outer diameter (OD): {dims['outer_diameter_mm']:.2f} mm",
        f"  Pitch diameter:      {dims['pitch_diameter_mm']:.2f} mm",
        f"  Root diameter:       {dims['root_diameter_mm']:.2f} mm",
        f"  Base radius:         {dims['base_radius_mm']:.2f} mm",
    ]

    if validation and validation.warnings:
        lines.extend(["", "Warnings:"])
        for msg in validation.warnings:
            lines.append(f"  {msg.code}: {msg.message}")

    return "\n".join(lines)
