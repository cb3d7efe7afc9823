"""
Spurgear - parametric spur gear generator with STL export.

Generates a spur gear solid from tooth count, module, pressure angle and
thickness, and writes it as an ASCII STL file.

Example:
    >>> import spurgear
    >>>
    >>> mesh = spurgear.generate(teeth=12, module=1.0, pressure_angle=20.0, thickness=2.0)
    >>> spurgear.write_stl(mesh, "gear.stl")
    >>>
    >>> # Or with the geometry class
    >>> from spurgear import GearGeometry, GearParameters
    >>> gear = GearGeometry(GearParameters(teeth=24, module_mm=1.5))
    >>> gear.export_stl("gear24.stl")

Note: All imports are lazy-loaded for fast startup. The calculator can be
imported without building any geometry.
"""

__version__ = "1.0.0"

# Define which names come from which submodule
# All imports are lazy to minimize startup time

_ENUMS = {"CutStrategy"}

_ERRORS = {
    "SpurGearError",
    "InvalidParametersError",
    "MalformedMeshError",
    "DegenerateBooleanError",
    "GenerationCancelledError",
}

_CALCULATOR = {
    "STANDARD_MODULES",
    "calculate_gear",
    "design_from_parameters",
    "nearest_standard_module",
    "is_standard_module",
    "validate_parameters",
    "Severity",
    "ValidationResult",
}

_IO = {
    "load_design_json",
    "save_design_json",
    "GearParameters",
    "GearDimensions",
    "GearDesign",
    "to_solid_text",
    "parse_solid_text",
    "write_stl",
    "read_stl",
}

_CORE = {
    "Mesh",
    "Transform",
    "make_cylinder",
    "make_box",
    "subtract",
    "union",
    "check_manifold",
    "GearGeometry",
    "DisplayMaterial",
    "RenderPayload",
    "generate",
    "generate_gear",
}

# Cache for lazy-loaded modules
_modules = {}


def __getattr__(name):
    """Lazy load submodules when their attributes are accessed."""
    global _modules

    if name in _ENUMS:
        if "enums" not in _modules:
            from . import enums
            _modules["enums"] = enums
        return getattr(_modules["enums"], name)

    if name in _ERRORS:
        if "errors" not in _modules:
            from . import errors
            _modules["errors"] = errors
        return getattr(_modules["errors"], name)

    if name in _CALCULATOR:
        if "calculator" not in _modules:
            from . import calculator
            _modules["calculator"] = calculator
        return getattr(_modules["calculator"], name)

    if name in _IO:
        if "io" not in _modules:
            from . import io
            _modules["io"] = io
        return getattr(_modules["io"], name)

    if name in _CORE:
        if "core" not in _modules:
            from . import core
            _modules["core"] = core
        return getattr(_modules["core"], name)

    raise AttributeError(f"module 'spurgear' has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",

    # Generation (lazy loaded from core)
    "generate",
    "generate_gear",
    "GearGeometry",
    "DisplayMaterial",
    "RenderPayload",

    # Mesh operations (lazy loaded from core)
    "Mesh",
    "Transform",
    "make_cylinder",
    "make_box",
    "subtract",
    "union",
    "check_manifold",

    # Enums and errors
    "CutStrategy",
    "SpurGearError",
    "InvalidParametersError",
    "MalformedMeshError",
    "DegenerateBooleanError",
    "GenerationCancelledError",

    # Calculator (lazy loaded from calculator)
    "STANDARD_MODULES",
    "calculate_gear",
    "design_from_parameters",
    "nearest_standard_module",
    "is_standard_module",
    "validate_parameters",
    "Severity",
    "ValidationResult",

    # IO (lazy loaded from io)
    "load_design_json",
    "save_design_json",
    "GearParameters",
    "GearDimensions",
    "GearDesign",
    "to_solid_text",
    "parse_solid_text",
    "write_stl",
    "read_stl",
]
