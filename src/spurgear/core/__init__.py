"""
Spurgear Core - mesh geometry and gear generation.

Pure Python triangle meshes, primitive solids, boolean operations and the
gear generator.  No JSON dependencies - pure Python API.

Example:
    >>> from spurgear.core import GearGeometry
    >>> from spurgear.io import GearParameters
    >>>
    >>> gear = GearGeometry(GearParameters(teeth=24, module_mm=1.5, thickness_mm=5.0))
    >>> mesh = gear.build()
    >>> gear.export_stl("gear.stl")
"""

from .mesh import Mesh, Triangle, Transform, FLOATS_PER_TRIANGLE, face_normal
from .mesh_repair import (
    VertexWelder,
    ManifoldReport,
    check_manifold,
    require_manifold,
    resolve_t_junctions,
    characteristic_tolerance,
)
from .primitives import make_cylinder, make_box
from .csg import subtract, union

# The generator imports the calculator, which imports the IO layer, which
# imports mesh types from here; load it on first use
_GEAR = {
    "GearGeometry",
    "DisplayMaterial",
    "RenderPayload",
    "generate",
    "generate_gear",
}


def __getattr__(name):
    """Lazy load the gear generator when its names are accessed."""
    if name in _GEAR:
        from . import gear
        return getattr(gear, name)
    raise AttributeError(f"module 'spurgear.core' has no attribute {name!r}")


__all__ = [
    # Mesh types
    "Mesh",
    "Triangle",
    "Transform",
    "FLOATS_PER_TRIANGLE",
    "face_normal",

    # Repair and checks
    "VertexWelder",
    "ManifoldReport",
    "check_manifold",
    "require_manifold",
    "resolve_t_junctions",
    "characteristic_tolerance",

    # Primitives and booleans
    "make_cylinder",
    "make_box",
    "subtract",
    "union",

    # Gear generation (lazy loaded)
    "GearGeometry",
    "DisplayMaterial",
    "RenderPayload",
    "generate",
    "generate_gear",
]
