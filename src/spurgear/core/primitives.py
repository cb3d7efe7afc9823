"""
Primitive solids: the gear blank cylinder and the tooth-gap cutter box.

Both are closed triangle meshes centred on the origin with outward-facing
(counter-clockwise seen from outside) triangles.  Vertices shared between
triangles are the very same float tuples, so the meshes weld exactly.
"""

import logging
from math import pi, cos, sin

from .mesh import Mesh, Triangle
from .mesh_repair import require_manifold

logger = logging.getLogger(__name__)

# Corner indices use bit 0 for +x, bit 1 for +y, bit 2 for +z.
# Each face lists its corners counter-clockwise seen from outside.
_BOX_FACES = (
    (0, 4, 6, 2),  # -x
    (1, 3, 7, 5),  # +x
    (0, 1, 5, 4),  # -y
    (2, 6, 7, 3),  # +y
    (0, 2, 3, 1),  # -z
    (4, 5, 7, 6),  # +z
)


def make_cylinder(radius: float, height: float, radial_segments: int) -> Mesh:
    """
    Create a faceted cylinder along the Z axis, centred at the origin.

    Rim vertex k sits at angle 2πk/radial_segments on both rims.  Each cap is
    a fan around its centre vertex, so the mesh has ``4 * radial_segments``
    triangles.

    Args:
        radius: Rim radius (mm), > 0
        height: Extent along Z (mm), > 0
        radial_segments: Number of side facets, >= 3

    Returns:
        Closed, outward-oriented Mesh

    Raises:
        ValueError: If any argument is out of range
    """
    if not radius > 0:
        raise ValueError(f"Cylinder radius must be positive, got {radius}")
    if not height > 0:
        raise ValueError(f"Cylinder height must be positive, got {height}")
    if radial_segments < 3:
        raise ValueError(f"Cylinder needs at least 3 radial segments, got {radial_segments}")

    z_bottom = -height / 2
    z_top = height / 2
    angles = [2 * pi * k / radial_segments for k in range(radial_segments)]
    bottom = [(radius * cos(a), radius * sin(a), z_bottom) for a in angles]
    top = [(radius * cos(a), radius * sin(a), z_top) for a in angles]
    bottom_centre = (0.0, 0.0, z_bottom)
    top_centre = (0.0, 0.0, z_top)

    triangles = []
    for k in range(radial_segments):
        n = (k + 1) % radial_segments
        # Side quad, split along the rising diagonal
        triangles.append(Triangle.from_vertices(bottom[k], bottom[n], top[n]))
        triangles.append(Triangle.from_vertices(bottom[k], top[n], top[k]))
        triangles.append(Triangle.from_vertices(top_centre, top[k], top[n]))
        triangles.append(Triangle.from_vertices(bottom_centre, bottom[n], bottom[k]))

    mesh = Mesh(triangles)
    require_manifold(mesh, "cylinder")
    logger.debug(f"Cylinder: r={radius:.3f}mm, h={height:.3f}mm, "
                 f"{radial_segments} segments, {len(mesh)} triangles")
    return mesh


def make_box(width: float, depth: float, height: float) -> Mesh:
    """
    Create an axis-aligned box centred at the origin (12 triangles).

    Args:
        width: Extent along X (mm), > 0
        depth: Extent along Y (mm), > 0
        height: Extent along Z (mm), > 0

    Raises:
        ValueError: If any size is not positive
    """
    for name, value in (("width", width), ("depth", depth), ("height", height)):
        if not value > 0:
            raise ValueError(f"Box {name} must be positive, got {value}")

    hx, hy, hz = width / 2, depth / 2, height / 2
    corners = [
        (hx if i & 1 else -hx, hy if i & 2 else -hy, hz if i & 4 else -hz)
        for i in range(8)
    ]

    triangles = []
    for a, b, c, d in _BOX_FACES:
        triangles.append(Triangle.from_vertices(corners[a], corners[b], corners[c]))
        triangles.append(Triangle.from_vertices(corners[a], corners[c], corners[d]))

    mesh = Mesh(triangles)
    require_manifold(mesh, "box")
    return mesh
