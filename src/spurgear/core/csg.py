"""
Boolean operations on closed triangle meshes.

Implements subtraction (used to cut tooth gaps) and union (used to merge all
cutters for the compound strategy) with binary space partitioning:

* Each operand's faces become convex polygons with a supporting plane.
* A BSP tree built from one solid's planes classifies the other solid's
  polygons as inside (a back leaf) or outside (a front leaf), splitting
  polygons that straddle a plane.
* The kept fragments are welded, T-junctions along the intersection curve
  are resolved and the polygons are re-triangulated, so every result is
  again a closed, consistently oriented mesh.

Trees are built and walked with explicit stacks, so deep trees do not hit
the interpreter's recursion limit.

All distance tests use one tolerance per operation, scaled to the size of
the operands (see ``characteristic_tolerance``).
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..errors import DegenerateBooleanError
from .mesh import Mesh, Transform, Vec3, Bounds, dot, length, lerp, sub
from .mesh_repair import (
    VertexWelder,
    characteristic_tolerance,
    edge_report,
    remove_spikes,
    require_manifold,
    resolve_t_junctions,
    to_mesh,
    triangulate_polygon,
)

logger = logging.getLogger(__name__)

COPLANAR = 0
FRONT = 1
BACK = 2
SPANNING = 3

# Where polygons lying in a splitting plane are sent
ROUTE_OUTWARD = "outward"  # same orientation -> front, opposite -> back
ROUTE_INWARD = "inward"    # same orientation -> back, opposite -> front
ROUTE_BACK = "back"        # always back

_ZERO = (0.0, 0.0, 0.0)


class Plane:
    """Oriented plane ``dot(normal, p) == w`` with a unit normal."""

    __slots__ = ("normal", "w")

    def __init__(self, normal: Vec3, w: float):
        self.normal = normal
        self.w = w

    @classmethod
    def from_points(cls, points: Sequence[Vec3]) -> "Plane":
        """Plane through a convex polygon (Newell's method; zero normal if degenerate)."""
        nx = ny = nz = 0.0
        count = len(points)
        for i in range(count):
            x1, y1, z1 = points[i]
            x2, y2, z2 = points[(i + 1) % count]
            nx += (y1 - y2) * (z1 + z2)
            ny += (z1 - z2) * (x1 + x2)
            nz += (x1 - x2) * (y1 + y2)
        size = length((nx, ny, nz))
        if size == 0.0:
            return cls(_ZERO, 0.0)
        normal = (nx / size, ny / size, nz / size)
        cx = sum(p[0] for p in points) / count
        cy = sum(p[1] for p in points) / count
        cz = sum(p[2] for p in points) / count
        return cls(normal, dot(normal, (cx, cy, cz)))

    @property
    def is_degenerate(self) -> bool:
        return self.normal == _ZERO

    def flipped(self) -> "Plane":
        n = self.normal
        return Plane((-n[0], -n[1], -n[2]), -self.w)


class Polygon:
    """Convex planar polygon; vertices counter-clockwise seen from outside."""

    __slots__ = ("vertices", "plane")

    def __init__(self, vertices: List[Vec3], plane: Optional[Plane] = None):
        self.vertices = vertices
        self.plane = plane if plane is not None else Plane.from_points(vertices)

    def flipped(self) -> "Polygon":
        return Polygon(self.vertices[::-1], self.plane.flipped())

    def bounds(self) -> Bounds:
        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        zs = [v[2] for v in self.vertices]
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))


def split_polygon(
    plane: Plane,
    polygon: Polygon,
    tolerance: float,
    coplanar_front: List[Polygon],
    coplanar_back: List[Polygon],
    front: List[Polygon],
    back: List[Polygon],
) -> None:
    """
    Classify ``polygon`` against ``plane``, splitting it if it spans the plane.

    Coplanar polygons go to ``coplanar_front`` when they face the same way
    as the plane and to ``coplanar_back`` otherwise.  Fragments keep the
    parent polygon's plane.
    """
    normal, w = plane.normal, plane.w
    polygon_type = 0
    types = []
    for v in polygon.vertices:
        t = dot(normal, v) - w
        if t < -tolerance:
            kind = BACK
        elif t > tolerance:
            kind = FRONT
        else:
            kind = COPLANAR
        polygon_type |= kind
        types.append(kind)

    if polygon_type == COPLANAR:
        if dot(normal, polygon.plane.normal) > 0:
            coplanar_front.append(polygon)
        else:
            coplanar_back.append(polygon)
    elif polygon_type == FRONT:
        front.append(polygon)
    elif polygon_type == BACK:
        back.append(polygon)
    else:
        f: List[Vec3] = []
        b: List[Vec3] = []
        vertices = polygon.vertices
        count = len(vertices)
        for i in range(count):
            j = (i + 1) % count
            ti, tj = types[i], types[j]
            vi, vj = vertices[i], vertices[j]
            if ti != BACK:
                f.append(vi)
            if ti != FRONT:
                b.append(vi)
            if (ti | tj) == SPANNING:
                t = (w - dot(normal, vi)) / dot(normal, sub(vj, vi))
                v = lerp(vi, vj, t)
                f.append(v)
                b.append(v)
        if len(f) >= 3:
            front.append(Polygon(f, polygon.plane))
        if len(b) >= 3:
            back.append(Polygon(b, polygon.plane))


class Node:
    """BSP tree node.  A missing back child is solid, a missing front child is empty."""

    __slots__ = ("plane", "front", "back")

    def __init__(self):
        self.plane: Optional[Plane] = None
        self.front: Optional["Node"] = None
        self.back: Optional["Node"] = None


def build_tree(polygons: Sequence[Polygon], tolerance: float) -> Optional[Node]:
    """
    Build a BSP tree from the planes of a closed solid's polygons.

    Polygons without a well-defined plane cannot split space and are skipped.
    Returns None when no polygon has a plane.
    """
    usable = [p for p in polygons if not p.plane.is_degenerate]
    if not usable:
        return None

    root = Node()
    stack = [(root, usable)]
    while stack:
        node, group = stack.pop()
        node.plane = group[0].plane
        front: List[Polygon] = []
        back: List[Polygon] = []
        on_plane: List[Polygon] = []
        for polygon in group:
            split_polygon(node.plane, polygon, tolerance, on_plane, on_plane, front, back)
        if front:
            node.front = Node()
            stack.append((node.front, front))
        if back:
            node.back = Node()
            stack.append((node.back, back))
    return root


def clip_polygon(
    root: Node,
    polygon: Polygon,
    tolerance: float,
    route: str,
) -> Tuple[List[Polygon], bool]:
    """
    Keep the parts of ``polygon`` that lie outside the solid described by ``root``.

    Args:
        root: BSP tree of the clipping solid
        polygon: Polygon to clip
        tolerance: Plane classification tolerance
        route: How polygons lying in a tree plane are classified
            (ROUTE_OUTWARD, ROUTE_INWARD or ROUTE_BACK)

    Returns:
        (kept fragments, whether any part was removed)
    """
    kept: List[Polygon] = []
    removed = False
    stack = [(root, [polygon])]
    while stack:
        node, group = stack.pop()
        front: List[Polygon] = []
        back: List[Polygon] = []
        same: List[Polygon] = []
        opposite: List[Polygon] = []
        for p in group:
            split_polygon(node.plane, p, tolerance, same, opposite, front, back)

        if route == ROUTE_OUTWARD:
            front.extend(same)
            back.extend(opposite)
        elif route == ROUTE_INWARD:
            back.extend(same)
            front.extend(opposite)
        else:
            back.extend(same)
            back.extend(opposite)

        if back:
            if node.back is not None:
                stack.append((node.back, back))
            else:
                removed = True
        if front:
            if node.front is not None:
                stack.append((node.front, front))
            else:
                kept.extend(front)
    return kept, removed


def _polygons(mesh: Mesh) -> List[Polygon]:
    return [Polygon(list(tri.vertices)) for tri in mesh.triangles]


def _bounds_overlap(a: Bounds, b: Bounds, tolerance: float) -> bool:
    for axis in range(3):
        if a[0][axis] > b[1][axis] + tolerance or b[0][axis] > a[1][axis] + tolerance:
            return False
    return True


def _bounds_intersection(a: Bounds, b: Bounds, tolerance: float) -> Bounds:
    lo = tuple(max(a[0][axis], b[0][axis]) - tolerance for axis in range(3))
    hi = tuple(min(a[1][axis], b[1][axis]) + tolerance for axis in range(3))
    return lo, hi


def _inside(p: Vec3, bounds: Bounds) -> bool:
    lo, hi = bounds
    return (lo[0] <= p[0] <= hi[0] and lo[1] <= p[1] <= hi[1] and lo[2] <= p[2] <= hi[2])


def _clip_all(
    polygons: Sequence[Polygon],
    tree: Optional[Node],
    near: Bounds,
    tolerance: float,
    route: str,
    keep_far: bool,
) -> List[Polygon]:
    """
    Clip every polygon touching ``near``; the rest are kept or dropped whole.

    Polygons that come through a clip without losing anything are kept as
    the original polygon rather than as fragments.
    """
    result: List[Polygon] = []
    for polygon in polygons:
        if not _bounds_overlap(polygon.bounds(), near, tolerance):
            if keep_far:
                result.append(polygon)
            continue
        if tree is None:
            result.append(polygon)
            continue
        kept, removed = clip_polygon(tree, polygon, tolerance, route)
        if removed:
            result.extend(kept)
        else:
            result.append(polygon)
    return result


def _assemble(
    polygons: Sequence[Polygon],
    operands: Sequence[Mesh],
    focus: Bounds,
    tolerance: float,
    operation: str,
) -> Mesh:
    """
    Turn kept polygons into a closed triangle mesh.

    Input vertices are welded first so they keep their exact coordinates.
    Only vertices created by splitting, or input vertices in the region where
    the operands meet, can lie inside another polygon's edge.

    Raises:
        DegenerateBooleanError: If the result is not a closed manifold
    """
    welder = VertexWelder(tolerance)
    for mesh in operands:
        for tri in mesh.triangles:
            welder.add(tri.v1)
            welder.add(tri.v2)
            welder.add(tri.v3)
    original_count = len(welder.vertices)

    loops = []
    for polygon in polygons:
        loop = welder.polygon(polygon.vertices)
        if len(loop) >= 3:
            loops.append(loop)

    used = sorted({index for loop in loops for index in loop})
    candidates = [
        index for index in used
        if index >= original_count or _inside(welder.vertices[index], focus)
    ]
    loops = resolve_t_junctions(loops, welder.vertices, candidates, tolerance)

    triangles = []
    for loop in loops:
        loop = remove_spikes(loop)
        if loop:
            triangles.extend(triangulate_polygon(loop, welder, tolerance))

    report = edge_report(triangles, welder.vertices)
    if not report.is_manifold:
        raise DegenerateBooleanError(
            f"{operation} produced a non-manifold mesh: {report.boundary_edges} boundary, "
            f"{report.overshared_edges} over-shared and "
            f"{report.orientation_conflicts} misoriented edges",
            report=report,
        )

    logger.debug(f"{operation}: {len(polygons)} polygons -> {len(triangles)} triangles "
                 f"({len(welder.vertices) - original_count} new vertices)")
    return to_mesh(triangles, welder.vertices)


def _placed(mesh: Mesh, transform: Optional[Transform]) -> Mesh:
    if transform is None:
        return mesh
    if not transform.is_rigid():
        raise ValueError("Cutter transform must be rigid (rotation + translation only)")
    return mesh.transformed(transform)


def _is_flat(mesh: Mesh, tolerance: float) -> bool:
    return abs(mesh.volume()) <= tolerance * mesh.surface_area()


def subtract(
    target: Mesh,
    cutter: Mesh,
    cutter_transform: Optional[Transform] = None,
    tolerance: Optional[float] = None,
) -> Mesh:
    """
    Remove the volume of ``cutter`` (placed by ``cutter_transform``) from ``target``.

    Args:
        target: Closed, outward-oriented mesh to cut
        cutter: Closed, outward-oriented cutting solid
        cutter_transform: Rigid placement of the cutter (default: identity)
        tolerance: Distance tolerance (default: scaled to the operands)

    Returns:
        New closed mesh.  The target is returned unchanged when the cutter
        misses it or has no volume; an empty mesh when the cutter contains it.

    Raises:
        ValueError: If the cutter transform is not rigid
        DegenerateBooleanError: If an input or the result is not a closed,
            outward-oriented manifold
    """
    cutter = _placed(cutter, cutter_transform)
    if target.is_empty:
        return Mesh()
    if cutter.is_empty:
        return target.copy()

    if tolerance is None:
        tolerance = characteristic_tolerance(target, cutter)

    target_bounds = target.bounds()
    cutter_bounds = cutter.bounds()
    if not _bounds_overlap(target_bounds, cutter_bounds, tolerance):
        logger.debug("subtract: cutter misses target bounds, target unchanged")
        return target.copy()

    require_manifold(target, "target", tolerance)
    # A flattened cutter welds into a doubled sheet, so test this first
    if _is_flat(cutter, tolerance):
        logger.debug("subtract: cutter has no volume, target unchanged")
        return target.copy()
    require_manifold(cutter, "cutter", tolerance)

    focus = _bounds_intersection(target_bounds, cutter_bounds, tolerance)
    target_polygons = _polygons(target)
    cutter_polygons = _polygons(cutter)

    # Target surface outside the cutter
    cutter_tree = build_tree(cutter_polygons, tolerance)
    outside = _clip_all(target_polygons, cutter_tree, cutter_bounds, tolerance,
                        ROUTE_INWARD, keep_far=True)

    # Cutter surface inside the target becomes the wall of the cut, facing out
    inverse_tree = build_tree([p.flipped() for p in target_polygons], tolerance)
    inside = _clip_all(cutter_polygons, inverse_tree, target_bounds, tolerance,
                       ROUTE_BACK, keep_far=False)

    polygons = outside + [p.flipped() for p in inside]
    if not polygons:
        logger.debug("subtract: cutter contains target, result is empty")
        return Mesh()

    return _assemble(polygons, (target, cutter), focus, tolerance, "subtract")


def union(
    a: Mesh,
    b: Mesh,
    b_transform: Optional[Transform] = None,
    tolerance: Optional[float] = None,
) -> Mesh:
    """
    Merge two closed meshes into one solid.

    Faces shared by both solids appear once; faces where the solids touch
    back to back disappear.

    Raises:
        ValueError: If ``b_transform`` is not rigid
        DegenerateBooleanError: If an input or the result is not a closed,
            outward-oriented manifold
    """
    b = _placed(b, b_transform)
    if a.is_empty:
        return b.copy()
    if b.is_empty:
        return a.copy()

    if tolerance is None:
        tolerance = characteristic_tolerance(a, b)

    a_bounds = a.bounds()
    b_bounds = b.bounds()
    if not _bounds_overlap(a_bounds, b_bounds, tolerance):
        return Mesh(a.triangles + b.triangles)

    require_manifold(a, "first operand", tolerance)
    require_manifold(b, "second operand", tolerance)

    focus = _bounds_intersection(a_bounds, b_bounds, tolerance)
    a_polygons = _polygons(a)
    b_polygons = _polygons(b)

    b_tree = build_tree(b_polygons, tolerance)
    a_outside = _clip_all(a_polygons, b_tree, b_bounds, tolerance, ROUTE_OUTWARD, keep_far=True)
    a_tree = build_tree(a_polygons, tolerance)
    b_outside = _clip_all(b_polygons, a_tree, a_bounds, tolerance, ROUTE_BACK, keep_far=True)

    return _assemble(a_outside + b_outside, (a, b), focus, tolerance, "union")


__all__ = [
    "Plane",
    "Polygon",
    "Node",
    "split_polygon",
    "build_tree",
    "clip_polygon",
    "subtract",
    "union",
    "characteristic_tolerance",
]
