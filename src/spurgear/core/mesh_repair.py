"""
Mesh welding, T-junction repair and manifold checks.

Boolean operations split faces independently, so the same point on a shared
edge can be computed twice with slightly different rounding, and a face that
was not split can end up with a neighbour's new vertex lying on one of its
edges (a T-junction).  The helpers here turn a polygon soup into a closed,
conforming triangle mesh:

1. ``VertexWelder`` snaps points within the tolerance onto one vertex.
2. ``resolve_t_junctions`` inserts vertices that lie on an edge into it.
3. ``remove_spikes`` drops back-and-forth edges left by collapsed slivers.
4. ``triangulate_polygon`` fans each polygon into triangles.

``check_manifold`` then verifies that every edge is shared by exactly two
triangles with opposite winding.
"""

import logging
from bisect import bisect_left, bisect_right
from collections import Counter
from dataclasses import dataclass, field
from math import floor, sqrt
from typing import Dict, List, Optional, Sequence, Tuple

from ..calculator.constants import TOLERANCE_SCALE, MIN_TOLERANCE
from ..errors import DegenerateBooleanError
from .mesh import Mesh, Triangle, Vec3, cross, dot, length, sub

logger = logging.getLogger(__name__)

IndexPolygon = List[int]


def characteristic_tolerance(*meshes: Mesh) -> float:
    """Tolerance scaled to the combined bounding-box diagonal of ``meshes``."""
    lo = [float("inf")] * 3
    hi = [float("-inf")] * 3
    for mesh in meshes:
        bounds = mesh.bounds()
        if bounds is None:
            continue
        for axis in range(3):
            lo[axis] = min(lo[axis], bounds[0][axis])
            hi[axis] = max(hi[axis], bounds[1][axis])

    if lo[0] == float("inf"):
        return MIN_TOLERANCE

    diagonal = sqrt(sum((hi[axis] - lo[axis]) ** 2 for axis in range(3)))
    return max(diagonal * TOLERANCE_SCALE, MIN_TOLERANCE)


class VertexWelder:
    """Assigns one index to all points within ``tolerance`` of each other.

    Points are matched against the earliest stored vertex within tolerance,
    so stored vertices are always more than ``tolerance`` apart and the
    first occurrence of a point keeps its exact coordinates.
    """

    def __init__(self, tolerance: float):
        self.tolerance = tolerance
        self.vertices: List[Vec3] = []
        self._cells: Dict[Tuple[int, int, int], List[int]] = {}

    def _cell(self, p: Vec3) -> Tuple[int, int, int]:
        t = self.tolerance
        return (floor(p[0] / t), floor(p[1] / t), floor(p[2] / t))

    def find(self, p: Vec3) -> Optional[int]:
        """Index of the stored vertex matching ``p``, or None."""
        cx, cy, cz = self._cell(p)
        limit = self.tolerance * self.tolerance
        best = None
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for dz in (-1, 0, 1):
                    for index in self._cells.get((cx + dx, cy + dy, cz + dz), ()):
                        q = self.vertices[index]
                        d = sub(p, q)
                        if dot(d, d) <= limit and (best is None or index < best):
                            best = index
        return best

    def add(self, p: Vec3) -> int:
        """Index for ``p``, storing it as a new vertex if nothing matches."""
        index = self.find(p)
        if index is not None:
            return index
        return self.add_unwelded(p)

    def add_unwelded(self, p: Vec3) -> int:
        """Store ``p`` as a new vertex without looking for a match."""
        index = len(self.vertices)
        self.vertices.append(p)
        self._cells.setdefault(self._cell(p), []).append(index)
        return index

    def polygon(self, points: Sequence[Vec3]) -> IndexPolygon:
        """Weld a polygon's points, dropping consecutive duplicates."""
        indices: IndexPolygon = []
        for p in points:
            index = self.add(p)
            if not indices or indices[-1] != index:
                indices.append(index)
        while len(indices) > 1 and indices[0] == indices[-1]:
            indices.pop()
        return indices


def resolve_t_junctions(
    polygons: List[IndexPolygon],
    vertices: Sequence[Vec3],
    candidates: Sequence[int],
    tolerance: float,
) -> List[IndexPolygon]:
    """
    Insert candidate vertices that lie inside polygon edges.

    Both directions of an undirected edge receive the same inserted
    vertices, in mirrored order, so neighbouring polygons stay conforming.

    Args:
        polygons: Polygons as vertex index lists
        vertices: Vertex coordinates
        candidates: Indices of vertices that may lie on other polygons' edges
        tolerance: Maximum distance from the edge

    Returns:
        New polygon list with the extra vertices spliced in
    """
    if not candidates:
        return [list(p) for p in polygons]

    ordered = sorted(candidates, key=lambda i: vertices[i][0])
    xs = [vertices[i][0] for i in ordered]
    cache: Dict[Tuple[int, int], List[int]] = {}

    def inserts(a: int, b: int) -> List[int]:
        key = (a, b) if a < b else (b, a)
        if key not in cache:
            cache[key] = _points_on_edge(key[0], key[1], vertices, ordered, xs, tolerance)
        found = cache[key]
        return found if a < b else found[::-1]

    result = []
    for polygon in polygons:
        expanded: IndexPolygon = []
        count = len(polygon)
        for i in range(count):
            a = polygon[i]
            b = polygon[(i + 1) % count]
            expanded.append(a)
            expanded.extend(inserts(a, b))
        result.append(expanded)
    return result


def _points_on_edge(
    a: int,
    b: int,
    vertices: Sequence[Vec3],
    ordered: Sequence[int],
    xs: Sequence[float],
    tolerance: float,
) -> List[int]:
    """Candidate vertices strictly inside edge a->b, sorted from a to b."""
    pa, pb = vertices[a], vertices[b]
    edge = sub(pb, pa)
    edge_length_sq = dot(edge, edge)
    if edge_length_sq == 0.0:
        return []

    lo = bisect_left(xs, min(pa[0], pb[0]) - tolerance)
    hi = bisect_right(xs, max(pa[0], pb[0]) + tolerance)
    ymin, ymax = min(pa[1], pb[1]) - tolerance, max(pa[1], pb[1]) + tolerance
    zmin, zmax = min(pa[2], pb[2]) - tolerance, max(pa[2], pb[2]) + tolerance

    edge_length = sqrt(edge_length_sq)
    margin = tolerance / edge_length
    found = []
    for position in range(lo, hi):
        c = ordered[position]
        if c == a or c == b:
            continue
        pc = vertices[c]
        if not (ymin <= pc[1] <= ymax and zmin <= pc[2] <= zmax):
            continue
        offset = sub(pc, pa)
        t = dot(offset, edge) / edge_length_sq
        if t <= margin or t >= 1.0 - margin:
            continue
        # Distance from the infinite line; t is already inside the segment
        if length(cross(offset, edge)) / edge_length <= tolerance:
            found.append((t, c))

    found.sort()
    return [c for _, c in found]


def remove_spikes(polygon: IndexPolygon) -> IndexPolygon:
    """
    Remove ``u, v, u`` back-and-forth runs from a polygon loop.

    Such runs appear when a sliver collapses onto an edge; their two edges
    cancel each other, so dropping them keeps the surface closed.
    """
    loop = list(polygon)
    changed = True
    while changed and len(loop) >= 3:
        changed = False
        count = len(loop)
        for i in range(count):
            if loop[i] == loop[(i + 2) % count]:
                # Drop the tip and one copy of the repeated vertex
                tip = (i + 1) % count
                for index in sorted({tip, (i + 2) % count}, reverse=True):
                    del loop[index]
                changed = True
                break
        # Consecutive duplicates can appear after removal
        deduped: IndexPolygon = []
        for index in loop:
            if not deduped or deduped[-1] != index:
                deduped.append(index)
        while len(deduped) > 1 and deduped[0] == deduped[-1]:
            deduped.pop()
        loop = deduped
    return loop if len(loop) >= 3 else []


def _has_collinear_vertex(polygon: IndexPolygon, vertices: Sequence[Vec3], tolerance: float) -> bool:
    count = len(polygon)
    for i in range(count):
        prev_p = vertices[polygon[i - 1]]
        p = vertices[polygon[i]]
        next_p = vertices[polygon[(i + 1) % count]]
        chord = sub(next_p, prev_p)
        chord_length = length(chord)
        if chord_length == 0.0:
            return True
        if length(cross(sub(p, prev_p), chord)) / chord_length <= tolerance:
            return True
    return False


def triangulate_polygon(
    polygon: IndexPolygon,
    welder: VertexWelder,
    tolerance: float,
) -> List[Tuple[int, int, int]]:
    """
    Split a convex polygon loop into triangles with the same winding.

    Polygons with vertices on a straight edge (from T-junction repair) are
    fanned around their centroid so no zero-area triangle is produced;
    all others are fanned from their first vertex.
    """
    if len(polygon) == 3:
        return [(polygon[0], polygon[1], polygon[2])]

    vertices = welder.vertices
    if _has_collinear_vertex(polygon, vertices, tolerance):
        count = float(len(polygon))
        cx = sum(vertices[i][0] for i in polygon) / count
        cy = sum(vertices[i][1] for i in polygon) / count
        cz = sum(vertices[i][2] for i in polygon) / count
        if welder.find((cx, cy, cz)) is None:
            centre = welder.add_unwelded((cx, cy, cz))
            return [
                (centre, polygon[i], polygon[(i + 1) % len(polygon)])
                for i in range(len(polygon))
            ]

    return [(polygon[0], polygon[i], polygon[i + 1]) for i in range(1, len(polygon) - 1)]


@dataclass
class ManifoldReport:
    """Result of a manifold check.

    Attributes:
        triangle_count: Triangles examined.
        vertex_count: Distinct vertices after welding.
        boundary_edges: Edges used by only one triangle (holes).
        overshared_edges: Edges used by more than two triangles.
        orientation_conflicts: Edges used twice in the same direction.
        degenerate_triangles: Triangles whose corners welded together.
    """
    triangle_count: int = 0
    vertex_count: int = 0
    boundary_edges: int = 0
    overshared_edges: int = 0
    orientation_conflicts: int = 0
    degenerate_triangles: int = 0
    examples: List[Tuple[Vec3, Vec3]] = field(default_factory=list)

    @property
    def is_manifold(self) -> bool:
        return (
            self.boundary_edges == 0
            and self.overshared_edges == 0
            and self.orientation_conflicts == 0
        )

    def to_dict(self) -> dict:
        """Convert to a dictionary for JSON serialization."""
        return {
            "is_manifold": self.is_manifold,
            "triangle_count": self.triangle_count,
            "vertex_count": self.vertex_count,
            "boundary_edges": self.boundary_edges,
            "overshared_edges": self.overshared_edges,
            "orientation_conflicts": self.orientation_conflicts,
            "degenerate_triangles": self.degenerate_triangles,
        }


def edge_report(
    triangles: Sequence[Tuple[int, int, int]],
    vertices: Sequence[Vec3],
    max_examples: int = 5,
) -> ManifoldReport:
    """Manifold report for triangles given as vertex index triples."""
    report = ManifoldReport(triangle_count=len(triangles))
    directed: Counter = Counter()
    used = set()

    for a, b, c in triangles:
        if a == b or b == c or c == a:
            report.degenerate_triangles += 1
            continue
        directed[(a, b)] += 1
        directed[(b, c)] += 1
        directed[(c, a)] += 1
        used.update((a, b, c))

    report.vertex_count = len(used)

    seen = set()
    for (a, b) in directed:
        key = (a, b) if a < b else (b, a)
        if key in seen:
            continue
        seen.add(key)
        forward = directed.get(key, 0)
        backward = directed.get((key[1], key[0]), 0)
        total = forward + backward
        if total == 1:
            report.boundary_edges += 1
        elif total > 2:
            report.overshared_edges += 1
        elif forward != backward:
            report.orientation_conflicts += 1
        else:
            continue
        if len(report.examples) < max_examples:
            report.examples.append((vertices[key[0]], vertices[key[1]]))

    return report


def check_manifold(mesh: Mesh, tolerance: Optional[float] = None) -> ManifoldReport:
    """
    Check that a triangle mesh is closed and consistently oriented.

    Vertices within ``tolerance`` (default: scaled to the mesh size) are
    treated as one.  An empty mesh counts as manifold (the empty solid).
    """
    if tolerance is None:
        tolerance = characteristic_tolerance(mesh)

    welder = VertexWelder(tolerance)
    triangles = [
        (welder.add(tri.v1), welder.add(tri.v2), welder.add(tri.v3))
        for tri in mesh.triangles
    ]
    return edge_report(triangles, welder.vertices)


def require_manifold(mesh: Mesh, what: str, tolerance: Optional[float] = None) -> ManifoldReport:
    """
    Check a mesh and raise if it is not a closed, outward-facing solid.

    Raises:
        DegenerateBooleanError: If the mesh has holes, over-shared or
            inconsistently oriented edges, or encloses negative volume
    """
    report = check_manifold(mesh, tolerance)
    if not report.is_manifold:
        raise DegenerateBooleanError(
            f"{what} mesh is not manifold: {report.boundary_edges} boundary, "
            f"{report.overshared_edges} over-shared and "
            f"{report.orientation_conflicts} misoriented edges",
            report=report,
        )

    if tolerance is None:
        tolerance = characteristic_tolerance(mesh)
    if mesh.volume() < -tolerance * mesh.surface_area():
        raise DegenerateBooleanError(f"{what} mesh is inside out (negative volume)", report=report)

    logger.debug(f"{what} mesh is manifold: {report.triangle_count} triangles, "
                 f"{report.vertex_count} vertices")
    return report


def to_mesh(triangles: Sequence[Tuple[int, int, int]], vertices: Sequence[Vec3]) -> Mesh:
    """Build a Mesh from index triangles."""
    return Mesh(
        Triangle.from_vertices(vertices[a], vertices[b], vertices[c])
        for a, b, c in triangles
    )
