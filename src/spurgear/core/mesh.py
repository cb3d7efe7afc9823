"""
Triangle mesh and rigid transform types.

A Mesh is an ordered list of triangles.  Its flat position buffer holds nine
floats per triangle (three vertices of three coordinates), which is the form
consumed by renderers and by the STL serializer.
"""

from dataclasses import dataclass
from math import sqrt, cos, sin
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from ..errors import MalformedMeshError

Vec3 = Tuple[float, float, float]
Bounds = Tuple[Vec3, Vec3]

FLOATS_PER_TRIANGLE = 9


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(a: Vec3) -> float:
    return sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def lerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


def normalize(a: Vec3) -> Vec3:
    """Unit vector along ``a``; the zero vector stays zero."""
    n = length(a)
    if n == 0.0:
        return (0.0, 0.0, 0.0)
    return (a[0] / n, a[1] / n, a[2] / n)


def face_normal(v1: Vec3, v2: Vec3, v3: Vec3) -> Vec3:
    """Right-hand-rule unit normal of a triangle (zero if degenerate)."""
    return normalize(cross(sub(v2, v1), sub(v3, v1)))


@dataclass(frozen=True)
class Triangle:
    """One facet: three vertices in counter-clockwise order seen from outside."""
    v1: Vec3
    v2: Vec3
    v3: Vec3
    normal: Vec3

    @classmethod
    def from_vertices(cls, v1: Vec3, v2: Vec3, v3: Vec3) -> "Triangle":
        """Create a triangle whose normal follows its winding."""
        return cls(v1, v2, v3, face_normal(v1, v2, v3))

    @property
    def vertices(self) -> Tuple[Vec3, Vec3, Vec3]:
        return (self.v1, self.v2, self.v3)

    def area(self) -> float:
        return 0.5 * length(cross(sub(self.v2, self.v1), sub(self.v3, self.v1)))


class Mesh:
    """Ordered sequence of triangles.

    Meshes handed out by the generator are treated as values: operations
    return new meshes and never modify their inputs.
    """

    def __init__(self, triangles: Optional[Iterable[Triangle]] = None):
        self.triangles: List[Triangle] = list(triangles) if triangles is not None else []

    def __len__(self) -> int:
        return len(self.triangles)

    def __iter__(self) -> Iterator[Triangle]:
        return iter(self.triangles)

    def __repr__(self) -> str:
        return f"Mesh(triangles={len(self.triangles)})"

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @property
    def is_empty(self) -> bool:
        return not self.triangles

    @classmethod
    def from_positions(cls, positions: Sequence[float]) -> "Mesh":
        """
        Build a mesh from a flat, unindexed position buffer.

        Raises:
            MalformedMeshError: If the buffer length is not a multiple of 9
        """
        if len(positions) % FLOATS_PER_TRIANGLE != 0:
            raise MalformedMeshError(
                f"Position buffer length {len(positions)} is not a multiple of "
                f"{FLOATS_PER_TRIANGLE} (3 vertices per triangle)"
            )

        triangles = []
        for i in range(0, len(positions), FLOATS_PER_TRIANGLE):
            p = [float(x) for x in positions[i:i + FLOATS_PER_TRIANGLE]]
            triangles.append(Triangle.from_vertices(
                (p[0], p[1], p[2]), (p[3], p[4], p[5]), (p[6], p[7], p[8])
            ))
        return cls(triangles)

    def positions(self) -> List[float]:
        """Flat position buffer, nine floats per triangle."""
        buffer: List[float] = []
        for tri in self.triangles:
            buffer.extend(tri.v1)
            buffer.extend(tri.v2)
            buffer.extend(tri.v3)
        return buffer

    def bounds(self) -> Optional[Bounds]:
        """Axis-aligned bounding box as (min, max), or None when empty."""
        if not self.triangles:
            return None
        xs, ys, zs = [], [], []
        for tri in self.triangles:
            for v in tri.vertices:
                xs.append(v[0])
                ys.append(v[1])
                zs.append(v[2])
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    def volume(self) -> float:
        """Signed enclosed volume (positive for a closed, outward-facing mesh)."""
        total = 0.0
        for tri in self.triangles:
            total += dot(tri.v1, cross(tri.v2, tri.v3))
        return total / 6.0

    def surface_area(self) -> float:
        return sum(tri.area() for tri in self.triangles)

    def transformed(self, transform: "Transform") -> "Mesh":
        """New mesh with every vertex (and normal) transformed."""
        triangles = []
        for tri in self.triangles:
            triangles.append(Triangle(
                transform.apply(tri.v1),
                transform.apply(tri.v2),
                transform.apply(tri.v3),
                transform.apply_direction(tri.normal),
            ))
        return Mesh(triangles)

    def copy(self) -> "Mesh":
        return Mesh(self.triangles)


Matrix3 = Tuple[Vec3, Vec3, Vec3]

_IDENTITY: Matrix3 = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))


@dataclass(frozen=True)
class Transform:
    """Rigid transform: rotate about the origin, then translate.

    ``rotation`` is a row-major 3x3 matrix.
    """
    rotation: Matrix3 = _IDENTITY
    translation: Vec3 = (0.0, 0.0, 0.0)

    @classmethod
    def identity(cls) -> "Transform":
        return cls()

    @classmethod
    def from_translation(cls, x: float, y: float, z: float) -> "Transform":
        return cls(translation=(float(x), float(y), float(z)))

    @classmethod
    def rotation_z(cls, angle_rad: float) -> "Transform":
        """Rotation about the Z (thickness) axis."""
        c, s = cos(angle_rad), sin(angle_rad)
        return cls(rotation=((c, -s, 0.0), (s, c, 0.0), (0.0, 0.0, 1.0)))

    @classmethod
    def rotation_about(cls, axis: Vec3, angle_rad: float) -> "Transform":
        """Rotation about an arbitrary axis through the origin (Rodrigues)."""
        x, y, z = normalize(axis)
        if (x, y, z) == (0.0, 0.0, 0.0):
            raise ValueError("Rotation axis must be non-zero")
        c, s = cos(angle_rad), sin(angle_rad)
        t = 1.0 - c
        return cls(rotation=(
            (t * x * x + c, t * x * y - s * z, t * x * z + s * y),
            (t * x * y + s * z, t * y * y + c, t * y * z - s * x),
            (t * x * z - s * y, t * y * z + s * x, t * z * z + c),
        ))

    def apply_direction(self, v: Vec3) -> Vec3:
        r = self.rotation
        return (dot(r[0], v), dot(r[1], v), dot(r[2], v))

    def apply(self, v: Vec3) -> Vec3:
        return add(self.apply_direction(v), self.translation)

    def then(self, other: "Transform") -> "Transform":
        """Transform that applies ``self`` first and ``other`` second."""
        a = other.rotation
        b = self.rotation
        columns = list(zip(*b))
        rotation = tuple(
            tuple(dot(a[i], columns[j]) for j in range(3)) for i in range(3)
        )
        return Transform(rotation=rotation, translation=other.apply(self.translation))

    def is_rigid(self, tolerance: float = 1e-9) -> bool:
        """True if the rotation is orthonormal with determinant +1."""
        r = self.rotation
        for i in range(3):
            for j in range(3):
                expected = 1.0 if i == j else 0.0
                if abs(dot(r[i], r[j]) - expected) > tolerance:
                    return False
        det = dot(r[0], cross(r[1], r[2]))
        return abs(det - 1.0) <= tolerance
