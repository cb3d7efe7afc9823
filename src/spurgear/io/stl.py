"""
ASCII STL ("text solid") export and import.

Writes::

    solid gear
      facet normal nx ny nz
        outer loop
          vertex x y z
          vertex x y z
          vertex x y z
        endloop
      endfacet
    endsolid gear

Facet normals are always recomputed from the facet's own vertices (right-hand
rule), so stale or per-vertex normals in the input never reach the file.
Numbers are written with Python's shortest round-trip float representation
unless a precision is requested.
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from ..core.mesh import FLOATS_PER_TRIANGLE, Mesh, Triangle, face_normal
from ..errors import MalformedMeshError

logger = logging.getLogger(__name__)

DEFAULT_SOLID_NAME = "gear"
DEFAULT_FILENAME = "gear.stl"

MeshLike = Union[Mesh, Sequence[float]]


def _format_number(value: float, precision: Optional[int]) -> str:
    value = float(value)
    if value == 0.0:
        # Avoid "-0.0" in the output
        value = 0.0
    if precision is None:
        return repr(value)
    return f"{value:.{precision}g}"


def _triangles(mesh: MeshLike) -> List[Tuple[tuple, tuple, tuple]]:
    if isinstance(mesh, Mesh):
        return [tri.vertices for tri in mesh.triangles]

    if len(mesh) % FLOATS_PER_TRIANGLE != 0:
        raise MalformedMeshError(
            f"Position buffer length {len(mesh)} is not a multiple of "
            f"{FLOATS_PER_TRIANGLE} (3 vertices per triangle)"
        )
    triangles = []
    for i in range(0, len(mesh), FLOATS_PER_TRIANGLE):
        p = mesh[i:i + FLOATS_PER_TRIANGLE]
        triangles.append(((p[0], p[1], p[2]), (p[3], p[4], p[5]), (p[6], p[7], p[8])))
    return triangles


def to_solid_text(
    mesh: MeshLike,
    solid_name: str = DEFAULT_SOLID_NAME,
    precision: Optional[int] = None,
) -> str:
    """
    Serialize a mesh as ASCII STL.

    Args:
        mesh: Mesh, or a flat position buffer with nine floats per triangle
        solid_name: Name written after ``solid`` and ``endsolid``
        precision: Significant digits per number (default: shortest exact repr)

    Returns:
        STL text ending with a newline

    Raises:
        MalformedMeshError: If a position buffer's length is not a multiple of 9
    """
    if precision is not None and precision < 1:
        raise ValueError(f"Precision must be at least 1 significant digit, got {precision}")

    def fmt(v):
        return " ".join(_format_number(c, precision) for c in v)

    lines = [f"solid {solid_name}"]
    for v1, v2, v3 in _triangles(mesh):
        normal = face_normal(v1, v2, v3)
        lines.append(f"  facet normal {fmt(normal)}")
        lines.append("    outer loop")
        lines.append(f"      vertex {fmt(v1)}")
        lines.append(f"      vertex {fmt(v2)}")
        lines.append(f"      vertex {fmt(v3)}")
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append(f"endsolid {solid_name}")

    return "\n".join(lines) + "\n"


def parse_solid_text(text: str) -> Tuple[str, Mesh]:
    """
    Parse ASCII STL text.

    Stored facet normals are ignored; triangles get normals from their
    vertices like everywhere else.

    Returns:
        (solid name, Mesh)

    Raises:
        MalformedMeshError: If the text is not a well-formed ASCII STL solid
    """
    tokens_by_line = [line.split() for line in text.splitlines() if line.strip()]
    if not tokens_by_line or tokens_by_line[0][0] != "solid":
        raise MalformedMeshError("STL text must start with 'solid'")

    name = " ".join(tokens_by_line[0][1:])
    triangles: List[Triangle] = []
    vertices: List[tuple] = []
    state = "solid"

    for number, tokens in enumerate(tokens_by_line[1:], start=2):
        keyword = tokens[0]
        if state == "solid" and keyword == "facet":
            if len(tokens) != 5 or tokens[1] != "normal":
                raise MalformedMeshError(f"Line {number}: expected 'facet normal nx ny nz'")
            state = "facet"
        elif state == "solid" and keyword == "endsolid":
            state = "end"
        elif state == "facet" and tokens == ["outer", "loop"]:
            state = "loop"
            vertices = []
        elif state == "loop" and keyword == "vertex":
            if len(tokens) != 4:
                raise MalformedMeshError(f"Line {number}: expected 'vertex x y z'")
            try:
                vertices.append(tuple(float(t) for t in tokens[1:]))
            except ValueError:
                raise MalformedMeshError(f"Line {number}: invalid vertex coordinates")
        elif state == "loop" and keyword == "endloop":
            if len(vertices) != 3:
                raise MalformedMeshError(
                    f"Line {number}: facet has {len(vertices)} vertices, expected 3"
                )
            triangles.append(Triangle.from_vertices(*vertices))
            state = "endloop"
        elif state == "endloop" and keyword == "endfacet":
            state = "solid"
        else:
            raise MalformedMeshError(f"Line {number}: unexpected '{' '.join(tokens)}'")

    if state != "end":
        raise MalformedMeshError("STL text ended before 'endsolid'")

    return name, Mesh(triangles)


def write_stl(
    mesh: MeshLike,
    filepath: Union[str, Path] = DEFAULT_FILENAME,
    solid_name: str = DEFAULT_SOLID_NAME,
    precision: Optional[int] = None,
) -> Path:
    """
    Write a mesh to an ASCII STL file.

    The text is produced in full before the file is opened, so a malformed
    mesh never leaves a partial file behind.

    Returns:
        Path written
    """
    text = to_solid_text(mesh, solid_name=solid_name, precision=precision)
    filepath = Path(filepath)

    with open(filepath, 'w') as f:
        f.write(text)

    logger.info(f"Exported {solid_name} to {filepath} ({len(text)} bytes)")
    return filepath


def read_stl(filepath: Union[str, Path]) -> Tuple[str, Mesh]:
    """
    Read an ASCII STL file.

    Raises:
        FileNotFoundError: If file doesn't exist
        MalformedMeshError: If the file is not ASCII STL
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"STL file not found: {filepath}")

    with open(filepath, 'r') as f:
        return parse_solid_text(f.read())
