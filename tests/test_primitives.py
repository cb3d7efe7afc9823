"""
Tests for the cylinder and box primitives.
"""

import math
import pytest

from spurgear.core import check_manifold, make_box, make_cylinder


class TestMakeCylinder:
    """Tests for make_cylinder()."""

    def test_triangle_count(self):
        assert len(make_cylinder(5.0, 2.0, 24)) == 96

    def test_closed_and_outward(self, blank_cylinder):
        report = check_manifold(blank_cylinder)
        assert report.is_manifold
        assert blank_cylinder.volume() > 0

    def test_vertex_count(self, blank_cylinder):
        """Two rims plus two cap centres."""
        assert check_manifold(blank_cylinder).vertex_count == 2 * 24 + 2

    def test_volume_is_inscribed_prism(self):
        radius, height, segments = 7.0, 2.0, 24
        mesh = make_cylinder(radius, height, segments)
        polygon_area = 0.5 * segments * radius ** 2 * math.sin(2 * math.pi / segments)
        assert mesh.volume() == pytest.approx(polygon_area * height)

    def test_centred_on_origin(self):
        lo, hi = make_cylinder(3.0, 4.0, 8).bounds()
        assert lo[2] == pytest.approx(-2.0)
        assert hi[2] == pytest.approx(2.0)
        assert hi[0] == pytest.approx(3.0)

    def test_first_rim_vertex_on_x_axis(self):
        mesh = make_cylinder(3.0, 4.0, 6)
        first = mesh.triangles[0].v1
        assert first == pytest.approx((3.0, 0.0, -2.0))

    def test_normals_point_away_from_axis(self, blank_cylinder):
        for tri in blank_cylinder:
            centroid = [sum(v[i] for v in tri.vertices) / 3 for i in range(3)]
            outward = tri.normal[0] * centroid[0] + tri.normal[1] * centroid[1] + tri.normal[2] * centroid[2]
            assert outward > 0

    @pytest.mark.parametrize("radius,height,segments", [
        (0.0, 1.0, 8), (-1.0, 1.0, 8), (1.0, 0.0, 8), (1.0, 1.0, 2),
    ])
    def test_invalid_arguments(self, radius, height, segments):
        with pytest.raises(ValueError):
            make_cylinder(radius, height, segments)


class TestMakeBox:
    """Tests for make_box()."""

    def test_twelve_triangles(self):
        assert len(make_box(1.0, 2.0, 3.0)) == 12

    def test_volume_and_bounds(self):
        mesh = make_box(1.0, 2.0, 3.0)
        assert mesh.volume() == pytest.approx(6.0)
        lo, hi = mesh.bounds()
        assert lo == pytest.approx((-0.5, -1.0, -1.5))
        assert hi == pytest.approx((0.5, 1.0, 1.5))

    def test_manifold(self, unit_box):
        report = check_manifold(unit_box)
        assert report.is_manifold
        assert report.vertex_count == 8

    @pytest.mark.parametrize("size", [(0, 1, 1), (1, -1, 1), (1, 1, 0)])
    def test_invalid_size(self, size):
        with pytest.raises(ValueError):
            make_box(*size)
