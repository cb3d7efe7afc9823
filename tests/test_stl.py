"""
Tests for ASCII STL export and import.
"""

import pytest

from spurgear.core.mesh import Mesh, Triangle
from spurgear.errors import MalformedMeshError
from spurgear.io.stl import (
    parse_solid_text,
    read_stl,
    to_solid_text,
    write_stl,
)

SINGLE_TRIANGLE = [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0]


class TestToSolidText:
    """Tests for to_solid_text()."""

    def test_single_triangle_layout(self):
        text = to_solid_text(SINGLE_TRIANGLE)
        assert text == (
            "solid gear\n"
            "  facet normal 0.0 0.0 1.0\n"
            "    outer loop\n"
            "      vertex 0.0 0.0 0.0\n"
            "      vertex 1.0 0.0 0.0\n"
            "      vertex 0.0 1.0 0.0\n"
            "    endloop\n"
            "  endfacet\n"
            "endsolid gear\n"
        )

    def test_empty_mesh(self):
        assert to_solid_text([]) == "solid gear\nendsolid gear\n"

    def test_custom_solid_name(self):
        text = to_solid_text(SINGLE_TRIANGLE, solid_name="pinion")
        assert text.startswith("solid pinion\n")
        assert text.endswith("endsolid pinion\n")

    def test_facet_count(self, unit_box):
        text = to_solid_text(unit_box)
        assert text.count("facet normal") == 12
        assert text.count("vertex") == 36

    @pytest.mark.parametrize("length", [1, 8, 10])
    def test_partial_triangle_buffer_rejected(self, length):
        with pytest.raises(MalformedMeshError):
            to_solid_text([0.0] * length)

    def test_normal_recomputed_from_winding(self):
        """Clockwise order gives a downward normal regardless of stored normals."""
        mesh = Mesh([Triangle((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0))])
        text = to_solid_text(mesh)
        assert "facet normal 0.0 0.0 -1.0" in text

    def test_degenerate_facet_gets_zero_normal(self):
        text = to_solid_text([0.0, 0.0, 0.0, 1.0, 1.0, 1.0, 2.0, 2.0, 2.0])
        assert "facet normal 0.0 0.0 0.0" in text

    def test_no_negative_zero(self):
        text = to_solid_text([-0.0, 0.0, 0.0, 1.0, -0.0, 0.0, 0.0, 1.0, -0.0])
        assert "-0.0" not in text

    def test_full_precision_by_default(self):
        text = to_solid_text([0.1, 0.2, 0.3, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0])
        assert "vertex 0.1 0.2 0.3" in text

    def test_precision_option(self):
        text = to_solid_text([1.23456789, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0], precision=4)
        assert "vertex 1.235 0 0" in text

    def test_invalid_precision(self):
        with pytest.raises(ValueError):
            to_solid_text(SINGLE_TRIANGLE, precision=0)


class TestParseSolidText:
    """Tests for parse_solid_text()."""

    def test_reads_exported_mesh(self, unit_box):
        name, mesh = parse_solid_text(to_solid_text(unit_box, solid_name="box"))
        assert name == "box"
        assert mesh.positions() == unit_box.positions()

    def test_ignores_stored_normals(self):
        text = to_solid_text(SINGLE_TRIANGLE).replace("0.0 0.0 1.0", "9.0 9.0 9.0", 1)
        _, mesh = parse_solid_text(text)
        assert mesh.triangles[0].normal == pytest.approx((0.0, 0.0, 1.0))

    @pytest.mark.parametrize("text", [
        "",
        "facet normal 0 0 1\n",
        "solid gear\n",
        "solid gear\n  facet normal 0 0 1\n    outer loop\n      vertex 0 0 0\n"
        "      vertex 1 0 0\n    endloop\n  endfacet\nendsolid gear\n",
        "solid gear\n  facet normal 0 0 1\n    outer loop\n      vertex 0 0 x\n",
        "solid gear\n  vertex 0 0 0\nendsolid gear\n",
    ])
    def test_malformed_text(self, text):
        with pytest.raises(MalformedMeshError):
            parse_solid_text(text)


class TestWriteStl:
    """Tests for write_stl() and read_stl()."""

    def test_write_and_read(self, tmp_path, unit_box):
        path = write_stl(unit_box, tmp_path / "box.stl")

        assert path.exists()
        name, mesh = read_stl(path)
        assert name == "gear"
        assert len(mesh) == 12

    def test_default_filename(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        path = write_stl(SINGLE_TRIANGLE)
        assert path.name == "gear.stl"
        assert (tmp_path / "gear.stl").exists()

    def test_malformed_buffer_writes_nothing(self, tmp_path):
        target = tmp_path / "bad.stl"
        with pytest.raises(MalformedMeshError):
            write_stl([0.0] * 10, target)
        assert not target.exists()

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_stl(tmp_path / "missing.stl")
