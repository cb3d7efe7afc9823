"""
Tests for the spurgear-generate command line tool.
"""

import json
import subprocess
import sys

import pytest

from spurgear.cli.generate import main


class TestCliParsing:
    """Argument handling that never reaches geometry."""

    def test_help(self):
        result = subprocess.run(
            [sys.executable, "-m", "spurgear.cli.generate", "--help"],
            capture_output=True, text=True,
        )
        assert result.returncode == 0
        assert "--teeth" in result.stdout
        assert "--validate-only" in result.stdout

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "1.0.0" in capsys.readouterr().out

    def test_validate_only(self, capsys):
        assert main(["--validate-only"]) == 0
        assert "Parameters are valid" in capsys.readouterr().out

    def test_invalid_teeth(self, capsys, tmp_path):
        assert main(["--teeth", "2", "-o", str(tmp_path / "gear.stl")]) == 1

        err = capsys.readouterr().err
        assert "ERROR TEETH_TOO_FEW" in err
        assert not (tmp_path / "gear.stl").exists()

    def test_non_positive_thickness(self, capsys):
        assert main(["--thickness", "0", "--validate-only"]) == 1
        assert "THICKNESS_NOT_POSITIVE" in capsys.readouterr().err

    @pytest.mark.parametrize("flag,value", [
        ("--pressure-angle", "inf"),
        ("--module", "nan"),
        ("--thickness", "inf"),
    ])
    def test_non_finite_value(self, capsys, tmp_path, flag, value):
        output = tmp_path / "gear.stl"
        assert main([flag, value, "--summary", "-o", str(output)]) == 1

        assert "ERROR NON_FINITE_PARAMETER" in capsys.readouterr().err
        assert not output.exists()

    def test_warning_printed(self, capsys):
        assert main(["--teeth", "4", "--validate-only"]) == 0
        assert "WARNING CUTTERS_OVERLAP" in capsys.readouterr().out

    def test_summary(self, capsys):
        assert main(["--summary", "--validate-only"]) == 0
        assert "Spur Gear Design" in capsys.readouterr().out

    def test_design_file(self, capsys, temp_json_file):
        assert main(["--design", str(temp_json_file), "--summary", "--validate-only"]) == 0
        assert "Teeth: 24" in capsys.readouterr().out

    def test_flags_override_design(self, capsys, temp_json_file):
        assert main(["--design", str(temp_json_file), "--teeth", "30",
                     "--summary", "--validate-only"]) == 0
        assert "Teeth: 30" in capsys.readouterr().out

    def test_missing_design_file(self, capsys, tmp_path):
        assert main(["--design", str(tmp_path / "missing.json")]) == 1
        assert "Error loading design" in capsys.readouterr().err


@pytest.mark.slow
class TestCliGenerate:
    """End-to-end generation through main()."""

    def test_writes_default_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        assert main([]) == 0

        text = (tmp_path / "gear.stl").read_text()
        assert text.startswith("solid gear\n")
        assert "Saved:" in capsys.readouterr().out

    def test_custom_output_and_name(self, tmp_path):
        output = tmp_path / "pinion.stl"
        assert main(["--teeth", "8", "-o", str(output), "--solid-name", "pinion"]) == 0
        assert output.read_text().startswith("solid pinion\n")

    def test_no_save(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["--no-save"]) == 0
        assert not (tmp_path / "gear.stl").exists()

    def test_design_outputs(self, tmp_path):
        json_path = tmp_path / "design.json"
        md_path = tmp_path / "design.md"
        assert main(["--no-save", "--save-json", str(json_path),
                     "--markdown", str(md_path)]) == 0

        data = json.loads(json_path.read_text())
        assert data["parameters"]["teeth"] == 12
        assert data["dimensions"]["outer_diameter_mm"] == pytest.approx(14.0)
        assert md_path.read_text().startswith("# Spur Gear Design Specification")

    def test_timeout_reported(self, tmp_path, capsys):
        assert main(["--no-save", "--timeout", "0"]) == 1
        assert "timed out" in capsys.readouterr().err
