"""Tests for the command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from edss_calculator.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def default_settings(temp_dir: Path):
    """Start and finish every test with default settings."""
    from edss_calculator.core.config import reload_settings

    reload_settings(temp_dir / "missing.yaml")
    yield
    reload_settings(temp_dir / "missing.yaml")


class TestScore:
    """Tests for the score command."""

    def test_score_table(self, case_file: Path):
        """Test the default table view."""
        result = runner.invoke(app, ["score", str(case_file)])
        assert result.exit_code == 0
        assert "EDSS 2.0" in result.stdout

    def test_score_summary(self, case_file: Path):
        """Test the quick summary."""
        result = runner.invoke(app, ["score", str(case_file), "--summary"])
        assert result.exit_code == 0
        assert result.stdout.splitlines()[:2] == ["EDSS 2.0", "Ambulation 2.0 (unaided 600 m)"]

    def test_score_narrative(self, case_file: Path):
        """Test the examination narrative."""
        result = runner.invoke(app, ["score", str(case_file), "--narrative"])
        assert result.exit_code == 0
        assert "Walks 600 m without aid or rest." in result.stdout

    def test_score_json(self, case_file: Path):
        """Test JSON output."""
        result = runner.invoke(app, ["score", str(case_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["name"] == "relapse-follow-up"
        assert data["edss"] == 2.0
        assert data["raw_fs"] == {"V": 1, "BS": 0, "P": 2, "C": 0, "S": 1, "BB": 0, "M": 1}

    def test_score_report(self, case_file: Path, temp_dir: Path):
        """Test writing a Markdown report."""
        output = temp_dir / "reports" / "case.md"
        result = runner.invoke(app, ["score", str(case_file), "--report", str(output)])
        assert result.exit_code == 0
        assert output.read_text().startswith("# EDSS Assessment: relapse-follow-up")

    def test_score_save(self, case_file: Path, temp_dir: Path):
        """Reports go to the configured output directory."""
        config = temp_dir / "settings.yaml"
        config.write_text(f"report:\n  output_dir: {temp_dir / 'out'}\n")

        result = runner.invoke(app, ["--config", str(config), "score", str(case_file), "--save"])
        assert result.exit_code == 0
        assert (temp_dir / "out" / "relapse-follow-up.md").exists()

    def test_score_missing_file(self, temp_dir: Path):
        """Test a missing case file."""
        result = runner.invoke(app, ["score", str(temp_dir / "missing.yaml")])
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_score_invalid_case(self, temp_dir: Path):
        """Test a malformed case file."""
        path = temp_dir / "bad.yaml"
        path.write_text("assistance: crutches\n")
        result = runner.invoke(app, ["score", str(path)])
        assert result.exit_code == 1
        assert "crutches" in result.stdout

    @pytest.mark.parametrize(
        "content",
        ["findings: [unclosed\n", "findings:\n  - pyramidal\n", "overrides: [P, 3]\n", "distance: .inf\n"],
    )
    def test_score_unreadable_case(self, temp_dir: Path, content: str):
        """Syntax and shape errors end with a message, not a traceback."""
        path = temp_dir / "bad.yaml"
        path.write_text(content)
        result = runner.invoke(app, ["score", str(path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "expected" in result.stdout

    def test_score_with_config(self, temp_dir: Path):
        """The distance bound comes from the settings file."""
        config = temp_dir / "settings.yaml"
        config.write_text("scoring:\n  max_distance: 250\n")
        case = temp_dir / "far.yaml"
        case.write_text("distance: 1000\n")

        result = runner.invoke(app, ["--config", str(config), "score", str(case), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["distance"] == 250
        assert data["edss"] == 5.0


class TestOtherCommands:
    """Tests for new, scales and config commands."""

    def test_new_case(self, temp_dir: Path):
        """Test writing a blank case."""
        from edss_calculator.collection.forms import load_case

        path = temp_dir / "visit.yaml"
        result = runner.invoke(app, ["new", str(path)])
        assert result.exit_code == 0
        assert load_case(path).name == "visit"

        result = runner.invoke(app, ["new", str(path)])
        assert result.exit_code == 1

    def test_scales_list(self):
        """Test scale listing."""
        result = runner.invoke(app, ["scales"])
        assert result.exit_code == 0
        assert "AMB" in result.stdout

    def test_scales_show(self):
        """Test showing one scale."""
        result = runner.invoke(app, ["scales", "fs"])
        assert result.exit_code == 0
        assert "Kurtzke Functional Systems" in result.stdout

    def test_scales_unknown(self):
        """Test an unknown scale."""
        result = runner.invoke(app, ["scales", "updrs"])
        assert result.exit_code == 1

    def test_config_init_and_show(self, temp_dir: Path):
        """Test creating a settings file."""
        from edss_calculator.core.config import Settings

        path = temp_dir / "config" / "settings.yaml"
        result = runner.invoke(app, ["config", "init", "--path", str(path)])
        assert result.exit_code == 0
        assert Settings.from_yaml(path) == Settings()

        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "low_edss_fallback: 4.0" in result.stdout
