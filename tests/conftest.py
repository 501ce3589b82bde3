"""Pytest fixtures for edss-calculator tests."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest
import yaml

from edss_calculator.core.config import ReportConfig, ScoringConfig, Settings
from edss_calculator.scoring.findings import ExaminationFindings, PyramidalFindings


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings(temp_dir: Path) -> Settings:
    """Create test settings writing reports into the temporary directory."""
    return Settings(
        scoring=ScoringConfig(),
        report=ReportConfig(output_dir=temp_dir / "reports"),
    )


@pytest.fixture
def normal_findings() -> ExaminationFindings:
    """A completely normal examination."""
    return ExaminationFindings()


@pytest.fixture
def mild_paresis_findings() -> ExaminationFindings:
    """Right hip flexion at MRC 3, everything else normal."""
    return ExaminationFindings(pyramidal=PyramidalFindings(hip_flexion_r=3))


@pytest.fixture
def sample_case_data() -> dict:
    """Case mapping as it would be loaded from YAML."""
    return {
        "name": "relapse-follow-up",
        "assistance": "none",
        "distance": 600,
        "findings": {
            "visual": {"left_eye_acuity": "0.68-0.99"},
            "pyramidal": {"hip_flexion_r": 4, "babinski_right": True},
            "sensory": {"vibration": {"severity": "mild", "count": 2}},
            "mental": {"mild_fatigue": True},
        },
    }


@pytest.fixture
def case_file(temp_dir: Path, sample_case_data: dict) -> Path:
    """Write the sample case to a YAML file."""
    path = temp_dir / "case.yaml"
    path.write_text(yaml.safe_dump(sample_case_data, sort_keys=False))
    return path
