"""Configuration management with dataclasses and YAML loading."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class ScoringConfig:
    """EDSS engine parameters."""

    low_edss_fallback: float = 4.0  # unmatched FS pattern with max FS <= 3
    default_edss: float = 4.0  # neither path yields a value
    max_distance: int = 2000  # metres


@dataclass
class ReportConfig:
    """Summary and narrative output options."""

    include_corrected: bool = True
    include_warnings: bool = True
    date_format: str = "%Y-%m-%d"
    output_dir: Path = field(default_factory=lambda: Path("reports"))

    def __post_init__(self) -> None:
        """Convert string paths to Path objects."""
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)


@dataclass
class Settings:
    """Main application settings."""

    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from dictionary."""
        return cls(
            scoring=ScoringConfig(**data.get("scoring", {})),
            report=ReportConfig(**data.get("report", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""
        result = asdict(self)
        # Convert Path objects to strings
        for key, val in result.get("report", {}).items():
            if isinstance(val, Path):
                result["report"][key] = str(val)
        return result

    def ensure_directories(self) -> None:
        """Create the report output directory if it doesn't exist."""
        self.report.output_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
_settings: Settings | None = None


def get_settings(config_path: str | Path | None = None) -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        if config_path is None:
            # Default config paths to check
            for candidate in [
                Path("config/settings.yaml"),
                Path.home() / ".config/edss-calculator/settings.yaml",
            ]:
                if candidate.exists():
                    config_path = candidate
                    break

        _settings = Settings.from_yaml(config_path) if config_path else Settings()

    return _settings


def reload_settings(config_path: str | Path | None = None) -> Settings:
    """Force reload settings from file."""
    global _settings
    _settings = None
    return get_settings(config_path)
