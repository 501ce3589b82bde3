"""Core infrastructure modules."""

from .config import ReportConfig, ScoringConfig, Settings, get_settings, reload_settings

__all__ = [
    "ReportConfig",
    "ScoringConfig",
    "Settings",
    "get_settings",
    "reload_settings",
]
