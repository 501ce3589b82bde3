"""Report generation for EDSS assessments."""

from .generator import (
    ReportGenerator,
    generate_narrative,
    generate_summary,
)

__all__ = [
    "ReportGenerator",
    "generate_narrative",
    "generate_summary",
]
