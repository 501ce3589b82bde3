"""EDSS Calculator: Expanded Disability Status Scale scoring.

Derives functional system grades from structured neurological findings,
converts them to an EDSS step together with walking range and assistance,
and flags implausible combinations for the examiner to review.
"""

__version__ = "0.1.0"

from edss_calculator.core import Settings, get_settings
from edss_calculator.scoring import (
    Assessment,
    AssistanceLevel,
    ExaminationFindings,
    FSDomain,
    FSVector,
    assess,
    final_edss,
    recompute,
)

__all__ = [
    "Assessment",
    "AssistanceLevel",
    "ExaminationFindings",
    "FSDomain",
    "FSVector",
    "Settings",
    "__version__",
    "assess",
    "final_edss",
    "get_settings",
    "recompute",
]
