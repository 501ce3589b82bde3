"""Examination data entry: form parsing and scale definitions."""

from .forms import Case, FormError, case_from_dict, dump_case, findings_from_dict, load_case
from .scales import (
    ASSISTANCE_LABELS,
    FS_LABELS,
    ClinicalScale,
    ScaleItem,
    ScaleType,
    format_scale,
    get_scale,
    grade_description,
    list_scales,
)

__all__ = [
    "ASSISTANCE_LABELS",
    "Case",
    "ClinicalScale",
    "FS_LABELS",
    "FormError",
    "ScaleItem",
    "ScaleType",
    "case_from_dict",
    "dump_case",
    "findings_from_dict",
    "format_scale",
    "get_scale",
    "grade_description",
    "list_scales",
    "load_case",
]
