"""EDSS scoring engine."""

from .assessment import Assessment, apply_overrides, assess
from .correction import convert_bowel_bladder, convert_visual, correct_fs
from .edss import (
    EDSSResult,
    ambulation_edss,
    ceil_to_half,
    final_edss,
    guard_floor,
    low_edss,
    round_to_half,
)
from .findings import (
    AssistanceLevel,
    BowelBladderFindings,
    BrainstemFindings,
    CerebellarFindings,
    ExaminationFindings,
    EyeAcuity,
    FSDomain,
    FSVector,
    MentalFindings,
    Nystagmus,
    PyramidalFindings,
    SensoryFindings,
    SensoryModality,
    Severity,
    VisualFieldDeficit,
    VisualFindings,
)
from .functional_systems import (
    recompute,
    score_bowel_bladder,
    score_brainstem,
    score_cerebellar,
    score_domain,
    score_mental,
    score_pyramidal,
    score_sensory,
    score_visual,
)
from .plausibility import PlausibilityWarning, WarningCategory, WarningSeverity, check_plausibility

__all__ = [
    "Assessment",
    "AssistanceLevel",
    "BowelBladderFindings",
    "BrainstemFindings",
    "CerebellarFindings",
    "EDSSResult",
    "ExaminationFindings",
    "EyeAcuity",
    "FSDomain",
    "FSVector",
    "MentalFindings",
    "Nystagmus",
    "PlausibilityWarning",
    "PyramidalFindings",
    "SensoryFindings",
    "SensoryModality",
    "Severity",
    "VisualFieldDeficit",
    "VisualFindings",
    "WarningCategory",
    "WarningSeverity",
    "ambulation_edss",
    "apply_overrides",
    "assess",
    "ceil_to_half",
    "check_plausibility",
    "convert_bowel_bladder",
    "convert_visual",
    "correct_fs",
    "final_edss",
    "guard_floor",
    "low_edss",
    "recompute",
    "round_to_half",
    "score_bowel_bladder",
    "score_brainstem",
    "score_cerebellar",
    "score_domain",
    "score_mental",
    "score_pyramidal",
    "score_sensory",
    "score_visual",
]
