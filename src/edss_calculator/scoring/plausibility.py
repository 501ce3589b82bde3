"""Advisory cross-checks between findings, FS grades and the final EDSS.

Warnings never change a score; they point the examiner at combinations that
are unusual enough to deserve a second look.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .findings import AssistanceLevel, ExaminationFindings, FSDomain, FSVector, Severity


class WarningSeverity(str, Enum):
    WARNING = "warning"
    INFO = "info"


class WarningCategory(str, Enum):
    FS_MISMATCH = "fs-mismatch"
    UNUSUAL_COMBINATION = "unusual-combination"
    DISCORDANCE = "discordance"
    SUGGESTION = "suggestion"


@dataclass(frozen=True)
class PlausibilityWarning:
    """One advisory message."""

    severity: WarningSeverity
    category: WarningCategory
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
        }


MESSAGES: dict[str, str] = {
    "pyramidal_zero": "Pyramidal FS is 0 but weakness or upper motor neuron signs are documented.",
    "pyramidal_high": "Pyramidal FS is 5 or higher but no weakness is documented.",
    "pyramidal_six": "Pyramidal FS is 6 (tetraplegia) but not all muscle strength values are 0.",
    "cerebellar_zero": "Cerebellar FS is 0 but cerebellar findings are documented.",
    "cerebellar_high": (
        "Cerebellar FS is 4 or higher without ataxia in 3-4 limbs, need for assistance "
        "or inability to perform coordinated movements."
    ),
    "sensory_zero": "Sensory FS is 0 but sensory deficits are documented.",
    "sensory_high": "Sensory FS is 5 or higher but no modality is documented as absent.",
    "bowel_bladder_zero": "Bowel/Bladder FS is 0 but bowel or bladder symptoms are documented.",
    "mental_zero": "Mental FS is 0 but fatigue or cognitive findings are documented.",
    "brainstem_zero": "Brainstem FS is 0 but brainstem findings are documented.",
    "visual_zero": "Visual FS is 0 but reduced acuity or a visual field deficit is documented.",
    "ambulation_unusual": "Walking aid or wheelchair documented while Pyramidal and Cerebellar FS are both 0.",
    "walks_but_severe": "Walks 500 m or more unaided while Pyramidal or Cerebellar FS is 5 or higher.",
    "edss_low_fs_high": "EDSS {edss} is below 4.0 although the highest FS grade is {max_fs}.",
    "edss_high_fs_low": "EDSS {edss} is 6.0 or higher although no FS grade exceeds 2.",
    "document_distance": "Document the maximum unaided walking distance to confirm the EDSS.",
}


def _warning(key: str, **fmt: Any) -> PlausibilityWarning:
    return PlausibilityWarning(WarningSeverity.WARNING, _CATEGORY[key], MESSAGES[key].format(**fmt))


def _info(key: str, **fmt: Any) -> PlausibilityWarning:
    return PlausibilityWarning(WarningSeverity.INFO, _CATEGORY[key], MESSAGES[key].format(**fmt))


_CATEGORY: dict[str, WarningCategory] = {
    **{
        key: WarningCategory.FS_MISMATCH
        for key in (
            "pyramidal_zero",
            "pyramidal_high",
            "pyramidal_six",
            "cerebellar_zero",
            "cerebellar_high",
            "sensory_zero",
            "sensory_high",
            "bowel_bladder_zero",
            "mental_zero",
            "brainstem_zero",
            "visual_zero",
        )
    },
    "ambulation_unusual": WarningCategory.UNUSUAL_COMBINATION,
    "walks_but_severe": WarningCategory.UNUSUAL_COMBINATION,
    "edss_low_fs_high": WarningCategory.DISCORDANCE,
    "edss_high_fs_low": WarningCategory.DISCORDANCE,
    "document_distance": WarningCategory.SUGGESTION,
}


def _fs_mismatches(findings: ExaminationFindings, fs: FSVector) -> list[PlausibilityWarning]:
    warnings: list[PlausibilityWarning] = []

    pyramidal = findings.pyramidal
    min_mrc = pyramidal.min_strength
    has_weakness = min_mrc < 5
    has_signs = pyramidal.has_umn_signs or pyramidal.spastic_gait or pyramidal.fatigability
    if fs[FSDomain.PYRAMIDAL] == 0 and (has_weakness or has_signs):
        warnings.append(_warning("pyramidal_zero"))
    if fs[FSDomain.PYRAMIDAL] >= 5 and not has_weakness:
        warnings.append(_warning("pyramidal_high"))
    if fs[FSDomain.PYRAMIDAL] == 6 and min_mrc > 0:
        warnings.append(_warning("pyramidal_six"))

    cerebellar = findings.cerebellar
    if fs[FSDomain.CEREBELLAR] == 0 and cerebellar.has_findings:
        warnings.append(_warning("cerebellar_zero"))
    if fs[FSDomain.CEREBELLAR] >= 4 and not (
        cerebellar.needs_assistance_due_ataxia
        or cerebellar.ataxia_three_or_four_limbs
        or cerebellar.ataxia_limb_count >= 3
        or cerebellar.inability_coordinated_movements
    ):
        warnings.append(_warning("cerebellar_high"))

    severities = [m.severity for m in findings.sensory.modalities]
    if fs[FSDomain.SENSORY] == 0 and any(s is not Severity.NORMAL for s in severities):
        warnings.append(_warning("sensory_zero"))
    if fs[FSDomain.SENSORY] >= 5 and all(s is not Severity.ABSENT for s in severities):
        warnings.append(_warning("sensory_high"))

    if fs[FSDomain.BOWEL_BLADDER] == 0 and findings.bowel_bladder.has_findings:
        warnings.append(_warning("bowel_bladder_zero"))

    if fs[FSDomain.MENTAL] == 0 and findings.mental.has_findings:
        warnings.append(_warning("mental_zero"))

    if fs[FSDomain.BRAINSTEM] == 0 and findings.brainstem.max_level > 0:
        warnings.append(_warning("brainstem_zero"))

    if fs[FSDomain.VISUAL] == 0 and not findings.visual.is_normal:
        warnings.append(_warning("visual_zero"))

    return warnings


def check_plausibility(
    findings: ExaminationFindings,
    fs: FSVector,
    edss: float,
    assistance: AssistanceLevel | str = AssistanceLevel.NONE,
    distance: int | None = None,
) -> list[PlausibilityWarning]:
    """
    Cross-check raw findings, FS grades and the final EDSS.

    Args:
        findings: Examination findings the grades were derived from
        fs: FS grades as recorded (may include manual overrides)
        edss: Final EDSS
        assistance: Assistance level
        distance: Unaided walking distance in metres, if documented

    Returns:
        Warnings in rule order; empty when nothing stands out
    """
    assistance = AssistanceLevel(assistance)
    warnings = _fs_mismatches(findings, fs)

    pyramidal, cerebellar = fs[FSDomain.PYRAMIDAL], fs[FSDomain.CEREBELLAR]
    if assistance is not AssistanceLevel.NONE and pyramidal == 0 and cerebellar == 0:
        warnings.append(_warning("ambulation_unusual"))
    if (
        assistance is AssistanceLevel.NONE
        and distance is not None
        and distance >= 500
        and (pyramidal >= 5 or cerebellar >= 5)
    ):
        warnings.append(_warning("walks_but_severe"))

    max_fs = fs.max_grade
    if edss < 4.0 and max_fs >= 5:
        warnings.append(_info("edss_low_fs_high", edss=f"{edss:.1f}", max_fs=max_fs))
    if edss >= 6.0 and max_fs <= 2:
        warnings.append(_info("edss_high_fs_low", edss=f"{edss:.1f}"))

    if assistance is AssistanceLevel.NONE and distance is None and edss < 4.5:
        warnings.append(_info("document_distance"))

    return warnings
