"""Full EDSS assessment with every intermediate result kept for tracing."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .correction import correct_fs
from .edss import DEFAULT_EDSS, LOW_EDSS_FALLBACK, EDSSResult, ambulation_edss, final_edss, low_edss
from .findings import AssistanceLevel, ExaminationFindings, FSDomain, FSVector
from .functional_systems import explain_domain, recompute
from .plausibility import PlausibilityWarning, check_plausibility

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Assessment:
    """Result of one recomputation."""

    findings: ExaminationFindings
    assistance: AssistanceLevel
    distance: int | None
    suggested_fs: FSVector
    raw_fs: FSVector
    corrected_fs: FSVector
    low_edss: EDSSResult | None
    ambulation_edss: EDSSResult | None
    result: EDSSResult
    warnings: list[PlausibilityWarning] = field(default_factory=list)
    fs_rules: dict[FSDomain, str] = field(default_factory=dict)

    @property
    def edss(self) -> float:
        return self.result.edss

    @property
    def overridden(self) -> list[FSDomain]:
        """Domains whose grade differs from the scorer's suggestion."""
        return [d for d in FSDomain if self.raw_fs[d] != self.suggested_fs[d]]

    def to_dict(self) -> dict[str, Any]:
        return {
            "edss": self.edss,
            "rationale": self.result.rationale,
            "guard_applied": self.result.guard_applied,
            "assistance": self.assistance.value,
            "distance": self.distance,
            "raw_fs": self.raw_fs.to_dict(),
            "corrected_fs": self.corrected_fs.to_dict(),
            "low_edss": self.low_edss.to_dict() if self.low_edss else None,
            "ambulation_edss": self.ambulation_edss.to_dict() if self.ambulation_edss else None,
            "result": self.result.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
            "fs_rules": {d.value: rule for d, rule in self.fs_rules.items()},
        }


def apply_overrides(vector: FSVector, overrides: Mapping[FSDomain | str, int] | None) -> FSVector:
    """Replace suggested grades with examiner-entered ones, clamped to range."""
    if not overrides:
        return vector
    grades = dict(vector)
    for key, grade in overrides.items():
        domain = FSDomain(key)
        grades[domain] = max(0, min(int(grade), domain.max_grade))
    return FSVector(grades)


def _fs_rules(findings: ExaminationFindings, suggested: FSVector, raw: FSVector) -> dict[FSDomain, str]:
    rules: dict[FSDomain, str] = {}
    for domain in FSDomain:
        if raw[domain] != suggested[domain]:
            rules[domain] = f"manual override (suggested {suggested[domain]})"
        else:
            rules[domain] = explain_domain(domain, findings.for_domain(domain))
    return rules


def assess(
    findings: ExaminationFindings,
    assistance: AssistanceLevel | str = AssistanceLevel.NONE,
    distance: int | None = None,
    overrides: Mapping[FSDomain | str, int] | None = None,
    *,
    fallback: float = LOW_EDSS_FALLBACK,
    default: float = DEFAULT_EDSS,
) -> Assessment:
    """
    Score an examination from findings to final EDSS.

    Args:
        findings: Domain findings (already range-clamped)
        assistance: Assistance level
        distance: Unaided walking distance in metres
        overrides: Optional manual FS grades by domain code
        fallback: Low-EDSS fallback for unmatched patterns
        default: EDSS used when neither path yields a value

    Returns:
        Assessment with raw and corrected FS, both candidates, the final
        result and plausibility warnings
    """
    assistance = AssistanceLevel(assistance)
    suggested = recompute(findings)
    raw = apply_overrides(suggested, overrides)
    corrected = correct_fs(raw)

    low = low_edss(corrected, fallback=fallback)
    ambulation = ambulation_edss(assistance, distance)
    result = final_edss(corrected, assistance, distance, fallback=fallback, default=default)
    warnings = check_plausibility(findings, raw, result.edss, assistance, distance)

    logger.debug("EDSS %s from %s (%d warnings)", result, corrected, len(warnings))

    return Assessment(
        findings=findings,
        assistance=assistance,
        distance=distance,
        suggested_fs=suggested,
        raw_fs=raw,
        corrected_fs=corrected,
        low_edss=low,
        ambulation_edss=ambulation,
        result=result,
        warnings=warnings,
        fs_rules=_fs_rules(findings, suggested, raw),
    )
