"""EDSS derivation from corrected FS grades and ambulation.

The FS path matches the corrected grade vector against the Neurostatus
pattern table (EDSS 0.0-5.0). The ambulation path maps the assistance level
and unaided walking distance onto EDSS 4.5-9.5. ``final_edss`` takes the
higher of the two and applies the floor implied by the worst corrected grade.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any

from .findings import AssistanceLevel, FSVector
from .rules import Rule, RuleTable

logger = logging.getLogger(__name__)

LOW_EDSS_FALLBACK = 4.0
DEFAULT_EDSS = 4.0
UNAIDED_DEFER_DISTANCE = 500

# Lowest EDSS compatible with the single worst corrected FS grade.
GUARD_FLOORS: dict[int, float] = {0: 0.0, 1: 1.0, 2: 2.0, 3: 3.5, 4: 4.0, 5: 5.0, 6: 6.0}


def ceil_to_half(x: float) -> float:
    return math.ceil(x * 2) / 2


def round_to_half(x: float) -> float:
    """Round to the nearest 0.5, halves rounding up."""
    return math.floor(x * 2 + 0.5) / 2


def guard_floor(max_grade: int) -> float:
    """EDSS floor for the highest corrected FS grade."""
    return GUARD_FLOORS.get(max_grade, ceil_to_half(max_grade))


@dataclass(frozen=True)
class EDSSResult:
    """An EDSS value and the rule that produced it."""

    edss: float
    rationale: str
    source: str = "fs"  # fs, ambulation or default
    guard_applied: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "edss": self.edss,
            "rationale": self.rationale,
            "source": self.source,
            "guard_applied": self.guard_applied,
        }

    def __str__(self) -> str:
        return f"{self.edss:.1f} ({self.rationale})"


# ============================================================================
# Low-EDSS matcher
# ============================================================================


def _row(predicate, edss: float, rationale: str) -> Rule[FSVector, EDSSResult]:
    return Rule(predicate, EDSSResult(edss, rationale), rationale)


# Rows overlap; order is significant.
LOW_EDSS_RULES: RuleTable[FSVector, EDSSResult | None] = RuleTable(
    "low-edss",
    [
        _row(lambda v: v.max_grade == 0, 0.0, "All FS = 0"),
        _row(lambda v: v.count(1) == 1 and v.max_grade == 1, 1.0, "Single FS = 1"),
        _row(lambda v: v.count(1) > 1 and v.max_grade == 1, 1.5, ">1 FS = 1"),
        _row(lambda v: v.count(2) == 1 and v.max_grade == 2, 2.0, "Single FS = 2"),
        _row(lambda v: v.count(2) == 2 and v.max_grade == 2, 2.5, "Two FS = 2"),
        _row(lambda v: v.count(2) == 0 and v.count(3) == 1 and v.max_grade == 3, 3.0, "Single FS = 3, no FS = 2"),
        _row(lambda v: 3 <= v.count(2) <= 4 and v.max_grade == 2, 3.0, "3-4 FS = 2"),
        _row(
            lambda v: 1 <= v.count(2) <= 2 and v.count(3) == 1 and v.max_grade == 3,
            3.5,
            "1-2 FS = 2, single FS = 3",
        ),
        _row(lambda v: v.count(2) == 0 and v.count(3) == 2 and v.max_grade == 3, 3.5, "Two FS = 3, no FS = 2"),
        _row(lambda v: v.count(2) == 5 and v.max_grade == 2, 3.5, "Five FS = 2"),
        _row(
            lambda v: v.count(2) == 0 and v.count(3) == 0 and v.count(4) == 1 and v.max_grade == 4,
            4.0,
            "Single FS = 4, no FS = 2 or 3",
        ),
        _row(
            lambda v: v.count(2) == 0 and 3 <= v.count(3) <= 4 and v.max_grade == 3,
            4.0,
            "0 FS = 2, 3-4 FS = 3",
        ),
        _row(
            lambda v: v.count(2) >= 3 and v.count(3) == 1 and v.max_grade == 3,
            4.0,
            ">=3 FS = 2, single FS = 3",
        ),
        _row(
            lambda v: v.count(2) > 0 and 2 <= v.count(3) <= 4 and v.max_grade == 3,
            4.0,
            ">0 FS = 2, 2-4 FS = 3",
        ),
        _row(lambda v: v.count(2) > 5 and v.max_grade == 2, 4.0, ">5 FS = 2"),
        _row(lambda v: v.count(3) == 5 and v.max_grade == 3, 4.5, "Five FS = 3"),
        _row(
            lambda v: 1 <= v.count(3) <= 2 and v.count(4) == 1 and v.max_grade == 4,
            4.5,
            "1-2 FS = 3, single FS = 4",
        ),
        _row(
            lambda v: v.count(2) >= 1 and v.count(4) == 1 and v.max_grade == 4,
            4.5,
            "FS = 2 present, single FS = 4",
        ),
        _row(lambda v: v.count(5) >= 1, 5.0, "FS = 5 present"),
        _row(lambda v: v.count(4) >= 2, 5.0, ">=2 FS = 4"),
        _row(lambda v: v.count(3) >= 6, 5.0, ">=6 FS = 3"),
        _row(lambda v: v.count(6) >= 1, 5.0, "FS = 6 present"),
        _row(lambda v: v.max_grade >= 4, 5.0, "FS >= 4 present"),
    ],
    default=None,
)


def low_edss(corrected: FSVector, fallback: float = LOW_EDSS_FALLBACK) -> EDSSResult | None:
    """
    Match a corrected FS vector against the low-range EDSS pattern table.

    Args:
        corrected: Corrected FS vector
        fallback: EDSS used when no pattern matches and max FS <= 3

    Returns:
        EDSS result in [0.0, 5.0], or None when nothing applies
    """
    result = LOW_EDSS_RULES.evaluate(corrected)
    if result is not None:
        return result
    if corrected.max_grade <= 3:
        return EDSSResult(fallback, "FS pattern not in table", source="default")
    return None


# ============================================================================
# Ambulation mapper
# ============================================================================

AIDED_AMBULATION: dict[AssistanceLevel, EDSSResult] = {
    AssistanceLevel.UNILATERAL_50_PLUS: EDSSResult(6.0, "Walks >=50 m with unilateral aid", "ambulation"),
    AssistanceLevel.UNILATERAL_UNDER_50: EDSSResult(6.5, "Walks <50 m with unilateral aid", "ambulation"),
    AssistanceLevel.BILATERAL_120_PLUS: EDSSResult(6.0, "Walks >=120 m with bilateral aid", "ambulation"),
    AssistanceLevel.BILATERAL_5_TO_120: EDSSResult(6.5, "Walks >=5 m but <120 m with bilateral aid", "ambulation"),
    AssistanceLevel.BILATERAL_UNDER_5: EDSSResult(7.0, "Walks <5 m with bilateral aid", "ambulation"),
    AssistanceLevel.WHEELCHAIR_SELF: EDSSResult(
        7.0, "Wheelchair; self-propels and transfers independently", "ambulation"
    ),
    AssistanceLevel.WHEELCHAIR_SOME_HELP: EDSSResult(
        7.5, "Wheelchair; needs help with transfers, self-propels", "ambulation"
    ),
    AssistanceLevel.WHEELCHAIR_DEPENDENT: EDSSResult(8.0, "Wheelchair; completely dependent", "ambulation"),
    AssistanceLevel.BED_CHAIR_ARMS_OK: EDSSResult(8.0, "Bed/chair; arms effective", "ambulation"),
    AssistanceLevel.BED_CHAIR_LIMITED_ARMS: EDSSResult(8.5, "Bed-bound; limited arm use", "ambulation"),
    AssistanceLevel.HELPLESS: EDSSResult(9.0, "Helpless bedridden", "ambulation"),
    AssistanceLevel.TOTAL_CARE: EDSSResult(9.5, "Totally helpless; total care", "ambulation"),
}

# (minimum distance in metres, result), longest distance first
UNAIDED_AMBULATION: tuple[tuple[int, EDSSResult], ...] = (
    (300, EDSSResult(4.5, "Walks 300-499 m unaided", "ambulation")),
    (200, EDSSResult(5.0, "Walks 200-299 m unaided", "ambulation")),
    (100, EDSSResult(5.5, "Walks 100-199 m unaided", "ambulation")),
    (0, EDSSResult(6.0, "Walks <100 m unaided", "ambulation")),
)


def ambulation_edss(assistance: AssistanceLevel | str, distance: int | None = None) -> EDSSResult | None:
    """
    EDSS implied by walking ability.

    Args:
        assistance: Assistance level
        distance: Unaided walking distance in metres; only read for "none"

    Returns:
        EDSS result, or None when ambulation does not determine the score
        (unaided distance >= 500 m, or no distance recorded)
    """
    assistance = AssistanceLevel(assistance)
    if assistance is not AssistanceLevel.NONE:
        return AIDED_AMBULATION[assistance]

    if distance is None or distance >= UNAIDED_DEFER_DISTANCE:
        return None

    for minimum, result in UNAIDED_AMBULATION:
        if distance >= minimum:
            return result
    return UNAIDED_AMBULATION[-1][1]


# ============================================================================
# Combiner
# ============================================================================


def final_edss(
    corrected: FSVector,
    assistance: AssistanceLevel | str = AssistanceLevel.NONE,
    distance: int | None = None,
    *,
    fallback: float = LOW_EDSS_FALLBACK,
    default: float = DEFAULT_EDSS,
) -> EDSSResult:
    """
    Combine the FS and ambulation paths into the final EDSS.

    The higher candidate is the base; the result is then raised to the floor
    implied by the highest corrected FS grade and rounded to the nearest 0.5.
    """
    assistance = AssistanceLevel(assistance)
    low = low_edss(corrected, fallback=fallback)
    fs_candidate = low or EDSSResult(default, f"Default {default:.1f}", source="default")

    ambulation = ambulation_edss(assistance, distance)
    if ambulation is not None:
        amb_candidate = ambulation
    elif low is not None:
        amb_candidate = low
    elif distance is not None and distance < UNAIDED_DEFER_DISTANCE:
        amb_candidate = EDSSResult(4.5, "Distance <500 m", source="default")
    else:
        amb_candidate = EDSSResult(default, f"Default {default:.1f}", source="default")

    base = amb_candidate if amb_candidate.edss >= fs_candidate.edss else fs_candidate

    max_fs = corrected.max_grade
    floor = guard_floor(max_fs)
    edss = round_to_half(max(base.edss, floor))
    logger.debug("EDSS base %s, guard floor %.1f (max FS=%d)", base, floor, max_fs)

    if edss > base.edss:
        return replace(
            base,
            edss=edss,
            rationale=f"{base.rationale} (raised to {edss:.1f} due to max FS={max_fs})",
            guard_applied=True,
        )
    return replace(base, edss=edss)
