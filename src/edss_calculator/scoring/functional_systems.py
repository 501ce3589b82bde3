"""Functional system scorers.

Each scorer turns one domain finding record into an FS grade. Scorers are
rule tables evaluated top to bottom (first match wins) with a default of 0,
so every rule can be inspected and tested on its own.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .findings import (
    BowelBladderFindings,
    BrainstemFindings,
    CerebellarFindings,
    ExaminationFindings,
    FINDINGS_TYPES,
    FSDomain,
    FSVector,
    MentalFindings,
    Nystagmus,
    PyramidalFindings,
    SensoryFindings,
    SensoryModality,
    VisualFieldDeficit,
    VisualFindings,
)
from .rules import Rule, RuleTable

logger = logging.getLogger(__name__)


# ============================================================================
# Visual
# ============================================================================

VISUAL_RULES: RuleTable[VisualFindings, int] = RuleTable(
    "visual",
    [
        Rule(lambda f: f.best_eye < 0.33, 6, "best eye < 0.33"),
        Rule(lambda f: f.worst_eye < 0.1 and f.best_eye > 0.33, 5, "worst eye < 0.1, best eye > 0.33"),
        Rule(
            lambda f: (0.1 <= f.worst_eye <= 0.2 and f.best_eye > 0.33)
            or f.visual_field_deficit is VisualFieldDeficit.MARKED,
            4,
            "worst eye 0.1-0.2 or marked field deficit",
        ),
        Rule(
            lambda f: 0.21 <= f.worst_eye <= 0.33 or f.visual_field_deficit is VisualFieldDeficit.MODERATE,
            3,
            "worst eye 0.21-0.33 or moderate field deficit",
        ),
        Rule(lambda f: 0.34 <= f.worst_eye <= 0.67, 2, "worst eye 0.34-0.67"),
        Rule(
            lambda f: 0.67 < f.worst_eye < 1.0 or f.visual_field_deficit is VisualFieldDeficit.MILD,
            1,
            "worst eye 0.68-0.99 or mild field deficit",
        ),
    ],
    default=0,
)


def score_visual(findings: VisualFindings) -> int:
    return VISUAL_RULES.evaluate(findings)


# ============================================================================
# Brainstem
# ============================================================================

BRAINSTEM_RULES: RuleTable[BrainstemFindings, int] = RuleTable(
    "brainstem",
    [
        Rule(lambda f: f.dysphagia == 4 or f.dysarthria == 4, 5, "unable to swallow or speak"),
        Rule(lambda f: f.dysarthria >= 3 or f.max_level == 4, 4, "marked dysarthria or other marked deficit"),
        Rule(
            lambda f: f.nystagmus is Nystagmus.SPONTANEOUS or f.eye_motility == 3 or f.max_level == 3,
            3,
            "spontaneous nystagmus, marked eye motility paresis or moderate deficit",
        ),
        Rule(lambda f: f.nystagmus is Nystagmus.CLEAR or f.max_level == 2, 2, "clear nystagmus or mild deficit"),
        Rule(lambda f: f.max_level == 1, 1, "signs only"),
    ],
    default=0,
)


def score_brainstem(findings: BrainstemFindings) -> int:
    return BRAINSTEM_RULES.evaluate(findings)


# ============================================================================
# Pyramidal
# ============================================================================


@dataclass(frozen=True)
class PyramidalProfile:
    """Strength distribution and UMN signs the pyramidal rules read."""

    strengths: tuple[int, ...]
    leg_core: tuple[int, ...]
    umn_signs: bool
    spastic_gait: bool
    fatigability: bool

    @classmethod
    def from_findings(cls, findings: PyramidalFindings) -> PyramidalProfile:
        return cls(
            strengths=tuple(findings.strengths),
            leg_core=tuple(findings.leg_core),
            umn_signs=findings.has_umn_signs,
            spastic_gait=findings.spastic_gait,
            fatigability=findings.fatigability,
        )

    @property
    def min_strength(self) -> int:
        return min(self.strengths)

    def count_eq(self, grade: int) -> int:
        return sum(1 for value in self.strengths if value == grade)

    def count_le(self, grade: int) -> int:
        return sum(1 for value in self.strengths if value <= grade)

    @property
    def legs_paralysed(self) -> int:
        return sum(1 for value in self.leg_core if value <= 1)


# Most severe grade first, so tetraplegia is never shadowed by the
# broader paresis rules.
PYRAMIDAL_RULES: RuleTable[PyramidalProfile, int] = RuleTable(
    "pyramidal",
    [
        Rule(lambda p: all(v <= 1 for v in p.strengths), 6, "tetraplegia (all <= 1)"),
        Rule(lambda p: p.legs_paralysed >= 2, 5, "paraplegia (>= 2 leg movements <= 1)"),
        Rule(lambda p: p.count_le(2) >= 3, 5, "marked tetraparesis (>= 3 values <= 2)"),
        Rule(lambda p: p.count_le(2) >= 2 or p.min_strength <= 1, 4, "marked paresis or monoplegia"),
        Rule(lambda p: p.count_eq(3) >= 3, 4, "moderate tetraparesis (>= 3 values = 3)"),
        Rule(lambda p: 1 <= p.count_eq(3) <= 2, 3, "mild to moderate paresis (1-2 values = 3)"),
        Rule(lambda p: p.min_strength == 4 and p.count_eq(4) > 2, 3, "> 2 values = 4"),
        Rule(lambda p: p.count_eq(2) == 1, 3, "single value = 2"),
        Rule(lambda p: p.spastic_gait and p.min_strength >= 4, 2, "spastic gait"),
        Rule(lambda p: p.min_strength == 4 and p.count_eq(4) <= 2, 2, "minimal weakness (<= 2 values = 4)"),
        Rule(lambda p: p.fatigability and p.min_strength >= 4, 2, "fatigability"),
        Rule(
            lambda p: p.min_strength == 5 and p.umn_signs and not p.spastic_gait and not p.fatigability,
            1,
            "UMN signs only",
        ),
    ],
    default=0,
)


def score_pyramidal(findings: PyramidalFindings) -> int:
    return PYRAMIDAL_RULES.evaluate(PyramidalProfile.from_findings(findings))


# ============================================================================
# Cerebellar
# ============================================================================

CEREBELLAR_RULES: RuleTable[CerebellarFindings, int] = RuleTable(
    "cerebellar",
    [
        Rule(lambda f: f.inability_coordinated_movements, 5, "unable to perform coordinated movements"),
        Rule(
            lambda f: f.ataxia_three_or_four_limbs or f.ataxia_limb_count >= 3,
            4,
            "ataxia in 3-4 limbs",
        ),
        Rule(lambda f: f.needs_assistance_due_ataxia, 4, "needs assistance due to ataxia"),
        Rule(
            lambda f: f.limb_ataxia_affects_function or f.gait_ataxia or f.truncal_ataxia,
            3,
            "limb, gait or truncal ataxia",
        ),
        Rule(
            lambda f: f.ataxia_limb_count > 0 or f.romberg_fall_tendency or f.line_walk_difficulty,
            2,
            "objective signs on testing",
        ),
        Rule(lambda f: f.mild_signs_only, 1, "mild signs without functional impact"),
    ],
    default=0,
)


def score_cerebellar(findings: CerebellarFindings) -> int:
    return CEREBELLAR_RULES.evaluate(findings)


# ============================================================================
# Sensory
# ============================================================================

# Severity ranks: mild=1, moderate=2, marked=3, absent=4. Every sub-table is
# only consulted for an affected modality (rank > 0 and limbs > 0).
VIBRATION_RULES: RuleTable[SensoryModality, int] = RuleTable(
    "vibration",
    [
        Rule(lambda m: m.rank == 4 and m.limbs >= 3, 5, "absent, 3-4 limbs"),
        Rule(lambda m: m.rank == 3 and m.limbs >= 3, 4, "marked, 3-4 limbs"),
        Rule(lambda m: m.rank == 4 and m.limbs <= 2, 3, "absent, 1-2 limbs"),
        Rule(lambda m: m.rank == 2 and m.limbs >= 3, 3, "moderate, 3-4 limbs"),
        Rule(lambda m: m.rank == 2 and m.limbs <= 2, 2, "moderate, 1-2 limbs"),
        Rule(lambda m: m.rank == 1 and m.limbs >= 3, 2, "mild, 3-4 limbs"),
        Rule(lambda m: m.rank == 1 and m.limbs <= 2, 1, "mild, 1-2 limbs"),
    ],
    default=0,
)

PAIN_TOUCH_RULES: RuleTable[SensoryModality, int] = RuleTable(
    "pain/touch",
    [
        Rule(lambda m: m.rank == 4 and m.limbs <= 2, 5, "absent, 1-2 limbs"),
        Rule(lambda m: m.rank == 3 and m.limbs >= 3, 5, "marked, 3-4 limbs"),
        Rule(lambda m: m.rank == 3 and m.limbs <= 2, 4, "marked, 1-2 limbs"),
        Rule(lambda m: m.rank == 2 and m.limbs >= 3, 4, "moderate, 3-4 limbs"),
        Rule(lambda m: m.rank == 2 and m.limbs <= 2, 3, "moderate, 1-2 limbs"),
        Rule(lambda m: m.rank == 1 and m.limbs >= 3, 3, "mild, 3-4 limbs"),
        Rule(lambda m: m.rank == 1 and m.limbs <= 2, 2, "mild, 1-2 limbs"),
    ],
    default=0,
)

JOINT_POSITION_RULES: RuleTable[SensoryModality, int] = RuleTable(
    "joint position",
    [
        Rule(lambda m: m.rank == 4 and m.limbs >= 2, 5, "absent, >= 2 limbs"),
        Rule(lambda m: m.rank == 3 and m.limbs >= 3, 4, "marked, 3-4 limbs"),
        Rule(lambda m: m.rank == 2 and m.limbs <= 2, 3, "moderate, 1-2 limbs"),
        Rule(lambda m: m.rank == 1 and m.limbs >= 3, 3, "mild, 3-4 limbs"),
        Rule(lambda m: m.rank == 1 and m.limbs <= 2, 2, "mild, 1-2 limbs"),
    ],
    default=0,
)


def _modality_score(table: RuleTable[SensoryModality, int], modality: SensoryModality) -> int:
    if not modality.affected:
        return 0
    return table.evaluate(modality)


def score_sensory(findings: SensoryFindings) -> int:
    modalities = findings.modalities
    if not any(m.affected for m in modalities):
        return 0

    if all(m.rank == 4 and m.limbs > 0 for m in modalities):
        return 6

    score = max(
        _modality_score(VIBRATION_RULES, findings.vibration),
        _modality_score(PAIN_TOUCH_RULES, findings.pain_touch),
        _modality_score(JOINT_POSITION_RULES, findings.joint_position),
    )

    if findings.joint_position.affected:
        score = max(score, 2)
    if any(m.affected and m.limbs >= 3 for m in modalities):
        score = max(score, 2)

    return score


SENSORY_TABLES: tuple[RuleTable[SensoryModality, int], ...] = (
    VIBRATION_RULES,
    PAIN_TOUCH_RULES,
    JOINT_POSITION_RULES,
)


def explain_sensory(findings: SensoryFindings) -> str:
    """Name the modality row and any floor that set the sensory grade."""
    if not any(m.affected for m in findings.modalities):
        return "sensory: no affected modality"

    grade = score_sensory(findings)
    if grade == 6:
        return "sensory: all modalities absent"

    scored = [
        (_modality_score(table, modality), table, modality)
        for table, modality in zip(SENSORY_TABLES, findings.modalities)
    ]
    best, table, modality = max(scored, key=lambda s: s[0])
    detail = table.explain(modality) if best > 0 else "no modality row matched"

    if grade > best:
        floor = "joint position affected" if findings.joint_position.affected else "3-4 limbs affected"
        return f"sensory: {detail}; floor {grade} ({floor})"
    return f"sensory: {detail}"


# ============================================================================
# Bowel/Bladder
# ============================================================================

BOWEL_BLADDER_RULES: RuleTable[BowelBladderFindings, int] = RuleTable(
    "bowel/bladder",
    [
        Rule(lambda f: f.loss_bladder_function and f.loss_bowel_function, 6, "loss of bladder and bowel function"),
        Rule(
            lambda f: f.loss_bladder_function or f.loss_bowel_function or f.permanent_catheter,
            5,
            "loss of bladder or bowel function, or permanent catheter",
        ),
        Rule(lambda f: f.bowel_incontinence_weekly, 4, "weekly bowel incontinence"),
        Rule(
            lambda f: f.frequent_incontinence or f.intermittent_catheterization or f.needs_help_for_bowel_movement,
            3,
            "frequent incontinence, intermittent catheterization or help for bowel movement",
        ),
        Rule(
            lambda f: f.moderate_urge or f.moderate_constipation or f.rare_incontinence or f.severe_constipation,
            2,
            "moderate urge, constipation or rare incontinence",
        ),
        Rule(lambda f: f.mild_urge or f.mild_constipation, 1, "mild urge or constipation"),
    ],
    default=0,
)


def score_bowel_bladder(findings: BowelBladderFindings) -> int:
    return BOWEL_BLADDER_RULES.evaluate(findings)


# ============================================================================
# Mental
# ============================================================================

MENTAL_RULES: RuleTable[MentalFindings, int] = RuleTable(
    "mental",
    [
        Rule(lambda f: f.pronounced_dementia, 5, "pronounced dementia"),
        Rule(lambda f: f.markedly_reduced_cognition, 4, "markedly reduced cognition"),
        Rule(lambda f: f.moderately_reduced_cognition, 3, "moderately reduced cognition"),
        Rule(
            lambda f: f.moderate_to_severe_fatigue or f.lightly_reduced_cognition,
            2,
            "moderate to severe fatigue or lightly reduced cognition",
        ),
        Rule(lambda f: f.mild_fatigue, 1, "mild fatigue"),
    ],
    default=0,
)


def score_mental(findings: MentalFindings) -> int:
    return MENTAL_RULES.evaluate(findings)


# ============================================================================
# Dispatch
# ============================================================================

SCORERS: dict[FSDomain, Callable[..., int]] = {
    FSDomain.VISUAL: score_visual,
    FSDomain.BRAINSTEM: score_brainstem,
    FSDomain.PYRAMIDAL: score_pyramidal,
    FSDomain.CEREBELLAR: score_cerebellar,
    FSDomain.SENSORY: score_sensory,
    FSDomain.BOWEL_BLADDER: score_bowel_bladder,
    FSDomain.MENTAL: score_mental,
}


def score_domain(domain: FSDomain | str, findings) -> int:
    """
    Score one functional system.

    Args:
        domain: Domain member or code ("V", "BS", "P", "C", "S", "BB", "M")
        findings: Finding record matching the domain

    Returns:
        FS grade in the domain's range

    Raises:
        ValueError: Unknown domain code
        TypeError: Record type does not belong to the domain
    """
    domain = FSDomain(domain)
    expected = FINDINGS_TYPES[domain]
    if not isinstance(findings, expected):
        raise TypeError(f"{domain.value} expects {expected.__name__}, got {type(findings).__name__}")
    return SCORERS[domain](findings)


def recompute(findings: ExaminationFindings) -> FSVector:
    """Score all seven functional systems from a complete examination."""
    vector = FSVector({domain: SCORERS[domain](findings.for_domain(domain)) for domain in FSDomain})
    logger.debug("Raw FS %s", vector)
    return vector


def explain_domain(domain: FSDomain | str, findings) -> str:
    """Name the rule that decided a domain grade."""
    domain = FSDomain(domain)
    if domain is FSDomain.PYRAMIDAL:
        return PYRAMIDAL_RULES.explain(PyramidalProfile.from_findings(findings))
    if domain is FSDomain.SENSORY:
        return explain_sensory(findings)
    table = {
        FSDomain.VISUAL: VISUAL_RULES,
        FSDomain.BRAINSTEM: BRAINSTEM_RULES,
        FSDomain.CEREBELLAR: CEREBELLAR_RULES,
        FSDomain.BOWEL_BLADDER: BOWEL_BLADDER_RULES,
        FSDomain.MENTAL: MENTAL_RULES,
    }[domain]
    return table.explain(findings)
