"""Structured examination findings for the seven functional systems."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any


class FSDomain(str, Enum):
    """Functional system codes, in canonical order."""

    VISUAL = "V"
    BRAINSTEM = "BS"
    PYRAMIDAL = "P"
    CEREBELLAR = "C"
    SENSORY = "S"
    BOWEL_BLADDER = "BB"
    MENTAL = "M"

    @property
    def max_grade(self) -> int:
        return FS_MAX_GRADE[self]


FS_MAX_GRADE: dict[FSDomain, int] = {
    FSDomain.VISUAL: 6,
    FSDomain.BRAINSTEM: 5,
    FSDomain.PYRAMIDAL: 6,
    FSDomain.CEREBELLAR: 5,
    FSDomain.SENSORY: 6,
    FSDomain.BOWEL_BLADDER: 6,
    FSDomain.MENTAL: 5,
}


class EyeAcuity(str, Enum):
    """Corrected visual acuity category for one eye."""

    NORMAL = "1.0"
    NEAR_NORMAL = "0.68-0.99"
    MODERATE = "0.34-0.67"
    REDUCED = "0.21-0.33"
    POOR = "0.10-0.20"
    VERY_POOR = "lt_0.10"

    @property
    def numeric(self) -> float:
        """Midpoint surrogate used by the visual rules."""
        return _ACUITY_NUMERIC[self]

    @property
    def label(self) -> str:
        return "<0.10" if self is EyeAcuity.VERY_POOR else self.value


_ACUITY_NUMERIC: dict[EyeAcuity, float] = {
    EyeAcuity.NORMAL: 1.0,
    EyeAcuity.NEAR_NORMAL: 0.835,
    EyeAcuity.MODERATE: 0.505,
    EyeAcuity.REDUCED: 0.27,
    EyeAcuity.POOR: 0.15,
    EyeAcuity.VERY_POOR: 0.05,
}


class VisualFieldDeficit(str, Enum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    MARKED = "marked"


class Nystagmus(str, Enum):
    """Nystagmus severity."""

    NONE = "none"
    MILD = "mild"
    CLEAR = "clear"
    SPONTANEOUS = "spontaneous"

    @property
    def level(self) -> int:
        return _NYSTAGMUS_LEVEL[self]


_NYSTAGMUS_LEVEL: dict[Nystagmus, int] = {
    Nystagmus.NONE: 0,
    Nystagmus.MILD: 1,
    Nystagmus.CLEAR: 2,
    Nystagmus.SPONTANEOUS: 3,
}


class Severity(str, Enum):
    """Sensory impairment severity for one modality."""

    NORMAL = "normal"
    MILD = "mild"
    MODERATE = "moderate"
    MARKED = "marked"
    ABSENT = "absent"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.NORMAL: 0,
    Severity.MILD: 1,
    Severity.MODERATE: 2,
    Severity.MARKED: 3,
    Severity.ABSENT: 4,
}


class AssistanceLevel(str, Enum):
    """Walking independence, from unaided to total bed care."""

    NONE = "none"
    UNILATERAL_50_PLUS = "uni_50_plus"
    UNILATERAL_UNDER_50 = "uni_under_50"
    BILATERAL_120_PLUS = "bi_120_plus"
    BILATERAL_5_TO_120 = "bi_5_to_120"
    BILATERAL_UNDER_5 = "bi_under_5"
    WHEELCHAIR_SELF = "wheel_self"
    WHEELCHAIR_SOME_HELP = "wheel_some_help"
    WHEELCHAIR_DEPENDENT = "wheel_dependent"
    BED_CHAIR_ARMS_OK = "bed_chair_arms_ok"
    BED_CHAIR_LIMITED_ARMS = "bed_chair_limited_arms"
    HELPLESS = "helpless"
    TOTAL_CARE = "total_care"


# ============================================================================
# Domain finding records
# ============================================================================


@dataclass(frozen=True)
class VisualFindings:
    """Visual acuity per eye plus visual field deficit."""

    left_eye_acuity: EyeAcuity = EyeAcuity.NORMAL
    right_eye_acuity: EyeAcuity = EyeAcuity.NORMAL
    visual_field_deficit: VisualFieldDeficit = VisualFieldDeficit.NONE

    @property
    def best_eye(self) -> float:
        return max(self.left_eye_acuity.numeric, self.right_eye_acuity.numeric)

    @property
    def worst_eye(self) -> float:
        return min(self.left_eye_acuity.numeric, self.right_eye_acuity.numeric)

    @property
    def is_normal(self) -> bool:
        return (
            self.left_eye_acuity is EyeAcuity.NORMAL
            and self.right_eye_acuity is EyeAcuity.NORMAL
            and self.visual_field_deficit is VisualFieldDeficit.NONE
        )


@dataclass(frozen=True)
class BrainstemFindings:
    """Cranial nerve findings. Lateralized items are graded 0-4 per side."""

    eye_motility: int = 0  # 0-4
    nystagmus: Nystagmus = Nystagmus.NONE
    ino: bool = False
    facial_sensibility_left: int = 0
    facial_sensibility_right: int = 0
    facial_symmetry_left: int = 0
    facial_symmetry_right: int = 0
    hearing_left: int = 0
    hearing_right: int = 0
    dysarthria: int = 0  # 0-4
    dysphagia: int = 0  # 0-4

    @property
    def facial_sensibility(self) -> int:
        return max(self.facial_sensibility_left, self.facial_sensibility_right)

    @property
    def facial_symmetry(self) -> int:
        return max(self.facial_symmetry_left, self.facial_symmetry_right)

    @property
    def hearing(self) -> int:
        return max(self.hearing_left, self.hearing_right)

    @property
    def max_level(self) -> int:
        """Highest severity across all brainstem sub-findings."""
        return max(
            self.eye_motility,
            self.nystagmus.level,
            1 if self.ino else 0,
            self.facial_sensibility,
            self.facial_symmetry,
            self.hearing,
            self.dysarthria,
            self.dysphagia,
        )


# (field prefix, display name) for each tested movement; every movement is
# recorded on the right and left side.
UPPER_LIMB_MOVEMENTS: tuple[tuple[str, str], ...] = (
    ("shoulder_abduction", "shoulder abduction"),
    ("shoulder_external_rotation", "shoulder external rotation"),
    ("elbow_flexion", "elbow flexion"),
    ("elbow_extension", "elbow extension"),
    ("wrist_extension", "wrist extension"),
    ("finger_abduction", "finger abduction"),
)

LOWER_LIMB_MOVEMENTS: tuple[tuple[str, str], ...] = (
    ("hip_flexion", "hip flexion"),
    ("hip_abduction", "hip abduction"),
    ("knee_extension", "knee extension"),
    ("knee_flexion", "knee flexion"),
    ("ankle_dorsiflexion", "ankle dorsiflexion"),
    ("ankle_plantarflexion", "ankle plantarflexion"),
)

# Movements whose paralysis defines paraplegia
LEG_CORE_MOVEMENTS: tuple[str, ...] = ("hip_flexion", "knee_extension", "ankle_dorsiflexion")


@dataclass(frozen=True)
class PyramidalFindings:
    """MRC strength (0-5) for 24 movements plus upper motor neuron signs."""

    shoulder_abduction_r: int = 5
    shoulder_abduction_l: int = 5
    shoulder_external_rotation_r: int = 5
    shoulder_external_rotation_l: int = 5
    elbow_flexion_r: int = 5
    elbow_flexion_l: int = 5
    elbow_extension_r: int = 5
    elbow_extension_l: int = 5
    wrist_extension_r: int = 5
    wrist_extension_l: int = 5
    finger_abduction_r: int = 5
    finger_abduction_l: int = 5
    hip_flexion_r: int = 5
    hip_flexion_l: int = 5
    hip_abduction_r: int = 5
    hip_abduction_l: int = 5
    knee_extension_r: int = 5
    knee_extension_l: int = 5
    knee_flexion_r: int = 5
    knee_flexion_l: int = 5
    ankle_dorsiflexion_r: int = 5
    ankle_dorsiflexion_l: int = 5
    ankle_plantarflexion_r: int = 5
    ankle_plantarflexion_l: int = 5
    hyperreflexia_left: bool = False
    hyperreflexia_right: bool = False
    babinski_left: bool = False
    babinski_right: bool = False
    clonus_left: bool = False
    clonus_right: bool = False
    spastic_gait: bool = False
    fatigability: bool = False

    @classmethod
    def strength_fields(cls) -> list[str]:
        names = []
        for prefix, _ in UPPER_LIMB_MOVEMENTS + LOWER_LIMB_MOVEMENTS:
            names.extend([f"{prefix}_r", f"{prefix}_l"])
        return names

    @property
    def strengths(self) -> list[int]:
        return [getattr(self, name) for name in self.strength_fields()]

    @property
    def leg_core(self) -> list[int]:
        return [getattr(self, f"{prefix}_{side}") for prefix in LEG_CORE_MOVEMENTS for side in "rl"]

    @property
    def min_strength(self) -> int:
        return min(self.strengths)

    @property
    def has_umn_signs(self) -> bool:
        """Hyperreflexia, Babinski or clonus on either side."""
        return any(
            (
                self.hyperreflexia_left,
                self.hyperreflexia_right,
                self.babinski_left,
                self.babinski_right,
                self.clonus_left,
                self.clonus_right,
            )
        )


@dataclass(frozen=True)
class CerebellarFindings:
    """Coordination testing per limb plus functional cerebellar signs."""

    finger_nose_right_arm: bool = False
    finger_nose_left_arm: bool = False
    heel_knee_right_leg: bool = False
    heel_knee_left_leg: bool = False
    romberg_fall_tendency: bool = False
    line_walk_difficulty: bool = False
    limb_ataxia_affects_function: bool = False
    gait_ataxia: bool = False
    truncal_ataxia: bool = False
    needs_assistance_due_ataxia: bool = False
    ataxia_three_or_four_limbs: bool = False
    inability_coordinated_movements: bool = False
    mild_signs_only: bool = False

    @property
    def ataxia_limb_count(self) -> int:
        return sum(
            (
                self.finger_nose_right_arm,
                self.finger_nose_left_arm,
                self.heel_knee_right_leg,
                self.heel_knee_left_leg,
            )
        )

    @property
    def has_findings(self) -> bool:
        """Any objective cerebellar sign; mild symptoms alone do not count."""
        return any(getattr(self, f.name) for f in fields(self) if f.name != "mild_signs_only")


@dataclass(frozen=True)
class SensoryModality:
    """Severity and extent of one sensory modality."""

    severity: Severity = Severity.NORMAL
    count: int = 0  # affected limbs, 0-4
    right_arm: bool = False
    left_arm: bool = False
    right_leg: bool = False
    left_leg: bool = False

    @property
    def limbs(self) -> int:
        """Affected limbs, taking flagged limbs into account."""
        flagged = sum((self.right_arm, self.left_arm, self.right_leg, self.left_leg))
        return max(self.count, flagged)

    @property
    def rank(self) -> int:
        return self.severity.rank

    @property
    def affected(self) -> bool:
        return self.rank > 0 and self.limbs > 0


@dataclass(frozen=True)
class SensoryFindings:
    vibration: SensoryModality = field(default_factory=SensoryModality)
    pain_touch: SensoryModality = field(default_factory=SensoryModality)
    joint_position: SensoryModality = field(default_factory=SensoryModality)

    @property
    def modalities(self) -> tuple[SensoryModality, SensoryModality, SensoryModality]:
        return (self.vibration, self.pain_touch, self.joint_position)


@dataclass(frozen=True)
class BowelBladderFindings:
    mild_urge: bool = False
    moderate_urge: bool = False
    rare_incontinence: bool = False
    frequent_incontinence: bool = False
    intermittent_catheterization: bool = False
    permanent_catheter: bool = False
    loss_bladder_function: bool = False
    mild_constipation: bool = False
    moderate_constipation: bool = False
    severe_constipation: bool = False
    needs_help_for_bowel_movement: bool = False
    bowel_incontinence_weekly: bool = False
    loss_bowel_function: bool = False

    @property
    def has_findings(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))


@dataclass(frozen=True)
class MentalFindings:
    mild_fatigue: bool = False
    moderate_to_severe_fatigue: bool = False
    lightly_reduced_cognition: bool = False
    moderately_reduced_cognition: bool = False
    markedly_reduced_cognition: bool = False
    pronounced_dementia: bool = False

    @property
    def has_findings(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))


DomainFindings = (
    VisualFindings
    | BrainstemFindings
    | PyramidalFindings
    | CerebellarFindings
    | SensoryFindings
    | BowelBladderFindings
    | MentalFindings
)

FINDINGS_TYPES: dict[FSDomain, type] = {
    FSDomain.VISUAL: VisualFindings,
    FSDomain.BRAINSTEM: BrainstemFindings,
    FSDomain.PYRAMIDAL: PyramidalFindings,
    FSDomain.CEREBELLAR: CerebellarFindings,
    FSDomain.SENSORY: SensoryFindings,
    FSDomain.BOWEL_BLADDER: BowelBladderFindings,
    FSDomain.MENTAL: MentalFindings,
}


@dataclass(frozen=True)
class ExaminationFindings:
    """Complete set of domain findings for one examination."""

    visual: VisualFindings = field(default_factory=VisualFindings)
    brainstem: BrainstemFindings = field(default_factory=BrainstemFindings)
    pyramidal: PyramidalFindings = field(default_factory=PyramidalFindings)
    cerebellar: CerebellarFindings = field(default_factory=CerebellarFindings)
    sensory: SensoryFindings = field(default_factory=SensoryFindings)
    bowel_bladder: BowelBladderFindings = field(default_factory=BowelBladderFindings)
    mental: MentalFindings = field(default_factory=MentalFindings)

    def for_domain(self, domain: FSDomain) -> DomainFindings:
        return getattr(self, _DOMAIN_ATTR[domain])

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


_DOMAIN_ATTR: dict[FSDomain, str] = {
    FSDomain.VISUAL: "visual",
    FSDomain.BRAINSTEM: "brainstem",
    FSDomain.PYRAMIDAL: "pyramidal",
    FSDomain.CEREBELLAR: "cerebellar",
    FSDomain.SENSORY: "sensory",
    FSDomain.BOWEL_BLADDER: "bowel_bladder",
    FSDomain.MENTAL: "mental",
}


def _plain(value: Any) -> Any:
    """Replace enum members with their values for YAML/JSON output."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


# ============================================================================
# FS vector
# ============================================================================


class FSVector(Mapping[FSDomain, int]):
    """Immutable mapping of the seven domain codes to FS grades.

    Missing domains are graded 0. Keys may be given as ``FSDomain`` members
    or their string codes.
    """

    __slots__ = ("_grades",)

    def __init__(self, grades: Mapping[FSDomain | str, int] | None = None, **codes: int):
        merged: dict[FSDomain, int] = {domain: 0 for domain in FSDomain}
        for key, grade in {**(grades or {}), **codes}.items():
            merged[FSDomain(key)] = int(grade)
        self._grades = merged

    def __getitem__(self, key: FSDomain | str) -> int:
        return self._grades[FSDomain(key)]

    def __iter__(self) -> Iterator[FSDomain]:
        return iter(self._grades)

    def __len__(self) -> int:
        return len(self._grades)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FSVector):
            return self._grades == other._grades
        if isinstance(other, Mapping):
            try:
                return self._grades == FSVector(other)._grades
            except (TypeError, ValueError):
                return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._grades.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{d.value}={g}" for d, g in self._grades.items())
        return f"FSVector({inner})"

    @property
    def max_grade(self) -> int:
        return max(self._grades.values())

    def count(self, grade: int) -> int:
        """Number of domains at exactly ``grade``."""
        return sum(1 for value in self._grades.values() if value == grade)

    def replace(self, **codes: int) -> FSVector:
        """Return a copy with some domain grades replaced (keyed by code)."""
        return FSVector({**self._grades, **{FSDomain(k): v for k, v in codes.items()}})

    def to_dict(self) -> dict[str, int]:
        return {domain.value: grade for domain, grade in self._grades.items()}
