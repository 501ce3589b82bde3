"""Functional system and EDSS scale definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from edss_calculator.scoring.findings import AssistanceLevel, FSDomain


class ScaleType(str, Enum):
    """Types of scales in the EDSS assessment."""

    FUNCTIONAL_SYSTEM = "functional_system"
    AMBULATION = "ambulation"


@dataclass
class ScaleItem:
    """Individual item in a scale."""

    number: str
    name: str
    description: str
    min_score: int
    max_score: int
    score_descriptions: dict[int, str] = field(default_factory=dict)


@dataclass
class ClinicalScale:
    """Clinical assessment scale."""

    name: str
    abbreviation: str
    scale_type: ScaleType
    description: str
    items: list[ScaleItem]
    total_min: float
    total_max: float
    reference: str | None = None

    @property
    def item_count(self) -> int:
        return len(self.items)

    def get_item(self, number: str) -> ScaleItem | None:
        for item in self.items:
            if item.number.lower() == number.lower():
                return item
        return None


FS_LABELS: dict[FSDomain, str] = {
    FSDomain.VISUAL: "Visual",
    FSDomain.BRAINSTEM: "Brainstem",
    FSDomain.PYRAMIDAL: "Pyramidal",
    FSDomain.CEREBELLAR: "Cerebellar",
    FSDomain.SENSORY: "Sensory",
    FSDomain.BOWEL_BLADDER: "Bowel/Bladder",
    FSDomain.MENTAL: "Cerebral (Mental)",
}

ASSISTANCE_LABELS: dict[AssistanceLevel, str] = {
    AssistanceLevel.NONE: "No assistance required",
    AssistanceLevel.UNILATERAL_50_PLUS: "Unilateral aid (cane/crutch), walks >=50 m",
    AssistanceLevel.UNILATERAL_UNDER_50: "Unilateral aid (cane/crutch), walks <50 m",
    AssistanceLevel.BILATERAL_120_PLUS: "Bilateral aid (two canes/crutches/walker), walks >=120 m",
    AssistanceLevel.BILATERAL_5_TO_120: "Bilateral aid, walks >=5 m but <120 m",
    AssistanceLevel.BILATERAL_UNDER_5: "Bilateral aid, walks <5 m",
    AssistanceLevel.WHEELCHAIR_SELF: "Wheelchair; self-propels and transfers independently",
    AssistanceLevel.WHEELCHAIR_SOME_HELP: "Wheelchair; needs some help with transfers, self-propels",
    AssistanceLevel.WHEELCHAIR_DEPENDENT: "Wheelchair; completely dependent for transfers and propulsion",
    AssistanceLevel.BED_CHAIR_ARMS_OK: "Bed/chair; arms effective; mostly self-care",
    AssistanceLevel.BED_CHAIR_LIMITED_ARMS: "Bed-bound; limited arm use; some self-care",
    AssistanceLevel.HELPLESS: "Helpless; cannot communicate/eat effectively",
    AssistanceLevel.TOTAL_CARE: "Totally helpless; total care incl. feeding",
}


# Kurtzke Functional Systems, graded per the Neurostatus definitions
FUNCTIONAL_SYSTEMS = ClinicalScale(
    name="Kurtzke Functional Systems",
    abbreviation="FS",
    scale_type=ScaleType.FUNCTIONAL_SYSTEM,
    description="Seven neurological domains, each graded from 0 to a domain-specific maximum",
    reference="Kurtzke, 1983; Neurostatus definitions",
    total_min=0,
    total_max=6,
    items=[
        ScaleItem(
            number=FSDomain.VISUAL.value,
            name=FS_LABELS[FSDomain.VISUAL],
            description="Corrected visual acuity per eye and visual field deficit",
            min_score=0,
            max_score=6,
            score_descriptions={
                0: "Normal",
                1: "Disc pallor, small scotoma or acuity 0.68-0.99 in the worse eye",
                2: "Worse eye with acuity 0.34-0.67",
                3: "Large scotoma, moderate field deficit or worse eye acuity 0.21-0.33",
                4: "Marked field deficit or worse eye acuity 0.1-0.2",
                5: "Worse eye acuity <0.1, better eye >0.33",
                6: "Better eye acuity 0.33 or less",
            },
        ),
        ScaleItem(
            number=FSDomain.BRAINSTEM.value,
            name=FS_LABELS[FSDomain.BRAINSTEM],
            description="Eye motility, nystagmus, facial sensation and symmetry, hearing, speech, swallowing",
            min_score=0,
            max_score=5,
            score_descriptions={
                0: "Normal",
                1: "Signs only",
                2: "Moderate nystagmus or other mild disability",
                3: "Severe nystagmus, marked extraocular weakness or moderate disability of other cranial nerves",
                4: "Marked dysarthria or other marked disability",
                5: "Inability to swallow or speak",
            },
        ),
        ScaleItem(
            number=FSDomain.PYRAMIDAL.value,
            name=FS_LABELS[FSDomain.PYRAMIDAL],
            description="MRC muscle strength, upper motor neuron signs, spastic gait and fatigability",
            min_score=0,
            max_score=6,
            score_descriptions={
                0: "Normal",
                1: "Abnormal signs without disability",
                2: "Minimal disability: fatigability, spastic gait or MRC 4 in 1-2 muscle groups",
                3: "Mild to moderate paraparesis, hemiparesis or severe monoparesis",
                4: "Marked paraparesis or hemiparesis, moderate tetraparesis or monoplegia",
                5: "Paraplegia, hemiplegia or marked tetraparesis",
                6: "Tetraplegia",
            },
        ),
        ScaleItem(
            number=FSDomain.CEREBELLAR.value,
            name=FS_LABELS[FSDomain.CEREBELLAR],
            description="Limb, gait and truncal ataxia",
            min_score=0,
            max_score=5,
            score_descriptions={
                0: "Normal",
                1: "Abnormal signs without disability",
                2: "Mild ataxia on testing",
                3: "Moderate truncal or limb ataxia affecting function",
                4: "Severe ataxia in all limbs or needs assistance",
                5: "Unable to perform coordinated movements due to ataxia",
            },
        ),
        ScaleItem(
            number=FSDomain.SENSORY.value,
            name=FS_LABELS[FSDomain.SENSORY],
            description="Vibration, pain/touch and joint position sense per limb",
            min_score=0,
            max_score=6,
            score_descriptions={
                0: "Normal",
                1: "Mild vibration decrease in 1-2 limbs",
                2: "Mild pain/touch decrease, moderate vibration decrease or mild joint position loss",
                3: "Moderate pain/touch decrease or vibration loss in 1-2 limbs",
                4: "Marked pain/touch decrease or proprioceptive loss",
                5: "Loss of sensation in 1-2 limbs or marked decrease below the head",
                6: "Sensation essentially lost below the head",
            },
        ),
        ScaleItem(
            number=FSDomain.BOWEL_BLADDER.value,
            name=FS_LABELS[FSDomain.BOWEL_BLADDER],
            description="Bladder urgency, incontinence, catheterisation and bowel function",
            min_score=0,
            max_score=6,
            score_descriptions={
                0: "Normal",
                1: "Mild urgency or constipation",
                2: "Moderate urgency, constipation or rare incontinence",
                3: "Frequent incontinence or intermittent self-catheterisation",
                4: "Weekly bowel incontinence",
                5: "Loss of bladder or bowel function, or permanent catheter",
                6: "Loss of bowel and bladder function",
            },
        ),
        ScaleItem(
            number=FSDomain.MENTAL.value,
            name=FS_LABELS[FSDomain.MENTAL],
            description="Fatigue and cognition",
            min_score=0,
            max_score=5,
            score_descriptions={
                0: "Normal",
                1: "Mild fatigue",
                2: "Moderate to severe fatigue or mild decrease in mentation",
                3: "Moderate decrease in mentation",
                4: "Marked decrease in mentation",
                5: "Dementia",
            },
        ),
    ],
)

AMBULATION = ClinicalScale(
    name="EDSS Ambulation and Assistance",
    abbreviation="AMB",
    scale_type=ScaleType.AMBULATION,
    description="Walking range and assistance level used for EDSS 4.5 and above",
    reference="Kurtzke, 1983",
    total_min=4.5,
    total_max=9.5,
    items=[
        ScaleItem(
            number="distance",
            name="Unaided walking distance",
            description="Maximum distance walked without aid or rest, in metres (0-2000)",
            min_score=0,
            max_score=2000,
            score_descriptions={
                500: "500 m or more: determined by FS grades",
                300: "300-499 m: EDSS 4.5",
                200: "200-299 m: EDSS 5.0",
                100: "100-199 m: EDSS 5.5",
                0: "Under 100 m: EDSS 6.0",
            },
        ),
        ScaleItem(
            number="assistance",
            name="Assistance level",
            description="Walking aid, wheelchair or bed-bound state",
            min_score=0,
            max_score=len(AssistanceLevel) - 1,
            score_descriptions={i: ASSISTANCE_LABELS[level] for i, level in enumerate(AssistanceLevel)},
        ),
    ],
)

# Registry of all scales
SCALE_REGISTRY: dict[str, ClinicalScale] = {
    "functional-systems": FUNCTIONAL_SYSTEMS,
    "ambulation": AMBULATION,
}


def get_scale(name: str) -> ClinicalScale | None:
    """Get scale by name or abbreviation."""
    name_lower = name.lower().replace(" ", "-")

    if name_lower in SCALE_REGISTRY:
        return SCALE_REGISTRY[name_lower]

    for scale in SCALE_REGISTRY.values():
        if scale.abbreviation.lower() == name_lower:
            return scale

    return None


def list_scales() -> list[ClinicalScale]:
    """List all available scales."""
    return list(SCALE_REGISTRY.values())


def grade_description(domain: FSDomain | str, grade: int) -> str:
    """Neurostatus wording for one FS grade."""
    item = FUNCTIONAL_SYSTEMS.get_item(FSDomain(domain).value)
    if item is None:
        return ""
    return item.score_descriptions.get(grade, "")


def format_scale(scale: ClinicalScale) -> str:
    """Format scale as readable text."""
    lines = [
        f"# {scale.name} ({scale.abbreviation})",
        f"\n{scale.description}",
        f"\nType: {scale.scale_type.value}",
        f"Score Range: {scale.total_min:g} - {scale.total_max:g}",
        f"Items: {scale.item_count}",
    ]

    if scale.reference:
        lines.append(f"Reference: {scale.reference}")

    lines.append("\n## Items\n")

    for item in scale.items:
        lines.append(f"### {item.number}. {item.name}")
        lines.append(f"{item.description}")
        lines.append(f"Score: {item.min_score} - {item.max_score}")

        if item.score_descriptions:
            lines.append("\nScoring:")
            for score, desc in sorted(item.score_descriptions.items()):
                lines.append(f"  {score}: {desc}")

        lines.append("")

    return "\n".join(lines)
