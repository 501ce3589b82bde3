"""
EDSS Report Generator
=====================

Quick summaries, examination narratives and assessment trace reports.
Uses Jinja2 templates for flexible output formats.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, select_autoescape

from edss_calculator.collection.scales import ASSISTANCE_LABELS, FS_LABELS, grade_description
from edss_calculator.scoring.assessment import Assessment
from edss_calculator.scoring.edss import guard_floor
from edss_calculator.scoring.findings import (
    LOWER_LIMB_MOVEMENTS,
    UPPER_LIMB_MOVEMENTS,
    AssistanceLevel,
    BowelBladderFindings,
    BrainstemFindings,
    CerebellarFindings,
    FSDomain,
    MentalFindings,
    Nystagmus,
    PyramidalFindings,
    SensoryFindings,
    VisualFieldDeficit,
    VisualFindings,
)

# Line order of the quick summary
SUMMARY_ORDER: tuple[FSDomain, ...] = (
    FSDomain.PYRAMIDAL,
    FSDomain.VISUAL,
    FSDomain.BRAINSTEM,
    FSDomain.CEREBELLAR,
    FSDomain.SENSORY,
    FSDomain.BOWEL_BLADDER,
    FSDomain.MENTAL,
)


# ============================================================================
# Finding phrases
# ============================================================================


def visual_phrases(f: VisualFindings) -> list[str]:
    if f.is_normal:
        return []
    text = f"L: {f.left_eye_acuity.label}, R: {f.right_eye_acuity.label}"
    if f.visual_field_deficit is not VisualFieldDeficit.NONE:
        text += f", {f.visual_field_deficit.value} VF deficit"
    return [text]


def brainstem_phrases(f: BrainstemFindings) -> list[str]:
    items = [
        ("eye motility", f.eye_motility),
        ("nystagmus", f.nystagmus.level),
        ("facial sens", f.facial_sensibility),
        ("facial sym", f.facial_symmetry),
        ("hearing", f.hearing),
        ("dysarthria", f.dysarthria),
        ("dysphagia", f.dysphagia),
    ]
    phrases = [f"{name} {level}" for name, level in items if level > 0]
    if f.ino:
        phrases.insert(1, "INO")
    return phrases


def pyramidal_phrases(f: PyramidalFindings) -> list[str]:
    flags = [
        ("spastic gait", f.spastic_gait),
        ("Babinski", f.babinski_left or f.babinski_right),
        ("hyperreflexia", f.hyperreflexia_left or f.hyperreflexia_right),
        ("clonus", f.clonus_left or f.clonus_right),
        ("fatigue", f.fatigability),
    ]
    phrases = [name for name, present in flags if present]
    if f.min_strength < 5:
        phrases.insert(0, f"min MRC {f.min_strength}")
    return phrases


def weakness_phrases(f: PyramidalFindings) -> list[str]:
    """Per-movement weakness, merging equal bilateral grades."""
    phrases = []
    for prefix, name in UPPER_LIMB_MOVEMENTS + LOWER_LIMB_MOVEMENTS:
        right = getattr(f, f"{prefix}_r")
        left = getattr(f, f"{prefix}_l")
        if right < 5 and left < 5 and right == left:
            phrases.append(f"{name} {right}/5 bilaterally")
            continue
        if right < 5:
            phrases.append(f"right {name} {right}/5")
        if left < 5:
            phrases.append(f"left {name} {left}/5")
    return phrases


def umn_phrases(f: PyramidalFindings) -> list[str]:
    signs = []
    for name, left, right in (
        ("hyperreflexia", f.hyperreflexia_left, f.hyperreflexia_right),
        ("positive Babinski sign", f.babinski_left, f.babinski_right),
        ("clonus", f.clonus_left, f.clonus_right),
    ):
        if left and right:
            signs.append(f"bilateral {name}")
        elif left or right:
            signs.append(f"{name} ({'left' if left else 'right'})")
    if f.spastic_gait:
        signs.append("spastic gait")
    if f.fatigability:
        signs.append("fatigability")
    return signs


def cerebellar_phrases(f: CerebellarFindings) -> list[str]:
    flags = [
        ("unable coordinated movements", f.inability_coordinated_movements),
        ("ataxia 3-4 limbs", f.ataxia_three_or_four_limbs),
        ("needs assistance", f.needs_assistance_due_ataxia),
        ("limb ataxia affects function", f.limb_ataxia_affects_function),
        ("gait ataxia", f.gait_ataxia),
        ("truncal ataxia", f.truncal_ataxia),
        (f"ataxia on testing ({f.ataxia_limb_count} limbs)", f.ataxia_limb_count > 0),
        ("Romberg fall", f.romberg_fall_tendency),
        ("tandem walk difficulty", f.line_walk_difficulty),
        ("mild signs only", f.mild_signs_only),
    ]
    return [name for name, present in flags if present]


def sensory_phrases(f: SensoryFindings) -> list[str]:
    names = ("vib", "pain/touch", "joint pos")
    return [
        f"{name} {m.severity.value} {m.limbs} limbs"
        for name, m in zip(names, f.modalities)
        if m.affected
    ]


def bowel_bladder_phrases(f: BowelBladderFindings) -> list[str]:
    flags = [
        ("loss bladder function", f.loss_bladder_function),
        ("loss bowel function", f.loss_bowel_function),
        ("permanent catheter", f.permanent_catheter),
        ("bowel incontinence weekly", f.bowel_incontinence_weekly),
        ("frequent incontinence", f.frequent_incontinence),
        ("intermittent cath", f.intermittent_catheterization),
        ("needs help for BM", f.needs_help_for_bowel_movement),
        ("moderate urge", f.moderate_urge),
        ("moderate constipation", f.moderate_constipation),
        ("rare incontinence", f.rare_incontinence),
        ("severe constipation", f.severe_constipation),
        ("mild urge", f.mild_urge),
        ("mild constipation", f.mild_constipation),
    ]
    return [name for name, present in flags if present]


def mental_phrases(f: MentalFindings) -> list[str]:
    flags = [
        ("pronounced dementia", f.pronounced_dementia),
        ("markedly reduced cognition", f.markedly_reduced_cognition),
        ("moderately reduced cognition", f.moderately_reduced_cognition),
        ("lightly reduced cognition", f.lightly_reduced_cognition),
        ("moderate-severe fatigue", f.moderate_to_severe_fatigue),
        ("mild fatigue", f.mild_fatigue),
    ]
    return [name for name, present in flags if present]


PHRASES = {
    FSDomain.VISUAL: visual_phrases,
    FSDomain.BRAINSTEM: brainstem_phrases,
    FSDomain.PYRAMIDAL: pyramidal_phrases,
    FSDomain.CEREBELLAR: cerebellar_phrases,
    FSDomain.SENSORY: sensory_phrases,
    FSDomain.BOWEL_BLADDER: bowel_bladder_phrases,
    FSDomain.MENTAL: mental_phrases,
}


def ambulation_phrase(assistance: AssistanceLevel, distance: int | None) -> str:
    if assistance is AssistanceLevel.NONE:
        return f"unaided {distance} m" if distance is not None else "unaided (n/a)"
    return ASSISTANCE_LABELS[assistance]


def _narrative_sentences(assessment: Assessment) -> list[str]:
    f = assessment.findings
    sentences = []

    v = f.visual
    text = f"Visual acuity: left eye {v.left_eye_acuity.label}, right eye {v.right_eye_acuity.label}."
    if v.visual_field_deficit is VisualFieldDeficit.NONE:
        text += " No visual field deficits."
    else:
        text += f" {v.visual_field_deficit.value.capitalize()} visual field deficit."
    sentences.append(text)

    b = f.brainstem
    parts = []
    if b.eye_motility:
        parts.append(f"eye motility impairment (level {b.eye_motility})")
    if b.nystagmus is not Nystagmus.NONE:
        parts.append(f"{b.nystagmus.value} nystagmus")
    if b.ino:
        parts.append("internuclear ophthalmoplegia")
    for name, level in (
        ("facial sensibility deficit", b.facial_sensibility),
        ("facial asymmetry", b.facial_symmetry),
        ("hearing impairment", b.hearing),
        ("dysarthria", b.dysarthria),
        ("dysphagia", b.dysphagia),
    ):
        if level:
            parts.append(f"{name} (level {level})")
    sentences.append(f"Brainstem: {', '.join(parts)}." if parts else "Brainstem examination normal.")

    weakness = weakness_phrases(f.pyramidal)
    signs = umn_phrases(f.pyramidal)
    if weakness or signs:
        groups = [", ".join(group) for group in (weakness, signs) if group]
        sentences.append(f"Motor examination: {'; '.join(groups)}.")
    else:
        sentences.append(
            "Motor examination: normal with full strength (MRC 5/5) throughout and no upper motor neuron signs."
        )

    c = cerebellar_phrases(f.cerebellar)
    sentences.append(f"Cerebellar: {', '.join(c)}." if c else "Coordination normal.")

    s = sensory_phrases(f.sensory)
    sentences.append(f"Sensory: {', '.join(s)}." if s else "Sensory examination normal.")

    bb = bowel_bladder_phrases(f.bowel_bladder)
    sentences.append(f"Bowel/bladder: {', '.join(bb)}." if bb else "No bowel or bladder dysfunction.")

    m = mental_phrases(f.mental)
    sentences.append(f"Mental: {', '.join(m)}." if m else "No fatigue or cognitive impairment.")

    if assessment.assistance is AssistanceLevel.NONE:
        if assessment.distance is not None:
            sentences.append(f"Walks {assessment.distance} m without aid or rest.")
        else:
            sentences.append("Walks without aid; maximum distance not documented.")
    else:
        sentences.append(f"Ambulation: {ASSISTANCE_LABELS[assessment.assistance]}.")

    return sentences


# ============================================================================
# Generator
# ============================================================================


class ReportGenerator:
    """Generate reports from templates."""

    def __init__(self, include_corrected: bool = True):
        self.include_corrected = include_corrected
        self.env = Environment(
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
        )

        # Register custom filters
        self.env.filters["edss"] = self._format_edss
        self.env.filters["format_date"] = self._format_date

    @staticmethod
    def _format_edss(value: float | None) -> str:
        if value is None:
            return "-"
        return f"{value:.1f}"

    @staticmethod
    def _format_date(value: datetime, fmt: str = "%Y-%m-%d") -> str:
        """Format datetime."""
        if isinstance(value, datetime):
            return value.strftime(fmt)
        return str(value)

    def render_string(self, template_str: str, context: dict[str, Any]) -> str:
        """Render a template string with context."""
        template = self.env.from_string(template_str)
        return template.render(**context)

    def _domain_rows(self, assessment: Assessment) -> list[dict[str, Any]]:
        rows = []
        for domain in SUMMARY_ORDER:
            grade = assessment.raw_fs[domain]
            corrected = assessment.corrected_fs[domain]
            rows.append(
                {
                    "code": domain.value,
                    "label": FS_LABELS[domain],
                    "grade": grade,
                    "corrected": corrected if self.include_corrected and corrected != grade else None,
                    "phrases": PHRASES[domain](assessment.findings.for_domain(domain)),
                    "description": grade_description(domain, grade),
                    "rule": assessment.fs_rules.get(domain, ""),
                }
            )
        return rows

    def _context(self, assessment: Assessment) -> dict[str, Any]:
        ambulation = assessment.ambulation_edss
        return {
            "a": assessment,
            "rows": self._domain_rows(assessment),
            "ambulation_edss": ambulation.edss if ambulation else assessment.edss,
            "ambulation_text": ambulation_phrase(assessment.assistance, assessment.distance),
            "floor": guard_floor(assessment.corrected_fs.max_grade),
            "generated_at": datetime.now(),
        }

    def summary(self, assessment: Assessment, template: str | None = None) -> str:
        """Multi-line, copy-ready summary."""
        text = self.render_string(template or SUMMARY_TEMPLATE, self._context(assessment))
        return text.strip()

    def narrative(self, assessment: Assessment, template: str | None = None) -> str:
        """Examination narrative, one sentence per domain."""
        context = {"sentences": _narrative_sentences(assessment), **self._context(assessment)}
        return self.render_string(template or NARRATIVE_TEMPLATE, context).strip()

    def assessment_report(
        self,
        assessment: Assessment,
        title: str = "EDSS Assessment",
        output_path: str | Path | None = None,
        date_format: str = "%Y-%m-%d",
    ) -> str:
        """Markdown report with every intermediate result."""
        context = {
            "title": title,
            "date_format": date_format,
            "sentences": _narrative_sentences(assessment),
            **self._context(assessment),
        }
        content = self.render_string(ASSESSMENT_REPORT_TEMPLATE, context)

        if output_path:
            Path(output_path).write_text(content)

        return content


# Default templates
SUMMARY_TEMPLATE = """EDSS {{ a.edss | edss }}
Ambulation {{ ambulation_edss | edss }} ({{ ambulation_text }})
{% for row in rows %}
{{ row.code }} {{ row.grade }}{% if row.corrected is not none %} (corrected: {{ row.corrected }}){% endif %}{% if row.phrases %} ({{ row.phrases | join(", ") }}){% endif %}

{% endfor %}
"""

NARRATIVE_TEMPLATE = """{% for sentence in sentences %}
{{ sentence }}
{% endfor %}
"""

ASSESSMENT_REPORT_TEMPLATE = """# {{ title }}

**Date:** {{ generated_at | format_date(date_format) }}
**EDSS:** {{ a.edss | edss }} ({{ a.result.rationale }})

## Functional Systems

| FS | Grade | Corrected | Rule | Findings |
|----|-------|-----------|------|----------|
{% for row in rows %}
| {{ row.label }} | {{ row.grade }} | {{ a.corrected_fs[row.code] }} | {{ row.rule }} | {{ row.phrases | join(", ") if row.phrases else "normal" }} |
{% endfor %}

## Derivation

- **FS-based EDSS:** {{ a.low_edss.edss | edss if a.low_edss else "-" }}{% if a.low_edss %} ({{ a.low_edss.rationale }}){% endif %}

- **Ambulation EDSS:** {{ a.ambulation_edss.edss | edss if a.ambulation_edss else "-" }} ({{ a.ambulation_edss.rationale if a.ambulation_edss else ambulation_text }})
- **Floor from max FS:** {{ floor | edss }} (max corrected FS {{ a.corrected_fs.max_grade }}){% if a.result.guard_applied %} (applied){% endif %}

- **Final EDSS:** {{ a.edss | edss }}

## Examination

{% for sentence in sentences %}
{{ sentence }}
{% endfor %}
{% if a.warnings %}

## Plausibility

{% for w in a.warnings %}
- **{{ w.severity.value }}** ({{ w.category.value }}): {{ w.message }}
{% endfor %}
{% endif %}

---
*Generated on {{ generated_at | format_date("%Y-%m-%d %H:%M") }}*
"""


def generate_summary(assessment: Assessment) -> str:
    """Convenience function to render the quick summary."""
    return ReportGenerator().summary(assessment)


def generate_narrative(assessment: Assessment) -> str:
    """Convenience function to render the examination narrative."""
    return ReportGenerator().narrative(assessment)
