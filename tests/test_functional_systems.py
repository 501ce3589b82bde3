"""Tests for the functional system scorers."""

from __future__ import annotations

import pytest

from edss_calculator.scoring.findings import (
    BowelBladderFindings,
    BrainstemFindings,
    CerebellarFindings,
    EyeAcuity,
    MentalFindings,
    Nystagmus,
    PyramidalFindings,
    SensoryFindings,
    SensoryModality,
    Severity,
    VisualFieldDeficit,
    VisualFindings,
)


def _strengths(value: int) -> dict[str, int]:
    return {name: value for name in PyramidalFindings.strength_fields()}


class TestVisual:
    """Tests for score_visual."""

    @pytest.mark.parametrize(
        "left,right,deficit,expected",
        [
            (EyeAcuity.NORMAL, EyeAcuity.NORMAL, VisualFieldDeficit.NONE, 0),
            (EyeAcuity.POOR, EyeAcuity.POOR, VisualFieldDeficit.NONE, 6),
            (EyeAcuity.VERY_POOR, EyeAcuity.NORMAL, VisualFieldDeficit.NONE, 5),
            (EyeAcuity.POOR, EyeAcuity.NORMAL, VisualFieldDeficit.NONE, 4),
            (EyeAcuity.NORMAL, EyeAcuity.NORMAL, VisualFieldDeficit.MARKED, 4),
            (EyeAcuity.REDUCED, EyeAcuity.NORMAL, VisualFieldDeficit.NONE, 3),
            (EyeAcuity.NORMAL, EyeAcuity.NORMAL, VisualFieldDeficit.MODERATE, 3),
            (EyeAcuity.NORMAL, EyeAcuity.MODERATE, VisualFieldDeficit.NONE, 2),
            (EyeAcuity.NEAR_NORMAL, EyeAcuity.NORMAL, VisualFieldDeficit.NONE, 1),
            (EyeAcuity.NORMAL, EyeAcuity.NORMAL, VisualFieldDeficit.MILD, 1),
        ],
    )
    def test_grades(self, left, right, deficit, expected):
        """Test acuity and field deficit grading."""
        from edss_calculator.scoring.functional_systems import score_visual

        findings = VisualFindings(left_eye_acuity=left, right_eye_acuity=right, visual_field_deficit=deficit)
        assert score_visual(findings) == expected

    def test_better_eye_decides_grade_six(self):
        """Both eyes at 0.21-0.33 leave the better eye below 0.33."""
        from edss_calculator.scoring.functional_systems import score_visual

        findings = VisualFindings(left_eye_acuity=EyeAcuity.REDUCED, right_eye_acuity=EyeAcuity.REDUCED)
        assert score_visual(findings) == 6


class TestBrainstem:
    """Tests for score_brainstem."""

    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({}, 0),
            ({"dysphagia": 4}, 5),
            ({"dysarthria": 4}, 5),
            ({"dysarthria": 3}, 4),
            ({"hearing_left": 4}, 4),
            ({"nystagmus": Nystagmus.SPONTANEOUS}, 3),
            ({"eye_motility": 3}, 3),
            ({"nystagmus": Nystagmus.CLEAR}, 2),
            ({"facial_symmetry_right": 2}, 2),
            ({"ino": True}, 1),
            ({"nystagmus": Nystagmus.MILD}, 1),
        ],
    )
    def test_grades(self, kwargs, expected):
        """Test brainstem grading from the highest sub-finding."""
        from edss_calculator.scoring.functional_systems import score_brainstem

        assert score_brainstem(BrainstemFindings(**kwargs)) == expected

    def test_lateralized_items_use_worse_side(self):
        """Test max over left and right."""
        findings = BrainstemFindings(facial_sensibility_left=1, facial_sensibility_right=3)
        assert findings.facial_sensibility == 3
        assert findings.max_level == 3


class TestPyramidal:
    """Tests for score_pyramidal."""

    def test_normal(self):
        """Test full strength without signs."""
        from edss_calculator.scoring.functional_systems import score_pyramidal

        assert score_pyramidal(PyramidalFindings()) == 0

    @pytest.mark.parametrize("value", [0, 1])
    def test_tetraplegia(self, value):
        """All movements at MRC 0 or 1 is grade 6."""
        from edss_calculator.scoring.functional_systems import score_pyramidal

        assert score_pyramidal(PyramidalFindings(**_strengths(value))) == 6

    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({"hip_flexion_r": 1, "hip_flexion_l": 1}, 5),
            ({"elbow_flexion_r": 2, "elbow_flexion_l": 2, "wrist_extension_r": 2}, 5),
            ({"elbow_flexion_r": 2, "elbow_flexion_l": 2}, 4),
            ({"wrist_extension_r": 1}, 4),
            ({"knee_extension_r": 3, "knee_extension_l": 3, "hip_flexion_r": 3}, 4),
            ({"hip_flexion_r": 3}, 3),
            ({"hip_flexion_r": 4, "hip_flexion_l": 4, "knee_flexion_r": 4}, 3),
            ({"finger_abduction_l": 2}, 3),
            ({"spastic_gait": True}, 2),
            ({"ankle_dorsiflexion_l": 4}, 2),
            ({"fatigability": True}, 2),
            ({"babinski_left": True}, 1),
            ({"hyperreflexia_right": True, "clonus_right": True}, 1),
            ({"babinski_left": True, "spastic_gait": True}, 2),
        ],
    )
    def test_grades(self, kwargs, expected):
        """Test strength distribution and sign grading."""
        from edss_calculator.scoring.functional_systems import score_pyramidal

        assert score_pyramidal(PyramidalFindings(**kwargs)) == expected

    def test_strength_fields(self):
        """Test that 24 movements are recorded."""
        names = PyramidalFindings.strength_fields()
        assert len(names) == 24
        assert names[0] == "shoulder_abduction_r"
        assert "ankle_plantarflexion_l" in names


class TestCerebellar:
    """Tests for score_cerebellar."""

    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({}, 0),
            ({"inability_coordinated_movements": True}, 5),
            ({"ataxia_three_or_four_limbs": True}, 4),
            (
                {"finger_nose_right_arm": True, "finger_nose_left_arm": True, "heel_knee_left_leg": True},
                4,
            ),
            ({"needs_assistance_due_ataxia": True}, 4),
            ({"gait_ataxia": True}, 3),
            ({"truncal_ataxia": True}, 3),
            ({"finger_nose_right_arm": True}, 2),
            ({"romberg_fall_tendency": True}, 2),
            ({"mild_signs_only": True}, 1),
        ],
    )
    def test_grades(self, kwargs, expected):
        """Test ataxia grading."""
        from edss_calculator.scoring.functional_systems import score_cerebellar

        assert score_cerebellar(CerebellarFindings(**kwargs)) == expected

    def test_mild_signs_are_not_findings(self):
        """Mild signs alone do not count as objective findings."""
        assert not CerebellarFindings(mild_signs_only=True).has_findings
        assert CerebellarFindings(line_walk_difficulty=True).has_findings


class TestSensory:
    """Tests for score_sensory."""

    def _score(self, **modalities) -> int:
        from edss_calculator.scoring.functional_systems import score_sensory

        return score_sensory(SensoryFindings(**modalities))

    def test_normal(self):
        """Test unaffected modalities."""
        assert self._score() == 0

    def test_severity_without_limbs_is_unaffected(self):
        """Test that a severity with no limbs scores 0."""
        assert self._score(vibration=SensoryModality(severity=Severity.MARKED)) == 0

    @pytest.mark.parametrize(
        "modality,severity,limbs,expected",
        [
            ("vibration", Severity.MILD, 2, 1),
            ("vibration", Severity.MILD, 3, 2),
            ("vibration", Severity.MODERATE, 1, 2),
            ("vibration", Severity.ABSENT, 2, 3),
            ("vibration", Severity.MARKED, 4, 4),
            ("vibration", Severity.ABSENT, 4, 5),
            ("pain_touch", Severity.MILD, 1, 2),
            ("pain_touch", Severity.MODERATE, 2, 3),
            ("pain_touch", Severity.MARKED, 1, 4),
            ("pain_touch", Severity.ABSENT, 1, 5),
            ("joint_position", Severity.MILD, 1, 2),
            ("joint_position", Severity.MODERATE, 2, 3),
            ("joint_position", Severity.ABSENT, 3, 5),
        ],
    )
    def test_single_modality(self, modality, severity, limbs, expected):
        """Test each modality sub-table."""
        assert self._score(**{modality: SensoryModality(severity=severity, count=limbs)}) == expected

    def test_joint_position_floor(self):
        """Any affected joint position sense grades at least 2."""
        assert self._score(joint_position=SensoryModality(severity=Severity.ABSENT, count=1)) == 2

    def test_all_modalities_absent(self):
        """Test grade 6 when every modality is absent."""
        absent = SensoryModality(severity=Severity.ABSENT, count=4)
        assert self._score(vibration=absent, pain_touch=absent, joint_position=absent) == 6

    def test_highest_modality_wins(self):
        """Test max over sub-scores."""
        assert (
            self._score(
                vibration=SensoryModality(severity=Severity.MODERATE, count=1),
                pain_touch=SensoryModality(severity=Severity.MARKED, count=2),
            )
            == 4
        )

    def test_limb_flags_count(self):
        """Flagged limbs raise the limb count."""
        modality = SensoryModality(severity=Severity.MILD, count=1, right_leg=True, left_leg=True, left_arm=True)
        assert modality.limbs == 3
        assert self._score(vibration=modality) == 2


class TestBowelBladderAndMental:
    """Tests for score_bowel_bladder and score_mental."""

    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({}, 0),
            ({"loss_bladder_function": True, "loss_bowel_function": True}, 6),
            ({"permanent_catheter": True}, 5),
            ({"bowel_incontinence_weekly": True}, 4),
            ({"intermittent_catheterization": True}, 3),
            ({"rare_incontinence": True}, 2),
            ({"mild_urge": True}, 1),
        ],
    )
    def test_bowel_bladder(self, kwargs, expected):
        """Test bowel/bladder grading."""
        from edss_calculator.scoring.functional_systems import score_bowel_bladder

        assert score_bowel_bladder(BowelBladderFindings(**kwargs)) == expected

    @pytest.mark.parametrize(
        "kwargs,expected",
        [
            ({}, 0),
            ({"pronounced_dementia": True}, 5),
            ({"markedly_reduced_cognition": True}, 4),
            ({"moderately_reduced_cognition": True}, 3),
            ({"lightly_reduced_cognition": True}, 2),
            ({"moderate_to_severe_fatigue": True, "mild_fatigue": True}, 2),
            ({"mild_fatigue": True}, 1),
        ],
    )
    def test_mental(self, kwargs, expected):
        """Test mental grading."""
        from edss_calculator.scoring.functional_systems import score_mental

        assert score_mental(MentalFindings(**kwargs)) == expected


class TestDispatch:
    """Tests for score_domain, recompute and explain_domain."""

    def test_score_domain_by_code(self):
        """Test dispatch by domain code."""
        from edss_calculator.scoring.functional_systems import score_domain

        assert score_domain("P", PyramidalFindings(hip_flexion_r=3)) == 3
        assert score_domain("M", MentalFindings(mild_fatigue=True)) == 1

    def test_score_domain_unknown_code(self):
        """Test unknown domain code."""
        from edss_calculator.scoring.functional_systems import score_domain

        with pytest.raises(ValueError):
            score_domain("X", MentalFindings())

    def test_score_domain_wrong_record(self):
        """Test mismatched record type."""
        from edss_calculator.scoring.functional_systems import score_domain

        with pytest.raises(TypeError):
            score_domain("V", MentalFindings())

    def test_recompute_normal(self, normal_findings):
        """A normal examination scores 0 everywhere."""
        from edss_calculator.scoring.functional_systems import recompute

        vector = recompute(normal_findings)
        assert vector.max_grade == 0
        assert vector == {"V": 0, "BS": 0, "P": 0, "C": 0, "S": 0, "BB": 0, "M": 0}

    def test_recompute_is_deterministic(self, mild_paresis_findings):
        """Test identical input gives identical output."""
        from edss_calculator.scoring.functional_systems import recompute

        assert recompute(mild_paresis_findings) == recompute(mild_paresis_findings)
        assert recompute(mild_paresis_findings)["P"] == 3

    def test_explain_domain(self, mild_paresis_findings):
        """Test rule traces."""
        from edss_calculator.scoring.functional_systems import explain_domain

        assert explain_domain("P", mild_paresis_findings.pyramidal).startswith("pyramidal: mild to moderate")
        assert explain_domain("M", mild_paresis_findings.mental) == "mental: default"

    def test_explain_sensory(self):
        """Sensory traces name the deciding modality row and any floor."""
        from edss_calculator.scoring.functional_systems import explain_domain

        assert explain_domain("S", SensoryFindings()) == "sensory: no affected modality"

        moderate = SensoryFindings(pain_touch=SensoryModality(severity=Severity.MODERATE, count=1))
        assert explain_domain("S", moderate) == "sensory: pain/touch: moderate, 1-2 limbs"

        joint = SensoryFindings(joint_position=SensoryModality(severity=Severity.MARKED, count=1))
        assert explain_domain("S", joint) == (
            "sensory: no modality row matched; floor 2 (joint position affected)"
        )

        absent = SensoryModality(severity=Severity.ABSENT, count=4)
        assert explain_domain("S", SensoryFindings(absent, absent, absent)) == "sensory: all modalities absent"
