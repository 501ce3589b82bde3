"""Tests for finding records, FS vectors, rule tables and grade correction."""

from __future__ import annotations

import pytest

from edss_calculator.scoring.findings import (
    EyeAcuity,
    ExaminationFindings,
    FSDomain,
    FSVector,
    MentalFindings,
    PyramidalFindings,
)


class TestFSDomain:
    """Tests for FSDomain."""

    def test_codes_in_order(self):
        """Test canonical order."""
        assert [d.value for d in FSDomain] == ["V", "BS", "P", "C", "S", "BB", "M"]

    def test_max_grades(self):
        """Test domain ranges."""
        assert FSDomain.VISUAL.max_grade == 6
        assert FSDomain.BRAINSTEM.max_grade == 5
        assert FSDomain.MENTAL.max_grade == 5

    def test_acuity_label(self):
        """Test display labels."""
        assert EyeAcuity.VERY_POOR.label == "<0.10"
        assert EyeAcuity.MODERATE.label == "0.34-0.67"


class TestFSVector:
    """Tests for FSVector."""

    def test_missing_domains_are_zero(self):
        """Test defaults."""
        vector = FSVector(P=3)
        assert len(vector) == 7
        assert vector[FSDomain.PYRAMIDAL] == 3
        assert vector["V"] == 0

    def test_max_and_count(self):
        """Test summary helpers."""
        vector = FSVector({"P": 3, "C": 2, FSDomain.SENSORY: 2})
        assert vector.max_grade == 3
        assert vector.count(2) == 2
        assert vector.count(0) == 4

    def test_replace_returns_copy(self):
        """Test immutability of replace."""
        vector = FSVector(P=3)
        changed = vector.replace(P=1, M=2)
        assert vector["P"] == 3
        assert changed["P"] == 1
        assert changed["M"] == 2

    def test_equality_and_hash(self):
        """Test equality with vectors and plain mappings."""
        assert FSVector(P=2) == FSVector({"P": 2})
        assert FSVector(P=2) == {"P": 2}
        assert FSVector(P=2) != FSVector(P=3)
        assert len({FSVector(P=2), FSVector({"P": 2})}) == 1

    def test_unknown_code(self):
        """Test rejection of unknown domain codes."""
        with pytest.raises(ValueError):
            FSVector({"X": 1})

    def test_to_dict(self):
        """Test plain dictionary output."""
        assert FSVector(BB=4).to_dict() == {"V": 0, "BS": 0, "P": 0, "C": 0, "S": 0, "BB": 4, "M": 0}


class TestExaminationFindings:
    """Tests for ExaminationFindings."""

    def test_for_domain(self):
        """Test domain record lookup."""
        findings = ExaminationFindings(mental=MentalFindings(mild_fatigue=True))
        assert findings.for_domain(FSDomain.MENTAL).mild_fatigue
        assert isinstance(findings.for_domain(FSDomain.PYRAMIDAL), PyramidalFindings)

    def test_to_dict_uses_enum_values(self):
        """Test serialisable output."""
        data = ExaminationFindings().to_dict()
        assert data["visual"]["left_eye_acuity"] == "1.0"
        assert data["sensory"]["vibration"]["severity"] == "normal"
        assert data["pyramidal"]["hip_flexion_r"] == 5


class TestRuleTable:
    """Tests for RuleTable."""

    def _table(self):
        from edss_calculator.scoring.rules import Rule, RuleTable

        return RuleTable(
            "demo",
            [
                Rule(lambda x: x > 10, "big", "greater than ten"),
                Rule(lambda x: x > 5, "medium", "greater than five"),
            ],
            default="small",
        )

    def test_first_match_wins(self):
        """Test ordering."""
        table = self._table()
        assert table.evaluate(20) == "big"
        assert table.evaluate(7) == "medium"

    def test_default(self):
        """Test fallback value."""
        table = self._table()
        assert table.evaluate(1) == "small"
        assert table.first_match(1) is None

    def test_explain(self):
        """Test traces."""
        table = self._table()
        assert table.explain(7) == "demo: greater than five"
        assert table.explain(1) == "demo: default"
        assert len(table) == 2


class TestCorrection:
    """Tests for Visual and Bowel/Bladder correction."""

    @pytest.mark.parametrize("raw,expected", [(0, 0), (1, 1), (2, 2), (3, 2), (4, 3), (5, 3), (6, 4)])
    def test_visual(self, raw, expected):
        """Test visual conversion."""
        from edss_calculator.scoring.correction import convert_visual

        assert convert_visual(raw) == expected

    @pytest.mark.parametrize("raw,expected", [(0, 0), (1, 1), (2, 2), (3, 2), (4, 3), (5, 4), (6, 5)])
    def test_bowel_bladder(self, raw, expected):
        """Test bowel/bladder conversion."""
        from edss_calculator.scoring.correction import convert_bowel_bladder

        assert convert_bowel_bladder(raw) == expected

    def test_out_of_range(self):
        """Grades above 6 map like 6, unknown ones to 0."""
        from edss_calculator.scoring.correction import convert_bowel_bladder, convert_visual

        assert convert_visual(7) == 4
        assert convert_bowel_bladder(9) == 5
        assert convert_visual(-1) == 0

    def test_correct_fs_leaves_other_domains(self):
        """Only V and BB change."""
        from edss_calculator.scoring.correction import correct_fs

        corrected = correct_fs(FSVector(V=6, BB=6, P=6, S=6))
        assert corrected == {"V": 4, "BB": 5, "P": 6, "S": 6}
