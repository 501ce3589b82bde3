"""EDSS-specific correction of the Visual and Bowel/Bladder grades."""

from __future__ import annotations

from .findings import FSDomain, FSVector

VISUAL_CORRECTION: dict[int, int] = {0: 0, 1: 1, 2: 2, 3: 2, 4: 3, 5: 3, 6: 4}
BOWEL_BLADDER_CORRECTION: dict[int, int] = {0: 0, 1: 1, 2: 2, 3: 2, 4: 3, 5: 4, 6: 5}


def convert_visual(grade: int) -> int:
    if grade >= 6:
        return VISUAL_CORRECTION[6]
    return VISUAL_CORRECTION.get(grade, 0)


def convert_bowel_bladder(grade: int) -> int:
    if grade >= 6:
        return BOWEL_BLADDER_CORRECTION[6]
    return BOWEL_BLADDER_CORRECTION.get(grade, 0)


def correct_fs(vector: FSVector) -> FSVector:
    """Return the corrected vector; domains other than V and BB pass through."""
    corrected = dict(vector)
    corrected[FSDomain.VISUAL] = convert_visual(vector[FSDomain.VISUAL])
    corrected[FSDomain.BOWEL_BLADDER] = convert_bowel_bladder(vector[FSDomain.BOWEL_BLADDER])
    return FSVector(corrected)
