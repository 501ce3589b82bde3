"""Examination form parsing.

Turns nested mappings (typically loaded from a YAML case file) into finding
records. Numbers are rounded and clamped into their declared bounds;
unknown fields and enumeration values are rejected with ``FormError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, get_type_hints

import yaml

from edss_calculator.scoring.findings import (
    AssistanceLevel,
    BrainstemFindings,
    ExaminationFindings,
    FSDomain,
    PyramidalFindings,
    SensoryModality,
)

logger = logging.getLogger(__name__)

MAX_DISTANCE = 2000

# Bounds for integer fields, per record type
INT_BOUNDS: dict[type, tuple[int, int]] = {
    BrainstemFindings: (0, 4),
    PyramidalFindings: (0, 5),
    SensoryModality: (0, 4),
}

_SECTION_ALIASES: dict[str, str] = {
    FSDomain.VISUAL.value: "visual",
    FSDomain.BRAINSTEM.value: "brainstem",
    FSDomain.PYRAMIDAL.value: "pyramidal",
    FSDomain.CEREBELLAR.value: "cerebellar",
    FSDomain.SENSORY.value: "sensory",
    FSDomain.BOWEL_BLADDER.value: "bowel_bladder",
    FSDomain.MENTAL.value: "mental",
}


class FormError(ValueError):
    """Raised when form data cannot be turned into findings."""


def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def _parse_bool(raw: Any, path: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(raw)
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in ("true", "yes", "1", "y"):
            return True
        if lowered in ("false", "no", "0", "n", ""):
            return False
    raise FormError(f"{path}: expected a boolean, got {raw!r}")


def _parse_int(raw: Any, path: str) -> int:
    if isinstance(raw, bool):
        raise FormError(f"{path}: expected a number, got {raw!r}")
    try:
        return int(round(float(raw)))
    except (TypeError, ValueError, OverflowError) as e:
        raise FormError(f"{path}: expected a number, got {raw!r}") from e


def _parse_enum(kind: type[Enum], raw: Any, path: str) -> Enum:
    try:
        return kind(str(raw).strip())
    except ValueError as e:
        allowed = ", ".join(member.value for member in kind)
        raise FormError(f"{path}: {raw!r} is not one of {allowed}") from e


def _build(cls: type, data: Any, path: str):
    if data is None:
        return cls()
    if isinstance(data, cls):
        return data
    if not isinstance(data, Mapping):
        raise FormError(f"{path}: expected a mapping, got {type(data).__name__}")

    hints = get_type_hints(cls)
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise FormError(f"{path}: unknown field(s) {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for name, raw in data.items():
        kind = hints[name]
        where = f"{path}.{name}"
        if isinstance(kind, type) and issubclass(kind, Enum):
            values[name] = _parse_enum(kind, raw, where)
        elif kind is bool:
            values[name] = _parse_bool(raw, where)
        elif kind is int:
            lo, hi = INT_BOUNDS.get(cls, (0, 4))
            parsed = _parse_int(raw, where)
            values[name] = clamp(parsed, lo, hi)
            if values[name] != parsed:
                logger.debug("Clamped %s from %s to %s", where, parsed, values[name])
        elif is_dataclass(kind):
            values[name] = _build(kind, raw, where)
        else:
            values[name] = raw
    return cls(**values)


def findings_from_dict(data: Mapping[str, Any] | None) -> ExaminationFindings:
    """
    Build examination findings from a nested mapping.

    Sections may be keyed by record name ("pyramidal") or domain code ("P").
    Missing sections and fields take their normal-examination defaults.
    """
    if not data:
        return ExaminationFindings()
    if not isinstance(data, Mapping):
        raise FormError(f"findings: expected a mapping, got {type(data).__name__}")
    sections = {_SECTION_ALIASES.get(key, key): value for key, value in data.items()}
    return _build(ExaminationFindings, sections, "findings")


def parse_distance(raw: Any, max_distance: int = MAX_DISTANCE) -> int | None:
    """Unaided walking distance in metres, rounded and clamped to 0-max_distance."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    return clamp(_parse_int(raw, "distance"), 0, max_distance)


def parse_assistance(raw: Any) -> AssistanceLevel:
    if raw is None:
        return AssistanceLevel.NONE
    return _parse_enum(AssistanceLevel, raw, "assistance")


def parse_overrides(raw: Mapping[str, Any] | None) -> dict[FSDomain, int]:
    """Manual FS grades keyed by domain code, clamped to each domain's range."""
    overrides: dict[FSDomain, int] = {}
    if not raw:
        return overrides
    if not isinstance(raw, Mapping):
        raise FormError(f"overrides: expected a mapping, got {type(raw).__name__}")
    for key, value in raw.items():
        domain = _parse_enum(FSDomain, key, "overrides")
        overrides[domain] = clamp(_parse_int(value, f"overrides.{key}"), 0, domain.max_grade)
    return overrides


@dataclass(frozen=True)
class Case:
    """One examination as entered: findings, ambulation and overrides."""

    findings: ExaminationFindings = field(default_factory=ExaminationFindings)
    assistance: AssistanceLevel = AssistanceLevel.NONE
    distance: int | None = None
    overrides: dict[FSDomain, int] = field(default_factory=dict)
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "assistance": self.assistance.value,
            "distance": self.distance,
            "overrides": {d.value: g for d, g in self.overrides.items()},
            "findings": self.findings.to_dict(),
        }


def case_from_dict(data: Mapping[str, Any], max_distance: int = MAX_DISTANCE) -> Case:
    """Create a Case from a mapping with findings, assistance and distance."""
    known = {"name", "findings", "assistance", "distance", "overrides"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise FormError(f"case: unknown field(s) {', '.join(unknown)}")
    return Case(
        findings=findings_from_dict(data.get("findings")),
        assistance=parse_assistance(data.get("assistance")),
        distance=parse_distance(data.get("distance"), max_distance),
        overrides=parse_overrides(data.get("overrides")),
        name=str(data.get("name") or ""),
    )


def load_case(path: str | Path, max_distance: int = MAX_DISTANCE) -> Case:
    """Load a case from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FormError(f"Case file not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise FormError(f"{path}: {e}") from e

    if not isinstance(data, Mapping):
        raise FormError(f"{path}: expected a mapping at top level")

    case = case_from_dict(data, max_distance)
    if not case.name:
        case = Case(case.findings, case.assistance, case.distance, case.overrides, name=path.stem)
    return case


def dump_case(case: Case, path: str | Path) -> Path:
    """Write a case to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(case.to_dict(), f, default_flow_style=False, sort_keys=False)
    return path
