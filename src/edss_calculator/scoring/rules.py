"""Ordered rule tables: the first rule whose predicate holds decides."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

C = TypeVar("C")
R = TypeVar("R")


@dataclass(frozen=True)
class Rule(Generic[C, R]):
    """One ``(predicate, result)`` row of a rule table."""

    predicate: Callable[[C], bool]
    result: R
    description: str = ""

    def matches(self, context: C) -> bool:
        return bool(self.predicate(context))


class RuleTable(Generic[C, R]):
    """Priority-ordered list of rules evaluated top to bottom."""

    def __init__(self, name: str, rules: Iterable[Rule[C, R]], default: R):
        self.name = name
        self.rules: tuple[Rule[C, R], ...] = tuple(rules)
        self.default = default

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self):
        return iter(self.rules)

    def first_match(self, context: C) -> Rule[C, R] | None:
        for rule in self.rules:
            if rule.matches(context):
                return rule
        return None

    def evaluate(self, context: C) -> R:
        """Result of the first matching rule, or the table default."""
        rule = self.first_match(context)
        return rule.result if rule is not None else self.default

    def explain(self, context: C) -> str:
        """Description of the deciding rule, for traces."""
        rule = self.first_match(context)
        if rule is None:
            return f"{self.name}: default"
        return f"{self.name}: {rule.description}" if rule.description else self.name
