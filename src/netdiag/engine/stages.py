"""
Elimination and scoring stages.

Both stages mutate an AnalysisState that belongs to exactly one call of
DiagnosticEngine.analyze(). Elimination always runs to completion before
scoring starts, and scoring skips eliminated hypotheses, so nothing can bring
a ruled-out cause back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from netdiag.engine.conditions import ConditionEvaluator
from netdiag.engine.models import (
    AppliedRuleRecord,
    EliminationRule,
    Hypothesis,
    RuleKind,
    RuleSet,
    ScoringRule,
    Signals,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisState:
    """Working values of a single analysis."""

    hypotheses: dict[str, Hypothesis]
    eliminated: list[str] = field(default_factory=list)
    applied_rules: list[AppliedRuleRecord] = field(default_factory=list)

    @classmethod
    def from_ruleset(cls, ruleset: RuleSet) -> "AnalysisState":
        """Fresh snapshot with every hypothesis at its initial score."""
        return cls(
            hypotheses={
                name: Hypothesis(name=name, score=score)
                for name, score in ruleset.hypotheses.items()
            }
        )

    @property
    def active(self) -> list[Hypothesis]:
        """Non-eliminated hypotheses in declaration order."""
        return [h for h in self.hypotheses.values() if not h.eliminated]

    def records_of(self, kind: RuleKind) -> list[AppliedRuleRecord]:
        return [r for r in self.applied_rules if r.kind == kind]


def apply_elimination_rules(
    state: AnalysisState,
    rules: Iterable[EliminationRule],
    signals: Signals,
    evaluator: ConditionEvaluator,
) -> None:
    """Zero and lock every hypothesis named by a matching elimination rule."""
    for rule in rules:
        if not evaluator.matches(rule.trigger, signals, rule_id=rule.id):
            continue

        for name in rule.eliminate:
            hypothesis = state.hypotheses.get(name)
            if hypothesis is None:
                continue
            hypothesis.eliminate()
            if name not in state.eliminated:
                state.eliminated.append(name)

        # Recorded even when every target was already eliminated
        state.applied_rules.append(AppliedRuleRecord(
            id=rule.id,
            kind=RuleKind.ELIMINATION,
            explanation=rule.explanation,
            eliminate=rule.eliminate,
        ))
        logger.debug("Elimination rule %s fired: %s", rule.id, ", ".join(rule.eliminate))


def apply_scoring_rules(
    state: AnalysisState,
    rules: Iterable[ScoringRule],
    signals: Signals,
    evaluator: ConditionEvaluator,
) -> None:
    """Add each matching rule's deltas to non-eliminated hypotheses, floored at 0."""
    for rule in rules:
        if not evaluator.matches(rule.trigger, signals, rule_id=rule.id):
            continue

        for name, delta in rule.delta.items():
            hypothesis = state.hypotheses.get(name)
            if hypothesis is None:
                continue
            hypothesis.adjust(delta)

        state.applied_rules.append(AppliedRuleRecord(
            id=rule.id,
            kind=RuleKind.SCORING,
            explanation=rule.explanation,
            scores=rule.delta,
        ))
        logger.debug("Scoring rule %s fired: %s", rule.id, dict(rule.delta))
