"""
Result calculation: normalize, rank and assemble the verdict.

Confidence of an active hypothesis is its share of the total active score,
as a whole percentage rounded half away from zero. Percentages are not
re-normalized after rounding, so they may sum to 99 or 101.

Ranking is by percentage, highest first. Equal percentages keep the order in
which the hypotheses were declared in the rule set.
"""

from __future__ import annotations

import math
from typing import Mapping, Sequence

from netdiag.engine.models import (
    UNKNOWN_CAUSE,
    ConfidenceLevel,
    DiagnosticResult,
    RankedHypothesis,
    RuleKind,
)
from netdiag.engine.stages import AnalysisState

DEFAULT_HIGH_THRESHOLD = 65
DEFAULT_MEDIUM_THRESHOLD = 40

UNKNOWN_NEXT_STEPS: tuple[str, ...] = (
    "Collect more diagnostic data",
    "Run additional tests",
    "Review system logs",
)

FALLBACK_NEXT_STEPS: tuple[str, ...] = (
    "Review system logs",
    "Run additional diagnostics",
    "Contact support if issue persists",
)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def confidence_level_for(
    percent: int,
    high_threshold: int = DEFAULT_HIGH_THRESHOLD,
    medium_threshold: int = DEFAULT_MEDIUM_THRESHOLD,
) -> ConfidenceLevel:
    if percent >= high_threshold:
        return ConfidenceLevel.HIGH
    if percent >= medium_threshold:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def rank_hypotheses(state: AnalysisState) -> list[RankedHypothesis]:
    """Normalize active scores and rank them. Empty if the total is zero."""
    active = state.active
    total = sum(h.score for h in active)
    if total <= 0:
        return []

    normalized = [
        RankedHypothesis(
            name=h.name,
            score=h.score,
            confidence_percent=round_half_away(h.score / total * 100),
        )
        for h in active
    ]
    # sorted() is stable: ties keep declaration order
    return sorted(normalized, key=lambda h: h.confidence_percent, reverse=True)


def calculate_result(
    state: AnalysisState,
    next_steps_table: Mapping[str, Sequence[str]],
    *,
    high_threshold: int = DEFAULT_HIGH_THRESHOLD,
    medium_threshold: int = DEFAULT_MEDIUM_THRESHOLD,
    warnings: Sequence[str] = (),
) -> DiagnosticResult:
    """
    Turn the final analysis state into a DiagnosticResult.

    Args:
        state: State after both stages have run.
        next_steps_table: Hypothesis name -> recommended steps.
        high_threshold: Minimum percent for High confidence.
        medium_threshold: Minimum percent for Medium confidence.
        warnings: Warning messages raised during the analysis.

    Returns:
        The verdict. When no active hypothesis has a positive score the
        verdict is "unknown" with 0% Low confidence.
    """
    evidence = tuple(r.explanation for r in state.records_of(RuleKind.SCORING))
    common = dict(
        evidence=evidence,
        eliminated_causes=tuple(state.eliminated),
        applied_rules=tuple(state.applied_rules),
        all_scores=tuple(h.snapshot() for h in state.hypotheses.values()),
        warnings=tuple(warnings),
    )

    ranked = rank_hypotheses(state)
    if not ranked:
        return DiagnosticResult(
            primary_cause=UNKNOWN_CAUSE,
            confidence_percent=0,
            confidence_level=ConfidenceLevel.LOW,
            next_steps=UNKNOWN_NEXT_STEPS,
            **common,
        )

    primary = ranked[0]
    steps = next_steps_table.get(primary.name)
    return DiagnosticResult(
        primary_cause=primary.name,
        confidence_percent=primary.confidence_percent,
        confidence_level=confidence_level_for(
            primary.confidence_percent, high_threshold, medium_threshold
        ),
        raw_score=primary.score,
        next_steps=tuple(steps) if steps is not None else FALLBACK_NEXT_STEPS,
        ranked_hypotheses=tuple(ranked),
        **common,
    )
