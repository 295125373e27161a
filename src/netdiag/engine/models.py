"""
Data model for the diagnostic engine.

Two groups of types live here:

- Configuration (immutable): rules and the RuleSet they belong to. A RuleSet
  is built once by the loader and shared read-only by every analysis.
- Per-analysis values: the mutable Hypothesis working copy used while the
  stages run, and the frozen records that end up in a DiagnosticResult.

Declaration order is significant everywhere: hypotheses rank in declaration
order on ties, and rules are evaluated in the order they were written.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Union

Scalar = Union[str, bool, int, float]
Signals = Mapping[str, Any]
Condition = Union[Scalar, Mapping[str, Any]]
Trigger = Mapping[str, Condition]

UNKNOWN_CAUSE = "unknown"

_EMPTY: Mapping[str, Any] = MappingProxyType({})


class RuleKind(str, Enum):
    """Which stage a rule belongs to."""

    ELIMINATION = "elimination"
    SCORING = "scoring"


class ConfidenceLevel(str, Enum):
    """Bucketed confidence of the primary cause."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def _freeze(value: Any) -> Any:
    """Recursively convert dicts and lists into read-only equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


# =============================================================================
# Rules and rule set (configuration)
# =============================================================================


@dataclass(frozen=True)
class EliminationRule:
    """A rule that rules out hypotheses entirely when its trigger matches."""

    kind: ClassVar[RuleKind] = RuleKind.ELIMINATION

    id: str
    trigger: Trigger
    eliminate: tuple[str, ...]
    explanation: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "trigger", _freeze(self.trigger))
        object.__setattr__(self, "eliminate", tuple(self.eliminate))


@dataclass(frozen=True)
class ScoringRule:
    """A rule that adds signed deltas to hypothesis scores when it matches."""

    kind: ClassVar[RuleKind] = RuleKind.SCORING

    id: str
    trigger: Trigger
    delta: Mapping[str, float]
    explanation: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "trigger", _freeze(self.trigger))
        object.__setattr__(self, "delta", _freeze(self.delta))


@dataclass(frozen=True)
class RuleSet:
    """
    Immutable diagnostic configuration.

    Attributes:
        hypotheses: Hypothesis name -> initial score, in declaration order.
        elimination_rules: Elimination rules, evaluated first, in order.
        rules: Scoring rules, evaluated after elimination, in order.
        next_steps: Hypothesis name -> recommended next steps.
    """

    hypotheses: Mapping[str, float]
    elimination_rules: tuple[EliminationRule, ...] = ()
    rules: tuple[ScoringRule, ...] = ()
    next_steps: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "hypotheses", _freeze(self.hypotheses))
        object.__setattr__(self, "elimination_rules", tuple(self.elimination_rules))
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "next_steps", _freeze(self.next_steps))

    @property
    def hypothesis_names(self) -> tuple[str, ...]:
        return tuple(self.hypotheses)

    @property
    def rule_count(self) -> int:
        return len(self.elimination_rules) + len(self.rules)


# =============================================================================
# Per-analysis working state
# =============================================================================


@dataclass
class Hypothesis:
    """
    Mutable working copy of one hypothesis during a single analysis.

    The score never goes below zero, and once eliminated a hypothesis stays
    at zero for the rest of the analysis.
    """

    name: str
    score: float
    eliminated: bool = False

    def eliminate(self) -> None:
        self.score = 0
        self.eliminated = True

    def adjust(self, delta: float) -> bool:
        """Apply a scoring delta. Returns False if the hypothesis is eliminated."""
        if self.eliminated:
            return False
        self.score = max(self.score + delta, 0)
        return True

    def snapshot(self) -> "HypothesisScore":
        return HypothesisScore(
            name=self.name, score=self.score, eliminated=self.eliminated
        )


# =============================================================================
# Result records
# =============================================================================


@dataclass(frozen=True)
class HypothesisScore:
    """Final score of a hypothesis, eliminated or not."""

    name: str
    score: float
    eliminated: bool = False


@dataclass(frozen=True)
class AppliedRuleRecord:
    """
    Audit record of a rule that fired.

    ``eliminate`` is set for elimination rules and ``scores`` for scoring
    rules; both are copies of the rule's declared effect, not of what it
    actually changed.
    """

    id: str
    kind: RuleKind
    explanation: str
    eliminate: tuple[str, ...] = ()
    scores: Mapping[str, float] = field(default_factory=lambda: _EMPTY)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "explanation": self.explanation,
            "eliminate": list(self.eliminate),
            "scores": dict(self.scores),
        }


@dataclass(frozen=True)
class RankedHypothesis:
    """An active hypothesis with its normalized confidence."""

    name: str
    score: float
    confidence_percent: int


@dataclass(frozen=True)
class DiagnosticResult:
    """
    Outcome of one analysis.

    ``ranked_hypotheses`` lists active hypotheses from most to least likely;
    it is empty for the unknown verdict. ``all_scores`` holds every
    hypothesis in declaration order, including eliminated ones.
    """

    primary_cause: str
    confidence_percent: int
    confidence_level: ConfidenceLevel
    raw_score: float = 0
    evidence: tuple[str, ...] = ()
    eliminated_causes: tuple[str, ...] = ()
    next_steps: tuple[str, ...] = ()
    ranked_hypotheses: tuple[RankedHypothesis, ...] = ()
    applied_rules: tuple[AppliedRuleRecord, ...] = ()
    all_scores: tuple[HypothesisScore, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def is_unknown(self) -> bool:
        return self.primary_cause == UNKNOWN_CAUSE

    @property
    def runner_up(self) -> RankedHypothesis | None:
        return self.ranked_hypotheses[1] if len(self.ranked_hypotheses) > 1 else None

    def score_of(self, name: str) -> HypothesisScore | None:
        for entry in self.all_scores:
            if entry.name == name:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        """
        Plain-dict form. The JSON output schema validates exactly this shape,
        so there is one serialization of a result.
        """
        return {
            "primary_cause": self.primary_cause,
            "confidence_percent": self.confidence_percent,
            "confidence_level": self.confidence_level.value,
            "raw_score": self.raw_score,
            "evidence": list(self.evidence),
            "eliminated_causes": list(self.eliminated_causes),
            "next_steps": list(self.next_steps),
            "ranked_hypotheses": [
                {
                    "name": h.name,
                    "score": h.score,
                    "confidence_percent": h.confidence_percent,
                }
                for h in self.ranked_hypotheses
            ],
            "all_scores": [
                {"name": s.name, "score": s.score, "eliminated": s.eliminated}
                for s in self.all_scores
            ],
            "applied_rules": [r.to_dict() for r in self.applied_rules],
            "warnings": list(self.warnings),
        }
