"""
Rule-Based Diagnostic Engine.

Turns a set of observed signals into a ranked, explainable diagnosis of the
most likely performance bottleneck.

The engine does not learn or guess; it:
1. Rules out hypotheses whose elimination rules match
2. Adjusts surviving hypotheses' scores with scoring rules, in order
3. Normalizes the scores into confidence percentages and ranks them

All behavior comes from the rule set; changing a diagnosis means editing
rule data, not code.
"""

from netdiag.engine.conditions import ConditionEvaluator, Operator, matches
from netdiag.engine.engine import DiagnosticEngine, analyze
from netdiag.engine.explanation import (
    CAUSE_DISPLAY_NAMES,
    display_name,
    format_explanation,
)
from netdiag.engine.models import (
    UNKNOWN_CAUSE,
    AppliedRuleRecord,
    ConfidenceLevel,
    DiagnosticResult,
    EliminationRule,
    Hypothesis,
    HypothesisScore,
    RankedHypothesis,
    RuleKind,
    RuleSet,
    ScoringRule,
)
from netdiag.engine.observability import (
    CollectingWarningSink,
    DiagnosticWarning,
    EngineMetrics,
    LoggingWarningSink,
    WarningCode,
    WarningSink,
)
from netdiag.engine.result import calculate_result, confidence_level_for
from netdiag.engine.stages import (
    AnalysisState,
    apply_elimination_rules,
    apply_scoring_rules,
)

__all__ = [
    "DiagnosticEngine",
    "analyze",
    "ConditionEvaluator",
    "Operator",
    "matches",
    "AnalysisState",
    "apply_elimination_rules",
    "apply_scoring_rules",
    "calculate_result",
    "confidence_level_for",
    "format_explanation",
    "display_name",
    "CAUSE_DISPLAY_NAMES",
    "UNKNOWN_CAUSE",
    "AppliedRuleRecord",
    "ConfidenceLevel",
    "DiagnosticResult",
    "EliminationRule",
    "Hypothesis",
    "HypothesisScore",
    "RankedHypothesis",
    "RuleKind",
    "RuleSet",
    "ScoringRule",
    "CollectingWarningSink",
    "DiagnosticWarning",
    "EngineMetrics",
    "LoggingWarningSink",
    "WarningCode",
    "WarningSink",
]
