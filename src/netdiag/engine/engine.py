"""
Diagnostic Engine: orchestrates one analysis.

The engine:
1. Builds a fresh working state from the rule set
2. Applies elimination rules
3. Applies scoring rules to surviving hypotheses
4. Normalizes, ranks and returns a DiagnosticResult

The rule set is never modified and no per-analysis state is kept on the
engine, so one instance can serve any number of analyses. Only the optional
EngineMetrics counters are shared between calls.
"""

from __future__ import annotations

import logging
from typing import Mapping

from netdiag.config import Config
from netdiag.engine.conditions import ConditionEvaluator
from netdiag.engine.explanation import format_explanation
from netdiag.engine.models import DiagnosticResult, RuleSet, Signals
from netdiag.engine.observability import (
    CollectingWarningSink,
    EngineMetrics,
    FanOutWarningSink,
    LoggingWarningSink,
    WarningSink,
)
from netdiag.engine.result import (
    DEFAULT_HIGH_THRESHOLD,
    DEFAULT_MEDIUM_THRESHOLD,
    calculate_result,
)
from netdiag.engine.stages import (
    AnalysisState,
    apply_elimination_rules,
    apply_scoring_rules,
)

logger = logging.getLogger(__name__)


class DiagnosticEngine:
    """
    Rule-based diagnostic engine.

    Usage::

        engine = DiagnosticEngine(load_default_ruleset())
        result = engine.analyze({"dns_latency_ms": 420, "vpn_in_use": True})
        print(engine.explain(result))
    """

    def __init__(
        self,
        ruleset: RuleSet,
        *,
        config: Config | None = None,
        warning_sink: WarningSink | None = None,
        metrics: EngineMetrics | None = None,
    ) -> None:
        self.ruleset = ruleset
        self.warning_sink = warning_sink or LoggingWarningSink()
        self.metrics = metrics
        if config is not None:
            self.high_threshold = config.high_confidence_threshold
            self.medium_threshold = config.medium_confidence_threshold
            if self.metrics is None and config.metrics_enabled:
                self.metrics = EngineMetrics()
        else:
            self.high_threshold = DEFAULT_HIGH_THRESHOLD
            self.medium_threshold = DEFAULT_MEDIUM_THRESHOLD

    def analyze(self, signals: Signals) -> DiagnosticResult:
        """
        Run one analysis.

        Args:
            signals: Flat mapping of signal name to scalar value. Keys no rule
                mentions are ignored; keys a rule needs but that are missing
                make that rule not match.

        Returns:
            The diagnostic verdict. Never raises for a well-formed rule set.
        """
        collected = CollectingWarningSink()
        evaluator = ConditionEvaluator(FanOutWarningSink(collected, self.warning_sink))
        state = AnalysisState.from_ruleset(self.ruleset)

        apply_elimination_rules(state, self.ruleset.elimination_rules, signals, evaluator)
        apply_scoring_rules(state, self.ruleset.rules, signals, evaluator)

        result = calculate_result(
            state,
            self.ruleset.next_steps,
            high_threshold=self.high_threshold,
            medium_threshold=self.medium_threshold,
            warnings=[w.message for w in collected.warnings],
        )

        logger.info(
            "Diagnosis: %s at %d%% (%s), %d rule(s) fired, %d eliminated",
            result.primary_cause,
            result.confidence_percent,
            result.confidence_level.value,
            len(result.applied_rules),
            len(result.eliminated_causes),
        )
        if self.metrics is not None:
            self.metrics.record_analysis(
                primary_cause=result.primary_cause,
                rules_fired=len(result.applied_rules),
                eliminated=len(result.eliminated_causes),
                warnings=len(result.warnings),
            )
        return result

    def explain(
        self,
        result: DiagnosticResult,
        names: Mapping[str, str] | None = None,
    ) -> str:
        """Human-readable explanation of a result."""
        return format_explanation(result, names)


def analyze(ruleset: RuleSet, signals: Signals) -> DiagnosticResult:
    """Run a single analysis with default settings."""
    return DiagnosticEngine(ruleset).analyze(signals)
