"""
Observability for the diagnostic engine.

Two concerns, both with pluggable backends:
1. Diagnostic warnings: non-fatal problems found while evaluating rules
   (e.g. an unknown comparison operator). They never abort an analysis.
2. EngineMetrics: counters for analyses, fired rules and verdicts, with an
   optional MetricsExporter.

Usage:
    from netdiag.engine.observability import CollectingWarningSink, EngineMetrics

    sink = CollectingWarningSink()
    engine = DiagnosticEngine(ruleset, warning_sink=sink)
    engine.analyze(signals)
    for warning in sink.warnings:
        print(warning.message)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


# =============================================================================
# Diagnostic warnings
# =============================================================================


class WarningCode(str, Enum):
    """Kinds of non-fatal evaluation problems."""

    UNKNOWN_OPERATOR = "unknown_operator"
    UNSUPPORTED_CONDITION = "unsupported_condition"


@dataclass(frozen=True)
class DiagnosticWarning:
    """A non-fatal problem found while evaluating a trigger."""

    code: WarningCode
    message: str
    rule_id: str | None = None
    signal_key: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "rule_id": self.rule_id,
            "signal_key": self.signal_key,
        }


class WarningSink(Protocol):
    """Protocol for diagnostic warning consumers."""

    def emit(self, warning: DiagnosticWarning) -> None:
        """Receive one warning."""
        ...


class LoggingWarningSink:
    """Sink that logs warnings. This is the engine default."""

    def __init__(self, logger_name: str = "netdiag.engine") -> None:
        self._logger = logging.getLogger(logger_name)

    def emit(self, warning: DiagnosticWarning) -> None:
        self._logger.warning(
            "%s (rule=%s, signal=%s)",
            warning.message,
            warning.rule_id,
            warning.signal_key,
        )


class CollectingWarningSink:
    """Sink that keeps warnings in memory."""

    def __init__(self) -> None:
        self.warnings: list[DiagnosticWarning] = []

    def emit(self, warning: DiagnosticWarning) -> None:
        self.warnings.append(warning)

    def clear(self) -> None:
        self.warnings.clear()


class FanOutWarningSink:
    """Forward every warning to several sinks, in order."""

    def __init__(self, *sinks: WarningSink) -> None:
        self._sinks = sinks

    def emit(self, warning: DiagnosticWarning) -> None:
        for sink in self._sinks:
            sink.emit(warning)


# =============================================================================
# Metrics
# =============================================================================


class MetricsExporter(Protocol):
    """Protocol for metrics exporters."""

    def record_counter(self, name: str, value: int, labels: dict[str, str]) -> None:
        """Record a counter metric."""
        ...


class LoggingMetricsExporter:
    """Exporter that logs metrics. Useful for development and debugging."""

    def __init__(self, logger_name: str = "netdiag.metrics") -> None:
        self._logger = logging.getLogger(logger_name)

    def record_counter(self, name: str, value: int, labels: dict[str, str]) -> None:
        self._logger.debug("COUNTER %s += %d %s", name, value, labels)


class InMemoryMetricsExporter:
    """Exporter that accumulates counters in a dict, keyed by name."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}

    def record_counter(self, name: str, value: int, labels: dict[str, str]) -> None:
        self.counters[name] = self.counters.get(name, 0) + value


@dataclass
class EngineMetrics:
    """
    Counters for the diagnostic engine.

    Kept in memory by default; set an exporter to forward them.
    """

    analyses_total: int = 0
    rules_fired_total: int = 0
    eliminations_total: int = 0
    unknown_verdicts_total: int = 0
    warnings_total: int = 0
    primary_causes: dict[str, int] = field(default_factory=dict)

    _exporter: MetricsExporter | None = field(default=None, repr=False)

    def record_analysis(
        self,
        primary_cause: str,
        rules_fired: int,
        eliminated: int,
        warnings: int,
    ) -> None:
        """Record a completed analysis."""
        self.analyses_total += 1
        self.rules_fired_total += rules_fired
        self.eliminations_total += eliminated
        self.warnings_total += warnings
        self.primary_causes[primary_cause] = self.primary_causes.get(primary_cause, 0) + 1
        if primary_cause == "unknown":
            self.unknown_verdicts_total += 1

        if self._exporter is not None:
            self._exporter.record_counter(
                "analyses_total", 1, {"primary_cause": primary_cause}
            )
            self._exporter.record_counter("rules_fired_total", rules_fired, {})
            self._exporter.record_counter("eliminations_total", eliminated, {})
            if warnings:
                self._exporter.record_counter("warnings_total", warnings, {})

    @property
    def unknown_rate(self) -> float:
        """Share of analyses that ended with the unknown verdict."""
        if not self.analyses_total:
            return 0.0
        return self.unknown_verdicts_total / self.analyses_total

    def to_dict(self) -> dict[str, Any]:
        """Export metrics as dictionary for JSON/monitoring."""
        return {
            "analyses_total": self.analyses_total,
            "rules_fired_total": self.rules_fired_total,
            "eliminations_total": self.eliminations_total,
            "unknown_verdicts_total": self.unknown_verdicts_total,
            "warnings_total": self.warnings_total,
            "unknown_rate": self.unknown_rate,
            "primary_causes": dict(self.primary_causes),
        }
