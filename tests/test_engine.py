"""
Tests for the DiagnosticEngine orchestrator.

Covers end-to-end scenarios, determinism, isolation between analyses and
the packaged default rule set.
"""

from __future__ import annotations

import pytest

from netdiag.config import Config
from netdiag.engine import DiagnosticEngine, analyze
from netdiag.engine.models import ConfidenceLevel, RuleSet
from netdiag.engine.observability import (
    CollectingWarningSink,
    EngineMetrics,
    InMemoryMetricsExporter,
    WarningCode,
)
from netdiag.rules import load_default_ruleset, ruleset_from_dict


# =============================================================================
# Fixtures
# =============================================================================


LATENCY_RULES = {
    "hypotheses": {
        "dns": {"score": 0},
        "network": {"score": 0},
        "disk": {"score": 0},
        "cpu": {"score": 0},
    },
    "elimination_rules": [
        {
            "id": "disk_fast",
            "if": {"disk_latency_ms": {"<": 50}},
            "eliminate": ["disk"],
            "explanation": "Disk latency is low",
        },
        {
            "id": "cpu_idle",
            "if": {"cpu_usage_percent": {"<": 50}},
            "eliminate": ["cpu"],
            "explanation": "CPU is mostly idle",
        },
    ],
    "rules": [
        {
            "id": "dns_slow",
            "if": {"dns_latency_ms": {">": 200}},
            "then": {"dns": 60},
            "explanation": "DNS lookups are slower than 200 ms",
        },
        {
            "id": "network_ok",
            "if": {"network_latency_ms": {"<": 100}},
            "then": {"network": 10},
            "explanation": "Network latency is moderate",
        },
        {
            "id": "cpu_hot",
            "if": {"dns_latency_ms": {">": 200}},
            "then": {"cpu": 500, "disk": 500},
            "explanation": "Rule that targets eliminated causes",
        },
    ],
    "next_steps": {"dns": ["Flush the DNS cache", "Switch resolver"]},
}

SCENARIO_A_SIGNALS = {
    "dns_latency_ms": 420,
    "network_latency_ms": 35,
    "disk_latency_ms": 35,
    "cpu_usage_percent": 22,
}


@pytest.fixture
def latency_rules() -> RuleSet:
    return ruleset_from_dict(LATENCY_RULES)


@pytest.fixture
def sink() -> CollectingWarningSink:
    return CollectingWarningSink()


# =============================================================================
# Scenarios
# =============================================================================


class TestScenarios:
    """End-to-end scenarios."""

    def test_dns_slow_path(self, latency_rules: RuleSet) -> None:
        result = DiagnosticEngine(latency_rules).analyze(SCENARIO_A_SIGNALS)

        assert result.primary_cause == "dns"
        assert result.confidence_level in (ConfidenceLevel.MEDIUM, ConfidenceLevel.HIGH)
        assert result.confidence_percent == 86  # 60 / 70
        assert result.eliminated_causes == ("disk", "cpu")
        assert result.next_steps == ("Flush the DNS cache", "Switch resolver")
        assert result.evidence == (
            "DNS lookups are slower than 200 ms",
            "Network latency is moderate",
            "Rule that targets eliminated causes",
        )

    def test_eliminated_cause_stays_at_zero(self, latency_rules: RuleSet) -> None:
        result = DiagnosticEngine(latency_rules).analyze(SCENARIO_A_SIGNALS)

        for name in ("cpu", "disk"):
            score = result.score_of(name)
            assert score.eliminated is True
            assert score.score == 0
        assert {h.name for h in result.ranked_hypotheses} == {"dns", "network"}

    def test_tie_break_by_declaration_order(self) -> None:
        ruleset = ruleset_from_dict({
            "hypotheses": {"network": {"score": 0}, "dns": {"score": 0}},
            "rules": [
                {"id": "a", "if": {}, "then": {"dns": 25}},
                {"id": "b", "if": {}, "then": {"network": 25}},
            ],
        })

        result = analyze(ruleset, {})

        assert [h.name for h in result.ranked_hypotheses] == ["network", "dns"]
        assert result.primary_cause == "network"
        assert result.confidence_percent == 50
        assert result.confidence_level is ConfidenceLevel.MEDIUM

    def test_unknown_operator_does_not_raise(self, sink: CollectingWarningSink) -> None:
        ruleset = ruleset_from_dict({
            "hypotheses": {"dns": {"score": 5}, "network": {"score": 5}},
            "rules": [
                {"id": "weird", "if": {"dns_latency_ms": {">>": 5}}, "then": {"dns": 100}},
            ],
        })

        result = DiagnosticEngine(ruleset, warning_sink=sink).analyze({"dns_latency_ms": 420})

        assert [w.code for w in sink.warnings] == [WarningCode.UNKNOWN_OPERATOR]
        assert sink.warnings[0].rule_id == "weird"
        assert result.warnings == ("Unknown operator: >>",)
        assert result.applied_rules == ()
        assert result.primary_cause == "dns"
        assert result.confidence_percent == 50

    def test_negative_clamp(self) -> None:
        ruleset = ruleset_from_dict({
            "hypotheses": {"dns": {"score": 10}, "network": {"score": 10}},
            "rules": [
                {"id": "a", "if": {}, "then": {"dns": -5}},
                {"id": "b", "if": {}, "then": {"dns": -20}},
            ],
        })

        result = analyze(ruleset, {})

        assert result.score_of("dns").score == 0
        assert result.primary_cause == "network"
        assert result.confidence_percent == 100

    def test_huge_integer_signal(self, latency_rules: RuleSet) -> None:
        result = analyze(latency_rules, dict(SCENARIO_A_SIGNALS, dns_latency_ms=10**400))

        assert result.primary_cause == "dns"
        assert result.confidence_percent == 86

    def test_no_evidence_gives_unknown(self, latency_rules: RuleSet) -> None:
        result = analyze(latency_rules, {})

        assert result.primary_cause == "unknown"
        assert result.confidence_percent == 0
        assert result.confidence_level is ConfidenceLevel.LOW
        assert result.evidence == ()

    def test_all_eliminated_gives_unknown(self) -> None:
        ruleset = ruleset_from_dict({
            "hypotheses": {"dns": {"score": 10}},
            "elimination_rules": [{"id": "e", "if": {}, "eliminate": ["dns"]}],
        })

        result = analyze(ruleset, {})

        assert result.is_unknown
        assert result.eliminated_causes == ("dns",)


# =============================================================================
# Determinism and isolation
# =============================================================================


class TestDeterminism:
    """Repeated analyses are independent and reproducible."""

    def test_same_input_same_result(self, latency_rules: RuleSet) -> None:
        engine = DiagnosticEngine(latency_rules)
        first = engine.analyze(SCENARIO_A_SIGNALS)
        second = engine.analyze(SCENARIO_A_SIGNALS)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_no_state_carried_between_calls(self, latency_rules: RuleSet) -> None:
        engine = DiagnosticEngine(latency_rules)

        engine.analyze(SCENARIO_A_SIGNALS)
        result = engine.analyze({"network_latency_ms": 20})

        assert result.primary_cause == "network"
        assert result.eliminated_causes == ()
        assert result.score_of("dns").score == 0
        assert result.score_of("disk").eliminated is False

    def test_ruleset_not_mutated(self, latency_rules: RuleSet) -> None:
        before = dict(latency_rules.hypotheses)
        DiagnosticEngine(latency_rules).analyze(SCENARIO_A_SIGNALS)
        assert dict(latency_rules.hypotheses) == before

    def test_ruleset_is_read_only(self, latency_rules: RuleSet) -> None:
        with pytest.raises(TypeError):
            latency_rules.hypotheses["dns"] = 99  # type: ignore[index]
        with pytest.raises(TypeError):
            latency_rules.rules[0].delta["dns"] = 1  # type: ignore[index]


# =============================================================================
# Configuration and metrics
# =============================================================================


class TestEngineConfiguration:
    """Config thresholds and metrics wiring."""

    def test_config_thresholds(self, latency_rules: RuleSet) -> None:
        config = Config(high_confidence_threshold=90, medium_confidence_threshold=80)
        result = DiagnosticEngine(latency_rules, config=config).analyze(SCENARIO_A_SIGNALS)

        assert result.confidence_percent == 86
        assert result.confidence_level is ConfidenceLevel.MEDIUM

    def test_metrics_recorded(self, latency_rules: RuleSet) -> None:
        exporter = InMemoryMetricsExporter()
        metrics = EngineMetrics(_exporter=exporter)
        engine = DiagnosticEngine(latency_rules, metrics=metrics)

        engine.analyze(SCENARIO_A_SIGNALS)
        engine.analyze({})

        assert metrics.analyses_total == 2
        assert metrics.unknown_verdicts_total == 1
        assert metrics.unknown_rate == 0.5
        assert metrics.primary_causes == {"dns": 1, "unknown": 1}
        assert metrics.rules_fired_total == 5
        assert exporter.counters["analyses_total"] == 2

    def test_config_enables_metrics(self, latency_rules: RuleSet) -> None:
        engine = DiagnosticEngine(latency_rules, config=Config(metrics_enabled=True))
        assert engine.metrics is not None

        engine = DiagnosticEngine(latency_rules, config=Config(metrics_enabled=False))
        assert engine.metrics is None

    def test_explain(self, latency_rules: RuleSet) -> None:
        engine = DiagnosticEngine(latency_rules)
        text = engine.explain(engine.analyze(SCENARIO_A_SIGNALS))
        assert text.startswith("Primary Diagnosis: DNS Resolution\n")


# =============================================================================
# Packaged rule set
# =============================================================================


class TestDefaultRuleSet:
    """The shipped rules diagnose the reference cases."""

    @pytest.fixture
    def engine(self) -> DiagnosticEngine:
        return DiagnosticEngine(load_default_ruleset())

    def test_dns_slow_lookup(self, engine: DiagnosticEngine) -> None:
        result = engine.analyze({
            "affected_users": "multiple",
            "timing_pattern": "intermittent",
            "dns_latency_ms": 420,
            "network_latency_ms": 35,
            "packet_loss_percent": 0,
            "disk_latency_ms": 35,
            "cpu_usage_percent": 22,
            "load_average": 1.1,
            "memory_pressure": False,
            "app_specific": True,
            "vpn_in_use": True,
        })

        assert result.primary_cause == "dns"
        assert result.confidence_percent == 64
        assert result.confidence_level is ConfidenceLevel.MEDIUM
        assert result.eliminated_causes == ("network", "cpu", "memory")
        assert [h.name for h in result.ranked_hypotheses] == [
            "dns", "application", "disk", "vpn", "bandwidth",
        ]

    def test_network_latency(self, engine: DiagnosticEngine) -> None:
        result = engine.analyze({
            "affected_users": "everyone",
            "timing_pattern": "always",
            "dns_latency_ms": 45,
            "network_latency_ms": 350,
            "packet_loss_percent": 2,
            "disk_latency_ms": 8,
            "cpu_usage_percent": 18,
            "load_average": 0.8,
            "memory_pressure": False,
            "app_specific": False,
            "vpn_in_use": False,
        })

        assert result.primary_cause == "network"
        assert result.confidence_percent == 70
        assert result.confidence_level is ConfidenceLevel.HIGH
        assert result.eliminated_causes == ("dns", "disk", "cpu", "memory", "vpn")

    def test_disk_bottleneck(self, engine: DiagnosticEngine) -> None:
        result = engine.analyze({
            "affected_users": "multiple",
            "timing_pattern": "always",
            "dns_latency_ms": 25,
            "network_latency_ms": 45,
            "packet_loss_percent": 0,
            "disk_latency_ms": 85,
            "cpu_usage_percent": 22,
            "load_average": 1.5,
            "memory_pressure": False,
            "app_specific": False,
            "vpn_in_use": False,
        })

        assert result.primary_cause == "disk"
        assert result.confidence_percent == 100
        assert result.evidence == ("Disk latency is above 50 ms", "Slowness is constant")

    def test_cpu_saturation(self, engine: DiagnosticEngine) -> None:
        result = engine.analyze({
            "affected_users": "everyone",
            "timing_pattern": "always",
            "dns_latency_ms": 30,
            "network_latency_ms": 55,
            "packet_loss_percent": 0,
            "disk_latency_ms": 12,
            "cpu_usage_percent": 92,
            "load_average": 8.5,
            "memory_pressure": False,
            "app_specific": False,
            "vpn_in_use": False,
        })

        assert result.primary_cause == "cpu"
        assert result.confidence_percent == 72
        assert result.confidence_level is ConfidenceLevel.HIGH

    def test_empty_signals_unknown(self, engine: DiagnosticEngine) -> None:
        assert engine.analyze({}).is_unknown
