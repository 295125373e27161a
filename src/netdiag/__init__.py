"""netdiag - Rule-based diagnosis of network and performance bottlenecks."""

__version__ = "0.1.0"
__license__ = "MIT"

# Exception hierarchy (import first so other modules can use it)
from netdiag.exceptions import (
    ConfigurationError,
    NetDiagError,
    RuleSetError,
    SignalsError,
)

from netdiag.config import (
    Config,
    Environment,
    get_config,
    reset_config,
)
from netdiag.engine import (
    AppliedRuleRecord,
    ConditionEvaluator,
    ConfidenceLevel,
    DiagnosticEngine,
    DiagnosticResult,
    EliminationRule,
    EngineMetrics,
    RankedHypothesis,
    RuleKind,
    RuleSet,
    ScoringRule,
    analyze,
    format_explanation,
)
from netdiag.output import OutputFormat, render
from netdiag.rules import load_default_ruleset, load_ruleset, ruleset_from_dict
from netdiag.signals import load_signals, validate_signals

__all__ = [
    # Exception hierarchy
    "NetDiagError",
    "RuleSetError",
    "SignalsError",
    "ConfigurationError",
    # Core
    "DiagnosticEngine",
    "ConditionEvaluator",
    "analyze",
    "format_explanation",
    # Models
    "AppliedRuleRecord",
    "ConfidenceLevel",
    "DiagnosticResult",
    "EliminationRule",
    "RankedHypothesis",
    "RuleKind",
    "RuleSet",
    "ScoringRule",
    # Loading
    "load_ruleset",
    "load_default_ruleset",
    "ruleset_from_dict",
    "load_signals",
    "validate_signals",
    # Output
    "OutputFormat",
    "render",
    # Configuration
    "Config",
    "Environment",
    "get_config",
    "reset_config",
    # Observability
    "EngineMetrics",
    # Metadata
    "__version__",
    "__license__",
]
