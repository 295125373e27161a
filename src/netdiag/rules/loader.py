"""
Rule-set document loader.

Reads a YAML or JSON rule-set document and converts it into an immutable
RuleSet. Declaration order of hypotheses and rules is preserved.

Document format::

    hypotheses:
      dns: {score: 0}
      network: {score: 0}

    elimination_rules:
      - id: dns_fast
        if: {dns_latency_ms: {"<": 50}}
        eliminate: [dns]
        explanation: DNS lookups are fast

    rules:
      - id: dns_slow
        if: {dns_latency_ms: {">": 200}}
        then: {dns: 40}
        explanation: DNS lookups are slower than 200 ms

    next_steps:
      dns:
        - Clear the local DNS cache

Only the structure evaluation depends on is checked. Rules that name
hypotheses missing from ``hypotheses`` are accepted; the engine skips
those effects.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from netdiag.engine.models import EliminationRule, RuleSet, ScoringRule
from netdiag.exceptions import RuleSetError

logger = logging.getLogger(__name__)

DEFAULT_RULES_RESOURCE = "default_rules.yaml"


# =============================================================================
# Document models
# =============================================================================


class HypothesisDocument(BaseModel):
    """A hypothesis entry: its initial score."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(default=0.0, ge=0, description="Initial score")


class EliminationRuleDocument(BaseModel):
    """An elimination rule as written in the document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    trigger: dict[str, Any] = Field(default_factory=dict, alias="if")
    eliminate: list[str] = Field(default_factory=list)
    explanation: str = ""


class ScoringRuleDocument(BaseModel):
    """A scoring rule as written in the document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    trigger: dict[str, Any] = Field(default_factory=dict, alias="if")
    delta: dict[str, float] = Field(default_factory=dict, alias="then")
    explanation: str = ""


class RuleSetDocument(BaseModel):
    """Top-level rule-set document."""

    model_config = ConfigDict(frozen=True)

    hypotheses: dict[str, HypothesisDocument] = Field(default_factory=dict)
    elimination_rules: list[EliminationRuleDocument] = Field(default_factory=list)
    rules: list[ScoringRuleDocument] = Field(default_factory=list)
    next_steps: dict[str, list[str]] = Field(default_factory=dict)

    def to_ruleset(self) -> RuleSet:
        return RuleSet(
            hypotheses={name: h.score for name, h in self.hypotheses.items()},
            elimination_rules=tuple(
                EliminationRule(
                    id=r.id,
                    trigger=r.trigger,
                    eliminate=tuple(r.eliminate),
                    explanation=r.explanation,
                )
                for r in self.elimination_rules
            ),
            rules=tuple(
                ScoringRule(
                    id=r.id,
                    trigger=r.trigger,
                    delta=r.delta,
                    explanation=r.explanation,
                )
                for r in self.rules
            ),
            next_steps={name: tuple(steps) for name, steps in self.next_steps.items()},
        )


# =============================================================================
# Loading
# =============================================================================


def ruleset_from_dict(data: Any, source: str = "<dict>") -> RuleSet:
    """
    Build a RuleSet from an already-parsed document.

    Raises:
        RuleSetError: If the document does not have the expected structure.
    """
    if not isinstance(data, dict):
        raise RuleSetError("Rule-set document must be a mapping", source=source)

    try:
        document = RuleSetDocument.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise RuleSetError(
            f"Invalid rule set at '{location}': {first.get('msg')}",
            source=source,
        ) from e

    ruleset = document.to_ruleset()
    logger.debug(
        "Loaded rule set from %s: %d hypotheses, %d elimination rule(s), %d scoring rule(s)",
        source,
        len(ruleset.hypotheses),
        len(ruleset.elimination_rules),
        len(ruleset.rules),
    )
    return ruleset


def _parse_text(raw: str, suffix: str, source: str) -> Any:
    try:
        if suffix == ".json":
            return json.loads(raw)
        return yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise RuleSetError(f"Could not parse rule set: {e}", source=source) from e


def load_ruleset(path: str | Path | None = None) -> RuleSet:
    """
    Load a rule set from a YAML or JSON file.

    Args:
        path: Path to the document. ``.json`` files are parsed as JSON,
            everything else as YAML. None loads the packaged default.

    Raises:
        RuleSetError: If the file cannot be read or parsed.
    """
    if path is None:
        return load_default_ruleset()

    rules_path = Path(path)
    try:
        raw = rules_path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleSetError(f"Could not read rule set: {e}", source=str(rules_path)) from e

    data = _parse_text(raw, rules_path.suffix.lower(), str(rules_path))
    return ruleset_from_dict(data, source=str(rules_path))


def load_default_ruleset() -> RuleSet:
    """Load the rule set shipped with netdiag."""
    resource = resources.files("netdiag.rules").joinpath(DEFAULT_RULES_RESOURCE)
    raw = resource.read_text(encoding="utf-8")
    return ruleset_from_dict(
        _parse_text(raw, ".yaml", DEFAULT_RULES_RESOURCE),
        source=DEFAULT_RULES_RESOURCE,
    )
