"""
JSON Schema definitions for stable diagnostic output.

The schema is stable across minor versions.
Breaking changes only in major versions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_VERSION = "1.0"


class RankedHypothesisSchema(BaseModel):
    """Schema for one ranked hypothesis."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Hypothesis identifier")
    score: float = Field(..., description="Final score")
    confidence_percent: int = Field(..., description="Share of total active score")


class HypothesisScoreSchema(BaseModel):
    """Schema for the final state of any hypothesis."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Hypothesis identifier")
    score: float = Field(..., description="Final score")
    eliminated: bool = Field(False, description="Whether an elimination rule fired for it")


class AppliedRuleSchema(BaseModel):
    """Schema for a rule that fired."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Rule identifier")
    type: str = Field(..., description="elimination or scoring")
    explanation: str = Field("", description="Why the rule matters")
    eliminate: list[str] = Field(default_factory=list, description="Hypotheses ruled out")
    scores: dict[str, float] = Field(default_factory=dict, description="Score deltas")


class DiagnosticResultSchema(BaseModel):
    """Complete diagnostic result schema."""

    model_config = ConfigDict(frozen=True)

    version: str = Field(SCHEMA_VERSION, description="Schema version")
    primary_cause: str = Field(..., description="Most likely cause, or 'unknown'")
    confidence_percent: int = Field(..., ge=0, le=100, description="Confidence of primary cause")
    confidence_level: str = Field(..., description="Low / Medium / High")
    raw_score: float = Field(0, description="Primary cause's final score")
    evidence: list[str] = Field(default_factory=list, description="Scoring rule explanations")
    eliminated_causes: list[str] = Field(default_factory=list, description="Ruled-out causes")
    next_steps: list[str] = Field(default_factory=list, description="Recommended actions")
    ranked_hypotheses: list[RankedHypothesisSchema] = Field(default_factory=list)
    all_scores: list[HypothesisScoreSchema] = Field(default_factory=list)
    applied_rules: list[AppliedRuleSchema] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list, description="Non-fatal evaluation warnings")


def get_json_schema() -> dict[str, Any]:
    """JSON Schema of the diagnostic output."""
    return DiagnosticResultSchema.model_json_schema()
