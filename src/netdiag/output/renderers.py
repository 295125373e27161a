"""
Output renderers for different formats.

Separates presentation from diagnosis. JSON output goes through the
schema.py Pydantic models so field names stay stable.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from netdiag.engine.explanation import display_name, format_explanation
from netdiag.engine.models import DiagnosticResult, RuleKind
from netdiag.output.schema import DiagnosticResultSchema


class OutputFormat(str, Enum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"
    MARKDOWN = "markdown"


def render(result: DiagnosticResult, format: OutputFormat = OutputFormat.TEXT) -> str:
    """
    Render a diagnostic result in the specified format.

    Args:
        result: Result to render
        format: Output format (text, json, markdown)

    Returns:
        Formatted string
    """
    if format == OutputFormat.TEXT:
        return render_text(result)
    elif format == OutputFormat.JSON:
        return render_json(result)
    elif format == OutputFormat.MARKDOWN:
        return render_markdown(result)
    else:
        raise ValueError(f"Unknown output format: {format}")


# =============================================================================
# Schema-based serialization
# =============================================================================


def result_to_schema(result: DiagnosticResult) -> DiagnosticResultSchema:
    """Validate a DiagnosticResult's dict form against the output schema."""
    return DiagnosticResultSchema.model_validate(result.to_dict())


def result_to_dict(result: DiagnosticResult) -> dict[str, Any]:
    return result_to_schema(result).model_dump(mode="json")


# =============================================================================
# Renderers
# =============================================================================


def render_text(result: DiagnosticResult) -> str:
    """Render as plain text (the engine's explanation format)."""
    return format_explanation(result)


def render_json(result: DiagnosticResult, indent: int = 2) -> str:
    """Render as stable JSON, suitable for scripts and log aggregation."""
    return json.dumps(result_to_dict(result), indent=indent)


def render_markdown(result: DiagnosticResult) -> str:
    """Render as Markdown for tickets and chat messages."""
    lines: list[str] = []

    lines.append(f"# Diagnosis: {display_name(result.primary_cause)}")
    lines.append("")
    lines.append(
        f"**Confidence:** {result.confidence_percent}% "
        f"({result.confidence_level.value})"
    )
    lines.append("")

    runner_up = result.runner_up
    if runner_up is not None:
        lines.append(
            f"**Runner-up:** {display_name(runner_up.name)} "
            f"({runner_up.confidence_percent}%)"
        )
        lines.append("")

    if result.eliminated_causes:
        ruled_out = ", ".join(display_name(c) for c in result.eliminated_causes)
        lines.append(f"**Ruled out:** {ruled_out}")
        lines.append("")

    if result.ranked_hypotheses:
        lines.append("## Ranking")
        lines.append("")
        lines.append("| Cause | Score | Confidence |")
        lines.append("|-------|-------|------------|")
        for h in result.ranked_hypotheses:
            lines.append(
                f"| {display_name(h.name)} | {h.score:g} | {h.confidence_percent}% |"
            )
        lines.append("")

    lines.append("## Evidence")
    lines.append("")
    if result.evidence:
        for item in result.evidence:
            lines.append(f"- {item}")
    else:
        lines.append("_No scoring rule matched._")
    lines.append("")

    lines.append("## Next Steps")
    lines.append("")
    for i, step in enumerate(result.next_steps, 1):
        lines.append(f"{i}. {step}")
    lines.append("")

    eliminations = [r for r in result.applied_rules if r.kind == RuleKind.ELIMINATION]
    if eliminations:
        lines.append("<details>")
        lines.append("<summary>Elimination rules</summary>")
        lines.append("")
        for r in eliminations:
            lines.append(f"- `{r.id}`: {r.explanation}")
        lines.append("")
        lines.append("</details>")
        lines.append("")

    if result.warnings:
        lines.append("> **Warnings:** " + "; ".join(result.warnings))
        lines.append("")

    return "\n".join(lines)
