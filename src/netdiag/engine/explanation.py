"""Human-readable rendering of a DiagnosticResult."""

from __future__ import annotations

from typing import Mapping

from netdiag.engine.models import DiagnosticResult

CAUSE_DISPLAY_NAMES: Mapping[str, str] = {
    "dns": "DNS Resolution",
    "network": "Network Latency",
    "disk": "Disk I/O",
    "cpu": "CPU Usage",
    "memory": "Memory Pressure",
    "application": "Application Layer",
    "vpn": "VPN Overhead",
    "bandwidth": "Bandwidth Limitation",
    "unknown": "Insufficient Data",
}


def display_name(cause: str, names: Mapping[str, str] | None = None) -> str:
    """Display name for a cause identifier, or the identifier itself."""
    return (names if names is not None else CAUSE_DISPLAY_NAMES).get(cause, cause)


def format_explanation(
    result: DiagnosticResult,
    names: Mapping[str, str] | None = None,
) -> str:
    """
    Render a result as plain text.

    Example::

        Primary Diagnosis: DNS Resolution
        Confidence: 64% (Medium)

        Ruled Out: CPU Usage, Memory Pressure

        Evidence:
          1. DNS lookups are slower than 200 ms

        Recommended Next Steps:
          1. Clear the local DNS cache
    """
    lines: list[str] = [
        f"Primary Diagnosis: {display_name(result.primary_cause, names)}",
        f"Confidence: {result.confidence_percent}% ({result.confidence_level.value})",
        "",
    ]

    if result.eliminated_causes:
        ruled_out = ", ".join(display_name(c, names) for c in result.eliminated_causes)
        lines.append(f"Ruled Out: {ruled_out}")
        lines.append("")

    lines.append("Evidence:")
    for i, item in enumerate(result.evidence, 1):
        lines.append(f"  {i}. {item}")

    lines.append("")
    lines.append("Recommended Next Steps:")
    for i, step in enumerate(result.next_steps, 1):
        lines.append(f"  {i}. {step}")

    return "\n".join(lines) + "\n"
