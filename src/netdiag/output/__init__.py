"""
Output module - Separates rendering from diagnosis.

Provides multiple output formats:
- render_text: Plain-text explanation for terminals
- render_json: Stable JSON schema for scripts
- render_markdown: Ticket/chat-friendly format

Usage:
    from netdiag.output import render, OutputFormat

    result = engine.analyze(signals)
    print(render(result, OutputFormat.JSON))
"""

from netdiag.output.renderers import (
    OutputFormat,
    render,
    render_json,
    render_markdown,
    render_text,
    result_to_dict,
)
from netdiag.output.schema import DiagnosticResultSchema, get_json_schema

__all__ = [
    "OutputFormat",
    "render",
    "render_text",
    "render_json",
    "render_markdown",
    "result_to_dict",
    "DiagnosticResultSchema",
    "get_json_schema",
]
