"""
Package-level exception hierarchy for netdiag.

All exceptions inherit from NetDiagError, enabling:
- Catching all netdiag errors with a single except clause
- Context fields for debugging (source, config_key)
- Structured serialization via to_dict() for JSON error output

Hierarchy:
    NetDiagError
    ├── RuleSetError        – Rule-set document could not be loaded
    ├── SignalsError        – Signals input could not be loaded
    └── ConfigurationError  – Invalid configuration

Analysis itself never raises for a well-formed rule set: missing signals and
unknown operators are "not matched", not errors.
"""

from __future__ import annotations

from typing import Any


class NetDiagError(Exception):
    """
    Base exception for all netdiag errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON error responses."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
        }


class RuleSetError(NetDiagError):
    """
    Failed to load a rule-set document.

    Raised when the file is missing, is not valid YAML/JSON, or its
    structure does not match what evaluation needs.

    Attributes:
        source: Description of the input source (file path, "<dict>", etc.).
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["source"] = self.source
        return result


class SignalsError(NetDiagError):
    """
    Failed to load a signals mapping.

    Attributes:
        source: Description of the input source.
        key: The offending signal key (if known).
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        key: str | None = None,
    ) -> None:
        self.source = source
        self.key = key
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["source"] = self.source
        result["key"] = self.key
        return result


class ConfigurationError(NetDiagError):
    """
    Error in netdiag configuration.

    Attributes:
        config_key: The configuration key that caused the error (if known).
    """

    def __init__(self, message: str, config_key: str | None = None) -> None:
        self.config_key = config_key
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["config_key"] = self.config_key
        return result
