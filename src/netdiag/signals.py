"""
Loading signals from a file.

Signals are a flat mapping of name to scalar (str, bool, int, float). A null
value is kept and treated by the engine exactly like a missing key.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from netdiag.exceptions import SignalsError

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, bool, int, float)


def validate_signals(data: Any, source: str = "<dict>") -> Mapping[str, Any]:
    """
    Check that ``data`` is a flat mapping of scalars and freeze it.

    Raises:
        SignalsError: If ``data`` is not a mapping, or holds a nested value.
    """
    if not isinstance(data, Mapping):
        raise SignalsError("Signals must be a mapping of name to value", source=source)

    for key, value in data.items():
        if not isinstance(key, str):
            raise SignalsError(f"Signal name must be a string: {key!r}", source=source)
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise SignalsError(
                f"Signal '{key}' must be a string, boolean or number, "
                f"got {type(value).__name__}",
                source=source,
                key=key,
            )

    return MappingProxyType(dict(data))


def load_signals(path: str | Path) -> Mapping[str, Any]:
    """Load signals from a JSON or YAML file (by suffix; JSON otherwise)."""
    signals_path = Path(path)
    try:
        raw = signals_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SignalsError(f"Could not read signals: {e}", source=str(signals_path)) from e

    try:
        if signals_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SignalsError(f"Could not parse signals: {e}", source=str(signals_path)) from e

    signals = validate_signals(data, source=str(signals_path))
    logger.debug("Loaded %d signal(s) from %s", len(signals), signals_path)
    return signals
