"""
Trigger evaluation.

A trigger maps signal keys to conditions; every key must hold (AND). A
condition is either:

- a scalar (str, bool, int, float): the signal must equal it, or
- an operator set such as ``{">": 200, "<=": 500}``: every operator must hold.

A signal that is absent (or None) never matches. An operator symbol that is
not one of the six known ones fails its condition and emits a warning to the
configured sink; evaluation carries on.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Mapping

from netdiag.engine.models import Condition, Signals, Trigger
from netdiag.engine.observability import (
    DiagnosticWarning,
    LoggingWarningSink,
    WarningCode,
    WarningSink,
)


class Operator(str, Enum):
    """Comparison operators allowed in an operator set."""

    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    EQ = "=="
    NE = "!="
    UNRECOGNIZED = "<unrecognized>"

    @classmethod
    def parse(cls, symbol: str) -> "Operator":
        try:
            return cls(symbol)
        except ValueError:
            return cls.UNRECOGNIZED

    @property
    def is_ordering(self) -> bool:
        return self in (Operator.GT, Operator.GE, Operator.LT, Operator.LE)


def as_number(value: Any) -> int | float | None:
    """
    Read a signal or threshold as a number, or return None.

    Booleans count as 1/0, ints are kept exact and numeric strings are
    parsed. NaN and empty strings are not numbers.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, int):
        # Ints stay exact; float() overflows past ~1e308
        return value
    if isinstance(value, float):
        number = value
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def scalar_equals(signal: Any, expected: Any) -> bool:
    """Exact equality for scalar conditions; no cross-type coercion."""
    if isinstance(signal, bool) or isinstance(expected, bool):
        return isinstance(signal, bool) and isinstance(expected, bool) and signal == expected
    if isinstance(signal, (int, float)) and isinstance(expected, (int, float)):
        return signal == expected
    if isinstance(signal, str) and isinstance(expected, str):
        return signal == expected
    return False


def loose_equals(left: Any, right: Any) -> bool:
    """Equality for ``==``/``!=``: numeric when both sides read as numbers."""
    left_num, right_num = as_number(left), as_number(right)
    if left_num is not None and right_num is not None:
        return left_num == right_num
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return False


def compare(operator: Operator, value: Any, threshold: Any) -> bool:
    """Evaluate one recognized operator. UNRECOGNIZED always fails."""
    if operator is Operator.EQ:
        return loose_equals(value, threshold)
    if operator is Operator.NE:
        return not loose_equals(value, threshold)
    if not operator.is_ordering:
        return False

    left, right = as_number(value), as_number(threshold)
    if left is None or right is None:
        return False
    if operator is Operator.GT:
        return left > right
    if operator is Operator.GE:
        return left >= right
    if operator is Operator.LT:
        return left < right
    return left <= right


class ConditionEvaluator:
    """
    Decides whether a trigger is satisfied by a set of signals.

    Stateless apart from the sink that receives warnings, so one instance can
    be shared across analyses.
    """

    def __init__(self, warning_sink: WarningSink | None = None) -> None:
        self.warning_sink = warning_sink or LoggingWarningSink()

    def matches(
        self,
        trigger: Trigger,
        signals: Signals,
        rule_id: str | None = None,
    ) -> bool:
        for key, condition in trigger.items():
            value = signals.get(key)
            if value is None:
                return False
            if not self.condition_holds(condition, value, rule_id=rule_id, key=key):
                return False
        return True

    def condition_holds(
        self,
        condition: Condition,
        value: Any,
        rule_id: str | None = None,
        key: str | None = None,
    ) -> bool:
        if isinstance(condition, Mapping):
            return self._operators_hold(condition, value, rule_id, key)
        if isinstance(condition, (str, bool, int, float)):
            return scalar_equals(value, condition)

        self.warning_sink.emit(DiagnosticWarning(
            code=WarningCode.UNSUPPORTED_CONDITION,
            message=f"Unsupported condition type: {type(condition).__name__}",
            rule_id=rule_id,
            signal_key=key,
        ))
        return False

    def _operators_hold(
        self,
        operators: Mapping[str, Any],
        value: Any,
        rule_id: str | None,
        key: str | None,
    ) -> bool:
        for symbol, threshold in operators.items():
            operator = Operator.parse(symbol)
            if operator is Operator.UNRECOGNIZED:
                self.warning_sink.emit(DiagnosticWarning(
                    code=WarningCode.UNKNOWN_OPERATOR,
                    message=f"Unknown operator: {symbol}",
                    rule_id=rule_id,
                    signal_key=key,
                ))
                return False
            if not compare(operator, value, threshold):
                return False
        return True


def matches(trigger: Trigger, signals: Signals) -> bool:
    """Module-level shortcut using a logging warning sink."""
    return ConditionEvaluator().matches(trigger, signals)
