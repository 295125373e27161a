"""Rule-set loading and the packaged default rule set."""

from netdiag.rules.loader import (
    RuleSetDocument,
    load_default_ruleset,
    load_ruleset,
    ruleset_from_dict,
)

__all__ = [
    "RuleSetDocument",
    "load_default_ruleset",
    "load_ruleset",
    "ruleset_from_dict",
]
