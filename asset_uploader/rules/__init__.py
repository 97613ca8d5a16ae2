"""
Include / exclude rules for selecting which build assets get uploaded.
"""

from .matcher import (
    ListMode,
    Rule,
    RuleKind,
    list_rule,
    matches,
    pattern_rule,
    predicate_rule,
    regex_rule,
    to_rule,
)

__all__ = [
    "ListMode",
    "Rule",
    "RuleKind",
    "list_rule",
    "matches",
    "pattern_rule",
    "predicate_rule",
    "regex_rule",
    "to_rule",
]
