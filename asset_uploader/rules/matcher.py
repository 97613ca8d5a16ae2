"""
Include / exclude rule matching.

A rule is one of four kinds:

    REGEX      a compiled regular expression, searched in the asset name
    PREDICATE  a callable taking the asset name, result coerced to bool
    PATTERN    a string, compiled as a regular expression and searched
    LIST       a list of rules combined with ANY (default) or ALL

Raw configuration values are converted with ``to_rule``. Lists combine with
``ListMode.ANY`` unless ``mode=ListMode.ALL`` is requested; the mode applies
to include and exclude rules alike.

Example:
    >>> rule = to_rule([r"\\.js$", re.compile(r"\\.css$")])
    >>> matches(rule, "app.css")
    True
    >>> matches(to_rule(["app", r"\\.js$"], mode=ListMode.ALL), "app.css")
    False
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Pattern, Tuple

from asset_uploader.errors import InvalidRuleError


class RuleKind(str, Enum):
    """Closed set of rule variants."""

    REGEX = "regex"
    PREDICATE = "predicate"
    PATTERN = "pattern"
    LIST = "list"


class ListMode(str, Enum):
    """How the children of a LIST rule are combined."""

    ANY = "any"
    ALL = "all"


@dataclass(frozen=True)
class Rule:
    """
    A single include / exclude rule.

    Attributes:
        kind: Which variant this rule is
        regex: Compiled expression for REGEX and PATTERN rules
        predicate: Callable for PREDICATE rules
        children: Child rules for LIST rules
        mode: Combination mode for LIST rules
        source: The raw configuration value the rule was built from
    """

    kind: RuleKind
    regex: Optional[Pattern[str]] = None
    predicate: Optional[Callable[[str], Any]] = None
    children: Tuple["Rule", ...] = field(default_factory=tuple)
    mode: ListMode = ListMode.ANY
    source: Any = None


def regex_rule(pattern: Pattern[str]) -> Rule:
    return Rule(kind=RuleKind.REGEX, regex=pattern, source=pattern)


def predicate_rule(predicate: Callable[[str], Any]) -> Rule:
    return Rule(kind=RuleKind.PREDICATE, predicate=predicate, source=predicate)


def pattern_rule(pattern: str) -> Rule:
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise InvalidRuleError(pattern) from e
    return Rule(kind=RuleKind.PATTERN, regex=compiled, source=pattern)


def list_rule(children: Any, mode: ListMode = ListMode.ANY) -> Rule:
    converted = tuple(to_rule(child, mode=mode) for child in children)
    return Rule(kind=RuleKind.LIST, children=converted, mode=mode, source=children)


def to_rule(value: Any, mode: ListMode = ListMode.ANY) -> Rule:
    """
    Convert a raw configuration value into a Rule.

    Args:
        value: Compiled regex, callable, string, list/tuple of those, or a Rule
        mode: Combination mode used for any list found in ``value``

    Returns:
        The equivalent Rule

    Raises:
        InvalidRuleError: If ``value`` is none of the recognized shapes
    """
    if isinstance(value, Rule):
        return value
    if isinstance(value, re.Pattern):
        return regex_rule(value)
    if isinstance(value, str):
        return pattern_rule(value)
    if isinstance(value, (list, tuple)):
        return list_rule(value, mode=mode)
    if callable(value):
        return predicate_rule(value)
    raise InvalidRuleError(value)


def matches(rule: Any, subject: str) -> bool:
    """
    Test a rule against an asset name.

    Raw values are accepted and converted with ``to_rule`` first, so an
    unrecognized shape (e.g. a number) raises InvalidRuleError here.

    Args:
        rule: A Rule or a raw rule value
        subject: Asset name to test

    Returns:
        True if the rule matches the subject
    """
    rule = to_rule(rule)

    if rule.kind is RuleKind.REGEX or rule.kind is RuleKind.PATTERN:
        return rule.regex.search(subject) is not None

    if rule.kind is RuleKind.PREDICATE:
        return bool(rule.predicate(subject))

    if rule.kind is RuleKind.LIST:
        if rule.mode is ListMode.ALL:
            return all(matches(child, subject) for child in rule.children)
        return any(matches(child, subject) for child in rule.children)

    raise InvalidRuleError(rule.source)
