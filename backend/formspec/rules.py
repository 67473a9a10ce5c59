"""
Rule Library.

Stateless factories for the validation rules a schema can carry:
- min_length / max_length (inclusive whole-string bounds)
- digit / symbol / uppercase / lowercase ("contains at least one")
- email (fixed local@domain.tld shape)
- pattern (custom regular expression)
- matches (literal equality with another field, bound at validation time)

Every rule captures its message when it is created. Calling a rule returns
``True`` on success or the message on failure, so callers must test
``result is not True`` rather than truthiness.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Pattern, Union

from .constants import ERROR_MESSAGES, REGEX_PATTERNS, VALIDATION_MESSAGES
from .errors import InvalidPatternError, InvalidTypeError, MatchingPropertyError


@dataclass(frozen=True)
class RuleOutcome:
    """Explicit result of running a rule."""

    passed: bool
    message: Optional[str] = None


@dataclass(frozen=True)
class Rule:
    """A named predicate over a single string value."""

    name: str
    message: str
    predicate: Callable[[str], bool]

    def __call__(self, value: str) -> Union[bool, str]:
        return True if self.predicate(value) else self.message

    def check(self, value: str) -> RuleOutcome:
        """Run the rule and return an explicit outcome."""
        if self.predicate(value):
            return RuleOutcome(passed=True)
        return RuleOutcome(passed=False, message=self.message)


@dataclass(frozen=True)
class MatchingRule:
    """
    First stage of the matching rule.

    The value to compare against belongs to another field and is only known
    when a whole form is validated, so the rule is bound then.
    """

    property_name: str
    message: str
    name: str = "matches"

    def bind(self, matching_value: str) -> Rule:
        """
        Bind the rule to the other field's current value.

        Args:
            matching_value: Current value of the referenced field.

        Returns:
            Rule testing literal equality with ``matching_value``.
        """
        if not isinstance(matching_value, str):
            raise MatchingPropertyError(
                ERROR_MESSAGES["no_matching_property"].format(property=self.property_name)
            )
        literal = re.compile(escape_literal(matching_value))
        return Rule(
            name=self.name,
            message=self.message,
            predicate=lambda value: literal.fullmatch(value) is not None,
        )

    def __call__(self, value: str) -> Union[bool, str]:
        raise MatchingPropertyError(
            ERROR_MESSAGES["unbound_matching"].format(property=self.property_name)
        )


def escape_literal(value: str) -> str:
    """Escape regex metacharacters so ``value`` only matches itself."""
    return re.escape(value)


def _message(custom: Optional[str], key: str, **params: object) -> str:
    if custom is not None:
        return custom
    return VALIDATION_MESSAGES[key].format(**params)


def _contains(name: str, message: Optional[str]) -> Rule:
    search = REGEX_PATTERNS[name].search
    return Rule(
        name=name,
        message=_message(message, name),
        predicate=lambda value: search(value) is not None,
    )


def min_length(length: int, message: Optional[str] = None) -> Rule:
    """Value must be at least ``length`` characters long."""
    return Rule(
        name="min_length",
        message=_message(message, "min_length", length=length),
        predicate=lambda value: len(value) >= length,
    )


def max_length(length: int, message: Optional[str] = None) -> Rule:
    """Value must be at most ``length`` characters long."""
    return Rule(
        name="max_length",
        message=_message(message, "max_length", length=length),
        predicate=lambda value: len(value) <= length,
    )


def digit(message: Optional[str] = None) -> Rule:
    """Value must contain a decimal digit."""
    return _contains("digit", message)


def symbol(message: Optional[str] = None) -> Rule:
    """Value must contain a special character."""
    return _contains("symbol", message)


def uppercase(message: Optional[str] = None) -> Rule:
    """Value must contain an ASCII uppercase letter."""
    return _contains("uppercase", message)


def lowercase(message: Optional[str] = None) -> Rule:
    """Value must contain an ASCII lowercase letter."""
    return _contains("lowercase", message)


def email(message: Optional[str] = None) -> Rule:
    """Value must look like an email address."""
    match = REGEX_PATTERNS["email"].match
    return Rule(
        name="email",
        message=_message(message, "email"),
        predicate=lambda value: match(value) is not None,
    )


def compile_pattern(regex_pattern: Union[str, Pattern[str]]) -> Pattern[str]:
    """
    Compile a pattern given as a string, or return a compiled one unchanged.

    Raises:
        InvalidTypeError: If the pattern is neither a string nor a compiled regex.
        InvalidPatternError: If the string is not a valid expression.
    """
    if isinstance(regex_pattern, re.Pattern):
        return regex_pattern
    if not isinstance(regex_pattern, str):
        raise InvalidTypeError(
            ERROR_MESSAGES["invalid_type"].format(name="Pattern", type="str or re.Pattern")
        )
    try:
        return re.compile(regex_pattern)
    except re.error as e:
        raise InvalidPatternError(ERROR_MESSAGES["invalid_pattern"].format(error=e)) from e


def pattern(regex_pattern: Union[str, Pattern[str]], message: Optional[str] = None) -> Rule:
    """Value must match ``regex_pattern`` somewhere; anchor it for a full match."""
    search = compile_pattern(regex_pattern).search
    return Rule(
        name="pattern",
        message=_message(message, "pattern"),
        predicate=lambda value: search(value) is not None,
    )


def matches(property_name: str, message: Optional[str] = None) -> MatchingRule:
    """Value must equal the current value of ``property_name``."""
    return MatchingRule(
        property_name=property_name,
        message=_message(message, "matches", property=property_name),
    )
