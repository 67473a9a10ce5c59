"""
Schema Builder.

Fluent builder describing the rules for one field, and the finalize step
that checks its invariants and produces an immutable Descriptor.

Example:
    password = Schema().min(5).max(12).has_digit().has_symbol().is_required()
    descriptor = password.finalize()
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Pattern, Tuple, Union

import structlog

from . import rules as Rules
from .constants import CHARACTER_CLASSES, DEFAULT_MAX, DEFAULT_MIN, ERROR_MESSAGES, VALIDATION_MESSAGES
from .errors import (
    EmptyPropertyError,
    InvalidLengthError,
    InvalidTypeError,
    MinOverMaxError,
    RequiredCharsError,
    SchemaFrozenError,
)
from .models import Descriptor

logger = structlog.wrap_logger(logging.getLogger(__name__))

# (bound, custom message)
_Bound = Tuple[int, Optional[str]]


class Schema:
    """
    Mutable rule set for a single field.

    The generic rules (length bounds and character classes) are replaced
    entirely by an exclusive rule when one is set. Priority is
    matching property, then pattern, then email.

    A schema belongs to the code building it. Once finalized it is frozen:
    ``finalize()`` may be called again and returns an equal Descriptor, but
    the builder methods raise SchemaFrozenError.
    """

    def __init__(self):
        self._label: Optional[str] = None
        self._minimum: Optional[_Bound] = None
        self._maximum: Optional[_Bound] = None
        self._char_classes: Dict[str, Optional[str]] = {}
        self._email: Optional[Tuple[Optional[str]]] = None
        self._pattern: Optional[Tuple[Pattern[str], Optional[str]]] = None
        self._required: Optional[str] = None
        self._matching: Optional[Tuple[str, Optional[str]]] = None
        self._descriptor: Optional[Descriptor] = None

    def __repr__(self) -> str:
        state = "finalized" if self._descriptor is not None else "building"
        return f"Schema(label={self._label!r}, {state})"

    # Length bounds

    def min(self, length: int, custom_error: Optional[str] = None) -> "Schema":
        """
        Expect a minimum length.

        Args:
            length: Minimum number of characters.
            custom_error: Message used instead of the default.

        Raises:
            InvalidTypeError: If length is not an int.
            InvalidLengthError: If length is negative.
        """
        self._check_mutable()
        _validate_size(length)
        self._minimum = (length, custom_error)
        return self

    def max(self, length: int, custom_error: Optional[str] = None) -> "Schema":
        """
        Expect a maximum length.

        Args:
            length: Maximum number of characters.
            custom_error: Message used instead of the default.

        Raises:
            InvalidTypeError: If length is not an int.
            InvalidLengthError: If length is negative.
        """
        self._check_mutable()
        _validate_size(length)
        self._maximum = (length, custom_error)
        return self

    @property
    def minimum(self) -> int:
        return self._minimum[0] if self._minimum else DEFAULT_MIN

    @property
    def maximum(self) -> int:
        return self._maximum[0] if self._maximum else DEFAULT_MAX

    # Character classes

    def has_digit(self, custom_error: Optional[str] = None) -> "Schema":
        """Expect at least one digit."""
        return self._set_char_class("digit", custom_error)

    def has_symbol(self, custom_error: Optional[str] = None) -> "Schema":
        """Expect at least one special character."""
        return self._set_char_class("symbol", custom_error)

    def has_uppercase(self, custom_error: Optional[str] = None) -> "Schema":
        """Expect at least one uppercase character."""
        return self._set_char_class("uppercase", custom_error)

    def has_lowercase(self, custom_error: Optional[str] = None) -> "Schema":
        """Expect at least one lowercase character."""
        return self._set_char_class("lowercase", custom_error)

    @property
    def digit(self) -> bool:
        return "digit" in self._char_classes

    @property
    def symbol(self) -> bool:
        return "symbol" in self._char_classes

    @property
    def uppercase(self) -> bool:
        return "uppercase" in self._char_classes

    @property
    def lowercase(self) -> bool:
        return "lowercase" in self._char_classes

    @property
    def required_chars(self) -> int:
        """Number of character classes the value must contain."""
        return len(self._char_classes)

    # Exclusive rules

    def has_pattern(
        self,
        regex_pattern: Union[str, Pattern[str]],
        custom_error: Optional[str] = None,
    ) -> "Schema":
        """
        Expect the value to match a custom pattern.

        Replaces length and character class rules once finalized.

        Raises:
            InvalidTypeError: If the pattern is neither a string nor a compiled regex.
            InvalidPatternError: If the pattern string does not compile.
        """
        self._check_mutable()
        self._pattern = (Rules.compile_pattern(regex_pattern), custom_error)
        return self

    @property
    def pattern(self) -> Optional[Pattern[str]]:
        return self._pattern[0] if self._pattern else None

    def is_email(self, custom_error: Optional[str] = None) -> "Schema":
        """Expect an email address. Replaces length and character class rules."""
        self._check_mutable()
        self._email = (custom_error,)
        return self

    @property
    def email(self) -> bool:
        return self._email is not None

    def matches(self, name: str, custom_error: Optional[str] = None) -> "Schema":
        """
        Expect the value to equal another field's value.

        Overrides every other rule except required.

        Args:
            name: Name of the field to match.
            custom_error: Message used instead of the default.

        Raises:
            InvalidTypeError: If name is not a string.
            EmptyPropertyError: If name is empty.
        """
        self._check_mutable()
        _validate_string_input(name, "Matching property")
        self._matching = (name, custom_error)
        return self

    @property
    def matching_property(self) -> Optional[str]:
        return self._matching[0] if self._matching else None

    # Presentation and presence

    def label(self, name: str) -> "Schema":
        """
        Set the name prefixed to error messages when labels are requested.

        Raises:
            InvalidTypeError: If name is not a string.
            EmptyPropertyError: If name is empty.
        """
        self._check_mutable()
        _validate_string_input(name, "Label")
        self._label = name
        return self

    @property
    def alias(self) -> Optional[str]:
        return self._label

    def is_required(self, custom_error: Optional[str] = None) -> "Schema":
        """Mark the field as mandatory."""
        self._check_mutable()
        self._required = (
            custom_error if custom_error is not None else VALIDATION_MESSAGES["required"]
        )
        return self

    @property
    def required(self) -> bool:
        return self._required is not None

    # Finalize

    @property
    def finalized(self) -> bool:
        return self._descriptor is not None

    def finalize(self) -> Descriptor:
        """
        Check the schema invariants and produce its Descriptor.

        Returns:
            Descriptor with the rules to run, in canonical order.

        Raises:
            MinOverMaxError: If the minimum is greater than the maximum.
            RequiredCharsError: If min or max is below the number of
                required character classes.
        """
        if self._descriptor is None:
            self._descriptor = self._build_descriptor()
            logger.debug(
                "schema_finalized",
                label=self._label,
                rules=self._descriptor.rule_names,
                required=self.required,
            )
        return self._descriptor

    validate_schema = finalize

    def _build_descriptor(self) -> Descriptor:
        common = {"label": self._label, "required": self._required}

        if self._matching is not None:
            name, custom_error = self._matching
            return Descriptor(
                rules=(Rules.matches(name, custom_error),),
                matching_property=name,
                **common,
            )

        if self._pattern is not None:
            regex, custom_error = self._pattern
            return Descriptor(rules=(Rules.pattern(regex, custom_error),), **common)

        if self._email is not None:
            return Descriptor(rules=(Rules.email(self._email[0]),), **common)

        minimum, min_error = self._minimum or (DEFAULT_MIN, None)
        maximum, max_error = self._maximum or (DEFAULT_MAX, None)

        if minimum > maximum:
            raise MinOverMaxError(ERROR_MESSAGES["min_over_max"])

        required_chars = self.required_chars
        if minimum < required_chars or maximum < required_chars:
            raise RequiredCharsError(ERROR_MESSAGES["required_chars"])

        rules: List[Rules.Rule] = [
            Rules.min_length(minimum, min_error),
            Rules.max_length(maximum, max_error),
        ]
        factories = {
            "digit": Rules.digit,
            "symbol": Rules.symbol,
            "uppercase": Rules.uppercase,
            "lowercase": Rules.lowercase,
        }
        for name in CHARACTER_CLASSES:
            if name in self._char_classes:
                rules.append(factories[name](self._char_classes[name]))

        return Descriptor(rules=tuple(rules), **common)

    def _set_char_class(self, name: str, custom_error: Optional[str]) -> "Schema":
        self._check_mutable()
        self._char_classes[name] = custom_error
        return self

    def _check_mutable(self) -> None:
        if self._descriptor is not None:
            raise SchemaFrozenError(ERROR_MESSAGES["schema_frozen"])


def _validate_size(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTypeError(
            ERROR_MESSAGES["invalid_type"].format(name="Length", type="int")
        )
    if value < 0:
        raise InvalidLengthError(ERROR_MESSAGES["invalid_length"])


def _validate_string_input(value: str, name: str) -> None:
    if not isinstance(value, str):
        raise InvalidTypeError(ERROR_MESSAGES["invalid_type"].format(name=name, type="str"))
    if not value:
        raise EmptyPropertyError(ERROR_MESSAGES["empty_property"].format(name=name))
