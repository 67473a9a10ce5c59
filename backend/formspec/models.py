"""
Data models for finalized schemas, validation options and results.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import ERROR_MESSAGES
from .errors import InvalidOptionsError
from .rules import MatchingRule, Rule

AnyRule = Union[Rule, MatchingRule]


@dataclass(frozen=True)
class Descriptor:
    """
    Finalized, immutable rule set for one field.

    Produced by ``Schema.finalize()``. ``required`` holds the required
    message when the field is mandatory. A descriptor with a
    ``matching_property`` carries a single unbound MatchingRule until the
    engine binds it to the other field's value.
    """

    rules: Tuple[AnyRule, ...] = ()
    label: Optional[str] = None
    required: Optional[str] = None
    matching_property: Optional[str] = None

    @property
    def rule_names(self) -> List[str]:
        """Names of the rules in evaluation order."""
        return [rule.name for rule in self.rules]

    @property
    def is_bound(self) -> bool:
        """True when no rule is waiting for a matching value."""
        return not any(isinstance(rule, MatchingRule) for rule in self.rules)

    def bind_matching(self, matching_value: str) -> "Descriptor":
        """Return a copy whose matching rule is bound to ``matching_value``."""
        rules = tuple(
            rule.bind(matching_value) if isinstance(rule, MatchingRule) else rule
            for rule in self.rules
        )
        return replace(self, rules=rules)


class ValidationOptions(BaseModel):
    """
    Options controlling how errors are collected and reported.

    All options default to collecting every error without labels or rule names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    abort_early: bool = Field(default=False, alias="abortEarly")
    include_label: bool = Field(default=False, alias="includeLabel")
    include_rules: bool = Field(default=False, alias="includeRules")

    @classmethod
    def coerce(
        cls,
        options: Union["ValidationOptions", Mapping[str, Any], None],
    ) -> "ValidationOptions":
        """
        Build options from an instance, a mapping or None.

        Raises:
            InvalidOptionsError: If the mapping has unknown keys or wrong types.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, Mapping):
            raise InvalidOptionsError(
                ERROR_MESSAGES["invalid_options"].format(
                    error=f"expected mapping, got {type(options).__name__}"
                )
            )
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise InvalidOptionsError(ERROR_MESSAGES["invalid_options"].format(error=e)) from e


@dataclass
class ValidationResult:
    """
    Result of validating a single value or a whole form.

    For a single value ``errors`` is a list of messages and ``failed_rules``
    maps rule names to True. For a form both are keyed by field name, and
    fields without errors are left out.
    """

    is_valid: bool
    errors: Union[List[str], Dict[str, List[str]]] = field(default_factory=list)
    failed_rules: Optional[Union[Dict[str, bool], Dict[str, Dict[str, bool]]]] = None

    @property
    def is_form(self) -> bool:
        return isinstance(self.errors, dict)

    @property
    def total_errors(self) -> int:
        """Total number of error messages."""
        if isinstance(self.errors, dict):
            return sum(len(messages) for messages in self.errors.values())
        return len(self.errors)

    def summary(self) -> str:
        """Generate a summary of validation results."""
        status = "PASSED" if self.is_valid else "FAILED"
        lines = [f"Validation {status}", f"  Errors: {self.total_errors}"]
        if isinstance(self.errors, dict):
            for name, messages in self.errors.items():
                for message in messages:
                    lines.append(f"  {name}: {message}")
        else:
            for message in self.errors:
                lines.append(f"  {message}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        if isinstance(self.errors, dict):
            errors: Any = {name: list(messages) for name, messages in self.errors.items()}
        else:
            errors = list(self.errors)
        result: Dict[str, Any] = {"is_valid": self.is_valid, "errors": errors}
        if self.failed_rules is not None:
            result["failed_rules"] = {
                name: dict(value) if isinstance(value, dict) else value
                for name, value in self.failed_rules.items()
            }
        return result
