"""
Form-Spec: declarative validation for string properties and forms.

This package provides a fluent schema builder for per-field rules, a
finalize step that checks the schema invariants, and an engine that
validates a single value or a whole form against those schemas.
"""

from .errors import (
    ConfigurationError,
    EmptyPropertyError,
    FormSchemaMismatchError,
    InvalidLengthError,
    InvalidOptionsError,
    InvalidPatternError,
    InvalidSchemaTypeError,
    InvalidTypeError,
    InvalidValueTypeError,
    MatchingPropertyError,
    MinOverMaxError,
    RequiredCharsError,
    SchemaDefinitionError,
    SchemaFrozenError,
)
from .rules import MatchingRule, Rule, RuleOutcome
from .models import Descriptor, ValidationOptions, ValidationResult
from .schema import Schema
from .engine import FormValidator, find_matching_property, resolve_schema, validate
from .loader import FieldDefinition, FormDefinition, load_form_schema

__version__ = "1.0.0"
__all__ = [
    # Schema
    "Schema",
    "Descriptor",
    # Rules
    "Rule",
    "RuleOutcome",
    "MatchingRule",
    # Engine
    "validate",
    "resolve_schema",
    "find_matching_property",
    "FormValidator",
    "ValidationOptions",
    "ValidationResult",
    # Definitions
    "FieldDefinition",
    "FormDefinition",
    "load_form_schema",
    # Errors
    "ConfigurationError",
    "EmptyPropertyError",
    "FormSchemaMismatchError",
    "InvalidLengthError",
    "InvalidOptionsError",
    "InvalidPatternError",
    "InvalidSchemaTypeError",
    "InvalidTypeError",
    "InvalidValueTypeError",
    "MatchingPropertyError",
    "MinOverMaxError",
    "RequiredCharsError",
    "SchemaDefinitionError",
    "SchemaFrozenError",
]
