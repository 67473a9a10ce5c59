"""
Configuration errors.

These are raised while a schema is built, finalized or paired with a form.
Rule failures are never raised; they are returned inside a ValidationResult.
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base class for schema, option and form shape errors."""


class InvalidTypeError(ConfigurationError, TypeError):
    """A builder argument has the wrong type."""


class InvalidLengthError(ConfigurationError, ValueError):
    """A length bound is negative."""


class EmptyPropertyError(ConfigurationError, ValueError):
    """A label or matching field name is empty."""


class InvalidPatternError(ConfigurationError, ValueError):
    """A pattern string is not a valid regular expression."""


class MinOverMaxError(ConfigurationError, ValueError):
    """Minimum length is greater than maximum length."""


class RequiredCharsError(ConfigurationError, ValueError):
    """Minimum or maximum length is below the number of required characters."""


class SchemaFrozenError(ConfigurationError):
    """A finalized schema was modified."""


class InvalidSchemaTypeError(ConfigurationError, TypeError):
    """Schema argument is neither a Schema nor a Descriptor."""


class InvalidValueTypeError(ConfigurationError, TypeError):
    """Value is neither a string nor a form mapping of strings."""


class FormSchemaMismatchError(ConfigurationError):
    """A form field has no schema."""


class MatchingPropertyError(ConfigurationError):
    """The value a matching property refers to is missing or not a string."""


class InvalidOptionsError(ConfigurationError, ValueError):
    """Validation options could not be parsed."""


class SchemaDefinitionError(ConfigurationError, ValueError):
    """A YAML form definition could not be read or is invalid."""
