"""
Constants shared by the rule library, schema builder and validation engine.

Includes:
- Default length bounds
- Built-in character class and email patterns
- Default validation messages
- Configuration error messages
"""

from __future__ import annotations

import re

EMPTY_VALUE = ""

# Applied per bound when the builder does not configure it
DEFAULT_MIN = 4
DEFAULT_MAX = 9


# Simplified local@domain.tld shape, not RFC 5322
REGEX_PATTERNS = {
    "email": re.compile(r"^\w+(?:-\w+)*@\w+(?:-\w+)*(?:\.\w{2,3})+\Z", re.ASCII),
    "digit": re.compile(r"[0-9]"),
    "symbol": re.compile(r'[!@#$%^&*(),.?":{}|<>]'),
    "lowercase": re.compile(r"[a-z]"),
    "uppercase": re.compile(r"[A-Z]"),
}


VALIDATION_MESSAGES = {
    "email": "must be a valid email address",
    "digit": "must include at least one digit",
    "symbol": "must include at least one special character",
    "pattern": "does not match the pattern provided",
    "required": "must not be empty",
    "matches": "does not match {property}",
    "lowercase": "must include at least one lowercase character",
    "uppercase": "must include at least one uppercase character",
    "min_length": "must be at least {length} character(s) long",
    "max_length": "cannot be longer than {length} character(s)",
}


ERROR_MESSAGES = {
    "invalid_type": "{name} must be of type {type}",
    "empty_property": "{name} cannot be empty",
    "invalid_length": "Length cannot be negative",
    "invalid_pattern": "Invalid regex pattern: {error}",
    "min_over_max": "Minimum length cannot be greater than the maximum",
    "required_chars": (
        "Minimum or maximum length cannot be less than "
        "the number of required characters"
    ),
    "schema_frozen": "Schema cannot be changed after it has been finalized",
    "invalid_schema_type": "Invalid schema type: {type}",
    "invalid_value_type": "Value must be a string or a form mapping, got {type}",
    "invalid_field_value": "Value of '{field}' must be a string, got {type}",
    "form_schema_mismatch": "Schema and form do not match: no schema for '{field}'",
    "no_matching_property": "No {property} property to match",
    "unbound_matching": "'{property}' value is required to validate a matching property",
    "invalid_options": "Invalid validation options: {error}",
    "invalid_definition": "Invalid form definition: {error}",
}

# Order in which generic rules appear in a finalized descriptor
CHARACTER_CLASSES = ("digit", "symbol", "uppercase", "lowercase")
