"""
Form definitions in YAML.

Declares a form schema and its validation options in a file instead of
code:

    options:
      include_label: true
    fields:
      password:
        min: 5
        digit: true
        symbol: "needs a special character"
        required: true
      confirm_password:
        matches: password
        messages:
          matches: passwords do not match

Rule flags take ``true`` for the default message or a string for a custom
one; an empty string is an empty custom message, not "off". ``messages``
overrides messages by rule name and rejects unknown rule names.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import ERROR_MESSAGES, VALIDATION_MESSAGES
from .errors import SchemaDefinitionError
from .models import ValidationOptions
from .schema import Schema

logger = structlog.wrap_logger(logging.getLogger(__name__))

Flag = Union[bool, str]


class FieldDefinition(BaseModel):
    """Rules for one field, as written in a definition file."""

    model_config = ConfigDict(extra="forbid")

    label: Optional[str] = None
    required: Flag = False
    min: Optional[int] = None
    max: Optional[int] = None
    digit: Flag = False
    symbol: Flag = False
    uppercase: Flag = False
    lowercase: Flag = False
    email: Flag = False
    pattern: Optional[str] = None
    matches: Optional[str] = None
    messages: Dict[str, str] = Field(default_factory=dict)

    @field_validator("messages")
    @classmethod
    def _known_rule_names(cls, messages: Dict[str, str]) -> Dict[str, str]:
        unknown = sorted(set(messages) - set(VALIDATION_MESSAGES))
        if unknown:
            raise ValueError(
                f"unknown rule names in messages: {', '.join(unknown)}; "
                f"expected one of {', '.join(sorted(VALIDATION_MESSAGES))}"
            )
        return messages

    def _custom(self, flag: Flag, rule_name: str) -> Optional[str]:
        if isinstance(flag, str):
            return flag
        return self.messages.get(rule_name)

    def build(self) -> Schema:
        """Create the Schema this definition describes."""
        schema = Schema()

        if self.label is not None:
            schema.label(self.label)
        if self.required is not False:
            schema.is_required(self._custom(self.required, "required"))
        if self.min is not None:
            schema.min(self.min, self.messages.get("min_length"))
        if self.max is not None:
            schema.max(self.max, self.messages.get("max_length"))

        builders = {
            "digit": schema.has_digit,
            "symbol": schema.has_symbol,
            "uppercase": schema.has_uppercase,
            "lowercase": schema.has_lowercase,
            "email": schema.is_email,
        }
        for name, builder in builders.items():
            flag = getattr(self, name)
            if flag is not False:
                builder(self._custom(flag, name))

        if self.pattern is not None:
            schema.has_pattern(self.pattern, self.messages.get("pattern"))
        if self.matches is not None:
            schema.matches(self.matches, self.messages.get("matches"))

        return schema


class FormDefinition(BaseModel):
    """A form schema and its validation options."""

    model_config = ConfigDict(extra="forbid")

    options: ValidationOptions = Field(default_factory=ValidationOptions)
    fields: Dict[str, FieldDefinition] = Field(default_factory=dict)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "FormDefinition":
        """
        Load a form definition from YAML content.

        Raises:
            SchemaDefinitionError: If the YAML is malformed or does not
                describe a form.
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise SchemaDefinitionError(
                ERROR_MESSAGES["invalid_definition"].format(error=f"YAML parse error: {e}")
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SchemaDefinitionError(
                ERROR_MESSAGES["invalid_definition"].format(
                    error=f"expected a mapping, got {type(data).__name__}"
                )
            )

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SchemaDefinitionError(
                ERROR_MESSAGES["invalid_definition"].format(error=e)
            ) from e

    @classmethod
    def from_file(cls, path: Path) -> "FormDefinition":
        """Load a form definition from a file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise SchemaDefinitionError(
                ERROR_MESSAGES["invalid_definition"].format(error=e)
            ) from e
        definition = cls.from_yaml(content)
        logger.info("form_definition_loaded", path=str(path), fields=list(definition.fields))
        return definition

    def build(self) -> Tuple[Dict[str, Schema], ValidationOptions]:
        """
        Build the form schema.

        Returns:
            Tuple of the form schema and the validation options.
        """
        form_schema = {name: field.build() for name, field in self.fields.items()}
        return form_schema, self.options


def load_form_schema(path: Path) -> Tuple[Dict[str, Schema], ValidationOptions]:
    """
    Convenience function to load a form schema from a YAML file.

    Args:
        path: Path to the definition file.

    Returns:
        Tuple of the form schema and the validation options.
    """
    return FormDefinition.from_file(Path(path)).build()
