"""
Validation Engine.

Validates a single string against one schema, or a form (a mapping of
field names to strings) against a form schema (a mapping of field names to
schemas).

Usage:
    result = validate("Abc123!", Schema().min(5).max(10).has_digit())
    result = validate(form, {"password": ..., "confirm": Schema().matches("password")})
    if not result.is_valid:
        # render result.errors
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import structlog

from .constants import EMPTY_VALUE, ERROR_MESSAGES
from .errors import (
    FormSchemaMismatchError,
    InvalidSchemaTypeError,
    InvalidValueTypeError,
    MatchingPropertyError,
)
from .models import Descriptor, ValidationOptions, ValidationResult
from .schema import Schema

logger = structlog.wrap_logger(logging.getLogger(__name__))

SchemaLike = Union[Schema, Descriptor]
FormSchema = Mapping[str, SchemaLike]
OptionsLike = Union[ValidationOptions, Mapping[str, Any], None]


def validate(
    value: Union[str, Mapping[str, str]],
    schema: Union[SchemaLike, FormSchema],
    options: OptionsLike = None,
) -> ValidationResult:
    """
    Validate a string or a form against the corresponding schema.

    Args:
        value: A single string, or a mapping of field names to strings.
        schema: A Schema or Descriptor for a string, a form schema for a form.
        options: ValidationOptions or a mapping of option names to booleans.

    Returns:
        ValidationResult with validity, error messages and, when
        ``include_rules`` is set, the names of the failed rules.

    Raises:
        InvalidValueTypeError: If value is neither a string nor a mapping.
        ConfigurationError: If the schema is invalid or does not fit the form.
    """
    options = ValidationOptions.coerce(options)

    if isinstance(value, str):
        descriptor = resolve_schema(schema)
        if not descriptor.is_bound:
            raise MatchingPropertyError(
                ERROR_MESSAGES["unbound_matching"].format(property=descriptor.matching_property)
            )
        result = validate_property(value, descriptor, options)
        logger.debug(
            "property_validated",
            rules=descriptor.rule_names,
            is_valid=result.is_valid,
            errors=result.total_errors,
        )
        return result

    if isinstance(value, Mapping):
        return FormValidator(schema).validate(value, options)

    raise InvalidValueTypeError(
        ERROR_MESSAGES["invalid_value_type"].format(type=type(value).__name__)
    )


def resolve_schema(schema: SchemaLike) -> Descriptor:
    """
    Return the Descriptor for a Schema, finalizing it if needed.

    Raises:
        InvalidSchemaTypeError: If schema is neither a Schema nor a Descriptor.
    """
    if isinstance(schema, Descriptor):
        return schema
    if isinstance(schema, Schema):
        return schema.finalize()
    raise InvalidSchemaTypeError(
        ERROR_MESSAGES["invalid_schema_type"].format(type=type(schema).__name__)
    )


def find_matching_property(form_schema: FormSchema, field_name: str) -> Optional[str]:
    """
    Find the field paired with ``field_name`` by a matching rule.

    The field's own matching property wins. Otherwise the first other field
    whose matching property points back at ``field_name`` is returned.

    Args:
        form_schema: Mapping of field names to schemas.
        field_name: Field to look up.

    Returns:
        Name of the counterpart field, or None.
    """
    own = form_schema.get(field_name)
    if own is not None and own.matching_property:
        return own.matching_property

    for name, schema in form_schema.items():
        if name != field_name and schema.matching_property == field_name:
            return name
    return None


def validate_property(
    value: str,
    descriptor: Descriptor,
    options: ValidationOptions,
) -> ValidationResult:
    """
    Run a descriptor's rules against one value.

    Empty optional values pass without running any rule; empty required
    values fail with only the required message.
    """
    errors: List[str] = []
    failed_rules: Dict[str, bool] = {}

    if value == EMPTY_VALUE:
        if descriptor.required is not None:
            errors.append(_error_message(descriptor.label, descriptor.required, options))
            failed_rules["required"] = True
        return _property_result(errors, failed_rules, options)

    for rule in descriptor.rules:
        outcome = rule(value)
        if outcome is not True:
            errors.append(_error_message(descriptor.label, outcome, options))
            failed_rules[rule.name] = True
            if options.abort_early:
                break

    return _property_result(errors, failed_rules, options)


class FormValidator:
    """
    Validates forms against one form schema.

    The index of matching pairs (in both directions) is built once here.
    A schema is finalized the first time its field is evaluated, so a
    validation only touches the fields in the form and their declared
    counterparts.
    """

    def __init__(self, form_schema: FormSchema):
        """
        Initialize the validator.

        Args:
            form_schema: Mapping of field names to Schemas or Descriptors.

        Raises:
            InvalidSchemaTypeError: If form_schema is not a mapping of
                Schemas or Descriptors.
        """
        if not isinstance(form_schema, Mapping):
            raise InvalidSchemaTypeError(
                ERROR_MESSAGES["invalid_schema_type"].format(type=type(form_schema).__name__)
            )
        for schema in form_schema.values():
            if not isinstance(schema, (Schema, Descriptor)):
                raise InvalidSchemaTypeError(
                    ERROR_MESSAGES["invalid_schema_type"].format(type=type(schema).__name__)
                )
        self.schemas: Dict[str, SchemaLike] = dict(form_schema)
        self._descriptors: Dict[str, Descriptor] = {}
        self._counterparts = self._index_counterparts()

    def _index_counterparts(self) -> Dict[str, str]:
        counterparts: Dict[str, str] = {}
        for name, schema in self.schemas.items():
            if schema.matching_property:
                counterparts[name] = schema.matching_property
        for name, schema in self.schemas.items():
            target = schema.matching_property
            if target and target != name:
                counterparts.setdefault(target, name)
        return counterparts

    def counterpart(self, field_name: str) -> Optional[str]:
        """Field paired with ``field_name`` by a matching rule, if any."""
        return self._counterparts.get(field_name)

    def descriptor(self, field_name: str) -> Descriptor:
        """
        Finalized Descriptor for a field.

        Raises:
            FormSchemaMismatchError: If the field has no schema.
            ConfigurationError: If the field's schema fails its invariant checks.
        """
        descriptor = self._descriptors.get(field_name)
        if descriptor is None:
            schema = self.schemas.get(field_name)
            if schema is None:
                raise FormSchemaMismatchError(
                    ERROR_MESSAGES["form_schema_mismatch"].format(field=field_name)
                )
            descriptor = self._descriptors[field_name] = resolve_schema(schema)
        return descriptor

    def validate(self, form: Mapping[str, str], options: OptionsLike = None) -> ValidationResult:
        """
        Validate every field present in the form.

        Raises:
            FormSchemaMismatchError: If a form field has no schema.
            MatchingPropertyError: If a matched field's value is missing.
        """
        if not isinstance(form, Mapping):
            raise InvalidValueTypeError(
                ERROR_MESSAGES["invalid_value_type"].format(type=type(form).__name__)
            )
        return self._validate_fields(form, list(form), ValidationOptions.coerce(options))

    def validate_field(
        self,
        form: Mapping[str, str],
        field_name: str,
        options: OptionsLike = None,
    ) -> ValidationResult:
        """
        Validate one edited field together with its counterpart.

        Editing either side of a matching pair re-checks both, provided the
        counterpart's value is present in the form.

        Args:
            form: Current form values.
            field_name: Field that changed.
            options: Validation options.

        Returns:
            ValidationResult covering only the evaluated fields.
        """
        names = [field_name]
        other = self.counterpart(field_name)
        if other is not None and other in form:
            names.append(other)
        return self._validate_fields(form, names, ValidationOptions.coerce(options))

    def _validate_fields(
        self,
        form: Mapping[str, str],
        names: Iterable[str],
        options: ValidationOptions,
    ) -> ValidationResult:
        form_errors: Dict[str, List[str]] = {}
        form_failed_rules: Dict[str, Dict[str, bool]] = {}
        evaluated = 0

        for name in names:
            descriptor = self.descriptor(name)
            value = form.get(name)
            if not isinstance(value, str):
                raise InvalidValueTypeError(
                    ERROR_MESSAGES["invalid_field_value"].format(
                        field=name, type=type(value).__name__
                    )
                )

            if descriptor.matching_property:
                descriptor = self._bind_matching(descriptor, form)

            result = validate_property(value, descriptor, options)
            evaluated += 1
            if not result.is_valid:
                form_errors[name] = list(result.errors)
                if result.failed_rules is not None:
                    form_failed_rules[name] = dict(result.failed_rules)

        result = ValidationResult(
            is_valid=not form_errors,
            errors=form_errors,
            failed_rules=form_failed_rules if options.include_rules else None,
        )
        logger.debug(
            "form_validated",
            fields=evaluated,
            is_valid=result.is_valid,
            invalid_fields=sorted(form_errors),
        )
        return result

    @staticmethod
    def _bind_matching(descriptor: Descriptor, form: Mapping[str, str]) -> Descriptor:
        matching_value = form.get(descriptor.matching_property)
        if not isinstance(matching_value, str):
            raise MatchingPropertyError(
                ERROR_MESSAGES["no_matching_property"].format(
                    property=descriptor.matching_property
                )
            )
        return descriptor.bind_matching(matching_value)


def _property_result(
    errors: List[str],
    failed_rules: Dict[str, bool],
    options: ValidationOptions,
) -> ValidationResult:
    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        failed_rules=failed_rules if options.include_rules else None,
    )


def _error_message(label: Optional[str], message: str, options: ValidationOptions) -> str:
    return f"{label} {message}" if options.include_label and label else message
