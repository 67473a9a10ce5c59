"""
Tests for YAML form definitions.
"""

import pytest

from backend.formspec import (
    FieldDefinition,
    FormDefinition,
    InvalidLengthError,
    SchemaDefinitionError,
    ValidationOptions,
    load_form_schema,
    validate,
)

SIGNUP_FORM = """
options:
  include_label: true
fields:
  username:
    label: Username
    required: true
    min: 5
    lowercase: true
    uppercase: true
  password:
    min: 5
    digit: true
    symbol: needs a special character
    required: true
  confirm_password:
    matches: password
    required: true
    messages:
      matches: passwords do not match
"""


class TestFieldDefinition:
    """Tests for building a schema from one field definition."""

    def test_build_generic_rules(self):
        """Test generic rules are built in canonical order."""
        definition = FieldDefinition(min=2, max=6, lowercase=True, digit=True)
        descriptor = definition.build().finalize()
        assert descriptor.rule_names == ["min_length", "max_length", "digit", "lowercase"]

    def test_custom_messages(self):
        """Test string flags and the messages mapping set custom messages."""
        definition = FieldDefinition(
            min=3,
            digit="add a digit",
            required="required!",
            messages={"min_length": "too short"},
        )
        result = validate("ab", definition.build())
        assert result.errors == ["too short", "add a digit"]
        assert validate("", definition.build()).errors == ["required!"]

    def test_email_definition(self):
        """Test email flag."""
        schema = FieldDefinition(email=True, label="Email").build()
        assert schema.finalize().rule_names == ["email"]
        assert schema.alias == "Email"

    def test_pattern_definition(self):
        """Test pattern with a custom message."""
        schema = FieldDefinition(pattern=r"^\d+$", messages={"pattern": "digits only"}).build()
        assert validate("12a", schema).errors == ["digits only"]

    def test_empty_string_flags_keep_rules(self):
        """Test an empty string flag enables the rule with an empty message."""
        form_schema = {"name": FieldDefinition(required="").build()}
        result = validate({"name": ""}, form_schema)
        assert result.is_valid is False
        assert result.errors == {"name": [""]}

        schema = FieldDefinition(digit="").build()
        assert schema.finalize().rule_names == ["min_length", "max_length", "digit"]
        result = validate({"pw": "abcdef"}, {"pw": schema}, {"include_rules": True})
        assert result.is_valid is False
        assert result.failed_rules == {"pw": {"digit": True}}

    def test_builder_checks_still_apply(self):
        """Test builder argument checks run while building."""
        with pytest.raises(InvalidLengthError):
            FieldDefinition(min=-1).build()


class TestFormDefinition:
    """Tests for loading whole form definitions."""

    def test_from_yaml(self):
        """Test a complete sign-up form."""
        definition = FormDefinition.from_yaml(SIGNUP_FORM)
        form_schema, options = definition.build()

        assert set(form_schema) == {"username", "password", "confirm_password"}
        assert options == ValidationOptions(include_label=True)
        assert form_schema["confirm_password"].matching_property == "password"

        form = {"username": "ab", "password": "abcde1", "confirm_password": "other"}
        result = validate(form, form_schema, options)
        assert result.errors == {
            "username": [
                "Username must be at least 5 character(s) long",
                "Username must include at least one uppercase character",
            ],
            "password": ["needs a special character"],
            "confirm_password": ["passwords do not match"],
        }

    def test_empty_document(self):
        """Test an empty document is an empty form."""
        definition = FormDefinition.from_yaml("")
        assert definition.fields == {}
        assert definition.options == ValidationOptions()

    def test_malformed_yaml(self):
        """Test YAML parse errors are definition errors."""
        with pytest.raises(SchemaDefinitionError, match="YAML parse error"):
            FormDefinition.from_yaml("fields: [unclosed")

    def test_not_a_mapping(self):
        """Test a top-level list is rejected."""
        with pytest.raises(SchemaDefinitionError):
            FormDefinition.from_yaml("- username\n- password\n")

    def test_unknown_field_key(self):
        """Test unknown rule keys are rejected."""
        with pytest.raises(SchemaDefinitionError):
            FormDefinition.from_yaml("fields:\n  username:\n    minimum: 5\n")

    def test_empty_string_flags_in_yaml(self):
        """Test quoted empty flags in a definition file still enable rules."""
        definition = FormDefinition.from_yaml("fields:\n  name:\n    required: ''\n")
        form_schema, options = definition.build()
        assert validate({"name": ""}, form_schema, options).errors == {"name": [""]}

    def test_unknown_message_rule_name(self):
        """Test messages keyed by an unknown rule name are rejected."""
        with pytest.raises(SchemaDefinitionError, match="unknown rule names in messages: min"):
            FormDefinition.from_yaml("fields:\n  name:\n    min: 3\n    messages:\n      min: too short\n")

    def test_known_message_rule_names(self):
        """Test every rule name is accepted as a messages key."""
        definition = FormDefinition.from_yaml(
            "fields:\n  name:\n    min: 3\n    messages:\n      min_length: too short\n"
        )
        form_schema, _ = definition.build()
        assert validate({"name": "ab"}, form_schema).errors == {"name": ["too short"]}

    def test_unknown_option(self):
        """Test unknown options are rejected."""
        with pytest.raises(SchemaDefinitionError):
            FormDefinition.from_yaml("options:\n  stop_early: true\n")

    def test_load_form_schema(self, tmp_path):
        """Test loading from a file."""
        path = tmp_path / "signup.yaml"
        path.write_text(SIGNUP_FORM, encoding="utf-8")

        form_schema, options = load_form_schema(path)
        form = {"password": "Abc123!", "confirm_password": "Abc123!"}
        assert validate(form, form_schema, options).is_valid is True

    def test_missing_file(self, tmp_path):
        """Test a missing file is a definition error."""
        with pytest.raises(SchemaDefinitionError):
            load_form_schema(tmp_path / "missing.yaml")
