"""
Unit tests for configuration models and loading.
"""

import pytest
import yaml
from pydantic import ValidationError

from tostringgen.config.loader import (
    ConfigurationError,
    create_config_from_args,
    generate_default_config,
    load_config_from_yaml,
)
from tostringgen.config.models import (
    ConflictPolicy,
    FilterConfig,
    InsertPolicy,
    InspectionConfig,
    ToStringGenConfig,
)


class TestModels:
    """Test configuration defaults and validation."""

    def test_defaults(self):
        config = ToStringGenConfig()
        assert config.generation.template == "concat"
        assert config.generation.method_name == "toString"
        assert config.generation.insert_policy == InsertPolicy.AT_CARET
        assert config.generation.conflict_policy == ConflictPolicy.REPLACE
        assert config.generation.jump_to_method
        assert not config.generation.auto_imports
        assert config.filter.exclude_modifiers == {"static", "transient"}
        assert config.filter.exclude_constants
        assert not config.filter.include_getters
        assert config.inspection.exclude_exception

    def test_describe(self):
        assert ToStringGenConfig().describe() == (
            "toString() from 'concat' (insert: at_caret, conflict: replace)"
        )

    def test_unknown_modifier(self):
        with pytest.raises(ValidationError):
            FilterConfig(exclude_modifiers={"static", "sometimes"})

    def test_invalid_regex(self):
        with pytest.raises(ValidationError):
            FilterConfig(exclude_name_regex="(unclosed")
        with pytest.raises(ValidationError):
            InspectionConfig(exclude_class_names="[")

    def test_empty_regex_means_none(self):
        assert FilterConfig(exclude_type_regex="").exclude_type_regex is None


class TestLoader:
    """Test YAML loading and CLI layering."""

    def test_default_config_round_trip(self, tmp_path):
        path = tmp_path / "conf" / "tostringgen.yaml"
        generate_default_config(path)

        raw = yaml.safe_load(path.read_text())
        assert raw["generation"]["insert_policy"] == "at_caret"

        config = load_config_from_yaml(path)
        assert config == ToStringGenConfig()

    def test_partial_config(self, tmp_path):
        path = tmp_path / "tostringgen.yaml"
        path.write_text(
            "generation:\n"
            "  insert_policy: last\n"
            "  conflict_policy: cancel\n"
            "filter:\n"
            "  include_getters: true\n"
            "  exclude_modifiers: [static]\n"
        )
        config = load_config_from_yaml(path)
        assert config.generation.insert_policy == InsertPolicy.LAST
        assert config.generation.conflict_policy == ConflictPolicy.CANCEL
        assert config.filter.include_getters
        assert config.filter.exclude_modifiers == {"static"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config_from_yaml(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ConfigurationError):
            load_config_from_yaml(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("generation: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config_from_yaml(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("generation:\n  insert_policy: somewhere\n")
        with pytest.raises(ConfigurationError):
            load_config_from_yaml(path)

    def test_args_override_base(self):
        base = ToStringGenConfig(filter=FilterConfig(sort_members=True))
        config = create_config_from_args(
            template="string_builder",
            insert_policy="after-equals-hashcode",
            conflict_policy="Duplicate",
            include_getters=True,
            base=base,
            method_name="describe",
        )
        assert config.generation.template == "string_builder"
        assert config.generation.insert_policy == InsertPolicy.AFTER_EQUALS_HASHCODE
        assert config.generation.conflict_policy == ConflictPolicy.DUPLICATE
        assert config.generation.method_name == "describe"
        assert config.filter.include_getters
        assert config.filter.sort_members
        # base is not modified
        assert not base.filter.include_getters

    def test_args_unset_keep_base(self):
        base = ToStringGenConfig()
        assert create_config_from_args(base=base) == base

    def test_invalid_policy_arg(self):
        with pytest.raises(ConfigurationError):
            create_config_from_args(conflict_policy="overwrite")
