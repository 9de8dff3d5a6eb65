"""
Configuration loader for tostringgen.

Handles loading configuration from YAML files and command line arguments.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import (
    ConflictPolicy,
    FilterConfig,
    GenerationConfig,
    InsertPolicy,
    ToStringGenConfig,
)


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


def load_config_from_yaml(config_path: Path) -> ToStringGenConfig:
    """Load configuration from a YAML file."""
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if raw_config is None:
        raise ConfigurationError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration file must contain a mapping at the top level")

    try:
        return ToStringGenConfig(**raw_config)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed:\n{e}")


def create_config_from_args(
    template: str | None = None,
    insert_policy: str | None = None,
    conflict_policy: str | None = None,
    include_getters: bool | None = None,
    base: ToStringGenConfig | None = None,
    **kwargs: Any,
) -> ToStringGenConfig:
    """Create configuration from CLI arguments, layered over an optional base config."""
    config = base.model_copy(deep=True) if base else ToStringGenConfig()

    try:
        generation: dict[str, Any] = config.generation.model_dump()
        if template:
            generation["template"] = template
        if insert_policy:
            generation["insert_policy"] = InsertPolicy(insert_policy.lower().replace("-", "_"))
        if conflict_policy:
            generation["conflict_policy"] = ConflictPolicy(conflict_policy.lower())
        for key in ("method_name", "jump_to_method", "auto_imports"):
            if kwargs.get(key) is not None:
                generation[key] = kwargs[key]

        filter_options: dict[str, Any] = config.filter.model_dump()
        if include_getters is not None:
            filter_options["include_getters"] = include_getters

        return ToStringGenConfig(
            generation=GenerationConfig(**generation),
            filter=FilterConfig(**filter_options),
            inspection=config.inspection,
        )
    except ValueError as e:
        # ValidationError is a ValueError too
        raise ConfigurationError(str(e))


def generate_default_config(output_path: Path) -> None:
    """Generate a default configuration file."""
    default_config = {
        "generation": {
            "template": "concat",
            "method_name": "toString",
            "insert_policy": "at_caret",
            "conflict_policy": "replace",
            "jump_to_method": True,
            "auto_imports": False,
            "auto_import_packages": ["java.util.*"],
        },
        "filter": {
            "exclude_modifiers": ["static", "transient"],
            "exclude_constants": True,
            "exclude_enum_fields": False,
            "exclude_loggers": True,
            "exclude_name_regex": None,
            "exclude_type_regex": None,
            "exclude_method_name_regex": None,
            "exclude_return_type_regex": None,
            "include_getters": False,
            "sort_members": False,
            "sort_descending": False,
        },
        "inspection": {
            "exclude_class_names": None,
            "exclude_exception": True,
            "exclude_deprecated": True,
            "exclude_enum": False,
            "exclude_abstract": False,
        },
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        yaml.dump(default_config, f, default_flow_style=False, sort_keys=False)
