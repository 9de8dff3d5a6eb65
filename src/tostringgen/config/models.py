"""
Core configuration models for tostringgen.

Defines all configuration structures using Pydantic for validation.
"""

import re
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class InsertPolicy(str, Enum):
    """Where a newly generated method lands in the class body."""

    AT_CARET = "at_caret"
    AFTER_EQUALS_HASHCODE = "after_equals_hashcode"
    LAST = "last"


class ConflictPolicy(str, Enum):
    """What happens when a method with the target name already exists."""

    REPLACE = "replace"  # Existing method is replaced in place
    DUPLICATE = "duplicate"  # Keep both, let the user sort it out
    CANCEL = "cancel"  # Abort without touching the file


FILTERABLE_MODIFIERS = frozenset(
    {"static", "transient", "volatile", "final", "public", "protected", "private"}
)


def _check_regex(value: str | None) -> str | None:
    if value:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid regular expression '{value}': {e}")
    return value or None


# ============================================================================
# Member Filter Configuration
# ============================================================================


class FilterConfig(BaseModel):
    """Rules deciding which fields and getters are handed to the template."""

    exclude_modifiers: set[str] = Field(
        default_factory=lambda: {"static", "transient"},
        description="Members carrying any of these modifiers are excluded",
    )
    exclude_constants: bool = Field(default=True, description="Exclude constant fields")
    exclude_enum_fields: bool = Field(default=False, description="Exclude enum-valued fields")
    exclude_loggers: bool = Field(default=True, description="Exclude logger fields")
    exclude_name_regex: str | None = Field(
        default=None, description="Exclude fields whose name fully matches this regex"
    )
    exclude_type_regex: str | None = Field(
        default=None, description="Exclude fields whose type fully matches this regex"
    )
    exclude_method_name_regex: str | None = Field(
        default=None, description="Exclude getters whose name fully matches this regex"
    )
    exclude_return_type_regex: str | None = Field(
        default=None, description="Exclude getters whose return type fully matches this regex"
    )
    include_getters: bool = Field(default=False, description="Let getter methods participate")
    sort_members: bool = Field(default=False, description="Sort members by name")
    sort_descending: bool = Field(default=False, description="Sort in descending order")

    @field_validator("exclude_modifiers")
    @classmethod
    def _validate_modifiers(cls, value: set[str]) -> set[str]:
        unknown = set(value) - FILTERABLE_MODIFIERS
        if unknown:
            raise ValueError(
                f"Unknown modifiers {sorted(unknown)}. Valid modifiers: {sorted(FILTERABLE_MODIFIERS)}"
            )
        return set(value)

    @field_validator(
        "exclude_name_regex",
        "exclude_type_regex",
        "exclude_method_name_regex",
        "exclude_return_type_regex",
    )
    @classmethod
    def _validate_regex(cls, value: str | None) -> str | None:
        return _check_regex(value)


# ============================================================================
# Generation Configuration
# ============================================================================


class GenerationConfig(BaseModel):
    """Configuration for a generate run."""

    template: str = Field(default="concat", description="Name of the built-in template")
    method_name: str = Field(default="toString", description="Name of the generated method")
    insert_policy: InsertPolicy = Field(default=InsertPolicy.AT_CARET)
    conflict_policy: ConflictPolicy = Field(default=ConflictPolicy.REPLACE)
    jump_to_method: bool = Field(
        default=True, description="Move the caret to the generated method when done"
    )
    auto_imports: bool = Field(default=False, description="Add import statements after generating")
    auto_import_packages: list[str] = Field(
        default_factory=lambda: ["java.util.*"],
        description="Imports added when auto_imports is enabled",
    )


# ============================================================================
# Inspection Configuration
# ============================================================================


class InspectionConfig(BaseModel):
    """Options for the 'class does not override toString()' check."""

    exclude_class_names: str | None = Field(
        default=None, description="Skip classes whose name fully matches this regex"
    )
    exclude_exception: bool = Field(default=True, description="Skip exception classes")
    exclude_deprecated: bool = Field(default=True, description="Skip deprecated classes")
    exclude_enum: bool = Field(default=False, description="Skip enum classes")
    exclude_abstract: bool = Field(default=False, description="Skip abstract classes")

    @field_validator("exclude_class_names")
    @classmethod
    def _validate_regex(cls, value: str | None) -> str | None:
        return _check_regex(value)


# ============================================================================
# Main Configuration
# ============================================================================


class ToStringGenConfig(BaseModel):
    """Root configuration model for tostringgen."""

    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    inspection: InspectionConfig = Field(default_factory=InspectionConfig)

    def describe(self) -> str:
        """Get a human-readable one-line description of the run settings."""
        gen = self.generation
        return (
            f"{gen.method_name}() from '{gen.template}' "
            f"(insert: {gen.insert_policy.value}, conflict: {gen.conflict_policy.value})"
        )
