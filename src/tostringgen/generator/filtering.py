"""
Member filtering.

Applies the user's exclusion rules once, before the template context is
built, and returns the fields and getters available for generation.
"""

import logging
import re
from dataclasses import dataclass

from tostringgen.config.models import FilterConfig
from tostringgen.generator.classifier import classify_field, classify_method
from tostringgen.generator.facts import ClassFacts, MemberFacts
from tostringgen.host.base import ClassHandle

logger = logging.getLogger(__name__)

LOGGER_TYPES = frozenset(
    {
        "java.util.logging.Logger",
        "org.apache.log4j.Logger",
        "org.apache.logging.log4j.Logger",
        "org.apache.commons.logging.Log",
        "org.slf4j.Logger",
    }
)


@dataclass(frozen=True)
class AvailableMembers:
    """Members that passed the filter, fields first."""

    fields: tuple[MemberFacts, ...]
    methods: tuple[MemberFacts, ...]

    @property
    def members(self) -> tuple[MemberFacts, ...]:
        return self.fields + self.methods

    def is_empty(self) -> bool:
        return not self.fields and not self.methods


def _matches(regex: str | None, text: str) -> bool:
    return bool(regex) and re.fullmatch(regex, text) is not None  # type: ignore[arg-type]


def _excluded_by_modifier(member: MemberFacts, config: FilterConfig) -> bool:
    present = {
        "static": member.is_static,
        "transient": member.is_transient,
        "volatile": member.is_volatile,
        "final": member.is_final,
        "public": member.visibility == "public",
        "protected": member.visibility == "protected",
        "private": member.visibility == "private",
    }
    return any(present[m] for m in config.exclude_modifiers)


def field_available(member: MemberFacts, config: FilterConfig) -> bool:
    if config.exclude_constants and member.is_constant:
        return False
    if _excluded_by_modifier(member, config):
        return False
    if config.exclude_enum_fields and member.is_enum:
        return False
    if config.exclude_loggers and member.type is not None and member.type.canonical_text in LOGGER_TYPES:
        return False
    if _matches(config.exclude_name_regex, member.name):
        return False
    if _matches(config.exclude_type_regex, member.type_name):
        return False
    return True


def method_available(
    member: MemberFacts,
    config: FilterConfig,
    field_names: set[str],
    parameter_count: int = 0,
    is_abstract: bool = False,
) -> bool:
    """Decide whether a getter participates; only getters ever do."""
    if not config.include_getters or not member.is_getter:
        return False
    if parameter_count or is_abstract or member.is_static:
        return False
    if member.method_name == "getClass":
        return False
    if _excluded_by_modifier(member, config):
        return False
    if _matches(config.exclude_method_name_regex, member.method_name or ""):
        return False
    if _matches(config.exclude_return_type_regex, member.type_name):
        return False
    # A getter for a field that is already listed would print it twice
    return member.field_name not in field_names


def sort_members(members: list[MemberFacts], config: FilterConfig) -> list[MemberFacts]:
    if not config.sort_members:
        return members
    return sorted(members, key=lambda m: m.name, reverse=config.sort_descending)


def available_members(
    clazz: ClassHandle, owner: ClassFacts, config: FilterConfig
) -> AvailableMembers:
    """Classify the members of ``clazz`` and keep those the filter lets through."""
    fields = [classify_field(f, owner) for f in clazz.fields]
    fields = [f for f in fields if field_available(f, config)]
    field_names = {f.name for f in fields}

    methods = []
    for method in clazz.methods:
        if method.is_constructor:
            continue
        facts = classify_method(method, owner)
        if method_available(
            facts,
            config,
            field_names,
            parameter_count=len(method.parameter_types),
            is_abstract=method.has_modifier("abstract"),
        ):
            methods.append(facts)

    logger.debug(
        "%s: %d fields and %d getters available", owner.name, len(fields), len(methods)
    )
    return AvailableMembers(
        fields=tuple(sort_members(fields, config)),
        methods=tuple(sort_members(methods, config)),
    )
