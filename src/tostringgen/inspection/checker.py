"""
Missing method inspection.

Batch check that reports classes which have members worth printing but do
not declare the generated method (toString() by default).
"""

import logging
import re
from dataclasses import dataclass

from tostringgen.config.models import FilterConfig, InspectionConfig
from tostringgen.generator.classifier import build_class_facts
from tostringgen.generator.filtering import available_members
from tostringgen.generator.signatures import find_method_by_name
from tostringgen.host.base import ClassHandle
from tostringgen.host.java.source_file import JavaSourceFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Problem:
    """A class that should declare the method but does not."""

    class_name: str
    qualified_name: str
    method_name: str
    offset: int
    line: int | None = None

    @property
    def message(self) -> str:
        return f"Class '{self.class_name}' does not override {self.method_name}() method"


class MissingMethodInspection:
    """Checks classes for a missing generated method."""

    def __init__(
        self,
        config: InspectionConfig | None = None,
        filter_config: FilterConfig | None = None,
        method_name: str = "toString",
    ):
        self.config = config or InspectionConfig()
        self.filter_config = filter_config or FilterConfig()
        self.method_name = method_name

    def _skip_reason(self, clazz: ClassHandle) -> str | None:
        facts = build_class_facts(clazz)
        if clazz.is_interface:
            return "interface"
        if self.config.exclude_exception and facts.is_exception:
            return "exception class"
        if self.config.exclude_deprecated and facts.is_deprecated:
            return "deprecated"
        if self.config.exclude_enum and facts.is_enum:
            return "enum"
        if self.config.exclude_abstract and facts.is_abstract:
            return "abstract"
        if self.config.exclude_class_names and re.fullmatch(self.config.exclude_class_names, clazz.name):
            return "excluded by name"
        if not clazz.fields:
            return "no fields"
        if available_members(clazz, facts, self.filter_config).is_empty():
            return "no available members"
        return None

    def check_class(self, clazz: ClassHandle) -> Problem | None:
        reason = self._skip_reason(clazz)
        if reason is not None:
            logger.debug("Skipping %s: %s", clazz.name, reason)
            return None
        if find_method_by_name(clazz, self.method_name) is not None:
            return None
        return Problem(
            class_name=clazz.name,
            qualified_name=clazz.qualified_name,
            method_name=self.method_name,
            offset=clazz.element.text_offset,
        )

    def check_file(self, source: JavaSourceFile) -> list[Problem]:
        """Check every class of a file, nested classes included."""
        problems = []
        text = source.text
        for clazz in source.classes:
            problem = self.check_class(clazz)
            if problem is not None:
                line = text.count("\n", 0, problem.offset) + 1
                problems.append(
                    Problem(
                        problem.class_name,
                        problem.qualified_name,
                        problem.method_name,
                        problem.offset,
                        line,
                    )
                )
        logger.debug("%s: %d problems", source.path or "<text>", len(problems))
        return problems
