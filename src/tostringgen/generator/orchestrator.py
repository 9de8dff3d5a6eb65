"""
Code generation orchestrator.

Drives one generate request through its states:

    CLASSIFYING -> TEMPLATING -> CONFLICT_CHECK -> {CANCELLED | INSERTING}
        -> JAVADOC_MERGE -> ANNOTATION_MERGE -> DONE

A class without available members ends in EMPTY right after classification.
Everything from INSERTING on runs in one host transaction.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from tostringgen.config.models import (
    ConflictPolicy,
    FilterConfig,
    InsertPolicy,
    ToStringGenConfig,
)
from tostringgen.generator.classifier import build_class_facts
from tostringgen.generator.conflict import get_conflict_strategy
from tostringgen.generator.errors import InsertionError, TemplateError
from tostringgen.generator.filtering import available_members
from tostringgen.generator.insertion import get_insertion_strategy
from tostringgen.generator.signatures import (
    TO_STRING_SIGNATURE,
    MethodSignature,
    find_method_by_name,
)
from tostringgen.generator.template_engine import (
    GeneratedUnit,
    TemplateContext,
    TemplateEngine,
)
from tostringgen.host.base import ClassHandle, HostEditError, MethodHandle, SourceHost

logger = logging.getLogger(__name__)


class GenerationState(str, Enum):
    CLASSIFYING = "classifying"
    TEMPLATING = "templating"
    CONFLICT_CHECK = "conflict_check"
    CANCELLED = "cancelled"
    INSERTING = "inserting"
    JAVADOC_MERGE = "javadoc_merge"
    ANNOTATION_MERGE = "annotation_merge"
    DONE = "done"
    EMPTY = "empty"


class GenerationStatus(str, Enum):
    GENERATED = "generated"
    CANCELLED = "cancelled"  # Conflict policy was Cancel and the method existed
    EMPTY = "empty"  # Nothing to generate from


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a generate request."""

    status: GenerationStatus
    state: GenerationState
    unit: GeneratedUnit | None = None
    method: MethodHandle | None = None

    @property
    def generated(self) -> bool:
        return self.status == GenerationStatus.GENERATED

    @property
    def cancelled(self) -> bool:
        return self.status == GenerationStatus.CANCELLED


class CodeGenerationOrchestrator:
    """Runs generate requests against one host."""

    def __init__(
        self,
        host: SourceHost,
        config: ToStringGenConfig | None = None,
        engine: TemplateEngine | None = None,
    ):
        self.host = host
        self.config = config or ToStringGenConfig()
        self.engine = engine or TemplateEngine()
        self.state: GenerationState | None = None

    def _enter(self, state: GenerationState) -> None:
        logger.debug("%s -> %s", self.state.value if self.state else "start", state.value)
        self.state = state

    def generate(
        self,
        clazz: ClassHandle,
        template_source: str,
        insert_policy: InsertPolicy = InsertPolicy.AT_CARET,
        conflict_policy: ConflictPolicy = ConflictPolicy.REPLACE,
        filter_config: FilterConfig | None = None,
        signature: MethodSignature = TO_STRING_SIGNATURE,
    ) -> GenerationResult:
        """
        Generate a method for ``clazz`` from a template.

        Raises:
            TemplateError: If the template fails; nothing is modified
            InsertionError: If the host rejects an edit; the transaction is rolled back
        """
        self.state = None
        filter_config = filter_config or self.config.filter

        # Facts are rebuilt on every call, the tree may have changed in between
        self._enter(GenerationState.CLASSIFYING)
        class_facts = build_class_facts(clazz)
        available = available_members(clazz, class_facts, filter_config)
        if available.is_empty():
            self._enter(GenerationState.EMPTY)
            logger.info("Nothing to generate %s() from in %s", signature.name, clazz.name)
            return GenerationResult(GenerationStatus.EMPTY, self.state)

        self._enter(GenerationState.TEMPLATING)
        context = TemplateContext(class_facts, available.fields, available.methods)
        try:
            unit = self.engine.evaluate(template_source, context, signature)
        except TemplateError as e:
            logger.warning("Template failed for %s: %s", clazz.name, e)
            raise

        self._enter(GenerationState.CONFLICT_CHECK)
        existing = find_method_by_name(clazz, signature.name)
        conflict = get_conflict_strategy(conflict_policy)
        if existing is not None and not conflict.proceeds:
            self._enter(GenerationState.CANCELLED)
            logger.info("%s() already exists in %s, cancelled", signature.name, clazz.name)
            return GenerationResult(GenerationStatus.CANCELLED, self.state, unit)

        insertion = get_insertion_strategy(insert_policy)
        with self.host.transaction():
            try:
                method = self._apply(clazz, unit, existing, conflict, insertion)
            except HostEditError as e:
                logger.warning("Could not insert %s() into %s: %s", signature.name, clazz.name, e)
                raise InsertionError(str(e)) from e

        self._enter(GenerationState.DONE)
        if self.config.generation.jump_to_method:
            self.host.move_caret_to(method.element)
        return GenerationResult(GenerationStatus.GENERATED, self.state, unit, method)

    def _apply(self, clazz, unit, existing, conflict, insertion) -> MethodHandle:
        self._enter(GenerationState.INSERTING)
        previous_doc = existing.doc_comment if existing is not None and conflict.replaces else None
        new_method = self.host.create_method_from_text(unit.method_text())
        if existing is not None:
            method = conflict.place(self.host, clazz, existing, new_method, insertion)
        else:
            method = insertion.insert(self.host, clazz, new_method)

        self._enter(GenerationState.JAVADOC_MERGE)
        if unit.javadoc:
            self.host.set_doc_comment(method, unit.javadoc)
        elif previous_doc:
            self.host.set_doc_comment(method, previous_doc)

        self._enter(GenerationState.ANNOTATION_MERGE)
        previous_name = None
        for annotation in unit.annotations:
            self.host.add_or_replace_annotation(method, annotation, after=previous_name)
            previous_name = annotation.lstrip("@").split("(", 1)[0].rsplit(".", 1)[-1]

        generation = self.config.generation
        if generation.auto_imports:
            for statement in generation.auto_import_packages:
                if not self.host.has_import(statement):
                    self.host.add_import(statement)
            self.host.optimize_imports()
        return method


def generate(
    host: SourceHost,
    clazz: ClassHandle,
    template_source: str,
    insert_policy: InsertPolicy = InsertPolicy.AT_CARET,
    conflict_policy: ConflictPolicy = ConflictPolicy.REPLACE,
    filter_config: FilterConfig | None = None,
    signature: MethodSignature = TO_STRING_SIGNATURE,
    config: ToStringGenConfig | None = None,
) -> GenerationResult:
    """Generate a method for ``clazz``; see CodeGenerationOrchestrator.generate."""
    orchestrator = CodeGenerationOrchestrator(host, config)
    return orchestrator.generate(
        clazz, template_source, insert_policy, conflict_policy, filter_config, signature
    )
