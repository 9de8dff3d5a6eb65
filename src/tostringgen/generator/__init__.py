"""
Method generation engine.

Classifies the members of a class, evaluates a template against them and
inserts the result into the class body under an insertion and a conflict
policy.
"""

from tostringgen.config.models import ConflictPolicy, FilterConfig, InsertPolicy
from tostringgen.generator.errors import GenerationError, InsertionError, TemplateError
from tostringgen.generator.orchestrator import (
    CodeGenerationOrchestrator,
    GenerationResult,
    GenerationState,
    GenerationStatus,
    generate,
)
from tostringgen.generator.signatures import TO_STRING_SIGNATURE, MethodSignature
from tostringgen.generator.template_engine import GeneratedUnit, TemplateEngine

__all__ = [
    "CodeGenerationOrchestrator",
    "ConflictPolicy",
    "FilterConfig",
    "GeneratedUnit",
    "GenerationError",
    "GenerationResult",
    "GenerationState",
    "GenerationStatus",
    "InsertPolicy",
    "InsertionError",
    "MethodSignature",
    "TO_STRING_SIGNATURE",
    "TemplateEngine",
    "TemplateError",
    "generate",
]
