"""
Template evaluation.

Templates are Jinja2 sources shaped like the method they generate:

    /** optional javadoc, rendered separately */
    @Override
    public String toString() {
        return "{{ classname }}{...}";
    }

The leading doc comment becomes the javadoc, leading '@' lines the ordered
annotations and the text between the first '{' and the last '}' the body.
The signature line itself is ignored; the operation fixes the signature.
"""

import logging
import re
import textwrap
import traceback
from dataclasses import dataclass, field
from typing import Any

from jinja2 import StrictUndefined, TemplateSyntaxError, UndefinedError
from jinja2.sandbox import SandboxedEnvironment

from tostringgen.generator.errors import TemplateError
from tostringgen.generator.facts import ClassFacts, MemberFacts
from tostringgen.generator.signatures import TO_STRING_SIGNATURE, MethodSignature

logger = logging.getLogger(__name__)

_TEMPLATE_FILENAME = "<template>"
_DOC_COMMENT = re.compile(r"\s*/\*\*.*?\*/", re.DOTALL)


def java_string(text: Any) -> str:
    """Escape text for use inside a Java string literal."""
    return (
        str(text)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


# =========================================================================
# Context and Output
# =========================================================================


@dataclass(frozen=True)
class TemplateContext:
    """Read-only view of the class and its available members for one evaluation."""

    class_facts: ClassFacts
    fields: tuple[MemberFacts, ...] = ()
    methods: tuple[MemberFacts, ...] = ()

    @property
    def members(self) -> tuple[MemberFacts, ...]:
        return self.fields + self.methods

    def implements(self, name: str) -> bool:
        return self.class_facts.is_implements(name)

    @staticmethod
    def matches(regex: str, text: Any) -> bool:
        return re.fullmatch(regex, str(text)) is not None

    def variables(self) -> dict[str, Any]:
        return {
            "class": self.class_facts,
            "classname": self.class_facts.name,
            "FQClassname": self.class_facts.qualified_name,
            "fields": list(self.fields),
            "methods": list(self.methods),
            "members": list(self.members),
            "implements": self.implements,
            "matches": self.matches,
            "java_string": java_string,
        }


@dataclass(frozen=True)
class GeneratedUnit:
    """Result of evaluating a template, before it is inserted."""

    body: str
    signature: MethodSignature = TO_STRING_SIGNATURE
    javadoc: str | None = None
    annotations: tuple[str, ...] = field(default_factory=tuple)

    @property
    def method_name(self) -> str:
        return self.signature.name

    def method_text(self) -> str:
        return f"{self.signature.declaration()} {{{self.body}}}"


# =========================================================================
# Engine
# =========================================================================


def _template_lineno(error: BaseException) -> int | None:
    """Find the template line of a runtime error from its traceback."""
    lineno = None
    for frame in traceback.extract_tb(error.__traceback__):
        if frame.filename == _TEMPLATE_FILENAME:
            lineno = frame.lineno
    return lineno


def split_doc_comment(source: str) -> tuple[str | None, str]:
    """
    Split a leading doc comment off a template source.

    The remainder is padded with the newlines it lost so that error line
    numbers still point into the original source.
    """
    match = _DOC_COMMENT.match(source)
    if match is None:
        return None, source
    doc = match.group(0)
    return doc.strip(), "\n" * doc.count("\n") + source[match.end():]


class TemplateEngine:
    """Evaluates templates in a sandboxed Jinja2 environment."""

    def __init__(self):
        self.env = SandboxedEnvironment(
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.env.filters["java_string"] = java_string

    def _render(self, source: str, variables: dict[str, Any]) -> str:
        try:
            template = self.env.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplateError(f"Template syntax error: {e.message}", e.lineno) from e
        try:
            return template.render(variables)
        except UndefinedError as e:
            raise TemplateError(f"Undefined in template: {e.message}", _template_lineno(e)) from e
        except Exception as e:
            raise TemplateError(f"Template evaluation failed: {e}", _template_lineno(e)) from e

    def evaluate(
        self,
        template_source: str,
        context: TemplateContext,
        signature: MethodSignature = TO_STRING_SIGNATURE,
    ) -> GeneratedUnit:
        """
        Evaluate a template against a context.

        Raises:
            TemplateError: If the template fails to parse or evaluate, or has no body
        """
        variables = context.variables()
        doc_source, remainder = split_doc_comment(template_source)

        # Render everything before splitting so a bad javadoc fails the whole unit
        javadoc = None
        if doc_source is not None:
            javadoc = textwrap.dedent(self._render(doc_source, variables)).strip() or None
        rendered = textwrap.dedent(self._render(remainder, variables))

        lines = rendered.strip("\n").splitlines()
        annotations: list[str] = []
        index = 0
        while index < len(lines):
            line = lines[index].strip()
            if line.startswith("@"):
                annotations.append(line)
            elif line:
                break
            index += 1

        rest = "\n".join(lines[index:])
        start = rest.find("{")
        end = rest.rfind("}")
        if start < 0 or end <= start:
            raise TemplateError("Template has no method body enclosed in braces")

        unit = GeneratedUnit(
            body=rest[start + 1 : end],
            signature=signature,
            javadoc=javadoc,
            annotations=tuple(annotations),
        )
        logger.debug(
            "Evaluated template for %s(): %d annotations, javadoc=%s",
            signature.name,
            len(annotations),
            javadoc is not None,
        )
        return unit
