"""
Type resolution for a single Java source file.

Resolves names the way javac would for the common cases: classes declared in
the file (including nested ones), single-type imports, the package itself,
implicit java.lang and on-demand imports checked against the JDK table.
"""

import logging
import re
from dataclasses import dataclass, field

from tostringgen.host.base import TypeRef
from tostringgen.host.java.elements import (
    Element,
    JavaClassElement,
    normalize_type_text,
    package_name,
)
from tostringgen.host.java.jdk_types import (
    JAVA_LANG,
    JDK_ENUMS,
    JDK_SUPERTYPES,
    OBJECT,
    PRIMITIVE_TYPES,
)

logger = logging.getLogger(__name__)

_IMPORT = re.compile(r"import\s+(static\s+)?([\w.\s]+?)(\.\s*\*)?\s*;")


@dataclass(frozen=True)
class ParsedType:
    """A type split into base name, type arguments and array dimensions."""

    base: str
    arguments: tuple[str, ...] = ()
    dimensions: int = 0


def parse_type(text: str) -> ParsedType:
    """Split normalized type text like 'Map<String,List<Integer>>[]'."""
    text = normalize_type_text(text)
    dimensions = 0
    while text.endswith("[]"):
        text = text[:-2]
        dimensions += 1
    if text.endswith("..."):
        text = text[:-3]
        dimensions += 1

    if "<" not in text or not text.endswith(">"):
        return ParsedType(text, (), dimensions)

    base, _, inner = text.partition("<")
    inner = inner[:-1]
    arguments: list[str] = []
    depth = 0
    current = ""
    for ch in inner:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        if ch == "," and depth == 0:
            arguments.append(current)
            current = ""
        else:
            current += ch
    if current:
        arguments.append(current)
    return ParsedType(base, tuple(arguments), dimensions)


@dataclass
class _DeclaredClass:
    qualified_name: str
    is_enum: bool
    element: JavaClassElement


@dataclass
class TypeResolver:
    """Name and supertype lookups for one parsed file."""

    package: str = ""
    single_imports: dict[str, str] = field(default_factory=dict)
    on_demand_imports: list[str] = field(default_factory=list)
    declared: dict[str, _DeclaredClass] = field(default_factory=dict)

    @classmethod
    def for_root(cls, root: Element) -> "TypeResolver":
        resolver = cls(package=package_name(root))
        for child in root.children:
            if child.kind != "import_declaration":
                continue
            match = _IMPORT.match(child.text)
            if not match or match.group(1):
                continue
            path = re.sub(r"\s+", "", match.group(2))
            if match.group(3):
                resolver.on_demand_imports.append(path)
            else:
                resolver.single_imports[path.rsplit(".", 1)[-1]] = path

        for node in root.walk():
            if isinstance(node, JavaClassElement) and node.name:
                resolver.declared[node.qualified_name] = _DeclaredClass(
                    node.qualified_name, node.is_enum, node
                )
        logger.debug(
            "Resolver built: %d declared classes, %d imports",
            len(resolver.declared),
            len(resolver.single_imports) + len(resolver.on_demand_imports),
        )
        return resolver

    def is_known(self, qualified_name: str) -> bool:
        return (
            qualified_name in self.declared
            or qualified_name in JDK_SUPERTYPES
            or qualified_name in self.single_imports.values()
        )

    def resolve_name(
        self, name: str, context: Element | None = None
    ) -> tuple[str, bool]:
        """
        Resolve a class name as written to its qualified name.

        Args:
            name: Simple, nested ('Outer.Inner') or qualified name
            context: Element the name appears in, for nested class lookup

        Returns:
            (qualified_name, known) - the name itself if it cannot be resolved
        """
        head, _, rest = name.partition(".")
        if rest:
            if self.is_known(name):
                return name, True
            resolved, known = self._resolve_simple(head, context)
            if known:
                return f"{resolved}.{rest}", self.is_known(f"{resolved}.{rest}")
            return name, False
        return self._resolve_simple(name, context)

    def _resolve_simple(self, name: str, context: Element | None) -> tuple[str, bool]:
        # Innermost enclosing classes first, so nested names shadow outer ones
        node = context
        while node is not None:
            if isinstance(node, JavaClassElement):
                candidate = f"{node.qualified_name}.{name}"
                if candidate in self.declared:
                    return candidate, True
                if node.name == name:
                    return node.qualified_name, True
            node = node.parent

        for qualified in self.declared:
            if qualified.rsplit(".", 1)[-1] == name and qualified.count(".") == (
                self.package.count(".") + 1 if self.package else 0
            ):
                return qualified, True
        if name in self.single_imports:
            return self.single_imports[name], True
        if name in JAVA_LANG:
            return JAVA_LANG[name], True
        for package in self.on_demand_imports:
            candidate = f"{package}.{name}"
            if candidate in JDK_SUPERTYPES or candidate in self.declared:
                return candidate, True
        return name, False

    def canonical(self, text: str, context: Element | None = None) -> tuple[str, bool]:
        """Return the canonical text of a type and whether every part resolved."""
        parsed = parse_type(text)
        suffix = "[]" * parsed.dimensions
        if parsed.base in PRIMITIVE_TYPES or parsed.base == "void":
            return parsed.base + suffix, True
        if parsed.base == "?" or parsed.base.startswith("?"):
            return parsed.base, True

        base, resolved = self.resolve_name(parsed.base, context)
        if parsed.arguments:
            arguments = []
            for argument in parsed.arguments:
                if argument.startswith("?extends") or argument.startswith("?super"):
                    bound = "extends" if argument.startswith("?extends") else "super"
                    inner, _ = self.canonical(argument[len("?" + bound):], context)
                    arguments.append(f"? {bound} {inner}")
                else:
                    inner, _ = self.canonical(argument, context)
                    arguments.append(inner)
            base = f"{base}<{','.join(arguments)}>"
        return base + suffix, resolved

    def direct_supertypes(self, qualified_name: str) -> tuple[str, ...]:
        declared = self.declared.get(qualified_name)
        if declared is not None:
            clazz = declared.element
            refs = ([clazz.superclass] if clazz.superclass else []) + list(clazz.interfaces)
            supers = [
                self.resolve_name(parse_type(ref.presentable_text).base, clazz)[0]
                for ref in refs
            ]
            if clazz.is_enum:
                supers.append("java.lang.Enum")
            return tuple(supers)
        return JDK_SUPERTYPES.get(qualified_name, ())

    def supertypes(self, qualified_name: str) -> frozenset[str]:
        """Return the transitive supertypes of a class, excluding itself."""
        seen: set[str] = set()
        pending = list(self.direct_supertypes(qualified_name))
        while pending:
            current = pending.pop()
            if current in seen or current == qualified_name:
                continue
            seen.add(current)
            pending.extend(self.direct_supertypes(current))
        seen.add(OBJECT)
        seen.discard(qualified_name)
        return frozenset(seen)

    def is_enum(self, qualified_name: str) -> bool:
        declared = self.declared.get(qualified_name)
        if declared is not None:
            return declared.is_enum or "java.lang.Enum" in self.supertypes(qualified_name)
        return qualified_name in JDK_ENUMS


def resolver_for(element: Element) -> TypeResolver:
    """Return the resolver of the file holding ``element``."""
    root = element.root
    owner = getattr(root, "source_file", None)
    if owner is not None:
        return owner.resolver
    if root.is_file:
        return TypeResolver.for_root(root)
    return TypeResolver()


class JavaTypeRef(TypeRef):
    """A type as written at some point in the file, resolved lazily."""

    def __init__(self, text: str, context: Element):
        self._text = normalize_type_text(text)
        self._context = context

    def __repr__(self) -> str:
        return f"<JavaTypeRef {self._text}>"

    @property
    def _parsed(self) -> ParsedType:
        return parse_type(self._text)

    @property
    def presentable_text(self) -> str:
        return self._text

    @property
    def canonical_text(self) -> str:
        return resolver_for(self._context).canonical(self._text, self._context)[0]

    @property
    def is_resolved(self) -> bool:
        return resolver_for(self._context).canonical(self._text, self._context)[1]

    @property
    def is_primitive_keyword(self) -> bool:
        return self._parsed.base in PRIMITIVE_TYPES

    @property
    def array_dimensions(self) -> int:
        return self._parsed.dimensions

    def _qualified_base(self) -> str | None:
        parsed = self._parsed
        if parsed.base in PRIMITIVE_TYPES or parsed.base == "void":
            return None
        qualified, known = resolver_for(self._context).resolve_name(parsed.base, self._context)
        return qualified if known else None

    def is_assignable_to(self, qualified_name: str) -> bool:
        if self.array_dimensions:
            return qualified_name in (OBJECT, "java.lang.Cloneable", "java.io.Serializable")
        qualified = self._qualified_base()
        if qualified is None:
            return False
        if qualified == qualified_name:
            return True
        return qualified_name in resolver_for(self._context).supertypes(qualified)

    def is_enum(self) -> bool:
        if self.array_dimensions:
            return False
        qualified = self._qualified_base()
        return qualified is not None and resolver_for(self._context).is_enum(qualified)
