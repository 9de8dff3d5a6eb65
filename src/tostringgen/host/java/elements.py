"""
Element tree for Java source files.

The tree mirrors tree-sitter's concrete syntax tree. Gaps between sibling
nodes become whitespace leaves, so concatenating all leaves reproduces the
parsed text exactly. Unlike tree-sitter trees, this one is mutable: the host
inserts, removes and replaces member elements, then renders the text back.
"""

import re
from typing import Iterator

from tostringgen.host.base import (
    ClassHandle,
    FieldHandle,
    MethodHandle,
    SourceElement,
    TypeRef,
)

CLASS_KINDS = frozenset(
    {"class_declaration", "enum_declaration", "record_declaration", "interface_declaration"}
)
METHOD_KINDS = frozenset({"method_declaration", "constructor_declaration"})
BODY_KINDS = frozenset(
    {"class_body", "enum_body", "enum_body_declarations", "interface_body"}
)
MEMBER_KINDS = METHOD_KINDS | {
    "field_declaration",
    "static_initializer",
    "compact_constructor_declaration",
}
ANNOTATION_KINDS = frozenset({"annotation", "marker_annotation"})
KEYWORD_MODIFIERS = frozenset(
    {
        "public",
        "protected",
        "private",
        "static",
        "final",
        "abstract",
        "synchronized",
        "native",
        "transient",
        "volatile",
        "strictfp",
        "default",
        "sealed",
        "non-sealed",
    }
)

_TYPE_ANNOTATION = re.compile(r"@[\w.]+(\s*\([^)]*\))?\s*")


def annotation_name(text: str) -> str:
    """Return the simple name of an annotation ('@javax.annotation.Nonnull(x)' -> 'Nonnull')."""
    name = text.strip().lstrip("@").split("(", 1)[0].strip()
    return name.rsplit(".", 1)[-1]


def normalize_type_text(text: str) -> str:
    """Strip type annotations and whitespace from a type as written."""
    return re.sub(r"\s+", "", _TYPE_ANNOTATION.sub("", text))


class Element(SourceElement):
    """A node of the mutable element tree. Leaves carry text, composites carry children."""

    def __init__(
        self,
        kind: str,
        children: list["Element"] | None = None,
        text: str | None = None,
        field: str | None = None,
    ):
        self.kind = kind
        self.field = field
        self.children: list[Element] = []
        self._text = text
        self._parent: Element | None = None
        for child in children or []:
            self.append(child)

    def __repr__(self) -> str:
        preview = self.text[:30].replace("\n", "\\n")
        return f"<{type(self).__name__} {self.kind} '{preview}'>"

    # Tree -----------------------------------------------------------------

    @property
    def parent(self) -> "Element | None":
        return self._parent

    @property
    def is_leaf(self) -> bool:
        return self._text is not None

    @property
    def root(self) -> "Element":
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def append(self, child: "Element") -> None:
        child._parent = self
        self.children.append(child)

    def insert_child(self, index: int, child: "Element") -> None:
        child._parent = self
        self.children.insert(index, child)

    def remove_child(self, child: "Element") -> int:
        index = self.index_of(child)
        del self.children[index]
        child._parent = None
        return index

    def replace_child(self, old: "Element", new: "Element") -> None:
        index = self.index_of(old)
        self.children[index] = new
        new._parent = self
        old._parent = None

    def index_of(self, child: "Element") -> int:
        for i, c in enumerate(self.children):
            if c is child:
                return i
        raise ValueError(f"{child!r} is not a child of {self!r}")

    def child_by_field(self, name: str) -> "Element | None":
        for child in self.children:
            if child.field == name:
                return child
        return None

    def children_of_kind(self, *kinds: str) -> list["Element"]:
        return [c for c in self.children if c.kind in kinds]

    def first_child_of_kind(self, *kinds: str) -> "Element | None":
        for child in self.children:
            if child.kind in kinds:
                return child
        return None

    def walk(self) -> Iterator["Element"]:
        """Traverse the subtree depth-first, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def leaves(self) -> Iterator["Element"]:
        for node in self.walk():
            if node.is_leaf:
                yield node

    # Text -----------------------------------------------------------------

    @property
    def text(self) -> str:
        if self._text is not None:
            return self._text
        return "".join(leaf._text for leaf in self.leaves())  # type: ignore[misc]

    def set_text(self, text: str) -> None:
        if self._text is None:
            raise ValueError("Only leaf elements carry text")
        self._text = text

    @property
    def text_offset(self) -> int:
        offset = 0
        node = self
        while node._parent is not None:
            for sibling in node._parent.children:
                if sibling is node:
                    break
                offset += len(sibling.text)
            node = node._parent
        return offset

    @property
    def text_length(self) -> int:
        return len(self.text)

    # Kinds ----------------------------------------------------------------

    @property
    def is_whitespace(self) -> bool:
        return self.kind == "whitespace"

    @property
    def is_method(self) -> bool:
        return self.kind in METHOD_KINDS

    @property
    def is_class(self) -> bool:
        return self.kind in CLASS_KINDS

    @property
    def is_member(self) -> bool:
        if self.kind in MEMBER_KINDS:
            return True
        in_body = self._parent is not None and self._parent.kind in BODY_KINDS
        return in_body and (self.is_class or self.kind == "block")

    @property
    def is_file(self) -> bool:
        return self.kind == "program"

    @property
    def is_doc_comment(self) -> bool:
        return self.kind == "block_comment" and self.text.startswith("/**")


def whitespace(text: str) -> Element:
    return Element("whitespace", text=text)


def leaf(kind: str, text: str, field: str | None = None) -> Element:
    return Element(kind, text=text, field=field)


# =========================================================================
# Member Elements
# =========================================================================


class _ModifierOwner:
    """Modifier, annotation and javadoc access shared by declarations."""

    children: list[Element]

    def _modifier_list(self) -> Element | None:
        for child in self.children:
            if child.kind == "modifiers":
                return child
        return None

    @property
    def modifiers(self) -> frozenset[str]:
        modifier_list = self._modifier_list()
        if modifier_list is None:
            return frozenset()
        return frozenset(
            c.kind for c in modifier_list.children if c.kind in KEYWORD_MODIFIERS
        )

    @property
    def annotation_names(self) -> tuple[str, ...]:
        modifier_list = self._modifier_list()
        if modifier_list is None:
            return ()
        return tuple(
            annotation_name(c.text)
            for c in modifier_list.children
            if c.kind in ANNOTATION_KINDS
        )

    def doc_comment_element(self) -> Element | None:
        for child in self.children:
            if child.is_whitespace:
                continue
            return child if child.is_doc_comment else None
        return None

    @property
    def doc_comment(self) -> str | None:
        doc = self.doc_comment_element()
        return doc.text if doc is not None else None


class JavaMethodElement(_ModifierOwner, Element, MethodHandle):
    """A method or constructor declaration."""

    @property
    def name(self) -> str:
        name = self.child_by_field("name")
        return name.text if name is not None else ""

    @property
    def element(self) -> "JavaMethodElement":
        return self

    @property
    def is_constructor(self) -> bool:
        return self.kind == "constructor_declaration"

    @property
    def return_type(self) -> TypeRef | None:
        if self.is_constructor:
            return None
        type_node = self.child_by_field("type")
        if type_node is None:
            return None
        from tostringgen.host.java.resolver import JavaTypeRef

        return JavaTypeRef(type_node.text, self)

    @property
    def parameter_types(self) -> tuple[TypeRef, ...]:
        from tostringgen.host.java.resolver import JavaTypeRef

        params = self.child_by_field("parameters")
        if params is None:
            return ()
        types: list[TypeRef] = []
        for param in params.children:
            if param.kind == "formal_parameter":
                type_node = param.child_by_field("type")
                dims = param.child_by_field("dimensions")
                text = (type_node.text if type_node else "") + (
                    normalize_type_text(dims.text) if dims else ""
                )
                types.append(JavaTypeRef(text, self))
            elif param.kind == "spread_parameter":
                type_node = next(
                    (
                        c
                        for c in param.children
                        if c.kind not in ("modifiers", "variable_declarator", "...", "whitespace")
                        and not c.kind.endswith("comment")
                    ),
                    None,
                )
                text = (type_node.text if type_node else "") + "[]"
                types.append(JavaTypeRef(text, self))
        return tuple(types)


class JavaFieldDeclaration(_ModifierOwner, Element):
    """A field declaration; one declaration may declare several fields."""

    def declared_fields(self) -> list["JavaField"]:
        return [
            JavaField(self, declarator)
            for declarator in self.children
            if declarator.kind == "variable_declarator"
        ]


class JavaField(FieldHandle):
    """View of one variable declarator of a field declaration."""

    def __init__(self, declaration: JavaFieldDeclaration, declarator: Element):
        self.declaration = declaration
        self.declarator = declarator

    def __repr__(self) -> str:
        return f"<JavaField {self.name}>"

    @property
    def name(self) -> str:
        name = self.declarator.child_by_field("name")
        return name.text if name is not None else ""

    @property
    def type(self) -> TypeRef:
        from tostringgen.host.java.resolver import JavaTypeRef

        type_node = self.declaration.child_by_field("type")
        text = type_node.text if type_node is not None else ""
        dims = self.declarator.child_by_field("dimensions")
        if dims is not None:
            text += normalize_type_text(dims.text)
        return JavaTypeRef(text, self.declaration)

    @property
    def modifiers(self) -> frozenset[str]:
        return self.declaration.modifiers

    @property
    def annotation_names(self) -> tuple[str, ...]:
        return self.declaration.annotation_names

    @property
    def doc_comment(self) -> str | None:
        return self.declaration.doc_comment

    @property
    def element(self) -> JavaFieldDeclaration:
        return self.declaration


class JavaClassElement(_ModifierOwner, Element, ClassHandle):
    """A class, enum, record or interface declaration."""

    @property
    def name(self) -> str:
        name = self.child_by_field("name")
        return name.text if name is not None else ""

    @property
    def element(self) -> "JavaClassElement":
        return self

    @property
    def qualified_name(self) -> str:
        names = [self.name]
        node = self.parent
        while node is not None:
            if isinstance(node, JavaClassElement):
                names.append(node.name)
            node = node.parent
        package = package_name(self.root)
        qualified = ".".join(reversed(names))
        return f"{package}.{qualified}" if package else qualified

    @property
    def body(self) -> Element | None:
        return self.child_by_field("body")

    def member_container(self) -> Element | None:
        """Return the element whose children are this class's members."""
        body = self.body
        if body is None:
            return None
        if body.kind == "enum_body":
            return body.first_child_of_kind("enum_body_declarations")
        return body

    def members(self) -> list[Element]:
        container = self.member_container()
        if container is None:
            return []
        return [c for c in container.children if c.is_member]

    @property
    def fields(self) -> list[JavaField]:
        fields: list[JavaField] = []
        for member in self.members():
            if isinstance(member, JavaFieldDeclaration):
                fields.extend(member.declared_fields())
        return fields

    @property
    def methods(self) -> list[JavaMethodElement]:
        return [m for m in self.members() if isinstance(m, JavaMethodElement)]

    @property
    def superclass(self) -> TypeRef | None:
        from tostringgen.host.java.resolver import JavaTypeRef

        clause = self.first_child_of_kind("superclass")
        if clause is None:
            return None
        type_node = next(
            (c for c in clause.children if c.kind not in ("extends", "whitespace")), None
        )
        return JavaTypeRef(type_node.text, self) if type_node is not None else None

    @property
    def interfaces(self) -> list[TypeRef]:
        from tostringgen.host.java.resolver import JavaTypeRef

        clause = self.first_child_of_kind("super_interfaces", "extends_interfaces")
        if clause is None:
            return []
        type_list = clause.first_child_of_kind("type_list")
        if type_list is None:
            return []
        return [
            JavaTypeRef(c.text, self)
            for c in type_list.children
            if c.kind not in (",", "whitespace") and not c.kind.endswith("comment")
        ]

    def supertype_names(self) -> frozenset[str]:
        from tostringgen.host.java.resolver import resolver_for

        return resolver_for(self).supertypes(self.qualified_name)

    @property
    def lbrace(self) -> Element | None:
        body = self.body
        if body is None or not body.children or body.children[0].kind != "{":
            return None
        return body.children[0]

    @property
    def rbrace(self) -> Element | None:
        body = self.body
        if body is None or not body.children or body.children[-1].kind != "}":
            return None
        # A missing brace is a zero-width node
        return body.children[-1] if body.children[-1].text else None

    @property
    def is_enum(self) -> bool:
        return self.kind == "enum_declaration"

    @property
    def is_interface(self) -> bool:
        return self.kind == "interface_declaration"

    def owns_anchor(self, element: SourceElement) -> bool:
        if element is self.lbrace or element is self.rbrace:
            return True
        container = self.member_container()
        return container is not None and element.parent is container


def package_name(root: Element) -> str:
    for child in root.children:
        if child.kind == "package_declaration":
            for part in child.children:
                if part.kind in ("scoped_identifier", "identifier"):
                    return part.text
    return ""


def make_element(kind: str, field: str | None = None) -> Element:
    """Create an empty composite of the element class matching ``kind``."""
    if kind in CLASS_KINDS:
        return JavaClassElement(kind, field=field)
    if kind in METHOD_KINDS:
        return JavaMethodElement(kind, field=field)
    if kind == "field_declaration":
        return JavaFieldDeclaration(kind, field=field)
    return Element(kind, field=field)
