"""
Java source file host.

Parses a file with tree-sitter into the mutable element tree and implements
the SourceHost capabilities on top of it: member insertion, removal and
replacement, javadoc and annotation edits, imports, caret and transactions.
"""

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import tree_sitter_java as tsjava
from tree_sitter import Language, Parser

from tostringgen.host.base import (
    ClassHandle,
    HostEditError,
    MemberHandle,
    MethodHandle,
    SourceElement,
    SourceHost,
)
from tostringgen.host.java.elements import (
    BODY_KINDS,
    CLASS_KINDS,
    Element,
    JavaClassElement,
    JavaMethodElement,
    annotation_name,
    leaf,
    make_element,
    whitespace,
)
from tostringgen.host.java.resolver import TypeResolver

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = Language(tsjava.language())

# Field names worth keeping on the element tree
_FIELD_NAMES = ("name", "type", "body", "parameters", "dimensions", "value")

_SCRATCH_CLASS = "__Generated__"

_parser: Parser | None = None


def _get_parser() -> Parser:
    """Lazy initialization of the tree-sitter parser."""
    global _parser
    if _parser is None:
        _parser = Parser(JAVA_LANGUAGE)
    return _parser


def _gap(source: bytes, start: int, end: int) -> Element | None:
    if end <= start:
        return None
    text = source[start:end].decode("utf-8")
    return whitespace(text) if text.isspace() else leaf("text", text)


def _build(node: Any, source: bytes, field: str | None = None) -> Element:
    """Convert a tree-sitter node into an element subtree."""
    if node.child_count == 0:
        return leaf(node.type, source[node.start_byte:node.end_byte].decode("utf-8"), field)

    fields: dict[tuple[int, int, str], str] = {}
    for name in _FIELD_NAMES:
        for child in node.children_by_field_name(name):
            fields[(child.start_byte, child.end_byte, child.type)] = name

    element = make_element(node.type, field)
    position = node.start_byte
    for child in node.children:
        gap = _gap(source, position, child.start_byte)
        if gap is not None:
            element.append(gap)
        child_field = fields.get((child.start_byte, child.end_byte, child.type))
        element.append(_build(child, source, child_field))
        position = max(position, child.end_byte)
    if position < node.end_byte:
        gap = _gap(source, position, node.end_byte)
        if gap is not None:
            element.append(gap)
    return element


def _attach_doc_comments(root: Element) -> None:
    """Move each javadoc directly preceding a member into that member."""
    containers = [n for n in root.walk() if n.kind in BODY_KINDS or n.is_file]
    for container in containers:
        index = 0
        while index < len(container.children):
            comment = container.children[index]
            if not comment.is_doc_comment:
                index += 1
                continue
            following = index + 1
            if following < len(container.children) and container.children[following].is_whitespace:
                following += 1
            if following >= len(container.children):
                break
            member = container.children[following]
            if not (member.is_member or member.kind in CLASS_KINDS) or member.is_leaf:
                index += 1
                continue
            moved = container.children[index:following]
            del container.children[index:following]
            for offset, element in enumerate(moved):
                member.insert_child(offset, element)
            # the member now sits at ``index``
            index += 1


def _reindent(element: Element, indent: str) -> None:
    if not indent:
        return
    for node in element.leaves():
        if "\n" in node.text:
            # blank lines stay empty
            node.set_text(re.sub(r"\n(?!\n)", "\n" + indent, node.text))


def _last_line(text: str) -> str:
    return text.rsplit("\n", 1)[-1]


class JavaSourceFile(SourceHost):
    """An editable Java compilation unit."""

    def __init__(self, text: str, caret_offset: int | None = None, path: Path | None = None):
        self.path = path
        self._caret = caret_offset
        self._resolver: TypeResolver | None = None
        self._load(text)

    @classmethod
    def parse(
        cls, text: str, caret_offset: int | None = None, path: Path | None = None
    ) -> "JavaSourceFile":
        return cls(text, caret_offset, path)

    @classmethod
    def from_path(cls, path: Path, caret_offset: int | None = None) -> "JavaSourceFile":
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        return cls(text, caret_offset, path)

    def _load(self, text: str) -> None:
        source = bytes(text, "utf-8")
        tree = _get_parser().parse(source)
        node = tree.root_node

        root = make_element("program")
        leading = _gap(source, 0, node.start_byte)
        if leading is not None:
            root.append(leading)
        built = _build(node, source)
        for child in list(built.children):
            root.append(child)
        trailing = _gap(source, node.end_byte, len(source))
        if trailing is not None:
            root.append(trailing)

        _attach_doc_comments(root)
        root.source_file = self  # type: ignore[attr-defined]
        self.root = root
        self.has_errors = node.has_error
        self._invalidate()
        if self.has_errors:
            logger.debug("Parsed %s with syntax errors", self.path or "<text>")

    def _invalidate(self) -> None:
        self._resolver = None

    @property
    def resolver(self) -> TypeResolver:
        if self._resolver is None:
            self._resolver = TypeResolver.for_root(self.root)
        return self._resolver

    @property
    def text(self) -> str:
        return self.root.text

    def write(self, path: Path | None = None) -> Path:
        target = path or self.path
        if target is None:
            raise ValueError("No path to write to")
        with open(target, "w", encoding="utf-8") as f:
            f.write(self.text)
        return target

    # =========================================================================
    # Classes
    # =========================================================================

    @property
    def classes(self) -> list[JavaClassElement]:
        """All class declarations in the file, outer classes first."""
        return [n for n in self.root.walk() if isinstance(n, JavaClassElement)]

    def find_class(self, name: str) -> JavaClassElement | None:
        for clazz in self.classes:
            if name in (clazz.name, clazz.qualified_name):
                return clazz
        return None

    def class_at(self, offset: int) -> JavaClassElement | None:
        """Return the innermost class whose declaration covers ``offset``."""
        found = None
        for clazz in self.classes:
            start = clazz.text_offset
            if start <= offset < start + clazz.text_length:
                found = clazz
        return found

    # =========================================================================
    # Editor
    # =========================================================================

    @property
    def caret_offset(self) -> int | None:
        return self._caret

    def find_element_at(self, offset: int) -> Element | None:
        if offset < 0 or offset >= len(self.text):
            return None
        node = self.root
        start = 0
        while not node.is_leaf:
            for child in node.children:
                length = child.text_length
                if length and start <= offset < start + length:
                    node = child
                    break
                start += length
            else:
                return node
        return node

    def move_caret_to(self, element: SourceElement) -> None:
        self._caret = element.text_offset

    # =========================================================================
    # Structure
    # =========================================================================

    def create_method_from_text(self, text: str) -> JavaMethodElement:
        source = bytes(f"class {_SCRATCH_CLASS} {{\n{text}\n}}\n", "utf-8")
        tree = _get_parser().parse(source)
        if tree.root_node.has_error:
            raise HostEditError(f"Not a valid method declaration:\n{text}")

        body = tree.root_node.children[0].child_by_field_name("body")
        methods = [
            c for c in body.children if c.type in ("method_declaration", "constructor_declaration")
        ]
        if len(methods) != 1:
            raise HostEditError(f"Expected exactly one method declaration, got {len(methods)}")

        return _build(methods[0], source)  # type: ignore[return-value]

    def _container(self, clazz: ClassHandle) -> Element:
        """Return the element members are inserted into, creating it for bare enums."""
        element = self._class_element(clazz)
        container = element.member_container()
        if container is not None:
            return container
        body = element.body
        if body is None or body.kind != "enum_body":
            raise HostEditError(f"Class '{clazz.name}' has no body")

        declarations = make_element("enum_body_declarations")
        declarations.append(leaf(";", ";"))
        index = len(body.children) - 1 if body.children[-1].kind == "}" else len(body.children)
        if index > 0 and body.children[index - 1].is_whitespace:
            index -= 1
        body.insert_child(index, declarations)
        return declarations

    def _class_element(self, clazz: ClassHandle) -> JavaClassElement:
        element = clazz.element
        if not isinstance(element, JavaClassElement) or element.root is not self.root:
            raise HostEditError(f"Class '{clazz.name}' does not belong to this file")
        return element

    def _member_element(self, member: MemberHandle | SourceElement) -> Element:
        element = member.element if isinstance(member, MemberHandle) else member
        if not isinstance(element, Element):
            raise HostEditError(f"Foreign element {element!r}")
        return element

    def _position(self, clazz: ClassHandle, anchor: SourceElement, before: bool) -> tuple[Element, int]:
        element = self._class_element(clazz)
        container = self._container(clazz)
        if anchor is element.lbrace:
            if before:
                raise HostEditError("Cannot insert before the opening brace")
            return container, 1 if container.children and container.children[0].kind in ("{", ";") else 0
        if anchor is element.rbrace:
            if not before:
                raise HostEditError("Cannot insert after the closing brace")
            if container.children and container.children[-1].kind == "}":
                return container, len(container.children) - 1
            return container, len(container.children)
        if anchor.parent is container:
            index = container.index_of(anchor)  # type: ignore[arg-type]
            return container, index if before else index + 1
        raise HostEditError(f"Anchor {anchor!r} is not part of the body of '{clazz.name}'")

    def _class_indent(self, clazz: JavaClassElement) -> str:
        text = self.text
        offset = clazz.text_offset
        line_start = text.rfind("\n", 0, offset) + 1
        line = text[line_start:offset]
        return line[: len(line) - len(line.lstrip())]

    def _member_indent(self, clazz: JavaClassElement, container: Element) -> str:
        for index, child in enumerate(container.children):
            if child.is_member and index > 0:
                previous = container.children[index - 1]
                if previous.is_whitespace and "\n" in previous.text:
                    return _last_line(previous.text)
        return self._class_indent(clazz) + "    "

    def _separator_before(self, container: Element, previous: Element, indent: str) -> str:
        if previous is container.children[0] and previous.kind == "{":
            return "\n" + indent
        return "\n\n" + indent

    def _normalize_around(self, container: Element, member: Element, indent: str, class_indent: str) -> None:
        index = container.index_of(member)
        if index > 0:
            previous = container.children[index - 1]
            if previous.is_whitespace and index > 1:
                previous.set_text(
                    self._separator_before(container, container.children[index - 2], indent)
                )
            elif not previous.is_whitespace:
                container.insert_child(index, whitespace(self._separator_before(container, previous, indent)))
                index += 1

        if index + 1 < len(container.children):
            following = container.children[index + 1]
            target = following
            if following.is_whitespace:
                target = container.children[index + 2] if index + 2 < len(container.children) else None
            separator = "\n" + class_indent if target is None or target.kind == "}" else "\n\n" + indent
            if following.is_whitespace:
                following.set_text(separator)
            else:
                container.insert_child(index + 1, whitespace(separator))

    def _insert(self, clazz: ClassHandle, anchor: SourceElement, method: MethodHandle, before: bool) -> MethodHandle:
        new = self._member_element(method)
        if new.parent is not None:
            raise HostEditError(f"Method '{method.name}' is already part of a class")
        container, index = self._position(clazz, anchor, before)
        element = self._class_element(clazz)
        indent = self._member_indent(element, container)

        _reindent(new, indent)
        container.insert_child(index, new)
        self._normalize_around(container, new, indent, self._class_indent(element))
        self._invalidate()
        logger.debug("Inserted %s() into %s at %d", method.name, clazz.name, new.text_offset)
        return method

    def insert_before(self, clazz: ClassHandle, anchor: SourceElement, method: MethodHandle) -> MethodHandle:
        return self._insert(clazz, anchor, method, before=True)

    def insert_after(self, clazz: ClassHandle, anchor: SourceElement, method: MethodHandle) -> MethodHandle:
        return self._insert(clazz, anchor, method, before=False)

    def remove(self, clazz: ClassHandle, member: MemberHandle) -> None:
        element = self._member_element(member)
        container = self._container(clazz)
        if element.parent is not container:
            raise HostEditError(f"'{member.name}' is not a member of '{clazz.name}'")

        index = container.remove_child(element)
        if 0 < index < len(container.children):
            if container.children[index - 1].is_whitespace and container.children[index].is_whitespace:
                container.remove_child(container.children[index - 1])
        self._invalidate()

    def replace(self, clazz: ClassHandle, old: MemberHandle, new: MethodHandle) -> MethodHandle:
        element = self._member_element(old)
        replacement = self._member_element(new)
        container = self._container(clazz)
        if element.parent is not container:
            raise HostEditError(f"'{old.name}' is not a member of '{clazz.name}'")
        if replacement.parent is not None:
            raise HostEditError(f"Method '{new.name}' is already part of a class")

        _reindent(replacement, self._member_indent(self._class_element(clazz), container))
        container.replace_child(element, replacement)
        self._invalidate()
        return new

    def _indent_of(self, element: Element) -> str:
        parent = element.parent
        if parent is None:
            return ""
        index = parent.index_of(element)
        if index > 0 and parent.children[index - 1].is_whitespace:
            return _last_line(parent.children[index - 1].text)
        return ""

    def set_doc_comment(self, method: MethodHandle, text: str) -> None:
        element = self._member_element(method)
        if not isinstance(element, JavaMethodElement):
            raise HostEditError(f"'{method.name}' is not a method")
        text = text.strip()
        if not (text.startswith("/**") and text.endswith("*/")):
            raise HostEditError(f"Not a documentation comment: {text!r}")

        indent = self._indent_of(element)
        lines = text.splitlines()
        formatted = [lines[0].strip()] + [
            " " + line.strip() if line.strip().startswith("*") else line.rstrip()
            for line in lines[1:]
        ]
        doc_text = ("\n" + indent).join(formatted)

        existing = element.doc_comment_element()
        if existing is not None:
            existing.set_text(doc_text)
        else:
            element.insert_child(0, whitespace("\n" + indent))
            element.insert_child(0, leaf("block_comment", doc_text))
        self._invalidate()

    def add_or_replace_annotation(self, method: MethodHandle, text: str, after: str | None = None) -> None:
        element = self._member_element(method)
        if not isinstance(element, JavaMethodElement):
            raise HostEditError(f"'{method.name}' is not a method")
        text = text.strip()
        if not text.startswith("@"):
            raise HostEditError(f"Not an annotation: {text!r}")

        name = annotation_name(text)
        kind = "annotation" if "(" in text else "marker_annotation"
        annotation = leaf(kind, text)
        indent = self._indent_of(element)

        modifiers = element._modifier_list()
        if modifiers is None:
            modifiers = make_element("modifiers")
            modifiers.append(annotation)
            index = 0
            doc = element.doc_comment_element()
            if doc is not None:
                index = element.index_of(doc) + 1
                if index < len(element.children) and element.children[index].is_whitespace:
                    index += 1
            element.insert_child(index, modifiers)
            element.insert_child(index + 1, whitespace("\n" + indent))
            self._invalidate()
            return

        annotations = [c for c in modifiers.children if c.kind in ("annotation", "marker_annotation")]
        for existing in annotations:
            if annotation_name(existing.text) == name:
                modifiers.replace_child(existing, annotation)
                self._invalidate()
                return

        anchor = next((a for a in annotations if annotation_name(a.text) == after), None) if after else None
        if anchor is not None:
            index = modifiers.index_of(anchor) + 1
            modifiers.insert_child(index, annotation)
            modifiers.insert_child(index, whitespace("\n" + indent))
        else:
            modifiers.insert_child(0, whitespace("\n" + indent))
            modifiers.insert_child(0, annotation)
        self._invalidate()

    # =========================================================================
    # Imports and formatting
    # =========================================================================

    def _imports(self) -> list[Element]:
        return self.root.children_of_kind("import_declaration")

    @staticmethod
    def _import_path(element: Element) -> str:
        return re.sub(r"\s+|^import|;$", "", element.text.strip())

    def has_import(self, statement: str) -> bool:
        statement = statement.strip().removeprefix("import ").rstrip(";").strip()
        return any(self._import_path(i) == statement for i in self._imports())

    def add_import(self, statement: str) -> None:
        statement = statement.strip().removeprefix("import ").rstrip(";").strip()
        if self.has_import(statement):
            return
        declaration = leaf("import_declaration", f"import {statement};")
        imports = self._imports()
        package = self.root.first_child_of_kind("package_declaration")

        if imports:
            index = self.root.index_of(imports[-1]) + 1
            self.root.insert_child(index, declaration)
            self.root.insert_child(index, whitespace("\n"))
        elif package is not None:
            index = self.root.index_of(package) + 1
            self.root.insert_child(index, declaration)
            self.root.insert_child(index, whitespace("\n\n"))
        else:
            self.root.insert_child(0, whitespace("\n\n"))
            self.root.insert_child(0, declaration)
        self._invalidate()
        logger.debug("Added import %s", statement)

    def optimize_imports(self) -> None:
        """Drop duplicate import declarations."""
        seen: set[str] = set()
        for declaration in self._imports():
            path = self._import_path(declaration)
            if path not in seen:
                seen.add(path)
                continue
            index = self.root.remove_child(declaration)
            if index > 0 and self.root.children[index - 1].is_whitespace:
                self.root.remove_child(self.root.children[index - 1])
        self._invalidate()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = self.text
        caret = self._caret
        try:
            yield
        except BaseException:
            logger.debug("Rolling back edits to %s", self.path or "<text>")
            self._load(snapshot)
            self._caret = caret
            raise
