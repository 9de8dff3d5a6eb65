"""
Base host capability interfaces.

The generator never touches a concrete syntax tree. Everything it needs from
the host (reading classes and members, resolving types, mutating the class
body, caret access) goes through these abstract classes, so any host that
implements them can drive code generation.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Sequence


class HostEditError(Exception):
    """Raised by a host when it rejects a structural edit."""

    pass


# =========================================================================
# Elements and Types
# =========================================================================


class SourceElement(ABC):
    """A node of the host's syntax tree."""

    @property
    @abstractmethod
    def parent(self) -> "SourceElement | None":
        """Return the enclosing element, or None at the root."""
        pass

    @property
    @abstractmethod
    def text(self) -> str:
        """Return the source text covered by this element."""
        pass

    @property
    @abstractmethod
    def text_offset(self) -> int:
        """Return the character offset of this element in its file."""
        pass

    @property
    @abstractmethod
    def is_whitespace(self) -> bool:
        pass

    @property
    @abstractmethod
    def is_method(self) -> bool:
        """True for methods and constructors."""
        pass

    @property
    @abstractmethod
    def is_member(self) -> bool:
        """True for any class member (field, method, initializer, nested class)."""
        pass

    @property
    @abstractmethod
    def is_class(self) -> bool:
        pass

    @property
    @abstractmethod
    def is_file(self) -> bool:
        pass


class TypeRef(ABC):
    """A resolvable reference to a declared type."""

    @property
    @abstractmethod
    def canonical_text(self) -> str:
        """
        Return the fully qualified text of the type.

        Examples: ``int``, ``java.lang.String[]``,
        ``java.util.List<java.lang.String>``. Unresolvable names are returned
        as written.
        """
        pass

    @property
    @abstractmethod
    def presentable_text(self) -> str:
        """Return the type as written in the source."""
        pass

    @property
    @abstractmethod
    def is_resolved(self) -> bool:
        """True if the type (or primitive keyword) is known to the host."""
        pass

    @property
    @abstractmethod
    def is_primitive_keyword(self) -> bool:
        """True for one of the eight scalar keywords, possibly as an array element."""
        pass

    @property
    @abstractmethod
    def array_dimensions(self) -> int:
        pass

    @abstractmethod
    def is_assignable_to(self, qualified_name: str) -> bool:
        """
        Check whether a value of this type can be assigned to ``qualified_name``.

        Args:
            qualified_name: Fully qualified class name (e.g. 'java.util.Collection')

        Returns:
            False for primitives and unresolvable types
        """
        pass

    @abstractmethod
    def is_enum(self) -> bool:
        """True if the type resolves to an enumerated type."""
        pass

    def equals_to_text(self, text: str) -> bool:
        return self.canonical_text == text or self.presentable_text == text


# =========================================================================
# Class and Member Handles
# =========================================================================


class MemberHandle(ABC):
    """Common read access for fields and methods."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def modifiers(self) -> frozenset[str]:
        """Return keyword modifiers such as 'public' and 'static'."""
        pass

    @property
    @abstractmethod
    def annotation_names(self) -> tuple[str, ...]:
        """Return simple names of the annotations on this member."""
        pass

    @property
    @abstractmethod
    def doc_comment(self) -> str | None:
        """Return the documentation comment text, if any."""
        pass

    @property
    @abstractmethod
    def element(self) -> SourceElement:
        """Return the syntax element a policy can use as an anchor."""
        pass

    @property
    def is_deprecated(self) -> bool:
        if "Deprecated" in self.annotation_names:
            return True
        doc = self.doc_comment
        return doc is not None and "@deprecated" in doc

    def has_modifier(self, modifier: str) -> bool:
        return modifier in self.modifiers


class FieldHandle(MemberHandle):
    @property
    @abstractmethod
    def type(self) -> TypeRef:
        pass


class MethodHandle(MemberHandle):
    @property
    @abstractmethod
    def return_type(self) -> TypeRef | None:
        """Return the declared return type, None for constructors."""
        pass

    @property
    @abstractmethod
    def parameter_types(self) -> tuple[TypeRef, ...]:
        pass

    @property
    @abstractmethod
    def is_constructor(self) -> bool:
        pass


class ClassHandle(MemberHandle):
    """Read access to a class declaration."""

    @property
    @abstractmethod
    def qualified_name(self) -> str:
        pass

    @property
    @abstractmethod
    def fields(self) -> Sequence[FieldHandle]:
        """Return declared fields in source order."""
        pass

    @property
    @abstractmethod
    def methods(self) -> Sequence[MethodHandle]:
        """Return declared methods and constructors in source order."""
        pass

    @property
    @abstractmethod
    def superclass(self) -> TypeRef | None:
        """Return the type in the extends clause, if any."""
        pass

    @property
    @abstractmethod
    def interfaces(self) -> Sequence[TypeRef]:
        """Return the types in the implements clause."""
        pass

    @abstractmethod
    def supertype_names(self) -> frozenset[str]:
        """Return the qualified names of all transitive supertypes."""
        pass

    @property
    @abstractmethod
    def lbrace(self) -> SourceElement | None:
        pass

    @property
    @abstractmethod
    def rbrace(self) -> SourceElement | None:
        pass

    @property
    @abstractmethod
    def is_enum(self) -> bool:
        pass

    @property
    @abstractmethod
    def is_interface(self) -> bool:
        pass

    @abstractmethod
    def owns_anchor(self, element: SourceElement) -> bool:
        """True if ``element`` can be used as an insertion anchor in this class body."""
        pass


# =========================================================================
# Source Host
# =========================================================================


class SourceHost(ABC):
    """
    Mutation and editor capabilities of the host.

    All mutations of one generation request happen inside one
    ``transaction()`` scope; a host rolls the whole scope back when an
    exception escapes it.
    """

    # Editor ---------------------------------------------------------------

    @property
    @abstractmethod
    def caret_offset(self) -> int | None:
        """Return the caret offset, or None if there is no editor caret."""
        pass

    @abstractmethod
    def find_element_at(self, offset: int) -> SourceElement | None:
        """Return the innermost leaf element covering ``offset``."""
        pass

    @abstractmethod
    def move_caret_to(self, element: SourceElement) -> None:
        pass

    # Structure ------------------------------------------------------------

    @abstractmethod
    def create_method_from_text(self, text: str) -> MethodHandle:
        """
        Build a detached method from source text.

        Raises:
            HostEditError: If the text is not a valid method declaration
        """
        pass

    @abstractmethod
    def insert_before(
        self, clazz: ClassHandle, anchor: SourceElement, method: MethodHandle
    ) -> MethodHandle:
        """Insert ``method`` into the class body before ``anchor``."""
        pass

    @abstractmethod
    def insert_after(
        self, clazz: ClassHandle, anchor: SourceElement, method: MethodHandle
    ) -> MethodHandle:
        """Insert ``method`` into the class body after ``anchor``."""
        pass

    @abstractmethod
    def remove(self, clazz: ClassHandle, member: MemberHandle) -> None:
        pass

    @abstractmethod
    def replace(
        self, clazz: ClassHandle, old: MemberHandle, new: MethodHandle
    ) -> MethodHandle:
        """Replace ``old`` by ``new`` at the same position."""
        pass

    @abstractmethod
    def set_doc_comment(self, method: MethodHandle, text: str) -> None:
        """Add a documentation comment to ``method``, replacing any existing one."""
        pass

    @abstractmethod
    def add_or_replace_annotation(
        self, method: MethodHandle, text: str, after: str | None = None
    ) -> None:
        """
        Add an annotation, or replace the existing one with the same name.

        Args:
            method: Method to annotate
            text: Annotation source, e.g. '@Override'
            after: Name of an annotation the new one should follow, to keep order
        """
        pass

    # Imports and formatting -----------------------------------------------

    @abstractmethod
    def has_import(self, statement: str) -> bool:
        pass

    @abstractmethod
    def add_import(self, statement: str) -> None:
        pass

    @abstractmethod
    def optimize_imports(self) -> None:
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        pass
