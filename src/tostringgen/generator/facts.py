"""
Fact records handed to templates.

Facts are derived from declared types and modifiers only, built fresh for
every generate request and never cached.
"""

import re
from dataclasses import dataclass, field
from enum import Enum


class MemberCategory(str, Enum):
    """The single category governing how a member is rendered, by priority."""

    PRIMITIVE_ARRAY = "primitive_array"
    STRING_ARRAY = "string_array"
    OBJECT_ARRAY = "object_array"
    STRING = "string"
    MAP = "map"
    LIST = "list"
    SET = "set"
    COLLECTION = "collection"
    DATE = "date"
    CALENDAR = "calendar"
    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    PRIMITIVE = "primitive"


class MemberKind(str, Enum):
    FIELD = "field"
    METHOD = "method"


def _full_match(regex: str, text: str) -> bool:
    return re.fullmatch(regex, text) is not None


@dataclass(frozen=True)
class ClassFacts:
    """Facts about the class a method is generated for."""

    name: str
    qualified_name: str
    has_super: bool
    super_name: str | None
    super_qualified_name: str | None
    implement_names: tuple[str, ...]
    is_exception: bool
    is_enum: bool
    is_abstract: bool
    is_deprecated: bool

    def is_implements(self, name: str) -> bool:
        """Check direct interfaces by simple or qualified name."""
        simple = name.rsplit(".", 1)[-1]
        return simple in self.implement_names

    def is_extends(self, name: str) -> bool:
        if not self.has_super:
            return False
        return name in (self.super_name, self.super_qualified_name)

    def match_name(self, regex: str) -> bool:
        return _full_match(regex, self.name)


@dataclass(frozen=True)
class TypeDescriptor:
    """
    Template-facing description of a declared type.

    ``qualified_name`` is the element type a template usually wants: the
    wrapper class for primitives, the element class for arrays, the parameter
    of a single-parameter generic, otherwise the canonical text.
    """

    canonical_text: str
    qualified_name: str
    name: str
    is_primitive: bool
    is_array: bool
    is_generic_single_parameter: bool
    is_resolved: bool

    def __str__(self) -> str:
        return self.canonical_text


@dataclass(frozen=True)
class MemberFacts:
    """Facts about one field or method of the target class."""

    owner: ClassFacts = field(compare=False, repr=False)
    name: str
    kind: MemberKind
    accessor: str
    type: TypeDescriptor | None

    # Category tags, several may hold at once
    is_primitive: bool = False
    is_primitive_array: bool = False
    is_object_array: bool = False
    is_string_array: bool = False
    is_array: bool = False
    is_string: bool = False
    is_collection: bool = False
    is_map: bool = False
    is_set: bool = False
    is_list: bool = False
    is_date: bool = False
    is_calendar: bool = False
    is_boolean: bool = False
    is_numeric: bool = False
    is_object: bool = False
    category: MemberCategory | None = None

    # Orthogonal flags
    is_constant: bool = False
    is_static: bool = False
    is_final: bool = False
    is_transient: bool = False
    is_volatile: bool = False
    is_enum: bool = False
    is_deprecated: bool = False
    visibility: str = "package"

    # Methods only
    is_getter: bool = False
    field_name: str | None = None
    method_name: str | None = None
    is_void_return: bool = False

    @property
    def is_field(self) -> bool:
        return self.kind == MemberKind.FIELD

    @property
    def is_method(self) -> bool:
        return self.kind == MemberKind.METHOD

    @property
    def type_name(self) -> str:
        return self.type.canonical_text if self.type is not None else "void"

    def match_name(self, regex: str) -> bool:
        return _full_match(regex, self.name)

    def match_type(self, regex: str) -> bool:
        return _full_match(regex, self.type_name)
