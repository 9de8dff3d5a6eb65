"""
Member classification.

Turns fields and methods of the target class into MemberFacts, the records
templates consume. Classification is a pure function of modifiers and the
declared type's canonical text plus assignability queries; it never raises.
An unresolvable type yields all category tags false and generation goes on.
"""

import logging

from tostringgen.generator.facts import (
    ClassFacts,
    MemberCategory,
    MemberFacts,
    MemberKind,
    TypeDescriptor,
)
from tostringgen.host.base import ClassHandle, FieldHandle, MemberHandle, MethodHandle, TypeRef

logger = logging.getLogger(__name__)

OBJECT = "java.lang.Object"
THROWABLE = "java.lang.Throwable"

PRIMITIVE_WRAPPERS = {
    "boolean": "java.lang.Boolean",
    "byte": "java.lang.Byte",
    "char": "java.lang.Character",
    "short": "java.lang.Short",
    "int": "java.lang.Integer",
    "long": "java.lang.Long",
    "float": "java.lang.Float",
    "double": "java.lang.Double",
}
NUMERIC_PRIMITIVES = frozenset({"byte", "short", "int", "long", "float", "double"})

GETTER_PREFIXES = ("get", "is", "has")

# Category priority: the first tag that holds governs rendering
_CATEGORY_ORDER = (
    ("is_primitive_array", MemberCategory.PRIMITIVE_ARRAY),
    ("is_string_array", MemberCategory.STRING_ARRAY),
    ("is_object_array", MemberCategory.OBJECT_ARRAY),
    ("is_string", MemberCategory.STRING),
    ("is_map", MemberCategory.MAP),
    ("is_list", MemberCategory.LIST),
    ("is_set", MemberCategory.SET),
    ("is_collection", MemberCategory.COLLECTION),
    ("is_date", MemberCategory.DATE),
    ("is_calendar", MemberCategory.CALENDAR),
    ("is_boolean", MemberCategory.BOOLEAN),
    ("is_numeric", MemberCategory.NUMERIC),
    ("is_primitive", MemberCategory.PRIMITIVE),
)


def simple_name(qualified_name: str) -> str:
    return qualified_name.split("<", 1)[0].rsplit(".", 1)[-1]


def _raw(canonical_text: str) -> str:
    return canonical_text.split("<", 1)[0]


# =========================================================================
# Types
# =========================================================================


def _is_void(type_ref: TypeRef | None) -> bool:
    return type_ref is None or type_ref.canonical_text == "void"


def _is_primitive(type_ref: TypeRef) -> bool:
    # Anything under the 'java' prefix is a library class, never a primitive.
    # This is a lexical shortcut: a user type named 'javafoo.X' is caught too.
    return type_ref.is_primitive_keyword and not type_ref.canonical_text.startswith("java")


def describe_type(type_ref: TypeRef | None) -> TypeDescriptor | None:
    """Build the template-facing descriptor of a type; None for void."""
    if _is_void(type_ref):
        return None
    assert type_ref is not None

    canonical = type_ref.canonical_text
    is_primitive = _is_primitive(type_ref)
    single_generic = (
        canonical.count("<") == 1 and canonical.count(">") == 1 and "," not in canonical
    )

    if is_primitive:
        keyword = canonical.replace("[]", "")
        qualified = PRIMITIVE_WRAPPERS.get(keyword, keyword)
    elif canonical.endswith("[]"):
        qualified = canonical[:-2]
    elif single_generic:
        qualified = canonical[canonical.index("<") + 1 : canonical.rindex(">")]
    else:
        qualified = canonical

    return TypeDescriptor(
        canonical_text=canonical,
        qualified_name=qualified,
        name=simple_name(qualified),
        is_primitive=is_primitive,
        is_array=type_ref.array_dimensions > 0,
        is_generic_single_parameter=single_generic,
        is_resolved=type_ref.is_resolved,
    )


def _type_tags(type_ref: TypeRef | None) -> dict[str, bool]:
    """Compute the category tags of a declared type."""
    if _is_void(type_ref):
        return {}
    assert type_ref is not None

    canonical = type_ref.canonical_text
    primitive = _is_primitive(type_ref)
    is_array = type_ref.array_dimensions > 0
    if not type_ref.is_resolved:
        logger.debug("Unresolved type '%s', classifying as plain value", canonical)

    tags = {
        "is_primitive": primitive,
        "is_array": is_array,
        "is_primitive_array": primitive and is_array,
        "is_object_array": not primitive and is_array,
        "is_string_array": not primitive and is_array and _raw(canonical) == "java.lang.String[]",
        "is_object": not primitive and type_ref.is_resolved,
    }
    if not is_array:
        tags.update(
            is_string=type_ref.is_assignable_to("java.lang.String"),
            is_collection=type_ref.is_assignable_to("java.util.Collection"),
            is_list=type_ref.is_assignable_to("java.util.List"),
            is_set=type_ref.is_assignable_to("java.util.Set"),
            is_map=type_ref.is_assignable_to("java.util.Map"),
            is_date=type_ref.is_assignable_to("java.util.Date"),
            is_calendar=type_ref.is_assignable_to("java.util.Calendar"),
        )
        if primitive:
            tags["is_boolean"] = canonical == "boolean"
            tags["is_numeric"] = canonical in NUMERIC_PRIMITIVES
        else:
            tags["is_boolean"] = type_ref.is_assignable_to("java.lang.Boolean")
            tags["is_numeric"] = type_ref.is_assignable_to("java.lang.Number")
    return tags


def _category(tags: dict[str, bool]) -> MemberCategory | None:
    for tag, category in _CATEGORY_ORDER:
        if tags.get(tag):
            return category
    return None


# =========================================================================
# Members
# =========================================================================


def visibility_of(member: MemberHandle) -> str:
    for modifier in ("public", "protected", "private"):
        if member.has_modifier(modifier):
            return modifier
    return "package"


def is_constant(member: MemberHandle) -> bool:
    """Static and no lowercase character in the name ('MAX_VALUE' but not 'maxValue')."""
    return member.has_modifier("static") and not any(c.islower() for c in member.name)


def getter_field_name(name: str, returns_boolean: bool) -> str | None:
    """
    Return the field a getter name implies, or None if it is not a getter name.

    'getName' -> 'name'; 'isEmpty' and 'hasNext' only with a boolean return.
    """
    for prefix in GETTER_PREFIXES:
        suffix = name[len(prefix):]
        if name.startswith(prefix) and suffix and suffix[0].isupper():
            if prefix != "get" and not returns_boolean:
                return None
            return suffix[0].lower() + suffix[1:]
    return None


def _flags(member: MemberHandle) -> dict:
    return {
        "is_static": member.has_modifier("static"),
        "is_final": member.has_modifier("final"),
        "is_transient": member.has_modifier("transient"),
        "is_volatile": member.has_modifier("volatile"),
        "is_deprecated": member.is_deprecated,
        "visibility": visibility_of(member),
    }


def classify_field(field: FieldHandle, owner: ClassFacts) -> MemberFacts:
    tags = _type_tags(field.type)
    primitive = tags.get("is_primitive", False)
    return MemberFacts(
        owner=owner,
        name=field.name,
        kind=MemberKind.FIELD,
        accessor=field.name,
        type=describe_type(field.type),
        category=_category(tags),
        is_constant=is_constant(field),
        is_enum=not primitive and field.type.is_enum(),
        **tags,
        **_flags(field),
    )


def classify_method(method: MethodHandle, owner: ClassFacts) -> MemberFacts:
    return_type = method.return_type
    tags = _type_tags(return_type)
    void = _is_void(return_type)
    field_name = None if void else getter_field_name(method.name, tags.get("is_boolean", False))
    return MemberFacts(
        owner=owner,
        name=field_name or method.name,
        kind=MemberKind.METHOD,
        accessor=f"{method.name}()",
        type=describe_type(return_type),
        category=_category(tags),
        is_getter=field_name is not None,
        field_name=field_name,
        method_name=method.name,
        is_void_return=void,
        **tags,
        **_flags(method),
    )


# =========================================================================
# Classes
# =========================================================================


def build_class_facts(clazz: ClassHandle) -> ClassFacts:
    superclass = clazz.superclass
    super_qualified = _raw(superclass.canonical_text) if superclass is not None else None
    has_super = super_qualified is not None and super_qualified != OBJECT

    return ClassFacts(
        name=clazz.name,
        qualified_name=clazz.qualified_name,
        has_super=has_super,
        super_name=simple_name(super_qualified) if has_super and super_qualified else None,
        super_qualified_name=super_qualified if has_super else None,
        implement_names=tuple(simple_name(i.canonical_text) for i in clazz.interfaces),
        is_exception=THROWABLE in clazz.supertype_names(),
        is_enum=clazz.is_enum,
        is_abstract=clazz.has_modifier("abstract") or clazz.is_interface,
        is_deprecated=clazz.is_deprecated,
    )
