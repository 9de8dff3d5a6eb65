"""
Method signatures.

The signature of the generated method is fixed by the operation, never taken
from the template. Existing methods such as equals(), hashCode() and main()
are found by exact signature match.
"""

from dataclasses import dataclass, replace

from tostringgen.host.base import ClassHandle, MethodHandle


@dataclass(frozen=True)
class MethodSignature:
    """Declaration shape of a generated method."""

    name: str
    return_type: str
    parameters: tuple[tuple[str, str], ...] = ()  # (type, name) pairs
    visibility: str = "public"

    def declaration(self) -> str:
        params = ", ".join(f"{type_} {name}" for type_, name in self.parameters)
        prefix = f"{self.visibility} " if self.visibility != "package" else ""
        return f"{prefix}{self.return_type} {self.name}({params})"

    def with_name(self, name: str) -> "MethodSignature":
        return replace(self, name=name)


TO_STRING_SIGNATURE = MethodSignature(name="toString", return_type="String")


@dataclass(frozen=True)
class MethodShape:
    """What an existing method must look like to count as a match."""

    name: str
    visibility: str
    is_static: bool
    return_type: str
    parameter_types: tuple[str, ...]


EQUALS = MethodShape("equals", "public", False, "boolean", ("java.lang.Object",))
HASH_CODE = MethodShape("hashCode", "public", False, "int", ())
MAIN = MethodShape("main", "public", True, "void", ("java.lang.String[]",))


def matches_shape(method: MethodHandle, shape: MethodShape) -> bool:
    """Exact match of name, visibility, static modifier, return type and parameters."""
    if method.is_constructor or method.name != shape.name:
        return False
    if not method.has_modifier(shape.visibility):
        return False
    if method.has_modifier("static") != shape.is_static:
        return False
    return_type = method.return_type
    if return_type is None or not return_type.equals_to_text(shape.return_type):
        return False
    parameters = method.parameter_types
    if len(parameters) != len(shape.parameter_types):
        return False
    return all(p.canonical_text == t for p, t in zip(parameters, shape.parameter_types))


def find_method_by_name(clazz: ClassHandle, name: str) -> MethodHandle | None:
    """Return the bottom-most method called ``name``; overloads count, last match wins."""
    methods = clazz.methods
    for method in reversed(methods):
        if not method.is_constructor and method.name == name:
            return method
    return None


def find_method(clazz: ClassHandle, shape: MethodShape) -> MethodHandle | None:
    for method in reversed(clazz.methods):
        if matches_shape(method, shape):
            return method
    return None
