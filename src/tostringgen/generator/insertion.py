"""
Insertion policies.

Each policy picks an anchor in the class body and inserts the generated
method through the host's insert_before/insert_after primitives.
"""

import logging
from abc import ABC, abstractmethod

from tostringgen.config.models import InsertPolicy
from tostringgen.generator.errors import InsertionError
from tostringgen.generator.signatures import EQUALS, HASH_CODE, MAIN, find_method, matches_shape
from tostringgen.host.base import ClassHandle, MethodHandle, SourceElement, SourceHost

logger = logging.getLogger(__name__)


class InsertionStrategy(ABC):
    """Decides where a new method lands in the class body."""

    name: str

    @abstractmethod
    def insert(self, host: SourceHost, clazz: ClassHandle, method: MethodHandle) -> MethodHandle:
        """Insert ``method`` into ``clazz`` and return the inserted method."""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


def _insert_before_rbrace(host: SourceHost, clazz: ClassHandle, method: MethodHandle) -> MethodHandle:
    if clazz.rbrace is not None:
        return host.insert_before(clazz, clazz.rbrace, method)
    if clazz.lbrace is not None:
        return host.insert_after(clazz, clazz.lbrace, method)
    raise InsertionError(f"Class '{clazz.name}' has no body to insert into")


# =========================================================================
# At Caret
# =========================================================================


def _enclosing_method(element: SourceElement) -> SourceElement | None:
    node = element.parent
    while node is not None and not node.is_file:
        if node.is_method:
            return node
        node = node.parent
    return None


def find_caret_anchor(clazz: ClassHandle, start: SourceElement | None) -> SourceElement | None:
    """
    Walk up from the caret element to an anchor the new method can follow.

    Whitespace stands for its enclosing method if it has one. Methods and
    non-class members stand for themselves. A candidate only counts if it is a
    direct child of the target class body; otherwise the walk continues above
    it. The walk ends at the target class or the file root.
    """
    element = start
    target = clazz.element
    while element is not None and not element.is_file and element is not target:
        candidate: SourceElement | None = None
        if element.is_whitespace:
            candidate = _enclosing_method(element) or element
        elif element.is_method or (element.is_member and not element.is_class):
            candidate = element

        if candidate is not None and clazz.owns_anchor(candidate) and candidate is not clazz.rbrace:
            return candidate
        element = (candidate or element).parent
    return None


def _precedes_rbrace(element: SourceElement, clazz: ClassHandle) -> bool:
    if clazz.rbrace is None:
        return True
    return element.text_offset < clazz.rbrace.text_offset


class AtCaretStrategy(InsertionStrategy):
    name = "At caret"

    def insert(self, host: SourceHost, clazz: ClassHandle, method: MethodHandle) -> MethodHandle:
        offset = host.caret_offset
        current = host.find_element_at(offset) if offset is not None else None
        if current is None:
            logger.debug("No caret element, inserting before the closing brace")
            return _insert_before_rbrace(host, clazz, method)

        anchor = find_caret_anchor(clazz, current)
        if anchor is not None:
            return host.insert_after(clazz, anchor, method)

        # Caret outside any member, possibly outside the class braces
        if _precedes_rbrace(current, clazz) and clazz.lbrace is not None:
            return host.insert_after(clazz, clazz.lbrace, method)
        return _insert_before_rbrace(host, clazz, method)


# =========================================================================
# After equals() and hashCode()
# =========================================================================


class AfterEqualsHashCodeStrategy(InsertionStrategy):
    name = "After equals/hashCode"

    def insert(self, host: SourceHost, clazz: ClassHandle, method: MethodHandle) -> MethodHandle:
        found = [m for m in (find_method(clazz, EQUALS), find_method(clazz, HASH_CODE)) if m]
        if not found:
            logger.debug("No equals()/hashCode() in %s, falling back to caret", clazz.name)
            return AT_CARET.insert(host, clazz, method)
        later = max(found, key=lambda m: m.element.text_offset)
        return host.insert_after(clazz, later.element, method)


# =========================================================================
# Last
# =========================================================================


class LastStrategy(InsertionStrategy):
    name = "Last"

    def insert(self, host: SourceHost, clazz: ClassHandle, method: MethodHandle) -> MethodHandle:
        methods = clazz.methods
        if methods and matches_shape(methods[-1], MAIN):
            # Keep main() as the last method of the class
            return host.insert_before(clazz, methods[-1].element, method)
        return _insert_before_rbrace(host, clazz, method)


AT_CARET = AtCaretStrategy()

INSERTION_STRATEGIES: dict[InsertPolicy, InsertionStrategy] = {
    InsertPolicy.AT_CARET: AT_CARET,
    InsertPolicy.AFTER_EQUALS_HASHCODE: AfterEqualsHashCodeStrategy(),
    InsertPolicy.LAST: LastStrategy(),
}


def get_insertion_strategy(policy: InsertPolicy) -> InsertionStrategy:
    return INSERTION_STRATEGIES[InsertPolicy(policy)]
