"""
Conflict resolution policies.

Used when the class already declares a method with the target name. The
existing method is the bottom-most one with that name.
"""

import logging

from tostringgen.config.models import ConflictPolicy
from tostringgen.generator.insertion import InsertionStrategy
from tostringgen.host.base import ClassHandle, MethodHandle, SourceHost

logger = logging.getLogger(__name__)


class ConflictStrategy:
    """
    Decides what happens to an existing method with the target name.

    By default the existing method stays and the new one goes wherever the
    insertion policy says. A strategy that does not proceed ends the request
    before anything is placed.
    """

    name: str
    proceeds: bool = True
    replaces: bool = False  # True if the existing method is gone afterwards

    def place(
        self,
        host: SourceHost,
        clazz: ClassHandle,
        existing: MethodHandle,
        method: MethodHandle,
        insertion: InsertionStrategy,
    ) -> MethodHandle:
        """Put ``method`` into the class given the ``existing`` one; return it."""
        logger.debug("Keeping existing %s() in %s", existing.name, clazz.name)
        return insertion.insert(host, clazz, method)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class ReplaceStrategy(ConflictStrategy):
    """The new method takes the exact position of the existing one."""

    name = "Replace existing"
    replaces = True

    def place(self, host, clazz, existing, method, insertion):
        logger.debug("Replacing %s() in %s", existing.name, clazz.name)
        return host.replace(clazz, existing, method)


class DuplicateStrategy(ConflictStrategy):
    name = "Duplicate"


class CancelStrategy(ConflictStrategy):
    name = "Cancel"
    proceeds = False


CONFLICT_STRATEGIES: dict[ConflictPolicy, ConflictStrategy] = {
    ConflictPolicy.REPLACE: ReplaceStrategy(),
    ConflictPolicy.DUPLICATE: DuplicateStrategy(),
    ConflictPolicy.CANCEL: CancelStrategy(),
}


def get_conflict_strategy(policy: ConflictPolicy) -> ConflictStrategy:
    return CONFLICT_STRATEGIES[ConflictPolicy(policy)]
