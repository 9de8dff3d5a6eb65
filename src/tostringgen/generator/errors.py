"""
Exceptions raised while generating a method.

A cancelled run is an outcome of the conflict policy, not an error, so it has
no exception here.
"""


class GenerationError(Exception):
    """Base class for errors of a generate request."""

    pass


class TemplateError(GenerationError):
    """Raised when a template fails to compile or evaluate."""

    def __init__(self, message: str, lineno: int | None = None):
        self.message = message
        self.lineno = lineno
        location = f" (line {lineno})" if lineno is not None else ""
        super().__init__(f"{message}{location}")


class InsertionError(GenerationError):
    """Raised when the host rejects an edit of the class body."""

    pass
