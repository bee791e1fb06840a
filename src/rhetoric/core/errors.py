# errors.py
from typing import Optional


class RhetoricError(Exception):
    """Base class for every error raised by the rhetoric package."""


class DataError(RhetoricError, IOError):
    """Missing/unreadable example files or unusable example content."""


class EmptySentenceError(DataError):
    """Sentence has no lexical tokens once the root placeholder is dropped."""


class GraphBuildError(RhetoricError, RuntimeError):
    """Shape mismatch or failed op while building/evaluating the cost graph."""

    def __init__(self, message: str, node: Optional[str] = None):
        self.node = node
        if node is not None:
            message = f"{node}: {message}"
        super().__init__(message)


class AnnotationError(RhetoricError):
    """One of the annotation stages (normalise, lex, tag) failed."""

    def __init__(self, stage: str, name: str, cause: Optional[BaseException] = None):
        self.stage = stage
        self.name = name
        self.cause = cause
        msg = f"annotation stage {stage!r} failed for {name!r}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
