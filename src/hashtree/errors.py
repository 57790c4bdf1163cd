from __future__ import annotations
from typing import Optional


class HashtreeError(Exception):
    """Base error. Carries the size, height or index that triggered it."""

    def __init__(
        self,
        message: str,
        *,
        size: Optional[int] = None,
        height: Optional[int] = None,
        index: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.size = size
        self.height = height
        self.index = index


class InvalidInput(HashtreeError, ValueError):
    """Bad leaf count, malformed digest or malformed authentication path."""


class InvalidState(HashtreeError, RuntimeError):
    """Traversal state no longer matches the tree it walks."""


class EnvironmentFailure(HashtreeError, RuntimeError):
    """The interpreter cannot provide the digest algorithm."""
