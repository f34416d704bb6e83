"""Exception hierarchy for git-introspect.

Callers can catch broad categories (``IntrospectionError``, ``NotFound``) or
specific failure modes. ``NotFound`` is an expected outcome for valid but
absent references; ``ProcessFailure`` means the git tool itself failed.

This module must NOT import from any other ``git_introspect`` module.
"""

from __future__ import annotations


class IntrospectionError(Exception):
    """Base exception for all git-introspect errors."""


class ProcessFailure(IntrospectionError):
    """Launch failure, non-zero exit or non-empty stderr from a subprocess."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


class ProcessTimeout(ProcessFailure):
    """The subprocess exceeded its time budget and was killed."""


class NotFound(IntrospectionError):
    """A well-formed query resolved to nothing."""


class ObjectNotFound(NotFound):
    pass


class FolderNotFound(NotFound):
    pass


class BranchNotFound(NotFound):
    pass


class RepositoryNotFound(NotFound):
    pass


class InvalidState(IntrospectionError):
    """A caller precondition does not hold for the repository's current state."""


class InvalidArgument(IntrospectionError):
    """A ref or path supplied by the caller was rejected before use."""
