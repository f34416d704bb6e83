from __future__ import annotations

from typing import Protocol

from git_introspect.domain.models import (
    Commit,
    ObjectIdentity,
    ObjectKind,
    RepositoryState,
    TreeEntry,
)


class GitRepository(Protocol):
    """Read-only introspection of a single bare repository."""

    async def all_branches(self) -> list[str]: ...

    async def last_commit(self, ref: str, file: str | None = None) -> Commit: ...

    async def file_commit_list(self, ref: str, dir_path: str = "") -> list[TreeEntry]: ...

    async def object_identity(self, ref: str, file: str) -> ObjectIdentity: ...

    async def object_hash(self, ref: str, file: str) -> str: ...

    async def object_type(self, ref: str, file: str) -> ObjectKind: ...

    async def is_empty(self) -> bool: ...

    async def commit_count(self, ref: str) -> int: ...

    async def count_reachable(self, ref: str) -> int: ...

    async def state(self) -> RepositoryState: ...
