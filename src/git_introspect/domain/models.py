from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ObjectKind(Enum):
    BLOB = "blob"
    TREE = "tree"


class RepositoryState(Enum):
    EMPTY = "empty"
    INITIALIZED = "initialized"


@dataclass(frozen=True)
class Commit:
    """The most recent commit touching a ref (or a path at that ref)."""

    commit_hash: str
    committer_name: str
    committer_email: str
    relative_time: str  # e.g. "3 days ago"
    subject: str  # first line of the message

    def __post_init__(self) -> None:
        # An empty hash means "no such commit"; callers must raise instead.
        if not self.commit_hash:
            raise ValueError("Commit requires a non-empty hash")


@dataclass(frozen=True)
class TreeEntry:
    """One immediate child of a tree at a given ref."""

    kind: ObjectKind
    path: str
    last_commit: Commit


@dataclass(frozen=True)
class ObjectIdentity:
    hash: str
    kind: ObjectKind


@dataclass(frozen=True)
class RepositoryOverview:
    repo_path: str
    state: RepositoryState
    branches: list[str]  # default branch first when present
    default_branch: str | None
    commit_count: int
    last_commit: Commit | None
