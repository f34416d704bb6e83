from __future__ import annotations

from pydantic import BaseModel

from git_introspect.domain.models import (
    Commit,
    ObjectIdentity,
    RepositoryOverview,
    TreeEntry,
)
from git_introspect.infrastructure.git_format import printable


class CommitOut(BaseModel):
    commit_hash: str
    committer_name: str
    committer_email: str
    relative_time: str
    subject: str

    @classmethod
    def from_domain(cls, commit: Commit) -> CommitOut:
        return cls(
            commit_hash=commit.commit_hash,
            committer_name=printable(commit.committer_name),
            committer_email=printable(commit.committer_email),
            relative_time=commit.relative_time,
            subject=printable(commit.subject),
        )


class TreeEntryOut(BaseModel):
    kind: str
    path: str
    last_commit: CommitOut

    @classmethod
    def from_domain(cls, entry: TreeEntry) -> TreeEntryOut:
        return cls(
            kind=entry.kind.value,
            path=printable(entry.path),
            last_commit=CommitOut.from_domain(entry.last_commit),
        )


class ObjectIdentityOut(BaseModel):
    hash: str
    kind: str

    @classmethod
    def from_domain(cls, identity: ObjectIdentity) -> ObjectIdentityOut:
        return cls(hash=identity.hash, kind=identity.kind.value)


class CommitCountOut(BaseModel):
    ref: str
    count: int


class RepositoryOverviewOut(BaseModel):
    state: str
    branches: list[str]
    default_branch: str | None
    commit_count: int
    last_commit: CommitOut | None

    @classmethod
    def from_domain(cls, overview: RepositoryOverview) -> RepositoryOverviewOut:
        return cls(
            state=overview.state.value,
            branches=[printable(b) for b in overview.branches],
            default_branch=overview.default_branch,
            commit_count=overview.commit_count,
            last_commit=(
                CommitOut.from_domain(overview.last_commit)
                if overview.last_commit is not None
                else None
            ),
        )
