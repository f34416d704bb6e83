from __future__ import annotations

from git_introspect.domain.errors import InvalidState
from git_introspect.domain.models import (
    Commit,
    ObjectIdentity,
    RepositoryOverview,
    RepositoryState,
    TreeEntry,
)
from git_introspect.domain.ports import GitRepository
from git_introspect.infrastructure.git_cli_reader import put_default_branch_first
from git_introspect.infrastructure.git_format import validate_path, validate_ref


async def get_repository_overview(
    repo: GitRepository, repo_path: str, default_branch: str = "master"
) -> RepositoryOverview:
    """Branches, commit count and last commit of the default branch.

    Emptiness is checked once; an empty repository short-circuits without
    any branch or commit query.
    """
    if await repo.is_empty():
        return RepositoryOverview(
            repo_path=repo_path,
            state=RepositoryState.EMPTY,
            branches=[],
            default_branch=None,
            commit_count=0,
            last_commit=None,
        )
    branches = put_default_branch_first(await repo.all_branches(), default_branch)
    return RepositoryOverview(
        repo_path=repo_path,
        state=RepositoryState.INITIALIZED,
        branches=branches,
        default_branch=default_branch,
        commit_count=await repo.count_reachable(default_branch),
        last_commit=await repo.last_commit(default_branch),
    )


async def get_default_branch(repo: GitRepository, default_branch: str = "master") -> str:
    if await repo.is_empty():
        raise InvalidState("Repository has no commits, so it has no default branch")
    return put_default_branch_first(await repo.all_branches(), default_branch)[0]


async def list_branches(repo: GitRepository, default_branch: str = "master") -> list[str]:
    """All branches, default first when present. Empty repositories have none."""
    branches = await repo.all_branches()
    if default_branch in branches:
        return put_default_branch_first(branches, default_branch)
    return branches


async def get_last_commit(repo: GitRepository, ref: str, path: str | None = None) -> Commit:
    validate_ref(ref)
    if path:
        validate_path(path)
    return await repo.last_commit(ref, path or None)


async def list_directory(repo: GitRepository, ref: str, path: str = "") -> list[TreeEntry]:
    validate_ref(ref)
    validate_path(path)
    return await repo.file_commit_list(ref, path)


async def resolve_object(repo: GitRepository, ref: str, path: str) -> ObjectIdentity:
    validate_ref(ref)
    validate_path(path)
    return await repo.object_identity(ref, path)


async def count_commits(repo: GitRepository, ref: str) -> int:
    validate_ref(ref)
    return await repo.commit_count(ref)
