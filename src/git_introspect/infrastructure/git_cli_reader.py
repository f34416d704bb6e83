from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from git_introspect.domain.errors import (
    BranchNotFound,
    FolderNotFound,
    ObjectNotFound,
    ProcessFailure,
    RepositoryNotFound,
)
from git_introspect.domain.models import (
    Commit,
    ObjectIdentity,
    ObjectKind,
    RepositoryState,
    TreeEntry,
)
from git_introspect.infrastructure.git_format import (
    BRANCH_FORMAT,
    COMMIT_FORMAT,
    parse_branch_list,
    parse_commit_record,
    parse_tree_listing,
)
from git_introspect.infrastructure.process_runner import ProcessRunner

logger = logging.getLogger(__name__)


class GitCliReader:
    """Introspects one bare repository through the git command line.

    Refs and paths are passed straight to git as separate arguments;
    callers validate untrusted values first (see ``git_format``).
    """

    def __init__(
        self,
        repo_path: str,
        runner: ProcessRunner | None = None,
        git_binary: str = "git",
    ) -> None:
        path = Path(repo_path).resolve()
        if not path.is_dir() or not (path / "HEAD").exists():
            raise RepositoryNotFound(f"Not a git repository: {path}")
        self._path = str(path)
        self._runner = runner or ProcessRunner()
        self._git = git_binary

    @property
    def path(self) -> str:
        return self._path

    async def _run(self, *args: str) -> str:
        return await self._runner.run(
            self._git, ["--literal-pathspecs", *args], cwd=self._path
        )

    # -- branches ---------------------------------------------------------

    async def all_branches(self) -> list[str]:
        output = await self._run("branch", f"--format={BRANCH_FORMAT}")
        return parse_branch_list(output)

    # -- commits ----------------------------------------------------------

    async def last_commit(self, ref: str, file: str | None = None) -> Commit:
        """Most recent commit reachable from *ref*, optionally touching *file*."""
        args = ["log", "-1", f"--format={COMMIT_FORMAT}", ref, "--"]
        if file:
            args.append(file)
        try:
            output = await self._run(*args)
        except ProcessFailure:
            if not await self._names_commit(ref):
                raise ObjectNotFound(f"No commit for ref {ref!r}") from None
            raise
        commit = parse_commit_record(output)
        if commit is None:
            raise ObjectNotFound(
                f"Object does not exist: {file or '.'} at {ref!r}"
            )
        return commit

    async def _names_commit(self, ref: str) -> bool:
        """Whether *ref* peels to a commit.

        A quiet failure (exit 1, no stderr) means it does not; covers unknown
        refs as well as blob and tree hashes used as refs.
        """
        try:
            await self._run("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}")
        except ProcessFailure as exc:
            if exc.returncode == 1 and not exc.stderr:
                return False
            raise
        return True

    # -- trees ------------------------------------------------------------

    async def file_commit_list(self, ref: str, dir_path: str = "") -> list[TreeEntry]:
        """Immediate children of *dir_path* at *ref*, each with its last commit."""
        # ^{commit} keeps bare tree hashes from being listed as if they were refs
        args = ["ls-tree", "-z", f"{ref}^{{commit}}"]
        directory = dir_path.strip("/")
        if directory:
            args += ["--", f"{directory}/"]
        try:
            output = await self._run(*args)
        except ProcessFailure:
            if not await self._names_commit(ref):
                raise FolderNotFound(f"No commit for ref {ref!r}") from None
            raise
        lines = parse_tree_listing(output)
        if not lines:
            raise FolderNotFound(f"Folder does not exist: {dir_path or '/'} at {ref!r}")

        logger.debug("Resolving last commits for %d entries", len(lines))
        results = await asyncio.gather(
            *(self.last_commit(ref, line.path) for line in lines),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return [
            TreeEntry(kind=line.kind, path=line.path, last_commit=commit)
            for line, commit in zip(lines, results)
        ]

    # -- objects ----------------------------------------------------------

    async def object_identity(self, ref: str, file: str) -> ObjectIdentity:
        target = file.rstrip("/")
        if not target:
            raise ObjectNotFound("An object path is required")
        try:
            output = await self._run(
                "ls-tree", "-z", f"{ref}^{{commit}}", "--", target
            )
        except ProcessFailure:
            if not await self._names_commit(ref):
                raise ObjectNotFound(f"No commit for ref {ref!r}") from None
            raise
        for line in parse_tree_listing(output):
            if line.path == target:
                return ObjectIdentity(hash=line.hash, kind=line.kind)
        raise ObjectNotFound(f"Object does not exist: {file} at {ref!r}")

    async def object_hash(self, ref: str, file: str) -> str:
        return (await self.object_identity(ref, file)).hash

    async def object_type(self, ref: str, file: str) -> ObjectKind:
        return (await self.object_identity(ref, file)).kind

    # -- repository state -------------------------------------------------

    async def is_empty(self) -> bool:
        output = await self._run("rev-list", "--all", "--max-count=1")
        return not output.strip()

    async def state(self) -> RepositoryState:
        if await self.is_empty():
            return RepositoryState.EMPTY
        return RepositoryState.INITIALIZED

    async def commit_count(self, ref: str) -> int:
        # rev-list fails outright on a repository without branches
        if not await self.all_branches():
            return 0
        return await self.count_reachable(ref)

    async def count_reachable(self, ref: str) -> int:
        """Commits reachable from *ref*, for callers that already know branches exist."""
        try:
            output = await self._run("rev-list", "--count", ref, "--")
        except ProcessFailure:
            if not await self._names_commit(ref):
                raise ObjectNotFound(f"No commit for ref {ref!r}") from None
            raise
        return int(output.strip())


def put_default_branch_first(branches: list[str], default_name: str = "master") -> list[str]:
    """Return *branches* with *default_name* moved to the front."""
    try:
        index = branches.index(default_name)
    except ValueError:
        raise BranchNotFound(
            f'No default branch "{default_name}" in branches'
        ) from None
    return [branches[index], *branches[:index], *branches[index + 1:]]
