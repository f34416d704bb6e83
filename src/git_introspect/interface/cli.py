import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path

from git_introspect.application.use_cases import (
    count_commits,
    get_last_commit,
    get_repository_overview,
    list_branches,
    list_directory,
    resolve_object,
)
from git_introspect.config import load_settings
from git_introspect.domain.errors import IntrospectionError
from git_introspect.domain.models import Commit, RepositoryState
from git_introspect.infrastructure.git_cli_reader import GitCliReader
from git_introspect.infrastructure.git_format import printable
from git_introspect.infrastructure.locator import repository_path
from git_introspect.infrastructure.process_runner import ProcessRunner


def _error_exit(msg: str) -> None:
    """Print error message to stderr and exit with code 1."""
    print(f"Error: {msg}", file=sys.stderr)
    sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _print_commit(commit: Commit) -> None:
    print(f"Commit:    {commit.commit_hash}")
    print(f"Committer: {printable(commit.committer_name)} <{printable(commit.committer_email)}>")
    print(f"Date:      {commit.relative_time}")
    print(f"Subject:   {printable(commit.subject)}")


def _print_tree(entries, max_path=60) -> None:
    """Print tree entries as a table: kind, path, short hash, age, subject."""
    if not entries:
        return
    path_width = min(max(len(printable(e.path)) for e in entries), max_path)
    header = f"{'Kind':<5}  {'Path':<{path_width}}  {'Commit':<10}  {'When':<16}  Subject"
    print(header)
    print("-" * len(header))
    for e in entries:
        path = printable(e.path)
        if len(path) > path_width:
            path = "..." + path[-(path_width - 3):]
        c = e.last_commit
        print(
            f"{e.kind.value:<5}  {path:<{path_width}}  {c.commit_hash[:10]:<10}  "
            f"{c.relative_time:<16}  {printable(c.subject)}"
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-introspect",
        description="Inspect branches, commits and trees of hosted bare repositories",
    )
    parser.add_argument(
        "--root", default=None,
        help="Directory holding <owner>/<name>.git (default: $GIT_INTROSPECT_ROOT)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every git invocation to stderr",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def repo_command(name: str, help_text: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_text)
        p.add_argument("owner", help="Repository owner")
        p.add_argument("name", help="Repository name")
        return p

    repo_command("overview", "Branches, commit count and last commit")
    repo_command("branches", "List branches, default branch first")

    p = repo_command("last-commit", "Most recent commit touching a ref or path")
    p.add_argument("path", nargs="?", default=None)
    p.add_argument("--ref", default=None, help="Branch, tag or commit (default: default branch)")

    p = repo_command("tree", "List a folder with the last commit of each entry")
    p.add_argument("path", nargs="?", default="")
    p.add_argument("--ref", default=None, help="Branch, tag or commit (default: default branch)")

    p = repo_command("object", "Hash and kind of a file or folder")
    p.add_argument("path")
    p.add_argument("--ref", default=None, help="Branch, tag or commit (default: default branch)")

    p = repo_command("count", "Number of commits reachable from a ref")
    p.add_argument("--ref", default=None, help="Branch, tag or commit (default: default branch)")

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    return parser


async def _run_command(args, settings) -> None:
    runner = ProcessRunner(max_processes=settings.max_processes, timeout=settings.timeout)
    reader = GitCliReader(
        repository_path(settings.root, args.owner, args.name),
        runner=runner,
        git_binary=settings.git_binary,
    )
    ref = getattr(args, "ref", None) or settings.default_branch

    if args.command == "overview":
        overview = await get_repository_overview(reader, reader.path, settings.default_branch)
        print(f"Repository: {overview.repo_path}")
        if overview.state is RepositoryState.EMPTY:
            print("No commits yet.")
            return
        print(f"Branches:   {', '.join(printable(b) for b in overview.branches)}")
        print(f"Commits:    {overview.commit_count}")
        print()
        _print_commit(overview.last_commit)
    elif args.command == "branches":
        for branch in await list_branches(reader, settings.default_branch):
            print(printable(branch))
    elif args.command == "last-commit":
        _print_commit(await get_last_commit(reader, ref, args.path))
    elif args.command == "tree":
        _print_tree(await list_directory(reader, ref, args.path))
    elif args.command == "object":
        identity = await resolve_object(reader, ref, args.path)
        print(f"{identity.kind.value} {identity.hash}")
    elif args.command == "count":
        print(await count_commits(reader, ref))


def main() -> None:
    args = _build_parser().parse_args()
    _configure_logging(args.verbose)

    settings = load_settings()
    if args.root:
        settings = replace(settings, root=Path(args.root))

    if args.command == "serve":
        from git_introspect.web.server import launch

        launch(
            settings, host=args.host, port=args.port,
            log_level="debug" if args.verbose else "warning",
        )
        return

    try:
        asyncio.run(_run_command(args, settings))
    except IntrospectionError as exc:
        _error_exit(str(exc))
