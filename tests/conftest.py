import os
import subprocess
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


def _git(*args: str, env: dict | None = None) -> str:
    result = subprocess.run(
        ["git", *args],
        capture_output=True, text=True, check=True,
        env=env,
    )
    return result.stdout.strip()


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary working repository on branch master."""
    work = tmp_path / "work"
    _git("init", "--initial-branch=master", str(work))
    _git("-C", str(work), "config", "user.name", "Test User")
    _git("-C", str(work), "config", "user.email", "test@example.com")
    return work


@pytest.fixture
def repos_root(tmp_path: Path) -> Path:
    root = tmp_path / "repos"
    root.mkdir()
    return root


def commit_file(
    repo: Path,
    file_path: str,
    content: str,
    message: str,
    days_ago: int = 0,
    author_name: str = "Test User",
    author_email: str = "test@example.com",
) -> str:
    """Create a commit at a known relative date and return its hash."""
    full_path = repo / file_path
    full_path.parent.mkdir(parents=True, exist_ok=True)
    full_path.write_text(content)

    date = datetime.now(timezone.utc) - timedelta(days=days_ago)
    date_str = date.strftime("%Y-%m-%dT%H:%M:%S %z")

    _git("-C", str(repo), "add", file_path)
    env = {
        **os.environ,
        "GIT_AUTHOR_DATE": date_str,
        "GIT_COMMITTER_DATE": date_str,
        "GIT_AUTHOR_NAME": author_name,
        "GIT_AUTHOR_EMAIL": author_email,
        "GIT_COMMITTER_NAME": author_name,
        "GIT_COMMITTER_EMAIL": author_email,
    }
    _git("-C", str(repo), "commit", "--no-gpg-sign", "-m", message, env=env)
    return _git("-C", str(repo), "rev-parse", "HEAD")


def publish(work: Path, root: Path, owner: str, name: str) -> Path:
    """Bare-clone *work* to ``<root>/<owner>/<name>.git``."""
    bare = root / owner / f"{name}.git"
    bare.parent.mkdir(parents=True, exist_ok=True)
    _git("clone", "--quiet", "--bare", str(work), str(bare))
    return bare


def ls_tree_hash(repo: Path, ref: str, path: str) -> str:
    return _git("-C", str(repo), "rev-parse", f"{ref}:{path}")


@pytest.fixture
def empty_bare_repo(repos_root: Path) -> Path:
    """A freshly initialized bare repository with zero commits."""
    bare = repos_root / "alice" / "empty.git"
    _git("init", "--quiet", "--bare", "--initial-branch=master", str(bare))
    return bare


@pytest.fixture
def single_commit_repo(tmp_git_repo: Path, repos_root: Path) -> Path:
    """Bare repository with exactly one commit on master."""
    commit_file(tmp_git_repo, "README.md", "# Single\n", "Initial commit", days_ago=3,
                author_name="Alice", author_email="alice@example.com")
    return publish(tmp_git_repo, repos_root, "alice", "single")


@pytest.fixture
def project_repo(tmp_git_repo: Path, repos_root: Path) -> Path:
    """Bare repository with 6 commits on master plus branches develop (4) and feature.

    master tree:
        README.md          (last touched by "Update README")
        docs/guide.md      (last touched by "Add guide")
        src/main.py        (last touched by "Update main")
        src/utils.py       (last touched by "Add utils")
    """
    commit_file(tmp_git_repo, "README.md", "# Project\n", "Initial commit", days_ago=60)
    commit_file(tmp_git_repo, "src/main.py", "print('hello')\n", "Add main", days_ago=45)
    commit_file(tmp_git_repo, "src/utils.py", "def helper(): pass\n", "Add utils", days_ago=30,
                author_name="Bob", author_email="bob@example.com")
    commit_file(tmp_git_repo, "src/main.py", "print('hello world')\n", "Update main", days_ago=15)
    _git("-C", str(tmp_git_repo), "branch", "develop")
    commit_file(tmp_git_repo, "docs/guide.md", "Read me.\n", "Add guide", days_ago=10,
                author_name="Carol", author_email="carol@example.com")
    commit_file(tmp_git_repo, "README.md", "# Project\nUpdated.\n", "Update README", days_ago=5)
    _git("-C", str(tmp_git_repo), "branch", "feature")
    return publish(tmp_git_repo, repos_root, "alice", "project")
