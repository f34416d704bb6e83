"""Runtime configuration for git-introspect.

Values come from ``GIT_INTROSPECT_*`` environment variables and fall back to
defaults when unset or unparsable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_BRANCH = "master"
DEFAULT_MAX_PROCESSES = 16
DEFAULT_TIMEOUT_SECONDS = 30.0


def _env_int(key: str, default: int) -> int:
    """Read an integer from an environment variable, returning default on parse failure."""
    try:
        return int(os.environ.get(key, str(default)))
    except (ValueError, TypeError):
        return default


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.environ.get(key, str(default)))
    except (ValueError, TypeError):
        return default


def default_root() -> Path:
    """Directory holding ``<owner>/<name>.git`` bare repositories.

    Respects GIT_INTROSPECT_ROOT; defaults to ~/.git-introspect/repositories.
    """
    root = os.environ.get("GIT_INTROSPECT_ROOT")
    if root:
        return Path(root)
    return Path.home() / ".git-introspect" / "repositories"


@dataclass(frozen=True)
class Settings:
    root: Path
    default_branch: str = DEFAULT_BRANCH
    max_processes: int = DEFAULT_MAX_PROCESSES
    timeout: float | None = DEFAULT_TIMEOUT_SECONDS  # None disables the timeout
    git_binary: str = "git"


def load_settings() -> Settings:
    max_processes = _env_int("GIT_INTROSPECT_MAX_PROCESSES", DEFAULT_MAX_PROCESSES)
    timeout = _env_float("GIT_INTROSPECT_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)
    return Settings(
        root=default_root(),
        default_branch=os.environ.get("GIT_INTROSPECT_DEFAULT_BRANCH") or DEFAULT_BRANCH,
        max_processes=max(1, max_processes),
        timeout=timeout if timeout > 0 else None,
        git_binary=os.environ.get("GIT_INTROSPECT_GIT") or "git",
    )
