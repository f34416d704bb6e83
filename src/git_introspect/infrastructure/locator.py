from __future__ import annotations

import os


def repository_path(root: str | os.PathLike[str], owner: str, name: str) -> str:
    """Map (owner, name) to ``<root>/<owner>/<name>.git``.

    Pure mapping. *owner* and *name* must already be sanitized identifiers;
    the result is used as a working directory, never as a shell argument.
    """
    return os.path.join(os.fspath(root), owner, f"{name}.git")
