"""Git output formats, their parsers, and validation of untrusted refs/paths.

Everything that depends on the textual shape of git's output lives here so
the contract can be tested without running git.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from git_introspect.domain.errors import InvalidArgument
from git_introspect.domain.models import Commit, ObjectKind

FIELD_SEP = "\x1f"

# %x1f is git's escape for the ASCII unit separator.
COMMIT_FORMAT = "%x1f".join(["%H", "%cn", "%ce", "%cr", "%s"])
BRANCH_FORMAT = "%(refname:short)"

_REF_RE = re.compile(r"[A-Za-z0-9._/@{}^~+\-]+")


@dataclass(frozen=True)
class TreeLine:
    """One record of ``git ls-tree``: ``<mode> <kind> <hash>\\t<path>``."""

    mode: str
    kind: ObjectKind
    hash: str
    path: str


def parse_branch_list(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


def parse_commit_record(output: str) -> Commit | None:
    """Parse one ``COMMIT_FORMAT`` record; ``None`` when git matched no commit."""
    record = output.strip("\n")
    if not record.strip():
        return None
    fields = record.split(FIELD_SEP, 4)
    if len(fields) != 5:
        raise ValueError(f"Malformed commit record: {record!r}")
    commit_hash, name, email, relative_time, subject = fields
    if not commit_hash.strip():
        return None
    return Commit(
        commit_hash=commit_hash.strip(),
        committer_name=name,
        committer_email=email,
        relative_time=relative_time,
        subject=subject,
    )


def parse_kind(marker: str) -> ObjectKind:
    # Submodule gitlinks ("commit") are reported as blobs.
    return ObjectKind.TREE if marker == "tree" else ObjectKind.BLOB


def parse_tree_line(record: str) -> TreeLine:
    meta, sep, path = record.partition("\t")
    parts = meta.split()
    if not sep or len(parts) != 3:
        raise ValueError(f"Malformed ls-tree record: {record!r}")
    mode, marker, object_hash = parts
    return TreeLine(mode=mode, kind=parse_kind(marker), hash=object_hash, path=path)


def parse_tree_listing(output: str) -> list[TreeLine]:
    """Parse NUL-terminated ``git ls-tree -z`` output."""
    return [parse_tree_line(record) for record in output.split("\0") if record]


def printable(text: str) -> str:
    """Render escaped non-UTF-8 bytes in git output as U+FFFD for display.

    Git output is decoded with ``surrogateescape`` so names round-trip into
    later commands; surrogates cannot be encoded to JSON or a strict stdout.
    """
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def validate_ref(ref: str) -> str:
    """Reject refs that could be read as options, ranges or garbage."""
    if not ref:
        raise InvalidArgument("Ref must not be empty")
    if ref.startswith("-"):
        raise InvalidArgument(f"Ref must not start with '-': {ref!r}")
    if not _REF_RE.fullmatch(ref):
        raise InvalidArgument(f"Ref contains forbidden characters: {ref!r}")
    if ".." in ref or "@{" in ref or ref.endswith(".lock") or "//" in ref:
        raise InvalidArgument(f"Ref is not a plain revision: {ref!r}")
    return ref


def validate_path(path: str) -> str:
    """Reject repository-relative paths that could escape or act as options."""
    if any(ch in path for ch in ("\0", "\n", "\r")):
        raise InvalidArgument("Path contains control characters")
    if path.startswith("-"):
        raise InvalidArgument(f"Path must not start with '-': {path!r}")
    if path.startswith("/") and path != "/":
        raise InvalidArgument(f"Path must be relative: {path!r}")
    for part in path.strip("/").split("/"):
        if part in (".", ".."):
            raise InvalidArgument(f"Path must not contain '.' or '..': {path!r}")
    return path
