"""Turning user-supplied path arguments into worktree-relative paths."""

import os
import posixpath
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

from checkignore.exceptions import PathInSubmoduleError, PathOutsideRepositoryError, SymlinkBoundaryError
from checkignore.types import DirType, PathQuery, PathType


def prefix_path(prefix: str, path: str, worktree: Optional[PathType] = None) -> str:
    """Anchor ``path`` at the working-directory ``prefix`` and normalize it.

    Args:
        prefix: Worktree-relative directory the command was started in, either "" or
            ending with "/".
        path: The argument as given. Absolute paths are accepted when they lie inside
            ``worktree``.
        worktree: Root of the working tree, needed for absolute paths and messages.

    Returns:
        The path relative to the worktree root, with ``.``/``..`` and duplicate slashes
        collapsed and no trailing slash. The root itself is "".

    Raises:
        PathOutsideRepositoryError: If the path leaves the worktree.

    Example:
        >>> prefix_path("src/", "../docs//guide.md")
        'docs/guide.md'
        >>> prefix_path("", "build/")
        'build'
        >>> prefix_path("src/", "..")
        ''
    """
    root = str(worktree) if worktree is not None else ""

    if posixpath.isabs(path):
        if worktree is None:
            raise PathOutsideRepositoryError(path, root)
        joined = os.path.relpath(posixpath.normpath(path), posixpath.normpath(root))
        joined = joined.replace(os.sep, "/")
    else:
        joined = prefix + path

    normalized = posixpath.normpath(joined) if joined else "."
    if normalized == ".." or normalized.startswith("../"):
        raise PathOutsideRepositoryError(path, root)
    if normalized == ".":
        return ""
    return normalized.lstrip("/")


def check_path_for_gitlink(path: str, gitlinks: Iterable[str]) -> str:
    """Canonicalize a path that names a nested repository mount point.

    ``vendor/lib/`` collapses to ``vendor/lib`` (already done by prefix_path) and paths
    inside a nested repository are refused: its contents are governed by that
    repository's own rules.

    Raises:
        PathInSubmoduleError: If ``path`` lies strictly inside one of ``gitlinks``.

    Example:
        >>> check_path_for_gitlink("vendor/lib", ["vendor/lib"])
        'vendor/lib'
        >>> check_path_for_gitlink("vendor/lib/x.c", ["vendor/lib"])
        Traceback (most recent call last):
        ...
        checkignore.exceptions.PathInSubmoduleError: Path 'vendor/lib/x.c' is in submodule 'vendor/lib'
    """
    for gitlink in gitlinks:
        if path == gitlink.rstrip("/"):
            return gitlink.rstrip("/")
        if path.startswith(gitlink.rstrip("/") + "/"):
            raise PathInSubmoduleError(path, gitlink.rstrip("/"))
    return path


def die_if_path_beyond_symlink(path: str, prefix: str, worktree: PathType) -> None:
    """Refuse a path whose leading directories include a symbolic link.

    Only the components before the last one are checked; the path itself may be a
    symlink. Walking stops at the first component that does not exist.

    Raises:
        SymlinkBoundaryError: With the path shown relative to ``prefix``.
    """
    root = Path(worktree)
    parts = path.split("/")[:-1]
    current = root
    for part in parts:
        current = current / part
        if current.is_symlink():
            shown = path[len(prefix) :] if prefix and path.startswith(prefix) else path  # noqa: E203
            raise SymlinkBoundaryError(shown)
        if not current.exists():
            return


class PathResolver:
    """Resolves raw arguments into PathQuery objects for one worktree.

    Attributes:
        worktree (Path): Root of the working tree. Symlink checks are relative to it.
        gitlinks (FrozenSet[str]): Nested repository paths from the tracked registry.
    """

    def __init__(self, worktree: PathType, gitlinks: Iterable[str] = ()) -> None:
        self.worktree = Path(worktree)
        self.gitlinks: FrozenSet[str] = frozenset(gitlinks)

    def anchor(self, raw_argument: str, prefix: str) -> str:
        """Join and normalize only, without touching the filesystem."""
        return prefix_path(prefix, raw_argument, self.worktree)

    def resolve(self, raw_argument: str, prefix: str) -> str:
        """Return the worktree-relative path for ``raw_argument``.

        Raises:
            PathOutsideRepositoryError: If the argument leaves the worktree.
            PathInSubmoduleError: If the argument points inside a nested repository.
            SymlinkBoundaryError: If a leading directory of the path is a symlink.
        """
        full_path = self.anchor(raw_argument, prefix)
        full_path = check_path_for_gitlink(full_path, self.gitlinks)
        die_if_path_beyond_symlink(full_path, prefix, self.worktree)
        return full_path

    def query(self, raw_argument: str, prefix: str) -> PathQuery:
        """Resolve ``raw_argument`` and capture the directory hint its spelling carries."""
        dir_hint = DirType.DIRECTORY if raw_argument.endswith("/") else DirType.UNKNOWN
        return PathQuery(raw_argument, self.resolve(raw_argument, prefix), dir_hint)
