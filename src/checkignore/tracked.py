"""Tracked-path registry lookups.

Paths that are already tracked are never reported as ignored, which keeps check-ignore
consistent with ``git status`` and ``git add``: a rule only affects untracked content.
"""

import os
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Sequence

from checkignore.exceptions import IndexCorruptError
from checkignore.types import PathType

GITLINK_MODE = "160000"


class BaseTrackedPathRegistry(ABC):
    """Read-only view of the paths under version control."""

    @abstractmethod
    def find_matching(self, paths: Sequence[str]) -> Optional[List[bool]]:
        """Look up a whole batch of worktree-relative paths in one pass.

        Returns:
            A list parallel to ``paths`` telling which of them name a tracked entry, or
            None when the registry has no information to offer.
        """
        pass

    @property
    def gitlinks(self) -> FrozenSet[str]:
        """Paths of nested repositories (submodules) recorded in the registry."""
        return frozenset()


class StaticTrackedPathRegistry(BaseTrackedPathRegistry):
    """Registry over a fixed set of paths.

    Example:
        >>> registry = StaticTrackedPathRegistry(["src/main.c"], gitlinks=["vendor/lib"])
        >>> registry.find_matching(["src/main.c", "src", "vendor/lib"])
        [True, False, True]
    """

    def __init__(self, paths: Iterable[str], gitlinks: Iterable[str] = ()) -> None:
        self._gitlinks = frozenset(gitlinks)
        self._paths = frozenset(paths) | self._gitlinks

    def find_matching(self, paths: Sequence[str]) -> Optional[List[bool]]:
        return [path in self._paths for path in paths]

    @property
    def gitlinks(self) -> FrozenSet[str]:
        return self._gitlinks


class GitIndexRegistry(StaticTrackedPathRegistry):
    """Registry backed by the repository index, read once via ``git ls-files``.

    Raises:
        IndexCorruptError: If git is unavailable or cannot read the index.
    """

    def __init__(self, worktree: PathType, timeout: int = 30) -> None:
        self.worktree = Path(worktree)
        paths, gitlinks = self._read_index(timeout)
        super().__init__(paths, gitlinks)

    def _read_index(self, timeout: int):
        try:
            result = subprocess.run(
                ["git", "ls-files", "--stage", "-z"],
                cwd=self.worktree,
                capture_output=True,
                timeout=timeout,
            )
        except FileNotFoundError:
            raise IndexCorruptError("git is not installed or not on PATH")
        except subprocess.TimeoutExpired:
            raise IndexCorruptError(f"git ls-files timed out after {timeout}s")

        if result.returncode != 0:
            raise IndexCorruptError(os.fsdecode(result.stderr).strip())

        paths: List[str] = []
        gitlinks: List[str] = []
        for entry in result.stdout.split(b"\0"):
            if not entry:
                continue
            # <mode> SP <object> SP <stage> TAB <path>
            meta, sep, raw_path = entry.partition(b"\t")
            if not sep:
                raise IndexCorruptError(f"unexpected ls-files entry {entry!r}")
            path = os.fsdecode(raw_path)
            paths.append(path)
            if meta.split(b" ", 1)[0].decode("ascii") == GITLINK_MODE:
                gitlinks.append(path)
        return paths, gitlinks


class TrackedPathFilter:
    """Marks which arguments of a batch are tracked, with a single registry lookup."""

    def __init__(self, registry: BaseTrackedPathRegistry) -> None:
        self.registry = registry

    def classify(self, paths: Sequence[str]) -> List[bool]:
        """Return ``seen[i]``, true when ``paths[i]`` exactly names a tracked entry.

        Example:
            >>> tracked = TrackedPathFilter(StaticTrackedPathRegistry(["README"]))
            >>> tracked.classify(["README", "build/out.o"])
            [True, False]
            >>> TrackedPathFilter(StaticTrackedPathRegistry([])).classify([])
            []
        """
        seen = self.registry.find_matching(paths) if paths else None
        if seen is None:
            return [False] * len(paths)
        if len(seen) != len(paths):
            raise ValueError(f"Registry answered {len(seen)} lookups for {len(paths)} paths")
        return list(seen)
