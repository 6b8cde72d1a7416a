import os
import stat
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from checkignore.types import DirType, MatchedRule, PathType


class DirTypeCache:
    """Per-run memo of whether worktree paths are directories.

    Directory-only rules (``build/``) need to know whether the checked path is a
    directory. The lookup is an ``lstat`` relative to the worktree, done at most once
    per path and only when such a rule is actually consulted. A cache is owned by one
    run and thrown away with it.

    Without a root the cache never touches the filesystem; paths not seeded explicitly
    are treated as non-directories.

    Example:
        >>> cache = DirTypeCache()
        >>> cache.get("build")
        <DirType.UNKNOWN: 'unknown'>
        >>> cache.seed("build", DirType.DIRECTORY)
        >>> cache.resolve("build")
        <DirType.DIRECTORY: 'directory'>
        >>> cache.resolve("main.c")
        <DirType.FILE: 'file'>
    """

    def __init__(self, root: Optional[PathType] = None) -> None:
        self.root = Path(root) if root is not None else None
        self._types: Dict[str, DirType] = {}

    def get(self, path: str) -> DirType:
        return self._types.get(path, DirType.UNKNOWN)

    def seed(self, path: str, dtype: DirType) -> None:
        if dtype is not DirType.UNKNOWN:
            self._types[path] = dtype

    def resolve(self, path: str) -> DirType:
        """Return the type of ``path``, looking it up on disk the first time."""
        dtype = self.get(path)
        if dtype is not DirType.UNKNOWN:
            return dtype

        dtype = DirType.FILE
        if self.root is not None:
            try:
                mode = os.lstat(self.root / path).st_mode
            except OSError:
                pass  # missing paths cannot be directories
            else:
                if stat.S_ISDIR(mode):
                    dtype = DirType.DIRECTORY

        self._types[path] = dtype
        return dtype


class BaseExcludeResolver(ABC):
    """
    Abstract base class for answering "which rule, if any, excludes this path?".

    This is the single query the check-ignore core needs from a pattern engine. It
    returns the one rule with the highest precedence among all rule sources, or None
    when nothing matches. Implementations must be deterministic and must not modify
    anything except the directory-type cache they are handed.

    Example:
        >>> from checkignore.exclusion_rules.rule_source import RuleSource
        >>> from checkignore.exclusion_rules.static_rules import StaticExcludeResolver
        >>> source = RuleSource.from_lines(".gitignore", ["*.o", "!keep.o"])
        >>> resolver = StaticExcludeResolver([source])
        >>> rule = resolver.match_for("build/output.o", DirTypeCache())
        >>> rule.source_label, rule.line_number, rule.display_pattern
        ('.gitignore', 1, '*.o')
        >>> resolver.match_for("keep.o", DirTypeCache()).negated
        True
        >>> resolver.match_for("main.c", DirTypeCache()) is None
        True
    """

    @abstractmethod
    def match_for(self, path: str, dtype_cache: DirTypeCache) -> Optional[MatchedRule]:
        """
        Find the highest-priority rule matching ``path``.

        Args:
            path (str): Worktree-relative path with forward slashes and no trailing slash.
            dtype_cache (DirTypeCache): Per-run directory-type knowledge. Implementations
                refine it when a directory-only rule needs to know the path's type.

        Returns:
            Optional[MatchedRule]: The matching rule with its provenance, or None.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Add one or more rule files as extra, highest-priority sources.

        Resolvers without file support use this default, which raises
        NotImplementedError.

        Raises:
            NotImplementedError: If this resolver doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist (for file-supporting resolvers).
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single pattern as a highest-priority rule.

        Raises:
            NotImplementedError: If this resolver doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")

