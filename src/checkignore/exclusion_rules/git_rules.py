"""Exclude resolution over Git's standard, layered rule sources."""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from checkignore.types import MatchedRule, PathType

from .base_rules import DirTypeCache
from .rule_source import RuleSource
from .static_rules import StaticExcludeResolver


class GitIgnoreExcludeResolver(StaticExcludeResolver):
    """Exclude resolver that layers rule sources the way Git does.

    Sources are consulted in this order, and the first rule that matches wins:

    1. Extra sources given on the command line (``-e FILE``, ``-i PATTERN``), later
       ones first.
    2. Per-directory ``.gitignore`` files, starting with the one in the directory that
       contains the path and walking up to the worktree root. Each file's patterns are
       matched against the path relative to the directory holding it.
    3. ``$GIT_DIR/info/exclude``.
    4. The global excludes file (``core.excludesfile``).

    Within a single source, later lines beat earlier ones. Per-directory files are read
    the first time a path below their directory is checked and then kept for the
    resolver's lifetime; a missing file is simply not a source.

    Attributes:
        worktree (Path): Root of the working tree.
        git_dir (Path): Repository directory holding ``info/exclude``.
        standard_sources (List[RuleSource]): info/exclude and the global file, in
            precedence order.

    Example:
        >>> import tempfile
        >>> from pathlib import Path
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     root = Path(tmpdir)
        ...     _ = (root / ".gitignore").write_text("*.log\\n")
        ...     (root / "sub").mkdir()
        ...     _ = (root / "sub" / ".gitignore").write_text("# keep logs here\\n!*.log\\n")
        ...     resolver = GitIgnoreExcludeResolver(root)
        ...     top = resolver.match_for("debug.log", DirTypeCache(root))
        ...     nested = resolver.match_for("sub/debug.log", DirTypeCache(root))
        >>> top.source_label, top.line_number, top.display_pattern
        ('.gitignore', 1, '*.log')
        >>> nested.source_label, nested.line_number, nested.display_pattern
        ('sub/.gitignore', 2, '!*.log')
    """

    PER_DIRECTORY_FILE = ".gitignore"

    def __init__(
        self,
        worktree: PathType,
        excludes_file: Optional[PathType] = None,
        git_dir: Optional[PathType] = None,
        extra_sources: Optional[Sequence[RuleSource]] = None,
    ) -> None:
        """Set up the resolver and read the repository-wide sources.

        Args:
            worktree: Root of the working tree.
            excludes_file: Global excludes file, if any. Silently skipped when missing.
            git_dir: Repository directory. Defaults to ``<worktree>/.git``.
            extra_sources: Command-line sources, highest priority first.
        """
        super().__init__(extra_sources)
        self.worktree = Path(worktree)
        self.git_dir = Path(git_dir) if git_dir is not None else self.worktree / ".git"
        self.standard_sources: List[RuleSource] = []
        self._directory_sources: Dict[str, Optional[RuleSource]] = {}

        info_exclude = self.git_dir / "info" / "exclude"
        if info_exclude.is_file():
            self.standard_sources.append(RuleSource.from_file(info_exclude, label=self._label_for(info_exclude)))

        if excludes_file is not None and Path(excludes_file).is_file():
            self.standard_sources.append(RuleSource.from_file(excludes_file))

    def match_for(self, path: str, dtype_cache: DirTypeCache) -> Optional[MatchedRule]:
        rule = super().match_for(path, dtype_cache)
        if rule is not None:
            return rule

        for source in self._per_directory_sources(path):
            rule = source.match(path, dtype_cache)
            if rule is not None:
                return rule

        for source in self.standard_sources:
            rule = source.match(path, dtype_cache)
            if rule is not None:
                return rule

        return None

    def _per_directory_sources(self, path: str) -> Iterator[RuleSource]:
        """Yield the .gitignore sources that apply to ``path``, deepest first."""
        parents = path.split("/")[:-1]
        for depth in range(len(parents), -1, -1):
            source = self._directory_source("/".join(parents[:depth]))
            if source is not None:
                yield source

    def _directory_source(self, directory: str) -> Optional[RuleSource]:
        if directory not in self._directory_sources:
            label = f"{directory}/{self.PER_DIRECTORY_FILE}" if directory else self.PER_DIRECTORY_FILE
            rules_path = self.worktree / label
            source = None
            if rules_path.is_file():
                source = RuleSource.from_file(rules_path, label=label, base=directory)
            self._directory_sources[directory] = source
        return self._directory_sources[directory]

    def _label_for(self, path: Path) -> str:
        try:
            return path.relative_to(self.worktree).as_posix()
        except ValueError:
            return str(path)
