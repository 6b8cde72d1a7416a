"""A single list of .gitignore-style rules with its provenance."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from pathspec.patterns import GitWildMatchPattern  # type: ignore
from pathspec.patterns.gitwildmatch import GitWildMatchPatternError  # type: ignore

from checkignore.types import DirType, MatchedRule, PathType

from .base_rules import DirTypeCache


@dataclass(frozen=True)
class _Rule:
    line_number: int
    pattern: GitWildMatchPattern
    pattern_text: str
    negated: bool
    directory_only: bool


class RuleSource:
    """One rule list (a .gitignore file, info/exclude, command-line patterns...).

    Each non-blank, non-comment line becomes one rule compiled with pathspec's
    GitWildMatchPattern, which implements Git's wildmatch semantics. Within a source,
    later lines take precedence over earlier ones, so matching walks the rules from the
    last line backwards and stops at the first hit.

    Attributes:
        label (str): How the source is identified in verbose output.
        base (str): Directory the rules are relative to, with a trailing slash, or ""
            for the worktree root. Paths outside ``base`` never match.

    Example:
        >>> source = RuleSource.from_lines(".gitignore", ["# objects", "*.o", "", "build/"])
        >>> [rule.line_number for rule in source.rules]
        [2, 4]
        >>> source.match("lib/a.o", DirTypeCache()).line_number
        2
        >>> source.match("build/out.bin", DirTypeCache()).pattern_text
        'build'
    """

    def __init__(self, label: str, base: str = "") -> None:
        if base and not base.endswith("/"):
            base += "/"
        self.label = label
        self.base = base
        self.rules: List[_Rule] = []

    @classmethod
    def from_lines(cls, label: str, lines: Iterable[str], base: str = "") -> "RuleSource":
        source = cls(label, base)
        for line_number, line in enumerate(lines, start=1):
            source.add_line(line, line_number)
        return source

    @classmethod
    def from_file(cls, path: PathType, label: Optional[str] = None, base: str = "") -> "RuleSource":
        """Parse a rules file.

        Args:
            path: File to read. Lines are decoded as UTF-8, undecodable bytes are kept
                via surrogateescape so they still reach the pattern compiler.
            label: Label for verbose output. Defaults to the path as given.
            base: Directory the rules apply to.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Rules file not found: {path}")

        with open(path, "r", encoding="utf-8", errors="surrogateescape") as f:
            lines = f.read().splitlines()

        return cls.from_lines(str(path) if label is None else label, lines, base)

    def add_line(self, line: str, line_number: Optional[int] = None) -> None:
        """Compile one line and append it as the new highest-priority rule.

        Blank lines, comments and patterns pathspec rejects still consume a line number
        but produce no rule.
        """
        if line_number is None:
            line_number = self.rules[-1].line_number + 1 if self.rules else 1

        text = line.strip()
        try:
            pattern = GitWildMatchPattern(text)
        except GitWildMatchPatternError:
            return
        if pattern.include is None:
            return

        negated = text.startswith("!")
        if negated:
            text = text[1:]
        directory_only = text.endswith("/")
        if directory_only:
            text = text.rstrip("/")

        self.rules.append(_Rule(line_number, pattern, text, negated, directory_only))

    def match(self, path: str, dtype_cache: DirTypeCache) -> Optional[MatchedRule]:
        """Return the last rule in this source that matches ``path``, or None.

        A directory-only rule matches when one of the path's leading directories
        matches it, or when the path itself matches and is a directory. The latter is
        the only case that consults ``dtype_cache``.
        """
        if self.base:
            if not path.startswith(self.base):
                return None
            relative = path[len(self.base) :]  # noqa: E203
        else:
            relative = path

        for rule in reversed(self.rules):
            if self._rule_matches(rule, path, relative, dtype_cache):
                return MatchedRule(
                    source_label=self.label,
                    line_number=rule.line_number,
                    pattern_text=rule.pattern_text,
                    negated=rule.negated,
                    directory_only=rule.directory_only,
                )
        return None

    @staticmethod
    def _rule_matches(rule: _Rule, path: str, relative: str, dtype_cache: DirTypeCache) -> bool:
        regex = rule.pattern.regex
        if regex.match(relative) is not None:
            return True
        if rule.directory_only and dtype_cache.resolve(path) is DirType.DIRECTORY:
            return regex.match(relative + "/") is not None
        return False

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"RuleSource(label={self.label!r}, base={self.base!r}, rules={len(self.rules)})"
