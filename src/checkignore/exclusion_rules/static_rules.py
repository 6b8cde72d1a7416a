"""In-memory exclude resolver over a fixed list of rule sources."""

from os import PathLike
from typing import List, Optional, Sequence, Union

from checkignore.types import MatchedRule, PathType

from .base_rules import BaseExcludeResolver, DirTypeCache
from .rule_source import RuleSource


class StaticExcludeResolver(BaseExcludeResolver):
    """Exclude resolver over a fixed list of sources, highest priority first.

    Nothing is discovered on disk: the resolver knows exactly the sources it was given.
    This makes it the natural stand-in for exercising the check-ignore core without a
    real worktree.

    Attributes:
        sources (List[RuleSource]): Sources in precedence order, highest first.

    Example:
        >>> resolver = StaticExcludeResolver([])
        >>> resolver.add_rule("*.log")
        >>> resolver.match_for("debug.log", DirTypeCache()).source_label
        '<command line>'
    """

    COMMAND_LINE_LABEL = "<command line>"

    def __init__(self, sources: Optional[Sequence[RuleSource]] = None) -> None:
        self.sources: List[RuleSource] = list(sources) if sources else []
        self._command_line: Optional[RuleSource] = None
        self._command_line_count = 0

    def match_for(self, path: str, dtype_cache: DirTypeCache) -> Optional[MatchedRule]:
        for source in self.sources:
            rule = source.match(path, dtype_cache)
            if rule is not None:
                return rule
        return None

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Add rule files in front of the existing sources, later files first."""
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            self.sources.insert(0, RuleSource.from_file(rules_file))

    def add_rule(self, rule: str) -> None:
        """Add a pattern as the new highest-priority rule.

        Consecutive patterns share one command-line source. A rule file loaded after
        them moves in front, so the next pattern opens a new command-line source ahead
        of that file. Line numbers count every pattern in command-line order.
        """
        source = self._command_line
        if source is None or self.sources[0] is not source:
            source = RuleSource(self.COMMAND_LINE_LABEL)
            self.sources.insert(0, source)
            self._command_line = source
        self._command_line_count += 1
        source.add_line(rule, self._command_line_count)
