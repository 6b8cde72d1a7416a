from dataclasses import dataclass, field
from enum import Enum
from os import PathLike
from typing import Union

from checkignore.exceptions import ConfigurationError

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class DirType(Enum):
    """Tri-state knowledge about whether a path names a directory.

    Rules ending in ``/`` only match directories, so the resolver needs to know the type
    of the path it is checking. The type starts out UNKNOWN and is refined lazily, only
    when a directory-only rule is actually consulted.

    Attributes:
        UNKNOWN: Type has not been looked up yet
        FILE: Anything that is not a directory (regular file, symlink, missing path)
        DIRECTORY: Directory
    """

    UNKNOWN = "unknown"
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class PathQuery:
    """A single path argument after resolution against the working-directory prefix.

    Attributes:
        raw_argument: The argument exactly as the user supplied it. This is what gets
            printed back.
        resolved_path: Worktree-relative path with forward slashes and no trailing slash.
        dir_hint: DIRECTORY when the argument was spelled with a trailing slash.
    """

    raw_argument: str
    resolved_path: str
    dir_hint: DirType = DirType.UNKNOWN


@dataclass(frozen=True)
class MatchedRule:
    """The highest-priority rule that matched a path, with its provenance.

    ``pattern_text`` is stored without the leading ``!`` and the trailing ``/``; those
    are carried by ``negated`` and ``directory_only`` and put back when printing.

    Example:
        >>> rule = MatchedRule(".gitignore", 3, "build", negated=True, directory_only=True)
        >>> rule.display_pattern
        '!build/'
    """

    source_label: str
    line_number: int
    pattern_text: str
    negated: bool = False
    directory_only: bool = False

    @property
    def display_pattern(self) -> str:
        bang = "!" if self.negated else ""
        slash = "/" if self.directory_only else ""
        return f"{bang}{self.pattern_text}{slash}"


@dataclass(frozen=True)
class TrackedNoRuleConsulted:
    """Path names a tracked entry; the rules were never consulted."""

    is_ignored = False


@dataclass(frozen=True)
class NoRuleMatched:
    """No rule in any source matched the path."""

    is_ignored = False


@dataclass(frozen=True)
class RuleMatched:
    """A rule matched the path. Negated rules count too."""

    rule: MatchedRule
    is_ignored = True


EvaluationOutcome = Union[TrackedNoRuleConsulted, RuleMatched, NoRuleMatched]


@dataclass(frozen=True)
class RunConfiguration:
    """Output and input mode flags, fixed once the command line has been parsed.

    Attributes:
        quiet: Suppress all output; only the exit status reports the result.
        verbose: Print the matching rule next to each path.
        show_non_matching: Also print paths that matched no rule (requires verbose).
        null_terminated: NUL-terminated input records and output (requires stdin_mode).
        stdin_mode: Read paths from standard input instead of the argument list.
    """

    quiet: bool = False
    verbose: bool = False
    show_non_matching: bool = False
    null_terminated: bool = False
    stdin_mode: bool = False

    def validate(self, path_count: int) -> None:
        """Reject flag combinations that make no sense, before any path is evaluated.

        Args:
            path_count: Number of positional path arguments supplied.

        Raises:
            ConfigurationError: If the combination of flags and arguments is invalid.

        Example:
            >>> RunConfiguration(quiet=True, verbose=True).validate(1)
            Traceback (most recent call last):
            ...
            checkignore.exceptions.ConfigurationError: cannot have both --quiet and --verbose
        """
        if self.stdin_mode:
            if path_count > 0:
                raise ConfigurationError("cannot specify pathnames with --stdin")
        else:
            if self.null_terminated:
                raise ConfigurationError("-z only makes sense with --stdin")
            if path_count == 0:
                raise ConfigurationError("no path specified")
        if self.quiet:
            if path_count > 1:
                raise ConfigurationError("--quiet is only valid with a single pathname")
            if self.verbose:
                raise ConfigurationError("cannot have both --quiet and --verbose")
        if self.show_non_matching and not self.verbose:
            raise ConfigurationError("--non-matching is only valid with --verbose")


@dataclass
class RunTotals:
    """Running count of matched paths for one invocation.

    Example:
        >>> totals = RunTotals()
        >>> totals.add(2)
        >>> totals.add(0)
        >>> totals.ignored_count
        2
        >>> totals.exit_status
        0
    """

    ignored_count: int = field(default=0)

    def add(self, matched: int) -> None:
        if matched < 0:
            raise ValueError(f"Match counts only ever grow, got {matched}")
        self.ignored_count += matched

    @property
    def exit_status(self) -> int:
        return 0 if self.ignored_count > 0 else 1
