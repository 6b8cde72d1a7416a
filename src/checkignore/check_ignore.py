"""Batch and streaming evaluation of path arguments against ignore rules.

For every path, in input order:

1. resolve it against the working-directory prefix (fatal if it leaves the worktree,
   points into a nested repository, or crosses a symlink),
2. if it names a tracked entry, it is not ignored and no rule is consulted,
3. otherwise ask the exclude resolver for the highest-priority matching rule,
4. print the outcome unless running quietly, and count it if a rule matched.

In ``--stdin`` mode each input record goes through the same steps as a one-element
batch, and output is flushed after every record so a consumer on the other end of a
pipe can read answers as they are produced.
"""

import os
from typing import BinaryIO, Optional, Protocol, Sequence

from checkignore.encoder import RuleOutcomeEncoder
from checkignore.exceptions import ConfigurationError, NoPathspecError, PathOutsideRepositoryError
from checkignore.exclusion_rules.base_rules import BaseExcludeResolver, DirTypeCache
from checkignore.io.record_reader import RecordReader
from checkignore.path_resolver import PathResolver
from checkignore.quoting import unquote_c_style
from checkignore.tracked import TrackedPathFilter
from checkignore.types import (
    EvaluationOutcome,
    NoRuleMatched,
    PathQuery,
    RuleMatched,
    RunConfiguration,
    RunTotals,
    TrackedNoRuleConsulted,
)


class OutputSink(Protocol):
    """Where encoded records go. SafeWriter is the production implementation."""

    def write(self, data: bytes) -> None: ...

    def flush(self) -> None: ...


class CheckIgnore:
    """Evaluates path arguments and writes one record per reported path.

    A CheckIgnore instance is one run: its directory-type cache and totals live as long
    as the instance and are never shared between runs.

    Attributes:
        config (RunConfiguration): Output and input mode flags.
        path_resolver (PathResolver): Turns arguments into worktree-relative paths.
        tracked (TrackedPathFilter): Registry lookups for tracked paths.
        excludes (BaseExcludeResolver): Finds the matching rule for a path.
        writer (OutputSink): Destination for encoded records.
        prefix (str): Working-directory prefix, "" or ending with "/".
        totals (RunTotals): Count of matched paths so far.

    Example:
        >>> import io
        >>> from checkignore.exclusion_rules import RuleSource, StaticExcludeResolver
        >>> from checkignore.tracked import StaticTrackedPathRegistry
        >>> sink = io.BytesIO()
        >>> run = CheckIgnore(
        ...     RunConfiguration(verbose=True, show_non_matching=True),
        ...     PathResolver("/nonexistent-worktree"),
        ...     TrackedPathFilter(StaticTrackedPathRegistry(["kept.o"])),
        ...     StaticExcludeResolver([RuleSource.from_lines(".gitignore", ["*.o"])]),
        ...     sink,
        ... )
        >>> run.check(["a.o", "kept.o", "a.c"])
        1
        >>> sink.getvalue().split(b"\\n")
        [b'.gitignore:1:*.o\\t"a.o"', b'::\\t"kept.o"', b'::\\t"a.c"', b'']
    """

    def __init__(
        self,
        config: RunConfiguration,
        path_resolver: PathResolver,
        tracked: TrackedPathFilter,
        excludes: BaseExcludeResolver,
        writer: OutputSink,
        prefix: str = "",
    ) -> None:
        self.config = config
        self.path_resolver = path_resolver
        self.tracked = tracked
        self.excludes = excludes
        self.writer = writer
        self.prefix = prefix
        self.encoder = RuleOutcomeEncoder(config)
        self.dtype_cache = DirTypeCache(path_resolver.worktree)
        self.totals = RunTotals()

    def evaluate(self, query: PathQuery, is_tracked: bool) -> EvaluationOutcome:
        """Decide the outcome for one resolved path."""
        if is_tracked:
            return TrackedNoRuleConsulted()

        self.dtype_cache.seed(query.resolved_path, query.dir_hint)
        rule = self.excludes.match_for(query.resolved_path, self.dtype_cache)
        if rule is None:
            return NoRuleMatched()
        return RuleMatched(rule)

    def check(self, pathspecs: Sequence[str]) -> int:
        """Evaluate a batch of path arguments in order.

        Args:
            pathspecs: Raw path arguments, relative to the prefix.

        Returns:
            The number of arguments a rule matched in this batch.

        Raises:
            NoPathspecError: If ``pathspecs`` is empty and the run is not quiet.
            ConfigurationError: If one of the arguments is an empty string.
            SymlinkBoundaryError: If an argument crosses a symlink; nothing after it is
                evaluated.
        """
        if not pathspecs:
            if self.config.quiet:
                return 0
            raise NoPathspecError()
        if not all(pathspecs):
            raise ConfigurationError("empty string is not a valid pathspec")

        seen = self.tracked.classify([self._lookup_key(raw) for raw in pathspecs])

        matched = 0
        for raw, is_tracked in zip(pathspecs, seen):
            query = self.path_resolver.query(raw, self.prefix)
            outcome = self.evaluate(query, is_tracked)
            if not self.config.quiet:
                record = self.encoder.encode(query.raw_argument, outcome)
                if record:
                    self.writer.write(record)
            if outcome.is_ignored:
                matched += 1

        self.totals.add(matched)
        return matched

    def check_stdin_paths(self, stream: BinaryIO) -> int:
        """Evaluate one path per input record, flushing output after each.

        Records end with NUL when ``null_terminated`` is set, otherwise with a newline.
        In newline mode a record that starts with a double quote is C-unquoted first.

        Returns:
            The number of records a rule matched.

        Raises:
            BadlyQuotedLineError: If a quoted record is malformed. Records before it
                have already been answered.
            OutputFlushError: If stdout cannot be flushed.
        """
        terminator = b"\0" if self.config.null_terminated else b"\n"

        matched = 0
        for record in RecordReader(stream, terminator):
            if not self.config.null_terminated and record.startswith(b'"'):
                record = unquote_c_style(record)
            matched += self.check([os.fsdecode(record)])
            self.writer.flush()
        return matched

    def run(self, pathspecs: Sequence[str], stream: Optional[BinaryIO] = None) -> RunTotals:
        """Run in the mode selected by the configuration and return the totals."""
        if self.config.stdin_mode:
            if stream is None:
                raise ValueError("--stdin mode needs an input stream")
            self.check_stdin_paths(stream)
        else:
            self.check(pathspecs)
            self.writer.flush()
        return self.totals

    def _lookup_key(self, raw: str) -> str:
        try:
            return self.path_resolver.anchor(raw, self.prefix)
        except PathOutsideRepositoryError:
            # Never tracked; resolving it in order below reports the error.
            return raw
