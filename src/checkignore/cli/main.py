"""Command-line interface for checkignore.

This module wires the pieces together: it parses and validates the command line, finds
the worktree, reads the tracked-path registry and the rule sources, and then runs the
batch or --stdin evaluation with output going through a SafeWriter.

Signal Handling Notes:
    - SIGPIPE: Handled when the reading end of stdout goes away (e.g. a coprocess
      exits) on Unix-like systems
    - SIGINT: Handled for clean exit on Ctrl+C, also while blocked reading stdin

Exit Codes:
    0: At least one path is ignored
    1: No path is ignored
    2: Command-line syntax error
    128: Fatal error (configuration, security, malformed input, I/O, registry)
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    # Is it ignored, and by which rule?
    $ checkignore -v build/output.o
    .gitignore:3:*.o<TAB>"build/output.o"
"""

import sys
from typing import List, Optional

from checkignore.check_ignore import CheckIgnore
from checkignore.cli.argparser import create_parser, validate_args
from checkignore.cli.safe_writer import SafeWriter
from checkignore.cli.signal_handler import EXIT_SIGPIPE, setup_signal_handling, signal_handler
from checkignore.exclusion_rules import GitIgnoreExcludeResolver, StaticExcludeResolver
from checkignore.path_resolver import PathResolver
from checkignore.repository import configured_excludes_file, find_worktree
from checkignore.tracked import GitIndexRegistry, TrackedPathFilter

EXIT_FATAL = 128


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the checkignore command-line interface.

    Args:
        argv: Arguments to parse instead of ``sys.argv[1:]``.

    Exit codes:
        0: At least one path is ignored
        1: No path is ignored
        2: Command-line syntax error
        128: Fatal error
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE) on Unix-like systems
    """
    setup_signal_handling()

    exit_status = EXIT_FATAL
    try:
        # Collects -e/-i sources while parsing, before the worktree is known
        extra_rules = StaticExcludeResolver()

        parser = create_parser(extra_rules)
        # argparse calls sys.exit(2) for syntax errors, sys.exit(0) for --version
        args = parser.parse_intermixed_args(argv)

        config = validate_args(args)

        worktree = find_worktree(args.directory)
        registry = GitIndexRegistry(worktree.root)
        excludes = GitIgnoreExcludeResolver(
            worktree.root,
            excludes_file=configured_excludes_file(worktree.root),
            git_dir=worktree.git_dir,
            extra_sources=extra_rules.sources,
        )

        with SafeWriter(sys.stdout.fileno()) as safe_writer:
            checker = CheckIgnore(
                config,
                PathResolver(worktree.root, registry.gitlinks),
                TrackedPathFilter(registry),
                excludes,
                safe_writer,
                prefix=worktree.prefix,
            )
            try:
                stream = sys.stdin.buffer if config.stdin_mode else None
                totals = checker.run(args.pathnames, stream)
                exit_status = totals.exit_status
            except BrokenPipeError:
                exit_status = EXIT_SIGPIPE

    except Exception as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(EXIT_FATAL)
    except KeyboardInterrupt:
        pass

    # Handle exit codes based on received signals
    signal_status = signal_handler.exit_status()
    if signal_status is not None:
        sys.exit(signal_status)
    sys.exit(exit_status)


if __name__ == "__main__":
    main()
