"""Command-line argument parsing for checkignore.

This module defines the command-line interface for checkignore,
handling argument parsing and validation.
"""

import argparse
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from checkignore import __version__
from checkignore.exclusion_rules.base_rules import BaseExcludeResolver
from checkignore.types import RunConfiguration


def create_exclusion_action(excludes: BaseExcludeResolver) -> Type[argparse.Action]:
    """Create a custom action class that feeds extra rule sources to a resolver.

    The action updates the resolver as arguments are processed, so ``-e`` files and
    ``-i`` patterns take precedence in the order they appear on the command line.

    Args:
        excludes: The resolver to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class ExclusionRulesAction(argparse.Action):
        """Action to add rule files (-e) and patterns (-i) as they are encountered."""

        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return

            if option_string in ("-e", "--exclude-from"):
                if isinstance(values, (str, os.PathLike)):
                    excludes.load_rules(values)
                else:
                    excludes.load_rules(Path(str(values)))
            else:  # -i/--exclude
                excludes.add_rule(str(values))

            # Keep the raw values on the namespace as well
            if getattr(namespace, self.dest, None) is None:
                setattr(namespace, self.dest, [])
            getattr(namespace, self.dest).append(values)

    return ExclusionRulesAction


def create_parser(excludes: BaseExcludeResolver) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        excludes: The resolver that ``-e``/``-i`` options are added to during parsing.

    Returns:
        An ArgumentParser instance configured with checkignore's options.
    """
    description = """
    checkignore: debug .gitignore / exclude files.

    For each pathname given on the command line or read from standard input with
    --stdin, show the pattern from .gitignore (or another input file to the exclude
    mechanism) that decides whether the path is ignored. Paths that are already
    tracked are never reported as ignored.

    By default only ignored paths are printed. With --verbose the matching pattern is
    printed in front of the path as <source>:<linenum>:<pattern><TAB>"<pathname>".
    A matching negated pattern ("!...") is still shown, since it is the pattern that
    decided the outcome.
    """

    epilog = """
    Exit status:
      0    one or more of the provided paths is ignored
      1    none of the provided paths are ignored
      2    command-line syntax error
      128  fatal error (conflicting options, symlinked paths, bad input...)

    Examples:
      # Which of these paths are ignored?
      checkignore build/output.o src/main.c

      # Why is it ignored?
      checkignore -v build/output.o

      # Stream paths from another tool, one answer per path
      git ls-files --others | checkignore --stdin -v -n

      # NUL-separated input and output
      find . -print0 | checkignore --stdin -z

      # Try out an extra pattern without editing any file
      checkignore -v -i "*.tmp" scratch.tmp

      # Display version information and exit
      checkignore -V
    """

    parser = argparse.ArgumentParser(
        prog="checkignore",
        usage="%(prog)s [options] pathname...\n       %(prog)s [options] --stdin < <list-of-paths>",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Version information
    parser.add_argument(
        "-V", "--version", action="version", version=f"checkignore {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(excludes)

    parser.add_argument(
        "pathnames",
        nargs="*",
        metavar="pathname",
        help="Paths to check, relative to the current directory.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Don't output anything, just set exit status. Only valid with a single pathname.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Also output details about the matching pattern (if any) for each given pathname.",
    )
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read pathnames from standard input, one per line, instead of from the command line.",
    )
    parser.add_argument(
        "-z",
        dest="null_terminated",
        action="store_true",
        help="Input and output records are terminated by NUL instead of newline. Only valid with --stdin.",
    )
    parser.add_argument(
        "-n",
        "--non-matching",
        dest="non_matching",
        action="store_true",
        help="Show given paths which don't match any pattern. Only valid with --verbose.",
    )
    parser.add_argument(
        "-e",
        "--exclude-from",
        dest="exclude_from",
        type=Path,
        metavar="FILE",
        action=ExclusionAction,
        help="Read extra exclude patterns from FILE; they take precedence over the standard sources.",
    )
    parser.add_argument(
        "-i",
        "--exclude",
        dest="exclude",
        metavar="PATTERN",
        action=ExclusionAction,
        help="Add an extra exclude pattern; takes precedence over the standard sources.",
    )
    parser.add_argument(
        "-C",
        dest="directory",
        type=Path,
        metavar="DIR",
        help="Run as if started in DIR instead of the current working directory.",
    )

    return parser


def build_configuration(args: argparse.Namespace) -> RunConfiguration:
    """Freeze the parsed flags into a RunConfiguration."""
    return RunConfiguration(
        quiet=args.quiet,
        verbose=args.verbose,
        show_non_matching=args.non_matching,
        null_terminated=args.null_terminated,
        stdin_mode=args.stdin,
    )


def validate_args(args: argparse.Namespace) -> RunConfiguration:
    """Validate command-line arguments.

    Performs the cross-option checks argparse cannot express.

    Args:
        args: Parsed command-line arguments.

    Returns:
        The validated run configuration.

    Raises:
        ConfigurationError: If any arguments fail validation.
    """
    config = build_configuration(args)
    config.validate(len(args.pathnames))
    return config
