class CheckIgnoreError(Exception):
    """
    Base class for every error that aborts a check-ignore run.

    None of these errors are recoverable: the command prints the message to stderr and
    exits with status 128. Output already flushed to stdout (in --stdin mode) stays.

    Example:
        >>> isinstance(SymlinkBoundaryError("a/b"), CheckIgnoreError)
        True
    """

    pass


class ConfigurationError(CheckIgnoreError, ValueError):
    """
    Exception raised when command-line flags or arguments conflict.

    Raised before any path is evaluated, so no output has been produced.

    Example:
        >>> error = ConfigurationError("-z only makes sense with --stdin")
        >>> str(error)
        '-z only makes sense with --stdin'
    """

    pass


class NoPathspecError(ConfigurationError):
    """Exception raised when a batch check is started with an empty argument list."""

    def __init__(self, message: str = "no pathspec given.") -> None:
        super().__init__(message)


class SymlinkBoundaryError(CheckIgnoreError):
    """
    Exception raised when a path reaches its last component through a symbolic link.

    Such a path does not name anything inside the worktree in the way the rules would
    interpret it, so asking whether it is ignored is meaningless and potentially
    misleading. The whole run is aborted.

    Attributes:
        path (str): The offending path, relative to the working-directory prefix.

    Example:
        >>> error = SymlinkBoundaryError("link/file.txt")
        >>> str(error)
        "'link/file.txt' is beyond a symbolic link"
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"'{path}' is beyond a symbolic link")


class PathOutsideRepositoryError(CheckIgnoreError):
    """
    Exception raised when a path argument resolves to a location outside the worktree.

    Example:
        >>> error = PathOutsideRepositoryError("../elsewhere", "/repo")
        >>> str(error)
        "'../elsewhere' is outside repository at '/repo'"
    """

    def __init__(self, path: str, worktree: str) -> None:
        self.path = path
        self.worktree = worktree
        super().__init__(f"'{path}' is outside repository at '{worktree}'")


class PathInSubmoduleError(CheckIgnoreError):
    """
    Exception raised when a path points inside a nested repository (gitlink).

    Example:
        >>> error = PathInSubmoduleError("vendor/lib/file.c", "vendor/lib")
        >>> str(error)
        "Path 'vendor/lib/file.c' is in submodule 'vendor/lib'"
    """

    def __init__(self, path: str, submodule: str) -> None:
        self.path = path
        self.submodule = submodule
        super().__init__(f"Path '{path}' is in submodule '{submodule}'")


class BadlyQuotedLineError(CheckIgnoreError, ValueError):
    """
    Exception raised when a stdin record starts with a double quote but is not a valid
    C-style quoted string.

    Example:
        >>> str(BadlyQuotedLineError())
        'line is badly quoted'
    """

    def __init__(self, message: str = "line is badly quoted") -> None:
        super().__init__(message)


class OutputFlushError(CheckIgnoreError, OSError):
    """Exception raised when results cannot be written or flushed to stdout."""

    def __init__(self, target: str, cause: OSError) -> None:
        self.target = target
        self.cause = cause
        super().__init__(f"write failure on {target}: {cause}")


class NotAWorktreeError(CheckIgnoreError):
    """
    Exception raised when no git worktree encloses the starting directory.

    Example:
        >>> str(NotAWorktreeError("/tmp"))
        'not a git repository (or any of the parent directories): /tmp'
    """

    def __init__(self, start: str) -> None:
        self.start = start
        super().__init__(f"not a git repository (or any of the parent directories): {start}")


class IndexCorruptError(CheckIgnoreError):
    """Exception raised when the tracked-path registry cannot be read."""

    def __init__(self, detail: str = "") -> None:
        message = "index file corrupt"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
