"""Locating the worktree and its standard ignore sources."""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from checkignore.exceptions import ConfigurationError, NotAWorktreeError
from checkignore.types import PathType


@dataclass(frozen=True)
class Worktree:
    """Where the command runs, relative to the repository it runs in.

    Attributes:
        root: Top of the working tree.
        git_dir: Repository directory (``.git`` or the target of a ``gitdir:`` file).
        prefix: Starting directory relative to ``root``, "" or ending with "/".
    """

    root: Path
    git_dir: Path
    prefix: str


def _read_gitdir_file(dotgit: Path) -> Path:
    content = dotgit.read_text(encoding="utf-8").strip()
    if not content.startswith("gitdir:"):
        raise NotAWorktreeError(str(dotgit.parent))
    target = Path(content[len("gitdir:") :].strip())  # noqa: E203
    if not target.is_absolute():
        target = dotgit.parent / target
    return target


def find_worktree(start: Optional[PathType] = None) -> Worktree:
    """Walk up from ``start`` to the nearest directory holding ``.git``.

    Args:
        start: Directory the command runs in. Defaults to the current directory.

    Raises:
        ConfigurationError: If ``start`` is not an existing directory.
        NotAWorktreeError: If no enclosing worktree is found.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     root = Path(tmpdir).resolve()
        ...     (root / ".git").mkdir()
        ...     (root / "src" / "lib").mkdir(parents=True)
        ...     find_worktree(root / "src" / "lib").prefix
        'src/lib/'
    """
    start_dir = Path(start if start is not None else os.getcwd()).resolve()
    if not start_dir.is_dir():
        raise ConfigurationError(f"cannot change to '{start}': not a directory")

    for candidate in [start_dir, *start_dir.parents]:
        dotgit = candidate / ".git"
        if dotgit.is_dir():
            git_dir = dotgit
        elif dotgit.is_file():
            git_dir = _read_gitdir_file(dotgit)
        else:
            continue

        relative = start_dir.relative_to(candidate).as_posix()
        prefix = "" if relative == "." else relative + "/"
        return Worktree(root=candidate, git_dir=git_dir, prefix=prefix)

    raise NotAWorktreeError(str(start_dir))


def default_excludes_file() -> Path:
    """Return ``$XDG_CONFIG_HOME/git/ignore``, or ``~/.config/git/ignore``."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "git" / "ignore"
    return Path.home() / ".config" / "git" / "ignore"


def configured_excludes_file(worktree: PathType, timeout: int = 30) -> Path:
    """Return the global excludes file, honouring ``core.excludesfile``.

    ``git config`` exits with status 1 when the key is unset, in which case (and when
    git is unavailable) the XDG default is used.
    """
    try:
        result = subprocess.run(
            ["git", "config", "--path", "--get", "core.excludesfile"],
            cwd=worktree,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return default_excludes_file()

    value = result.stdout.strip()
    if result.returncode != 0 or not value:
        return default_excludes_file()
    return Path(value).expanduser()
