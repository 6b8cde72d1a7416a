"""Test configuration and fixtures for checkignore."""

import pytest

from checkignore.exclusion_rules import DirTypeCache, RuleSource, StaticExcludeResolver
from checkignore.path_resolver import PathResolver
from checkignore.tracked import StaticTrackedPathRegistry, TrackedPathFilter


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


class RecordingWriter:
    """Output sink that remembers what was written and when it was flushed."""

    def __init__(self):
        self.pending = b""
        self.flushed = []

    def write(self, data):
        self.pending += data

    def flush(self):
        self.flushed.append(self.pending)
        self.pending = b""

    @property
    def output(self):
        return b"".join(self.flushed) + self.pending


@pytest.fixture
def writer():
    """A fresh RecordingWriter."""
    return RecordingWriter()


@pytest.fixture
def worktree(tmp_path):
    """An empty directory standing in for a worktree root."""
    (tmp_path / ".git").mkdir()
    return tmp_path


@pytest.fixture
def gitignore_source():
    """The rule list used by most core tests."""
    return RuleSource.from_lines(
        ".gitignore",
        [
            "# build products",
            "*.log",
            "*.o",
            "!keep.o",
            "build/",
        ],
    )


@pytest.fixture
def make_components(worktree, gitignore_source):
    """Factory for (resolver, tracked filter, excludes) over an in-memory setup."""

    def factory(tracked=(), gitlinks=(), sources=None):
        excludes = StaticExcludeResolver([gitignore_source] if sources is None else sources)
        registry = StaticTrackedPathRegistry(tracked, gitlinks)
        return PathResolver(worktree, registry.gitlinks), TrackedPathFilter(registry), excludes

    return factory


@pytest.fixture
def dtype_cache():
    """A DirTypeCache that never touches the filesystem."""
    return DirTypeCache()
