"""Tests for path anchoring, gitlink normalization and the symlink boundary check."""

import os

import pytest

from checkignore.exceptions import PathInSubmoduleError, PathOutsideRepositoryError, SymlinkBoundaryError
from checkignore.path_resolver import PathResolver, check_path_for_gitlink, die_if_path_beyond_symlink, prefix_path
from checkignore.types import DirType

symlinks_supported = pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")


@pytest.mark.parametrize(
    "prefix,path,expected",
    [
        ("", "file.txt", "file.txt"),
        ("", "./file.txt", "file.txt"),
        ("", "dir//file.txt", "dir/file.txt"),
        ("", "dir/", "dir"),
        ("src/", "main.c", "src/main.c"),
        ("src/", "../docs/guide.md", "docs/guide.md"),
        ("src/lib/", "../../README", "README"),
        ("src/", ".", "src"),
        ("", ".", ""),
        ("src/", "..", ""),
    ],
)
def test_prefix_path(prefix, path, expected):
    assert prefix_path(prefix, path) == expected


@pytest.mark.parametrize("prefix,path", [("", ".."), ("", "../x"), ("src/", "../../x")])
def test_prefix_path_outside_repository(prefix, path):
    with pytest.raises(PathOutsideRepositoryError):
        prefix_path(prefix, path, "/repo")


def test_prefix_path_absolute_inside_worktree(tmp_path):
    assert prefix_path("sub/", str(tmp_path / "a" / "b.txt"), tmp_path) == "a/b.txt"


def test_prefix_path_absolute_outside_worktree(tmp_path):
    worktree = tmp_path / "repo"
    worktree.mkdir()
    with pytest.raises(PathOutsideRepositoryError):
        prefix_path("", str(tmp_path / "elsewhere"), worktree)


def test_check_path_for_gitlink():
    gitlinks = ["vendor/lib"]
    assert check_path_for_gitlink("vendor/lib", gitlinks) == "vendor/lib"
    assert check_path_for_gitlink("vendor/library", gitlinks) == "vendor/library"
    assert check_path_for_gitlink("vendor", gitlinks) == "vendor"

    with pytest.raises(PathInSubmoduleError) as excinfo:
        check_path_for_gitlink("vendor/lib/src/x.c", gitlinks)
    assert excinfo.value.submodule == "vendor/lib"


@symlinks_supported
def test_symlinked_leading_directory_is_fatal(tmp_path):
    (tmp_path / "real").mkdir()
    (tmp_path / "real" / "file.txt").write_text("x")
    os.symlink(tmp_path / "real", tmp_path / "link")

    with pytest.raises(SymlinkBoundaryError) as excinfo:
        die_if_path_beyond_symlink("link/file.txt", "", tmp_path)

    assert str(excinfo.value) == "'link/file.txt' is beyond a symbolic link"


@symlinks_supported
def test_symlink_message_is_relative_to_prefix(tmp_path):
    (tmp_path / "sub" / "real").mkdir(parents=True)
    os.symlink(tmp_path / "sub" / "real", tmp_path / "sub" / "link")

    with pytest.raises(SymlinkBoundaryError) as excinfo:
        die_if_path_beyond_symlink("sub/link/file.txt", "sub/", tmp_path)

    assert excinfo.value.path == "link/file.txt"


@symlinks_supported
def test_symlink_as_last_component_is_allowed(tmp_path):
    (tmp_path / "real.txt").write_text("x")
    os.symlink(tmp_path / "real.txt", tmp_path / "link.txt")

    die_if_path_beyond_symlink("link.txt", "", tmp_path)


def test_missing_directories_are_not_an_error(tmp_path):
    die_if_path_beyond_symlink("no/such/dir/file.txt", "", tmp_path)


@symlinks_supported
def test_resolver_applies_all_checks_in_order(tmp_path):
    (tmp_path / "real").mkdir()
    os.symlink(tmp_path / "real", tmp_path / "link")
    resolver = PathResolver(tmp_path, gitlinks=["vendor/lib"])

    assert resolver.resolve("vendor/lib/", "") == "vendor/lib"
    assert resolver.resolve("../real/x", "src/") == "real/x"

    with pytest.raises(SymlinkBoundaryError):
        resolver.resolve("link/x", "")
    with pytest.raises(PathInSubmoduleError):
        resolver.resolve("lib/x", "vendor/")


def test_query_carries_directory_hint(tmp_path):
    resolver = PathResolver(tmp_path)

    query = resolver.query("build/", "")
    assert query.raw_argument == "build/"
    assert query.resolved_path == "build"
    assert query.dir_hint is DirType.DIRECTORY

    assert resolver.query("build", "").dir_hint is DirType.UNKNOWN
