import pytest

from checkignore.exclusion_rules import DirTypeCache, RuleSource
from checkignore.types import DirType


@pytest.fixture
def rules_file(tmp_path):
    path = tmp_path / "rules.ignore"
    path.write_text("# comment\n\n*.txt\n!important.txt\nsubdir/\n*.py[cod]\n**/__pycache__/\n")
    return path


@pytest.mark.parametrize(
    "path,expected",
    [
        ("file.txt", (3, False)),
        ("important.txt", (4, True)),
        ("nested/important.txt", (4, True)),
        ("file.py", None),
        ("subdir/file.py", (5, False)),
        ("nested/subdir/file.py", (5, False)),
        ("file.pyc", (6, False)),
        ("lib/__pycache__/cache.py", (7, False)),
    ],
)
def test_match_reports_line_and_negation(rules_file, path, expected):
    source = RuleSource.from_file(rules_file)
    rule = source.match(path, DirTypeCache())

    if expected is None:
        assert rule is None
    else:
        assert (rule.line_number, rule.negated) == expected
        assert rule.source_label == str(rules_file)


def test_last_matching_line_wins():
    source = RuleSource.from_lines("ignore", ["*.log", "debug.log", "!debug.log"])

    rule = source.match("debug.log", DirTypeCache())
    assert rule.line_number == 3
    assert rule.negated
    assert rule.display_pattern == "!debug.log"

    assert source.match("other.log", DirTypeCache()).line_number == 1


def test_blank_and_comment_lines_keep_numbering():
    source = RuleSource.from_lines("ignore", ["", "# header", "   ", "*.o"])

    assert len(source) == 1
    assert source.match("a.o", DirTypeCache()).line_number == 4


def test_escaped_hash_is_a_pattern():
    source = RuleSource.from_lines("ignore", ["\\#notes"])

    assert source.match("#notes", DirTypeCache()) is not None


def test_directory_only_rule_on_plain_file():
    """A file named like a directory-only rule is not matched by it."""
    source = RuleSource.from_lines("ignore", ["build/"])
    cache = DirTypeCache()
    cache.seed("build", DirType.FILE)

    assert source.match("build", cache) is None
    assert source.match("build/output.o", cache).display_pattern == "build/"


def test_directory_only_rule_on_directory():
    source = RuleSource.from_lines("ignore", ["build/"])
    cache = DirTypeCache()
    cache.seed("build", DirType.DIRECTORY)

    rule = source.match("build", cache)
    assert rule.directory_only
    assert rule.pattern_text == "build"


def test_directory_only_rule_looks_up_disk(tmp_path):
    (tmp_path / "build").mkdir()
    (tmp_path / "logs").write_text("not a directory")
    source = RuleSource.from_lines("ignore", ["build/", "logs/"])
    cache = DirTypeCache(tmp_path)

    assert source.match("build", cache) is not None
    assert source.match("logs", cache) is None
    assert cache.get("build") is DirType.DIRECTORY
    assert cache.get("logs") is DirType.FILE


def test_file_rule_does_not_consult_disk(tmp_path):
    source = RuleSource.from_lines("ignore", ["*.o"])
    cache = DirTypeCache(tmp_path)

    assert source.match("main.c", cache) is None
    assert cache.get("main.c") is DirType.UNKNOWN


def test_base_restricts_and_relativizes():
    """Rules of a nested source only see paths below it, relative to it."""
    source = RuleSource.from_lines("sub/.gitignore", ["/local.txt"], base="sub")

    assert source.base == "sub/"
    assert source.match("sub/local.txt", DirTypeCache()).source_label == "sub/.gitignore"
    assert source.match("local.txt", DirTypeCache()) is None
    assert source.match("sub/deeper/local.txt", DirTypeCache()) is None
    assert source.match("subway/local.txt", DirTypeCache()) is None


def test_add_line_numbers_continue():
    source = RuleSource("<command line>")
    source.add_line("*.tmp")
    source.add_line("*.bak")

    assert [rule.line_number for rule in source.rules] == [1, 2]
    assert repr(source) == "RuleSource(label='<command line>', base='', rules=2)"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError) as excinfo:
        RuleSource.from_file(tmp_path / "absent")

    assert "Rules file not found" in str(excinfo.value)


def test_undecodable_bytes_are_kept(tmp_path):
    path = tmp_path / "rules"
    path.write_bytes(b"caf\xe9.txt\n")
    source = RuleSource.from_file(path, label="rules")

    assert len(source) == 1
    assert source.match("caf\udce9.txt", DirTypeCache()) is not None
