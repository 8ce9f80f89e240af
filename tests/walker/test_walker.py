import os
from typing import Dict, List, Union

import pytest

from dirwalk.exceptions import (
    InvalidPatternError,
    PathDoesNotExistError,
    PathTooDeepError,
    WalkFailedError,
)
from dirwalk.exclusion_rules.git_rules import GitIgnoreExclusionRules
from dirwalk.types import ItemType
from dirwalk.walker.flags import WalkFlags
from dirwalk.walker.listing import DirectoryLister, Entry
from dirwalk.walker.walker import iter_walk, walk

D = ItemType.DIRECTORY
F = ItemType.FILE
U = ItemType.UNHANDLED


class FakeLister(DirectoryLister):
    """In-memory lister returning entries in exactly the order given."""

    def __init__(
        self,
        listings: Dict[str, Union[List[Entry], OSError]],
        probes: Union[Dict[str, Union[ItemType, OSError]], None] = None,
    ):
        self.listings = listings
        self.probes = probes or {}
        self.listed: List[str] = []
        self.probed: List[str] = []

    def list_entries(self, path):
        self.listed.append(path)
        listing = self.listings.get(path)
        if listing is None:
            raise FileNotFoundError(path)
        if isinstance(listing, OSError):
            raise listing
        return iter(listing)

    def probe(self, path):
        self.probed.append(path)
        result = self.probes[path]
        if isinstance(result, OSError):
            raise result
        return result


@pytest.fixture
def nested_lister():
    return FakeLister(
        {
            "r": [Entry("a", D), Entry("f1", F)],
            "r/a": [Entry("b", D), Entry("f2", F)],
            "r/a/b": [Entry("f3", F)],
        }
    )


def collect(path, flags=WalkFlags.NONE, **kwargs):
    visited = []
    result = walk(
        path,
        lambda entry_path, item_type, seen: seen.append((entry_path, item_type)),
        flags,
        userdata=visited,
        platform_slash="/",
        **kwargs,
    )
    return visited, result


def test_pre_order(nested_lister):
    visited, result = collect("r", lister=nested_lister)
    assert visited == [
        ("r/a", D),
        ("r/a/b", D),
        ("r/a/b/f3", F),
        ("r/a/f2", F),
        ("r/f1", F),
    ]
    assert result.visited == 5
    assert result.stopped is False


def test_post_order(nested_lister):
    visited, _ = collect("r", WalkFlags.DEPTH_FIRST, lister=nested_lister)
    assert visited == [
        ("r/a/b/f3", F),
        ("r/a/b", D),
        ("r/a/f2", F),
        ("r/a", D),
        ("r/f1", F),
    ]


def test_root_relative_paths(nested_lister):
    visited, _ = collect("r", WalkFlags.ROOT_RELATIVE_PATHS, lister=nested_lister)
    assert [path for path, _ in visited] == ["a", "a/b", "a/b/f3", "a/f2", "f1"]


def test_root_is_never_reported(nested_lister):
    visited, _ = collect("r", lister=nested_lister)
    assert "r" not in [path for path, _ in visited]


@pytest.mark.parametrize(
    "flags,expected",
    [
        (WalkFlags.SINGLE_DIRECTORY, [("a", D), ("f1", F)]),
        (WalkFlags.ONLY_FILES, [("a/b/f3", F), ("a/f2", F), ("f1", F)]),
        (WalkFlags.ONLY_DIRECTORIES, [("a", D), ("a/b", D)]),
        (WalkFlags.ONLY_DIRECTORIES | WalkFlags.SINGLE_DIRECTORY, [("a", D)]),
        (WalkFlags.ONLY_FILES | WalkFlags.SINGLE_DIRECTORY, [("f1", F)]),
        (WalkFlags.ONLY_DIRECTORIES | WalkFlags.DEPTH_FIRST, [("a/b", D), ("a", D)]),
    ],
)
def test_type_and_depth_flags(nested_lister, flags, expected):
    visited, _ = collect("r", flags | WalkFlags.ROOT_RELATIVE_PATHS, lister=nested_lister)
    assert visited == expected


def test_single_directory_lists_only_root(nested_lister):
    collect("r", WalkFlags.SINGLE_DIRECTORY, lister=nested_lister)
    assert nested_lister.listed == ["r"]


def test_trailing_separator_and_whitespace_are_tidied(nested_lister):
    visited, _ = collect('  "r/"  ', WalkFlags.SINGLE_DIRECTORY, lister=nested_lister)
    assert [path for path, _ in visited] == ["r/a", "r/f1"]


@pytest.fixture
def dotted_lister():
    return FakeLister(
        {
            "r": [
                Entry(".", D),
                Entry("..", D),
                Entry(".git", D),
                Entry(".env", F),
                Entry("src", D),
            ],
            "r/.git": [Entry("config", F)],
            "r/src": [Entry(".keep", F), Entry("main.c", F)],
        }
    )


def test_dot_and_dot_dot_are_never_reported(dotted_lister):
    visited, _ = collect("r", WalkFlags.ROOT_RELATIVE_PATHS, lister=dotted_lister)
    assert [path for path, _ in visited] == [".git", ".git/config", ".env", "src", "src/.keep", "src/main.c"]


def test_ignore_dot_directories(dotted_lister):
    visited, _ = collect(
        "r", WalkFlags.ROOT_RELATIVE_PATHS | WalkFlags.IGNORE_DOT_DIRECTORIES, lister=dotted_lister
    )
    assert [path for path, _ in visited] == [".env", "src", "src/.keep", "src/main.c"]
    assert "r/.git" not in dotted_lister.listed


def test_ignore_dot_files(dotted_lister):
    visited, _ = collect("r", WalkFlags.ROOT_RELATIVE_PATHS | WalkFlags.IGNORE_DOT_FILES, lister=dotted_lister)
    assert [path for path, _ in visited] == [".git", ".git/config", "src", "src/main.c"]


def test_unhandled_entry_is_probed():
    lister = FakeLister(
        {"r": [Entry("x", U), Entry("y", U)], "r/x": [Entry("inner", F)]},
        probes={"r/x": D, "r/y": F},
    )
    visited, _ = collect("r", WalkFlags.ROOT_RELATIVE_PATHS, lister=lister)
    assert visited == [("x", D), ("x/inner", F), ("y", F)]
    assert lister.probed == ["r/x", "r/y"]


def test_probe_failure_skips_entry_and_is_raised_at_end():
    lister = FakeLister(
        {"r": [Entry("broken", U), Entry("ok", F)]},
        probes={"r/broken": PermissionError("denied")},
    )
    visited = []
    with pytest.raises(WalkFailedError) as exc_info:
        walk("r", lambda p, t, seen: seen.append(p), userdata=visited, lister=lister, platform_slash="/")
    assert visited == ["r/ok"]
    assert exc_info.value.path == "r/broken"


def test_missing_root_raises_before_any_visit():
    lister = FakeLister({})
    visited = []
    with pytest.raises(PathDoesNotExistError):
        walk("missing", lambda p, t, seen: seen.append(p), userdata=visited, lister=lister)
    assert visited == []


def test_root_that_is_a_file_raises_path_does_not_exist():
    lister = FakeLister({"r": NotADirectoryError("r")})
    with pytest.raises(PathDoesNotExistError):
        collect("r", lister=lister)


def test_other_listing_errors_raise_walk_failed():
    lister = FakeLister({"r": OSError("I/O error")})
    with pytest.raises(WalkFailedError):
        collect("r", lister=lister)


def test_unreadable_subdirectory_does_not_stop_siblings():
    lister = FakeLister(
        {
            "r": [Entry("locked", D), Entry("open", D), Entry("f", F)],
            "r/locked": PermissionError("denied"),
            "r/open": [Entry("g", F)],
        }
    )
    visited = []
    with pytest.raises(PathDoesNotExistError) as exc_info:
        walk(
            "r",
            lambda p, t, seen: seen.append(p),
            WalkFlags.ROOT_RELATIVE_PATHS,
            userdata=visited,
            lister=lister,
            platform_slash="/",
        )
    # The directory itself was already reported before its listing failed.
    assert visited == ["locked", "open", "open/g", "f"]
    assert exc_info.value.path == "r/locked"


def test_first_of_several_errors_is_raised():
    lister = FakeLister(
        {
            "r": [Entry("one", D), Entry("two", D)],
            "r/one": OSError("first"),
            "r/two": PermissionError("second"),
        }
    )
    with pytest.raises(WalkFailedError) as exc_info:
        collect("r", lister=lister)
    assert exc_info.value.path == "r/one"


def test_visitor_can_stop_the_walk(nested_lister):
    visited = []

    def visitor(path, item_type, seen):
        seen.append(path)
        return len(seen) == 2

    result = walk("r", visitor, WalkFlags.ROOT_RELATIVE_PATHS, userdata=visited, lister=nested_lister)
    assert visited == ["a", "a/b"]
    assert result.visited == 2
    assert result.stopped is True
    # Pending directories are abandoned.
    assert "r/a/b" not in nested_lister.listed


def test_error_before_stop_is_still_raised():
    lister = FakeLister(
        {
            "r": [Entry("bad", D), Entry("f1", F), Entry("f2", F)],
            "r/bad": OSError("boom"),
        }
    )
    visited = []

    def visitor(path, item_type, seen):
        seen.append(path)
        return path == "r/f1"

    with pytest.raises(WalkFailedError) as exc_info:
        walk("r", visitor, userdata=visited, lister=lister, platform_slash="/")
    assert exc_info.value.path == "r/bad"
    assert visited == ["r/bad", "r/f1"]


def test_userdata_is_passed_through(nested_lister):
    sentinel = object()
    received = []
    walk("r", lambda p, t, data: received.append(data), userdata=sentinel, lister=nested_lister)
    assert received and all(data is sentinel for data in received)


def test_back_slash_paths_on_forward_slash_platform(nested_lister):
    visited, _ = collect("r", WalkFlags.PATHS_SLASH_BACK, lister=nested_lister)
    assert [path for path, _ in visited] == ["r\\a", "r\\a\\b", "r\\a\\b\\f3", "r\\a\\f2", "r\\f1"]
    # The filesystem is still addressed with the platform separator.
    assert nested_lister.listed == ["r", "r/a", "r/a/b"]


def test_forward_slash_paths_on_back_slash_platform():
    lister = FakeLister({"r": [Entry("a", D)], "r\\a": [Entry("f", F)]})
    visited = []
    walk(
        "r",
        lambda p, t, seen: seen.append(p),
        WalkFlags.PATHS_SLASH_FORWARD,
        userdata=visited,
        lister=lister,
        platform_slash="\\",
    )
    assert visited == ["r/a", "r/a/f"]
    assert lister.listed == ["r", "r\\a"]


def test_file_pattern_matches_name_only():
    lister = FakeLister(
        {
            "r": [Entry("src", D), Entry("setup.py", F), Entry("README", F)],
            "r/src": [Entry("main.py", F), Entry("main.c", F)],
        }
    )
    visited, _ = collect("r", WalkFlags.ROOT_RELATIVE_PATHS, file_pattern="*.py", lister=lister)
    assert visited == [("src", D), ("src/main.py", F), ("setup.py", F)]


def test_dir_pattern_must_match_every_directory_on_the_way_down():
    lister = FakeLister(
        {
            "r": [Entry("src", D), Entry("docs", D), Entry("top.txt", F)],
            "r/src": [Entry("pkg", D), Entry("a.c", F)],
            "r/src/pkg": [Entry("b.c", F)],
            "r/docs": [Entry("index.md", F)],
        }
    )
    visited, _ = collect("r", WalkFlags.ROOT_RELATIVE_PATHS, dir_pattern="s*", lister=lister)
    # "src/pkg" does not match "s*", so it is neither reported nor descended.
    assert visited == [("src", D), ("src/a.c", F), ("top.txt", F)]
    assert "r/src/pkg" not in lister.listed
    assert "r/docs" not in lister.listed


def test_dir_pattern_globstar_visits_everything(nested_lister):
    visited, _ = collect("r", WalkFlags.ROOT_RELATIVE_PATHS, dir_pattern="**", lister=nested_lister)
    assert len(visited) == 5


@pytest.mark.parametrize("pattern", ["", None])
def test_empty_pattern_matches_everything(nested_lister, pattern):
    visited, _ = collect("r", dir_pattern=pattern, file_pattern=pattern, lister=nested_lister)
    assert len(visited) == 5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"file_pattern": "[abc"},
        {"file_pattern": "{a,b"},
        {"dir_pattern": "**x"},
    ],
)
def test_invalid_pattern_aborts_the_walk(nested_lister, kwargs):
    visited = []
    with pytest.raises(InvalidPatternError):
        walk("r", lambda p, t, seen: seen.append(p), userdata=visited, lister=nested_lister, **kwargs)


def test_invalid_pattern_is_not_deferred():
    lister = FakeLister({"r": [Entry("f1", F), Entry("f2", F)]})
    visited = []
    with pytest.raises(InvalidPatternError):
        walk("r", lambda p, t, seen: seen.append(p), file_pattern="[", userdata=visited, lister=lister)
    assert visited == []
    assert lister.listed == ["r"]


def test_exclusion_rules_prune_directories(nested_lister):
    rules = GitIgnoreExclusionRules()
    rules.add_rule("b/")
    visited, _ = collect("r", WalkFlags.ROOT_RELATIVE_PATHS, lister=nested_lister, exclusion_rules=rules)
    assert [path for path, _ in visited] == ["a", "a/f2", "f1"]
    assert "r/a/b" not in nested_lister.listed


def test_exclusion_rules_receive_posix_paths_with_back_slash_flag(nested_lister):
    rules = GitIgnoreExclusionRules()
    rules.add_rule("a/f2")
    visited, _ = collect("r", WalkFlags.PATHS_SLASH_BACK, lister=nested_lister, exclusion_rules=rules)
    assert "r\\a\\f2" not in [path for path, _ in visited]
    assert "r\\a\\b\\f3" in [path for path, _ in visited]


def test_overlong_entry_is_skipped_and_raised_at_end():
    lister = FakeLister({"r": [Entry("x" * 20, F), Entry("ok", F)]})
    visited = []
    with pytest.raises(PathTooDeepError):
        walk(
            "r",
            lambda p, t, seen: seen.append(p),
            userdata=visited,
            lister=lister,
            capacity=10,
            platform_slash="/",
        )
    assert visited == ["r/ok"]


def test_walk_after_overlong_entry_starts_clean():
    first = FakeLister({"r": [Entry("x" * 20, D), Entry("ok", F)], "r/" + "x" * 20: []})
    with pytest.raises(PathTooDeepError):
        collect("r", lister=first, capacity=10)

    second = FakeLister({"s": [Entry("a", D), Entry("g", F)], "s/a": [Entry("h", F)]})
    visited, result = collect("s", lister=second, capacity=10)
    assert visited == [("s/a", D), ("s/a/h", F), ("s/g", F)]
    assert result.visited == 3
    assert result.stopped is False


def test_overlong_root_path_fails_without_listing():
    lister = FakeLister({})
    with pytest.raises(WalkFailedError):
        walk("x" * 20, lambda p, t, d: None, lister=lister, capacity=16)
    assert lister.listed == []


@pytest.mark.parametrize("path", ["", "   ", '""'])
def test_empty_root_path_fails(path):
    with pytest.raises(WalkFailedError):
        walk(path, lambda p, t, d: None, lister=FakeLister({}))


def test_iter_walk_validates_eagerly():
    with pytest.raises(WalkFailedError):
        iter_walk("", lister=FakeLister({}))


def test_iter_walk_close_stops_listing(nested_lister):
    entries = iter_walk("r", lister=nested_lister, platform_slash="/")
    assert next(entries) == ("r/a", D)
    entries.close()
    assert nested_lister.listed == ["r"]


@pytest.fixture
def project_tree(tmp_path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / ".hidden_file").write_text("h")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.py").write_text("print('main')")
    (tmp_path / "src" / "util.py").write_text("")
    (tmp_path / "src" / "pkg").mkdir()
    (tmp_path / "src" / "pkg" / "mod.py").write_text("")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_text("")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "readme.md").write_text("# docs")
    return tmp_path


RELATIVE = WalkFlags.ROOT_RELATIVE_PATHS | WalkFlags.PATHS_SLASH_FORWARD


def test_filesystem_walk_reports_everything(project_tree):
    entries = sorted(iter_walk(project_tree, RELATIVE))
    assert entries == [
        (".git", D),
        (".git/config", F),
        (".hidden_file", F),
        ("a.txt", F),
        ("docs", D),
        ("docs/readme.md", F),
        ("src", D),
        ("src/main.py", F),
        ("src/pkg", D),
        ("src/pkg/mod.py", F),
        ("src/util.py", F),
    ]


def test_filesystem_walk_parents_before_children(project_tree):
    paths = [path for path, _ in iter_walk(project_tree, RELATIVE)]
    assert paths.index("src") < paths.index("src/pkg") < paths.index("src/pkg/mod.py")


def test_filesystem_walk_children_before_parents(project_tree):
    paths = [path for path, _ in iter_walk(project_tree, RELATIVE | WalkFlags.DEPTH_FIRST)]
    assert paths.index("src/pkg/mod.py") < paths.index("src/pkg") < paths.index("src")


def test_filesystem_walk_with_filters(project_tree):
    flags = RELATIVE | WalkFlags.ONLY_FILES | WalkFlags.IGNORE_DOT_DIRECTORIES | WalkFlags.IGNORE_DOT_FILES
    paths = sorted(path for path, _ in iter_walk(project_tree, flags, file_pattern="*.py"))
    assert paths == ["src/main.py", "src/pkg/mod.py", "src/util.py"]


def test_filesystem_walk_full_paths(project_tree):
    paths = {path for path, _ in iter_walk(project_tree, WalkFlags.SINGLE_DIRECTORY)}
    assert os.path.join(str(project_tree), "a.txt") in paths


def test_filesystem_walk_missing_root(tmp_path):
    with pytest.raises(PathDoesNotExistError):
        list(iter_walk(tmp_path / "does_not_exist"))


def test_filesystem_walk_file_as_root(project_tree):
    with pytest.raises(PathDoesNotExistError):
        list(iter_walk(project_tree / "a.txt"))


def test_filesystem_walk_does_not_follow_symlinks(project_tree):
    try:
        os.symlink(project_tree / "src", project_tree / "link", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")
    entries = dict(iter_walk(project_tree, RELATIVE))
    assert entries["link"] is F
    assert "link/main.py" not in entries
