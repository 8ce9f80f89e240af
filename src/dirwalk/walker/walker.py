"""Recursive, flag-driven directory walking.

The walk lists one directory at a time, filters its entries (dot rules, type rules,
exclusion rules, glob patterns) and reports each qualifying entry exactly once. All
frames of one walk share a single :class:`PathBuffer`; every descent restores the
buffer on exit, so siblings always see the path their parent left.

Error handling:
    - The root directory cannot be opened: :class:`PathDoesNotExistError` is raised
      before anything is reported.
    - A subdirectory cannot be opened, an entry cannot be probed, or an entry does not
      fit in the path buffer: that subtree is abandoned, the walk continues with the
      remaining entries, and the first such error is raised once the walk is done.
      Entries already reported stay reported; the walk is not transactional.
    - A malformed glob pattern raises :class:`InvalidPatternError` immediately and
      ends the whole walk.
"""

import os
from contextlib import closing
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Tuple

from dirwalk.exceptions import (
    DirWalkError,
    InvalidPatternError,
    PathDoesNotExistError,
    WalkFailedError,
)
from dirwalk.exclusion_rules.base_rules import BaseExclusionRules
from dirwalk.glob_match import GlobResult, glob_match
from dirwalk.paths import path_tidy
from dirwalk.types import ItemType, PathType
from dirwalk.walker.flags import WalkFlags, slash_for_flags
from dirwalk.walker.listing import DirectoryLister, ScandirLister
from dirwalk.walker.path_buffer import PATH_BUFFER_CAPACITY, PathBuffer

# Called as visitor(path, item_type, userdata). A truthy return stops the walk.
Visitor = Callable[[str, ItemType, Any], Optional[bool]]

WalkItem = Tuple[str, ItemType]


@dataclass
class WalkResult:
    """Summary of a completed call to :func:`walk`.

    Attributes:
        visited: Number of visitor invocations.
        stopped: True if the visitor asked the walk to stop early.
    """

    visited: int = 0
    stopped: bool = False


class _WalkState:
    """Per-walk configuration and bookkeeping shared by all recursion frames."""

    def __init__(
        self,
        buffer: PathBuffer,
        flags: WalkFlags,
        dir_pattern: Optional[str],
        file_pattern: Optional[str],
        lister: DirectoryLister,
        exclusion_rules: Optional[BaseExclusionRules],
    ) -> None:
        self.buffer = buffer
        self.dir_pattern = dir_pattern or None
        self.file_pattern = file_pattern or None
        self.lister = lister
        self.exclusion_rules = exclusion_rules

        self.depth_first = bool(flags & WalkFlags.DEPTH_FIRST)
        self.descend = not flags & WalkFlags.SINGLE_DIRECTORY
        self.report_directories = not flags & WalkFlags.ONLY_FILES
        self.report_files = not flags & WalkFlags.ONLY_DIRECTORIES
        self.ignore_dot_directories = bool(flags & WalkFlags.IGNORE_DOT_DIRECTORIES)
        self.ignore_dot_files = bool(flags & WalkFlags.IGNORE_DOT_FILES)
        self.root_relative = bool(flags & WalkFlags.ROOT_RELATIVE_PATHS)

        self.errors: List[DirWalkError] = []

    def item(self, item_type: ItemType) -> WalkItem:
        return self.buffer.visible_slice(self.root_relative), item_type

    def classify(self, name: str, item_type: ItemType) -> ItemType:
        if item_type is not ItemType.UNHANDLED:
            return item_type
        entry_path = self.buffer.native_text + self.buffer.native_slash + name
        try:
            return self.lister.probe(entry_path)
        except OSError as e:
            raise WalkFailedError(f"Cannot read metadata of {entry_path}: {e}", path=entry_path) from e

    def skip_dot_entry(self, name: str, is_dir: bool) -> bool:
        if not name.startswith("."):
            return False
        return self.ignore_dot_directories if is_dir else self.ignore_dot_files

    def excluded(self, item_type: ItemType) -> bool:
        if self.exclusion_rules is None:
            return False
        return self.exclusion_rules.exclude(self.buffer.relative_posix(), item_type, self.buffer.native_text)

    def directory_matches(self) -> bool:
        # Directory patterns start matching at the first segment below the root.
        return self.dir_pattern is None or _check(self.dir_pattern, self.buffer.relative_posix())

    def file_matches(self, name: str) -> bool:
        return self.file_pattern is None or _check(self.file_pattern, name)


def _check(pattern: str, candidate: str) -> bool:
    result = glob_match(pattern, candidate)
    if result is GlobResult.INVALID_PATTERN:
        raise InvalidPatternError(pattern)
    return result is GlobResult.MATCH


def _list_directory(state: _WalkState) -> List[Tuple[str, ItemType]]:
    directory = state.buffer.native_text
    try:
        return [(entry.name, entry.item_type) for entry in state.lister.list_entries(directory)]
    except (FileNotFoundError, NotADirectoryError, PermissionError) as e:
        raise PathDoesNotExistError(f"Cannot open directory {directory}: {e}", path=directory) from e
    except OSError as e:
        raise WalkFailedError(f"Error listing {directory}: {e}", path=directory) from e


def _walk_subdirectory(state: _WalkState) -> Iterator[WalkItem]:
    try:
        yield from _walk_directory(state)
    except DirWalkError as e:
        state.errors.append(e)


def _walk_directory(state: _WalkState) -> Iterator[WalkItem]:
    for name, listed_type in _list_directory(state):
        if name in (".", ".."):
            continue

        try:
            item_type = state.classify(name, listed_type)
        except WalkFailedError as e:
            state.errors.append(e)
            continue
        is_dir = item_type is ItemType.DIRECTORY

        if state.skip_dot_entry(name, is_dir):
            continue
        if is_dir and not (state.descend or state.report_directories):
            continue
        if not is_dir and not state.report_files:
            continue

        try:
            with state.buffer.descend(name):
                if state.excluded(item_type):
                    continue

                if not is_dir:
                    if state.file_matches(name):
                        yield state.item(ItemType.FILE)
                    continue

                if not state.directory_matches():
                    continue

                if state.depth_first:
                    if state.descend:
                        yield from _walk_subdirectory(state)
                    if state.report_directories:
                        yield state.item(ItemType.DIRECTORY)
                else:
                    if state.report_directories:
                        yield state.item(ItemType.DIRECTORY)
                    if state.descend:
                        yield from _walk_subdirectory(state)
        except DirWalkError as e:
            # Only an overlong entry path reaches here; the rest is handled per subtree.
            state.errors.append(e)


def _walk_root(state: _WalkState) -> Iterator[WalkItem]:
    yield from _walk_directory(state)
    if state.errors:
        raise state.errors[0]


def _start_walk(
    path: PathType,
    flags: WalkFlags,
    dir_pattern: Optional[str],
    file_pattern: Optional[str],
    lister: Optional[DirectoryLister],
    exclusion_rules: Optional[BaseExclusionRules],
    capacity: int,
    platform_slash: str,
) -> _WalkState:
    raw_path = os.fspath(path)
    if len(raw_path) >= capacity - 1:
        raise WalkFailedError(f"Path does not fit in a buffer of {capacity} characters", path=raw_path)

    slash = slash_for_flags(flags, platform_slash)
    root = path_tidy(raw_path, slash)
    if not root:
        raise WalkFailedError(f"Nothing to walk in path {raw_path!r}", path=raw_path)

    return _WalkState(
        PathBuffer(root, slash, capacity, native_slash=platform_slash),
        flags,
        dir_pattern,
        file_pattern,
        lister if lister is not None else ScandirLister(),
        exclusion_rules,
    )


def iter_walk(
    path: PathType,
    flags: WalkFlags = WalkFlags.NONE,
    dir_pattern: Optional[str] = None,
    file_pattern: Optional[str] = None,
    *,
    lister: Optional[DirectoryLister] = None,
    exclusion_rules: Optional[BaseExclusionRules] = None,
    capacity: int = PATH_BUFFER_CAPACITY,
    platform_slash: str = os.sep,
) -> Iterator[WalkItem]:
    """Walk a directory tree, yielding ``(path, item_type)`` for each qualifying entry.

    Entries are yielded in the order :func:`walk` would report them. Within one
    directory that order is whatever the listing produces. Closing the generator
    early stops the walk and restores the path buffer.

    Args:
        path: Root directory. It is tidied (quotes and whitespace trimmed, separators
            unified, trailing separator removed) before the walk begins.
        flags: Combination of :class:`WalkFlags`.
        dir_pattern: Optional glob every visited or descended directory must match.
            It is matched against the path relative to the root, joined with ``/``.
            None or an empty string matches every directory.
        file_pattern: Optional glob matched against the file name only.
        lister: Directory listing capability. Defaults to :class:`ScandirLister`.
        exclusion_rules: Optional rules consulted with the root-relative path of each
            entry; excluded entries are neither reported nor descended into.
        capacity: Path buffer capacity.
        platform_slash: Separator used when ``flags`` select none.

    Returns:
        A generator of ``(path, item_type)`` pairs.

    Raises:
        WalkFailedError: If the root path is empty after tidying or too long.

    The returned generator raises :class:`PathDoesNotExistError`,
    :class:`PathTooDeepError`, :class:`WalkFailedError` and
    :class:`InvalidPatternError` as described in the module documentation.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     os.mkdir(os.path.join(tmpdir, "docs"))
        ...     open(os.path.join(tmpdir, "docs", "readme.md"), "w").close()
        ...     flags = WalkFlags.ROOT_RELATIVE_PATHS | WalkFlags.PATHS_SLASH_FORWARD
        ...     list(iter_walk(tmpdir, flags))
        [('docs', <ItemType.DIRECTORY: 'directory'>), ('docs/readme.md', <ItemType.FILE: 'file'>)]
    """
    return _walk_root(
        _start_walk(path, flags, dir_pattern, file_pattern, lister, exclusion_rules, capacity, platform_slash)
    )


def walk(
    path: PathType,
    visitor: Visitor,
    flags: WalkFlags = WalkFlags.NONE,
    dir_pattern: Optional[str] = None,
    file_pattern: Optional[str] = None,
    userdata: Any = None,
    *,
    lister: Optional[DirectoryLister] = None,
    exclusion_rules: Optional[BaseExclusionRules] = None,
    capacity: int = PATH_BUFFER_CAPACITY,
    platform_slash: str = os.sep,
) -> WalkResult:
    """Invoke ``visitor`` for every entry in a directory tree that matches the filters.

    The visitor is called as ``visitor(path, item_type, userdata)``. If it returns a
    truthy value the walk stops immediately: pending directories are abandoned and
    no further entries are reported.

    See :func:`iter_walk` for the meaning of the remaining arguments and for the
    errors raised. An error recorded for a subtree before the visitor stopped the
    walk is still raised.

    Returns:
        A :class:`WalkResult` with the number of visitor calls and whether the
        visitor stopped the walk.

    Example:
        >>> import tempfile
        >>> found = []
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     open(os.path.join(tmpdir, "notes.txt"), "w").close()
        ...     open(os.path.join(tmpdir, "image.png"), "w").close()
        ...     result = walk(
        ...         tmpdir,
        ...         lambda path, item_type, seen: seen.append(path),
        ...         WalkFlags.ROOT_RELATIVE_PATHS,
        ...         file_pattern="*.txt",
        ...         userdata=found,
        ...     )
        >>> found, result.visited
        (['notes.txt'], 1)
    """
    result = WalkResult()
    state = _start_walk(path, flags, dir_pattern, file_pattern, lister, exclusion_rules, capacity, platform_slash)
    entries = _walk_directory(state)
    with closing(entries):
        for entry_path, item_type in entries:
            result.visited += 1
            if visitor(entry_path, item_type, userdata):
                result.stopped = True
                break
    if state.errors:
        raise state.errors[0]
    return result
