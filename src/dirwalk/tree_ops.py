"""Creating and removing whole directory trees.

These helpers sit on top of two primitives, :func:`create_dir` and
:func:`delete_entry`, and the walker. Neither :func:`mktree` nor :func:`rmtree` is
atomic: a failure part-way leaves the directories created or removed so far in place.
"""

import os
from typing import List

from dirwalk.exceptions import WalkFailedError
from dirwalk.paths import path_tidy
from dirwalk.types import ItemType, PathType
from dirwalk.walker.flags import WalkFlags
from dirwalk.walker.path_buffer import PATH_BUFFER_CAPACITY
from dirwalk.walker.walker import walk


def create_dir(path: PathType) -> None:
    """Create one directory. An existing directory is not an error.

    Raises:
        WalkFailedError: If the directory cannot be created.
    """
    try:
        os.mkdir(path)
    except FileExistsError:
        if not os.path.isdir(path):
            raise WalkFailedError(f"Path exists and is not a directory: {os.fspath(path)}", path=os.fspath(path))
    except OSError as e:
        raise WalkFailedError(f"Cannot create directory {os.fspath(path)}: {e}", path=os.fspath(path)) from e


def delete_entry(path: PathType, item_type: ItemType) -> None:
    """Remove one file or one empty directory.

    Entries of type UNHANDLED are left alone.

    Raises:
        WalkFailedError: If the entry cannot be removed.
    """
    try:
        if item_type is ItemType.FILE:
            os.unlink(path)
        elif item_type is ItemType.DIRECTORY:
            os.rmdir(path)
    except OSError as e:
        raise WalkFailedError(f"Cannot remove {os.fspath(path)}: {e}", path=os.fspath(path)) from e


def mktree(path: PathType, slash: str = os.sep) -> None:
    """Create a directory and all missing parents.

    The path is tidied first, then every prefix ending at a separator is created in
    turn, followed by the full path.

    Raises:
        WalkFailedError: If the path is too long or a directory cannot be created.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     mktree(os.path.join(tmpdir, "a", "b", "c"))
        ...     os.path.isdir(os.path.join(tmpdir, "a", "b", "c"))
        True
    """
    raw_path = os.fspath(path)
    if len(raw_path) >= PATH_BUFFER_CAPACITY - 1:
        raise WalkFailedError(f"Path does not fit in a buffer of {PATH_BUFFER_CAPACITY} characters", path=raw_path)

    tidied = path_tidy(raw_path, slash)
    # Absolute paths start after the leading separator, otherwise we would try to create "".
    position = 1 if tidied.startswith(slash) else 0
    while True:
        separator = tidied.find(slash, position)
        if separator < 0:
            create_dir(tidied)
            return
        create_dir(tidied[:separator])
        position = separator + 1


def rmtree(path: PathType) -> None:
    """Remove a directory and everything below it.

    One post-order walk deletes every entry bottom-up, then the emptied root itself
    is removed. The walk stops at the first entry that cannot be deleted.

    Raises:
        PathDoesNotExistError: If the directory cannot be opened.
        WalkFailedError: If an entry or the root cannot be removed.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     target = os.path.join(tmpdir, "build")
        ...     mktree(os.path.join(target, "obj"))
        ...     open(os.path.join(target, "obj", "main.o"), "w").close()
        ...     rmtree(target)
        ...     os.path.exists(target)
        False
    """
    failures: List[WalkFailedError] = []

    def remove(entry_path: str, item_type: ItemType, errors: List[WalkFailedError]) -> bool:
        try:
            delete_entry(entry_path, item_type)
        except WalkFailedError as e:
            errors.append(e)
            return True
        return False

    walk(path, remove, WalkFlags.DEPTH_FIRST, userdata=failures)
    if failures:
        raise failures[0]

    delete_entry(os.fspath(path), ItemType.DIRECTORY)
