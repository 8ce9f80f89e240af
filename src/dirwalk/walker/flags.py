"""Flags controlling a directory walk."""

import os
from enum import IntFlag


class WalkFlags(IntFlag):
    """Bitmask of options for :func:`dirwalk.walker.walker.walk`.

    All flags combine freely. Setting both ONLY_DIRECTORIES and ONLY_FILES means no
    entry is reported at all.

    Values:
        NONE: Recursive pre-order walk reporting files and directories.
        DEPTH_FIRST: Report a directory after its contents (post-order).
        SINGLE_DIRECTORY: List the root only, never descend.
        ONLY_DIRECTORIES: Report directories only.
        ONLY_FILES: Report files only.
        IGNORE_DOT_DIRECTORIES: Skip directories whose name starts with '.'.
        IGNORE_DOT_FILES: Skip files whose name starts with '.'.
        ROOT_RELATIVE_PATHS: Report paths with the root and its separator stripped,
            e.g. root "local/folder" reports "local/folder/sub/file.txt" as "sub/file.txt".
        PATHS_SLASH_FORWARD: Build reported paths with '/'.
        PATHS_SLASH_BACK: Build reported paths with '\\'.
    """

    NONE = 0
    DEPTH_FIRST = 1 << 1
    SINGLE_DIRECTORY = 1 << 2
    ONLY_DIRECTORIES = 1 << 3
    ONLY_FILES = 1 << 4
    IGNORE_DOT_DIRECTORIES = 1 << 5
    IGNORE_DOT_FILES = 1 << 6
    ROOT_RELATIVE_PATHS = 1 << 7
    PATHS_SLASH_FORWARD = 1 << 14
    PATHS_SLASH_BACK = 1 << 15


PATHS_SLASH_MASK = WalkFlags.PATHS_SLASH_FORWARD | WalkFlags.PATHS_SLASH_BACK


def slash_for_flags(flags: WalkFlags, platform_slash: str = os.sep) -> str:
    """Pick the path separator requested by ``flags``.

    Exactly one of the slash flags selects that separator; none, or both, fall back to
    ``platform_slash``.

    Example:
        >>> slash_for_flags(WalkFlags.PATHS_SLASH_BACK)
        '\\\\'
        >>> slash_for_flags(WalkFlags.NONE, platform_slash="/")
        '/'
    """
    selected = flags & PATHS_SLASH_MASK
    if selected == WalkFlags.PATHS_SLASH_FORWARD:
        return "/"
    if selected == WalkFlags.PATHS_SLASH_BACK:
        return "\\"
    return platform_slash
