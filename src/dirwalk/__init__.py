"""Directory tree walking and glob matching.

This package enumerates directory trees under flag-driven filtering rules and matches
path strings against extended shell-glob patterns (``*``, ``**``, ``?``, ``[set]`` and
``{a,b}``), without shelling out to external programs.
"""

from importlib.metadata import PackageNotFoundError, version

from dirwalk.exceptions import (
    DirError,
    DirWalkError,
    InvalidPatternError,
    PathDoesNotExistError,
    PathTooDeepError,
    WalkFailedError,
)
from dirwalk.glob_match import GlobResult, glob_match, matches
from dirwalk.paths import path_extension, path_filename, path_tidy
from dirwalk.tree_ops import create_dir, delete_entry, mktree, rmtree
from dirwalk.types import ItemType
from dirwalk.walker import WalkFlags, WalkResult, iter_walk, walk

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("dirwalk")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "DirError",
    "DirWalkError",
    "GlobResult",
    "InvalidPatternError",
    "ItemType",
    "PathDoesNotExistError",
    "PathTooDeepError",
    "WalkFailedError",
    "WalkFlags",
    "WalkResult",
    "create_dir",
    "delete_entry",
    "glob_match",
    "iter_walk",
    "matches",
    "mktree",
    "path_extension",
    "path_filename",
    "path_tidy",
    "rmtree",
    "walk",
]
