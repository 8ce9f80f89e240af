"""Directory walking: flags, path buffer, listing capability and the walk itself."""

from .flags import WalkFlags, slash_for_flags
from .listing import DirectoryLister, Entry, ScandirLister
from .path_buffer import PATH_BUFFER_CAPACITY, PathBuffer
from .walker import WalkResult, iter_walk, walk

__all__ = [
    "PATH_BUFFER_CAPACITY",
    "DirectoryLister",
    "Entry",
    "PathBuffer",
    "ScandirLister",
    "WalkFlags",
    "WalkResult",
    "iter_walk",
    "slash_for_flags",
    "walk",
]
