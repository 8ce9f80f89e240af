from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class ItemType(Enum):
    """Enumeration of item types reported during a directory walk.

    Attributes:
        FILE: Anything that is not a directory (regular files, symlinks, devices).
        DIRECTORY: Directory
        UNHANDLED: The listing could not report a type; the entry must be probed.
    """

    FILE = "file"
    DIRECTORY = "directory"
    UNHANDLED = "unhandled"
