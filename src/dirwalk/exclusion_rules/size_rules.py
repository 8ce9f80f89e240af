"""Size-based exclusion rules for dropping large files from a walk."""

import os
from typing import Optional, Union

from humanfriendly import InvalidSize, parse_size

from dirwalk.types import ItemType

from .base_rules import BaseExclusionRules


def parse_file_size(size_str: str) -> int:
    """Parse a human-readable file size to bytes.

    Args:
        size_str: Size string like '1GB', '500MB', '2.5K', or just '1024'

    Returns:
        Size in bytes

    Raises:
        ValueError: If size_str is not a valid size format
    """
    try:
        return int(parse_size(size_str))
    except InvalidSize as e:
        raise ValueError(f"Invalid size format '{size_str}': {e}") from e


class SizeExclusionRules(BaseExclusionRules):
    """Excludes files larger than a limit.

    Directories are never excluded. The size is read from ``full_path`` when the
    walker supplies it; symbolic links report the size of their target.

    Attributes:
        max_size_bytes (int): Largest size in bytes that is still kept.

    Example:
        >>> rules = SizeExclusionRules("1MB")
        >>> rules.max_size_bytes
        1000000
        >>> rules.exclude("some/dir", ItemType.DIRECTORY)
        False
    """

    def __init__(self, max_size: Union[str, int]):
        """
        Raises:
            ValueError: If max_size is negative, malformed or of the wrong type.
        """
        if isinstance(max_size, bool) or not isinstance(max_size, (str, int)):
            raise ValueError(f"max_size must be string or int, got {type(max_size)}")
        if isinstance(max_size, str):
            max_size = parse_file_size(max_size)
        if max_size < 0:
            raise ValueError("Size cannot be negative")
        self.max_size_bytes = max_size

    def exclude(self, path: str, item_type: ItemType = ItemType.FILE, full_path: Optional[str] = None) -> bool:
        """Return True if the file is larger than the limit.

        Entries whose size cannot be read are kept.
        """
        if item_type is ItemType.DIRECTORY:
            return False
        try:
            return os.path.getsize(full_path or path) > self.max_size_bytes
        except OSError:
            return False

    def has_rules(self) -> bool:
        return self.max_size_bytes > 0
