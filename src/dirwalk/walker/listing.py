"""Directory listing and metadata probing for the walker.

The walker never calls the operating system directly. It asks a
:class:`DirectoryLister` for the entries of a directory and, when an entry's type is
unknown, for a probe of its metadata. :class:`ScandirLister` implements both on top of
:func:`os.scandir`, which serves POSIX and Windows file systems alike.
"""

import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator

from dirwalk.types import ItemType


@dataclass(frozen=True)
class Entry:
    """One item of a directory listing.

    Attributes:
        name: Entry name, without any directory part.
        item_type: FILE, DIRECTORY, or UNHANDLED when the listing could not tell.
    """

    name: str
    item_type: ItemType


class DirectoryLister(ABC):
    """Capability used by the walker to enumerate directories.

    Implementations decide how entries are read. The order of entries is whatever the
    underlying source produces and is not guaranteed to be sorted or stable.
    """

    @abstractmethod
    def list_entries(self, path: str) -> Iterator[Entry]:
        """List the entries of a directory.

        The ``.`` and ``..`` pseudo-entries may be included; the walker skips them.

        Raises:
            FileNotFoundError: If the directory does not exist.
            NotADirectoryError: If the path is not a directory.
            OSError: For any other enumeration failure.
        """

    @abstractmethod
    def probe(self, path: str) -> ItemType:
        """Report whether ``path`` is a directory or a file.

        Raises:
            OSError: If the metadata cannot be read.
        """


class ScandirLister(DirectoryLister):
    """Lists the local file system with :func:`os.scandir`.

    Symbolic links are reported as files, so a walk never descends through a link.

    Example:
        >>> import tempfile
        >>> with tempfile.TemporaryDirectory() as tmpdir:
        ...     os.mkdir(os.path.join(tmpdir, "sub"))
        ...     [entry.name for entry in ScandirLister().list_entries(tmpdir)]
        ['sub']
    """

    def list_entries(self, path: str) -> Iterator[Entry]:
        with os.scandir(path) as entries:
            for dir_entry in entries:
                try:
                    is_dir = dir_entry.is_dir(follow_symlinks=False)
                except OSError:
                    yield Entry(dir_entry.name, ItemType.UNHANDLED)
                    continue
                yield Entry(dir_entry.name, ItemType.DIRECTORY if is_dir else ItemType.FILE)

    def probe(self, path: str) -> ItemType:
        mode = os.lstat(path).st_mode
        return ItemType.DIRECTORY if stat.S_ISDIR(mode) else ItemType.FILE
