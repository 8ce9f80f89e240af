"""Bounded path accumulator shared by every frame of one walk."""

from contextlib import contextmanager
from typing import Iterator, List, Optional

from dirwalk.exceptions import PathTooDeepError
from dirwalk.paths import path_tidy

# Maximum length of any path built during a walk, one slot of which is reserved
# for a terminator.
PATH_BUFFER_CAPACITY = 4096


class PathBuffer:
    """A bounded, in-place mutable path shared across one walk.

    The buffer starts as the (already tidied) root path. Descending into an entry
    appends a separator and the entry name; ascending truncates back to the length
    recorded before the descent. :meth:`descend` wraps both steps in a context
    manager so the buffer is restored on every exit path, including exceptions and
    generators closed early.

    Attributes:
        root (str): The root path the walk started from.
        slash (str): Separator placed between segments.
        capacity (int): Upper bound for ``length + 1``.

    Example:
        >>> buffer = PathBuffer("local/folder", "/")
        >>> with buffer.descend("sub"):
        ...     buffer.text, buffer.visible_slice(root_relative=True)
        ('local/folder/sub', 'sub')
        >>> buffer.text
        'local/folder'
    """

    def __init__(
        self,
        root: str,
        slash: str,
        capacity: int = PATH_BUFFER_CAPACITY,
        native_slash: Optional[str] = None,
    ) -> None:
        if len(root) + 1 > capacity:
            raise ValueError(f"Root path does not fit in a buffer of {capacity} characters")
        self.root = root
        self.slash = slash
        self.capacity = capacity
        self.native_slash = native_slash or slash
        self._native_root = path_tidy(root, self.native_slash) if self.native_slash != slash else root
        self._names: List[str] = []
        self._lengths: List[int] = [len(root)]

    @property
    def length(self) -> int:
        """Current length of the path held in the buffer."""
        return self._lengths[-1]

    @property
    def root_length(self) -> int:
        return self._lengths[0]

    @property
    def depth(self) -> int:
        """Number of segments appended below the root."""
        return len(self._names)

    @property
    def text(self) -> str:
        """The full path currently held in the buffer."""
        if not self._names:
            return self.root
        return self.root + self.slash + self.slash.join(self._names)

    @property
    def native_text(self) -> str:
        """The current path joined with the platform separator, for filesystem calls."""
        if not self._names:
            return self._native_root
        return self._native_root + self.native_slash + self.native_slash.join(self._names)

    def relative_posix(self) -> str:
        """The segments below the root joined with ``/``, whatever the buffer's separator."""
        return "/".join(self._names)

    def append_segment(self, name: str) -> int:
        """Append a separator and ``name``.

        Returns:
            The length before the append, suitable for :meth:`truncate_to`.

        Raises:
            PathTooDeepError: If the result would not fit; the buffer is left unchanged.
        """
        saved_length = self.length
        new_length = saved_length + len(self.slash) + len(name)
        if new_length + 1 > self.capacity:
            raise PathTooDeepError(
                f"Path exceeds {self.capacity} characters: {self.text}{self.slash}{name}",
                path=self.text,
            )
        self._names.append(name)
        self._lengths.append(new_length)
        return saved_length

    def truncate_to(self, saved_length: int) -> None:
        """Restore the buffer to a length previously returned by :meth:`append_segment`.

        Raises:
            ValueError: If ``saved_length`` is not a segment boundary currently in the buffer.
        """
        if saved_length not in self._lengths:
            raise ValueError(f"{saved_length} is not a segment boundary of {self.text!r}")
        while self._lengths[-1] != saved_length:
            self._lengths.pop()
            self._names.pop()

    def visible_slice(self, root_relative: bool) -> str:
        """Path as presented to a visitor.

        In root-relative mode the root and the separator following it are stripped.
        """
        if root_relative:
            return self.slash.join(self._names)
        return self.text

    @contextmanager
    def descend(self, name: str) -> Iterator[int]:
        """Append ``name`` for the duration of the ``with`` block.

        Yields:
            The length the buffer is restored to when the block exits.
        """
        saved_length = self.append_segment(name)
        try:
            yield saved_length
        finally:
            self.truncate_to(saved_length)
