"""Signal-aware output for the dirwalk CLI."""

import errno
import os
import types
from pathlib import Path
from typing import Optional, Type, Union

from dirwalk.cli.signal_handler import signal_handler


class SafeWriter:
    """Writes walk output to a file descriptor or a file, one record at a time.

    Every record is followed by ``terminator`` (a newline by default, or NUL for
    output meant for ``xargs -0``). Writing after SIGINT or SIGPIPE, or into a closed
    pipe, raises BrokenPipeError so the caller can stop the walk.

    Attributes:
        file: The file descriptor or path given at construction.
        fd: The descriptor actually written to.
        terminator: Text appended to each record.
    """

    def __init__(self, file: Union[int, str, os.PathLike], terminator: str = "\n"):
        """
        Raises:
            TypeError: If ``file`` is neither a descriptor nor a path.
        """
        self.file = file
        self.terminator = terminator
        self.records_written = 0
        self._closed = False

        if isinstance(file, int):
            self.fd = file
            self._file_obj = None
        elif isinstance(file, (str, os.PathLike)):
            self._file_obj = Path(file).open("w")
            self.fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(file).__name__}")

    def write(self, data: str) -> None:
        """Write raw text.

        Raises:
            BrokenPipeError: If an interrupting signal was received or the pipe is closed.
            ValueError: If the writer is closed.
            OSError: For other I/O failures.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        if signal_handler.interrupted():
            raise BrokenPipeError()

        try:
            os.write(self.fd, data.encode("utf-8", "surrogateescape"))
        except OSError as e:
            if e.errno == errno.EPIPE:
                raise BrokenPipeError() from e
            raise

    def write_record(self, record: str) -> None:
        """Write one record followed by the terminator."""
        self.write(record + self.terminator)
        self.records_written += 1

    def close(self) -> None:
        """Close the file if this writer opened it. Descriptors passed in stay open."""
        if self._closed:
            return

        if self._file_obj is not None:
            try:
                self._file_obj.close()
            except OSError as e:
                if e.errno != errno.EPIPE:
                    raise

        self._closed = True

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        try:
            self.close()
        except OSError:
            # An error raised inside the with block takes precedence.
            if exc_type is None:
                raise
