"""Path string helpers shared by the walker and the tree operations.

These functions operate on plain strings and never touch the filesystem.
"""

import os
import re
from typing import Optional

SEPARATORS = ("/", "\\")

# Characters trimmed from both ends of a path before it is tidied.
_TRIM_CHARS = " \t\n\v\f\r\""

_SEPARATOR_RUN = re.compile(r"[/\\]+")

UNC_PREFIX = "\\\\"


def is_separator(char: str) -> bool:
    """Return True if ``char`` is a forward or back slash."""
    return char in SEPARATORS


def path_tidy(path: str, slash: str = os.sep) -> str:
    """Normalize a raw path string.

    Surrounding whitespace and double quotes are removed, every separator is converted
    to ``slash``, runs of separators collapse into one and a trailing separator is
    dropped. A UNC prefix (``\\\\``) is kept untouched even when ``slash`` is ``/``.

    Args:
        path: The raw path.
        slash: Separator to use in the result, ``/`` or ``\\``.

    Returns:
        The tidied path. May be empty.

    Raises:
        ValueError: If ``slash`` is not a path separator.

    Example:
        >>> path_tidy('  "local//folder/" ', "/")
        'local/folder'
        >>> path_tidy("local\\\\folder\\\\file.txt", "/")
        'local/folder/file.txt'
        >>> path_tidy("\\\\\\\\Server\\\\folder", "/")
        '\\\\\\\\Server/folder'
    """
    if slash not in SEPARATORS:
        raise ValueError(f"slash must be '/' or '\\\\', got {slash!r}")

    path = path.strip(_TRIM_CHARS)

    prefix = ""
    if path.startswith(UNC_PREFIX):
        prefix = UNC_PREFIX
        path = path[len(UNC_PREFIX) :].lstrip("/\\")

    tidied = _SEPARATOR_RUN.sub(lambda _: slash, path)
    if tidied and is_separator(tidied[-1]):
        tidied = tidied[:-1]
    return prefix + tidied


def path_filename(path: str) -> Optional[str]:
    """Return the file name part of a path.

    Example:
        >>> path_filename("local/folder/file.txt")
        'file.txt'
        >>> path_filename("local/folder/") is None
        True
    """
    if not path or is_separator(path[-1]):
        return None

    start = len(path)
    while start and not is_separator(path[start - 1]):
        start -= 1
    return path[start:]


def path_extension(path: str) -> Optional[str]:
    """Return the extension of the file name part of a path, without the dot.

    Names without a dot, names ending in a dot and dot-files such as ``.bashrc``
    have no extension.

    Example:
        >>> path_extension("local/folder/archive.tar.gz")
        'gz'
        >>> path_extension("home/.bashrc") is None
        True
    """
    filename = path_filename(path)
    if not filename or filename.endswith("."):
        return None

    dot = filename.rfind(".")
    if dot <= 0:
        return None
    return filename[dot + 1 :]
