from enum import Enum
from typing import Optional


class DirError(Enum):
    """Result codes for directory walking and tree operations.

    Every :class:`DirWalkError` carries one of these codes so callers that prefer
    status values over exception types can branch on ``error.code``.
    """

    OK = "ok"
    FAILED = "failed"
    PATH_TOO_DEEP = "path_too_deep"
    PATH_DOES_NOT_EXIST = "path_does_not_exist"


class DirWalkError(Exception):
    """
    Base class for errors raised while walking or modifying a directory tree.

    Attributes:
        code (DirError): The status code describing the failure.
        path (Optional[str]): The path being processed when the failure occurred.

    Example:
        >>> error = DirWalkError("Walk failed", path="some/dir")
        >>> error.code
        <DirError.FAILED: 'failed'>
        >>> error.path
        'some/dir'
    """

    code = DirError.FAILED

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message)


class WalkFailedError(DirWalkError):
    """
    Exception raised for enumeration, metadata-probe or filesystem operation failures.

    Example:
        >>> error = WalkFailedError("Could not stat entry", path="a/b")
        >>> str(error)
        'Could not stat entry'
    """

    code = DirError.FAILED


class PathTooDeepError(DirWalkError):
    """
    Exception raised when appending an entry would exceed the path buffer capacity.

    Example:
        >>> error = PathTooDeepError("Path too deep", path="a/b")
        >>> error.code
        <DirError.PATH_TOO_DEEP: 'path_too_deep'>
    """

    code = DirError.PATH_TOO_DEEP


class PathDoesNotExistError(DirWalkError):
    """
    Exception raised when a directory to walk cannot be opened.

    Example:
        >>> error = PathDoesNotExistError("Path does not exist: missing", path="missing")
        >>> error.code
        <DirError.PATH_DOES_NOT_EXIST: 'path_does_not_exist'>
    """

    code = DirError.PATH_DOES_NOT_EXIST


class InvalidPatternError(ValueError):
    """
    Exception raised when a glob pattern is malformed.

    Attributes:
        pattern (str): The offending glob pattern.

    Example:
        >>> error = InvalidPatternError("[abc")
        >>> str(error)
        'Invalid glob pattern: [abc'
    """

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        super().__init__(f"Invalid glob pattern: {pattern}")
