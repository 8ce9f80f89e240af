"""Shell-style glob matching for path strings.

This module matches a candidate path against a glob pattern without compiling the
pattern first. Matching is done by a small recursive backtracking matcher that walks
the pattern one token at a time.

Supported syntax:
    ?      - one character that is not a path separator.
    *      - zero or more characters within one path segment.
             Every extent within the segment is tried, so ``*.txt`` matches ``a.b.txt``.
    **     - zero or more whole path segments. Must be followed by ``/`` or end the
             pattern; a trailing ``**`` matches the rest of the candidate.
    [set]  - one non-separator character from the set. Ranges such as ``a-z`` are
             allowed and a leading ``!`` complements the set.
    {a,b}  - one of the comma-separated literal alternatives, tried left to right.
             The first alternative that matches at the current position is taken.

Patterns always use ``/`` to denote a separator. Candidates may use ``/``, ``\\`` or a
mix of both; runs of separators are treated as one where a pattern crosses a segment
boundary.
"""

from enum import Enum

from dirwalk.exceptions import InvalidPatternError

SEPARATORS = ("/", "\\")

# Tokens after a single '*' that are not plain literals.
_WILDCARD_TOKENS = ("*", "?", "[", "{")


class GlobResult(Enum):
    """Outcome of matching a candidate path against a glob pattern."""

    MATCH = "match"
    NO_MATCH = "no_match"
    INVALID_PATTERN = "invalid_pattern"


def _skip_separators(path: str, pos: int) -> int:
    while pos < len(path) and path[pos] in SEPARATORS:
        pos += 1
    return pos


def _segment_end(path: str, pos: int) -> int:
    while pos < len(path) and path[pos] not in SEPARATORS:
        pos += 1
    return pos


def _next_segment_start(path: str, start: int) -> int:
    """Index just past the first separator run at or after ``start``, or -1."""
    for pos in range(start, len(path)):
        if path[pos] in SEPARATORS:
            return _skip_separators(path, pos)
    return -1


def _match_set(content: str, char: str) -> bool:
    negate = content.startswith("!")
    if negate:
        content = content[1:]

    found = False
    pos = 0
    while pos < len(content):
        if pos + 2 < len(content) and content[pos + 1] == "-":
            if content[pos] <= char <= content[pos + 2]:
                found = True
                break
            pos += 3
        else:
            if content[pos] == char:
                found = True
                break
            pos += 1

    return found != negate


def _match_globstar(pattern: str, p: int, path: str, s: int) -> GlobResult:
    rest = p + 2
    if rest == len(pattern):
        return GlobResult.MATCH
    if pattern[rest] != "/":
        return GlobResult.INVALID_PATTERN

    start = s
    while start >= 0:
        result = _match_from(pattern, rest + 1, path, start)
        if result is not GlobResult.NO_MATCH:
            return result
        start = _next_segment_start(path, start + 1)
    return GlobResult.NO_MATCH


def _match_star(pattern: str, p: int, path: str, s: int) -> GlobResult:
    follower_pos = p + 1
    segment_end = _segment_end(path, s)

    if follower_pos == len(pattern):
        # A trailing '*' may not swallow a directory boundary.
        return GlobResult.MATCH if segment_end == len(path) else GlobResult.NO_MATCH

    follower = pattern[follower_pos]
    if follower == "/":
        if segment_end == len(path):
            return GlobResult.NO_MATCH
        return _match_from(pattern, follower_pos + 1, path, _skip_separators(path, segment_end))

    is_literal = follower not in _WILDCARD_TOKENS
    for end in range(s, segment_end + 1):
        if is_literal and (end == len(path) or path[end] != follower):
            continue
        result = _match_from(pattern, follower_pos, path, end)
        if result is not GlobResult.NO_MATCH:
            return result
    return GlobResult.NO_MATCH


def _match_from(pattern: str, p: int, path: str, s: int) -> GlobResult:
    while p < len(pattern):
        token = pattern[p]

        if token == "*":
            if pattern.startswith("**", p):
                return _match_globstar(pattern, p, path, s)
            return _match_star(pattern, p, path, s)

        if token == "[":
            close = pattern.find("]", p + 1)
            if close < 0:
                return GlobResult.INVALID_PATTERN
            if s >= len(path) or path[s] in SEPARATORS or not _match_set(pattern[p + 1 : close], path[s]):
                return GlobResult.NO_MATCH
            p = close + 1
            s += 1

        elif token == "{":
            close = pattern.find("}", p + 1)
            if close < 0:
                return GlobResult.INVALID_PATTERN
            for alternative in pattern[p + 1 : close].split(","):
                if path.startswith(alternative, s):
                    s += len(alternative)
                    break
            else:
                return GlobResult.NO_MATCH
            p = close + 1

        elif token == "?":
            if s >= len(path) or path[s] in SEPARATORS:
                return GlobResult.NO_MATCH
            p += 1
            s += 1

        else:
            if s >= len(path) or path[s] != token:
                return GlobResult.NO_MATCH
            p += 1
            s += 1

    return GlobResult.MATCH if s == len(path) else GlobResult.NO_MATCH


def glob_match(pattern: str, path: str) -> GlobResult:
    """Match a whole path against a glob pattern.

    The matcher is a pure function: it keeps no state between calls, so it is safe to
    call repeatedly or from several threads at once.

    Args:
        pattern: Glob pattern, using ``/`` as the path separator.
        path: Candidate path. Both ``/`` and ``\\`` are accepted as separators.

    Returns:
        GlobResult.MATCH if the entire path matches, GlobResult.NO_MATCH if it does not,
        and GlobResult.INVALID_PATTERN if the pattern is malformed (an unterminated
        ``[`` or ``{``, or a ``**`` that is not a whole segment).

    Example:
        >>> glob_match("a/*.txt", "a/b.txt")
        <GlobResult.MATCH: 'match'>
        >>> glob_match("a/*.txt", "a/b/c.txt")
        <GlobResult.NO_MATCH: 'no_match'>
        >>> glob_match("a/**/d.txt", "a/x/y/d.txt")
        <GlobResult.MATCH: 'match'>
        >>> glob_match("a/**d.txt", "a/d.txt")
        <GlobResult.INVALID_PATTERN: 'invalid_pattern'>
    """
    return _match_from(pattern, 0, path, 0)


def matches(pattern: str, path: str) -> bool:
    """Boolean form of :func:`glob_match`.

    Raises:
        InvalidPatternError: If the pattern is malformed.

    Example:
        >>> matches("{foo,bar}.txt", "bar.txt")
        True
        >>> matches("[!0-9]*.log", "7server.log")
        False
    """
    result = glob_match(pattern, path)
    if result is GlobResult.INVALID_PATTERN:
        raise InvalidPatternError(pattern)
    return result is GlobResult.MATCH
