"""Exclusion rules written in .gitignore syntax."""

from os import PathLike
from pathlib import Path
from typing import Optional, Sequence, Union

from pathspec import PathSpec
from pathspec.patterns import GitWildMatchPattern  # type: ignore

from dirwalk.types import ItemType, PathType

from .base_rules import BaseExclusionRules


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Exclusion rules using .gitignore pattern syntax, matched by ``pathspec``.

    Rules accumulate in the order they are loaded or added, so a later negation
    (``!keep.log``) can re-include what an earlier rule excluded. Directories are
    matched with a trailing ``/`` which lets directory-only rules such as ``build/``
    prune a whole subtree during a walk.

    Attributes:
        spec (PathSpec): The combined pattern matcher.

    Example:
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule("*.log")
        >>> rules.add_rule("!keep.log")
        >>> rules.add_rule("build/")
        >>> rules.exclude("logs/server.log")
        True
        >>> rules.exclude("logs/keep.log")
        False
        >>> rules.exclude("src/build", ItemType.DIRECTORY)
        True
        >>> rules.exclude("src/build", ItemType.FILE)
        False
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Create the rules, optionally loading patterns from one or more files.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self.spec = PathSpec.from_lines(GitWildMatchPattern, [])

        if rules_files is not None:
            self.load_rules(rules_files)

    def exclude(self, path: str, item_type: ItemType = ItemType.FILE, full_path: Optional[str] = None) -> bool:
        """Check a root-relative path against the accumulated patterns."""
        if item_type is ItemType.DIRECTORY and not path.endswith("/"):
            path += "/"
        return self.spec.match_file(path)

    def _extend(self, patterns: Sequence[GitWildMatchPattern]) -> None:
        if not hasattr(self.spec.patterns, "extend"):
            self.spec.patterns = list(self.spec.patterns)
        self.spec.patterns.extend(patterns)

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Append the patterns found in one or more .gitignore-style files.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")

            with open(path, "r") as f:
                lines = f.read().splitlines()
            self._extend(PathSpec.from_lines(GitWildMatchPattern, lines).patterns)

    def add_rule(self, rule: str) -> None:
        """Append a single .gitignore pattern such as ``*.pyc`` or ``!important.txt``."""
        self._extend([GitWildMatchPattern(rule)])

    def has_rules(self) -> bool:
        return len(self.spec.patterns) > 0
