from abc import ABC, abstractmethod
from typing import Optional, Sequence, Union

from dirwalk.types import ItemType, PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class for rules that remove entries from a directory walk.

    The walker consults its exclusion rules once per entry, after the dot-entry
    filters and before the glob patterns. An excluded directory is neither reported
    nor descended into; an excluded file is not reported.

    Each check receives three views of the entry:

    - ``path``: the path relative to the walk root, always joined with ``/``;
    - ``item_type``: whether the entry is a file or a directory;
    - ``full_path``: the path as the walker built it, usable for filesystem access.

    Pattern-based rule types may also support loading rules from files and adding
    single rules; the default implementations raise NotImplementedError.

    Example:
        >>> class NoBuildDirectories(BaseExclusionRules):
        ...     def exclude(self, path, item_type=ItemType.FILE, full_path=None):
        ...         return item_type is ItemType.DIRECTORY and path.split("/")[-1] == "build"
        >>> rules = NoBuildDirectories()
        >>> rules.exclude("src/build", ItemType.DIRECTORY)
        True
        >>> rules.exclude("src/build", ItemType.FILE)
        False
        >>> rules.add_rule("*.o")
        Traceback (most recent call last):
            ...
        NotImplementedError: NoBuildDirectories doesn't support adding individual rules.
    """

    @abstractmethod
    def exclude(self, path: str, item_type: ItemType = ItemType.FILE, full_path: Optional[str] = None) -> bool:
        """
        Decide whether an entry should be dropped from the walk.

        Args:
            path (str): Root-relative path of the entry, using ``/`` as separator.
            item_type (ItemType): Type of the entry. Defaults to FILE.
            full_path (Optional[str]): Path of the entry as built by the walker. When
                omitted, implementations that need the filesystem fall back to ``path``.

        Returns:
            bool: True if the entry should be excluded, False if it should be kept.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load exclusion rules from one or more files.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist (for file-supporting rule types).
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule.

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
