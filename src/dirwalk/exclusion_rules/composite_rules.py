"""Combine several exclusion rule objects into one."""

from typing import List, Optional, Sequence

from dirwalk.types import ItemType

from .base_rules import BaseExclusionRules


class CompositeExclusionRules(BaseExclusionRules):
    """Excludes an entry if any of its member rules excludes it.

    Members are evaluated in order and evaluation stops at the first rule that
    excludes, so cheap rules should come first.

    Attributes:
        rules (List[BaseExclusionRules]): The member rules.

    Example:
        >>> from dirwalk.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> from dirwalk.exclusion_rules.size_rules import SizeExclusionRules
        >>> patterns = GitIgnoreExclusionRules()
        >>> patterns.add_rule("*.tmp")
        >>> composite = CompositeExclusionRules([patterns, SizeExclusionRules("10MB")])
        >>> composite.exclude("cache/data.tmp")
        True
        >>> composite.exclude("missing.txt")
        False
    """

    def __init__(self, rules: Sequence[BaseExclusionRules]):
        """
        Raises:
            ValueError: If rules is empty.
            TypeError: If any member doesn't implement BaseExclusionRules.
        """
        if not rules:
            raise ValueError("At least one exclusion rule must be provided")

        for i, rule in enumerate(rules):
            if not isinstance(rule, BaseExclusionRules):
                raise TypeError(f"Rule at index {i} must implement BaseExclusionRules, got {type(rule)}")

        self.rules: List[BaseExclusionRules] = list(rules)

    def exclude(self, path: str, item_type: ItemType = ItemType.FILE, full_path: Optional[str] = None) -> bool:
        return any(rule.exclude(path, item_type, full_path) for rule in self.rules)

    def has_rules(self) -> bool:
        """True if any member has rules configured.

        Members without a ``has_rules`` method count as configured.
        """
        for rule in self.rules:
            has_rules = getattr(rule, "has_rules", None)
            if not callable(has_rules) or has_rules():
                return True
        return False

    def add_rule_object(self, rule: BaseExclusionRules) -> None:
        """
        Raises:
            TypeError: If rule doesn't implement BaseExclusionRules.
        """
        if not isinstance(rule, BaseExclusionRules):
            raise TypeError(f"Rule must implement BaseExclusionRules, got {type(rule)}")
        self.rules.append(rule)

    def get_rules(self) -> List[BaseExclusionRules]:
        """A copy of the member list."""
        return list(self.rules)
