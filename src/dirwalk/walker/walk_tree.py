"""Collect a directory walk into a tree and render it.

:class:`WalkTree` drives one root-relative walk with the usual flags, patterns and
exclusion rules, stores the reported entries as :class:`WalkNode` objects and renders
them in the style of the Unix ``tree`` command.
"""

from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from dirwalk.exclusion_rules.base_rules import BaseExclusionRules
from dirwalk.types import ItemType, PathType
from dirwalk.walker.flags import PATHS_SLASH_MASK, WalkFlags
from dirwalk.walker.listing import DirectoryLister
from dirwalk.walker.walk_node import WalkNode
from dirwalk.walker.walker import walk


class WalkTree:
    """A tree of the entries a walk reports.

    The tree is built lazily on first access. Reporting order does not matter:
    ``DEPTH_FIRST`` is ignored, and directories that are not reported themselves (for
    instance with ``ONLY_FILES``) still appear as parents of the entries below them.

    Attributes:
        root_path (Path): The directory that was walked.
        flags (WalkFlags): Flags passed to the walk, with root-relative forward-slash
            paths forced on.

    Example:
        >>> tree = WalkTree("src", file_pattern="*.py")  # doctest: +SKIP
        >>> print(tree.get_tree_representation())  # doctest: +SKIP
        src/
        ├── utils/
        │   └── helpers.py
        └── main.py
    """

    def __init__(
        self,
        root_path: PathType,
        flags: WalkFlags = WalkFlags.NONE,
        dir_pattern: Optional[str] = None,
        file_pattern: Optional[str] = None,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        lister: Optional[DirectoryLister] = None,
    ) -> None:
        self.root_path = Path(root_path)
        flags &= ~(WalkFlags.DEPTH_FIRST | PATHS_SLASH_MASK)
        self.flags = flags | WalkFlags.ROOT_RELATIVE_PATHS | WalkFlags.PATHS_SLASH_FORWARD
        self.dir_pattern = dir_pattern
        self.file_pattern = file_pattern
        self.exclusion_rules = exclusion_rules
        self.lister = lister
        self._tree: Optional[WalkNode] = None
        self._file_count = 0
        self._directory_count = 0

    def get_tree(self) -> WalkNode:
        """Return the root node, building the tree on first access.

        Raises:
            DirWalkError: Any error raised by the underlying walk.
            InvalidPatternError: If a pattern is malformed.
        """
        if self._tree is None:
            self._tree = self._build_tree()
        return self._tree

    @property
    def file_count(self) -> int:
        self.get_tree()
        return self._file_count

    @property
    def directory_count(self) -> int:
        """Number of directories in the tree, not counting the root."""
        self.get_tree()
        return self._directory_count

    def _build_tree(self) -> WalkNode:
        root = WalkNode(self.root_path.resolve().name or str(self.root_path), is_dir=True)
        nodes: Dict[str, WalkNode] = {"": root}
        self._file_count = 0
        self._directory_count = 0

        walk(
            self.root_path,
            self._add_entry,
            self.flags,
            self.dir_pattern,
            self.file_pattern,
            nodes,
            lister=self.lister,
            exclusion_rules=self.exclusion_rules,
        )
        return root

    def _directory_node(self, relative_path: str, nodes: Dict[str, WalkNode]) -> WalkNode:
        node = nodes.get(relative_path)
        if node is None:
            parent_path, _, name = relative_path.rpartition("/")
            node = WalkNode(name, parent=self._directory_node(parent_path, nodes), is_dir=True)
            nodes[relative_path] = node
            self._directory_count += 1
        return node

    def _add_entry(self, path: str, item_type: ItemType, nodes: Dict[str, WalkNode]) -> Any:
        if item_type is ItemType.DIRECTORY:
            self._directory_node(path, nodes)
            return None
        parent_path, _, name = path.rpartition("/")
        WalkNode(name, parent=self._directory_node(parent_path, nodes))
        self._file_count += 1
        return None

    def stream_tree_representation(self) -> Iterator[str]:
        """Yield the tree one line at a time.

        Directories are listed before files, each group sorted case-insensitively.
        Directory names carry a trailing ``/``.
        """
        root = self.get_tree()

        def write_node(node: WalkNode, prefix: str, is_last: bool) -> Iterator[str]:
            connector = "└── " if is_last else "├── "
            suffix = "/" if node.is_dir else ""
            yield f"{prefix}{connector}{node.name}{suffix}"
            if node.is_dir:
                yield from write_children(node, prefix + ("    " if is_last else "│   "))

        def write_children(node: WalkNode, prefix: str) -> Iterator[str]:
            children = sorted(node.children, key=lambda n: (not n.is_dir, n.name.lower()))
            for i, child in enumerate(children):
                yield from write_node(child, prefix, i == len(children) - 1)

        yield f"{root.name}/"
        yield from write_children(root, "")

    def get_tree_representation(self) -> str:
        return "\n".join(self.stream_tree_representation())

    def refresh(self) -> None:
        """Discard the cached tree so the next access walks the filesystem again."""
        self._tree = None
