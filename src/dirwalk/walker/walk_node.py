"""Tree node for entries collected from a walk."""

from typing import Any, Optional

from anytree import Node


class WalkNode(Node):  # type: ignore
    """A file or directory reported by a walk.

    Extends anytree.Node with a directory flag; parent/children links and tree
    iteration come from anytree.

    Attributes:
        name (str): Entry name (a single path segment).
        is_dir (bool): True for directories.

    Example:
        >>> root = WalkNode("project", is_dir=True)
        >>> child = WalkNode("setup.cfg", parent=root)
        >>> [node.name for node in root.children]
        ['setup.cfg']
        >>> child.is_dir
        False
    """

    def __init__(self, name: str, parent: Optional["WalkNode"] = None, is_dir: bool = False, **kwargs: Any) -> None:
        super().__init__(name, parent, **kwargs)
        self.is_dir = is_dir

    def relative_path(self) -> str:
        """Path of this node below the tree root, joined with ``/``."""
        return "/".join(node.name for node in self.path[1:])
