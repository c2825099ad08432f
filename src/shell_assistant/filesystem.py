"""In-memory, read-only mock file system with path resolution.

The terminal never touches the host disk.  Instead it walks a small
tree of nested nodes that is seeded once and deep-copied for every
session:

- **FileNode**: a leaf holding text content.
- **DirectoryNode**: a mapping from child names to nodes.  Insertion
  order is kept so ``ls`` shows entries the way the seed lists them.

Two pure functions sit on top of the tree:

- ``resolve_path`` turns a relative, absolute, or home-relative path
  into a canonical absolute path.  It is string algebra only and never
  looks at the tree.
- ``get_node`` walks a canonical path from the root and returns the
  node, or ``None`` when any component is missing.

Why two classes instead of one node with a ``kind`` field?
    Matching on the node's class makes every "file or directory?"
    decision explicit, and a type checker can tell when a branch is
    missing.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

HOME_DIR = "/home/user"
ROOT_DIR = "/"


class NodeKind(StrEnum):
    """Display tag for a node, used when listing a directory."""

    FILE = "file"
    DIRECTORY = "dir"


@dataclass
class FileNode:
    """A regular file with text content."""

    content: str = ""

    @property
    def kind(self) -> NodeKind:
        """Return the display tag for this node."""
        return NodeKind.FILE


@dataclass
class DirectoryNode:
    """A directory mapping child names to nodes."""

    children: dict[str, FSNode] = field(default_factory=dict)  # pyright: ignore[reportUnknownVariableType]

    @property
    def kind(self) -> NodeKind:
        """Return the display tag for this node."""
        return NodeKind.DIRECTORY


FSNode: TypeAlias = FileNode | DirectoryNode


class PathNotFoundError(FileNotFoundError):
    """Raised when a path does not name an existing directory.

    A path that resolves to a file where a directory was required is
    reported the same way as a missing path.
    """

    def __init__(self, path: str) -> None:
        """Create the error for *path* (the argument as the user typed it)."""
        self.path = path
        super().__init__(f"'{path}': No such file or directory")


_SEED = DirectoryNode(
    children={
        "home": DirectoryNode(
            children={
                "user": DirectoryNode(
                    children={
                        "Documents": DirectoryNode(
                            children={"report.txt": FileNode("This is a report.")},
                        ),
                        "Downloads": DirectoryNode(),
                        "README.md": FileNode("# Python Shell Assistant\n\nWelcome!"),
                    },
                ),
            },
        ),
        "etc": DirectoryNode(
            children={"config.json": FileNode('{ "setting": "value" }')},
        ),
    },
)


def create_filesystem() -> DirectoryNode:
    """Return a fresh copy of the seed tree.

    Each session owns its copy outright, so nothing a session does can
    leak into another.
    """
    return copy.deepcopy(_SEED)


def resolve_path(current_dir: str, target: str, home: str = HOME_DIR) -> str:
    """Resolve *target* against *current_dir* into a canonical absolute path.

    Examples::

        resolve_path("/home/user", "Documents")  → "/home/user/Documents"
        resolve_path("/home/user", "../..")      → "/"
        resolve_path("/", "../../x")             → "/x"
        resolve_path("/etc", "~")                → "/home/user"

    Args:
        current_dir: The canonical directory to resolve relative paths from.
        target: The path as typed by the user.
        home: The directory ``~`` stands for.

    Returns:
        An absolute path.  Existence is not checked.

    """
    if target.startswith("/"):
        return target
    if target == "~":
        return home

    base = current_dir if current_dir.endswith("/") else current_dir + "/"
    parts = [p for p in (base + target).split("/") if p and p != "."]

    resolved: list[str] = []
    for part in parts:
        if part == "..":
            # Popping past the root stays at the root.
            if resolved:
                resolved.pop()
        else:
            resolved.append(part)

    return "/" + "/".join(resolved)


def get_node(tree: DirectoryNode, path: str) -> FSNode | None:
    """Walk *path* from the root of *tree* and return the node there.

    Returns:
        The node, or ``None`` if a component is missing or a file
        appears where a directory is needed.

    """
    current: FSNode = tree
    for part in (p for p in path.split("/") if p):
        match current:
            case DirectoryNode(children=children) if part in children:
                current = children[part]
            case _:
                return None
    return current


def require_directory(tree: DirectoryNode, path: str, *, shown_as: str) -> DirectoryNode:
    """Return the directory at *path*, or raise.

    Args:
        tree: The root of the file system.
        path: A canonical absolute path.
        shown_as: The argument as the user typed it, used in the error.

    Raises:
        PathNotFoundError: If *path* is missing or is not a directory.

    """
    node = get_node(tree, path)
    if not isinstance(node, DirectoryNode):
        raise PathNotFoundError(shown_as)
    return node
