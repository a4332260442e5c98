from __future__ import annotations

"""
Workspace Tree Data Models.

Provides the node types used by the scanner to build an in-memory map of
the workspace. Directories own their children through a name-keyed mapping;
children refer back to their parent only through the parent's identity hash,
which the owning scan session resolves.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DirectoryNode:
    """
    Represents a folder in the workspace tree.

    Attributes:
        path: Absolute filesystem path.
        name: Base name of the folder.
        relative_path: Path joined from the scan root's name downwards.
        hash: Identity digest of ``path``.
        parent_hash: Identity of the owning directory (None for the root).
        last_modified: Modification time (epoch seconds) observed at scan time.
        children: Child nodes keyed by name.
    """
    path: str
    name: str
    relative_path: str
    hash: str
    parent_hash: Optional[str] = None
    last_modified: float = 0.0
    children: Dict[str, "Node"] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_directory(self) -> bool:
        return True

    @property
    def is_root(self) -> bool:
        return self.parent_hash is None


@dataclass(frozen=True)
class FileNode:
    """
    Immutable snapshot of a file as observed at scan time.

    Attributes:
        path: Absolute filesystem path.
        name: Base filename.
        relative_path: Parent's relative path joined with ``name``.
        hash: Identity digest of ``path`` (independent of content).
        parent_hash: Identity of the owning directory.
        last_modified: Modification time (epoch seconds) at scan time.
        extension: Extension including the leading dot ('' when absent).
        content: Full decoded text of the file.
        lines: Number of segments produced by splitting on line terminators.
    """
    path: str
    name: str
    relative_path: str
    hash: str
    parent_hash: Optional[str]
    last_modified: float
    extension: str
    content: str = field(repr=False)
    lines: int = 0

    @property
    def is_directory(self) -> bool:
        return False

    @property
    def language_id(self) -> str:
        """Bare language identifier derived from the extension."""
        return self.extension[1:] if self.extension.startswith(".") else self.extension


Node = Union[DirectoryNode, FileNode]


def iter_nodes(root: DirectoryNode):
    """Yield every node of the tree rooted at ``root``, depth-first."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, DirectoryNode):
            stack.extend(node.children.values())
