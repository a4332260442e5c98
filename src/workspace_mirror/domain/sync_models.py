from __future__ import annotations

"""
Synchronization Domain Data Models.

Defines the per-run scan session (tree, node index, pending queue, state),
the upload wire payload, transport outcomes and the final run report shared
between the core services and the interface layers (CLI/GUI).
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from workspace_mirror.domain.tree_models import DirectoryNode, FileNode, Node

# -----------------------------------------------------------------------------
# STATE MACHINE
# -----------------------------------------------------------------------------

class SyncState(Enum):
    """Lifecycle of a synchronization run."""
    IDLE = "idle"
    SCANNING = "scanning"
    UPLOADING = "uploading"
    DONE = "done"
    CANCELLED = "cancelled"


class UploadStatus(Enum):
    """Outcome classes of a single upload request."""
    ACCEPTED = "accepted"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


# -----------------------------------------------------------------------------
# SESSION STATE
# -----------------------------------------------------------------------------

@dataclass
class ScanSession:
    """
    Mutable state owned by a single synchronization run.

    Attributes:
        workspace_root: Absolute path of the scanned workspace.
        root: Root directory node (set by the scanner).
        nodes: Identity hash -> node index used to resolve parent links.
        pending: Files awaiting upload; drained from the end.
        state: Current lifecycle state.
        scan_errors: Number of entries the scanner could not process.
        cancellation_event: Optional external stop signal.
        visited_dirs: Real paths already expanded (guards symlink loops).
    """
    workspace_root: str
    root: Optional[DirectoryNode] = None
    nodes: Dict[str, Node] = field(default_factory=dict)
    pending: List[FileNode] = field(default_factory=list)
    state: SyncState = SyncState.IDLE
    scan_errors: int = 0
    cancellation_event: Optional[threading.Event] = None
    visited_dirs: Set[str] = field(default_factory=set)

    def register(self, node: Node) -> None:
        self.nodes[node.hash] = node

    def parent_of(self, node: Node) -> Optional[DirectoryNode]:
        """Resolve the owning directory of ``node`` (None for the root)."""
        if node.parent_hash is None:
            return None
        parent = self.nodes.get(node.parent_hash)
        return parent if isinstance(parent, DirectoryNode) else None

    def is_cancelled(self) -> bool:
        return bool(self.cancellation_event and self.cancellation_event.is_set())

    def count_files(self) -> int:
        return sum(1 for n in self.nodes.values() if isinstance(n, FileNode))

    def count_directories(self) -> int:
        return sum(1 for n in self.nodes.values() if isinstance(n, DirectoryNode))


# -----------------------------------------------------------------------------
# WIRE MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class UploadPayload:
    """JSON body sent to the analysis endpoint for one file."""
    content: str
    languageId: str
    filePath: str
    timestamp: float
    workspaceFolder: str
    noReturn: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "languageId": self.languageId,
            "filePath": self.filePath,
            "timestamp": self.timestamp,
            "noReturn": self.noReturn,
            "workspaceFolder": self.workspaceFolder,
        }


@dataclass(frozen=True)
class UploadResult:
    """
    Normalized outcome of a transport call.

    Attributes:
        status: Outcome class.
        status_code: HTTP status when a response was received, else None.
        message: Short diagnostic text.
    """
    status: UploadStatus
    status_code: Optional[int] = None
    message: str = ""


# -----------------------------------------------------------------------------
# RUN REPORT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SyncReport:
    """
    Summary of a complete synchronization run.

    Attributes:
        status: Terminal status ('done', 'cancelled', 'scanned',
                'disabled' or 'no_workspace').
        workspace_root: Scanned root path ('' when unresolved).
        files_indexed: File nodes added to the tree.
        directories_indexed: Directory nodes including the root.
        requests_sent: Upload requests issued.
        accepted: Requests answered with 2xx.
        unsupported: Requests rejected with 406.
        failed: Requests (or send preparations) that failed otherwise.
        skipped: Queue items with an unsupported extension (no request).
        scan_errors: Entries the scanner could not list, stat or read.
    """
    status: str
    workspace_root: str = ""
    files_indexed: int = 0
    directories_indexed: int = 0
    requests_sent: int = 0
    accepted: int = 0
    unsupported: int = 0
    failed: int = 0
    skipped: int = 0
    scan_errors: int = 0

    @property
    def ok(self) -> bool:
        return self.status in ("done", "scanned", "disabled")
