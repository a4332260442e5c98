from __future__ import annotations

"""
Workspace Scanning Service.

Recursively walks the workspace root, applies the exclusion policy and
builds the in-memory tree. Every file admitted to the tree is also pushed
onto the session's pending queue, in discovery order, for the upload loop.

Filesystem errors never abort the scan: an unreadable directory simply
contributes nothing further and an unreadable entry is skipped.
"""

import logging
import os
import re
import stat
from typing import Optional

from workspace_mirror.core.hashing import identity_hash
from workspace_mirror.domain.settings import Settings
from workspace_mirror.domain.sync_models import ScanSession, SyncState
from workspace_mirror.domain.tree_models import DirectoryNode, FileNode
from workspace_mirror.infra.fs import get_mtime, read_text

logger = logging.getLogger(__name__)

_LINE_BREAK_RX = re.compile(r"\r\n|\r|\n")


# ==============================================================================
# PUBLIC API
# ==============================================================================

def build_root(root_path: str, settings: Settings, session: ScanSession) -> DirectoryNode:
    """
    Create the root directory node and expand the whole workspace below it.

    Args:
        root_path: Absolute path of the workspace root.
        settings: Exclusion policy.
        session: Run state receiving the tree, node index and pending queue.

    Returns:
        DirectoryNode: The fully populated root.
    """
    session.state = SyncState.SCANNING
    name = os.path.basename(os.path.normpath(root_path)) or root_path

    try:
        last_modified = get_mtime(root_path)
    except OSError:
        last_modified = 0.0

    root = DirectoryNode(
        path=root_path,
        name=name,
        relative_path=name,
        hash=identity_hash(root_path),
        parent_hash=None,
        last_modified=last_modified,
    )
    session.root = root
    session.register(root)

    expand(root, settings, session)

    logger.info(
        f"Scan finished: {session.count_files()} files, "
        f"{session.count_directories()} directories, {len(session.pending)} queued."
    )
    return root


def expand(directory: DirectoryNode, settings: Settings, session: ScanSession) -> None:
    """
    List ``directory`` and populate its children, recursing into subfolders.

    Entries are visited in the order the operating system returns them.
    A subdirectory whose own name is in the excluded folder set is skipped
    together with its subtree; its siblings are still processed.
    """
    real_path = os.path.realpath(directory.path)
    if real_path in session.visited_dirs:
        logger.debug(f"Skipping already visited directory (link loop): {directory.path}")
        return
    session.visited_dirs.add(real_path)

    try:
        entries = os.listdir(directory.path)
    except OSError as e:
        session.scan_errors += 1
        logger.warning(f"Cannot list directory '{directory.path}': {e}")
        return

    for entry in entries:
        if session.is_cancelled():
            logger.info(f"Scan cancelled while expanding '{directory.relative_path}'.")
            return

        absolute_path = os.path.join(directory.path, entry)
        relative_path = os.path.join(directory.relative_path, entry)

        try:
            st = os.stat(absolute_path)
        except OSError as e:
            session.scan_errors += 1
            logger.warning(f"Cannot stat '{absolute_path}': {e}")
            continue

        if stat.S_ISDIR(st.st_mode):
            if settings.is_folder_excluded(entry):
                logger.debug(f"Excluded folder: {relative_path}")
                continue

            child = DirectoryNode(
                path=absolute_path,
                name=entry,
                relative_path=relative_path,
                hash=identity_hash(absolute_path),
                parent_hash=directory.hash,
                last_modified=st.st_mtime,
            )
            directory.children[entry] = child
            session.register(child)
            expand(child, settings, session)
        else:
            new_file = add_file(directory, absolute_path, settings, session)
            if new_file is not None:
                session.pending.append(new_file)


def add_file(
        parent: DirectoryNode,
        absolute_path: str,
        settings: Settings,
        session: ScanSession,
) -> Optional[FileNode]:
    """
    Snapshot a file into the tree unless its extension is excluded.

    Args:
        parent: Directory that will own the new node.
        absolute_path: Absolute path of the file.
        settings: Exclusion policy.
        session: Run state (node index and error counter).

    Returns:
        Optional[FileNode]: The inserted node, or None when the file is
        excluded or cannot be read.
    """
    file_name = os.path.basename(absolute_path)
    extension = os.path.splitext(file_name)[1]

    if settings.is_extension_excluded(extension):
        return None

    try:
        last_modified = get_mtime(absolute_path)
        content = read_text(absolute_path)
    except OSError as e:
        session.scan_errors += 1
        logger.warning(f"Cannot read file '{absolute_path}': {e}")
        return None

    node = FileNode(
        path=absolute_path,
        name=file_name,
        relative_path=os.path.join(parent.relative_path, file_name),
        hash=identity_hash(absolute_path),
        parent_hash=parent.hash,
        last_modified=last_modified,
        extension=extension,
        content=content,
        lines=count_lines(content),
    )
    parent.children[file_name] = node
    session.register(node)
    return node


def count_lines(content: str) -> int:
    """Number of segments obtained by splitting on CRLF, CR or LF."""
    return len(_LINE_BREAK_RX.split(content))
