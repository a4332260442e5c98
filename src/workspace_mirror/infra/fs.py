from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path resolution, resilient text reading and
timestamp helpers. Acts as an abstraction over the 'os' module so the
scanner and uploader behave uniformly on Windows and Unix-like systems.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "WorkspaceMirror"
UNIX_APP_DIR_NAME = ".workspace_mirror"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/WorkspaceMirror
    - Linux/Mac: ~/.workspace_mirror

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_workspace_root(path: Optional[str]) -> Optional[str]:
    """
    Resolve the current workspace root.

    Args:
        path: Candidate workspace directory (may be empty).

    Returns:
        Optional[str]: Absolute directory path, or None if it cannot be used.
    """
    if not path or not str(path).strip():
        return None
    resolved = normalize_path(path, "")
    if not os.path.isdir(resolved):
        return None
    return resolved

# -----------------------------------------------------------------------------
# FILE ACCESS API
# -----------------------------------------------------------------------------

def read_text(file_path: str) -> str:
    """
    Read the complete content of a file as text.

    Undecodable byte sequences are replaced rather than raising, and line
    terminators are preserved exactly as stored on disk.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(file_path, "r", encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


def get_mtime(path: str) -> float:
    """Modification time in epoch seconds. Raises OSError if missing."""
    return os.stat(path).st_mtime


def get_mtime_ms(path: str) -> float:
    """Modification time in epoch milliseconds. Raises OSError if missing."""
    return os.stat(path).st_mtime_ns / 1_000_000
