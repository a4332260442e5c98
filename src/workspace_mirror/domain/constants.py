from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to application-wide constants, including the
default exclusion policy, the file types accepted by the analysis backend,
and system versioning.
"""

from typing import List

CURRENT_CONFIG_VERSION = "1.0.0"
APP_NAME = "WorkspaceMirror"

# Local analysis backend started alongside the host tool
DEFAULT_UPLOAD_ENDPOINT = "http://localhost:8000/upload"
ENDPOINT_ENV_VAR = "WORKSPACE_MIRROR_ENDPOINT"

DEFAULT_REQUEST_TIMEOUT = 30.0

# -----------------------------------------------------------------------------
# EXCLUSION POLICY
# -----------------------------------------------------------------------------
DEFAULT_EXCLUDED_FOLDERS: List[str] = [
    "node_modules",
    ".git",
    ".svn",
    ".hg",
    ".idea",
    ".vscode",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
    "out",
]

DEFAULT_EXCLUDED_EXTENSIONS: List[str] = [
    ".log", ".lock", ".map",
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".svg",
    ".pdf", ".zip", ".gz", ".tar", ".7z",
    ".exe", ".dll", ".so", ".dylib", ".class", ".jar", ".pyc", ".o",
    ".woff", ".woff2", ".ttf", ".eot",
    ".mp3", ".mp4", ".wav", ".mov",
]

# -----------------------------------------------------------------------------
# BACKEND LANGUAGE SUPPORT
# -----------------------------------------------------------------------------
DEFAULT_SUPPORTED_EXTENSIONS: List[str] = [
    ".ts", ".tsx", ".js", ".jsx",
    ".py",
    ".java",
    ".cs",
    ".c", ".cpp", ".h", ".hpp",
    ".go",
    ".php",
    ".rb",
]
