from __future__ import annotations

import hashlib


def identity_hash(path: str) -> str:
    """
    Compute the identity digest of a filesystem path.

    The digest covers the path string only, never file content, so a node
    keeps its identity across edits and across runs on the same machine.
    """
    return hashlib.md5(path.encode("utf-8", errors="surrogateescape")).hexdigest()
