from __future__ import annotations

"""
Network Communication Infrastructure.

Facade over the HTTP clients used to talk to the analysis backend.
"""

from workspace_mirror.infra.network.upload_client import post_upload

__all__ = [
    "post_upload",
]
