from __future__ import annotations

"""
Runtime Settings Provider.

Read-only view over a validated configuration dictionary, exposing the
exclusion policy, upload eligibility and endpoint in the shape the scanner
and the upload loop consume.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet

from workspace_mirror.domain import constants as const


@dataclass(frozen=True)
class Settings:
    """
    Attributes:
        enabled: Feature switch for the whole synchronization.
        endpoint: Configured upload URL (environment override applied lazily).
        excluded_folder_names: Folder names never descended into.
        excluded_file_extensions: Extensions never added to the tree.
        supported_file_extensions: Extensions the backend processes.
        request_timeout: Per-request timeout in seconds.
    """
    enabled: bool = True
    endpoint: str = const.DEFAULT_UPLOAD_ENDPOINT
    excluded_folder_names: FrozenSet[str] = field(
        default_factory=lambda: frozenset(const.DEFAULT_EXCLUDED_FOLDERS)
    )
    excluded_file_extensions: FrozenSet[str] = field(
        default_factory=lambda: frozenset(const.DEFAULT_EXCLUDED_EXTENSIONS)
    )
    supported_file_extensions: FrozenSet[str] = field(
        default_factory=lambda: frozenset(const.DEFAULT_SUPPORTED_EXTENSIONS)
    )
    request_timeout: float = const.DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "Settings":
        """Build settings from a configuration already passed through validate_config."""
        return cls(
            enabled=bool(cfg.get("enabled", True)),
            endpoint=str(cfg.get("upload_endpoint") or const.DEFAULT_UPLOAD_ENDPOINT),
            excluded_folder_names=frozenset(cfg.get("excluded_folder_names", [])),
            excluded_file_extensions=frozenset(
                e.lower() for e in cfg.get("excluded_file_extensions", [])
            ),
            supported_file_extensions=frozenset(
                e.lower() for e in cfg.get("supported_file_extensions", [])
            ),
            request_timeout=float(cfg.get("request_timeout", const.DEFAULT_REQUEST_TIMEOUT)),
        )

    def is_feature_enabled(self) -> bool:
        return self.enabled

    def upload_endpoint(self) -> str:
        """Endpoint URL; the WORKSPACE_MIRROR_ENDPOINT variable takes precedence."""
        return os.environ.get(const.ENDPOINT_ENV_VAR, "").strip() or self.endpoint

    def is_folder_excluded(self, name: str) -> bool:
        return name in self.excluded_folder_names

    def is_extension_excluded(self, extension: str) -> bool:
        return extension.lower() in self.excluded_file_extensions

    def is_extension_supported(self, extension: str) -> bool:
        return extension.lower() in self.supported_file_extensions
