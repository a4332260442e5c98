from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: settings, a recording indicator and a fake transport
   so that no test ever reaches a real network endpoint.
"""

import os
import sys
from typing import Any, Dict, List, Optional, Set

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from workspace_mirror.domain.constants import ENDPOINT_ENV_VAR  # noqa: E402
from workspace_mirror.domain.progress import ProgressIndicator  # noqa: E402
from workspace_mirror.domain.settings import Settings  # noqa: E402
from workspace_mirror.domain.sync_models import UploadResult, UploadStatus  # noqa: E402


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class RecordingIndicator(ProgressIndicator):
    """Indicator that keeps every message it receives."""

    def __init__(self) -> None:
        self.texts: List[str] = []
        self.shown = 0

    def set_text(self, text: str) -> None:
        self.texts.append(text)

    def show(self) -> None:
        self.shown += 1

    @property
    def last(self) -> str:
        return self.texts[-1] if self.texts else ""


class FakeTransport:
    """
    In-memory replacement for post_upload.

    Files whose name appears in ``fail_names`` get a 500, those in
    ``unsupported_names`` a 406; everything else is accepted.
    """

    def __init__(
            self,
            fail_names: Optional[Set[str]] = None,
            unsupported_names: Optional[Set[str]] = None,
            raise_names: Optional[Set[str]] = None,
    ) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.fail_names = fail_names or set()
        self.unsupported_names = unsupported_names or set()
        self.raise_names = raise_names or set()

    def __call__(self, endpoint: str, payload: Dict[str, Any], timeout: Optional[float] = None) -> UploadResult:
        self.calls.append({"endpoint": endpoint, "payload": payload, "timeout": timeout})
        name = os.path.basename(payload["filePath"])
        if name in self.raise_names:
            raise RuntimeError("transport exploded")
        if name in self.fail_names:
            return UploadResult(UploadStatus.FAILED, 500, "HTTP 500: boom")
        if name in self.unsupported_names:
            return UploadResult(UploadStatus.UNSUPPORTED, 406, "File type not supported by server")
        return UploadResult(UploadStatus.ACCEPTED, 200, "OK")

    @property
    def sent_names(self) -> List[str]:
        return [os.path.basename(c["payload"]["filePath"]) for c in self.calls]


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _no_endpoint_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's endpoint override out of the test run."""
    monkeypatch.delenv(ENDPOINT_ENV_VAR, raising=False)


@pytest.fixture
def settings() -> Settings:
    """Small, explicit policy used across scanner and uploader tests."""
    return Settings(
        enabled=True,
        endpoint="http://analysis.test/upload",
        excluded_folder_names=frozenset({"node_modules", ".git"}),
        excluded_file_extensions=frozenset({".log", ".png"}),
        supported_file_extensions=frozenset({".ts", ".py", ".js"}),
        request_timeout=5.0,
    )


@pytest.fixture
def indicator() -> RecordingIndicator:
    return RecordingIndicator()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_transport():
    """Factory for transports with scripted per-file outcomes."""
    return FakeTransport
