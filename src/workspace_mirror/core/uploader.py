from __future__ import annotations

"""
Sequential Upload Drain.

Consumes the scan session's pending queue one file at a time, most recently
queued first, and delivers each supported file to the analysis endpoint.
Exactly one request is in flight at any moment: the next item is taken only
after the previous transport call has returned. Every per-item outcome is
non-fatal and no item is ever retried or re-queued.
"""

import logging
from typing import Any, Callable, Dict, Optional

from workspace_mirror.domain.progress import ProgressIndicator
from workspace_mirror.domain.settings import Settings
from workspace_mirror.domain.sync_models import (
    ScanSession,
    SyncState,
    UploadPayload,
    UploadResult,
    UploadStatus,
)
from workspace_mirror.domain.tree_models import FileNode
from workspace_mirror.infra.fs import get_mtime_ms
from workspace_mirror.infra.network import post_upload
from workspace_mirror.utils.i18n import i18n

logger = logging.getLogger(__name__)

Transport = Callable[[str, Dict[str, Any], Optional[float]], UploadResult]


class UploadDrain:
    """
    Drives the pending queue of a ScanSession to exhaustion.

    Attributes:
        pops: Items removed from the queue so far.
        requests_sent: Transport calls issued.
        accepted: 2xx responses.
        unsupported: 406 responses.
        failed: Any other failure, including files gone before sending.
        skipped: Items whose extension the backend does not support.
    """

    def __init__(
            self,
            session: ScanSession,
            settings: Settings,
            indicator: ProgressIndicator,
            transport: Transport = post_upload,
    ):
        self.session = session
        self.settings = settings
        self.indicator = indicator
        self.transport = transport

        self.pops = 0
        self.requests_sent = 0
        self.accepted = 0
        self.unsupported = 0
        self.failed = 0
        self.skipped = 0

    # ------------------------------------------------------------------
    # Loop control
    # ------------------------------------------------------------------

    def step(self) -> bool:
        """
        Process a single queue item.

        Returns:
            bool: False once a terminal state (DONE or CANCELLED) is reached.
        """
        if self.session.is_cancelled():
            self.session.state = SyncState.CANCELLED
            self.indicator.set_text(i18n.t("status.cancelled"))
            logger.info(f"Upload cancelled with {len(self.session.pending)} files pending.")
            return False

        pending = self.session.pending
        if not pending:
            self.session.state = SyncState.DONE
            self.indicator.set_text(i18n.t("status.done"))
            logger.info(
                f"Upload finished: {self.requests_sent} sent, {self.accepted} accepted, "
                f"{self.unsupported} unsupported, {self.failed} failed, {self.skipped} skipped."
            )
            return False

        self.session.state = SyncState.UPLOADING
        self.indicator.set_text(i18n.t("status.uploading", remaining=len(pending)))

        item = pending.pop()
        self.pops += 1

        if not self.settings.is_extension_supported(item.extension):
            self.skipped += 1
            return True

        self._deliver(item)
        return True

    def run(self) -> SyncState:
        """Step until the queue is exhausted or cancellation is requested."""
        while self.step():
            pass
        return self.session.state

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def _deliver(self, item: FileNode) -> None:
        # Timestamp is taken from disk at send time, not from the scan snapshot
        try:
            timestamp = get_mtime_ms(item.path)
        except OSError as e:
            self.failed += 1
            logger.warning(f"File disappeared before upload '{item.path}': {e}")
            return

        payload = UploadPayload(
            content=item.content,
            languageId=item.language_id,
            filePath=item.path,
            timestamp=timestamp,
            workspaceFolder=self.session.workspace_root,
        )

        self.requests_sent += 1
        try:
            result = self.transport(
                self.settings.upload_endpoint(),
                payload.to_dict(),
                self.settings.request_timeout,
            )
        except Exception as e:
            self.failed += 1
            logger.error(f"Upload transport error for '{item.relative_path}': {e}", exc_info=True)
            return

        if result.status is UploadStatus.ACCEPTED:
            self.accepted += 1
            logger.debug(f"Uploaded: {item.relative_path}")
        elif result.status is UploadStatus.UNSUPPORTED:
            self.unsupported += 1
            logger.debug(f"File type not supported by server: {item.relative_path}")
        else:
            self.failed += 1
            logger.error(f"Upload failed for '{item.relative_path}': {result.message}")
