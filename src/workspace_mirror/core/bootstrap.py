from __future__ import annotations

"""
Synchronization Bootstrap.

Sequences a complete run: feature check, workspace resolution, full scan,
then the upload drain. Owns no algorithm of its own; it creates the scan
session, drives the indicator through its messages and condenses the
outcome into a SyncReport for the interface layers.
"""

import logging
import threading
from typing import Optional

from workspace_mirror.core.scanner import build_root
from workspace_mirror.core.uploader import Transport, UploadDrain
from workspace_mirror.domain.progress import NullIndicator, ProgressIndicator
from workspace_mirror.domain.settings import Settings
from workspace_mirror.domain.sync_models import ScanSession, SyncReport, SyncState
from workspace_mirror.infra.fs import resolve_workspace_root
from workspace_mirror.infra.network import post_upload
from workspace_mirror.utils.i18n import i18n

logger = logging.getLogger(__name__)


def run_sync(
        settings: Settings,
        workspace_path: Optional[str],
        indicator: Optional[ProgressIndicator] = None,
        *,
        transport: Transport = post_upload,
        cancellation_event: Optional[threading.Event] = None,
        scan_only: bool = False,
) -> SyncReport:
    """
    Mirror the workspace to the analysis endpoint.

    Args:
        settings: Exclusion policy, supported types and endpoint.
        workspace_path: Candidate workspace root (None/empty when unknown).
        indicator: Progress surface; a silent one is used when omitted.
        transport: Upload function (injected by tests and embedders).
        cancellation_event: Stops the scan and the drain when set.
        scan_only: Build the tree and stop before uploading.

    Returns:
        SyncReport: Terminal status and counters of the run.
    """
    indicator = indicator or NullIndicator()

    if not settings.is_feature_enabled():
        logger.info("Workspace mirroring is disabled. Nothing to do.")
        return SyncReport(status="disabled")

    indicator.set_text(i18n.t("status.scanning"))
    indicator.show()

    root_path = resolve_workspace_root(workspace_path)
    if root_path is None:
        indicator.set_text(i18n.t("status.no_workspace"))
        logger.warning(f"No usable workspace root (got {workspace_path!r}).")
        return SyncReport(status="no_workspace", workspace_root=workspace_path or "")

    session = ScanSession(workspace_root=root_path, cancellation_event=cancellation_event)

    logger.info(f"Scanning workspace: {root_path}")
    build_root(root_path, settings, session)

    files_indexed = session.count_files()
    directories_indexed = session.count_directories()

    if scan_only:
        session.state = SyncState.DONE
        return SyncReport(
            status="scanned",
            workspace_root=root_path,
            files_indexed=files_indexed,
            directories_indexed=directories_indexed,
            scan_errors=session.scan_errors,
        )

    indicator.set_text(i18n.t("status.uploading_start"))
    drain = UploadDrain(session, settings, indicator, transport=transport)
    final_state = drain.run()

    return SyncReport(
        status="cancelled" if final_state is SyncState.CANCELLED else "done",
        workspace_root=root_path,
        files_indexed=files_indexed,
        directories_indexed=directories_indexed,
        requests_sent=drain.requests_sent,
        accepted=drain.accepted,
        unsupported=drain.unsupported,
        failed=drain.failed,
        skipped=drain.skipped,
        scan_errors=session.scan_errors,
    )
