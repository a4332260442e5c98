from __future__ import annotations

"""
Background Worker Threads for GUI Operations.

Runs the synchronization off the Tk main loop. Indicator updates produced
on the worker thread are queued and applied by the GUI when it polls, since
Tk widgets must only be touched from the thread that owns the loop.
"""

import logging
import queue
import threading
from typing import Any, Callable, Optional, Tuple

from workspace_mirror.core.bootstrap import run_sync
from workspace_mirror.domain.progress import ProgressIndicator
from workspace_mirror.domain.settings import Settings

logger = logging.getLogger(__name__)

IndicatorEvent = Tuple[str, str]


class QueuedIndicator(ProgressIndicator):
    """Thread-safe indicator that forwards updates through a queue."""

    def __init__(self, events: Optional["queue.Queue[IndicatorEvent]"] = None):
        self.events: "queue.Queue[IndicatorEvent]" = events or queue.Queue()

    def set_text(self, text: str) -> None:
        self.events.put(("text", text))

    def show(self) -> None:
        self.events.put(("show", ""))

    def drain_events(self) -> list:
        """Return and remove every queued event without blocking."""
        out = []
        while True:
            try:
                out.append(self.events.get_nowait())
            except queue.Empty:
                return out


def run_sync_task(
        settings: Settings,
        workspace_path: Optional[str],
        indicator: ProgressIndicator,
        on_complete: Callable[[Any], None],
        cancellation_event: Optional[threading.Event] = None,
) -> None:
    """
    Execute a synchronization run and hand its outcome to ``on_complete``.

    The callback receives the SyncReport, or the exception if the run
    crashed, so the GUI can always leave its busy state.
    """
    try:
        report = run_sync(
            settings,
            workspace_path,
            indicator,
            cancellation_event=cancellation_event,
        )
    except Exception as e:
        logger.critical(f"Sync Thread: Critical failure detected: {e}", exc_info=True)
        on_complete(e)
        return
    on_complete(report)


def start_sync_thread(
        settings: Settings,
        workspace_path: Optional[str],
        indicator: ProgressIndicator,
        on_complete: Callable[[Any], None],
        cancellation_event: Optional[threading.Event] = None,
) -> threading.Thread:
    """Launch run_sync_task on a daemon thread and return it."""
    worker = threading.Thread(
        target=run_sync_task,
        args=(settings, workspace_path, indicator, on_complete, cancellation_event),
        name="workspace-mirror-sync",
        daemon=True,
    )
    worker.start()
    return worker
