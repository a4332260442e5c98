from __future__ import annotations

"""
GUI Entrypoint: Status Window.

A compact CustomTkinter window that plays the role of the host's status
bar while the workspace is mirrored. The synchronization runs on a worker
thread; indicator messages reach the label through a polled queue.
"""

import logging
import queue
import threading
from typing import Any

import customtkinter as ctk

from workspace_mirror.core.validator import validate_config
from workspace_mirror.domain import config as cfg
from workspace_mirror.domain import constants as const
from workspace_mirror.domain.settings import Settings
from workspace_mirror.infra.logging import LoggingConfig, configure_logging, get_default_log_path
from workspace_mirror.interface.gui import threads
from workspace_mirror.utils.i18n import apply_locale, i18n

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 100


class StatusWindow(ctk.CTk):
    """Single-label window mirroring the progress indicator text."""

    def __init__(self, indicator: threads.QueuedIndicator, cancel_event: threading.Event):
        super().__init__()
        self._indicator = indicator
        self._cancel_event = cancel_event

        self.title(i18n.t("gui.title"))
        self.geometry("460x110")
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        self.lbl_status = ctk.CTkLabel(self, text="", anchor="w")
        self.lbl_status.grid(row=0, column=0, padx=20, pady=(20, 10), sticky="ew")

        self.btn_close = ctk.CTkButton(self, text=i18n.t("gui.close"), command=self.on_close)
        self.btn_close.grid(row=1, column=0, padx=20, pady=(0, 15), sticky="e")

        self.protocol("WM_DELETE_WINDOW", self.on_close)
        self.withdraw()

    def poll_indicator(self) -> None:
        """Apply queued indicator events, then reschedule itself."""
        for kind, text in self._indicator.drain_events():
            if kind == "text":
                self.lbl_status.configure(text=text)
            elif kind == "show":
                self.deiconify()
            elif kind == "close":
                self.destroy()
                return
        self.after(POLL_INTERVAL_MS, self.poll_indicator)

    def on_close(self) -> None:
        self._cancel_event.set()
        self.destroy()


def main() -> None:
    """Launch the status window and mirror the configured workspace."""
    configure_logging(LoggingConfig(level="INFO", console=True, log_file=get_default_log_path()))
    logger.info(f"GUI Lifecycle: Initializing v{const.CURRENT_CONFIG_VERSION}")
    apply_locale(cfg.load_app_state()["app_settings"].get("locale"))

    clean_conf, warnings = validate_config(cfg.load_config())
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")
    settings = Settings.from_config(clean_conf)

    indicator = threads.QueuedIndicator(queue.Queue())
    cancel_event = threading.Event()

    ctk.set_appearance_mode("System")
    window = StatusWindow(indicator, cancel_event)

    def _on_complete(outcome: Any) -> None:
        if isinstance(outcome, Exception):
            indicator.set_text(i18n.t("cli.errors.fatal", error=str(outcome)))
            indicator.show()
            return
        logger.info(f"GUI Lifecycle: Sync finished with status '{outcome.status}'.")
        if outcome.status == "disabled":
            indicator.events.put(("close", ""))

    threads.start_sync_thread(
        settings,
        clean_conf.get("workspace_path"),
        indicator,
        _on_complete,
        cancellation_event=cancel_event,
    )

    window.after(POLL_INTERVAL_MS, window.poll_indicator)
    window.mainloop()
