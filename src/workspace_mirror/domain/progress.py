from __future__ import annotations

"""
Progress Indicator Contract.

The host surface (terminal status line, GUI status label) that the
synchronization core reports to. Calls are fire-and-forget; the core never
reads anything back.
"""

from abc import ABC, abstractmethod


class ProgressIndicator(ABC):
    """Busy/progress indicator shown while the workspace is mirrored."""

    @abstractmethod
    def set_text(self, text: str) -> None:
        """Replace the indicator message."""

    @abstractmethod
    def show(self) -> None:
        """Make the indicator visible."""


class NullIndicator(ProgressIndicator):
    """Indicator that discards all updates (headless/embedded use)."""

    def set_text(self, text: str) -> None:
        pass

    def show(self) -> None:
        pass
