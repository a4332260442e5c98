from __future__ import annotations

"""
Terminal Progress Indicator.

Status line for headless runs. On an interactive terminal the message is
rewritten in place; otherwise each new message is printed on its own line.
"""

import sys
from typing import Optional, TextIO

from workspace_mirror.domain.progress import ProgressIndicator


class ConsoleIndicator(ProgressIndicator):

    def __init__(self, stream: Optional[TextIO] = None, quiet: bool = False):
        self._stream = stream or sys.stderr
        self._quiet = quiet
        self._visible = False
        self._text = ""
        self._width = 0

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        if text == self._text:
            return
        self._text = text
        if self._visible:
            self._render()

    def show(self) -> None:
        if self._visible:
            return
        self._visible = True
        self._render()

    def close(self) -> None:
        """Terminate an in-place status line with a newline."""
        if self._visible and self._is_tty() and not self._quiet:
            self._stream.write("\n")
            self._stream.flush()
        self._visible = False

    def _render(self) -> None:
        if self._quiet or not self._text:
            return
        if self._is_tty():
            padding = " " * max(0, self._width - len(self._text))
            self._stream.write(f"\r{self._text}{padding}")
            self._width = len(self._text)
        else:
            self._stream.write(f"{self._text}\n")
        self._stream.flush()

    def _is_tty(self) -> bool:
        isatty = getattr(self._stream, "isatty", None)
        return bool(isatty and isatty())
