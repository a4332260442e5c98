from __future__ import annotations

"""
Unit tests for the Sequential Upload Drain.

Verifies the stack ordering of the queue, eligibility by supported type,
payload composition, non-fatal handling of every failure class and the
terminal states of the loop.
"""

import os
import threading
from pathlib import Path
from typing import List

import pytest

from workspace_mirror.core.scanner import build_root
from workspace_mirror.core.uploader import UploadDrain
from workspace_mirror.domain.constants import ENDPOINT_ENV_VAR
from workspace_mirror.domain.sync_models import ScanSession, SyncState
from workspace_mirror.domain.tree_models import FileNode


def _session_with_files(tmp_path: Path, settings, names: List[str]) -> ScanSession:
    root = tmp_path / "ws"
    root.mkdir()
    for name in names:
        (root / name).write_text(f"// {name}\n", encoding="utf-8")
    session = ScanSession(workspace_root=str(root))
    build_root(str(root), settings, session)
    # Deterministic queue order regardless of directory listing order
    order = {name: i for i, name in enumerate(names)}
    session.pending.sort(key=lambda f: order[f.name])
    return session


# -----------------------------------------------------------------------------
# LOOP SEMANTICS
# -----------------------------------------------------------------------------

def test_only_supported_files_are_sent(tmp_path, settings, indicator, transport) -> None:
    names = ["a.py", "b.md", "c.ts", "d.txt", "e.js"]
    session = _session_with_files(tmp_path, settings, names)
    drain = UploadDrain(session, settings, indicator, transport=transport)

    final_state = drain.run()

    assert final_state is SyncState.DONE
    assert drain.pops == 5
    assert drain.requests_sent == 3
    assert drain.skipped == 2
    assert sorted(transport.sent_names) == ["a.py", "c.ts", "e.js"]
    assert session.pending == []


def test_queue_is_drained_most_recent_first(tmp_path, settings, indicator, transport) -> None:
    session = _session_with_files(tmp_path, settings, ["one.py", "two.py", "three.py"])

    UploadDrain(session, settings, indicator, transport=transport).run()

    assert transport.sent_names == ["three.py", "two.py", "one.py"]


def test_empty_queue_reaches_done_without_requests(tmp_path, settings, indicator, transport) -> None:
    session = _session_with_files(tmp_path, settings, [])
    drain = UploadDrain(session, settings, indicator, transport=transport)

    assert drain.step() is False
    assert session.state is SyncState.DONE
    assert transport.calls == []
    assert indicator.last == "Upload done."


def test_step_reports_remaining_count(tmp_path, settings, indicator, transport) -> None:
    session = _session_with_files(tmp_path, settings, ["a.py", "b.py"])
    drain = UploadDrain(session, settings, indicator, transport=transport)

    assert drain.step() is True
    assert session.state is SyncState.UPLOADING
    assert drain.step() is True
    assert drain.step() is False

    assert indicator.texts == [
        "Uploading files: 2 files remaining",
        "Uploading files: 1 files remaining",
        "Upload done.",
    ]


# -----------------------------------------------------------------------------
# PAYLOAD
# -----------------------------------------------------------------------------

def test_payload_fields(tmp_path, settings, indicator, transport) -> None:
    session = _session_with_files(tmp_path, settings, ["main.ts"])
    item: FileNode = session.pending[0]

    # Touch the file after the scan: the send-time timestamp must win
    new_mtime = item.last_modified + 120
    os.utime(item.path, (new_mtime, new_mtime))

    UploadDrain(session, settings, indicator, transport=transport).run()

    call = transport.calls[0]
    payload = call["payload"]
    assert call["endpoint"] == "http://analysis.test/upload"
    assert call["timeout"] == 5.0
    assert payload["content"] == "// main.ts\n"
    assert payload["languageId"] == "ts"
    assert payload["filePath"] == item.path
    assert payload["timestamp"] == pytest.approx(new_mtime * 1000, abs=1.0)
    assert payload["noReturn"] is True
    assert payload["workspaceFolder"] == session.workspace_root


def test_endpoint_environment_override(tmp_path, settings, indicator, transport, monkeypatch) -> None:
    monkeypatch.setenv(ENDPOINT_ENV_VAR, "http://override.test/in")
    session = _session_with_files(tmp_path, settings, ["a.py"])

    UploadDrain(session, settings, indicator, transport=transport).run()

    assert transport.calls[0]["endpoint"] == "http://override.test/in"


# -----------------------------------------------------------------------------
# FAILURE TOLERANCE
# -----------------------------------------------------------------------------

def test_failure_does_not_stop_the_batch(tmp_path, settings, indicator, make_transport) -> None:
    transport = make_transport(fail_names={"b.py"}, unsupported_names={"c.py"})
    session = _session_with_files(tmp_path, settings, ["a.py", "b.py", "c.py", "d.py"])
    drain = UploadDrain(session, settings, indicator, transport=transport)

    assert drain.run() is SyncState.DONE
    assert transport.sent_names == ["d.py", "c.py", "b.py", "a.py"]
    assert (drain.accepted, drain.unsupported, drain.failed) == (2, 1, 1)


def test_transport_exception_is_contained(tmp_path, settings, indicator, make_transport) -> None:
    transport = make_transport(raise_names={"b.py"})
    session = _session_with_files(tmp_path, settings, ["a.py", "b.py", "c.py"])
    drain = UploadDrain(session, settings, indicator, transport=transport)

    assert drain.run() is SyncState.DONE
    assert drain.requests_sent == 3
    assert drain.failed == 1
    assert drain.accepted == 2


def test_vanished_file_is_consumed_without_request(tmp_path, settings, indicator, transport) -> None:
    session = _session_with_files(tmp_path, settings, ["gone.py", "kept.py"])
    os.remove(session.pending[0].path)

    drain = UploadDrain(session, settings, indicator, transport=transport)
    drain.run()

    assert transport.sent_names == ["kept.py"]
    assert drain.failed == 1
    assert session.state is SyncState.DONE


def test_cancellation_stops_between_requests(tmp_path, settings, indicator, transport) -> None:
    event = threading.Event()
    session = _session_with_files(tmp_path, settings, ["a.py", "b.py", "c.py"])
    session.cancellation_event = event

    def cancelling_transport(endpoint, payload, timeout=None):
        event.set()
        return transport(endpoint, payload, timeout)

    drain = UploadDrain(session, settings, indicator, transport=cancelling_transport)

    assert drain.run() is SyncState.CANCELLED
    assert transport.sent_names == ["c.py"]
    assert len(session.pending) == 2
    assert indicator.last == "Upload cancelled."
