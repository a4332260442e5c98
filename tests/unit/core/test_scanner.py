from __future__ import annotations

"""
Unit tests for the Workspace Scanning Service.

Verifies tree construction, the exclusion policy, queue population,
identity hashing of nodes and resilience against filesystem errors.
"""

import dataclasses
import os
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from workspace_mirror.core.scanner import add_file, build_root, count_lines
from workspace_mirror.domain.sync_models import ScanSession, SyncState
from workspace_mirror.domain.tree_models import DirectoryNode, FileNode, iter_nodes


def _scan(root: Path, settings, **session_kwargs) -> ScanSession:
    session = ScanSession(workspace_root=str(root), **session_kwargs)
    build_root(str(root), settings, session)
    return session


@pytest.fixture
def ws(tmp_path: Path) -> Path:
    """
    /ws
      src/main.ts        (10 lines)
      node_modules/lib.js
    """
    root = tmp_path / "ws"
    (root / "src").mkdir(parents=True)
    (root / "node_modules").mkdir()
    (root / "src" / "main.ts").write_text(
        "\n".join(f"const v{i} = {i};" for i in range(10)), encoding="utf-8"
    )
    (root / "node_modules" / "lib.js").write_text("module.exports = 1;", encoding="utf-8")
    return root


@pytest.fixture
def nested(tmp_path: Path) -> Path:
    """A deeper tree mixing eligible, excluded and nested entries."""
    root = tmp_path / "project"
    (root / "pkg" / "sub").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / ".git" / "objects").mkdir(parents=True)
    (root / "pkg" / "node_modules" / "dep").mkdir(parents=True)

    (root / "README.md").write_text("# readme\n", encoding="utf-8")
    (root / "app.log").write_text("noise", encoding="utf-8")
    (root / "pkg" / "core.py").write_text("x = 1\n", encoding="utf-8")
    (root / "pkg" / "logo.png").write_bytes(b"\x89PNG")
    (root / "pkg" / "sub" / "deep.ts").write_text("export {}", encoding="utf-8")
    (root / "pkg" / "node_modules" / "dep" / "index.js").write_text("", encoding="utf-8")
    (root / "docs" / "guide.txt").write_text("guide", encoding="utf-8")
    (root / ".git" / "objects" / "blob").write_text("git", encoding="utf-8")
    return root


# -----------------------------------------------------------------------------
# TREE CONSTRUCTION
# -----------------------------------------------------------------------------

def test_reference_workspace_example(ws: Path, settings) -> None:
    """src/main.ts is indexed and queued; node_modules is never entered."""
    session = _scan(ws, settings)

    assert len(session.pending) == 1
    node = session.pending[0]
    assert node.name == "main.ts"
    assert node.relative_path == os.path.join("ws", "src", "main.ts")
    assert node.lines == 10
    assert node.language_id == "ts"
    assert "node_modules" not in session.root.children


def test_root_node_fields(ws: Path, settings) -> None:
    session = _scan(ws, settings)
    root = session.root

    assert isinstance(root, DirectoryNode)
    assert root.is_directory and root.is_root
    assert root.path == str(ws)
    assert root.name == "ws"
    assert root.relative_path == "ws"
    assert session.state is SyncState.SCANNING


def test_excluded_extension_never_reaches_tree_or_queue(tmp_path: Path, settings) -> None:
    root = tmp_path / "r"
    root.mkdir()
    (root / "a.log").write_text("log", encoding="utf-8")
    (root / "b.ts").write_text("let b;", encoding="utf-8")

    session = _scan(root, settings)

    assert [f.name for f in session.pending] == ["b.ts"]
    assert set(session.root.children) == {"b.ts"}


def test_file_count_matches_eligible_entries(nested: Path, settings) -> None:
    session = _scan(nested, settings)

    queued = sorted(f.relative_path for f in session.pending)
    assert queued == sorted([
        os.path.join("project", "README.md"),
        os.path.join("project", "pkg", "core.py"),
        os.path.join("project", "pkg", "sub", "deep.ts"),
        os.path.join("project", "docs", "guide.txt"),
    ])
    assert session.count_files() == 4
    # Every eligible file appears exactly once
    assert len({f.hash for f in session.pending}) == 4


def test_excluded_folder_does_not_hide_siblings(nested: Path, settings) -> None:
    session = _scan(nested, settings)
    pkg = session.root.children["pkg"]

    assert isinstance(pkg, DirectoryNode)
    assert "node_modules" not in pkg.children
    assert {"core.py", "sub"} <= set(pkg.children)
    assert ".git" not in session.root.children


def test_relative_path_and_parent_links(nested: Path, settings) -> None:
    session = _scan(nested, settings)

    for node in iter_nodes(session.root):
        parent = session.parent_of(node)
        if node is session.root:
            assert parent is None
            assert node.relative_path == node.name
            continue
        assert parent is not None
        assert parent.children[node.name] is node
        assert node.relative_path == os.path.join(parent.relative_path, node.name)


def test_hashes_are_stable_across_runs(nested: Path, settings) -> None:
    first = _scan(nested, settings)
    second = _scan(nested, settings)

    first_hashes = {n.path: n.hash for n in first.nodes.values()}
    second_hashes = {n.path: n.hash for n in second.nodes.values()}

    assert first_hashes == second_hashes
    assert len(set(first_hashes.values())) == len(first_hashes)


def test_empty_root_yields_empty_queue(tmp_path: Path, settings) -> None:
    root = tmp_path / "empty"
    root.mkdir()

    session = _scan(root, settings)

    assert session.root.children == {}
    assert session.pending == []
    assert session.count_directories() == 1


# -----------------------------------------------------------------------------
# FILE SNAPSHOTS
# -----------------------------------------------------------------------------

def test_file_snapshot_preserves_content(tmp_path: Path, settings) -> None:
    root = tmp_path / "r"
    root.mkdir()
    raw = b"one\r\ntwo\rthree\nfour"
    (root / "mixed.py").write_bytes(raw)

    session = _scan(root, settings)
    node = session.pending[0]

    assert node.content == raw.decode("utf-8")
    assert node.lines == 4
    assert node.extension == ".py"
    assert node.last_modified == pytest.approx(os.stat(root / "mixed.py").st_mtime)


def test_undecodable_bytes_are_replaced(tmp_path: Path, settings) -> None:
    root = tmp_path / "r"
    root.mkdir()
    (root / "bin.dat").write_bytes(b"ok\xff\xfe")

    session = _scan(root, settings)

    assert session.pending[0].content.startswith("ok")
    assert "�" in session.pending[0].content


def test_file_nodes_are_immutable(ws: Path, settings) -> None:
    node = _scan(ws, settings).pending[0]
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.content = "changed"  # type: ignore[misc]


def test_add_file_returns_none_for_excluded_extension(tmp_path: Path, settings) -> None:
    (tmp_path / "trace.LOG").write_text("x", encoding="utf-8")
    parent = DirectoryNode(path=str(tmp_path), name="t", relative_path="t", hash="h")
    session = ScanSession(workspace_root=str(tmp_path))

    assert add_file(parent, str(tmp_path / "trace.LOG"), settings, session) is None
    assert parent.children == {}


def test_add_file_inserts_into_parent(tmp_path: Path, settings) -> None:
    (tmp_path / "x.js").write_text("1\n2\n", encoding="utf-8")
    parent = DirectoryNode(path=str(tmp_path), name="t", relative_path="t", hash="h")
    session = ScanSession(workspace_root=str(tmp_path))

    node = add_file(parent, str(tmp_path / "x.js"), settings, session)

    assert isinstance(node, FileNode)
    assert parent.children["x.js"] is node
    assert node.parent_hash == "h"
    assert node.relative_path == os.path.join("t", "x.js")
    assert node.lines == 3
    assert session.nodes[node.hash] is node


@pytest.mark.parametrize(
    "content, expected",
    [
        ("", 1),
        ("single", 1),
        ("a\nb", 2),
        ("a\n", 2),
        ("a\r\nb\rc\nd", 4),
        ("\r\n\r\n", 3),
    ],
)
def test_count_lines(content: str, expected: int) -> None:
    assert count_lines(content) == expected


# -----------------------------------------------------------------------------
# FAILURE TOLERANCE
# -----------------------------------------------------------------------------

def test_unlistable_directory_is_skipped(nested: Path, settings) -> None:
    real_listdir = os.listdir
    locked = str(nested / "pkg")

    def fake_listdir(path):
        if str(path) == locked:
            raise PermissionError(13, "Permission denied", path)
        return real_listdir(path)

    with patch("workspace_mirror.core.scanner.os.listdir", side_effect=fake_listdir):
        session = _scan(nested, settings)

    names = sorted(f.name for f in session.pending)
    assert names == ["README.md", "guide.txt"]
    assert session.scan_errors == 1
    assert session.root.children["pkg"].children == {}


def test_unreadable_file_is_skipped(nested: Path, settings) -> None:
    from workspace_mirror.infra import fs

    def fake_read(path: str) -> str:
        if path.endswith("core.py"):
            raise OSError("I/O error")
        return fs.read_text(path)

    with patch("workspace_mirror.core.scanner.read_text", side_effect=fake_read):
        session = _scan(nested, settings)

    names = sorted(f.name for f in session.pending)
    assert names == ["README.md", "deep.ts", "guide.txt"]
    assert session.scan_errors == 1


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks required")
def test_symlink_loop_terminates(tmp_path: Path, settings) -> None:
    root = tmp_path / "loop"
    (root / "a").mkdir(parents=True)
    (root / "a" / "f.py").write_text("pass", encoding="utf-8")
    os.symlink(str(root), str(root / "a" / "back"))

    session = _scan(root, settings)

    assert [f.name for f in session.pending] == ["f.py"]


def test_cancelled_scan_stops_early(nested: Path, settings) -> None:
    event = threading.Event()
    event.set()

    session = _scan(nested, settings, cancellation_event=event)

    assert session.pending == []
    assert session.root.children == {}
