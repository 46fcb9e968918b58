from __future__ import annotations

from pathlib import Path

import pytest

from md2html.core import workspace


def test_ensure_workspace_creates_directories(tmp_path, monkeypatch):
    root = tmp_path / "data"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace()

    assert layout.home == root.resolve()
    assert set(layout.directories) == {"config", "logs"}
    for name, path in layout.items():
        assert path.is_dir()
        assert layout.created[name] is True
    assert layout.created["home"] is True


def test_ensure_workspace_is_idempotent(tmp_path, monkeypatch):
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(tmp_path / "again"))

    first = workspace.ensure_workspace()
    second = workspace.ensure_workspace()

    assert first.home == second.home
    assert not any(second.created.values())


def test_explicit_path_wins_over_env(tmp_path, monkeypatch):
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(tmp_path / "env"))

    layout = workspace.ensure_workspace(path=tmp_path / "custom")

    assert layout.home == (tmp_path / "custom").resolve()


def test_env_mapping_is_honoured(tmp_path):
    env = {workspace.WORKSPACE_ENV: str(tmp_path / "mapped")}

    layout = workspace.ensure_workspace(env=env)

    assert layout.home == (tmp_path / "mapped").resolve()


def test_without_create_touches_nothing(tmp_path, monkeypatch):
    root = tmp_path / "deferred"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    mapping = workspace.describe_layout()

    assert mapping["home"] == root.resolve()
    assert mapping["logs"] == root.resolve() / "logs"
    assert not root.exists()


def test_workspace_path_is_a_file(tmp_path, monkeypatch):
    root = tmp_path / "file"
    root.write_text("not a dir", encoding="utf-8")
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace()


def test_path_for_unknown_key(tmp_path):
    layout = workspace.ensure_workspace(path=tmp_path, create=False)

    with pytest.raises(KeyError):
        layout.path_for("converted")


def test_default_falls_back_to_tempdir(tmp_path, monkeypatch):
    fallback = tmp_path / "fallback"
    monkeypatch.setattr(workspace, "_fallback_base", lambda: fallback)
    monkeypatch.delenv(workspace.WORKSPACE_ENV, raising=False)
    real_ensure_dir = workspace._ensure_dir

    def fake_ensure_dir(path: Path) -> bool:
        if path == workspace.DEFAULT_WORKSPACE.resolve():
            raise PermissionError("denied")
        return real_ensure_dir(path)

    monkeypatch.setattr(workspace, "_ensure_dir", fake_ensure_dir)

    layout = workspace.ensure_workspace()

    assert layout.home == fallback
    assert layout.created["home"] is True


def test_error_when_every_candidate_fails(tmp_path, monkeypatch):
    monkeypatch.setattr(workspace, "_fallback_base", lambda: tmp_path / "fb")
    monkeypatch.delenv(workspace.WORKSPACE_ENV, raising=False)

    def deny(_path: Path) -> bool:
        raise PermissionError("nope")

    monkeypatch.setattr(workspace, "_ensure_dir", deny)

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace()
