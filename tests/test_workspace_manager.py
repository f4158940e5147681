"""Tests for WorkspaceManager."""

import pytest

from dockwm.core.errors import DuplicateWorkspaceError, UnknownWorkspaceError
from dockwm.core.events import ManagerEvent
from dockwm.core.window import WindowState
from dockwm.tiling.docking import DockDirection
from dockwm.tiling.workspace import DockRequest, Workspace
from dockwm.tiling.workspace_manager import (
    DEFAULT_WORKSPACE_ID,
    WorkspaceManager,
    create_default_workspace,
)


@pytest.fixture
def three():
    return [Workspace("a", "A"), Workspace("b", "B"), Workspace("c", "C")]


class TestConstruction:

    def test_empty(self):
        m = WorkspaceManager()
        assert m.workspace_count == 0
        assert m.active_workspace is None

    def test_active_defaults_to_first(self, three):
        assert WorkspaceManager(three).active_workspace_id == "a"

    def test_explicit_active(self, three):
        assert WorkspaceManager(three, "c").active_workspace.name == "C"

    def test_duplicate_ids_rejected(self):
        with pytest.raises(DuplicateWorkspaceError):
            WorkspaceManager([Workspace("a"), Workspace("a")])

    def test_unknown_active_rejected(self, three):
        with pytest.raises(UnknownWorkspaceError):
            WorkspaceManager(three, "zzz")


class TestRegistry:

    def test_add_workspace_emits(self, recorder):
        m = WorkspaceManager([Workspace("a")])
        m.on(ManagerEvent.WORKSPACE_ADDED, recorder)
        ws = Workspace("b")
        m.add_workspace(ws)
        assert recorder.calls == [(ManagerEvent.WORKSPACE_ADDED, ws)]
        assert m.workspace_ids == ["a", "b"]
        assert m.active_workspace_id == "a"

    def test_add_activates_when_none_active(self):
        m = WorkspaceManager()
        m.add_workspace(Workspace("a"))
        assert m.active_workspace_id == "a"

    def test_add_with_activate(self, three):
        m = WorkspaceManager(three[:2])
        m.add_workspace(three[2], activate=True)
        assert m.active_workspace_id == "c"

    def test_add_duplicate_rejected(self, three):
        m = WorkspaceManager(three)
        with pytest.raises(DuplicateWorkspaceError):
            m.add_workspace(Workspace("b"))
        assert m.workspace_count == 3

    def test_remove_unknown_is_noop(self, three, recorder):
        m = WorkspaceManager(three)
        m.on_all(recorder)
        assert m.remove_workspace("zzz") is False
        assert recorder.calls == []

    def test_remove_inactive_keeps_active(self, three):
        m = WorkspaceManager(three)
        assert m.remove_workspace("b") is True
        assert m.active_workspace_id == "a"

    def test_remove_last_clears_active(self):
        m = WorkspaceManager([Workspace("a")])
        m.remove_workspace("a")
        assert m.active_workspace_id is None

    def test_require_workspace(self, three):
        m = WorkspaceManager(three)
        assert m.require_workspace("b") is three[1]
        assert m.get_workspace("zzz") is None
        with pytest.raises(UnknownWorkspaceError):
            m.require_workspace("zzz")

    def test_find_window_workspace(self, three):
        three[1].add_window(WindowState("w", "W"))
        m = WorkspaceManager(three)
        assert m.find_window_workspace("w") is three[1]
        assert m.find_window_workspace("nope") is None


class TestActivation:

    def test_activate_then_remove_fires_twice(self, recorder):
        m = WorkspaceManager([Workspace("A"), Workspace("B")], "A")
        m.on(ManagerEvent.ACTIVE_WORKSPACE_CHANGED, recorder)

        m.set_active_workspace("B")
        m.remove_workspace("B")

        assert m.active_workspace_id == "A"
        assert recorder.calls == [
            (ManagerEvent.ACTIVE_WORKSPACE_CHANGED, "B"),
            (ManagerEvent.ACTIVE_WORKSPACE_CHANGED, "A"),
        ]

    def test_no_event_when_value_unchanged(self, three, recorder):
        m = WorkspaceManager(three)
        m.on(ManagerEvent.ACTIVE_WORKSPACE_CHANGED, recorder)
        m.set_active_workspace("a")
        assert recorder.calls == []

    def test_unknown_workspace_rejected(self, three):
        m = WorkspaceManager(three)
        with pytest.raises(UnknownWorkspaceError):
            m.set_active_workspace("zzz")
        assert m.active_workspace_id == "a"

    def test_clear_active(self, three):
        m = WorkspaceManager(three)
        m.set_active_workspace(None)
        assert m.active_workspace is None


class TestSnapshot:

    def test_round_trip_is_identity(self, workspace):
        workspace.dock(
            DockRequest(WindowState("b", "B"), "root", DockDirection.BOTTOM, 0.3)
        )
        m = WorkspaceManager([workspace, Workspace("other", "Other")], "other")
        snapshot = m.serialize()
        assert snapshot["activeWorkspaceId"] == "other"
        assert WorkspaceManager.deserialize(snapshot).serialize() == snapshot

    def test_absent_active_id_stays_absent(self, three):
        m = WorkspaceManager(three)
        m.set_active_workspace(None)
        snapshot = m.serialize()
        assert "activeWorkspaceId" not in snapshot
        restored = WorkspaceManager.deserialize(snapshot)
        assert restored.active_workspace_id is None
        assert restored.serialize() == snapshot


def test_default_workspace():
    ws = create_default_workspace()
    assert ws.id == DEFAULT_WORKSPACE_ID
    assert ws.name == "Default Workspace"
    assert ws.tree.leaf_ids() == ["welcome"]
    assert ws.active_window.title == "Welcome"


def test_dump_state_lists_each_workspace(three):
    text = WorkspaceManager(three, "b").dump_state()
    assert "3 workspaces" in text
    assert "Active: b" in text
    for ws in three:
        assert f"Workspace {ws.id}: {ws.name}" in text
