"""Shared fixtures for the dockwm test suite."""

import pytest

from dockwm.core.controller import VirtualWindowController, WindowDescriptor
from dockwm.core.persistence import WorkspacePersistence
from dockwm.core.window import WindowState
from dockwm.tiling.rect import Rect
from dockwm.tiling.tree import DockTree, Leaf, Split, SplitDirection
from dockwm.tiling.workspace import Workspace
from dockwm.tiling.workspace_manager import WorkspaceManager


@pytest.fixture
def viewport():
    return Rect(0, 0, 1000, 800)


@pytest.fixture
def sample_root():
    """horizontal(0.5, left, vertical(0.5, topRight, bottomRight))"""
    return Split(
        SplitDirection.HORIZONTAL,
        0.5,
        Leaf("left"),
        Split(SplitDirection.VERTICAL, 0.5, Leaf("topRight"), Leaf("bottomRight")),
    )


@pytest.fixture
def sample_tree(sample_root):
    return DockTree(sample_root)


@pytest.fixture
def workspace():
    """Workspace with a single placed window "root"."""
    return Workspace(
        "ws",
        "Workspace",
        DockTree.from_leaf("root"),
        [WindowState(id="root", title="Root Window")],
    )


@pytest.fixture
def manager(workspace):
    return WorkspaceManager([workspace], workspace.id)


@pytest.fixture
def controller():
    c = VirtualWindowController()
    c.register_window(WindowDescriptor("root", "Root Window"))
    return c


@pytest.fixture
def persistence(tmp_path):
    return WorkspacePersistence(tmp_path / "store", "workspaces.json")


@pytest.fixture
def recorder():
    """Event callback that records (event, payload) pairs."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, event, payload, source):
            self.calls.append((event, payload))

        @property
        def events(self):
            return [event for event, _ in self.calls]

    return Recorder()
