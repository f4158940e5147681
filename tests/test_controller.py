"""Tests for the virtual window controller."""

import pytest

from dockwm.core.controller import (
    DEFAULT_BOUNDS,
    VirtualWindowController,
    WindowController,
    WindowDescriptor,
)
from dockwm.core.errors import UnknownWindowError
from dockwm.tiling.docking import DockDirection
from dockwm.tiling.rect import Rect


class TestVirtualWindowController:

    def test_platform(self, controller):
        assert controller.platform == "virtual"
        assert "virtual" in repr(controller)

    def test_registered_window_gets_default_bounds(self, controller):
        assert controller.get_window_bounds("root") == DEFAULT_BOUNDS
        assert DEFAULT_BOUNDS == Rect(0, 0, 640, 480)

    def test_list_windows(self, controller):
        controller.register_window(WindowDescriptor("b", "Second"), Rect(1, 2, 3, 4))
        assert controller.list_windows() == [
            WindowDescriptor("root", "Root Window"),
            WindowDescriptor("b", "Second"),
        ]

    def test_focus_and_move(self, controller):
        controller.focus_window("root")
        controller.move_window("root", Rect(10, 20, 300, 200))
        assert controller.focused_window_id == "root"
        assert controller.get_window_bounds("root") == Rect(10, 20, 300, 200)

    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.focus_window("ghost"),
            lambda c: c.move_window("ghost", Rect(0, 0, 1, 1)),
            lambda c: c.dock_window("ghost", "root", DockDirection.LEFT),
            lambda c: c.dock_window("root", "ghost", DockDirection.LEFT),
        ],
    )
    def test_unknown_windows_rejected(self, controller, call):
        with pytest.raises(UnknownWindowError):
            call(controller)

    def test_unregister_clears_focus(self, controller):
        controller.focus_window("root")
        controller.unregister_window("root")
        assert controller.focused_window_id is None
        assert controller.get_window_bounds("root") is None

    def test_persist_and_state(self, controller):
        controller.persist_workspace({"id": "ws"})
        state = controller.get_state()
        assert state.persisted_workspaces == [{"id": "ws"}]
        assert [w.id for w in state.windows] == ["root"]

        controller.clear()
        state = controller.get_state()
        assert state.windows == []
        assert state.persisted_workspaces == []

    def test_state_is_a_copy(self, controller):
        state = controller.get_state()
        state.windows[0].bounds = Rect(9, 9, 9, 9)
        assert controller.get_window_bounds("root") == DEFAULT_BOUNDS


class TestWindowControllerDefaults:

    def test_base_operations_are_noops(self):
        class Headless(WindowController):
            @property
            def platform(self):
                return "headless"

        c = Headless()
        c.initialize()
        c.focus_window("x")
        c.move_window("x", Rect(0, 0, 1, 1))
        c.dock_window("x", "y", DockDirection.TAB)
        c.persist_workspace({})
        assert c.list_windows() == []

    def test_platform_is_abstract(self):
        with pytest.raises(TypeError):
            WindowController()
