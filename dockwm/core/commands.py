"""
dockwm.core.commands - Registry of named shell commands.

Maps command names typed in the shell ("dock", "layout", ...) to the
functions that implement them, so the shell loop never hardcodes the
list of commands:

    dispatcher = CommandDispatcher()
    dispatcher.register("layout", render_layout, usage="layout [width height]")
    dispatcher.execute("layout", ["1280", "800"])

It can also be used as a decorator:

    @dispatcher.command("workspaces", description="List registered workspaces")
    def workspaces(args):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from dockwm.tiling.rect import Rect

log = logging.getLogger(__name__)


# Command functions receive the argument tokens and return the text to print
CommandFn = Callable[[list[str]], str]


@dataclass(frozen=True, slots=True)
class Command:
    """Metadata for a registered command."""

    name: str
    fn: CommandFn
    description: str
    usage: str
    category: str


class CommandDispatcher:
    """
    Registry that maps command names to callables.

    Names are case-insensitive. Aliases are registered as separate names
    pointing to the same function, in the "alias" category so that help
    does not list them twice.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    @property
    def count(self) -> int:
        return len(self._commands)

    @property
    def command_names(self) -> list[str]:
        """All registered command names, in registration order."""
        return list(self._commands)

    def register(
        self,
        name: str,
        fn: CommandFn,
        description: str = "",
        usage: str = "",
        category: str = "general",
    ) -> None:
        """
        Register a command by name.

        If a command with the same name already exists, it is replaced.

        Args:
            name:        Command name as typed (e.g. "add-window").
            fn:          Callable receiving the argument tokens.
            description: Human-readable description.
            usage:       Synopsis shown by help (defaults to the name).
            category:    Grouping category (e.g. "window", "workspace").
        """
        key = name.lower()
        if key in self._commands:
            log.info("Command replaced: %s", key)

        self._commands[key] = Command(
            name=key,
            fn=fn,
            description=description,
            usage=usage or key,
            category=category,
        )
        log.debug("Command registered: %s (%s)", key, category)

    def unregister(self, name: str) -> bool:
        """Remove a command by name. Returns True if it existed."""
        return self._commands.pop(name.lower(), None) is not None

    def execute(self, name: str, args: list[str] | None = None) -> Optional[str]:
        """
        Execute a command by name.

        Exceptions raised by the command propagate to the caller.

        Returns:
            The command's output, or None if no such command exists.
        """
        cmd = self._commands.get(name.lower())
        if cmd is None:
            log.debug("Unknown command: %s", name)
            return None

        log.debug("Executing command: %s %s", cmd.name, args or [])
        return cmd.fn(list(args or []))

    def get(self, name: str) -> Command | None:
        """Look up a command by name."""
        return self._commands.get(name.lower())

    def has(self, name: str) -> bool:
        """Check if a command is registered."""
        return name.lower() in self._commands

    def command(
        self,
        name: str,
        description: str = "",
        usage: str = "",
        category: str = "general",
    ) -> Callable[[CommandFn], CommandFn]:
        """Decorator to register a function as a command."""

        def decorator(fn: CommandFn) -> CommandFn:
            self.register(name, fn, description=description, usage=usage, category=category)
            return fn

        return decorator

    def list_commands(self, category: str | None = None) -> list[Command]:
        """
        List registered commands in registration order, optionally
        filtered by category.
        """
        commands = list(self._commands.values())
        if category is not None:
            commands = [c for c in commands if c.category == category]
        return commands

    def render_help(self) -> str:
        """One line per command: usage padded, then the description."""
        commands = [c for c in self.list_commands() if c.category != "alias"]
        if not commands:
            return "No commands registered."
        width = max(len(c.usage) for c in commands)
        return "\n".join(
            f"{c.usage.ljust(width)} - {c.description}" if c.description else c.usage
            for c in commands
        )


# ============================================================================
# Argument helpers
# ============================================================================
def parse_number(raw: str, name: str) -> int | float:
    """Parse a numeric argument, keeping integers as int."""
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid {name} '{raw}': expected a number.") from None


def _require(args: list[str], count: int, usage: str) -> None:
    if len(args) < count or not all(args[:count]):
        raise ValueError(f"Usage: {usage}")


def _format_bounds(bounds: Rect) -> str:
    return f"({bounds.x}, {bounds.y}) {bounds.width}x{bounds.height}"


# ============================================================================
# Default command set
# ============================================================================
def build_default_commands(
    dispatcher: CommandDispatcher,
    manager: object,
    controller: object,
    persistence: object,
    on_exit: Callable[[], None],
) -> None:
    """
    Register all built-in shell commands into the dispatcher.

    This is the single place that maps command names to Workspace,
    WorkspaceManager, controller and persistence calls.

    Args:
        dispatcher:  The CommandDispatcher to populate.
        manager:     The WorkspaceManager instance.
        controller:  The WindowController instance.
        persistence: The WorkspacePersistence instance.
        on_exit:     Called by "exit" / "quit" to stop the shell loop.
    """
    from dockwm.config import settings
    from dockwm.core.controller import WindowController
    from dockwm.core.errors import DockWMError, UnknownWindowError
    from dockwm.core.persistence import WorkspacePersistence
    from dockwm.core.window import WindowState
    from dockwm.tiling.docking import parse_direction
    from dockwm.tiling.workspace import DockRequest, MagneticDockRequest, Workspace
    from dockwm.tiling.workspace_manager import WorkspaceManager

    assert isinstance(manager, WorkspaceManager)
    assert isinstance(controller, WindowController)
    assert isinstance(persistence, WorkspacePersistence)

    def active_workspace() -> Workspace:
        workspace = manager.active_workspace
        if workspace is None:
            raise DockWMError("No active workspace configured.")
        return workspace

    def registered_window(workspace: Workspace, window_id: str) -> WindowState:
        window = workspace.get_window(window_id)
        if window is None:
            raise UnknownWindowError(
                window_id,
                f"Window '{window_id}' is not registered in workspace {workspace.id}.",
            )
        return window

    def parse_rect(args: list[str]) -> Rect:
        x, y, width, height = (
            parse_number(raw, name)
            for raw, name in zip(args, ("x", "y", "width", "height"))
        )
        return Rect(x, y, width, height)

    # -- General -------------------------------------------------------
    @dispatcher.command("help", description="List available commands", category="general")
    def show_help(args: list[str]) -> str:
        return dispatcher.render_help()

    # -- Workspaces ----------------------------------------------------
    @dispatcher.command(
        "workspaces", description="List registered workspaces", category="workspace"
    )
    def list_workspaces(args: list[str]) -> str:
        active_id = manager.active_workspace_id
        entries = [
            f"{'*' if ws.id == active_id else ' '} {ws.id} - {ws.name}"
            for ws in manager.workspaces
        ]
        return "\n".join(entries) if entries else "No workspaces registered."

    @dispatcher.command(
        "switch",
        description="Activate a workspace by id",
        usage="switch <id>",
        category="workspace",
    )
    def switch(args: list[str]) -> str:
        _require(args, 1, "switch <workspaceId>")
        manager.set_active_workspace(args[0])
        return f"Activated workspace {args[0]}."

    @dispatcher.command(
        "add-workspace",
        description="Create an empty workspace",
        usage="add-workspace <id> [name]",
        category="workspace",
    )
    def add_workspace(args: list[str]) -> str:
        _require(args, 1, "add-workspace <workspaceId> [name]")
        ws_id, name = args[0], " ".join(args[1:]) or None
        manager.add_workspace(Workspace(ws_id, name))
        return f"Added workspace {ws_id}."

    @dispatcher.command(
        "remove-workspace",
        description="Remove a workspace by id",
        usage="remove-workspace <id>",
        category="workspace",
    )
    def remove_workspace(args: list[str]) -> str:
        _require(args, 1, "remove-workspace <workspaceId>")
        if not manager.remove_workspace(args[0]):
            return f"Workspace {args[0]} is not registered."
        return f"Removed workspace {args[0]}."

    # -- Windows -------------------------------------------------------
    @dispatcher.command(
        "windows",
        description="List windows within the (active) workspace",
        usage="windows [workspaceId]",
        category="window",
    )
    def list_windows(args: list[str]) -> str:
        workspace = manager.require_workspace(args[0]) if args else active_workspace()
        active_id = workspace.active_window_id
        entries = [
            f"{'*' if w.id == active_id else ' '} {w.id} - {w.title}"
            for w in workspace.windows
        ]
        if not entries:
            return f"Workspace {workspace.id} does not contain any windows."
        return "\n".join(entries)

    @dispatcher.command(
        "add-window",
        description="Add a window to the active workspace",
        usage="add-window <id> <title>",
        category="window",
    )
    def add_window(args: list[str]) -> str:
        _require(args, 2, "add-window <id> <title>")
        workspace = active_workspace()
        workspace.add_window(WindowState(id=args[0], title=" ".join(args[1:])))
        return f"Added window {args[0]} to workspace {workspace.id}."

    @dispatcher.command(
        "remove-window",
        description="Remove a window from the active workspace",
        usage="remove-window <id>",
        category="window",
    )
    def remove_window(args: list[str]) -> str:
        _require(args, 1, "remove-window <id>")
        workspace = active_workspace()
        if not workspace.remove_window(args[0]):
            return f"Window {args[0]} is not registered in workspace {workspace.id}."
        return f"Removed window {args[0]} from workspace {workspace.id}."

    @dispatcher.command(
        "activate",
        description="Set (or clear) the active window",
        usage="activate [id]",
        category="window",
    )
    def activate(args: list[str]) -> str:
        workspace = active_workspace()
        window_id = args[0] if args else None
        workspace.set_active_window(window_id)
        if window_id is None:
            return f"Cleared the active window of workspace {workspace.id}."
        return f"Activated window {window_id}."

    # -- Docking -------------------------------------------------------
    @dispatcher.command(
        "dock",
        description="Dock window relative to target",
        usage="dock <id> <target> <dir> [ratio]",
        category="dock",
    )
    def dock(args: list[str]) -> str:
        _require(args, 3, "dock <windowId> <targetId> <direction> [ratio]")
        window_id, target_id, direction_raw = args[:3]
        direction = parse_direction(direction_raw)
        ratio = parse_number(args[3], "ratio") if len(args) > 3 else None
        workspace = active_workspace()
        window = registered_window(workspace, window_id)
        workspace.dock(DockRequest(window, target_id, direction, ratio))
        return f"Docked {window_id} {direction.value} of {target_id}."

    @dispatcher.command(
        "dock-magnetic",
        description="Dock using magnetic snapping",
        usage="dock-magnetic <id> <x> <y> <w> <h> [surfaceW surfaceH threshold]",
        category="dock",
    )
    def dock_magnetic(args: list[str]) -> str:
        _require(
            args,
            5,
            "dock-magnetic <windowId> <x> <y> <width> <height> "
            "[surfaceWidth surfaceHeight threshold]",
        )
        window_id = args[0]
        bounds = parse_rect(args[1:5])
        surface_width = (
            parse_number(args[5], "surface width")
            if len(args) > 5 else settings.DEFAULT_SURFACE_WIDTH
        )
        surface_height = (
            parse_number(args[6], "surface height")
            if len(args) > 6 else settings.DEFAULT_SURFACE_HEIGHT
        )
        threshold = parse_number(args[7], "threshold") if len(args) > 7 else None

        workspace = active_workspace()
        # Unknown ids are docked as new windows titled after their id
        window = workspace.get_window(window_id) or WindowState(id=window_id, title=window_id)
        relationship = workspace.dock_magnetically(
            MagneticDockRequest(
                window=window,
                bounds=bounds,
                surface=Rect(0, 0, surface_width, surface_height),
                threshold=threshold,
            )
        )
        return (
            f"Magnetically docked {window_id} {relationship.direction.value} "
            f"of {relationship.target_window_id}."
        )

    @dispatcher.command(
        "relationships",
        description="List docking relationships of the active workspace",
        category="dock",
    )
    def relationships(args: list[str]) -> str:
        workspace = active_workspace()
        entries = [str(r) for r in workspace.relationships]
        return "\n".join(entries) if entries else "No docking relationships recorded."

    @dispatcher.command(
        "layout",
        description="Render the layout placements",
        usage="layout [width height]",
        category="dock",
    )
    def layout(args: list[str]) -> str:
        width = parse_number(args[0], "width") if args else settings.DEFAULT_SURFACE_WIDTH
        height = (
            parse_number(args[1], "height") if len(args) > 1 else settings.DEFAULT_SURFACE_HEIGHT
        )
        workspace = active_workspace()
        placements = workspace.compute_placements(Rect(0, 0, width, height))
        if not placements:
            return f"Workspace {workspace.id} has an empty layout."
        return "\n".join(f"{p.id}: {_format_bounds(p.bounds)}" for p in placements)

    # -- Controller ----------------------------------------------------
    @dispatcher.command(
        "controller-windows",
        description="List windows reported by the controller",
        category="controller",
    )
    def controller_windows(args: list[str]) -> str:
        windows = controller.list_windows()
        if not windows:
            return "Controller did not report any windows."
        return "\n".join(f"{w.id} - {w.title}" for w in windows)

    @dispatcher.command(
        "focus",
        description="Focus a window via the controller",
        usage="focus <id>",
        category="controller",
    )
    def focus(args: list[str]) -> str:
        _require(args, 1, "focus <windowId>")
        controller.focus_window(args[0])
        return f"Focused window {args[0]}."

    @dispatcher.command(
        "move",
        description="Move a window via the controller",
        usage="move <id> <x> <y> <w> <h>",
        category="controller",
    )
    def move(args: list[str]) -> str:
        _require(args, 5, "move <windowId> <x> <y> <width> <height>")
        bounds = parse_rect(args[1:5])
        controller.move_window(args[0], bounds)
        return f"Moved window {args[0]} to {_format_bounds(bounds)}."

    # -- Persistence / session -----------------------------------------
    @dispatcher.command(
        "persist",
        description="Persist current workspace state to disk",
        category="general",
    )
    def persist(args: list[str]) -> str:
        persistence.save(manager.serialize())
        return f"Persisted {manager.workspace_count} workspaces to {persistence.path}."

    def exit_shell(args: list[str]) -> str:
        on_exit()
        return "Exiting workspace shell."

    dispatcher.register(
        "exit", exit_shell, description="Exit the shell", usage="exit|quit", category="general"
    )
    dispatcher.register("quit", exit_shell, description="", usage="quit", category="alias")

    log.info("Registered %d shell commands", dispatcher.count)
