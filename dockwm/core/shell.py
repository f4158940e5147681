"""
dockwm.core.shell - Interactive line-oriented workspace shell.

Reads one command per line, runs it through a CommandDispatcher and writes
the result. A failing command is printed as ``Error: ...`` and the loop
keeps going; only ``exit``/``quit`` or end of input stop it. Unexpected
exceptions (I/O errors from ``persist``, for instance) are also logged with
their traceback.
"""

from __future__ import annotations

import logging
import shlex
import sys
from typing import TextIO

from dockwm.config import settings
from dockwm.core.commands import CommandDispatcher, build_default_commands
from dockwm.core.controller import WindowController
from dockwm.core.errors import DockWMError
from dockwm.core.persistence import WorkspacePersistence
from dockwm.tiling.workspace_manager import WorkspaceManager

log = logging.getLogger(__name__)


GREETING = 'Interactive workspace shell ready. Type "help" for available commands.'


class WorkspaceShell:
    """
    Read-eval-print loop over a WorkspaceManager.

    Args:
        manager:     Workspaces the commands operate on.
        controller:  Window controller for focus/move/list commands.
        persistence: Storage used by the ``persist`` command.
        stdin:       Input stream (default: sys.stdin).
        stdout:      Output stream (default: sys.stdout).
        prompt:      Prompt written before each line is read.
    """

    def __init__(
        self,
        manager: WorkspaceManager,
        controller: WindowController,
        persistence: WorkspacePersistence,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        prompt: str = settings.SHELL_PROMPT,
    ) -> None:
        self._manager = manager
        self._controller = controller
        self._persistence = persistence
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._prompt = prompt
        self._running = False

        self._dispatcher = CommandDispatcher()
        build_default_commands(
            self._dispatcher,
            manager,
            controller,
            persistence,
            on_exit=self.stop,
        )

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    @property
    def running(self) -> bool:
        return self._running

    def execute(self, line: str) -> str:
        """
        Run one command line and return its output.

        Raises whatever the command raises (DockWMError, ValueError);
        run() is the one that turns those into ``Error:`` lines.
        """
        tokens = shlex.split(line)
        if not tokens:
            return ""

        name, args = tokens[0], tokens[1:]
        output = self._dispatcher.execute(name, args)
        if output is None:
            return f"Unknown command \"{name}\". Type 'help' to list commands."
        return output

    def run(self) -> None:
        """Blocking loop until exit/quit or end of input."""
        self._running = True
        self._write(GREETING)
        log.info("Shell started")

        while self._running:
            self._stdout.write(self._prompt)
            self._stdout.flush()

            line = self._stdin.readline()
            if not line:
                break

            try:
                output = self.execute(line)
            except (DockWMError, ValueError) as e:
                log.debug("Command failed: %r", line.strip(), exc_info=True)
                self._write(f"Error: {e}")
                continue
            except Exception as e:
                log.exception("Command crashed: %r", line.strip())
                self._write(f"Error: {e}")
                continue

            if output:
                self._write(output)

        self._running = False
        log.info("Shell stopped")

    def stop(self) -> None:
        self._running = False

    def _write(self, message: str) -> None:
        self._stdout.write(message + "\n")
        self._stdout.flush()

    def __repr__(self) -> str:
        return f"WorkspaceShell(commands={self._dispatcher.count}, running={self._running})"
