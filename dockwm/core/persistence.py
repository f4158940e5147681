"""
dockwm.core.persistence - JSON storage for the workspace collection.

The collection snapshot (WorkspaceManager.serialize()) is stored as a
single pretty-printed JSON file:
    - Atomic writes (temp file + rename).
    - Structural validation on load: a malformed file raises
      InvalidSnapshotError instead of reaching the engine.
    - A missing file is not an error: load() returns None.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from dockwm.config import settings
from dockwm.core.errors import DockWMError, InvalidSnapshotError
from dockwm.tiling.docking import DockDirection
from dockwm.tiling.tree import SplitDirection
from dockwm.tiling.workspace_manager import WorkspaceManager

log = logging.getLogger(__name__)


_DIRECTIONS = {d.value for d in DockDirection}
_SPLIT_DIRECTIONS = {d.value for d in SplitDirection}


# ============================================================================
# Validation
# ============================================================================
def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_layout(node: Any, where: str) -> None:
    """Check a serialized dock node (recursively). None means an empty tree."""
    if node is None:
        return
    if not _is_object(node):
        raise InvalidSnapshotError(f"{where} has an invalid layout.")

    kind = node.get("kind")
    if kind == "leaf":
        if not isinstance(node.get("id"), str):
            raise InvalidSnapshotError(f"{where} has a leaf without a string id.")
        return
    if kind == "split":
        if node.get("direction") not in _SPLIT_DIRECTIONS:
            raise InvalidSnapshotError(f"{where} has a split with an invalid direction.")
        if not _is_number(node.get("ratio")):
            raise InvalidSnapshotError(f"{where} has a split with a non-numeric ratio.")
        for child in ("first", "second"):
            if node.get(child) is None:
                raise InvalidSnapshotError(f"{where} has a split without its {child} child.")
            validate_layout(node[child], where)
        return
    raise InvalidSnapshotError(f"{where} has a layout node of unknown kind {kind!r}.")


def validate_workspace_snapshot(data: Any, index: int) -> None:
    where = f"Workspace entry at index {index}"
    if not _is_object(data):
        raise InvalidSnapshotError(f"{where} is not an object.")
    if not isinstance(data.get("id"), str) or not isinstance(data.get("name"), str):
        raise InvalidSnapshotError(f"{where} is missing id or name.")

    validate_layout(data.get("layout"), where)

    windows = data.get("windows")
    if not isinstance(windows, list):
        raise InvalidSnapshotError(f"{where} has an invalid windows array.")
    for window in windows:
        if (
            not _is_object(window)
            or not isinstance(window.get("id"), str)
            or not isinstance(window.get("title"), str)
        ):
            raise InvalidSnapshotError(f"{where} has a malformed window entry.")
        if window.get("metadata") is not None and not _is_object(window["metadata"]):
            raise InvalidSnapshotError(f"{where} has window metadata that is not an object.")

    active = data.get("activeWindowId")
    if active is not None and not isinstance(active, str):
        raise InvalidSnapshotError(f"{where} has an invalid activeWindowId.")

    relationships = data.get("relationships")
    if not isinstance(relationships, list):
        raise InvalidSnapshotError(f"{where} has an invalid relationships array.")
    for rel in relationships:
        if (
            not _is_object(rel)
            or not isinstance(rel.get("sourceWindowId"), str)
            or not isinstance(rel.get("targetWindowId"), str)
            or rel.get("direction") not in _DIRECTIONS
        ):
            raise InvalidSnapshotError(f"{where} has a malformed relationship entry.")


def validate_collection_snapshot(data: Any) -> None:
    """
    Check that *data* has the shape of a WorkspaceCollectionSnapshot.

    Raises:
        InvalidSnapshotError: describing the first problem found.
    """
    if not _is_object(data):
        raise InvalidSnapshotError("Snapshot is not an object.")
    active = data.get("activeWorkspaceId")
    if active is not None and not isinstance(active, str):
        raise InvalidSnapshotError("Snapshot activeWorkspaceId must be a string when provided.")
    workspaces = data.get("workspaces")
    if not isinstance(workspaces, list):
        raise InvalidSnapshotError("Snapshot workspaces must be an array.")
    for index, workspace in enumerate(workspaces):
        validate_workspace_snapshot(workspace, index)


# ============================================================================
# WorkspacePersistence
# ============================================================================
class WorkspacePersistence:
    """
    Loads and saves the workspace collection as JSON.

    Args:
        base_dir:  Directory of the file (default: settings.PERSIST_DIR).
        file_name: File name (default: settings.PERSIST_FILE).
    """

    def __init__(
        self,
        base_dir: str | Path | None = None,
        file_name: str | None = None,
    ) -> None:
        base = Path(base_dir) if base_dir is not None else settings.PERSIST_DIR
        self._path = (base / (file_name or settings.PERSIST_FILE)).resolve()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[dict[str, Any]]:
        """
        Read and validate the stored collection snapshot.

        Returns:
            The snapshot dict, or None if the file does not exist.

        Raises:
            InvalidSnapshotError: unreadable JSON or malformed structure.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.debug("[Persist] File not found: %s", self._path)
            return None
        except OSError as e:
            raise InvalidSnapshotError(f"Failed to load workspace snapshot: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidSnapshotError(f"Failed to load workspace snapshot: {e}") from e

        validate_collection_snapshot(data)
        log.info("[Persist] Loaded %d workspaces from %s", len(data["workspaces"]), self._path)
        return data

    def load_manager(self) -> Optional[WorkspaceManager]:
        """
        Load the snapshot and build a WorkspaceManager from it.

        Returns:
            The manager, or None if the file does not exist.

        Raises:
            InvalidSnapshotError: the file is malformed or its ids are
                inconsistent (unknown active window, duplicate workspace).
        """
        snapshot = self.load()
        if snapshot is None:
            return None
        try:
            return WorkspaceManager.deserialize(snapshot)
        except DockWMError as e:
            raise InvalidSnapshotError(f"Failed to load workspace snapshot: {e}") from e

    def save(self, snapshot: dict[str, Any]) -> None:
        """Write the snapshot atomically, creating the directory if needed."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(snapshot, ensure_ascii=False, indent=2)

        fd, temp_path = tempfile.mkstemp(
            prefix="dockwm_workspaces_",
            suffix=".tmp",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(temp_path, self._path)
        except BaseException:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

        log.info(
            "[Persist] Saved %d workspaces to %s",
            len(snapshot.get("workspaces", [])),
            self._path,
        )
