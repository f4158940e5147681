"""
dockwm.tiling - Docking tree engine.

This package contains:
    - rect              : Rect structure for placement geometry
    - tree              : DockTree - immutable binary tree of leaves and splits
    - docking           : dock_leaf / prune_leaf - pure insert and remove
    - magnetic          : Magnetic docking intent from window positions
    - workspace         : Workspace - one docking tree plus its windows
    - workspace_manager : WorkspaceManager - registry of workspaces
"""

from dockwm.tiling.rect import Rect
from dockwm.tiling.tree import DockPlacement, DockTree, Leaf, Split, SplitDirection
from dockwm.tiling.docking import (
    DockDirection,
    DockingRelationship,
    dock_leaf,
    prune_leaf,
)
from dockwm.tiling.magnetic import (
    MagneticIntent,
    calculate_split_ratio,
    infer_magnetic_intent,
)
from dockwm.tiling.workspace import DockRequest, MagneticDockRequest, Workspace
from dockwm.tiling.workspace_manager import WorkspaceManager, create_default_workspace

__all__ = [
    "Rect",
    "DockPlacement",
    "DockTree",
    "Leaf",
    "Split",
    "SplitDirection",
    "DockDirection",
    "DockingRelationship",
    "dock_leaf",
    "prune_leaf",
    "MagneticIntent",
    "calculate_split_ratio",
    "infer_magnetic_intent",
    "DockRequest",
    "MagneticDockRequest",
    "Workspace",
    "WorkspaceManager",
    "create_default_workspace",
]
