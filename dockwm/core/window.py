"""
dockwm.core.window - The WindowState data structure.

A WindowState is the workspace's record of one window: a unique id, a
title, and an opaque metadata bag. It is not a live handle to an OS
window; the core never interprets the metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class WindowState:
    """
    Registry entry for a window inside a Workspace.

    Attributes:
        id:       Unique identifier of the window within one workspace.
        title:    Human-readable title.
        metadata: Optional key/value bag carried through serialization
                  untouched. ``None`` means "no metadata" and is omitted
                  from the JSON form.
    """

    id: str
    title: str
    metadata: dict[str, Any] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "title": self.title}
        if self.metadata is not None:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WindowState:
        metadata = data.get("metadata")
        return cls(
            id=data["id"],
            title=data["title"],
            metadata=dict(metadata) if metadata is not None else None,
        )

    def __str__(self) -> str:
        return f"[{self.id}] {self.title!r}"
