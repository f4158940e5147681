"""Tests for WorkspacePersistence and snapshot validation."""

import json

import pytest

from dockwm.core.errors import InvalidSnapshotError
from dockwm.core.persistence import WorkspacePersistence, validate_collection_snapshot
from dockwm.tiling.workspace import Workspace
from dockwm.tiling.workspace_manager import WorkspaceManager, create_default_workspace


def valid_snapshot():
    return WorkspaceManager([create_default_workspace()]).serialize()


class TestLoadSave:

    def test_missing_file_loads_as_none(self, persistence):
        assert persistence.load() is None
        assert persistence.load_manager() is None

    def test_save_creates_directory_and_round_trips(self, persistence):
        snapshot = valid_snapshot()
        persistence.save(snapshot)
        assert persistence.path.exists()
        assert persistence.load() == snapshot

    def test_saved_file_is_pretty_json(self, persistence):
        persistence.save(valid_snapshot())
        text = persistence.path.read_text(encoding="utf-8")
        assert text.startswith("{\n  ")

    def test_save_leaves_no_temp_files(self, persistence):
        persistence.save(valid_snapshot())
        persistence.save(valid_snapshot())
        assert [p.name for p in persistence.path.parent.iterdir()] == ["workspaces.json"]

    def test_load_manager(self, persistence, workspace):
        persistence.save(WorkspaceManager([workspace]).serialize())
        manager = persistence.load_manager()
        assert manager.workspace_ids == ["ws"]
        assert manager.active_workspace.tree.leaf_ids() == ["root"]

    def test_default_location_follows_settings(self, monkeypatch, tmp_path):
        from dockwm.config import settings

        monkeypatch.setattr(settings, "PERSIST_DIR", tmp_path)
        assert WorkspacePersistence().path == (tmp_path / settings.PERSIST_FILE).resolve()

    def test_unreadable_json_rejected(self, persistence):
        persistence.path.parent.mkdir(parents=True)
        persistence.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidSnapshotError, match="Failed to load"):
            persistence.load()

    def test_inconsistent_ids_rejected(self, persistence):
        snapshot = valid_snapshot()
        snapshot["activeWorkspaceId"] = "missing"
        persistence.path.parent.mkdir(parents=True)
        persistence.path.write_text(json.dumps(snapshot), encoding="utf-8")
        with pytest.raises(InvalidSnapshotError):
            persistence.load_manager()

    def test_non_finite_ratio_heals(self, persistence):
        ws = Workspace("w", "W").serialize()
        ws["layout"] = {
            "kind": "split",
            "direction": "horizontal",
            "ratio": float("nan"),
            "first": {"kind": "leaf", "id": "a"},
            "second": {"kind": "leaf", "id": "b"},
        }
        persistence.save({"workspaces": [ws]})
        manager = persistence.load_manager()
        assert manager.get_workspace("w").tree.root.ratio == 0.5


def broken(mutate):
    snapshot = valid_snapshot()
    mutate(snapshot)
    return snapshot


def ws0(snapshot):
    return snapshot["workspaces"][0]


class TestValidation:

    def test_valid_snapshot_passes(self):
        validate_collection_snapshot(valid_snapshot())

    def test_null_layout_is_valid(self):
        validate_collection_snapshot(broken(lambda s: ws0(s).update(layout=None)))

    @pytest.mark.parametrize(
        "snapshot",
        [
            [],
            {"workspaces": {}},
            broken(lambda s: s.update(activeWorkspaceId=7)),
            broken(lambda s: s["workspaces"].append("nope")),
            broken(lambda s: ws0(s).pop("name")),
            broken(lambda s: ws0(s).update(windows=None)),
            broken(lambda s: ws0(s)["windows"].append({"id": "x"})),
            broken(lambda s: ws0(s)["windows"][0].update(metadata=[1])),
            broken(lambda s: ws0(s).update(activeWindowId=3)),
            broken(lambda s: ws0(s).update(relationships="none")),
            broken(lambda s: ws0(s)["relationships"].append(
                {"sourceWindowId": "a", "targetWindowId": "b", "direction": "up"}
            )),
            broken(lambda s: ws0(s).update(layout={"kind": "leaf"})),
            broken(lambda s: ws0(s).update(layout={"kind": "stack", "id": "a"})),
            broken(lambda s: ws0(s).update(layout={
                "kind": "split", "direction": "horizontal", "ratio": "half",
                "first": {"kind": "leaf", "id": "a"}, "second": {"kind": "leaf", "id": "b"},
            })),
            broken(lambda s: ws0(s).update(layout={
                "kind": "split", "direction": "horizontal", "ratio": 0.5,
                "first": {"kind": "leaf", "id": "a"},
            })),
        ],
    )
    def test_malformed_snapshot_rejected(self, snapshot):
        with pytest.raises(InvalidSnapshotError):
            validate_collection_snapshot(snapshot)
