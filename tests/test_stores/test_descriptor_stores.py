"""Tests for the in-memory and YAML descriptor stores."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from share_access.errors import PathResolutionError, PersistenceError
from share_access.manager import AccessRuleManager
from share_access.rules.models import (
    AccessRule,
    Inheritance,
    Rights,
    RuleType,
    SecurityDescriptor,
)
from share_access.stores.memory import InMemoryDescriptorStore
from share_access.stores.yaml_store import YamlDescriptorStore

_ALLOW = AccessRule("AllStudents", Rights.MODIFY, RuleType.ALLOW, Inheritance.OBJECT_ONLY)


# ---------------------------------------------------------------------------
# InMemoryDescriptorStore
# ---------------------------------------------------------------------------


class TestInMemoryDescriptorStore:
    def test_unknown_path_read_raises(self) -> None:
        store = InMemoryDescriptorStore()
        with pytest.raises(PathResolutionError, match="/nowhere"):
            store.read_descriptor("/nowhere")

    def test_unknown_path_write_raises(self) -> None:
        store = InMemoryDescriptorStore()
        with pytest.raises(PersistenceError):
            store.write_descriptor("/nowhere", SecurityDescriptor())

    def test_read_returns_copy(self) -> None:
        store = InMemoryDescriptorStore({"/a": True})
        descriptor = store.read_descriptor("/a")
        descriptor.set_rule(_ALLOW)
        assert len(store.read_descriptor("/a")) == 0

    def test_write_then_read(self) -> None:
        store = InMemoryDescriptorStore({"/a": True})
        store.write_descriptor("/a", SecurityDescriptor([_ALLOW]))
        assert store.read_descriptor("/a") == SecurityDescriptor([_ALLOW])
        assert store.write_count == 1

    def test_is_container(self) -> None:
        store = InMemoryDescriptorStore({"/dir": True, "/dir/f.txt": False})
        assert store.is_container("/dir") is True
        assert store.is_container("/dir/f.txt") is False

    def test_read_only_path(self) -> None:
        store = InMemoryDescriptorStore()
        store.add_target("/locked", read_only=True)
        with pytest.raises(PersistenceError, match="read-only"):
            store.write_descriptor("/locked", SecurityDescriptor())
        store.set_read_only("/locked", False)
        store.write_descriptor("/locked", SecurityDescriptor())


# ---------------------------------------------------------------------------
# YamlDescriptorStore
# ---------------------------------------------------------------------------


@pytest.fixture()
def share(tmp_path: Path) -> Path:
    root = tmp_path / "shared"
    (root / "classA").mkdir(parents=True)
    (root / "classA" / "readme.txt").write_text("hello", encoding="utf-8")
    return root


@pytest.fixture()
def yaml_store(tmp_path: Path) -> YamlDescriptorStore:
    return YamlDescriptorStore(tmp_path / "state" / "share_acl.yaml")


class TestYamlDescriptorStore:
    def test_missing_store_reads_empty(
        self, yaml_store: YamlDescriptorStore, share: Path
    ) -> None:
        assert len(yaml_store.read_descriptor(str(share / "classA"))) == 0
        assert not yaml_store.store_path.exists()

    def test_missing_path_raises(self, yaml_store: YamlDescriptorStore, tmp_path: Path) -> None:
        missing = str(tmp_path / "ghost")
        with pytest.raises(PathResolutionError) as excinfo:
            yaml_store.read_descriptor(missing)
        assert excinfo.value.path == missing

    def test_write_to_missing_path_raises(
        self, yaml_store: YamlDescriptorStore, tmp_path: Path
    ) -> None:
        with pytest.raises(PersistenceError):
            yaml_store.write_descriptor(str(tmp_path / "ghost"), SecurityDescriptor([_ALLOW]))

    def test_is_container_uses_filesystem(
        self, yaml_store: YamlDescriptorStore, share: Path
    ) -> None:
        assert yaml_store.is_container(str(share / "classA")) is True
        assert yaml_store.is_container(str(share / "classA" / "readme.txt")) is False

    def test_persists_across_instances(
        self, yaml_store: YamlDescriptorStore, share: Path
    ) -> None:
        folder = str(share / "classA")
        yaml_store.write_descriptor(folder, SecurityDescriptor([_ALLOW]))
        reopened = YamlDescriptorStore(yaml_store.store_path)
        assert reopened.read_descriptor(folder) == SecurityDescriptor([_ALLOW])

    def test_document_layout(self, yaml_store: YamlDescriptorStore, share: Path) -> None:
        folder = share / "classA"
        yaml_store.write_descriptor(str(folder), SecurityDescriptor([_ALLOW]))
        document = yaml.safe_load(yaml_store.store_path.read_text(encoding="utf-8"))
        assert document["version"] == "1"
        assert document["descriptors"][str(folder.resolve())]["rules"] == [_ALLOW.to_dict()]

    def test_empty_descriptor_removes_entry(
        self, yaml_store: YamlDescriptorStore, share: Path
    ) -> None:
        folder = str(share / "classA")
        yaml_store.write_descriptor(folder, SecurityDescriptor([_ALLOW]))
        yaml_store.write_descriptor(folder, SecurityDescriptor())
        assert yaml_store.stored_paths() == []

    def test_relative_and_absolute_paths_share_entry(
        self,
        yaml_store: YamlDescriptorStore,
        share: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(share)
        yaml_store.write_descriptor("classA", SecurityDescriptor([_ALLOW]))
        assert yaml_store.read_descriptor(str(share / "classA")) == SecurityDescriptor([_ALLOW])

    def test_corrupt_store_read_raises(
        self, yaml_store: YamlDescriptorStore, share: Path
    ) -> None:
        yaml_store.store_path.parent.mkdir(parents=True)
        yaml_store.store_path.write_text("descriptors: [1, 2", encoding="utf-8")
        with pytest.raises(PathResolutionError):
            yaml_store.read_descriptor(str(share / "classA"))

    def test_invalid_rule_in_store_raises(
        self, yaml_store: YamlDescriptorStore, share: Path
    ) -> None:
        folder = share / "classA"
        yaml_store.store_path.parent.mkdir(parents=True)
        yaml_store.store_path.write_text(
            yaml.safe_dump(
                {"descriptors": {str(folder.resolve()): {"rules": [{"identity": "x", "rights": "Write", "type": "Allow"}]}}}
            ),
            encoding="utf-8",
        )
        with pytest.raises(PathResolutionError):
            yaml_store.read_descriptor(str(folder))

    def test_non_mapping_rule_in_store_raises(
        self, yaml_store: YamlDescriptorStore, share: Path
    ) -> None:
        folder = share / "classA"
        yaml_store.store_path.parent.mkdir(parents=True)
        yaml_store.store_path.write_text(
            yaml.safe_dump({"descriptors": {str(folder.resolve()): {"rules": ["oops", ["x"]]}}}),
            encoding="utf-8",
        )
        with pytest.raises(PathResolutionError) as excinfo:
            AccessRuleManager(yaml_store).deny_access([str(folder)])
        assert excinfo.value.path == str(folder)

    def test_empty_path_rejected(
        self,
        yaml_store: YamlDescriptorStore,
        share: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(share / "classA")
        with pytest.raises(PathResolutionError, match="empty path"):
            AccessRuleManager(yaml_store).deny_access([""])
        with pytest.raises(PersistenceError, match="empty path"):
            yaml_store.write_descriptor("  ", SecurityDescriptor([_ALLOW]))
        assert not yaml_store.store_path.exists()

    def test_failed_dump_leaves_no_temp_file(
        self,
        yaml_store: YamlDescriptorStore,
        share: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        folder = str(share / "classA")
        yaml_store.write_descriptor(folder, SecurityDescriptor([_ALLOW]))

        def _fail(*args: object, **kwargs: object) -> None:
            raise yaml.YAMLError("disk full")

        monkeypatch.setattr(yaml, "safe_dump", _fail)
        with pytest.raises(PersistenceError, match="disk full"):
            yaml_store.write_descriptor(folder, SecurityDescriptor())
        monkeypatch.undo()
        leftovers = [p.name for p in yaml_store.store_path.parent.iterdir()]
        assert leftovers == [yaml_store.store_path.name]
        assert yaml_store.read_descriptor(folder) == SecurityDescriptor([_ALLOW])

    def test_unwritable_store_raises_persistence_error(
        self, tmp_path: Path, share: Path
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = YamlDescriptorStore(blocker / "share_acl.yaml")
        with pytest.raises(PersistenceError) as excinfo:
            store.write_descriptor(str(share / "classA"), SecurityDescriptor([_ALLOW]))
        assert excinfo.value.path == str(share / "classA")

    def test_manager_end_to_end(self, yaml_store: YamlDescriptorStore, share: Path) -> None:
        folder = str(share / "classA")
        readme = str(share / "classA" / "readme.txt")
        manager = AccessRuleManager(yaml_store)
        manager.grant_access([folder, readme], access="Modify", inherit_scope="ThisFolder")

        reopened = YamlDescriptorStore(yaml_store.store_path)
        assert reopened.read_descriptor(folder).rules == (_ALLOW,)
        assert reopened.read_descriptor(readme).rules == (
            AccessRule("AllStudents", Rights.MODIFY, RuleType.ALLOW, Inheritance.NONE),
        )
