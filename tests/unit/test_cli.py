"""Tests for the share-access command line interface."""
from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from share_access.cli.main import cli
from share_access.rules.models import AccessState, RuleType, access_state
from share_access.stores.yaml_store import YamlDescriptorStore


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def share(tmp_path: Path) -> Path:
    root = tmp_path / "shared"
    (root / "classA").mkdir(parents=True)
    (root / "classA" / "readme.txt").write_text("hello", encoding="utf-8")
    return root


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "share-access.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "default_identity": "AllStudents",
                "store": {"path": str(tmp_path / "share_acl.yaml")},
                "audit": {"log_path": str(tmp_path / "audit.jsonl")},
                "suggestions": {"groups": ["AllStudents", "Staff"], "years_back": 1},
            }
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def store(tmp_path: Path) -> YamlDescriptorStore:
    return YamlDescriptorStore(tmp_path / "share_acl.yaml")


# ---------------------------------------------------------------------------
# Mutating commands
# ---------------------------------------------------------------------------


class TestMutatingCommands:
    def test_grant_folder_and_file(
        self,
        runner: CliRunner,
        config_file: Path,
        share: Path,
        store: YamlDescriptorStore,
    ) -> None:
        folder = str(share / "classA")
        readme = str(share / "classA" / "readme.txt")
        result = runner.invoke(
            cli,
            ["grant", folder, readme, "--access", "Modify", "--inherit", "ThisFolder", "-c", str(config_file)],
        )
        assert result.exit_code == 0, result.output
        folder_rule = store.read_descriptor(folder).find("AllStudents", RuleType.ALLOW)
        file_rule = store.read_descriptor(readme).find("AllStudents", RuleType.ALLOW)
        assert folder_rule is not None and folder_rule.inheritance.value == "ObjectOnly"
        assert file_rule is not None and file_rule.inheritance.value == "None"

    def test_deny_then_rescind(
        self,
        runner: CliRunner,
        config_file: Path,
        share: Path,
        store: YamlDescriptorStore,
    ) -> None:
        folder = str(share / "classA")
        deny = runner.invoke(cli, ["deny", folder, "-i", "2025 Students", "-c", str(config_file)])
        assert deny.exit_code == 0, deny.output
        assert access_state(store.read_descriptor(folder), "2025 Students") is AccessState.DENIED

        rescind = runner.invoke(cli, ["rescind", folder, "-i", "2025 Students", "-c", str(config_file)])
        assert rescind.exit_code == 0, rescind.output
        assert "does not grant access" in rescind.output
        assert access_state(store.read_descriptor(folder), "2025 Students") is AccessState.NO_RULE

    def test_empty_path_aborts(
        self,
        runner: CliRunner,
        config_file: Path,
        store: YamlDescriptorStore,
    ) -> None:
        result = runner.invoke(cli, ["deny", "", "-c", str(config_file)])
        assert result.exit_code == 1
        assert "Aborted" in result.output
        assert "empty path" in result.output
        assert not store.store_path.exists()

    def test_revoke(
        self,
        runner: CliRunner,
        config_file: Path,
        share: Path,
        store: YamlDescriptorStore,
    ) -> None:
        folder = str(share / "classA")
        runner.invoke(cli, ["grant", folder, "-c", str(config_file)])
        result = runner.invoke(cli, ["revoke", folder, "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        assert len(store.read_descriptor(folder)) == 0

    def test_paths_from_stdin(
        self,
        runner: CliRunner,
        config_file: Path,
        share: Path,
        store: YamlDescriptorStore,
    ) -> None:
        folder = str(share / "classA")
        result = runner.invoke(cli, ["deny", "-", "-c", str(config_file)], input=f"{folder}\n\n")
        assert result.exit_code == 0, result.output
        assert access_state(store.read_descriptor(folder), "AllStudents") is AccessState.DENIED

    def test_no_paths_is_no_op(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["deny", "-c", str(config_file)])
        assert result.exit_code == 0
        assert "nothing to do" in result.output

    def test_missing_path_aborts(
        self, runner: CliRunner, config_file: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(cli, ["deny", str(tmp_path / "ghost"), "-c", str(config_file)])
        assert result.exit_code == 1
        assert "Aborted" in result.output

    def test_writes_audit_trail(
        self, runner: CliRunner, config_file: Path, share: Path, tmp_path: Path
    ) -> None:
        runner.invoke(cli, ["deny", str(share / "classA"), "-c", str(config_file)])
        result = runner.invoke(cli, ["audit", "show", "-c", str(config_file)])
        assert result.exit_code == 0
        assert (tmp_path / "audit.jsonl").exists()
        assert "Total audit records" in result.output

    def test_invalid_config_exits_nonzero(
        self, runner: CliRunner, tmp_path: Path, share: Path
    ) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("store: [", encoding="utf-8")
        result = runner.invoke(cli, ["deny", str(share / "classA"), "-c", str(bad)])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# Read-only commands
# ---------------------------------------------------------------------------


class TestReadOnlyCommands:
    def test_show_does_not_create_store(
        self,
        runner: CliRunner,
        config_file: Path,
        share: Path,
        store: YamlDescriptorStore,
    ) -> None:
        result = runner.invoke(cli, ["show", str(share / "classA"), "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        assert not store.store_path.exists()

    def test_suggest_uses_config(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["suggest", "-c", str(config_file)])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[:2] == ["AllStudents", "Staff"]
        assert len(lines) == 4
        assert lines[2].endswith(" Students")

    def test_audit_show_empty(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["audit", "show", "-c", str(config_file)])
        assert result.exit_code == 0
        assert "No audit entries" in result.output

    def test_audit_show_rejects_zero(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["audit", "show", "--last", "0", "-c", str(config_file)])
        assert result.exit_code == 2

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "share-access" in result.output
