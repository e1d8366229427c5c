"""Mini README: Tests for the Typer command line entry point."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from typer.testing import CliRunner

from main_billing_console import cli
from shopbill.storage import JsonFileKeyValueStore

runner = CliRunner()


def _invoke(data_dir: Path, *args: str):
    return runner.invoke(cli, ["--data-dir", str(data_dir), *args])


def test_export_and_import_commands(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    JsonFileKeyValueStore(data_dir / "storage.json").set("shopName", "Corner Store")

    exported = _invoke(data_dir, "export", "--output-dir", str(tmp_path / "exports"))
    assert exported.exit_code == 0, exported.output
    assert "Backup downloaded" in exported.output
    (backup_file,) = (tmp_path / "exports").glob("billing-backup-*.json")
    assert json.loads(backup_file.read_text(encoding="utf-8"))["data"]["shopName"] == "Corner Store"

    other_dir = tmp_path / "other"
    imported = _invoke(other_dir, "import-backup", str(backup_file))
    assert imported.exit_code == 0, imported.output
    assert JsonFileKeyValueStore(other_dir / "storage.json").get("shopName") == "Corner Store"


def test_import_of_invalid_file_exits_with_error(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("not json", encoding="utf-8")

    result = _invoke(tmp_path / "data", "import-backup", str(broken))

    assert result.exit_code == 1
    assert "invalid-json" in result.output


def test_snapshot_commands(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"

    assert "No snapshots" in _invoke(data_dir, "snapshot", "list").output

    saved = _invoke(data_dir, "snapshot", "save")
    assert saved.exit_code == 0, saved.output
    snapshot_id = saved.output.strip().splitlines()[-1]
    assert snapshot_id.startswith("snap-")

    listed = _invoke(data_dir, "snapshot", "list")
    assert snapshot_id in listed.output

    restored = _invoke(data_dir, "snapshot", "restore", snapshot_id)
    assert restored.exit_code == 0, restored.output

    missing = _invoke(data_dir, "snapshot", "restore", "snap-missing")
    assert missing.exit_code == 1
    assert "not-found" in missing.output

    deleted = _invoke(data_dir, "snapshot", "delete", snapshot_id)
    assert deleted.exit_code == 0
    assert "No snapshots" in _invoke(data_dir, "snapshot", "list").output


def test_ledger_commands(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"

    added = _invoke(data_dir, "ledger", "add", "expense", "25", "--note", "fuel")
    assert added.exit_code == 0, added.output
    assert _invoke(data_dir, "ledger", "add", "income", "100").exit_code == 0
    assert _invoke(data_dir, "ledger", "add", "refund", "5").exit_code == 1

    shown = _invoke(data_dir, "ledger", "show")
    assert shown.exit_code == 0, shown.output
    assert "fuel" in shown.output
    assert "Income 100.00 | Expense 25.00 | Balance 75.00" in shown.output

    assert _invoke(data_dir, "ledger", "show", "--period", "week").exit_code != 0


def test_verbose_flag_switches_root_logger_to_debug(tmp_path: Path) -> None:
    root_logger = logging.getLogger()
    previous = root_logger.level
    try:
        result = _invoke(tmp_path / "data", "--verbose", "snapshot", "list")
        assert result.exit_code == 0, result.output
        assert root_logger.level == logging.DEBUG
    finally:
        root_logger.setLevel(previous)
