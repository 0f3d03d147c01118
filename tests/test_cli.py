"""Testy interfejsu CLI."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from unittest.mock import patch

from fs_metadata.cli import _build_config, _build_parser, _run_scan, main
from fs_metadata.shared import ScanConfig


def _args(tmp_path: Path, *extra: str):
    parser = _build_parser()
    return parser.parse_args(
        [
            "--output",
            str(tmp_path / "out" / "metadata.json"),
            "--access-log",
            str(tmp_path / "out" / "access_errors.log"),
            *extra,
        ]
    )


def test_parser_defaults() -> None:
    args = _build_parser().parse_args([])

    assert args.root is None
    assert args.depth is None
    assert args.skip_hidden is False
    assert args.format == "json"
    assert args.output == Path("filesystem_metadata.json")
    assert args.access_log == Path("access_errors.log")


def test_parser_custom_options() -> None:
    args = _build_parser().parse_args(
        ["--root", "/srv", "--depth", "7", "--skip-hidden", "--format", "csv", "--output", "custom.csv"]
    )

    assert args.root == Path("/srv")
    assert args.depth == "7"
    assert args.skip_hidden is True
    assert args.format == "csv"
    assert args.output == Path("custom.csv")


def test_build_config_uses_scan_defaults() -> None:
    config = _build_config(_build_parser().parse_args([]))
    defaults = ScanConfig.default()

    assert config.root == defaults.root
    assert config.max_depth == defaults.max_depth
    assert config.progress_interval == defaults.progress_interval
    assert config.shutdown_timeout == defaults.shutdown_timeout


def test_run_scan_nonexistent_root(tmp_path: Path) -> None:
    args = _args(tmp_path, "--root", str(tmp_path / "missing"))

    assert _run_scan(args) == 1
    assert not (tmp_path / "out" / "metadata.json").exists()


def test_run_scan_writes_records_and_access_log(make_tree, tmp_path: Path) -> None:
    root = make_tree({"docs/readme.md": "hello", "notes.txt": "n", "deep/a/b/c.txt": "c"})
    args = _args(tmp_path, "--root", str(root), "--depth", "2")

    assert _run_scan(args) == 0

    payload = json.loads((tmp_path / "out" / "metadata.json").read_text(encoding="utf-8"))
    names = [row["File Name"] for row in payload["records"]]
    assert names == ["root", "deep", "docs", "notes.txt"]
    assert all(row["Depth"] < 2 for row in payload["records"])

    log_text = (tmp_path / "out" / "access_errors.log").read_text(encoding="utf-8")
    assert f"Directory: {root}" in log_text
    assert "Max depth: 2" in log_text
    assert "Scan completed at: " in log_text


def test_run_scan_invalid_depth_falls_back_to_default(make_tree, tmp_path: Path) -> None:
    root = make_tree({"a/b/c/d.txt": "d"})
    args = _args(tmp_path, "--root", str(root), "--depth", "99", "--format", "csv")

    assert _run_scan(args) == 0

    with (tmp_path / "out" / "metadata.json").open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert max(int(row["Depth"]) for row in rows) == 2
    assert "Max depth: 3" in (tmp_path / "out" / "access_errors.log").read_text(encoding="utf-8")


def test_run_scan_reports_commit_failure(make_tree, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("FSMETA_ERROR_DIR", str(tmp_path / "reports"))
    root = make_tree({"file.txt": "f"})
    blocked = tmp_path / "out" / "metadata.json"
    blocked.mkdir(parents=True)
    (blocked / "occupied").write_text("x", encoding="utf-8")

    assert _run_scan(_args(tmp_path, "--root", str(root))) == 1

    reports = list((tmp_path / "reports").glob("error_*.txt"))
    assert len(reports) == 1
    assert "SinkCommitError" in reports[0].read_text(encoding="utf-8")


def test_main_configures_logging_and_runs_scan(make_tree, tmp_path: Path) -> None:
    root = make_tree({"file.txt": "f"})
    argv = [
        "--root",
        str(root),
        "--verbose",
        "--output",
        str(tmp_path / "metadata.json"),
        "--access-log",
        str(tmp_path / "access_errors.log"),
    ]

    with patch("fs_metadata.cli.configure_logging") as configure:
        assert main(argv) == 0

    configure.assert_called_once()
    assert (tmp_path / "metadata.json").exists()
