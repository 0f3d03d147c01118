"""Testy konfiguracji skanowania."""

from __future__ import annotations

from pathlib import Path

import pytest

from fs_metadata.shared import ConfigurationError, ScanConfig, normalize_max_depth


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, 3),
        ("5", 5),
        (" 7 ", 7),
        (1, 1),
        (20, 20),
        ("0", 3),
        ("21", 3),
        ("-4", 3),
        ("deep", 3),
        ("2.5", 3),
    ],
)
def test_normalize_max_depth(value: object, expected: int) -> None:
    assert normalize_max_depth(value) == expected


def test_default_config_scans_home_directory() -> None:
    config = ScanConfig.default()

    assert config.root == Path.home()
    assert config.max_depth == 3
    assert config.skip_hidden is False
    assert config.progress_interval == 5.0
    assert config.shutdown_timeout == 15.0


def test_validate_returns_absolute_root(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)

    assert ScanConfig(root=Path("data")).validate() == tmp_path / "data"


def test_validate_rejects_missing_root(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(ConfigurationError, match="does not exist"):
        ScanConfig(root=missing).validate()


def test_validate_rejects_regular_file(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="is not a directory"):
        ScanConfig(root=target).validate()


@pytest.mark.parametrize(
    "overrides",
    [
        {"max_depth": 0},
        {"max_depth": 21},
        {"progress_interval": 0},
        {"shutdown_timeout": -1},
    ],
)
def test_validate_rejects_invalid_limits(tmp_path: Path, overrides: dict) -> None:
    with pytest.raises(ConfigurationError):
        ScanConfig(root=tmp_path, **overrides).validate()
