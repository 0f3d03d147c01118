"""Wspólne fikstury testów."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

import pytest

from fs_metadata.core.cancellation import CancellationToken
from support import CollectingSink, FakeProbe, ListErrorSink


@pytest.fixture()
def make_tree(tmp_path: Path) -> Callable[[Dict[str, object]], Path]:
    """Buduje drzewo z opisu: klucz kończący się "/" to katalog, inaczej plik z treścią."""

    def _build(layout: Dict[str, object]) -> Path:
        root = tmp_path / "root"
        root.mkdir()
        for relative, content in layout.items():
            target = root / relative
            if relative.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            data = content if isinstance(content, bytes) else str(content).encode("utf-8")
            target.write_bytes(data)
        return root

    return _build


@pytest.fixture()
def fake_probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture()
def token() -> CancellationToken:
    return CancellationToken()


@pytest.fixture()
def error_sink() -> ListErrorSink:
    return ListErrorSink()


@pytest.fixture()
def sink() -> CollectingSink:
    return CollectingSink()
