from __future__ import annotations

import base64
from pathlib import Path

import pytest

from asset_bundler.config import TEMP_ROOT_ENV, BundleConfig

# 1x1 white PNG
TINY_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)


@pytest.fixture(autouse=True)
def _no_temp_root_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(TEMP_ROOT_ENV, raising=False)


@pytest.fixture
def site(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    root.mkdir()
    return root


@pytest.fixture
def temp_root(tmp_path: Path) -> Path:
    root = tmp_path / "tmp"
    root.mkdir()
    return root


@pytest.fixture
def config(temp_root: Path) -> BundleConfig:
    return BundleConfig(temp_root=temp_root)


def write(path: Path, data: bytes | str = TINY_PNG) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, str):
        path.write_text(data, encoding="utf-8")
    else:
        path.write_bytes(data)
    return path
