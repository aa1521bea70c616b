from __future__ import annotations

import os
import time
from pathlib import Path

from conftest import write

from asset_bundler.housekeeping import sweep_stale_bundles


def _age(path: Path, seconds: float) -> None:
    stamp = time.time() - seconds
    os.utime(path, (stamp, stamp))


def test_sweep_removes_only_stale_bundle_directories(temp_root: Path) -> None:
    stale = temp_root / "asset-bundle-old"
    write(stale / "bundle.zip", b"zip")
    _age(stale, 7200)
    fresh = temp_root / "asset-bundle-new"
    fresh.mkdir()
    unrelated = temp_root / "other-old"
    unrelated.mkdir()
    _age(unrelated, 7200)
    stray_file = write(temp_root / "asset-bundle-file", b"x")
    _age(stray_file, 7200)

    removed = sweep_stale_bundles(max_age_seconds=3600, temp_root=temp_root)

    assert removed == 1
    assert not stale.exists()
    assert fresh.exists()
    assert unrelated.exists()
    assert stray_file.exists()


def test_sweep_uses_custom_prefix_and_clock(temp_root: Path) -> None:
    target = temp_root / "custom-abc"
    target.mkdir()

    assert sweep_stale_bundles(max_age_seconds=60, temp_root=temp_root, prefix="custom-") == 0
    removed = sweep_stale_bundles(
        max_age_seconds=60,
        temp_root=temp_root,
        prefix="custom-",
        now=time.time() + 120,
    )

    assert removed == 1
    assert not target.exists()
