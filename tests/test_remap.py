from __future__ import annotations

from pathlib import Path

from asset_bundler.models import Asset
from asset_bundler.remap import assign_archive_paths, external_archive_path
from asset_bundler.utils import relative_inside, with_counter


def _asset(path: Path) -> Asset:
    return Asset(original_ref=str(path), disk_path=path.absolute())


def test_assets_under_base_keep_their_layout(site: Path) -> None:
    assets = [_asset(site / "img" / "logo.png"), _asset(site / "style.css")]
    taken = {"index.html"}

    assign_archive_paths(assets, site, taken)

    assert [asset.archive_path for asset in assets] == ["img/logo.png", "style.css"]
    assert taken == {"index.html", "img/logo.png", "style.css"}


def test_assets_outside_base_go_to_external_namespace(site: Path, tmp_path: Path) -> None:
    assets = [_asset(tmp_path / "a" / "deep" / "photo.png")]

    assign_archive_paths(assets, site, set())

    assert assets[0].archive_path == "_ext/photo.png"


def test_external_collisions_get_numbered_suffixes(site: Path, tmp_path: Path) -> None:
    assets = [
        _asset(tmp_path / "one" / "photo.png"),
        _asset(tmp_path / "two" / "photo.png"),
        _asset(tmp_path / "three" / "photo.png"),
        _asset(tmp_path / "one" / "other.png"),
    ]

    assign_archive_paths(assets, site, set())

    assert [asset.archive_path for asset in assets] == [
        "_ext/photo.png",
        "_ext/photo_1.png",
        "_ext/photo_2.png",
        "_ext/other.png",
    ]


def test_custom_external_dir(site: Path, tmp_path: Path) -> None:
    assets = [_asset(tmp_path / "x" / "font.woff2")]

    assign_archive_paths(assets, site, set(), external_dir="outside")

    assert assets[0].archive_path == "outside/font.woff2"


def test_external_archive_path_avoids_taken_names() -> None:
    taken = {"_ext/index.html", "_ext/index_1.html"}
    assert external_archive_path("index.html", taken) == "_ext/index_2.html"


def test_relative_inside_detects_escapes(site: Path, tmp_path: Path) -> None:
    assert relative_inside(site / "a" / "b.png", site) == "a/b.png"
    assert relative_inside(tmp_path / "b.png", site) is None
    assert relative_inside(site / "..dotted.png", site) == "..dotted.png"


def test_with_counter_inserts_before_extension() -> None:
    assert with_counter("photo.png", 1) == "photo_1.png"
    assert with_counter("archive.tar.gz", 2) == "archive.tar_2.gz"
    assert with_counter("README", 3) == "README_3"
