"""Assignment of archive paths to resolved assets."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Set

from .config import DEFAULT_EXTERNAL_DIR
from .models import Asset
from .utils import relative_inside, with_counter

logger = logging.getLogger("asset_bundler")


def external_archive_path(filename: str, taken: Set[str], external_dir: str = DEFAULT_EXTERNAL_DIR) -> str:
    """Pick a free ``<external_dir>/<filename>`` name, suffixing a counter on collision."""
    candidate = f"{external_dir}/{filename}"
    counter = 0
    while candidate in taken:
        counter += 1
        candidate = f"{external_dir}/{with_counter(filename, counter)}"
    return candidate


def assign_archive_paths(
    assets: Iterable[Asset],
    base_dir: Path,
    taken: Set[str],
    external_dir: str = DEFAULT_EXTERNAL_DIR,
) -> None:
    """Fill ``archive_path`` for each asset in order, recording names in ``taken``.

    Files under ``base_dir`` keep their relative layout. Everything else is
    flattened into ``external_dir`` by base name.
    """
    for asset in assets:
        rel = relative_inside(asset.disk_path, base_dir)
        if rel is None:
            archive_path = external_archive_path(asset.disk_path.name, taken, external_dir)
            logger.debug("External asset %s mapped to %s", asset.disk_path, archive_path)
        else:
            archive_path = rel
        asset.archive_path = archive_path
        taken.add(archive_path)
