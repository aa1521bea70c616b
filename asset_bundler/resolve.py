"""Resolution of extracted references to files on disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Set

from .models import DOCUMENT_SOURCE, Asset
from .utils import absolute_path

logger = logging.getLogger("asset_bundler")


def resolve_refs(
    refs: Iterable[str],
    base_dir: Path,
    claimed: Set[Path],
    source: str = DOCUMENT_SOURCE,
) -> List[Asset]:
    """Turn references into Assets, skipping missing files and paths already claimed.

    ``claimed`` is shared by every resolution step of one bundling call and is
    updated as soon as a path is accepted, so the first reference to a file wins.
    Comparison is case-sensitive regardless of the filesystem.
    """
    assets: List[Asset] = []
    for ref in refs:
        disk_path = absolute_path(Path(base_dir) / ref)
        try:
            is_file = disk_path.is_file()
        except OSError as exc:
            logger.debug("Skipping %s: cannot stat %s (%s)", ref, disk_path, exc)
            continue
        if not is_file:
            logger.debug("Skipping %s: %s is not an existing file", ref, disk_path)
            continue
        if disk_path in claimed:
            logger.debug("Skipping %s: %s is already bundled", ref, disk_path)
            continue
        claimed.add(disk_path)
        assets.append(Asset(original_ref=ref, disk_path=disk_path, source=source))
    return assets
