"""Removal of bundle directories that callers never released."""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import Optional

from .config import BundleConfig

logger = logging.getLogger("asset_bundler")


def sweep_stale_bundles(
    max_age_seconds: Optional[float] = None,
    temp_root: Optional[Path] = None,
    prefix: Optional[str] = None,
    now: Optional[float] = None,
    config: Optional[BundleConfig] = None,
) -> int:
    """Delete bundle directories older than ``max_age_seconds``; return how many were removed."""
    config = config or BundleConfig()
    max_age = config.stale_after_seconds if max_age_seconds is None else max_age_seconds
    root = Path(temp_root) if temp_root is not None else config.resolve_temp_root()
    prefix = prefix or config.temp_prefix
    cutoff = (time.time() if now is None else now) - max_age

    removed = 0
    for entry in root.glob(f"{prefix}*"):
        try:
            if not entry.is_dir() or entry.stat().st_mtime > cutoff:
                continue
            shutil.rmtree(entry)
        except OSError as exc:
            logger.warning("Failed to remove stale bundle %s: %s", entry, exc)
            continue
        logger.debug("Removed stale bundle %s", entry)
        removed += 1
    if removed:
        logger.info("Removed %d stale bundle(s) from %s", removed, root)
    return removed
