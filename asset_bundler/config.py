"""Configuration objects and constants for the asset bundler."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger("asset_bundler")

DEFAULT_EXTERNAL_DIR = "_ext"
DEFAULT_ARCHIVE_NAME = "bundle.zip"
DEFAULT_TEMP_PREFIX = "asset-bundle-"
TEMP_ROOT_ENV = "ASSET_BUNDLER_TMPDIR"


@dataclass
class BundleConfig:
    """Settings that control where and how bundles are written."""

    external_dir: str = DEFAULT_EXTERNAL_DIR
    archive_name: str = DEFAULT_ARCHIVE_NAME
    temp_prefix: str = DEFAULT_TEMP_PREFIX
    compression_level: int = 5
    temp_root: Optional[Path] = None
    stale_after_seconds: float = 3600.0

    def resolve_temp_root(self) -> Path:
        """Return the directory in which bundle temp directories are created."""
        if self.temp_root is not None:
            return Path(self.temp_root)
        override = os.getenv(TEMP_ROOT_ENV)
        if override:
            override_path = Path(override).expanduser()
            if override_path.is_dir():
                logger.debug("%s override detected at %s", TEMP_ROOT_ENV, override_path)
                return override_path
            logger.warning(
                "%s is set to %s but the directory does not exist; falling back to %s",
                TEMP_ROOT_ENV,
                override_path,
                tempfile.gettempdir(),
            )
        return Path(tempfile.gettempdir())
