"""Data models used throughout the bundling pipeline."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

logger = logging.getLogger("asset_bundler")

DOCUMENT_SOURCE = "document"


@dataclass
class Asset:
    """Local file confirmed on disk and scheduled for the archive."""

    original_ref: str
    disk_path: Path
    archive_path: str = ""
    source: str = DOCUMENT_SOURCE

    @property
    def is_stylesheet(self) -> bool:
        return self.disk_path.suffix.lower() == ".css"


@dataclass
class BundleResult:
    """Archive produced for a document, owned by the caller until released."""

    archive_path: Path
    main_filename: str
    temp_dir: Path
    assets: List[Asset] = field(default_factory=list)
    _released: bool = field(default=False, init=False, repr=False)

    def release(self) -> None:
        """Delete the temporary directory holding the archive."""
        if self._released:
            return
        self._released = True
        shutil.rmtree(self.temp_dir, ignore_errors=True)
        logger.debug("Released bundle directory %s", self.temp_dir)

    def __enter__(self) -> "BundleResult":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
