"""High-level orchestration for bundling a document with its local assets."""

from __future__ import annotations

import html as html_lib
import logging
import posixpath
import re
import shutil
import tempfile
import zipfile
from collections import deque
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from .config import BundleConfig
from .extract import extract_css_refs, extract_html_refs
from .models import Asset, BundleResult
from .remap import assign_archive_paths
from .resolve import resolve_refs
from .utils import absolute_path, relative_ref, to_posix

logger = logging.getLogger("asset_bundler")

# Characters that continue a path; a reference glued to one of them is part of a longer token.
_PATH_CHARS = r"[\w./\\-]"


def rewrite_refs(content: str, assets: Iterable[Asset], content_dir: str) -> str:
    """Point references at the archive location of their assets.

    ``content_dir`` is the archive directory of the file being rewritten.
    Longer references take precedence and every substitution happens in a
    single pass, so replaced text is never matched again.
    """
    replacements: Dict[str, str] = {}
    for asset in sorted(assets, key=lambda a: len(a.original_ref), reverse=True):
        new_ref = relative_ref(asset.archive_path, content_dir)
        if new_ref != asset.original_ref:
            replacements.setdefault(asset.original_ref, new_ref)
    if not replacements:
        return content

    alternatives = "|".join(re.escape(ref) for ref in replacements)
    pattern = re.compile(f"(?<!{_PATH_CHARS})(?:{alternatives})(?!{_PATH_CHARS})")
    return pattern.sub(lambda match: replacements[match.group(0)], content)


def _rewrite_targets(refs: Iterable[str], ref_dir: Path, bundled: Dict[Path, Asset]) -> List[Asset]:
    """Map every reference that lands on a bundled file, including duplicate spellings."""
    targets: List[Asset] = []
    for ref in refs:
        asset = bundled.get(absolute_path(ref_dir / ref))
        if asset is not None:
            targets.append(Asset(ref, asset.disk_path, asset.archive_path, asset.source))
    return targets


def _with_markup_spellings(targets: List[Asset]) -> List[Asset]:
    """Add entity-escaped spellings, since attribute values arrive decoded from the parser."""
    extra: List[Asset] = []
    for target in targets:
        escaped = html_lib.escape(target.original_ref, quote=False)
        if escaped != target.original_ref:
            extra.append(Asset(escaped, target.disk_path, target.archive_path, target.source))
    return targets + extra


def _collect_stylesheet_assets(
    assets: List[Asset],
    base_dir: Path,
    claimed: Set[Path],
    taken: Set[str],
    config: BundleConfig,
) -> Dict[str, str]:
    """Discover assets referenced from stylesheets, appending them to ``assets``.

    Stylesheets found along the way are scanned too. Returns rewritten
    stylesheet text keyed by archive path for every stylesheet that changed.
    """
    rewritten: Dict[str, str] = {}
    pending = deque(asset for asset in assets if asset.is_stylesheet)
    while pending:
        stylesheet = pending.popleft()
        try:
            css = stylesheet.disk_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping sub-assets of %s: %s", stylesheet.disk_path, exc)
            continue
        refs = extract_css_refs(css)
        if not refs:
            continue

        css_dir = stylesheet.disk_path.parent
        found = resolve_refs(refs, css_dir, claimed, source=stylesheet.archive_path)
        assign_archive_paths(found, base_dir, taken, config.external_dir)
        assets.extend(found)
        pending.extend(asset for asset in found if asset.is_stylesheet)

        bundled = {asset.disk_path: asset for asset in assets}
        targets = _rewrite_targets(refs, css_dir, bundled)
        updated = rewrite_refs(css, targets, posixpath.dirname(stylesheet.archive_path))
        if updated != css:
            rewritten[stylesheet.archive_path] = updated
    return rewritten


def _validate_main_filename(main_filename: str) -> str:
    normalized = posixpath.normpath(to_posix(main_filename)) if main_filename else ""
    if (
        not normalized
        or normalized == "."
        or posixpath.isabs(normalized)
        or normalized.split("/", 1)[0] == ".."
    ):
        raise ValueError(f"Main filename must be a relative path inside the archive: {main_filename!r}")
    return normalized


def _write_archive(
    archive_path: Path,
    main_filename: str,
    document: str,
    assets: List[Asset],
    rewritten: Dict[str, str],
    compression_level: int,
) -> None:
    with zipfile.ZipFile(
        archive_path,
        "w",
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=compression_level,
    ) as archive:
        archive.writestr(main_filename, document)
        for asset in assets:
            text = rewritten.get(asset.archive_path)
            if text is not None:
                archive.writestr(asset.archive_path, text)
            else:
                archive.write(asset.disk_path, asset.archive_path)


def bundle_assets(
    html: str,
    base_dir: str | Path,
    main_filename: str,
    config: Optional[BundleConfig] = None,
) -> Optional[BundleResult]:
    """Bundle an HTML document and the local files it references into a ZIP archive.

    Returns None when the document has no local reference that resolves to an
    existing file. Otherwise the caller owns the returned result and must call
    ``release()`` once the archive has been consumed.
    """
    config = config or BundleConfig()
    main_filename = _validate_main_filename(main_filename)

    refs = extract_html_refs(html)
    if not refs:
        logger.debug("No local references found; bundling not needed")
        return None

    base = absolute_path(Path(base_dir))
    # The document itself is written from the rewritten text, never copied from disk.
    claimed: Set[Path] = {absolute_path(base / main_filename)}
    assets = resolve_refs(refs, base, claimed)
    if not assets:
        logger.debug("None of %d local reference(s) resolved under %s", len(refs), base)
        return None

    taken: Set[str] = {main_filename}
    assign_archive_paths(assets, base, taken, config.external_dir)
    document_assets = list(assets)
    rewritten_css = _collect_stylesheet_assets(assets, base, claimed, taken, config)

    bundled = {asset.disk_path: asset for asset in document_assets}
    document = rewrite_refs(
        html,
        _with_markup_spellings(_rewrite_targets(refs, base, bundled)),
        posixpath.dirname(main_filename),
    )

    temp_dir = Path(tempfile.mkdtemp(prefix=config.temp_prefix, dir=config.resolve_temp_root()))
    archive_path = temp_dir / config.archive_name
    try:
        _write_archive(
            archive_path,
            main_filename,
            document,
            assets,
            rewritten_css,
            config.compression_level,
        )
    except BaseException:
        logger.error("Failed to build bundle for %s; removing %s", main_filename, temp_dir)
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise

    logger.info("Bundled %s with %d asset(s) into %s", main_filename, len(assets), archive_path)
    return BundleResult(
        archive_path=archive_path,
        main_filename=main_filename,
        temp_dir=temp_dir,
        assets=assets,
    )


def bundle_file(path: str | Path, config: Optional[BundleConfig] = None) -> Optional[BundleResult]:
    """Bundle an HTML file on disk, resolving references against its directory."""
    source = Path(path).expanduser()
    html = source.read_text(encoding="utf-8")
    return bundle_assets(html, source.parent, source.name, config)
