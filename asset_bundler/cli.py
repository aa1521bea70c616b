"""Command-line entry point for the asset bundler."""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
import time
from pathlib import Path
from typing import Iterable, Sequence

from .bundler import bundle_file
from .config import BundleConfig
from .housekeeping import sweep_stale_bundles

logger = logging.getLogger("asset_bundler.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("bundle", *argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _add_bundle_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", type=Path, help="HTML file whose local assets should be bundled")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to write the ZIP archive (default: <input stem>.zip next to the input)",
    )
    parser.add_argument(
        "--compression-level",
        type=int,
        default=5,
        choices=range(10),
        metavar="{0-9}",
        help="Deflate compression level between 0 and 9",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_sweep_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--max-age",
        type=float,
        default=3600.0,
        help="Remove bundle directories older than this many seconds",
    )
    parser.add_argument(
        "--temp-root",
        type=Path,
        default=None,
        help="Directory to sweep instead of the system temp directory",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Package an HTML document with the local files it references into a ZIP archive.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    bundle_parser = subparsers.add_parser(
        "bundle", help="Bundle an HTML file and its local assets"
    )
    _add_bundle_arguments(bundle_parser)

    sweep_parser = subparsers.add_parser(
        "sweep", help="Delete stale bundle directories from the temp location"
    )
    _add_sweep_arguments(sweep_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _run_bundle(args: argparse.Namespace) -> int:
    config = BundleConfig(compression_level=args.compression_level)
    source = Path(args.input).expanduser()
    output = args.output or source.with_suffix(".zip")

    start = time.perf_counter()
    try:
        result = bundle_file(source, config)
    except FileNotFoundError as exc:
        logger.error("Input file not found: %s", exc.filename or source)
        return 1

    if result is None:
        print("No local assets detected; nothing to bundle.")
        return 0

    with result:
        output.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(result.archive_path, output)
        asset_count = len(result.assets)
    logger.debug("Bundling took %.2fs", time.perf_counter() - start)
    print(f"Bundle saved to: {output} ({asset_count} asset(s))")
    return 0


def _run_sweep(args: argparse.Namespace) -> int:
    removed = sweep_stale_bundles(max_age_seconds=args.max_age, temp_root=args.temp_root)
    print(f"Removed {removed} stale bundle(s).")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    if args.command == "bundle":
        return _run_bundle(args)
    return _run_sweep(args)


if __name__ == "__main__":
    sys.exit(main())
