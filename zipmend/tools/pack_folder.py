# Pack a local folder into a Windows-friendly ZIP (no .DS_Store, optionally no hidden files)
from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterator

from zipmend.config import settings
from zipmend.models import ProcessingOptions
from zipmend.services.processor import create_zip_from_files
from zipmend.services.rewrite import scan_files

logger = logging.getLogger(__name__)


def iter_host_files(root: Path) -> Iterator[tuple[str, bytes]]:
    """(relative posix path, bytes) for every regular file under root, sorted."""
    base = root.name
    for p in sorted(root.rglob("*")):
        if p.is_file():
            yield f"{base}/{p.relative_to(root).as_posix()}", p.read_bytes()


def build_argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="zipmend-pack", description="Create a clean ZIP from a folder.")
    ap.add_argument("folder", type=Path)
    ap.add_argument("-o", "--output", type=Path, default=None,
                    help="output file (default: <folder>.zip next to the folder)")
    ap.add_argument("--keep-ds-store", action="store_true", help="keep .DS_Store files")
    ap.add_argument("--remove-hidden", action="store_true", help="drop files and folders starting with '.'")
    ap.add_argument("--dry-run", action="store_true", help="only list what would be flagged")
    return ap


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_argparser().parse_args(argv)
    root: Path = args.folder
    if not root.is_dir():
        print(f"Not a folder: {root}", file=sys.stderr)
        return 2

    files = list(iter_host_files(root))
    if args.dry_run:
        report = scan_files(p for p, _ in files)
        for issue in report.issues:
            print(f"[{issue.kind.value}] {issue.original_path}")
        print(f"{report.total_files} files, {report.settings_file_count} .DS_Store, "
              f"{report.hidden_file_count} hidden")
        return 0

    options = ProcessingOptions(
        remove_metadata_artifacts=True,
        remove_settings_files=not args.keep_ds_store,
        remove_hidden_files=args.remove_hidden,
        fix_encoding=False,
    )
    result = asyncio.run(create_zip_from_files(files, options, settings.compression_level))
    out: Path = args.output or root.with_name(f"{root.name}.zip")
    out.write_bytes(result.data)
    print(f"Wrote {out} ({result.kept_files} of {result.report.total_files} files)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
