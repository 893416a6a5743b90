"""
Async entry points used by the bot and the tools.

Each call decodes the input once, runs one full pass off the event loop and
returns either a complete result or raises a ZipMendError. Nothing is cached
between calls.
"""
from __future__ import annotations
import asyncio
from typing import Iterable, Optional, Sequence

from zipmend.models import DiagnosticReport, ProcessingOptions, ProcessResult
from zipmend.services.diagnostics import diagnose
from zipmend.services.rewrite import build_from_files, rewrite
from zipmend.services.telemetry import operation, report_fields
from zipmend.utils.zip_utils import DEFAULT_COMPRESSION_LEVEL, check_size, open_archive
from zipmend.utils.zipfix import DEFAULT_CANDIDATES


def analyze_zip_sync(data: bytes, candidates: Sequence[str] = DEFAULT_CANDIDATES) -> DiagnosticReport:
    with open_archive(data) as entries:
        return diagnose(entries, candidates)


def process_zip_sync(data: bytes, options: Optional[ProcessingOptions] = None,
                     candidates: Sequence[str] = DEFAULT_CANDIDATES,
                     compression_level: int = DEFAULT_COMPRESSION_LEVEL) -> ProcessResult:
    with open_archive(data) as entries:
        return rewrite(entries, options, candidates, compression_level)


async def analyze_zip(data: bytes, candidates: Sequence[str] = DEFAULT_CANDIDATES,
                      max_size: Optional[int] = None) -> DiagnosticReport:
    """Preview: diagnose without changing anything."""
    with operation("analyze", size=len(data)) as op:
        if max_size is not None:
            check_size(data, max_size)
        report = await asyncio.to_thread(analyze_zip_sync, data, tuple(candidates))
        op.update(report_fields(report))
    return report


async def process_zip(data: bytes, options: Optional[ProcessingOptions] = None,
                      candidates: Sequence[str] = DEFAULT_CANDIDATES,
                      compression_level: int = DEFAULT_COMPRESSION_LEVEL,
                      max_size: Optional[int] = None) -> ProcessResult:
    """Commit: rewrite the archive with `options` applied."""
    with operation("process", size=len(data)) as op:
        if max_size is not None:
            check_size(data, max_size)
        result = await asyncio.to_thread(
            process_zip_sync, data, options, tuple(candidates), compression_level
        )
        op.update(report_fields(result.report), kept_files=result.kept_files, out_size=len(result.data))
    return result


async def create_zip_from_files(files: Iterable[tuple[str, bytes]],
                                options: Optional[ProcessingOptions] = None,
                                compression_level: int = DEFAULT_COMPRESSION_LEVEL) -> ProcessResult:
    """Pack host files into a clean archive."""
    files = list(files)
    with operation("pack") as op:
        result = await asyncio.to_thread(build_from_files, files, options, compression_level)
        op.update(report_fields(result.report), kept_files=result.kept_files, out_size=len(result.data))
    return result
