"""Repair pass: drop clutter, rename damaged entries, write a fresh archive."""
from __future__ import annotations
import logging
import posixpath
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from zipmend.models import (
    ArchiveEntry,
    DiagnosticIssue,
    DiagnosticReport,
    IssueKind,
    ProcessingOptions,
    ProcessResult,
)
from zipmend.services.diagnostics import DESCRIPTIONS, classify_entry
from zipmend.utils.paths import is_hidden_file, is_settings_file, normalize_path
from zipmend.utils.zip_utils import DEFAULT_COMPRESSION_LEVEL, make_zip
from zipmend.utils.zipfix import DEFAULT_CANDIDATES, repair_name

logger = logging.getLogger(__name__)

REMOVED = {
    IssueKind.METADATA_ARTIFACT: "Removed: macOS metadata file",
    IssueKind.SETTINGS_FILE: "Removed: .DS_Store file",
    IssueKind.HIDDEN_FILE: "Removed: hidden file",
}
KEPT = {
    IssueKind.METADATA_ARTIFACT: "Kept: macOS metadata file",
    IssueKind.SETTINGS_FILE: "Kept: .DS_Store file",
    IssueKind.HIDDEN_FILE: "Kept: hidden file",
}
RENAMED = "Filename encoding fixed"


def _removes(options: ProcessingOptions, kind: IssueKind) -> bool:
    if kind == IssueKind.METADATA_ARTIFACT:
        return options.remove_metadata_artifacts
    if kind == IssueKind.SETTINGS_FILE:
        return options.remove_settings_files
    if kind == IssueKind.HIDDEN_FILE:
        return options.remove_hidden_files
    return False


@dataclass(frozen=True)
class EntryPlan:
    entry: ArchiveEntry
    issues: tuple[DiagnosticIssue, ...]
    final_path: Optional[str]  # None == dropped

    @property
    def keep(self) -> bool:
        return self.final_path is not None


def plan_entry(entry: ArchiveEntry, options: ProcessingOptions,
               candidates: Sequence[str] = DEFAULT_CANDIDATES) -> EntryPlan:
    """
    Decide the fate of one entry. Depends on nothing but the entry itself.
    Only a removal ends the checks; kept clutter is still renamed, so a
    __MACOSX sidecar keeps matching the file it describes.
    """
    path = entry.path
    verdict = classify_entry(path, candidates, entry.raw_name)
    issues: list[DiagnosticIssue] = []

    if verdict.tag is not None:
        if _removes(options, verdict.tag):
            issues.append(DiagnosticIssue(verdict.tag, path, REMOVED[verdict.tag]))
            return EntryPlan(entry, tuple(issues), None)
        issues.append(DiagnosticIssue(verdict.tag, path, KEPT[verdict.tag]))

    fixed_path = verdict.fixed_path
    if verdict.short_circuit and options.fix_encoding:
        fixed, was_fixed = repair_name(path, candidates, entry.raw_name)
        fixed_path = fixed if was_fixed else None

    final_path = path
    if options.fix_encoding and fixed_path is not None:
        issues.append(DiagnosticIssue(IssueKind.ENCODING, path, RENAMED, fixed_path=fixed_path))
        final_path = fixed_path
    return EntryPlan(entry, tuple(issues), final_path)


def _unique_path(path: str, taken: set[str]) -> str:
    if path not in taken:
        return path
    stem, ext = posixpath.splitext(path)
    n = 1
    while f"{stem} ({n}){ext}" in taken:
        n += 1
    return f"{stem} ({n}){ext}"


def _assemble(plans: Iterable[EntryPlan], total: int, compression_level: int) -> ProcessResult:
    """Ordered reduction: report in encounter order, kept entries in the same order."""
    issues: list[DiagnosticIssue] = []
    kept: list[ArchiveEntry] = []
    taken: set[str] = set()
    for plan in plans:
        issues.extend(plan.issues)
        if not plan.keep:
            continue
        target = _unique_path(plan.final_path, taken)
        if target != plan.final_path:
            logger.warning(f"Duplicate path {plan.final_path!r} stored as {target!r}")
        taken.add(target)
        kept.append(plan.entry.with_path(target))

    data = make_zip(kept, compression_level=compression_level)
    report = DiagnosticReport.from_issues(total, issues)
    return ProcessResult(data=data, report=report, kept_files=len(kept))


def rewrite(entries: Iterable[ArchiveEntry], options: Optional[ProcessingOptions] = None,
            candidates: Sequence[str] = DEFAULT_CANDIDATES,
            compression_level: int = DEFAULT_COMPRESSION_LEVEL) -> ProcessResult:
    """
    Copy every kept entry byte-for-byte under its final name.
    The report lists each classification (removed or kept) and each rename.
    """
    options = options or ProcessingOptions()
    files = [e for e in entries if not e.is_dir]
    plans = [plan_entry(e, options, candidates) for e in files]
    result = _assemble(plans, len(files), compression_level)
    logger.info(f"Rewrote archive: kept {result.kept_files} of {len(files)} files, "
                f"{result.report.encoding_issue_count} renamed")
    return result


def _host_plan(path: str, data: bytes, options: ProcessingOptions) -> EntryPlan:
    entry = ArchiveEntry.from_bytes(path, data)
    issues: list[DiagnosticIssue] = []
    if is_settings_file(path):
        if options.remove_settings_files:
            return EntryPlan(entry, (DiagnosticIssue(IssueKind.SETTINGS_FILE, path, REMOVED[IssueKind.SETTINGS_FILE]),), None)
        issues.append(DiagnosticIssue(IssueKind.SETTINGS_FILE, path, KEPT[IssueKind.SETTINGS_FILE]))
    if is_hidden_file(path):
        if options.remove_hidden_files:
            return EntryPlan(entry, (DiagnosticIssue(IssueKind.HIDDEN_FILE, path, REMOVED[IssueKind.HIDDEN_FILE]),), None)
        issues.append(DiagnosticIssue(IssueKind.HIDDEN_FILE, path, KEPT[IssueKind.HIDDEN_FILE]))
    return EntryPlan(entry, tuple(issues), path)


def build_from_files(files: Iterable[tuple[str, bytes]], options: Optional[ProcessingOptions] = None,
                     compression_level: int = DEFAULT_COMPRESSION_LEVEL) -> ProcessResult:
    """
    Pack (relative_path, bytes) pairs from host storage into a new archive.
    Host names are already Unicode, so only .DS_Store and hidden files matter.
    """
    options = options or ProcessingOptions()
    plans = [_host_plan(normalize_path(p), data, options) for p, data in files]
    result = _assemble(plans, len(plans), compression_level)
    logger.info(f"Packed {result.kept_files} of {len(plans)} host files")
    return result


def scan_files(paths: Iterable[str]) -> DiagnosticReport:
    """Preview for a host file set: every .DS_Store and hidden file, nothing removed."""
    issues: list[DiagnosticIssue] = []
    total = 0
    for raw in paths:
        path = normalize_path(raw)
        total += 1
        if is_settings_file(path):
            issues.append(DiagnosticIssue(IssueKind.SETTINGS_FILE, path, DESCRIPTIONS[IssueKind.SETTINGS_FILE]))
        elif is_hidden_file(path):
            issues.append(DiagnosticIssue(IssueKind.HIDDEN_FILE, path, DESCRIPTIONS[IssueKind.HIDDEN_FILE]))
    return DiagnosticReport.from_issues(total, issues)
