"""Read-only pass over an archive: what is wrong with it and how sure we are."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from zipmend.models import ArchiveEntry, DiagnosticIssue, DiagnosticReport, IssueKind
from zipmend.utils.paths import is_hidden_file, is_metadata_artifact, is_settings_file
from zipmend.utils.zipfix import DEFAULT_CANDIDATES, repair_name

logger = logging.getLogger(__name__)

DESCRIPTIONS = {
    IssueKind.METADATA_ARTIFACT: "macOS metadata file (__MACOSX)",
    IssueKind.SETTINGS_FILE: "macOS folder settings file (.DS_Store)",
    IssueKind.HIDDEN_FILE: "Hidden file",
    IssueKind.ENCODING: "Filename encoding problem (needs conversion to UTF-8)",
}


@dataclass(frozen=True)
class EntryVerdict:
    """Everything the passes need to know about one entry, from its path alone."""
    path: str
    tag: Optional[IssueKind]          # metadata-artifact / settings-file / hidden-file / None
    fixed_path: Optional[str] = None  # set when the name was repaired

    @property
    def short_circuit(self) -> bool:
        return self.tag in (IssueKind.METADATA_ARTIFACT, IssueKind.SETTINGS_FILE)


def classify_entry(path: str, candidates: Sequence[str] = DEFAULT_CANDIDATES, raw: bool = False) -> EntryVerdict:
    """
    Classification precedence: metadata-artifact, settings-file, hidden-file.
    The first two end the checks; hidden files still get the encoding check.
    """
    if is_metadata_artifact(path):
        return EntryVerdict(path, IssueKind.METADATA_ARTIFACT)
    if is_settings_file(path):
        return EntryVerdict(path, IssueKind.SETTINGS_FILE)
    tag = IssueKind.HIDDEN_FILE if is_hidden_file(path) else None
    fixed, was_fixed = repair_name(path, candidates, raw)
    return EntryVerdict(path, tag, fixed if was_fixed else None)


def diagnose(entries: Iterable[ArchiveEntry], candidates: Sequence[str] = DEFAULT_CANDIDATES) -> DiagnosticReport:
    """
    Build a report for every non-directory entry, in archive order.
    The entries' payloads are never read.
    """
    issues: list[DiagnosticIssue] = []
    total = 0
    for entry in entries:
        if entry.is_dir:
            continue
        total += 1
        verdict = classify_entry(entry.path, candidates, entry.raw_name)
        if verdict.tag is not None:
            issues.append(DiagnosticIssue(verdict.tag, entry.path, DESCRIPTIONS[verdict.tag]))
        if verdict.fixed_path is not None:
            issues.append(DiagnosticIssue(
                IssueKind.ENCODING, entry.path, DESCRIPTIONS[IssueKind.ENCODING],
                fixed_path=verdict.fixed_path,
            ))

    report = DiagnosticReport.from_issues(total, issues)
    logger.info(
        f"Diagnosed {total} files: {report.metadata_artifact_count} metadata, "
        f"{report.settings_file_count} settings, {report.hidden_file_count} hidden, "
        f"{report.encoding_issue_count} encoding (confidence {report.encoding_confidence})"
    )
    return report
