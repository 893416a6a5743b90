"""Value objects shared by the diagnosis and rewrite passes."""
from __future__ import annotations
import enum
from dataclasses import dataclass, field, replace, fields
from typing import Callable, Iterable, Optional

from zipmend.errors import EntryReadError


class IssueKind(str, enum.Enum):
    ENCODING = "encoding"
    METADATA_ARTIFACT = "metadata-artifact"
    SETTINGS_FILE = "settings-file"
    HIDDEN_FILE = "hidden-file"


@dataclass(frozen=True)
class ArchiveEntry:
    """
    One entry of a source archive (or one host file).
    `loader` is called lazily; the payload is never read during diagnosis.
    `raw_name` is set when `path` carries the archive's undecoded name
    bytes, one per character.
    """
    path: str
    is_dir: bool = False
    loader: Optional[Callable[[], bytes]] = field(default=None, repr=False, compare=False)
    date_time: Optional[tuple[int, int, int, int, int, int]] = None
    raw_name: bool = False

    def read(self) -> bytes:
        if self.loader is None:
            raise EntryReadError(self.path, "no payload")
        return self.loader()

    def with_path(self, path: str) -> "ArchiveEntry":
        # same payload, new name
        return replace(self, path=path, raw_name=False)

    @classmethod
    def from_bytes(cls, path: str, data: bytes) -> "ArchiveEntry":
        return cls(path=path, is_dir=False, loader=lambda: data)


@dataclass(frozen=True)
class DiagnosticIssue:
    kind: IssueKind
    original_path: str
    description: str
    fixed_path: Optional[str] = None

    def to_dict(self) -> dict:
        d = {
            "kind": self.kind.value,
            "originalPath": self.original_path,
            "description": self.description,
        }
        if self.fixed_path is not None:
            d["fixedPath"] = self.fixed_path
        return d


@dataclass(frozen=True)
class ProcessingOptions:
    remove_metadata_artifacts: bool = True
    remove_settings_files: bool = True
    remove_hidden_files: bool = False
    fix_encoding: bool = True

    @classmethod
    def names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def toggled(self, name: str) -> "ProcessingOptions":
        """Copy with one flag flipped. Unknown names raise ValueError."""
        if name not in self.names():
            raise ValueError(f"Unknown processing option: {name}")
        return replace(self, **{name: not getattr(self, name)})


def confidence_score(metadata_artifacts: int, settings_files: int, encoding_issues: int) -> int:
    """
    Heuristic prior (0-100) that an archive's problems come from a cross-platform
    encoding mismatch. Not a statistical estimate.
    """
    score = 0
    if metadata_artifacts > 0 or settings_files > 0:
        score += 40  # archive was made on the platform that leaves these behind
    if encoding_issues > 0:
        score += min(60, encoding_issues * 15)
    return max(0, min(100, score))


@dataclass(frozen=True)
class DiagnosticReport:
    total_files: int
    issues: tuple[DiagnosticIssue, ...]
    metadata_artifact_count: int
    settings_file_count: int
    encoding_issue_count: int
    hidden_file_count: int
    encoding_confidence: int

    @classmethod
    def from_issues(cls, total_files: int, issues: Iterable[DiagnosticIssue]) -> "DiagnosticReport":
        issues = tuple(issues)
        counts = {kind: 0 for kind in IssueKind}
        for issue in issues:
            counts[issue.kind] += 1
        return cls(
            total_files=total_files,
            issues=issues,
            metadata_artifact_count=counts[IssueKind.METADATA_ARTIFACT],
            settings_file_count=counts[IssueKind.SETTINGS_FILE],
            encoding_issue_count=counts[IssueKind.ENCODING],
            hidden_file_count=counts[IssueKind.HIDDEN_FILE],
            encoding_confidence=confidence_score(
                counts[IssueKind.METADATA_ARTIFACT],
                counts[IssueKind.SETTINGS_FILE],
                counts[IssueKind.ENCODING],
            ),
        )

    def issues_of(self, kind: IssueKind) -> list[DiagnosticIssue]:
        return [i for i in self.issues if i.kind == kind]

    def to_dict(self) -> dict:
        return {
            "totalFiles": self.total_files,
            "issues": [i.to_dict() for i in self.issues],
            "metadataArtifactCount": self.metadata_artifact_count,
            "settingsFileCount": self.settings_file_count,
            "encodingIssueCount": self.encoding_issue_count,
            "hiddenFileCount": self.hidden_file_count,
            "encodingConfidence": self.encoding_confidence,
        }


@dataclass(frozen=True)
class ProcessResult:
    data: bytes = field(repr=False)
    report: DiagnosticReport
    kept_files: int = 0
