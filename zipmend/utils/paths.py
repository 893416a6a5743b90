from __future__ import annotations
from zipmend.models import IssueKind

METADATA_DIR = "__MACOSX"
SETTINGS_FILE = ".DS_Store"


def _segments(path: str) -> list[str]:
    return path.split("/")


def is_metadata_artifact(path: str) -> bool:
    """True if `__MACOSX` is one of the directory components of path."""
    # last segment is the file name itself, not a directory
    return METADATA_DIR in _segments(path)[:-1]


def is_settings_file(path: str) -> bool:
    return path == SETTINGS_FILE or path.endswith("/" + SETTINGS_FILE)


def is_hidden_file(path: str) -> bool:
    # a trailing .DS_Store is reported as a settings file, never twice;
    # as a folder name it is just a dot-folder
    *dirs, name = _segments(path)
    if any(part.startswith(".") for part in dirs):
        return True
    return name.startswith(".") and name != SETTINGS_FILE


def classify(path: str) -> list[IssueKind]:
    """All tags that apply to path, in precedence order."""
    tags: list[IssueKind] = []
    if is_metadata_artifact(path):
        tags.append(IssueKind.METADATA_ARTIFACT)
    if is_settings_file(path):
        tags.append(IssueKind.SETTINGS_FILE)
    if is_hidden_file(path):
        tags.append(IssueKind.HIDDEN_FILE)
    return tags


def normalize_path(path: str) -> str:
    """Forward slashes, no leading slash."""
    return path.replace("\\", "/").lstrip("/")
