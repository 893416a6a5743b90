"""
JSONL events for archive operations, one line per operation on stdout.

    with operation("process", size=len(data)) as op:
        result = ...
        op.update(report_fields(result.report), kept_files=result.kept_files)

emits `zip_processed` with the fields and `duration_ms`, or `zip_failed`
(level=error) when a ZipMendError leaves the block.
"""
from __future__ import annotations
import json
import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, TextIO

from zipmend.errors import ZipMendError
from zipmend.models import DiagnosticReport

logger = logging.getLogger(__name__)

_DEF_STREAM: TextIO = sys.stdout

# operation -> success event
DONE_EVENTS = {
    "analyze": "zip_analyzed",
    "process": "zip_processed",
    "pack": "zip_packed",
}
FAILED_EVENT = "zip_failed"


def _now_ms() -> int:
    return int(time.time() * 1000)


def event(action: str, **fields: Any) -> None:
    payload: Dict[str, Any] = {"ts": _now_ms(), "action": action, **fields}
    try:
        _DEF_STREAM.write(json.dumps(payload, ensure_ascii=False) + "\n")
        _DEF_STREAM.flush()
    except (OSError, ValueError, TypeError):
        # a closed or unwritable stream must not break handlers
        print(payload)


def error(action: str, **fields: Any) -> None:
    event(action, level="error", **fields)


def report_fields(report: DiagnosticReport) -> Dict[str, Any]:
    return {
        "total_files": report.total_files,
        "metadata_artifacts": report.metadata_artifact_count,
        "settings_files": report.settings_file_count,
        "hidden_files": report.hidden_file_count,
        "encoding_issues": report.encoding_issue_count,
        "confidence": report.encoding_confidence,
    }


@contextmanager
def operation(op: str, **fields: Any) -> Iterator[Dict[str, Any]]:
    """Time one analyze/process/pack call and emit its outcome event."""
    started = _now_ms()
    extra: Dict[str, Any] = {}
    try:
        yield extra
    except ZipMendError as e:
        logger.warning(f"{op} failed: {e}")
        error(FAILED_EVENT, op=op, err=str(e), duration_ms=_now_ms() - started, **fields)
        raise
    payload = dict(fields)
    payload.update(extra)
    payload["duration_ms"] = _now_ms() - started
    event(DONE_EVENTS[op], **payload)
