import io
import json

import pytest

from zipmend.errors import ArchiveTooLargeError, MalformedArchiveError
from zipmend.models import ProcessingOptions
from zipmend.services import telemetry
from zipmend.services.processor import analyze_zip, create_zip_from_files, process_zip


@pytest.fixture
def events(monkeypatch):
    stream = io.StringIO()
    monkeypatch.setattr(telemetry, "_DEF_STREAM", stream)

    def read():
        return [json.loads(line) for line in stream.getvalue().splitlines()]
    return read


@pytest.mark.asyncio
async def test_preview_then_commit(korean_zip, korean_name, unzip, events):
    report = await analyze_zip(korean_zip)
    assert report.encoding_issue_count == 1

    result = await process_zip(korean_zip, ProcessingOptions())
    assert unzip(result.data) == {korean_name: b"hello"}
    # diagnose and rewrite build separate reports
    assert result.report is not report
    assert [e["action"] for e in events()] == ["zip_analyzed", "zip_processed"]
    analyzed, processed = events()
    assert analyzed["encoding_issues"] == 1
    assert analyzed["confidence"] == 15
    assert processed["kept_files"] == 1
    assert processed["out_size"] == len(result.data)
    assert "duration_ms" in processed


@pytest.mark.asyncio
async def test_malformed_input_is_reported(events):
    with pytest.raises(MalformedArchiveError):
        await process_zip(b"PK\x03\x04garbage")
    logged = events()
    assert logged[-1]["action"] == "zip_failed"
    assert logged[-1]["level"] == "error"


@pytest.mark.asyncio
async def test_size_limit(plain_zip):
    data = plain_zip({"a.txt": b"x" * 100})
    with pytest.raises(ArchiveTooLargeError):
        await analyze_zip(data, max_size=10)


@pytest.mark.asyncio
async def test_custom_candidates_are_used(korean_zip):
    report = await analyze_zip(korean_zip, candidates=("ascii",))
    assert report.encoding_issue_count == 0


@pytest.mark.asyncio
async def test_create_zip_from_files(unzip, events):
    result = await create_zip_from_files([("dir/.DS_Store", b""), ("dir/a.txt", b"a")])
    assert unzip(result.data) == {"dir/a.txt": b"a"}
    (packed,) = events()
    assert packed["action"] == "zip_packed"
    assert packed["settings_files"] == 1
    assert packed["kept_files"] == 1


def test_operation_reports_failures_and_reraises(events):
    with pytest.raises(MalformedArchiveError):
        with telemetry.operation("analyze", size=3):
            raise MalformedArchiveError()
    (failed,) = events()
    assert failed["action"] == "zip_failed"
    assert failed["op"] == "analyze"
    assert failed["size"] == 3
    assert failed["err"] == "Invalid ZIP file format"
