import pytest

from zipmend.errors import MalformedArchiveError
from zipmend.models import ArchiveEntry, DiagnosticIssue, DiagnosticReport, IssueKind, confidence_score
from zipmend.services.diagnostics import classify_entry, diagnose
from zipmend.services.processor import analyze_zip_sync
from zipmend.utils.mojibake import looks_damaged
from zipmend.utils.zipfix import DEFAULT_CANDIDATES


def _entries(*paths):
    return [ArchiveEntry(p, is_dir=p.endswith("/")) for p in paths]


def test_clutter_is_counted(plain_zip):
    data = plain_zip({"__MACOSX/._doc.txt": b"x", ".DS_Store": b"y", "readme.txt": b"z"})
    report = analyze_zip_sync(data)
    assert report.total_files == 3
    assert report.metadata_artifact_count == 1
    assert report.settings_file_count == 1
    assert report.hidden_file_count == 0
    assert report.encoding_issue_count == 0
    assert report.encoding_confidence == 40
    assert [i.kind for i in report.issues] == [IssueKind.METADATA_ARTIFACT, IssueKind.SETTINGS_FILE]


def test_damaged_korean_name_is_flagged(raw_zip):
    raw = b"\xc2\x85\xc2\x86.txt"
    report = analyze_zip_sync(raw_zip([(raw, b"data")]))
    assert report.encoding_issue_count == 1
    issue = report.issues[0]
    assert issue.kind == IssueKind.ENCODING
    assert issue.original_path == raw.decode("utf-8")
    assert issue.fixed_path == raw.decode("cp949")
    assert not looks_damaged(issue.fixed_path)
    assert report.encoding_confidence == 15


def test_legacy_korean_name_is_flagged(korean_zip, korean_name):
    report = analyze_zip_sync(korean_zip)
    assert report.encoding_issue_count == 1
    assert report.issues[0].fixed_path == korean_name


def test_extended_hangul_is_decoded_from_the_archive_bytes(raw_zip):
    name = "똠방각하.txt"
    report = analyze_zip_sync(raw_zip([(name.encode("cp949"), b"d")]))
    issue = report.issues[0]
    # the 0x8C lead byte shows up as a C1 control in the carried name
    assert looks_damaged(issue.original_path)
    assert issue.fixed_path == name


def _primary(enc):
    return (enc,) + tuple(c for c in DEFAULT_CANDIDATES if c != enc)


@pytest.mark.parametrize("name, enc", [
    ("안녕하세요.txt", "cp949"),
    ("똠방각하.txt", "cp949"),
    ("사진/똠.jpg", "cp949"),
    ("日本語.txt", "cp932"),
    ("メモ.txt", "cp932"),
    ("資料/ラーメン.txt", "cp932"),
    ("中文.txt", "gbk"),
    ("我們.txt", "gbk"),
    ("测试/文件.txt", "gbk"),
])
def test_legacy_names_are_recovered_exactly_or_left_alone(raw_zip, name, enc):
    # with the archive's codepage first, a rename is always the true name
    report = analyze_zip_sync(raw_zip([(name.encode(enc), b"x")]), candidates=_primary(enc))
    fixed = [i.fixed_path for i in report.issues if i.kind == IssueKind.ENCODING]
    assert fixed in ([], [name])


def test_legacy_names_are_recovered_with_default_candidates(raw_zip):
    names = ["안녕하세요.txt", "똠방각하.txt", "사진/똠.jpg"]
    report = analyze_zip_sync(raw_zip([(n.encode("cp949"), b"x") for n in names]))
    assert [i.fixed_path for i in report.issues] == names


def test_ascii_archive_is_clean(plain_zip):
    report = analyze_zip_sync(plain_zip({"notes.txt": b"hi"}))
    assert report.total_files == 1
    assert report.issues == ()
    assert report.encoding_confidence == 0


def test_utf8_flagged_names_are_not_flagged(plain_zip):
    report = analyze_zip_sync(plain_zip({"보고서.txt": b"1", "日本/表.txt": b"2"}))
    assert report.encoding_issue_count == 0


def test_directories_are_skipped():
    report = diagnose(_entries("docs/", "docs/a.txt"))
    assert report.total_files == 1


def test_metadata_artifact_is_not_also_hidden():
    report = diagnose(_entries("__MACOSX/._doc.txt"))
    assert report.metadata_artifact_count == 1
    assert report.hidden_file_count == 0
    assert len(report.issues) == 1


def test_metadata_artifact_skips_encoding_check():
    name = "__MACOSX/" + "안녕.txt".encode("cp949").decode("latin-1")
    verdict = classify_entry(name)
    assert verdict.tag == IssueKind.METADATA_ARTIFACT
    assert verdict.fixed_path is None


def test_hidden_file_still_gets_encoding_check():
    name = "." + "안녕.txt".encode("cp949").decode("latin-1")
    report = diagnose(_entries(name))
    assert [i.kind for i in report.issues] == [IssueKind.HIDDEN_FILE, IssueKind.ENCODING]
    assert report.issues[1].fixed_path == ".안녕.txt"


def test_issue_order_follows_archive_order():
    smuggled = "안녕.txt".encode("cp949").decode("latin-1")
    report = diagnose(_entries("b/.env", smuggled, "a/.DS_Store"))
    assert [i.original_path for i in report.issues] == ["b/.env", smuggled, "a/.DS_Store"]


def test_payloads_are_not_read_during_diagnosis():
    def boom():
        raise AssertionError("payload read")
    report = diagnose([ArchiveEntry("x.txt", loader=boom)])
    assert report.total_files == 1


def test_malformed_archive_raises():
    with pytest.raises(MalformedArchiveError):
        analyze_zip_sync(b"definitely not a zip")


# ── report / confidence ────────────────────────────────────────────────────────

def test_counters_derive_from_issues():
    issues = [
        DiagnosticIssue(IssueKind.ENCODING, "a", "d", fixed_path="b"),
        DiagnosticIssue(IssueKind.ENCODING, "c", "d", fixed_path="e"),
        DiagnosticIssue(IssueKind.HIDDEN_FILE, ".f", "d"),
    ]
    report = DiagnosticReport.from_issues(5, issues)
    assert report.encoding_issue_count == 2
    assert report.hidden_file_count == 1
    assert report.metadata_artifact_count == 0
    assert report.encoding_confidence == 30
    assert report.to_dict()["issues"][0]["fixedPath"] == "b"
    assert "fixedPath" not in report.to_dict()["issues"][2]


@pytest.mark.parametrize("meta, settings_files, enc, expected", [
    (0, 0, 0, 0),
    (1, 0, 0, 40),
    (0, 3, 0, 40),
    (0, 0, 1, 15),
    (0, 0, 4, 60),
    (0, 0, 10, 60),
    (2, 2, 10, 100),
    (1, 0, 2, 70),
])
def test_confidence_score(meta, settings_files, enc, expected):
    assert confidence_score(meta, settings_files, enc) == expected


def test_confidence_is_monotonic_and_bounded():
    for origin in (0, 1):
        previous = -1
        for enc in range(0, 12):
            score = confidence_score(origin, 0, enc)
            assert 0 <= score <= 100
            assert score >= previous
            previous = score
        assert confidence_score(1, 0, 0) >= confidence_score(0, 0, 0)
